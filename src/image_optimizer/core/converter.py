from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Protocol, Sequence

from image_optimizer.core.models import (
    BatchResult,
    FileFailure,
    FileStatRecord,
    TranscodeOptions,
    TranscodeResult,
)
from image_optimizer.core.transcoder import PillowTranscoder

logger = logging.getLogger(__name__)

OUTPUT_DIR_NAME = "optimized"

ProgressCallback = Callable[[int, int], None]
LogCallback = Callable[[str], None]


class Transcoder(Protocol):
    def transcode(self, source_path: Path, output_path: Path, options: TranscodeOptions) -> TranscodeResult:
        ...


def output_dir_for(source_path: Path) -> Path:
    return source_path.parent / OUTPUT_DIR_NAME


def expected_output_path(source_path: Path, options: TranscodeOptions) -> Path:
    return output_dir_for(source_path) / f"{source_path.stem}.{options.output_format.extension}"


class BatchConverter:
    def __init__(self, transcoder: Transcoder | None = None) -> None:
        self.transcoder = transcoder or PillowTranscoder()

    def run(
        self,
        files: Sequence[Path],
        options: TranscodeOptions,
        on_progress: ProgressCallback | None = None,
        on_log: LogCallback | None = None,
    ) -> BatchResult:
        result = BatchResult()
        total = len(files)

        for index, source_path in enumerate(files, start=1):
            if on_log:
                on_log(f"[{index}/{total}] Processing: {source_path.name}")

            try:
                output_path = expected_output_path(source_path, options)
                output_path.parent.mkdir(parents=True, exist_ok=True)

                transcoded = self.transcoder.transcode(source_path, output_path, options)
                result.outcomes.append(FileStatRecord.from_result(source_path, transcoded))

                if on_log:
                    on_log(f"Processed: {output_path.name}")
            except Exception as error:
                logger.debug(f"Failed to process {source_path}: {error}")
                result.outcomes.append(FileFailure(source_path=source_path, message=str(error)))
                if on_log:
                    on_log(f"Failed: {source_path.name} ({error})")
            finally:
                if on_progress:
                    on_progress(index, total)

        return result
