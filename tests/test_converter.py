"""Tests for the batch runner."""

import logging
from pathlib import Path

from image_optimizer.core.converter import OUTPUT_DIR_NAME, BatchConverter, expected_output_path
from image_optimizer.core.errors import TranscodeError
from image_optimizer.core.models import (
    FileFailure,
    FileStatRecord,
    ImageMeta,
    OutputFormat,
    TranscodeOptions,
    TranscodeResult,
)


class FakeTranscoder:
    """Returns canned sizes and fails for the configured file names."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.calls: list[tuple[Path, Path]] = []

    def transcode(self, source_path: Path, output_path: Path, options: TranscodeOptions) -> TranscodeResult:
        self.calls.append((source_path, output_path))
        if source_path.name in self.failing:
            raise TranscodeError(source_path, ValueError("corrupt data"))
        return TranscodeResult(
            output_path=output_path,
            original=ImageMeta(byte_size=1000, width=10, height=10, format="jpeg"),
            optimized=ImageMeta(byte_size=250, width=10, height=10, format=options.output_format.value),
        )


def _sources(tmp_path: Path, count: int) -> list[Path]:
    paths = []
    for index in range(count):
        path = tmp_path / f"img{index}.jpg"
        path.write_bytes(b"x")
        paths.append(path)
    return paths


def test_expected_output_path(tmp_path: Path) -> None:
    source = tmp_path / "holiday.photo.jpg"
    options = TranscodeOptions(output_format=OutputFormat.PNG)
    assert expected_output_path(source, options) == tmp_path / OUTPUT_DIR_NAME / "holiday.photo.png"


def test_run_creates_output_dir_and_records(tmp_path: Path) -> None:
    sources = _sources(tmp_path, 2)
    transcoder = FakeTranscoder()

    result = BatchConverter(transcoder).run(sources, TranscodeOptions())

    assert (tmp_path / "optimized").is_dir()
    assert [record.source_path for record in result.records] == sources
    assert result.records[0].output_path == tmp_path / "optimized" / "img0.webp"
    assert result.records[0].savings_percent == 75.0
    assert result.failed == 0


def test_one_failure_does_not_abort_batch(tmp_path: Path) -> None:
    sources = _sources(tmp_path, 5)
    transcoder = FakeTranscoder(failing={"img2.jpg"})

    result = BatchConverter(transcoder).run(sources, TranscodeOptions())

    assert len(transcoder.calls) == 5
    assert len(result.records) == 4
    assert [record.source_path.name for record in result.records] == ["img0.jpg", "img1.jpg", "img3.jpg", "img4.jpg"]
    assert len(result.failures) == 1
    assert result.failures[0].source_path == sources[2]
    assert "corrupt data" in result.failures[0].message


def test_outcomes_preserve_input_order(tmp_path: Path) -> None:
    sources = _sources(tmp_path, 3)
    result = BatchConverter(FakeTranscoder(failing={"img0.jpg"})).run(sources, TranscodeOptions())

    kinds = [type(outcome) for outcome in result.outcomes]
    assert kinds == [FileFailure, FileStatRecord, FileStatRecord]
    assert result.total == 3


def test_callbacks_report_each_file(tmp_path: Path) -> None:
    sources = _sources(tmp_path, 3)
    progress: list[tuple[int, int]] = []
    messages: list[str] = []

    BatchConverter(FakeTranscoder(failing={"img1.jpg"})).run(
        sources,
        TranscodeOptions(),
        on_progress=lambda current, total: progress.append((current, total)),
        on_log=messages.append,
    )

    assert progress == [(1, 3), (2, 3), (3, 3)]
    assert any(message.startswith("Failed: img1.jpg") for message in messages)
    assert "Processed: img0.webp" in messages


def test_run_with_real_images(make_image, tmp_path: Path) -> None:
    sources = [make_image("one.jpg"), make_image("two.png")]

    result = BatchConverter().run(sources, TranscodeOptions(OutputFormat.WEBP, 50))

    assert result.succeeded == 2
    assert (tmp_path / "optimized" / "one.webp").exists()
    assert (tmp_path / "optimized" / "two.webp").exists()


def test_failure_is_reported_once_through_on_log(tmp_path: Path, caplog) -> None:
    sources = _sources(tmp_path, 2)
    messages: list[str] = []

    with caplog.at_level(logging.INFO, logger="image_optimizer.core.converter"):
        BatchConverter(FakeTranscoder(failing={"img0.jpg"})).run(sources, TranscodeOptions(), on_log=messages.append)

    failed = [message for message in messages if message.startswith("Failed:")]
    assert failed == ["Failed: img0.jpg (Error processing img0.jpg: corrupt data)"]
    assert caplog.records == []
