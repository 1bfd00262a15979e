from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from pathlib import Path


class OutputFormat(str, Enum):
    WEBP = "webp"
    PNG = "png"

    @property
    def extension(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class CropBox:
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class TranscodeOptions:
    output_format: OutputFormat = OutputFormat.WEBP
    quality: int = 80
    crop: CropBox | None = None


@dataclass(frozen=True, slots=True)
class ImageMeta:
    byte_size: int
    width: int
    height: int
    format: str

    @property
    def dimensions(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True, slots=True)
class TranscodeResult:
    output_path: Path
    original: ImageMeta
    optimized: ImageMeta


def savings_percent(original_bytes: int, optimized_bytes: int) -> float:
    """Share of the original size removed, rounded half-up to 2 decimals.

    A zero-byte original has no meaningful ratio and reports 0.0.
    """
    if original_bytes <= 0:
        return 0.0
    ratio = Decimal(original_bytes - optimized_bytes) / Decimal(original_bytes) * 100
    return float(ratio.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True, slots=True)
class FileStatRecord:
    source_path: Path
    output_path: Path
    original_size: int
    optimized_size: int
    original_format: str
    optimized_format: str
    original_dimensions: str
    optimized_dimensions: str
    savings_percent: float

    @classmethod
    def from_result(cls, source_path: Path, result: TranscodeResult) -> FileStatRecord:
        return cls(
            source_path=source_path,
            output_path=result.output_path,
            original_size=result.original.byte_size,
            optimized_size=result.optimized.byte_size,
            original_format=result.original.format,
            optimized_format=result.optimized.format,
            original_dimensions=result.original.dimensions,
            optimized_dimensions=result.optimized.dimensions,
            savings_percent=savings_percent(result.original.byte_size, result.optimized.byte_size),
        )

    @property
    def saved_bytes(self) -> int:
        return self.original_size - self.optimized_size


@dataclass(frozen=True, slots=True)
class FileFailure:
    source_path: Path
    message: str


FileOutcome = FileStatRecord | FileFailure


@dataclass(slots=True)
class BatchResult:
    outcomes: list[FileOutcome] = field(default_factory=list)

    @property
    def records(self) -> list[FileStatRecord]:
        return [outcome for outcome in self.outcomes if isinstance(outcome, FileStatRecord)]

    @property
    def failures(self) -> list[FileFailure]:
        return [outcome for outcome in self.outcomes if isinstance(outcome, FileFailure)]

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return len(self.records)

    @property
    def failed(self) -> int:
        return len(self.failures)


@dataclass(frozen=True, slots=True)
class RunTotals:
    original_bytes: int = 0
    saved_bytes: int = 0

    def add(self, record: FileStatRecord) -> RunTotals:
        return RunTotals(
            original_bytes=self.original_bytes + record.original_size,
            saved_bytes=self.saved_bytes + record.saved_bytes,
        )

    @property
    def optimized_bytes(self) -> int:
        return self.original_bytes - self.saved_bytes

    @property
    def savings_percent(self) -> float | None:
        if self.original_bytes <= 0:
            return None
        return savings_percent(self.original_bytes, self.optimized_bytes)
