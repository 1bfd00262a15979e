from __future__ import annotations

from functools import reduce
from pathlib import Path
from typing import Iterable, Sequence

from image_optimizer.core.models import BatchResult, FileFailure, FileStatRecord, RunTotals

KILOBYTE = 1024
MEGABYTE = 1024 * 1024

NO_IMAGES_MESSAGE = "No images were processed successfully."


def format_size(byte_count: int) -> str:
    """Human readable size using 1024-byte units and strict boundaries.

    Below 1024 the exact byte count is shown, below 1 MiB kilobytes, otherwise
    megabytes, both with 2 decimals. Negative counts (files that grew) keep
    the same boundaries on their magnitude.
    """
    if byte_count < 0:
        return f"-{format_size(-byte_count)}"
    if byte_count < KILOBYTE:
        return f"{byte_count} B"
    if byte_count < MEGABYTE:
        return f"{byte_count / KILOBYTE:.2f} KB"
    return f"{byte_count / MEGABYTE:.2f} MB"


def accumulate(records: Iterable[FileStatRecord], start: RunTotals | None = None) -> RunTotals:
    return reduce(lambda totals, record: totals.add(record), records, start or RunTotals())


def render_file_lines(records: Sequence[FileStatRecord]) -> list[str]:
    lines: list[str] = []
    for index, record in enumerate(records, start=1):
        lines.append(f"{index}. {record.source_path.name}")
        lines.append(
            f"   Before: {format_size(record.original_size)} "
            f"({record.original_format.upper()} - {record.original_dimensions})"
        )
        lines.append(
            f"   After:  {format_size(record.optimized_size)} "
            f"({record.optimized_format.upper()} - {record.optimized_dimensions})"
        )
        lines.append(f"   Reduced: {record.savings_percent:.2f}%")
        lines.append("")
    return lines


def render_summary(totals: RunTotals, count: int) -> list[str]:
    if count == 0:
        return [NO_IMAGES_MESSAGE]

    percent = totals.savings_percent
    percent_text = f"{percent:.2f}%" if percent is not None else "n/a"
    return [
        "Total Statistics:",
        f"   Total Size Before: {format_size(totals.original_bytes)}",
        f"   Total Size After:  {format_size(totals.optimized_bytes)}",
        f"   Total Space Saved: {format_size(totals.saved_bytes)} ({percent_text})",
    ]


def render_failures(failures: Sequence[FileFailure]) -> list[str]:
    if not failures:
        return []
    lines = [f"Skipped {len(failures)} file(s):"]
    lines.extend(f"   {failure.source_path}: {failure.message}" for failure in failures)
    return lines


def output_directories(records: Iterable[FileStatRecord]) -> list[Path]:
    seen: dict[Path, None] = {}
    for record in records:
        seen.setdefault(record.output_path.parent, None)
    return list(seen)


def build_report(result: BatchResult) -> list[str]:
    records = result.records
    lines = ["Optimization Results:", ""]
    lines.extend(render_file_lines(records))
    lines.extend(render_summary(accumulate(records), len(records)))

    failure_lines = render_failures(result.failures)
    if failure_lines:
        lines.append("")
        lines.extend(failure_lines)

    directories = output_directories(records)
    if directories:
        lines.append("")
        lines.extend(f"Output Directory: {directory}" for directory in directories)
    return lines
