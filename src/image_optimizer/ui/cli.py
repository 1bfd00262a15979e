from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from image_optimizer.core.converter import BatchConverter
from image_optimizer.core.downloader import DEFAULT_TIMEOUT, download_image
from image_optimizer.core.errors import ImageOptimizerError
from image_optimizer.core.models import OutputFormat, TranscodeOptions
from image_optimizer.core.report import build_report
from image_optimizer.core.resolver import PathResolver, split_tokens
from image_optimizer.core.validation import (
    build_options,
    detect_duplicate_outputs,
    detect_output_conflicts,
    parse_yes_no,
)

logger = logging.getLogger(__name__)

console = Console()
app = typer.Typer(add_completion=False, help="Batch convert images to WebP or PNG and report the savings.")


@dataclass(frozen=True, slots=True)
class RunSettings:
    download_dir: Path
    timeout: float = DEFAULT_TIMEOUT


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def _ask(text: str) -> str:
    return typer.prompt(text, default="", show_default=False)


def prompt_inputs() -> list[str]:
    return split_tokens(_ask("1. Enter paths to images/image folders (or URLs) separated by space"))


def prompt_options() -> TranscodeOptions:
    console.print("\n2. Choose Image Format:")
    for index, output_format in enumerate(OutputFormat, start=1):
        console.print(f"{index}. {output_format.value}")
    format_choice = _ask("Enter your choice (1 or 2, default webp)")

    quality = _ask("\n3. Enter quality (0-100, default is 80)")

    crop = None
    if parse_yes_no(_ask("\n4. Do you want to crop the images? (y/n)")):
        crop = _ask('Enter width and height separated by space (e.g. "800 600")')

    return build_options(format_choice, quality, crop)


def ask_download_name(url_name: str) -> str | None:
    answer = _ask(f"Enter output file name for {url_name} (leave blank to use URL file name)")
    return answer.strip() or None


def resolve_inputs(tokens: list[str], resolver: PathResolver) -> list[Path]:
    files: list[Path] = []
    for token in tokens:
        try:
            files.extend(resolver.resolve(token))
        except Exception as error:
            logger.error(f"Error with path {token}: {error}")
    return files


def run(settings: RunSettings) -> int:
    try:
        tokens = prompt_inputs()
        options = prompt_options()
    except ImageOptimizerError as error:
        console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
        return 1

    resolver = PathResolver(
        download_dir=settings.download_dir,
        downloader=partial(download_image, timeout=settings.timeout),
        ask_file_name=ask_download_name,
    )
    files = resolve_inputs(tokens, resolver)

    for path in detect_output_conflicts(files, options):
        logger.warning(f"Existing output will be overwritten: {path}")

    for output, sources in detect_duplicate_outputs(files, options).items():
        names = ", ".join(source.name for source in sources)
        logger.warning(f"{names} all write {output}; only the last one is kept")

    converter = BatchConverter()
    with console.status("Starting batch processing...") as status:

        def on_progress(current: int, total: int) -> None:
            status.update(f"Processing images... {current}/{total}")

        on_log = partial(console.print, markup=False, highlight=False, soft_wrap=True)
        result = converter.run(files, options, on_progress=on_progress, on_log=on_log)

    console.print()
    for line in build_report(result):
        console.print(line, markup=False, highlight=False, soft_wrap=True)

    console.print(
        f"\n[green]All operations completed.[/green] "
        f"{result.succeeded} succeeded, {result.failed} failed."
    )
    return 0


@app.command()
def main(
    download_dir: Path = typer.Option(
        Path("downloads"),
        "--download-dir",
        envvar="IMAGE_OPTIMIZER_DOWNLOAD_DIR",
        help="Directory where images fetched from URLs are saved.",
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT,
        "--timeout",
        envvar="IMAGE_OPTIMIZER_TIMEOUT",
        help="Download timeout in seconds.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output."),
) -> None:
    """Interactively convert images and print before/after statistics."""
    configure_logging(verbose)
    exit_code = run(RunSettings(download_dir=download_dir, timeout=timeout))
    if exit_code:
        raise typer.Exit(exit_code)
