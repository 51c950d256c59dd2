"""Command-line interface for WordQuarry."""

from __future__ import annotations

import asyncio
import signal
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
import structlog
from rich.console import Console
from rich.table import Table

from wordquarry import __version__
from wordquarry.config import Config, ExtractionSettings, load_config
from wordquarry.exceptions import WordQuarryError
from wordquarry.extractor import WordExtractionJob
from wordquarry.extractor.models import ExtractionResult
from wordquarry.observability import configure_logging
from wordquarry.sinks import WordListFileSink
from wordquarry.sources import FileMessageSource

console = Console(stderr=True)
logger = structlog.get_logger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides the configuration file)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """WordQuarry - build word lists from HTML responses."""
    ctx.ensure_object(dict)
    try:
        loaded = load_config(Path(config) if config else None)
    except (WordQuarryError, FileNotFoundError) as e:
        raise click.ClickException(str(e)) from e

    if log_level:
        loaded = loaded.model_copy(
            update={"monitoring": loaded.monitoring.model_copy(update={"log_level": log_level})}
        )
    configure_logging(loaded.monitoring)
    ctx.obj["config"] = loaded


def _settings_overrides(
    lowercase: Optional[bool],
    ignore_scripts: Optional[bool],
    ignore_styles: Optional[bool],
    ignore_comments: Optional[bool],
    content_type_check: Optional[bool],
    pattern: Optional[str],
    encoding: Optional[str],
) -> Dict[str, Any]:
    """Map CLI flags onto ExtractionSettings fields, keeping only the ones actually given."""
    overrides = {
        "force_lowercase": lowercase,
        "ignore_script_tags": ignore_scripts,
        "ignore_style_tags": ignore_styles,
        "ignore_comments": ignore_comments,
        "check_content_type": content_type_check,
        "token_pattern": pattern,
        "encoding": encoding,
    }
    return {key: value for key, value in overrides.items() if value is not None}


def _print_summary(result: ExtractionResult, output: Path) -> None:
    table = Table(title="Word Extraction")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Documents processed", str(result.stats.processed))
    table.add_row("Documents skipped", str(result.stats.skipped))
    table.add_row("Documents failed", str(result.stats.failed))
    table.add_row("Token matches", str(result.stats.tokens))
    table.add_row("Distinct words", str(len(result)))
    console.print(table)
    console.print(f"[green]Word list written to {output}[/green]")


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Word list file (default: stdout)")
@click.option("--lowercase/--keep-case", default=None, help="Lowercase every extracted word")
@click.option("--ignore-scripts/--include-scripts", default=None, help="Track <script> content as ignored")
@click.option("--ignore-styles/--include-styles", default=None, help="Skip text inside <style> elements")
@click.option("--ignore-comments/--include-comments", default=None, help="Skip HTML comment text")
@click.option(
    "--content-type-check/--no-content-type-check",
    default=None,
    help="Skip responses whose Content-Type is an image, audio, video or binary type",
)
@click.option("--pattern", default=None, help="Regular expression defining a word")
@click.option("--encoding", default=None, help="Body text encoding (default: platform encoding)")
@click.pass_context
def extract(
    ctx: click.Context,
    paths: Tuple[Path, ...],
    output: Optional[Path],
    lowercase: Optional[bool],
    ignore_scripts: Optional[bool],
    ignore_styles: Optional[bool],
    ignore_comments: Optional[bool],
    content_type_check: Optional[bool],
    pattern: Optional[str],
    encoding: Optional[str],
) -> None:
    """Extract distinct words from HTTP responses or HTML files under PATHS."""
    config: Config = ctx.obj["config"]
    overrides = _settings_overrides(
        lowercase, ignore_scripts, ignore_styles, ignore_comments, content_type_check, pattern, encoding
    )
    try:
        settings = ExtractionSettings.model_validate({**config.extraction.model_dump(), **overrides})
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    sink = WordListFileSink(path=output) if output else WordListFileSink(stream=sys.stdout)

    def report(message: str) -> None:
        console.print(f"[yellow]{message}[/yellow]")

    job = WordExtractionJob(FileMessageSource(paths), sink, settings, on_error=report)

    async def run_job() -> Optional[ExtractionResult]:
        loop = asyncio.get_running_loop()
        job.start()
        try:
            loop.add_signal_handler(signal.SIGINT, job.cancel)
        except (NotImplementedError, RuntimeError):
            # add_signal_handler is unavailable on some platforms and off the main thread
            pass
        try:
            return await job.wait()
        finally:
            try:
                loop.remove_signal_handler(signal.SIGINT)
            except (NotImplementedError, RuntimeError):
                pass

    try:
        result = asyncio.run(run_job())
    except WordQuarryError as e:
        logger.error("Word extraction failed", error=str(e))
        raise click.ClickException(str(e)) from e

    if result is None:
        console.print("[yellow]Extraction cancelled, no words written[/yellow]")
        sys.exit(130)

    if output:
        _print_summary(result, output)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
