"""CLI entrypoint for browsing lessons and building the static site."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import LOG_LEVELS, SiteConfig
from .content_loader import ContentError
from .layout import lesson_renderable
from .service import LessonCatalog

logger = logging.getLogger(__name__)


def _parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(prog="pglearn", description="PostgreSQL and Prisma reference lessons")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, default=None, help="JSON site config file")
    parser.add_argument("--content-dir", type=Path, default=None, help="Load lessons from this directory")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, default=None, help="Override configured log level"
    )
    commands = parser.add_subparsers(dest="command")
    commands.add_parser("list", help="List lessons by phase")
    show = commands.add_parser("show", help="Render one lesson in the terminal")
    show.add_argument("lesson_id")
    commands.add_parser("check", help="Validate lesson content")
    build = commands.add_parser("build", help="Write the static HTML site")
    build.add_argument("--output", "-o", type=Path, default=None, help="Output directory")
    return parser


def _configure_logging(level: str) -> None:
    """Send package logs to stderr at `level`."""
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("pglearn").setLevel(level)


def _catalog(content_dir: Path | None) -> LessonCatalog:
    """Create the lesson catalog."""
    return LessonCatalog(content_dir=content_dir)


def run(argv: list[str] | None = None, console: Console | None = None) -> int:
    """Run the CLI application."""
    console = console or Console()
    args = _parser().parse_args(argv)
    config = SiteConfig.load(args.config)
    _configure_logging(args.log_level or config.log_level)
    command = args.command or "list"
    logger.debug("Running %s with pglearn %s", command, __version__)

    try:
        catalog = _catalog(args.content_dir)
    except ContentError as exc:
        console.print(f"[red]Invalid content:[/red] {escape(str(exc))}")
        return 1

    if command == "list":
        _list_flow(catalog, console)
    elif command == "show":
        return _show_flow(catalog, args.lesson_id, config, console)
    elif command == "check":
        _check_flow(catalog, console)
    elif command == "build":
        return _build_flow(catalog, args.output or Path(config.output_dir), config, console)
    return 0


def _list_flow(catalog: LessonCatalog, console: Console) -> None:
    """Print lessons grouped by phase."""
    table = Table(title=catalog.curriculum.site_title)
    table.add_column("Phase", style="cyan")
    table.add_column("Lesson ID")
    table.add_column("Title", style="bold")
    table.add_column("Sections", justify="right")
    table.add_column("Code", justify="right")
    table.add_column("Languages", style="dim")
    for reference in catalog.list_lesson_references():
        table.add_row(
            escape(reference.phase_title or "-"),
            escape(reference.lesson_id),
            escape(reference.title),
            str(reference.section_count),
            str(reference.code_block_count),
            ", ".join(reference.languages) or "none",
        )
    console.print(table)


def _show_flow(catalog: LessonCatalog, lesson_id: str, config: SiteConfig, console: Console) -> int:
    """Render one lesson in the terminal."""
    try:
        lesson = catalog.get_lesson(lesson_id)
    except KeyError:
        console.print(f"[red]Unknown lesson:[/red] {escape(lesson_id)}")
        console.print("[dim]Run 'pglearn list' to see lesson ids.[/dim]")
        return 1
    console.print(lesson_renderable(lesson, config.theme))
    return 0


def _check_flow(catalog: LessonCatalog, console: Console) -> None:
    """Print a content summary after successful validation."""
    references = catalog.list_lesson_references()
    code_blocks = sum(reference.code_block_count for reference in references)
    unlisted = [reference.lesson_id for reference in references if not reference.phase_title]
    console.print("[green]Content OK[/green]")
    console.print(f"- phases: {len(catalog.list_phases())}")
    console.print(f"- lessons: {len(references)}")
    console.print(f"- code blocks: {code_blocks}")
    if unlisted:
        console.print(f"[yellow]- not in navigation:[/yellow] {escape(', '.join(unlisted))}")


def _build_flow(catalog: LessonCatalog, output_dir: Path, config: SiteConfig, console: Console) -> int:
    """Write the static site and print a summary."""
    try:
        summary = catalog.build_site(output_dir, config)
    except OSError as exc:
        console.print(f"[red]Build failed:[/red] {escape(str(exc))}")
        return 1
    console.print(f"Built site into {escape(str(summary.output_dir))}")
    console.print(f"- pages: {summary.pages_written}")
    console.print(f"- lessons: {summary.lessons_written}")
    console.print(f"- code blocks: {summary.code_blocks_rendered}")
    return 0


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
