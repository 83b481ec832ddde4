"""Click CLI — loads config, replays session scripts through one engine, prints replies."""

import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from config.config_loader import AppConfig, load_config
from src.engine import PerspectiveEngine
from src.errors import EngineError
from src.output import print_error, print_reply, print_summary, save_transcript
from src.script import ToolCall, load_script
from src.tools import ToolDispatcher, list_tools

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _load_config_or_exit(settings: str | None) -> AppConfig:
    try:
        return load_config(Path(settings) if settings else None)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)


def _replay(dispatcher: ToolDispatcher, calls: list[ToolCall], stop_on_error: bool) -> int:
    """Run calls in order, printing each reply. Returns the number of failures."""
    failures = 0
    for call in calls:
        try:
            reply = dispatcher.call(call.tool, call.arguments)
        except EngineError as exc:
            failures += 1
            logger.debug("Call %s failed: %s", call.tool, exc)
            print_error(call.tool, str(exc))
            if stop_on_error:
                break
            continue
        print_reply(call.tool, reply)
    return failures


@click.group()
@click.option("--settings", default=None, type=click.Path(), help="Settings file (default: config/settings.yaml)")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.pass_context
def main(ctx: click.Context, settings: str | None, verbose: bool) -> None:
    """Perspective Council -- multi-perspective analysis and bounded debates.

    \b
    Examples:
      python -m src.cli tools
      python -m src.cli run session.yaml
      python -m src.cli run session.yaml --no-save --stop-on-error
    """
    # Keep Unicode statements from crashing the Windows console render path.
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")

    load_dotenv()
    _setup_logging(verbose)
    ctx.obj = _load_config_or_exit(settings)


@main.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False))
@click.option("--save/--no-save", default=True, help="Save a markdown transcript (default: save)")
@click.option("--output", "output_path", default=None, help="Output directory (default: from config)")
@click.option("--stop-on-error", is_flag=True, help="Abort the replay at the first failed call")
@click.pass_obj
def run(config: AppConfig, script: str, save: bool, output_path: str | None, stop_on_error: bool) -> None:
    """Replay a YAML session script of tool calls."""
    try:
        calls = load_script(Path(script))
    except EngineError as exc:
        console.print(f"[bold red]Script error:[/bold red] {exc}")
        sys.exit(1)

    engine = PerspectiveEngine(config.debate)
    dispatcher = ToolDispatcher(engine, preview_chars=config.output.preview_chars)

    console.print(f"\n[bold cyan]Perspective Council[/bold cyan] — {len(calls)} calls from {script}\n")
    failures = _replay(dispatcher, calls, stop_on_error)

    debate = engine.debate_snapshot()
    if debate.history and not any(c.tool == "debate_summary" for c in calls):
        print_summary(engine.summarize(), config.output.preview_chars)

    if save:
        output_dir = Path(output_path) if output_path else config.output.dir
        saved = save_transcript(engine, output_dir, slug_override=Path(script).stem)
        console.print(f"\n[dim]Saved to: {saved}[/dim]")

    if failures:
        console.print(f"\n[yellow]{failures} call(s) failed.[/yellow]")
        sys.exit(1)


@main.command()
def tools() -> None:
    """List the available tool actions."""
    table = Table(title="Tool actions")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    for name, description in list_tools():
        table.add_row(name, description)
    console.print(table)


if __name__ == "__main__":
    main()
