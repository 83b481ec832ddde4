"""Rich console output and markdown transcript save for perspective sessions."""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule

from src.models import DebateSummary, DebateTurn

if TYPE_CHECKING:
    from src.engine import PerspectiveEngine

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def _slug(text: str, max_len: int = 40) -> str:
    """Convert text to a filename-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug[:max_len]


def _preview(text: str, max_chars: int) -> str:
    """First ``max_chars`` characters, with an ellipsis when cut."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."


def format_summary_markdown(summary: DebateSummary, preview_chars: int = 150) -> str:
    """Render a DebateSummary as markdown, truncating each statement."""
    lines: list[str] = [
        "## Debate Summary",
        "",
        f"**Topic:** {summary.topic}",
        "",
        f"**Participants:** {', '.join(summary.participants)}",
        "",
        f"**Duration:** {summary.rounds} rounds, {summary.total_turns} total statements",
        "",
    ]

    if summary.constraints:
        lines.append("**Constraints Added:**")
        lines += [f"{i}. {c}" for i, c in enumerate(summary.constraints, start=1)]
        lines.append("")

    lines.append("**Key Points by Participant:**")
    for participant, points in summary.key_points.items():
        lines += ["", f"### {participant}"]
        # Numbered by statement, which matches the round only when every turn advanced
        lines += [f"Round {i}: {_preview(point, preview_chars)}" for i, point in enumerate(points, start=1)]
    return "\n".join(lines) + "\n"


def print_reply(tool_name: str, text: str) -> None:
    """Print one tool reply to the console."""
    console.print(Panel(text, title=f"[bold]{tool_name}[/bold]", border_style="dim"))


def print_error(tool_name: str, message: str) -> None:
    console.print(Panel(message, title=f"[bold red]{tool_name} failed[/bold red]", border_style="red"))


def print_summary(summary: DebateSummary, preview_chars: int = 150) -> None:
    """Print the debate summary using Rich markdown."""
    console.print(Rule("[bold green]Debate Summary[/bold green]"))
    console.print(Markdown(format_summary_markdown(summary, preview_chars)))


def _format_turn(turn: DebateTurn) -> str:
    header = f"**{turn.persona}** (round {turn.round}"
    if turn.responding_to:
        header += f", responding to {turn.responding_to}"
    header += f", {turn.timestamp.astimezone().strftime('%H:%M:%S')})"
    return f"{header}\n\n{turn.statement}"


def save_transcript(
    engine: "PerspectiveEngine",
    output_dir: Path,
    slug_override: str | None = None,
) -> Path:
    """Save perspectives, analyses and the debate transcript as a markdown file.

    Args:
        engine: The engine whose current state is written out.
        output_dir: Directory to save the file in.
        slug_override: If provided, use this as the filename stem instead of
            deriving one from the debate topic.

    Returns:
        Path to the saved file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    perspectives = engine.tracker.perspectives
    analyses = engine.perspective_snapshot().analyses
    debate = engine.debate_snapshot()

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    title = debate.topic or (perspectives[0].role if perspectives else "session")
    slug = slug_override if slug_override is not None else _slug(title) or "session"
    filepath = output_dir / f"{timestamp}_{slug}.md"

    lines: list[str] = [
        f"# Perspective Council: {title[:80]}",
        "",
        f"**Date:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Perspectives:** {', '.join(p.role for p in perspectives) or 'none'}",
        "",
        "---",
        "",
    ]

    if analyses:
        lines += ["## Perspective Analyses", ""]
        focus_by_role = {p.role: p.focus_areas for p in perspectives}
        for role, analysis in analyses.items():
            lines.append(f"### {role}")
            if focus_by_role.get(role):
                lines.append(f"*Focus: {', '.join(focus_by_role[role])}*")
            lines += ["", analysis, ""]

    if debate.history:
        lines += [f"## Debate: {debate.topic}", ""]
        for rnd in sorted({t.round for t in debate.history}):
            lines += [f"### Round {rnd}", ""]
            for turn in (t for t in debate.history if t.round == rnd):
                lines += [_format_turn(turn), ""]
        if debate.constraints:
            lines += ["### Constraints", ""]
            lines += [f"- {c}" for c in debate.constraints]
            lines.append("")
        lines.append(format_summary_markdown(engine.summarize(), preview_chars=10_000))

    filepath.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Transcript saved to: %s", filepath)
    return filepath
