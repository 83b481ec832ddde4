"""Named tool actions: normalize loose arguments, call the engine, reply with text."""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from src.engine import PerspectiveEngine
from src.errors import InvalidInput
from src.output import format_summary_markdown

logger = logging.getLogger(__name__)

TOOL_SPECS: dict[str, str] = {
    "set_perspectives": "Define the list of professional roles/personas that will analyze the topic",
    "perspective": "Perform analysis from the current perspective, building on previous insights",
    "start_debate": "Start a debate between selected personas on a specific topic",
    "debate_turn": "Submit a statement in the ongoing debate",
    "inject_constraint": "Add a new constraint or consideration to the ongoing debate",
    "debate_summary": "Generate a summary of the debate including key points from each participant",
}

_RESPONSE_ROUND_NOTE = "Participants will now respond to conflicting viewpoints."
_FINAL_ROUND_NOTE = "Final round: Synthesis and compromise proposals."


class UnknownToolError(InvalidInput):
    """Raised when an action name is not one of TOOL_SPECS."""

    def __init__(self, name: str) -> None:
        self.tool_name = name
        super().__init__(f"Unknown tool: {name}")


def list_tools() -> list[tuple[str, str]]:
    return list(TOOL_SPECS.items())


def _as_bool(value: Any, default: bool = False) -> bool:
    """Accept real booleans and the strings "true"/"false"."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise InvalidInput(f"Expected a boolean, got {value!r}")


def _require_str(arguments: Mapping[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str):
        raise InvalidInput(f"'{key}' must be a string")
    return value


class ToolDispatcher:
    """Routes named actions to one PerspectiveEngine."""

    def __init__(self, engine: PerspectiveEngine, preview_chars: int = 150) -> None:
        self.engine = engine
        self.preview_chars = preview_chars
        self._handlers: dict[str, Callable[[Mapping[str, Any]], str]] = {
            "set_perspectives": self._set_perspectives,
            "perspective": self._perspective,
            "start_debate": self._start_debate,
            "debate_turn": self._debate_turn,
            "inject_constraint": self._inject_constraint,
            "debate_summary": self._debate_summary,
        }

    def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> str:
        """Run one action and return its text reply.

        Raises:
            UnknownToolError: ``name`` is not a known action.
            EngineError: the engine rejected the call.
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownToolError(name)
        arguments = arguments or {}
        if not isinstance(arguments, Mapping):
            raise InvalidInput(f"Arguments for {name} must be an object")
        logger.debug("Calling %s with %s", name, sorted(arguments))
        return handler(arguments)

    def _set_perspectives(self, arguments: Mapping[str, Any]) -> str:
        perspectives = self.engine.define_perspectives(arguments.get("perspectives"))
        return f"Successfully set {len(perspectives)} perspectives. Starting with: {perspectives[0].role}"

    def _perspective(self, arguments: Mapping[str, Any]) -> str:
        analysis = _require_str(arguments, "analysis")
        # nextThoughtNeeded is an older alias
        raw_flag = arguments.get("nextPerspectiveNeeded")
        if raw_flag is None:
            raw_flag = arguments.get("nextThoughtNeeded")
        advance = _as_bool(raw_flag)

        result = self.engine.record_analysis(analysis, advance)
        lines = [
            f"Analysis recorded for {result.role}.",
            f"Progress: {result.completed}/{result.total} perspectives completed.",
            "",
        ]
        nxt = result.next_perspective
        if result.has_next and nxt is not None:
            lines += [
                f"Next perspective: {nxt.role}",
                f"Focus areas: {', '.join(nxt.focus_areas)}",
                f"Personality: {nxt.personality}",
            ]
        else:
            lines.append(f"All perspectives completed. Total analyses: {result.completed}")
        return "\n".join(lines)

    def _start_debate(self, arguments: Mapping[str, Any]) -> str:
        topic = _require_str(arguments, "topic")
        participants = arguments.get("participants")
        if not isinstance(participants, list) or not all(isinstance(p, str) for p in participants):
            raise InvalidInput("'participants' must be an array of persona roles")

        speaker = self.engine.start_debate(topic, participants)
        numbered = "\n".join(f"{i}. {p}" for i, p in enumerate(participants, start=1))
        return (
            f'Debate started on topic: "{topic}"\n\n'
            f"Participants:\n{numbered}\n\n"
            f"Round 1: Initial positions\n"
            f"Current speaker: {speaker.role}"
        )

    def _debate_turn(self, arguments: Mapping[str, Any]) -> str:
        statement = _require_str(arguments, "statement")
        advance = _as_bool(arguments.get("nextTurnNeeded"))

        result = self.engine.record_turn(statement, advance)
        lines = [f"Statement recorded for {result.persona}."]

        if result.round_complete and result.more_turns_needed:
            lines += ["", f"Round {result.round - 1} complete. Starting Round {result.round}."]
            if result.round == self.engine.debate.rules.max_rounds:
                lines.append(_FINAL_ROUND_NOTE)
            elif result.round == 2:
                lines.append(_RESPONSE_ROUND_NOTE)

        if result.more_turns_needed:
            speaker = self.engine.debate.current_speaker()
            if speaker is not None:
                line = f"Next speaker: {speaker.role}"
                target = self.engine.debate.next_response_target()
                if target:
                    line += f" (responding to {target})"
                lines += ["", line]
        else:
            total = len(self.engine.debate_snapshot().history)
            lines += ["", f"Debate complete after {total} turns."]
        return "\n".join(lines)

    def _inject_constraint(self, arguments: Mapping[str, Any]) -> str:
        constraint = _require_str(arguments, "constraint")
        total = self.engine.add_constraint(constraint)
        return (
            f'New constraint added: "{constraint}"\n\n'
            f"Total constraints: {total}\n"
            "Current speaker should consider this in their response."
        )

    def _debate_summary(self, arguments: Mapping[str, Any]) -> str:
        return format_summary_markdown(self.engine.summarize(), self.preview_chars)
