"""Session scripts: YAML files listing tool calls to replay against one engine."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from src.errors import InvalidInput
from src.tools import TOOL_SPECS

logger = logging.getLogger(__name__)


@dataclass
class ToolCall:
    tool: str
    arguments: dict[str, Any] = field(default_factory=dict)


def parse_script(raw: Any) -> list[ToolCall]:
    """Turn a loaded YAML document into an ordered list of ToolCalls.

    The optional ``perspectives`` and ``debate`` shorthand keys become the
    first set_perspectives / start_debate calls, ahead of ``calls``.
    """
    if not isinstance(raw, dict):
        raise InvalidInput("Session script must be a mapping")

    calls: list[ToolCall] = []
    if "perspectives" in raw:
        calls.append(ToolCall("set_perspectives", {"perspectives": raw["perspectives"]}))
    if "debate" in raw:
        debate = raw["debate"]
        if not isinstance(debate, dict):
            raise InvalidInput("'debate' must be a mapping with topic and participants")
        calls.append(ToolCall("start_debate", dict(debate)))

    entries = raw.get("calls") or []
    if not isinstance(entries, list):
        raise InvalidInput("'calls' must be a list of tool calls")
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict) or not isinstance(entry.get("tool"), str):
            raise InvalidInput(f"Call #{index} must be a mapping with a 'tool' name")
        if entry["tool"] not in TOOL_SPECS:
            raise InvalidInput(f"Call #{index}: unknown tool '{entry['tool']}'")
        arguments = entry.get("arguments") or {}
        if not isinstance(arguments, dict):
            raise InvalidInput(f"Call #{index}: 'arguments' must be a mapping")
        calls.append(ToolCall(entry["tool"], arguments))

    if not calls:
        raise InvalidInput("Session script contains no calls")
    return calls


def load_script(path: Path) -> list[ToolCall]:
    """Read and parse a session script.

    Raises:
        FileNotFoundError: script file missing.
        InvalidInput: not valid YAML or not a valid script.
    """
    if not path.exists():
        raise FileNotFoundError(f"Session script not found: {path}")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise InvalidInput(f"Session script is not valid YAML: {exc}") from exc
    calls = parse_script(raw)
    logger.info("Loaded %d calls from %s", len(calls), path)
    return calls
