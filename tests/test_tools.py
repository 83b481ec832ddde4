"""Tests for src/tools.py argument normalization and replies."""

import pytest

from config.config_loader import DebateRules
from src.engine import PerspectiveEngine
from src.errors import InvalidInput, PreconditionFailed
from src.tools import TOOL_SPECS, ToolDispatcher, UnknownToolError, _as_bool, list_tools


@pytest.fixture
def ready(dispatcher, sample_perspectives) -> ToolDispatcher:
    dispatcher.call("set_perspectives", {"perspectives": sample_perspectives[:3]})
    return dispatcher


@pytest.fixture
def debating(ready) -> ToolDispatcher:
    ready.call("start_debate", {"topic": "X", "participants": ["Economist", "Ethicist"]})
    return ready


def test_list_tools_names():
    assert [name for name, _ in list_tools()] == list(TOOL_SPECS)
    assert len(TOOL_SPECS) == 6


@pytest.mark.parametrize(
    "value,expected",
    [(True, True), (False, False), ("true", True), ("FALSE", False), (" True ", True), (None, False)],
)
def test_as_bool(value, expected):
    assert _as_bool(value) is expected


@pytest.mark.parametrize("value", ["yes", 1, 0.0, []])
def test_as_bool_rejects_other_values(value):
    with pytest.raises(InvalidInput):
        _as_bool(value)


def test_unknown_tool(dispatcher):
    with pytest.raises(UnknownToolError, match="Unknown tool: teleport"):
        dispatcher.call("teleport", {})


def test_arguments_must_be_mapping(dispatcher):
    with pytest.raises(InvalidInput):
        dispatcher.call("perspective", ["analysis"])  # type: ignore[arg-type]


def test_set_perspectives_reply(dispatcher, sample_perspectives):
    reply = dispatcher.call("set_perspectives", {"perspectives": sample_perspectives[:3]})
    assert reply == "Successfully set 3 perspectives. Starting with: Economist"


@pytest.mark.parametrize("arguments", [{}, {"perspectives": []}, {"perspectives": "Economist"}])
def test_set_perspectives_invalid(dispatcher, arguments):
    with pytest.raises(InvalidInput):
        dispatcher.call("set_perspectives", arguments)


def test_perspective_reply_shows_next(ready):
    reply = ready.call("perspective", {"analysis": "Costs fall.", "nextPerspectiveNeeded": True})
    assert "Analysis recorded for Economist." in reply
    assert "Progress: 1/3 perspectives completed." in reply
    assert "Next perspective: Ethicist" in reply
    assert "Focus areas: fairness" in reply
    assert "Personality: Principled" in reply


def test_perspective_alias_flag(ready):
    ready.call("perspective", {"analysis": "Costs fall.", "nextThoughtNeeded": "true"})
    assert ready.engine.perspective_snapshot().current.role == "Ethicist"


def test_primary_flag_wins_over_alias(ready):
    ready.call("perspective", {"analysis": "a", "nextPerspectiveNeeded": False, "nextThoughtNeeded": True})
    assert ready.engine.perspective_snapshot().current.role == "Economist"


def test_perspective_without_flag_stays(ready):
    reply = ready.call("perspective", {"analysis": "Costs fall."})
    assert ready.engine.perspective_snapshot().current.role == "Economist"
    assert "Next perspective: Economist" in reply


def test_perspective_all_completed(ready):
    for text in ["a", "b"]:
        ready.call("perspective", {"analysis": text, "nextPerspectiveNeeded": True})
    reply = ready.call("perspective", {"analysis": "c", "nextPerspectiveNeeded": True})
    assert "All perspectives completed. Total analyses: 3" in reply
    with pytest.raises(PreconditionFailed):
        ready.call("perspective", {"analysis": "d", "nextPerspectiveNeeded": True})


def test_perspective_requires_analysis(ready):
    with pytest.raises(InvalidInput):
        ready.call("perspective", {"nextPerspectiveNeeded": True})
    with pytest.raises(InvalidInput):
        ready.call("perspective", {"analysis": "   ", "nextPerspectiveNeeded": True})


def test_start_debate_reply(ready):
    reply = ready.call("start_debate", {"topic": "X", "participants": ["Ethicist", "Economist"]})
    assert 'Debate started on topic: "X"' in reply
    assert "1. Ethicist\n2. Economist" in reply
    assert "Current speaker: Ethicist" in reply


@pytest.mark.parametrize(
    "arguments",
    [
        {"topic": "X", "participants": ["Economist"]},
        {"topic": "X", "participants": "Economist,Ethicist"},
        {"topic": "X", "participants": ["Economist", 3]},
        {"participants": ["Economist", "Ethicist"]},
    ],
)
def test_start_debate_invalid(ready, arguments):
    with pytest.raises(InvalidInput):
        ready.call("start_debate", arguments)


def test_debate_turn_replies(debating):
    r1 = debating.call("debate_turn", {"statement": "Growth.", "nextTurnNeeded": True})
    assert "Statement recorded for Economist." in r1
    assert "Next speaker: Ethicist" in r1
    assert "responding to" not in r1

    r2 = debating.call("debate_turn", {"statement": "Fairness.", "nextTurnNeeded": True})
    assert "Round 1 complete. Starting Round 2." in r2
    assert "respond to conflicting viewpoints" in r2
    assert "Next speaker: Economist (responding to Ethicist)" in r2


def test_debate_turn_final_round_and_completion(debating):
    replies = [
        debating.call("debate_turn", {"statement": f"s{i}", "nextTurnNeeded": True}) for i in range(6)
    ]
    assert "Final round: Synthesis and compromise proposals." in replies[3]
    assert "Debate complete after 6 turns." in replies[5]
    assert "Next speaker" not in replies[5]


def test_debate_turn_without_debate(ready):
    with pytest.raises(PreconditionFailed):
        ready.call("debate_turn", {"statement": "hello", "nextTurnNeeded": True})


def test_inject_constraint_reply(debating):
    debating.call("inject_constraint", {"constraint": "Budget frozen."})
    reply = debating.call("inject_constraint", {"constraint": "Ship by Q3."})
    assert 'New constraint added: "Ship by Q3."' in reply
    assert "Total constraints: 2" in reply


def test_inject_constraint_without_debate(ready):
    with pytest.raises(PreconditionFailed):
        ready.call("inject_constraint", {"constraint": "Budget frozen."})


def test_debate_summary_reply(debating):
    debating.call("inject_constraint", {"constraint": "Budget frozen."})
    debating.call("debate_turn", {"statement": "Growth.", "nextTurnNeeded": True})
    debating.call("debate_turn", {"statement": "Fairness.", "nextTurnNeeded": True})
    reply = debating.call("debate_summary")
    assert "## Debate Summary" in reply
    assert "**Duration:** 2 rounds, 2 total statements" in reply
    assert "1. Budget frozen." in reply
    assert "### Economist\nRound 1: Growth." in reply


def test_debate_summary_before_debate(ready):
    with pytest.raises(PreconditionFailed):
        ready.call("debate_summary")


def test_final_round_note_follows_round_cap(sample_perspectives):
    eng = PerspectiveEngine(DebateRules(max_rounds=2))
    dispatcher = ToolDispatcher(eng)
    dispatcher.call("set_perspectives", {"perspectives": sample_perspectives[:2]})
    dispatcher.call("start_debate", {"topic": "X", "participants": ["Economist", "Ethicist"]})
    dispatcher.call("debate_turn", {"statement": "a", "nextTurnNeeded": True})
    reply = dispatcher.call("debate_turn", {"statement": "b", "nextTurnNeeded": True})
    assert "Starting Round 2." in reply
    assert "Final round: Synthesis and compromise proposals." in reply
    assert "respond to conflicting viewpoints" not in reply


def test_response_round_note_only_on_round_two(debating):
    replies = [
        debating.call("debate_turn", {"statement": f"s{i}", "nextTurnNeeded": True}) for i in range(4)
    ]
    assert "Final round" not in replies[1]
    assert "respond to conflicting viewpoints" not in replies[3]
