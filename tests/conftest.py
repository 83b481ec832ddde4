"""Shared pytest fixtures."""

from pathlib import Path

import pytest
import yaml

from src.engine import PerspectiveEngine
from src.models import Perspective
from src.tools import ToolDispatcher


@pytest.fixture
def sample_perspectives() -> list[dict]:
    return [
        {"role": "Economist", "focusAreas": ["markets", "incentives"], "personality": "Data-driven"},
        {"role": "Ethicist", "focusAreas": ["fairness"], "personality": "Principled"},
        {"role": "Engineer", "focusAreas": ["feasibility", "cost"], "personality": "Blunt"},
        {"role": "Historian", "focusAreas": ["precedent"], "personality": "Patient"},
        {"role": "Lawyer", "focusAreas": ["liability"], "personality": "Careful"},
    ]


@pytest.fixture
def economist() -> Perspective:
    return Perspective(role="Economist", focus_areas=("markets", "incentives"), personality="Data-driven")


@pytest.fixture
def engine(sample_perspectives: list[dict]) -> PerspectiveEngine:
    eng = PerspectiveEngine()
    eng.define_perspectives(sample_perspectives)
    return eng


@pytest.fixture
def started_debate(engine: PerspectiveEngine) -> PerspectiveEngine:
    """Engine with a two-party Economist/Ethicist debate on topic X."""
    engine.start_debate("X", ["Economist", "Ethicist"])
    return engine


@pytest.fixture
def dispatcher() -> ToolDispatcher:
    return ToolDispatcher(PerspectiveEngine())


@pytest.fixture
def script_file(tmp_path: Path, sample_perspectives: list[dict]) -> Path:
    """A small session script: two analyses, a full two-party debate, a summary."""
    script = {
        "perspectives": sample_perspectives[:2],
        "calls": [
            {"tool": "perspective", "arguments": {"analysis": "Costs fall.", "nextPerspectiveNeeded": True}},
            {"tool": "perspective", "arguments": {"analysis": "Fairness matters.", "nextThoughtNeeded": "true"}},
            {"tool": "start_debate", "arguments": {"topic": "Four-day week", "participants": ["Economist", "Ethicist"]}},
            *[
                {"tool": "debate_turn", "arguments": {"statement": f"Statement {i}", "nextTurnNeeded": True}}
                for i in range(1, 7)
            ],
            {"tool": "debate_summary"},
        ],
    }
    path = tmp_path / "session.yaml"
    path.write_text(yaml.dump(script), encoding="utf-8")
    return path
