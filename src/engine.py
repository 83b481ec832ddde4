"""Coordinating object owning the perspective tracker and the debate session."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from config.config_loader import DebateRules
from src.debate import DebateOrchestrator
from src.models import (
    AnalysisResult,
    DebateSnapshot,
    DebateSummary,
    Perspective,
    PerspectiveSnapshot,
    TurnResult,
)
from src.perspectives import PerspectiveTracker

logger = logging.getLogger(__name__)


class PerspectiveEngine:
    """One resettable session of perspective analysis and debate.

    Reset points:
        define_perspectives -- discards perspectives, analyses and any debate.
        start_debate        -- discards only the previous debate session.

    Not thread-safe; callers serialize access.
    """

    def __init__(self, rules: DebateRules | None = None) -> None:
        self.tracker = PerspectiveTracker()
        self.debate = DebateOrchestrator(rules)

    def reset(self) -> None:
        self.tracker.reset()
        self.debate.reset()
        logger.info("Engine state reset")

    def define_perspectives(self, perspectives: Sequence[Perspective | Mapping[str, Any]]) -> list[Perspective]:
        # Tracker validates before touching its own state.
        parsed = self.tracker.set_perspectives(perspectives)
        self.debate.reset()
        return parsed

    def record_analysis(self, text: str, advance: bool) -> AnalysisResult:
        return self.tracker.record_analysis(text, advance)

    def start_debate(self, topic: str, participant_roles: Sequence[str]) -> Perspective:
        return self.debate.start_debate(topic, participant_roles, self.tracker.perspectives)

    def record_turn(self, statement: str, advance: bool) -> TurnResult:
        return self.debate.record_turn(statement, advance)

    def add_constraint(self, text: str) -> int:
        return self.debate.add_constraint(text)

    def summarize(self) -> DebateSummary:
        return self.debate.summarize()

    def perspective_snapshot(self) -> PerspectiveSnapshot:
        return self.tracker.snapshot()

    def debate_snapshot(self) -> DebateSnapshot:
        return self.debate.snapshot()
