"""Perspective sequencing: ordered roles, a cursor, and one analysis per role."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from src.errors import InvalidInput, PreconditionFailed
from src.models import AnalysisResult, Perspective, PerspectiveSnapshot

logger = logging.getLogger(__name__)


def parse_perspective(raw: Perspective | Mapping[str, Any]) -> Perspective:
    """Build a Perspective from a mapping with role, focusAreas and personality.

    Accepts ``focus_areas`` as an alternative key. Raises InvalidInput when a
    required field is missing or has the wrong type.
    """
    if isinstance(raw, Perspective):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidInput(f"Perspective must be an object, got {type(raw).__name__}")

    role = raw.get("role")
    if not isinstance(role, str) or not role.strip():
        raise InvalidInput("Perspective 'role' must be a non-empty string")

    focus_areas = raw.get("focusAreas", raw.get("focus_areas"))
    if isinstance(focus_areas, str) or not isinstance(focus_areas, Sequence):
        raise InvalidInput(f"Perspective '{role}' requires a 'focusAreas' list")
    if not all(isinstance(area, str) for area in focus_areas):
        raise InvalidInput(f"Perspective '{role}' focus areas must be strings")

    personality = raw.get("personality")
    if not isinstance(personality, str):
        raise InvalidInput(f"Perspective '{role}' requires a 'personality' string")

    return Perspective(role=role, focus_areas=tuple(focus_areas), personality=personality)


class PerspectiveTracker:
    """Walks an ordered list of perspectives, one analysis per role."""

    def __init__(self) -> None:
        self._perspectives: list[Perspective] = []
        self._cursor = 0
        self._analyses: dict[str, str] = {}

    @property
    def perspectives(self) -> list[Perspective]:
        return list(self._perspectives)

    @property
    def cursor(self) -> int:
        return self._cursor

    def reset(self) -> None:
        self._perspectives = []
        self._cursor = 0
        self._analyses = {}

    def set_perspectives(self, perspectives: Sequence[Perspective | Mapping[str, Any]]) -> list[Perspective]:
        """Replace all perspectives, the cursor and recorded analyses.

        Raises:
            InvalidInput: empty list, malformed entry, or duplicate role.
        """
        if isinstance(perspectives, (str, Mapping)) or not isinstance(perspectives, Sequence):
            raise InvalidInput("Perspectives must be a non-empty array")
        if not perspectives:
            raise InvalidInput("Perspectives must be a non-empty array")

        parsed = [parse_perspective(p) for p in perspectives]
        seen: set[str] = set()
        for p in parsed:
            if p.role in seen:
                raise InvalidInput(f"Duplicate perspective role: {p.role}")
            seen.add(p.role)

        self.reset()
        self._perspectives = parsed
        logger.info("Perspectives set: %s", ", ".join(p.role for p in parsed))
        return list(parsed)

    def find(self, role: str) -> Perspective | None:
        return next((p for p in self._perspectives if p.role == role), None)

    def current(self) -> Perspective | None:
        if self._cursor >= len(self._perspectives):
            return None
        return self._perspectives[self._cursor]

    def record_analysis(self, text: str, advance: bool) -> AnalysisResult:
        """Store ``text`` for the current perspective, optionally moving on.

        Re-recording for the same role overwrites the earlier analysis.

        Raises:
            InvalidInput: text is empty after stripping.
            PreconditionFailed: no perspectives defined or all completed.
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidInput("Analysis must be a non-empty string")
        current = self.current()
        if current is None:
            raise PreconditionFailed(
                "No perspectives defined or all perspectives completed. Use set_perspectives first."
            )

        self._analyses[current.role] = text
        if advance:
            self._cursor = min(self._cursor + 1, len(self._perspectives))

        following = self.current()
        logger.debug(
            "Analysis recorded for %s (advance=%s, next=%s)",
            current.role, advance, following.role if following else None,
        )
        return AnalysisResult(
            role=current.role,
            has_next=following is not None,
            completed=len(self._analyses),
            total=len(self._perspectives),
            next_perspective=following,
        )

    def snapshot(self) -> PerspectiveSnapshot:
        return PerspectiveSnapshot(
            current=self.current(),
            analyses=dict(self._analyses),
            remaining=max(0, len(self._perspectives) - self._cursor),
        )
