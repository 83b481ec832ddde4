"""Debate orchestration: round-robin turns, round advancement, attribution, constraints."""

import logging
from collections.abc import Sequence

from config.config_loader import DebateRules
from src.errors import DebateStateError, InvalidInput, PreconditionFailed
from src.models import (
    DebateSession,
    DebateSnapshot,
    DebateSummary,
    DebateTurn,
    Perspective,
    TurnResult,
)

logger = logging.getLogger(__name__)


def _first_other_speaker(turns: Sequence[DebateTurn], role: str) -> str | None:
    """Persona of the first turn in ``turns`` not spoken by ``role``."""
    return next((t.persona for t in turns if t.persona != role), None)


class DebateOrchestrator:
    """Holds one debate session over a fixed, ordered participant subset.

    Rounds are capped at ``rules.max_rounds``. Finishing the last round only
    clears the "more turns needed" signal: the session stays active and
    further turns are still recorded until the next ``start_debate``.
    """

    def __init__(self, rules: DebateRules | None = None) -> None:
        self._rules = rules or DebateRules()
        self._session = DebateSession()

    @property
    def rules(self) -> DebateRules:
        return self._rules

    @property
    def active(self) -> bool:
        return self._session.active

    @property
    def is_complete(self) -> bool:
        """True once every participant has spoken in the final round."""
        s = self._session
        return (
            s.active
            and s.current_round == self._rules.max_rounds
            and s.current_turn_index >= self._rules.max_rounds * len(s.participants)
        )

    def reset(self) -> None:
        self._session = DebateSession()

    def start_debate(
        self,
        topic: str,
        participant_roles: Sequence[str],
        perspectives: Sequence[Perspective],
    ) -> Perspective:
        """Start a fresh session and return the first speaker.

        Participants keep the order of ``participant_roles``.

        Raises:
            InvalidInput: wrong participant count or a role not in ``perspectives``.
        """
        lo, hi = self._rules.min_participants, self._rules.max_participants
        if isinstance(participant_roles, str) or not (lo <= len(participant_roles) <= hi):
            raise InvalidInput(f"Debate requires {lo}-{hi} participants")

        by_role = {p.role: p for p in perspectives}
        missing = [r for r in participant_roles if r not in by_role]
        if missing:
            raise InvalidInput(
                "One or more specified personas not found in perspectives: " + ", ".join(map(str, missing))
            )

        self._session = DebateSession(
            active=True,
            topic=topic,
            participants=[by_role[r] for r in participant_roles],
            current_round=1,
        )
        logger.info("Debate started on %r with %s", topic, ", ".join(participant_roles))
        return self._session.participants[0]

    def current_speaker(self) -> Perspective | None:
        s = self._session
        if not s.active or not s.participants:
            return None
        return s.participants[s.current_turn_index % len(s.participants)]

    def _previous_round_turns(self) -> list[DebateTurn]:
        s = self._session
        if s.current_round <= 1:
            return []
        return [t for t in s.history if t.round == s.current_round - 1]

    def next_response_target(self) -> str | None:
        """Persona the current speaker will be attributed as responding to."""
        speaker = self.current_speaker()
        if speaker is None:
            return None
        return _first_other_speaker(self._previous_round_turns(), speaker.role)

    def record_turn(self, statement: str, advance: bool) -> TurnResult:
        """Record a statement for the current speaker.

        The turn is always appended to history. When ``advance`` is set the
        turn index moves on; completing a round bumps the round counter until
        the cap, where ``more_turns_needed`` comes back False instead.

        Raises:
            PreconditionFailed: no active debate.
            InvalidInput: empty statement.
            DebateStateError: no speaker could be resolved.
        """
        s = self._session
        if not s.active:
            raise PreconditionFailed("No active debate. Use start_debate first.")
        if not isinstance(statement, str) or not statement.strip():
            raise InvalidInput("Statement must be a non-empty string")

        speaker = self.current_speaker()
        if speaker is None:
            raise DebateStateError("No current participant found")

        if self.is_complete:
            logger.warning(
                "Turn recorded for %s after the debate completed (round %d)",
                speaker.role, s.current_round,
            )

        responding_to = _first_other_speaker(self._previous_round_turns(), speaker.role)
        s.history.append(
            DebateTurn(
                round=s.current_round,
                persona=speaker.role,
                statement=statement,
                responding_to=responding_to,
            )
        )

        round_complete = False
        more_turns_needed = True
        if advance:
            s.current_turn_index += 1
            if s.current_turn_index % len(s.participants) == 0:
                round_complete = True
                if s.current_round < self._rules.max_rounds:
                    s.current_round += 1
                    logger.info("Round %d complete, starting round %d", s.current_round - 1, s.current_round)
                else:
                    more_turns_needed = False
                    logger.info("Debate complete after %d turns", len(s.history))

        logger.debug(
            "Turn %d by %s in round %d (responding_to=%s)",
            len(s.history), speaker.role, s.current_round, responding_to,
        )
        return TurnResult(
            round=s.current_round,
            persona=speaker.role,
            more_turns_needed=more_turns_needed,
            round_complete=round_complete,
            responding_to=responding_to,
        )

    def add_constraint(self, text: str) -> int:
        """Append a constraint verbatim. Returns the total constraint count.

        Raises:
            PreconditionFailed: no active debate.
        """
        if not self._session.active:
            raise PreconditionFailed("No active debate to add constraints to")
        self._session.constraints.append(text)
        logger.info("Constraint added (%d total)", len(self._session.constraints))
        return len(self._session.constraints)

    def snapshot(self) -> DebateSnapshot:
        s = self._session
        return DebateSnapshot(
            active=s.active,
            topic=s.topic,
            current_round=s.current_round,
            current_speaker=self.current_speaker(),
            participants=tuple(s.participants),
            history=tuple(s.history),
            constraints=tuple(s.constraints),
            previous_round_statements=tuple(self._previous_round_turns()),
        )

    def summarize(self) -> DebateSummary:
        """Group every recorded statement by participant.

        Raises:
            PreconditionFailed: no debate has run since the last reset.
        """
        s = self._session
        if not s.active and not s.history:
            raise PreconditionFailed("No debate to summarize")

        key_points = {
            p.role: [t.statement for t in s.history if t.persona == p.role]
            for p in s.participants
        }
        return DebateSummary(
            topic=s.topic,
            participants=[p.role for p in s.participants],
            rounds=s.current_round,
            key_points=key_points,
            constraints=list(s.constraints),
            total_turns=len(s.history),
        )
