"""Pure dataclasses for the perspective tracker and debate session. No logic, no deps."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Perspective:
    role: str
    focus_areas: tuple[str, ...]
    personality: str


@dataclass(frozen=True)
class DebateTurn:
    round: int
    persona: str           # role of the participant who spoke
    statement: str
    responding_to: str | None = None   # only set from round 2 on
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class DebateSession:
    active: bool = False
    topic: str = ""
    participants: list[Perspective] = field(default_factory=list)
    current_round: int = 0
    current_turn_index: int = 0
    history: list[DebateTurn] = field(default_factory=list)
    constraints: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisResult:
    role: str                   # perspective the analysis was recorded for
    has_next: bool              # a perspective remains after this call
    completed: int              # number of perspectives with an analysis
    total: int
    next_perspective: Perspective | None = None


@dataclass(frozen=True)
class PerspectiveSnapshot:
    current: Perspective | None
    analyses: dict[str, str]
    remaining: int


@dataclass(frozen=True)
class TurnResult:
    round: int                  # round as it stands after the call
    persona: str
    more_turns_needed: bool
    round_complete: bool
    responding_to: str | None = None


@dataclass(frozen=True)
class DebateSnapshot:
    active: bool
    topic: str
    current_round: int
    current_speaker: Perspective | None
    participants: tuple[Perspective, ...]
    history: tuple[DebateTurn, ...]
    constraints: tuple[str, ...]
    previous_round_statements: tuple[DebateTurn, ...] = ()


@dataclass(frozen=True)
class DebateSummary:
    topic: str
    participants: list[str]
    rounds: int
    key_points: dict[str, list[str]]
    constraints: list[str]
    total_turns: int
