"""Error types raised by the perspective and debate engine."""


class EngineError(Exception):
    """Base for all engine failures. State is never mutated when raised."""


class InvalidInput(EngineError):
    """Malformed or out-of-range caller data."""


class PreconditionFailed(EngineError):
    """Operation attempted in a state that forbids it."""


class DebateStateError(EngineError):
    """Debate session violated its own invariants."""
