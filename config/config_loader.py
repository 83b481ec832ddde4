"""Load settings.yaml into typed dataclasses. Validates debate rules at startup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

# Alternate settings file, usually set in .env
SETTINGS_ENV_VAR = "PERSPECTIVE_COUNCIL_SETTINGS"

# Hard limits; settings may only narrow them
_PARTICIPANT_BOUNDS = (2, 4)
_ROUND_CAP = 3


@dataclass(frozen=True)
class DebateRules:
    min_participants: int = 2
    max_participants: int = 4
    max_rounds: int = 3

    def __post_init__(self) -> None:
        lo, hi = _PARTICIPANT_BOUNDS
        if not lo <= self.min_participants <= self.max_participants <= hi:
            raise ValueError(
                f"Participant bounds must satisfy {lo} <= min_participants <= max_participants <= {hi}: "
                f"got {self.min_participants}-{self.max_participants}"
            )
        if not 1 <= self.max_rounds <= _ROUND_CAP:
            raise ValueError(f"max_rounds must be between 1 and {_ROUND_CAP}: got {self.max_rounds}")


@dataclass
class OutputConfig:
    dir: Path = Path("./output")
    preview_chars: int = 150


@dataclass
class AppConfig:
    debate: DebateRules = field(default_factory=DebateRules)
    output: OutputConfig = field(default_factory=OutputConfig)


def default_settings_path() -> Path:
    """Settings path from the environment, falling back to the bundled file."""
    override = os.environ.get(SETTINGS_ENV_VAR, "").strip()
    return Path(override) if override else _SETTINGS_PATH


def load_config(settings_path: Path | None = None) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing, ValueError if the
    file is not a mapping or the debate rules are out of range. Missing or
    empty sections fall back to defaults.
    """
    if settings_path is None:
        settings_path = default_settings_path()
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Settings file must be a mapping: {settings_path}")

    debate_raw = raw.get("debate") or {}
    defaults = DebateRules()
    rules = DebateRules(
        min_participants=int(debate_raw.get("min_participants", defaults.min_participants)),
        max_participants=int(debate_raw.get("max_participants", defaults.max_participants)),
        max_rounds=int(debate_raw.get("max_rounds", defaults.max_rounds)),
    )

    output_raw = raw.get("output") or {}
    output = OutputConfig(
        dir=Path(output_raw.get("dir", "./output")),
        preview_chars=int(output_raw.get("preview_chars", 150)),
    )

    logger.debug("Loaded settings from %s: %s", settings_path, rules)
    return AppConfig(debate=rules, output=output)
