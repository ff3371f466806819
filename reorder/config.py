import os
from dataclasses import dataclass, fields, replace
from dotenv import load_dotenv

from reorder.errors import InvalidConfigError

load_dotenv()


DEFAULT_MIN_POSITION_GAP = 0.1
DEFAULT_RENUMBER_SPACING = 10
DEFAULT_MIN_POSITION_VALUE = 1


@dataclass(frozen=True)
class ReorderConfig:
    """
    Thresholds used by a single reorder computation.

    - min_position_gap: a new position closer than this to either neighbour
      forces a full renumber
    - renumber_spacing: distance between consecutive positions after a renumber
    - min_position_value: positions below this value are invalid
    """
    min_position_gap: float = DEFAULT_MIN_POSITION_GAP
    renumber_spacing: float = DEFAULT_RENUMBER_SPACING
    min_position_value: float = DEFAULT_MIN_POSITION_VALUE

    def __post_init__(self):
        if self.min_position_gap < 0:
            raise InvalidConfigError(
                f"min_position_gap must be >= 0, got {self.min_position_gap}"
            )
        if self.renumber_spacing <= 0:
            raise InvalidConfigError(
                f"renumber_spacing must be > 0, got {self.renumber_spacing}"
            )
        if self.renumber_spacing < self.min_position_value:
            raise InvalidConfigError(
                f"renumber_spacing {self.renumber_spacing} must be >= min_position_value "
                f"{self.min_position_value}"
            )

    def with_overrides(self, **overrides) -> "ReorderConfig":
        """Return a copy with the given fields replaced. None values are ignored."""
        unknown = sorted(set(overrides) - {f.name for f in fields(self)})
        if unknown:
            raise InvalidConfigError(f"Unknown config fields: {', '.join(unknown)}")
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def _env_number(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise InvalidConfigError(f"{name} must be a number, got {raw!r}") from exc


def get_config() -> ReorderConfig:
    """Build the default configuration from environment variables.

    - REORDER_MIN_POSITION_GAP
    - REORDER_RENUMBER_SPACING
    - REORDER_MIN_POSITION_VALUE

    Unset or blank variables fall back to the built-in defaults.
    """
    return ReorderConfig(
        min_position_gap=_env_number("REORDER_MIN_POSITION_GAP", DEFAULT_MIN_POSITION_GAP),
        renumber_spacing=_env_number("REORDER_RENUMBER_SPACING", DEFAULT_RENUMBER_SPACING),
        min_position_value=_env_number("REORDER_MIN_POSITION_VALUE", DEFAULT_MIN_POSITION_VALUE),
    )


def get_log_settings():
    """Log level and optional log file from REORDER_LOG_LEVEL / REORDER_LOG_FILE."""
    level = (os.environ.get("REORDER_LOG_LEVEL") or "INFO").strip().upper()
    log_file = (os.environ.get("REORDER_LOG_FILE") or "").strip() or None
    return level, log_file
