"""Load, validate, and hot-reload the cycle engine configuration.

The config lives in ``cycle_config.yaml`` alongside this module.  It is loaded
once on first use and cached.  Call ``reload_cycle_config()`` to re-read it
from disk.

Usage::

    from src.cycle.config_loader import get_cycle_config

    config = get_cycle_config()
    config.cycle.default_length         # 28
    config.history.plausible_gap(120)   # False
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger("sakhi.cycle.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"

DAY_MODES = ("wrapped", "linear")
PHASE_SCALINGS = ("fixed", "proportional")


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class CycleLengthConfig:
    """Cycle length defaults and how cycle days are counted."""

    default_length: int = 28
    min_length: int = 20   # lowest value accepted from the settings form
    max_length: int = 45   # highest value accepted from the settings form
    day_mode: str = "wrapped"
    phase_scaling: str = "fixed"

    def accepts(self, length: int) -> bool:
        return self.min_length <= length <= self.max_length


@dataclass
class HistoryConfig:
    """Settings for re-estimating cycle length from period history."""

    estimation_window: int = 4
    min_plausible_gap_days: int = 15
    max_plausible_gap_days: int = 45

    def plausible_gap(self, gap_days: int) -> bool:
        """Gaps on or outside the band are discarded as outliers."""
        return self.min_plausible_gap_days < gap_days < self.max_plausible_gap_days


@dataclass
class SymptomConfig:
    recent_limit: int = 5


@dataclass
class CycleConfig:
    """Complete, validated cycle engine configuration.

    Attributes:
        version:  Config schema version string.
        cycle:    Cycle length defaults and cycle-day counting.
        history:  Cycle length re-estimation settings.
        symptoms: Symptom timeline settings.
    """

    version: str
    cycle: CycleLengthConfig
    history: HistoryConfig
    symptoms: SymptomConfig
    _raw: dict = field(default_factory=dict, repr=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    import yaml

    if not path.exists():
        raise FileNotFoundError(f"Cycle config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> CycleConfig:
    """Validate the raw YAML dict and construct a CycleConfig.

    Missing sections fall back to defaults.  Every problem found is collected
    and reported in a single ConfigValidationError.
    """
    errors: list[str] = []

    def _int(section: dict, key: str, default: int, section_name: str) -> int:
        value = section.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            errors.append(f"{section_name}.{key} must be an integer, got {value!r}")
            return default

    version = str(raw.get("version", "1.0"))

    # ── Cycle ──
    c_raw = raw.get("cycle") or {}
    cycle = CycleLengthConfig(
        default_length=_int(c_raw, "default_length", 28, "cycle"),
        min_length=_int(c_raw, "min_length", 20, "cycle"),
        max_length=_int(c_raw, "max_length", 45, "cycle"),
        day_mode=str(c_raw.get("day_mode", "wrapped")),
        phase_scaling=str(c_raw.get("phase_scaling", "fixed")),
    )
    if cycle.min_length <= 0:
        errors.append(f"cycle.min_length must be positive, got {cycle.min_length}")
    if cycle.min_length > cycle.max_length:
        errors.append(
            f"cycle.min_length ({cycle.min_length}) exceeds cycle.max_length ({cycle.max_length})"
        )
    elif not cycle.accepts(cycle.default_length):
        errors.append(
            f"cycle.default_length = {cycle.default_length} is outside "
            f"[{cycle.min_length}, {cycle.max_length}]"
        )
    if cycle.day_mode not in DAY_MODES:
        errors.append(f"cycle.day_mode must be one of {DAY_MODES}, got {cycle.day_mode!r}")
    if cycle.phase_scaling not in PHASE_SCALINGS:
        errors.append(
            f"cycle.phase_scaling must be one of {PHASE_SCALINGS}, got {cycle.phase_scaling!r}"
        )

    # ── History ──
    h_raw = raw.get("history") or {}
    history = HistoryConfig(
        estimation_window=_int(h_raw, "estimation_window", 4, "history"),
        min_plausible_gap_days=_int(h_raw, "min_plausible_gap_days", 15, "history"),
        max_plausible_gap_days=_int(h_raw, "max_plausible_gap_days", 45, "history"),
    )
    if history.estimation_window < 2:
        errors.append(
            f"history.estimation_window must be at least 2, got {history.estimation_window}"
        )
    if history.min_plausible_gap_days >= history.max_plausible_gap_days:
        errors.append("history plausible gap band is empty (min >= max)")

    # ── Symptoms ──
    s_raw = raw.get("symptoms") or {}
    symptoms = SymptomConfig(recent_limit=_int(s_raw, "recent_limit", 5, "symptoms"))
    if symptoms.recent_limit < 0:
        errors.append(f"symptoms.recent_limit must not be negative, got {symptoms.recent_limit}")

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return CycleConfig(
        version=version,
        cycle=cycle,
        history=history,
        symptoms=symptoms,
        _raw=raw,
    )


def load_cycle_config(path: Path | None = None) -> CycleConfig:
    """Load and validate the cycle config from disk.

    Args:
        path: Override path to YAML. Uses the bundled cycle_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded cycle config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: CycleConfig | None = None
_config_lock = threading.Lock()


def get_cycle_config() -> CycleConfig:
    """Return the global CycleConfig singleton, loading it on first call."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_cycle_config()
    return _config


def reload_cycle_config(path: Path | None = None) -> CycleConfig:
    """Reload the cycle config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_cycle_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded cycle config: %s → %s", old_version, new_config.version)
    return new_config
