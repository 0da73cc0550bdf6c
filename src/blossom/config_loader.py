"""Load, validate, and hot-reload the Blossom engine configuration.

The config lives in ``engine_config.yaml`` alongside this module.  It is
loaded once on first use and cached.  Call ``reload_engine_config()`` to
re-read from disk after an edit; no restart required.

Usage::

    from src.blossom.config_loader import get_engine_config

    config = get_engine_config()
    config.cycle.min_cycle_days               # 15
    config.insights.threshold("diet")         # 10.0
    config.wellness.component_weight("emotional_wellbeing")  # 0.3
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger("blossom.config")

_CONFIG_PATH = Path(__file__).parent / "engine_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PhaseBoundaries:
    """Cycle-day boundaries used to label the inferred phase."""

    menstrual_end_day: int = 5
    follicular_end_day: int = 13
    ovulation_day: int = 14
    luteal_end_day: int = 21
    long_cycle_days: int = 35


@dataclass(frozen=True)
class CycleRulesConfig:
    """Regularity classification rules."""

    irregular_variability_days: float = 7.0
    min_cycle_days: int = 15
    default_cycle_length: int = 28
    history_window: int = 3
    max_episode_gap_days: int = 7


@dataclass(frozen=True)
class WellnessComponent:
    """One weighted component of the wellness score."""

    name: str
    weight: float
    description: str = ""


@dataclass(frozen=True)
class WellnessConfig:
    """Wellness score computation settings."""

    window_days: int
    min_entries: int
    neutral_score: int
    good_sleep_hours: float
    trend_detail_threshold_pct: float
    components: tuple[WellnessComponent, ...]

    @property
    def total_weight(self) -> float:
        return sum(c.weight for c in self.components)

    def component_weight(self, name: str) -> float:
        for component in self.components:
            if component.name == name:
                return component.weight
        return 0.0


@dataclass(frozen=True)
class InsightConfig:
    """Cohort comparison settings for the insight engine."""

    window_days: int
    min_entries: int
    min_cohort_size: int
    good_sleep_hours: float
    poor_sleep_hours: float
    active_exercise_level: float
    thresholds_pct: dict[str, float]

    def threshold(self, factor: str) -> float:
        """Return the minimum |percent difference| that makes a claim for ``factor``."""
        return self.thresholds_pct.get(factor, 15.0)


@dataclass(frozen=True)
class ScalesConfig:
    """Lookup tables that turn categorical log fields into numbers."""

    sleep_hours: dict[str, float]
    exercise_levels: dict[str, float]
    anxiety_levels: dict[str, float]
    anxiety_default: float = 5.0
    mood_scale_max: float = 10.0
    mood_default: float = 50.0
    energy_tag: str = "energy"
    energy_cap: float = 10.0


@dataclass(frozen=True)
class EngineConfig:
    """Complete, validated engine configuration.

    This is the single in-memory representation of engine_config.yaml.
    The period detector, cycle analyzer, wellness scorer and insight engine
    all read their constants from this object.

    Attributes:
        version:   Config schema version string.
        phases:    Phase boundary days.
        cycle:     Regularity classification rules.
        wellness:  Wellness score settings and component weights.
        insights:  Insight engine cohort rules and thresholds.
        scales:    Categorical-to-numeric lookup tables.
    """

    version: str
    phases: PhaseBoundaries
    cycle: CycleRulesConfig
    wellness: WellnessConfig
    insights: InsightConfig
    scales: ScalesConfig
    _raw: dict = field(default_factory=dict, repr=False, compare=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when engine_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    try:
        import yaml  # pyyaml
    except ImportError as exc:
        raise ImportError(
            "pyyaml is required for config loading. Install with: pip install pyyaml"
        ) from exc

    if not path.exists():
        raise FileNotFoundError(f"Engine config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> EngineConfig:
    """Validate the raw YAML dict and construct an EngineConfig.

    Every problem is collected first so a broken file reports all of its
    errors in one exception.

    Raises:
        ConfigValidationError: If any value is missing or out of range.
    """
    errors: list[str] = []

    def _number(section: dict, key: str, path: str, default: float) -> float:
        value = section.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError):
            errors.append(f"{path}.{key} must be a number, got {value!r}")
            return float(default)

    def _positive_int(section: dict, key: str, path: str, default: int) -> int:
        value = _number(section, key, path, default)
        if value < 1 or value != int(value):
            errors.append(f"{path}.{key} must be a positive integer, got {value!r}")
            return default
        return int(value)

    def _table(section: dict, key: str, path: str) -> dict[str, float]:
        table_raw = section.get(key)
        if not isinstance(table_raw, dict) or not table_raw:
            errors.append(f"{path}.{key} must be a non-empty mapping")
            return {}
        table: dict[str, float] = {}
        for name, value in table_raw.items():
            try:
                table[str(name)] = float(value)
            except (TypeError, ValueError):
                errors.append(f"{path}.{key}.{name} must be a number, got {value!r}")
        return table

    version = str(raw.get("version", "1.0"))

    # ── Phase boundaries ──
    ph_raw = raw.get("phases") or {}
    phases = PhaseBoundaries(
        menstrual_end_day=_positive_int(ph_raw, "menstrual_end_day", "phases", 5),
        follicular_end_day=_positive_int(ph_raw, "follicular_end_day", "phases", 13),
        ovulation_day=_positive_int(ph_raw, "ovulation_day", "phases", 14),
        luteal_end_day=_positive_int(ph_raw, "luteal_end_day", "phases", 21),
        long_cycle_days=_positive_int(ph_raw, "long_cycle_days", "phases", 35),
    )
    ordered = [
        phases.menstrual_end_day,
        phases.follicular_end_day,
        phases.ovulation_day,
        phases.luteal_end_day,
        phases.long_cycle_days,
    ]
    if ordered != sorted(ordered) or len(set(ordered)) != len(ordered):
        errors.append(f"phases boundaries must be strictly increasing, got {ordered}")

    # ── Cycle rules ──
    cy_raw = raw.get("cycle") or {}
    cycle = CycleRulesConfig(
        irregular_variability_days=_number(cy_raw, "irregular_variability_days", "cycle", 7),
        min_cycle_days=_positive_int(cy_raw, "min_cycle_days", "cycle", 15),
        default_cycle_length=_positive_int(cy_raw, "default_cycle_length", "cycle", 28),
        history_window=_positive_int(cy_raw, "history_window", "cycle", 3),
        max_episode_gap_days=_positive_int(cy_raw, "max_episode_gap_days", "cycle", 7),
    )
    if cycle.history_window < 2:
        errors.append("cycle.history_window must be at least 2 to measure variability")

    # ── Wellness score ──
    ws_raw = raw.get("wellness_score") or {}
    components: list[WellnessComponent] = []
    for name, cfg in (ws_raw.get("components") or {}).items():
        if not isinstance(cfg, dict):
            errors.append(f"wellness_score.components.{name} must be a mapping")
            continue
        weight = _number(cfg, "weight", f"wellness_score.components.{name}", 0.0)
        if not (0.0 <= weight <= 1.0):
            errors.append(
                f"wellness_score.components.{name}.weight = {weight} is out of range [0.0, 1.0]"
            )
        components.append(
            WellnessComponent(name=name, weight=weight, description=cfg.get("description", ""))
        )
    if not components:
        errors.append("'wellness_score.components' section is missing or empty")

    neutral = _number(ws_raw, "neutral_score", "wellness_score", 50)
    if not (0 <= neutral <= 100):
        errors.append(f"wellness_score.neutral_score = {neutral} is out of range [0, 100]")

    wellness = WellnessConfig(
        window_days=_positive_int(ws_raw, "window_days", "wellness_score", 14),
        min_entries=_positive_int(ws_raw, "min_entries", "wellness_score", 7),
        neutral_score=int(neutral),
        good_sleep_hours=_number(ws_raw, "good_sleep_hours", "wellness_score", 7),
        trend_detail_threshold_pct=_number(
            ws_raw, "trend_detail_threshold_pct", "wellness_score", 10
        ),
        components=tuple(components),
    )

    total_w = wellness.total_weight
    if components and not (0.95 <= total_w <= 1.05):
        logger.warning(
            "Wellness component weights sum to %.3f (expected ~1.0). "
            "Totals will drift away from the 0-100 range.",
            total_w,
        )

    # ── Insights ──
    in_raw = raw.get("insights") or {}
    thresholds: dict[str, float] = {}
    for factor, value in (in_raw.get("thresholds_pct") or {}).items():
        try:
            pct = float(value)
        except (TypeError, ValueError):
            errors.append(f"insights.thresholds_pct.{factor} must be a number, got {value!r}")
            continue
        if pct < 0:
            errors.append(f"insights.thresholds_pct.{factor} must not be negative")
        thresholds[factor] = pct

    insights = InsightConfig(
        window_days=_positive_int(in_raw, "window_days", "insights", 30),
        min_entries=_positive_int(in_raw, "min_entries", "insights", 5),
        min_cohort_size=_positive_int(in_raw, "min_cohort_size", "insights", 3),
        good_sleep_hours=_number(in_raw, "good_sleep_hours", "insights", 7),
        poor_sleep_hours=_number(in_raw, "poor_sleep_hours", "insights", 6),
        active_exercise_level=_number(in_raw, "active_exercise_level", "insights", 3),
        thresholds_pct=thresholds,
    )
    if insights.poor_sleep_hours > insights.good_sleep_hours:
        errors.append("insights.poor_sleep_hours must not exceed insights.good_sleep_hours")

    # ── Scales ──
    sc_raw = raw.get("scales") or {}
    scales = ScalesConfig(
        sleep_hours=_table(sc_raw, "sleep_hours", "scales"),
        exercise_levels=_table(sc_raw, "exercise_levels", "scales"),
        anxiety_levels=_table(sc_raw, "anxiety_levels", "scales"),
        anxiety_default=_number(sc_raw, "anxiety_default", "scales", 5),
        mood_scale_max=_number(sc_raw, "mood_scale_max", "scales", 10),
        mood_default=_number(sc_raw, "mood_default", "scales", 50),
        energy_tag=str(sc_raw.get("energy_tag", "energy")),
        energy_cap=_number(sc_raw, "energy_cap", "scales", 10),
    )
    if scales.mood_scale_max <= 0:
        errors.append("scales.mood_scale_max must be greater than 0")

    if errors:
        raise ConfigValidationError(
            f"engine_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return EngineConfig(
        version=version,
        phases=phases,
        cycle=cycle,
        wellness=wellness,
        insights=insights,
        scales=scales,
        _raw=raw,
    )


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load and validate the engine config from disk.

    Args:
        path: Override path to YAML. Uses the bundled engine_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded engine config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: EngineConfig | None = None
_config_lock = threading.Lock()


def get_engine_config() -> EngineConfig:
    """Return the global EngineConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_engine_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_engine_config()
    return _config


def reload_engine_config(path: Path | None = None) -> EngineConfig:
    """Reload the engine config from disk and replace the global singleton.

    If validation fails the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_engine_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded engine config: %s → %s", old_version, new_config.version)
    return new_config
