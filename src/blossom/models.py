"""Pydantic models for daily journal log entries.

A ``LogEntry`` is the atomic, immutable unit of input to every Blossom
engine.  Entries arrive from the client either as model instances or as
plain mappings using the client's camelCase keys (``cyclePhase``,
``hairLoss``, ``customValues`` ...); both spellings are accepted.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

MAX_CUSTOM_VALUES = 3


class BlossomBase(BaseModel):
    """Base model with shared config for all Blossom schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
    )


class FrozenBase(BlossomBase):
    model_config = ConfigDict(frozen=True)


# ---------- Enums ----------

class CyclePhase(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulatory = "ovulatory"
    luteal = "luteal"
    unknown = "unknown"


class Flow(str, Enum):
    none = "none"
    spotting = "spotting"
    light = "light"
    medium = "medium"
    heavy = "heavy"

    @property
    def is_bleeding(self) -> bool:
        return self is not Flow.none

    @property
    def is_significant(self) -> bool:
        return self in (Flow.medium, Flow.heavy)


class StressLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class BodyImage(str, Enum):
    positive = "positive"
    neutral = "neutral"
    negative = "negative"


class AnxietyLevel(str, Enum):
    none = "none"
    low = "low"
    high = "high"


class SleepBucket(str, Enum):
    under_6h = "<6h"
    six_to_7h = "6-7h"
    seven_to_8h = "7-8h"
    over_8h = ">8h"


class ExerciseIntensity(str, Enum):
    rest = "rest"
    light = "light"
    moderate = "moderate"
    intense = "intense"


class DietPattern(str, Enum):
    balanced = "balanced"
    cravings = "cravings"
    restrictive = "restrictive"


# ---------- Log entry sections ----------

class Symptoms(FrozenBase):
    acne: int = Field(default=0, ge=0, le=10)
    hirsutism: int = Field(default=0, ge=0, le=10)
    hair_loss: int = Field(default=0, ge=0, le=10)
    bloat: int = Field(default=0, ge=0, le=10)
    cramps: int = Field(default=0, ge=0, le=10)


class Psych(FrozenBase):
    stress: StressLevel | None = None
    body_image: BodyImage | None = None
    mood: float | None = Field(default=None, ge=0, le=100)
    anxiety: AnxietyLevel | None = None


class Lifestyle(FrozenBase):
    sleep: SleepBucket | None = None
    water_intake: int | None = Field(default=None, ge=0)
    exercise: ExerciseIntensity | None = None
    diet: DietPattern | None = None


class LogEntry(FrozenBase):
    """One day of journal data.

    ``date`` is the entry's identity and sort key.  Only ISO ``YYYY-MM-DD``
    strings or ``date`` objects are accepted; anything else is rejected so a
    bad date can never leak into cycle-length arithmetic.
    """

    date: date
    cycle_phase: CyclePhase = CyclePhase.unknown
    flow: Flow = Flow.none
    symptoms: Symptoms = Field(default_factory=Symptoms)
    psych: Psych = Field(default_factory=Psych)
    lifestyle: Lifestyle = Field(default_factory=Lifestyle)
    custom_values: dict[str, float] | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _parse_iso_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value.strip())
            except ValueError as exc:
                raise ValueError(f"date must be YYYY-MM-DD, got {value!r}") from exc
        raise ValueError(f"date must be a YYYY-MM-DD string, got {type(value).__name__}")

    @field_validator("flow", mode="before")
    @classmethod
    def _absent_flow_is_none(cls, value: Any) -> Any:
        return Flow.none if value is None or value == "" else value

    @field_validator("custom_values")
    @classmethod
    def _check_custom_values(cls, value: dict[str, float] | None) -> dict[str, float] | None:
        if value is None:
            return None
        if len(value) > MAX_CUSTOM_VALUES:
            raise ValueError(f"at most {MAX_CUSTOM_VALUES} custom values are allowed")
        for tag, intensity in value.items():
            if not 0 <= intensity <= 10:
                raise ValueError(f"custom value {tag!r} must be between 0 and 10")
        return value


# ---------- Input coercion ----------

class MalformedEntryError(ValueError):
    """Raised when a log entry cannot be validated.

    Attributes:
        index:      Position of the entry in the caller's sequence.
        date_value: The entry's raw ``date`` value, if it had one.
    """

    def __init__(self, index: int, date_value: Any, reason: str) -> None:
        self.index = index
        self.date_value = date_value
        super().__init__(f"Malformed log entry at index {index} (date={date_value!r}): {reason}")


def coerce_entries(entries: Iterable[LogEntry | Mapping[str, Any]]) -> list[LogEntry]:
    """Validate raw entries into ``LogEntry`` models, failing fast on the first bad one.

    Raises:
        MalformedEntryError: Naming the index and date of the offending entry.
    """
    result: list[LogEntry] = []
    for index, raw in enumerate(entries):
        if isinstance(raw, LogEntry):
            result.append(raw)
            continue
        if not isinstance(raw, Mapping):
            raise MalformedEntryError(index, None, f"expected a mapping, got {type(raw).__name__}")
        try:
            result.append(LogEntry.model_validate(raw))
        except ValidationError as exc:
            raise MalformedEntryError(index, raw.get("date"), str(exc)) from exc
    return result


def sort_entries(entries: Iterable[LogEntry | Mapping[str, Any]]) -> list[LogEntry]:
    """Validate and return entries in chronological order."""
    return sorted(coerce_entries(entries), key=lambda e: e.date)
