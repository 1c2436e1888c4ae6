"""Inbound record contract for the insights engine.

Entries, blocks and the exercise muscle catalogue arrive already deserialized
from the external store. These models are the boundary: malformed records fail
here with a pydantic ValidationError, so the engine functions downstream can
stay total over their input.
"""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

LoadUnit = Literal["kg", "lb"]
LoadMultiplier = Literal["single", "double"]
VolumeKind = Literal["reps", "rounds"]
ScalarKind = Literal["weight", "time", "reps"]
MetricKind = Literal["weight", "time", "reps", "rounds"]

MUSCLE_GROUPS: tuple[str, ...] = (
    "chest",
    "back",
    "shoulders",
    "triceps",
    "biceps",
    "forearms",
    "quads",
    "hamstrings",
    "glutes",
    "calves",
    "core",
)


def _normalize_optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _start_of_day(value: object) -> object:
    if isinstance(value, dt.datetime):
        return value.date()
    return value


class LoadMetric(BaseModel):
    magnitude: float = Field(ge=0, allow_inf_nan=False)
    unit: LoadUnit = "kg"
    multiplier: LoadMultiplier = "single"


class VolumeMetric(BaseModel):
    count: float = Field(ge=0, allow_inf_nan=False)
    kind: VolumeKind = "reps"


class ScalarMetric(BaseModel):
    """Single-metric legacy shape still present in older history."""

    kind: ScalarKind
    value: float = Field(ge=0, allow_inf_nan=False)
    unit: str | None = None

    @field_validator("unit")
    @classmethod
    def normalize_unit(cls, value: str | None) -> str | None:
        return _normalize_optional_text(value)


class Entry(BaseModel):
    id: str | None = None
    owner_id: str
    date: dt.date
    created_at: dt.datetime
    name: str
    details: str | None = None
    tracked: bool = True
    block_id: str | None = None
    sets: int | None = Field(default=None, ge=0)
    load: LoadMetric | None = None
    volume: VolumeMetric | None = None
    scalar: ScalarMetric | None = None

    @field_validator("date", mode="before")
    @classmethod
    def discard_time_of_day(cls, value: object) -> object:
        return _start_of_day(value)

    @field_validator("details")
    @classmethod
    def normalize_details(cls, value: str | None) -> str | None:
        return _normalize_optional_text(value)

    @model_validator(mode="after")
    def validate_single_metric_shape(self) -> "Entry":
        if self.scalar is not None and (self.load is not None or self.volume is not None):
            raise ValueError("scalar metric cannot be combined with load/volume metrics")
        return self


class Block(BaseModel):
    id: str
    name: str = ""
    start_date: dt.date
    end_date: dt.date | None = None
    duration_weeks: int | None = Field(default=None, ge=1)
    completed_date: dt.date | None = None
    notes: str | None = None
    color_index: int | None = None

    @field_validator("start_date", "end_date", "completed_date", mode="before")
    @classmethod
    def discard_time_of_day(cls, value: object) -> object:
        return _start_of_day(value)

    @property
    def is_ongoing(self) -> bool:
        return self.end_date is None and self.duration_weeks is None


class Exercise(BaseModel):
    id: str | None = None
    name: str
    primary_muscles: frozenset[str] = frozenset()
    secondary_muscles: frozenset[str] = frozenset()

    @field_validator("primary_muscles", "secondary_muscles", mode="before")
    @classmethod
    def normalize_muscles(cls, value: object) -> object:
        if value is None:
            return frozenset()
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(item).strip().lower() for item in value if str(item).strip())
        return value

    @field_validator("primary_muscles", "secondary_muscles")
    @classmethod
    def validate_known_muscles(cls, value: frozenset[str]) -> frozenset[str]:
        unknown = sorted(value - set(MUSCLE_GROUPS))
        if unknown:
            allowed = ", ".join(MUSCLE_GROUPS)
            raise ValueError(f"unknown muscle group(s) {unknown}; must be one of: {allowed}")
        return value

    @model_validator(mode="after")
    def secondary_net_of_primary(self) -> "Exercise":
        overlap = self.primary_muscles & self.secondary_muscles
        if overlap:
            self.secondary_muscles = self.secondary_muscles - overlap
        return self
