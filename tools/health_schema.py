from __future__ import annotations

import datetime as dt
import re
from typing import Dict, List, Mapping, Optional, Set

import dateparser
from dateutil.parser import ParserError, parse
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from tools.errors import DateParseError, ValidationError

__all__ = [
    "WEEKDAYS",
    "Profile",
    "Symptom",
    "TrackedReading",
    "Day",
    "SuggestedAction",
    "Dataset",
    "natural_language_to_date",
]

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

MIN_VALUE = 0
MAX_VALUE = 10


class TrackerModel(BaseModel):
    """Shared config: camelCase on disk, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Profile(TrackerModel):
    name: str
    off_days: Set[str] = Field(default_factory=set)

    @field_validator("off_days", mode="before")
    def _normalise_weekdays(cls, v):
        if v is None:
            return set()
        if isinstance(v, str):
            v = [v]
        days = set()
        for item in v:
            name = str(item).strip().capitalize()
            if name not in WEEKDAYS:
                raise ValueError(f"Unknown weekday: {item!r}")
            days.add(name)
        return days

    @field_serializer("off_days")
    def _dump_weekdays(self, days: Set[str]) -> List[str]:
        return sorted(days, key=WEEKDAYS.index)


class Symptom(TrackerModel):
    """One entry of the symptom catalog.

    ``weight`` is expected in ``(0, 1]``; the bound is checked by
    :meth:`Dataset.check_invariants` so that a violation surfaces as a
    dataset validation failure rather than a parse failure.
    """

    id: str
    name: str
    higher_is_better: bool = False
    weight: float = 1.0

    def normalise(self, value: int) -> int:
        """Map a raw value onto the "higher is better" scale."""
        return value if self.higher_is_better else MAX_VALUE - value


class TrackedReading(TrackerModel):
    symptom_id: str
    value: int = Field(ge=MIN_VALUE, le=MAX_VALUE)


class Day(TrackerModel):
    """All readings recorded for one calendar date, keyed by symptom id."""

    date: dt.date
    readings: Dict[str, TrackedReading] = Field(default_factory=dict)

    @field_validator("readings", mode="before")
    def _index_readings(cls, v):
        if v is None:
            return {}
        if isinstance(v, list):
            indexed = {}
            for item in v:
                reading = item if isinstance(item, TrackedReading) else TrackedReading.model_validate(item)
                if reading.symptom_id in indexed:
                    raise ValueError(f"Duplicate reading for symptom {reading.symptom_id!r}")
                indexed[reading.symptom_id] = reading
            return indexed
        return v

    @model_validator(mode="after")
    def _check_keys(self) -> "Day":
        for key, reading in self.readings.items():
            if key != reading.symptom_id:
                raise ValueError(f"Reading keyed {key!r} belongs to {reading.symptom_id!r}")
        return self

    @field_serializer("readings")
    def _dump_readings(self, readings: Dict[str, TrackedReading]) -> List[dict]:
        return [readings[key].model_dump(by_alias=True) for key in sorted(readings)]

    @property
    def is_empty(self) -> bool:
        return not self.readings


class SuggestedAction(TrackerModel):
    """A recommendation shown when a day's score falls in ``[min_score, max_score]``."""

    name: str
    min_score: float
    max_score: float

    @model_validator(mode="after")
    def _check_range(self) -> "SuggestedAction":
        if not (MIN_VALUE <= self.min_score <= self.max_score <= MAX_VALUE):
            raise ValueError(
                f"Action {self.name!r} needs {MIN_VALUE} <= minScore <= maxScore <= {MAX_VALUE}"
            )
        return self

    def matches(self, score: float) -> bool:
        return self.min_score <= score <= self.max_score


class Dataset(TrackerModel):
    """Root of everything persisted: profile, catalog, actions and the day log."""

    profile: Profile
    symptoms: List[Symptom]
    actions: List[SuggestedAction] = Field(default_factory=list)
    days: List[Day] = Field(default_factory=list)

    @field_validator("actions", "days", mode="before")
    def _null_is_empty(cls, v):
        return [] if v is None else v

    def check_invariants(self) -> None:
        """Raise :class:`ValidationError` if the catalog or day log is inconsistent."""
        seen: Set[str] = set()
        for symptom in self.symptoms:
            if not 0 < symptom.weight <= 1:
                raise ValidationError(
                    f"Symptom {symptom.id!r} has weight {symptom.weight}; weights must be in (0, 1]"
                )
            if symptom.id in seen:
                raise ValidationError(f"Duplicate symptom id: {symptom.id!r}")
            seen.add(symptom.id)

        dates: Set[dt.date] = set()
        for day in self.days:
            if day.date in dates:
                raise ValidationError(f"Duplicate day: {day.date.isoformat()}")
            dates.add(day.date)

    def symptom_map(self) -> Dict[str, Symptom]:
        return {s.id: s for s in self.symptoms}

    def sorted_symptoms(self) -> List[Symptom]:
        return sorted(self.symptoms, key=lambda s: (s.name.lower(), s.id))

    def get_day(self, date: dt.date) -> Optional[Day]:
        for day in self.days:
            if day.date == date:
                return day
        return None

    def put_day(self, day: Day) -> Optional[Day]:
        """Insert ``day`` or replace the day with the same date. Returns the replaced day."""
        for index, existing in enumerate(self.days):
            if existing.date == day.date:
                self.days[index] = day
                return existing
        self.days.append(day)
        return None

    def remove_day(self, date: dt.date) -> None:
        self.days = [d for d in self.days if d.date != date]

    def is_off_day(self, date: dt.date) -> bool:
        return WEEKDAYS[date.weekday()] in self.profile.off_days

    def actions_for_score(self, score: float) -> List[SuggestedAction]:
        return [a for a in self.actions if a.matches(score)]


def symptom_lookup(catalog) -> Mapping[str, Symptom]:
    """Accept a catalog as a mapping or any iterable of symptoms."""
    if isinstance(catalog, Mapping):
        return catalog
    return {s.id: s for s in catalog}


def natural_language_to_date(text: str, today: dt.date | None = None) -> dt.date:
    """Convert a typed date ("2024-01-01", "yesterday", "3 days ago") to a calendar date."""
    if today is None:
        today = dt.date.today()

    t = (text or "").strip().lower()
    if not t:
        raise DateParseError("Please enter a date, for example 2024-01-31")

    match = re.fullmatch(r"\d{4}-\d{2}-\d{2}", t)
    if match:
        try:
            return dt.date.fromisoformat(t)
        except ValueError as exc:
            raise DateParseError(f"Not a valid date: {text!r}") from exc

    if t == "today":
        return today
    if t == "yesterday":
        return today - dt.timedelta(days=1)

    parsed = dateparser.parse(
        t,
        settings={
            "RELATIVE_BASE": dt.datetime.combine(today, dt.time(12, 0)),
            "PREFER_DATES_FROM": "past",
        },
    )
    if parsed is not None:
        return parsed.date()
    try:
        return parse(t, default=dt.datetime.combine(today, dt.time())).date()
    except (ParserError, ValueError, OverflowError) as exc:
        raise DateParseError(f"Could not understand the date {text!r}") from exc
