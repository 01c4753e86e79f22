"""Daily wellness score."""

from __future__ import annotations

from typing import Iterable, Mapping, Union

from tools.errors import NoDataError, UnknownSymptomError
from tools.health_schema import Day, Symptom, symptom_lookup

__all__ = ["compute_day_score"]

Catalog = Union[Mapping[str, Symptom], Iterable[Symptom]]


def compute_day_score(day: Day, catalog: Catalog) -> float:
    """Weighted average of a day's readings on a 0-10 "higher is better" scale.

    Each raw value is flipped (``10 - value``) for symptoms where lower is
    healthier, multiplied by the symptom weight, and the total is divided by
    the sum of the weights used. The result is rounded to one decimal place.

    Raises:
        NoDataError: the day has no readings.
        UnknownSymptomError: a reading refers to a symptom missing from ``catalog``.
    """
    if not day.readings:
        raise NoDataError(f"No readings recorded for {day.date.isoformat()}")

    symptoms = symptom_lookup(catalog)
    total = 0.0
    weight_sum = 0.0
    # Sorted so the float sum does not depend on insertion order.
    for symptom_id in sorted(day.readings):
        symptom = symptoms.get(symptom_id)
        if symptom is None:
            raise UnknownSymptomError(symptom_id)
        value = symptom.normalise(day.readings[symptom_id].value)
        total += value * symptom.weight
        weight_sum += symptom.weight

    return round(total / weight_sum, 1)
