"""Survey form: build an editable form for a date and reconcile it on submit."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional

from tools.errors import FormValidationError
from tools.health_schema import MAX_VALUE, MIN_VALUE, Dataset, Day, TrackedReading

__all__ = ["NO_ANSWER", "CHOICES", "FormField", "FormDescriptor", "build_form", "decode_selection", "submit"]

logger = logging.getLogger(__name__)

NO_ANSWER = "No answer"
CHOICES: tuple = (NO_ANSWER,) + tuple(str(v) for v in range(MIN_VALUE, MAX_VALUE + 1))


@dataclass(frozen=True)
class FormField:
    symptom_id: str
    label: str
    initial: str
    choices: tuple = CHOICES


@dataclass
class FormDescriptor:
    """A survey form for one date.

    ``draft`` is a detached copy of the day; the dataset does not see it
    until :func:`submit` succeeds.
    """

    date: date
    draft: Day
    fields: List[FormField] = field(default_factory=list)

    def initial_selections(self) -> Dict[str, str]:
        return {f.symptom_id: f.initial for f in self.fields}


def build_form(dataset: Dataset, day: date) -> FormDescriptor:
    existing = dataset.get_day(day)
    draft = existing.model_copy(deep=True) if existing is not None else Day(date=day)

    fields = []
    for symptom in dataset.sorted_symptoms():
        reading = draft.readings.get(symptom.id)
        initial = str(reading.value) if reading is not None else NO_ANSWER
        fields.append(FormField(symptom_id=symptom.id, label=symptom.name, initial=initial))
    return FormDescriptor(date=day, draft=draft, fields=fields)


def decode_selection(selection) -> Optional[int]:
    """Return the selected value, or ``None`` for "no answer".

    Raises ValueError for anything that is not "no answer" or an integer in 0-10.
    """
    if selection is None:
        return None
    if isinstance(selection, bool):
        raise ValueError(f"Not a score: {selection!r}")
    if isinstance(selection, int):
        value = selection
    else:
        text = str(selection).strip()
        if not text or text == NO_ANSWER:
            return None
        value = int(text)
    if not MIN_VALUE <= value <= MAX_VALUE:
        raise ValueError(f"{value} is outside {MIN_VALUE}-{MAX_VALUE}")
    return value


def reconcile(form: FormDescriptor, selections: Mapping[str, object]) -> Dict[str, TrackedReading]:
    """Compute the new reading set. Does not touch the form's draft."""
    readings = {key: r.model_copy() for key, r in form.draft.readings.items()}
    bad: List[str] = []
    for f in form.fields:
        raw = selections.get(f.symptom_id, f.initial)
        try:
            value = decode_selection(raw)
        except (TypeError, ValueError):
            bad.append(f.symptom_id)
            continue
        if value is None:
            readings.pop(f.symptom_id, None)
        elif f.symptom_id in readings:
            readings[f.symptom_id].value = value
        else:
            readings[f.symptom_id] = TrackedReading(symptom_id=f.symptom_id, value=value)

    if bad:
        labels = {f.symptom_id: f.label for f in form.fields}
        names = ", ".join(labels[b] for b in bad)
        raise FormValidationError(
            f"Please pick a value from 0 to 10 or '{NO_ANSWER}' for: {names}", bad
        )
    return readings


def submit(dataset: Dataset, form: FormDescriptor, selections: Mapping[str, object], store) -> Day:
    """Apply ``selections`` to the day for ``form.date`` and persist the dataset.

    Either every field is applied and saved, or nothing changes.
    """
    readings = reconcile(form, selections)
    day = Day(date=form.date, readings=readings)

    previous = dataset.put_day(day)
    try:
        store.save(dataset)
    except Exception:
        if previous is None:
            dataset.remove_day(form.date)
        else:
            dataset.put_day(previous)
        logger.exception("Saving survey for %s failed; changes rolled back", form.date)
        raise

    form.draft = day.model_copy(deep=True)
    logger.info("Submitted survey for %s with %d readings", form.date, len(readings))
    return day
