"""Error taxonomy for the symptom tracker."""

from __future__ import annotations

from typing import Iterable

__all__ = [
    "TrackerError",
    "DatasetError",
    "SchemaError",
    "ValidationError",
    "NothingToShowError",
    "NoDataError",
    "NoSubmissionError",
    "UnknownSymptomError",
    "FormValidationError",
    "DateParseError",
]


class TrackerError(Exception):
    """Base class for every error raised by the tracker."""


class DatasetError(TrackerError):
    """The dataset file is unusable. Fatal at startup."""


class SchemaError(DatasetError):
    """The dataset document cannot be parsed into the expected structure."""


class ValidationError(DatasetError):
    """The dataset parsed but violates an invariant (weights, unique keys)."""


class NothingToShowError(TrackerError):
    """Recoverable: there is no data for what the user asked to see."""


class NoDataError(NothingToShowError):
    """A score was requested for a day without readings."""


class NoSubmissionError(NothingToShowError):
    """A report was requested for a date that has no submission."""


class UnknownSymptomError(TrackerError):
    """A reading references a symptom id missing from the catalog."""

    def __init__(self, symptom_id: str):
        super().__init__(f"Unknown symptom id: {symptom_id!r}")
        self.symptom_id = symptom_id


class FormValidationError(TrackerError):
    """A survey form selection could not be decoded."""

    def __init__(self, message: str, field_ids: Iterable[str] = ()):
        super().__init__(message)
        self.field_ids = list(field_ids)


class DateParseError(TrackerError):
    """A user-entered date could not be understood."""
