from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

from tools.errors import NoSubmissionError, TrackerError
from tools.health_schema import Dataset, SuggestedAction
from tools.scoring import compute_day_score

__all__ = ["DaySummary", "ReportDescriptor", "list_days", "build_report"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaySummary:
    date: date
    score: Optional[float] = None
    fault: Optional[str] = None

    @property
    def display_score(self) -> str:
        return f"{self.score:.1f}" if self.score is not None else f"({self.fault})"


@dataclass
class ReportDescriptor:
    """Everything the report page shows for one date."""

    date: date
    lines: List[Tuple[str, int]]
    score: float
    actions: List[SuggestedAction] = field(default_factory=list)
    off_day: bool = False
    note_path: Optional[Path] = None


def list_days(dataset: Dataset) -> List[DaySummary]:
    """All recorded days, newest first, each with a freshly computed score.

    A day whose score cannot be computed is listed with the reason instead.
    """
    catalog = dataset.symptom_map()
    summaries = []
    for day in sorted(dataset.days, key=lambda d: d.date, reverse=True):
        try:
            summaries.append(DaySummary(date=day.date, score=compute_day_score(day, catalog)))
        except TrackerError as exc:
            logger.warning("Cannot score %s: %s", day.date, exc)
            summaries.append(DaySummary(date=day.date, fault=str(exc)))
    return summaries


def build_report(dataset: Dataset, day: date, notes=None) -> ReportDescriptor:
    record = dataset.get_day(day)
    if record is None or record.is_empty:
        raise NoSubmissionError(f"No submission found for {day.isoformat()}")

    catalog = dataset.symptom_map()
    score = compute_day_score(record, catalog)
    lines = sorted(
        ((catalog[r.symptom_id].name, r.value) for r in record.readings.values()),
        key=lambda line: line[0].lower(),
    )
    return ReportDescriptor(
        date=day,
        lines=lines,
        score=score,
        actions=dataset.actions_for_score(score),
        off_day=dataset.is_off_day(day),
        note_path=notes.note_path(day) if notes is not None else None,
    )
