"""
The interactive session: one owned object holding the dataset, the store and
the page stack, plus the handlers for every user action.

Handlers take the session and the event payload and return a transition. They
never touch the stack themselves; :meth:`Session.dispatch` applies the
transition, and turns tracker errors into a message without unwinding the
stack.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Mapping, Optional, Union

from db.notes import NoteBook
from db.repository import Store
from tools.errors import TrackerError
from tools.health_schema import Dataset, natural_language_to_date
from tools.history import build_report, list_days
from tools.survey import build_form, submit
from ui.navigation import (
    ActionListPage,
    HistoryListPage,
    MainMenuPage,
    NavigationStack,
    NoteEditorPage,
    Page,
    ReportPage,
    SurveyFormPage,
    SymptomListPage,
)

logger = logging.getLogger(__name__)


# ---------- transitions -----------------------------------------------


@dataclass(frozen=True)
class Push:
    page: Page
    focus: Optional[str] = None


@dataclass(frozen=True)
class Pop:
    focus: Optional[str] = None


@dataclass(frozen=True)
class ReplaceTop:
    page: Page
    focus: Optional[str] = None


@dataclass(frozen=True)
class Stay:
    message: Optional[str] = None


@dataclass(frozen=True)
class Quit:
    pass


Transition = Union[Push, Pop, ReplaceTop, Stay, Quit]


# ---------- session ---------------------------------------------------


class Session:
    def __init__(
        self,
        dataset: Dataset,
        store: Store,
        notes: NoteBook,
        today: Callable[[], date] = date.today,
    ):
        self.dataset = dataset
        self.store = store
        self.notes = notes
        self.stack = NavigationStack()
        self.message: Optional[str] = None
        self.running = True
        self._today = today

    @classmethod
    def start(cls, store: Store, notes: NoteBook, today: Callable[[], date] = date.today) -> "Session":
        """Load the dataset and show the main menu.

        Dataset errors propagate: the session never starts on invalid data.
        """
        session = cls(store.load(), store, notes, today=today)
        session.stack.push_page(MainMenuPage(greeting=session.greeting()), focus="menu:track")
        return session

    def today(self) -> date:
        return self._today()

    def greeting(self) -> str:
        today = self.today()
        text = (
            f"Hello {self.dataset.profile.name}, today's date is {today.isoformat()}. "
            "What would you like to do?"
        )
        if self.dataset.is_off_day(today):
            text += " Today is one of your off days."
        return text

    @property
    def page(self) -> Page:
        return self.stack.top

    def apply(self, transition: Transition) -> None:
        if isinstance(transition, Push):
            self.stack.push_page(transition.page, transition.focus)
        elif isinstance(transition, Pop):
            self.stack.pop_page(transition.focus)
        elif isinstance(transition, ReplaceTop):
            self.stack.replace_top(transition.page, transition.focus)
        elif isinstance(transition, Stay):
            self.message = transition.message
        elif isinstance(transition, Quit):
            self.running = False
            logger.info("Session ended")
        else:
            raise TypeError(f"Unknown transition: {transition!r}")

    def dispatch(self, handler: Callable[..., Transition], *event) -> Optional[Transition]:
        """Run ``handler(self, *event)`` and apply the transition it returns."""
        self.message = None
        try:
            transition = handler(self, *event)
        except TrackerError as exc:
            logger.warning("%s failed: %s", handler.__name__, exc)
            self.message = str(exc)
            return None
        except Exception:
            logger.exception("%s failed unexpectedly", handler.__name__)
            raise
        self.apply(transition)
        return transition


# ---------- handlers --------------------------------------------------


def open_survey(session: Session, day: Optional[date] = None) -> Transition:
    form = build_form(session.dataset, day or session.today())
    focus = f"survey:{form.fields[0].symptom_id}" if form.fields else None
    return Push(SurveyFormPage(form=form), focus=focus)


def submit_survey(session: Session, selections: Mapping[str, object]) -> Transition:
    page = session.page
    if not isinstance(page, SurveyFormPage):
        raise TypeError(f"No survey form is open (top page is {page.kind})")

    day = submit(session.dataset, page.form, selections, session.store)
    return ReplaceTop(_report_page(session, day.date), focus="report:back")


def open_report(session: Session, day: Optional[date] = None) -> Transition:
    day = day or session.today()
    report = build_report(session.dataset, day, session.notes)
    return Push(ReportPage(date=day, report=report), focus="report:back")


def open_report_for(session: Session, text: str) -> Transition:
    return open_report(session, natural_language_to_date(text, today=session.today()))


def open_history(session: Session) -> Transition:
    return Push(HistoryListPage(entries=list_days(session.dataset)), focus="history:table")


def open_note(session: Session, day: Optional[date] = None) -> Transition:
    day = day or session.today()
    return Push(NoteEditorPage(date=day, text=session.notes.read_note(day)), focus="note:text")


def save_note(session: Session, text: str) -> Transition:
    page = session.page
    if not isinstance(page, NoteEditorPage):
        raise TypeError(f"No note is open (top page is {page.kind})")

    session.notes.write_note(page.date, text)
    session.store.save(session.dataset)
    page.text = text
    return Stay(f"Note for {page.date.isoformat()} saved.")


def open_symptoms(session: Session) -> Transition:
    return Push(SymptomListPage(symptoms=session.dataset.sorted_symptoms()), focus="back")


def open_actions(session: Session) -> Transition:
    actions = sorted(session.dataset.actions, key=lambda a: (a.min_score, a.max_score, a.name))
    return Push(ActionListPage(actions=actions), focus="back")


def go_back(session: Session) -> Transition:
    return Pop()


def quit_session(session: Session) -> Transition:
    return Quit()


def _report_page(session: Session, day: date) -> ReportPage:
    try:
        return ReportPage(date=day, report=build_report(session.dataset, day, session.notes))
    except TrackerError as exc:
        return ReportPage(date=day, empty_reason=str(exc))
