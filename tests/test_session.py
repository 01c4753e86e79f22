import json
import sys
from datetime import date
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from db.repository import Store
from tools.errors import ValidationError
from tools.history import list_days
from tools.survey import NO_ANSWER
from ui import session as handlers
from ui.navigation import (
    ActionListPage,
    HistoryListPage,
    MainMenuPage,
    NoteEditorPage,
    ReportPage,
    SurveyFormPage,
    SymptomListPage,
)
from ui.session import Pop, Push, Quit, ReplaceTop, Session

TODAY = date(2024, 1, 1)


@pytest.fixture()
def session(store, notes):
    return Session.start(store, notes, today=lambda: TODAY)


def test_start_shows_main_menu(session):
    assert isinstance(session.page, MainMenuPage)
    assert session.stack.depth == 1
    assert "Hello Sam" in session.page.greeting
    assert "2024-01-01" in session.page.greeting


def test_greeting_mentions_off_day(store, notes):
    saturday = Session.start(store, notes, today=lambda: date(2024, 1, 6))
    assert "off days" in saturday.page.greeting


def test_invalid_dataset_never_starts(tmp_path, sample_doc, notes):
    sample_doc["symptoms"][0]["weight"] = 2
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(sample_doc))
    with pytest.raises(ValidationError):
        Session.start(Store(path), notes)


def test_submit_replaces_form_with_report(session, store):
    assert isinstance(session.dispatch(handlers.open_survey), Push)
    form_page = session.page
    assert isinstance(form_page, SurveyFormPage)
    assert form_page.focus == "survey:mood"
    assert session.dataset.get_day(TODAY) is None

    transition = session.dispatch(handlers.submit_survey, {"sleep": "2", "mood": "8"})

    assert isinstance(transition, ReplaceTop)
    assert isinstance(session.page, ReportPage)
    assert session.page.report.score == 8.0
    assert session.stack.depth == 2
    assert not form_page.visible
    assert len(session.stack.visible_pages()) == 1

    # persisted and visible after a restart
    assert store.load().get_day(TODAY).readings["sleep"].value == 2

    session.dispatch(handlers.go_back)
    assert isinstance(session.page, MainMenuPage)


def test_bad_submit_keeps_form_and_shows_message(session, store):
    session.dispatch(handlers.open_survey)
    form_page = session.page

    assert session.dispatch(handlers.submit_survey, {"sleep": "eleven"}) is None

    assert session.page is form_page
    assert "Sleep" in session.message
    assert store.load().get_day(TODAY) is None


def test_submit_with_everything_unanswered_shows_empty_report(session):
    session.dispatch(handlers.open_survey)
    session.dispatch(handlers.submit_survey, {"sleep": NO_ANSWER, "mood": NO_ANSWER})

    page = session.page
    assert isinstance(page, ReportPage)
    assert page.report is None
    assert "No submission" in page.empty_reason
    assert [s.fault is not None for s in list_days(session.dataset)] == [True]


def test_report_errors_leave_stack_alone(session):
    assert session.dispatch(handlers.open_report) is None
    assert "No submission" in session.message
    assert session.stack.depth == 1

    session.dispatch(handlers.open_history)
    assert session.dispatch(handlers.open_report_for, "blorp") is None
    assert isinstance(session.page, HistoryListPage)
    assert session.message


def test_message_clears_on_next_action(session):
    session.dispatch(handlers.open_report)
    assert session.message
    session.dispatch(handlers.open_symptoms)
    assert session.message is None


def test_history_then_report_then_back(session):
    session.dispatch(handlers.open_survey, date(2023, 12, 31))
    session.dispatch(handlers.submit_survey, {"sleep": "4"})
    session.dispatch(handlers.go_back)

    session.dispatch(handlers.open_history)
    history = session.page
    assert [e.date for e in history.entries] == [date(2023, 12, 31)]

    session.dispatch(handlers.open_report_for, "2023-12-31")
    assert isinstance(session.page, ReportPage)
    assert session.page.report.lines == [("Sleep", 4)]

    session.dispatch(handlers.go_back)
    assert session.page is history
    assert history.focus == "history:table"


def test_note_save_writes_file_and_dataset(session, notes, store, monkeypatch):
    saves = []
    original = store.save
    monkeypatch.setattr(store, "save", lambda ds: saves.append(ds) or original(ds))

    session.dispatch(handlers.open_note)
    page = session.page
    assert isinstance(page, NoteEditorPage)
    assert page.text == ""

    transition = session.dispatch(handlers.save_note, "slept badly")
    assert transition.message == "Note for 2024-01-01 saved."
    assert session.message == transition.message
    assert notes.read_note(TODAY) == "slept badly"
    assert len(saves) == 1
    assert session.page is page


def test_catalog_and_action_pages(session):
    session.dispatch(handlers.open_symptoms)
    assert isinstance(session.page, SymptomListPage)
    assert [s.name for s in session.page.symptoms] == ["Mood", "Sleep"]
    session.dispatch(handlers.go_back)

    session.dispatch(handlers.open_actions)
    assert isinstance(session.page, ActionListPage)
    assert [a.name for a in session.page.actions] == ["Rest", "Walk"]


def test_back_on_main_menu_and_quit(session):
    assert isinstance(session.dispatch(handlers.go_back), Pop)
    assert session.stack.depth == 1
    assert isinstance(session.dispatch(handlers.quit_session), Quit)
    assert session.running is False


def test_submit_without_form_is_a_programming_error(session):
    with pytest.raises(TypeError):
        session.dispatch(handlers.submit_survey, {})
