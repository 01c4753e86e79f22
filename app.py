"""Symptom tracker: Gradio UI over the session page stack."""

from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, List

import gradio as gr

from db.notes import NoteBook
from db.paths import bootstrap, data_dir, notes_dir
from db.repository import Store
from tools.errors import DatasetError
from tools.survey import CHOICES
from ui import session as handlers
from ui.navigation import (
    PAGE_KINDS,
    ActionListPage,
    HistoryListPage,
    MainMenuPage,
    NoteEditorPage,
    ReportPage,
    SurveyFormPage,
    SymptomListPage,
)
from ui.session import Push, Session

logger = logging.getLogger(__name__)

DEFAULT_PORT = 7860


# ---------------------------------------------------------------------------
# Text formatting


def format_report(page: ReportPage) -> str:
    """Markdown for a report page."""

    title = f"### Report for {page.date.isoformat()}"
    report = page.report
    if report is None:
        return f"{title}\n\n{page.empty_reason or 'Nothing to show for this day.'}"

    parts = [title, "Here are your symptom submissions.", ""]
    parts.extend(f"- **{name}**: {value}" for name, value in report.lines)
    parts.append("")
    parts.append(f"Your overall score is **{report.score:.1f}**")
    if report.off_day:
        parts.append("\n_This was one of your off days._")
    if report.actions:
        parts.append("\n**Suggested actions**")
        parts.extend(f"- {a.name}" for a in report.actions)
    if report.note_path is not None:
        parts.append(f"\nDaily note: `{report.note_path}`")
    return "\n".join(parts)


def _history_rows(page: HistoryListPage) -> Dict[str, Any]:
    return {
        "headers": ["Date", "Score"],
        "data": [[e.date.isoformat(), e.display_score] for e in page.entries],
    }


def _symptom_rows(page: SymptomListPage) -> Dict[str, Any]:
    return {
        "headers": ["Name", "Id", "Polarity", "Weight"],
        "data": [
            [s.name, s.id, "Higher is better" if s.higher_is_better else "Lower is better", s.weight]
            for s in page.symptoms
        ],
    }


def _action_rows(page: ActionListPage) -> Dict[str, Any]:
    return {
        "headers": ["Action", "Min score", "Max score"],
        "data": [[a.name, a.min_score, a.max_score] for a in page.actions],
    }


def render_updates(session: Session, fresh: bool = False) -> List[Any]:
    """Component updates for the session's top page, in ``build_ui`` output order.

    Input widgets (survey radios, note text) are only overwritten when
    ``fresh`` is set, so a failed submit keeps what the user typed.
    """

    page = session.page
    symptoms = session.dataset.sorted_symptoms()
    message = session.message or ""
    if not session.running:
        message = "Goodbye! You can close this window."

    updates: List[Any] = [gr.update(value=message)]
    updates += [gr.update(visible=session.running and page.kind == kind) for kind in PAGE_KINDS]

    updates.append(gr.update(value=page.greeting) if isinstance(page, MainMenuPage) else gr.update())

    if isinstance(page, SurveyFormPage) and fresh:
        initial = page.form.initial_selections()
        updates.append(gr.update(value=f"### How are you on {page.form.date.isoformat()}?"))
        updates += [gr.update(value=initial.get(s.id)) for s in symptoms]
    else:
        updates.append(gr.update())
        updates += [gr.update() for _ in symptoms]

    updates.append(gr.update(value=format_report(page)) if isinstance(page, ReportPage) else gr.update())
    updates.append(gr.update(value=_history_rows(page)) if isinstance(page, HistoryListPage) else gr.update())

    if isinstance(page, NoteEditorPage):
        updates.append(gr.update(value=f"### Note for {page.date.isoformat()}"))
        updates.append(gr.update(value=page.text) if fresh else gr.update())
    else:
        updates += [gr.update(), gr.update()]

    updates.append(gr.update(value=_symptom_rows(page)) if isinstance(page, SymptomListPage) else gr.update())
    updates.append(gr.update(value=_action_rows(page)) if isinstance(page, ActionListPage) else gr.update())
    return updates


# ---------------------------------------------------------------------------
# Gradio UI


def build_ui(session: Session) -> gr.Blocks:
    """Build the Blocks app. One column per page kind; only the top page's column is visible."""

    symptoms = session.dataset.sorted_symptoms()
    columns: Dict[str, gr.Column] = {}

    with gr.Blocks(title="Symptom Tracker") as demo:
        message_md = gr.Markdown()

        with gr.Column(visible=True) as columns[MainMenuPage.kind]:
            greeting_md = gr.Markdown()
            track_btn = gr.Button("Track Symptoms", variant="primary")
            today_btn = gr.Button("Today's Report")
            note_btn = gr.Button("Edit Daily Note")
            history_btn = gr.Button("View Previous Days")
            symptoms_btn = gr.Button("My Symptoms")
            actions_btn = gr.Button("My Suggested Actions")
            quit_btn = gr.Button("Quit", variant="stop")

        with gr.Column(visible=False) as columns[SurveyFormPage.kind]:
            survey_md = gr.Markdown()
            radios = [gr.Radio(choices=list(CHOICES), label=s.name) for s in symptoms]
            submit_btn = gr.Button("Submit", variant="primary")
            survey_back_btn = gr.Button("Back")

        with gr.Column(visible=False) as columns[ReportPage.kind]:
            report_md = gr.Markdown()
            report_note_btn = gr.Button("Open note for this day")
            report_back_btn = gr.Button("Back")

        with gr.Column(visible=False) as columns[HistoryListPage.kind]:
            gr.Markdown("### Previous days\nSelect a row to open its report.")
            history_df = gr.Dataframe(headers=["Date", "Score"], interactive=False)
            history_date = gr.Textbox(label="Or type a date", placeholder="2024-01-31, yesterday, 3 days ago")
            history_open_btn = gr.Button("Open report")
            history_back_btn = gr.Button("Back")

        with gr.Column(visible=False) as columns[NoteEditorPage.kind]:
            note_md = gr.Markdown()
            note_text = gr.Textbox(lines=15, label="Note")
            note_save_btn = gr.Button("Save", variant="primary")
            note_back_btn = gr.Button("Back")

        with gr.Column(visible=False) as columns[SymptomListPage.kind]:
            gr.Markdown("### My symptoms")
            symptoms_df = gr.Dataframe(headers=["Name", "Id", "Polarity", "Weight"], interactive=False)
            symptoms_back_btn = gr.Button("Back")

        with gr.Column(visible=False) as columns[ActionListPage.kind]:
            gr.Markdown("### My suggested actions")
            actions_df = gr.Dataframe(headers=["Action", "Min score", "Max score"], interactive=False)
            actions_back_btn = gr.Button("Back")

        outputs: List[Any] = [message_md]
        outputs += [columns[kind] for kind in PAGE_KINDS]
        outputs += [greeting_md, survey_md, *radios, report_md, history_df, note_md, note_text]
        outputs += [symptoms_df, actions_df]

        def render(transition=None) -> List[Any]:
            return render_updates(session, fresh=isinstance(transition, Push))

        def reload() -> List[Any]:
            # A new browser tab starts with empty inputs; refill them from the page.
            return render_updates(session, fresh=True)

        def run(handler, *event):
            return render(session.dispatch(handler, *event))

        def on_submit(*values):
            selections = {s.id: v for s, v in zip(symptoms, values)}
            return run(handlers.submit_survey, selections)

        def on_history_select(evt: gr.SelectData):
            page = session.page
            row = evt.index[0] if isinstance(evt.index, (list, tuple)) else evt.index
            if not isinstance(page, HistoryListPage) or not 0 <= row < len(page.entries):
                return render()
            return run(handlers.open_report, page.entries[row].date)

        def on_report_note():
            page = session.page
            return run(handlers.open_note, page.date if isinstance(page, ReportPage) else None)

        track_btn.click(lambda: run(handlers.open_survey), outputs=outputs)
        today_btn.click(lambda: run(handlers.open_report), outputs=outputs)
        note_btn.click(lambda: run(handlers.open_note), outputs=outputs)
        history_btn.click(lambda: run(handlers.open_history), outputs=outputs)
        symptoms_btn.click(lambda: run(handlers.open_symptoms), outputs=outputs)
        actions_btn.click(lambda: run(handlers.open_actions), outputs=outputs)
        quit_btn.click(lambda: run(handlers.quit_session), outputs=outputs)

        submit_btn.click(on_submit, inputs=radios, outputs=outputs)
        report_note_btn.click(on_report_note, outputs=outputs)
        history_df.select(on_history_select, outputs=outputs)
        history_open_btn.click(lambda text: run(handlers.open_report_for, text), inputs=[history_date], outputs=outputs)
        note_save_btn.click(lambda text: run(handlers.save_note, text), inputs=[note_text], outputs=outputs)

        for back in (
            survey_back_btn,
            report_back_btn,
            history_back_btn,
            note_back_btn,
            symptoms_back_btn,
            actions_back_btn,
        ):
            back.click(lambda: run(handlers.go_back), outputs=outputs)

        demo.load(reload, outputs=outputs)

    return demo


# ---------------------------------------------------------------------------
# Entry point


def main() -> int:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    root = data_dir()
    store = Store(bootstrap(root))
    try:
        session = Session.start(store, NoteBook(notes_dir(root)))
    except DatasetError as exc:
        logger.error("Cannot start: %s", exc)
        return 1

    port = int(os.getenv("SYMPTOM_TRACKER_PORT", DEFAULT_PORT))
    demo = build_ui(session)
    demo.queue(default_concurrency_limit=1)
    demo.launch(server_name="127.0.0.1", server_port=port, inbrowser=True, prevent_thread_lock=True)
    logger.info("Symptom tracker running on http://127.0.0.1:%d", port)
    try:
        while session.running:
            time.sleep(0.5)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        demo.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
