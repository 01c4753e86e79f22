"""
Pages and the page stack.

A page is one screen's worth of content. Only the top page of the stack is
visible; covering a page hides it and uncovering it shows it again with the
focus it had before.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import ClassVar, Iterator, List, Optional

from tools.health_schema import SuggestedAction, Symptom
from tools.history import DaySummary, ReportDescriptor
from tools.survey import FormDescriptor

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Page:
    kind: ClassVar[str] = "page"

    visible: bool = field(default=False, init=False)
    focus: Optional[str] = field(default=None, init=False)

    def show(self, focus: Optional[str] = None) -> None:
        self.visible = True
        if focus is not None:
            self.focus = focus

    def hide(self) -> None:
        self.visible = False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} visible={self.visible} focus={self.focus!r}>"


@dataclass(eq=False, repr=False)
class MainMenuPage(Page):
    kind: ClassVar[str] = "main_menu"

    greeting: str = ""


@dataclass(eq=False, repr=False)
class SurveyFormPage(Page):
    kind: ClassVar[str] = "survey_form"

    form: Optional[FormDescriptor] = None


@dataclass(eq=False, repr=False)
class ReportPage(Page):
    """Report for one date; ``report`` is None when there is nothing to show."""

    kind: ClassVar[str] = "report"

    date: Optional[date] = None
    report: Optional[ReportDescriptor] = None
    empty_reason: Optional[str] = None


@dataclass(eq=False, repr=False)
class HistoryListPage(Page):
    kind: ClassVar[str] = "history_list"

    entries: List[DaySummary] = field(default_factory=list)


@dataclass(eq=False, repr=False)
class NoteEditorPage(Page):
    kind: ClassVar[str] = "note_editor"

    date: Optional[date] = None
    text: str = ""


@dataclass(eq=False, repr=False)
class SymptomListPage(Page):
    kind: ClassVar[str] = "symptom_list"

    symptoms: List[Symptom] = field(default_factory=list)


@dataclass(eq=False, repr=False)
class ActionListPage(Page):
    kind: ClassVar[str] = "action_list"

    actions: List[SuggestedAction] = field(default_factory=list)


PAGE_KINDS = tuple(
    cls.kind
    for cls in (
        MainMenuPage,
        SurveyFormPage,
        ReportPage,
        HistoryListPage,
        NoteEditorPage,
        SymptomListPage,
        ActionListPage,
    )
)


class NavigationStack:
    """History of the pages the user drilled into. The bottom page is never popped."""

    def __init__(self) -> None:
        self._pages: List[Page] = []

    @property
    def top(self) -> Optional[Page]:
        return self._pages[-1] if self._pages else None

    @property
    def depth(self) -> int:
        return len(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(self._pages)

    def visible_pages(self) -> List[Page]:
        return [p for p in self._pages if p.visible]

    def push_page(self, page: Page, focus: Optional[str] = None) -> None:
        if self._pages:
            self._pages[-1].hide()
        self._pages.append(page)
        page.show(focus)
        logger.debug("push %s (depth %d)", page.kind, len(self._pages))

    def pop_page(self, focus: Optional[str] = None) -> None:
        if len(self._pages) <= 1:
            return
        gone = self._pages.pop()
        gone.hide()
        self._pages[-1].show(focus)
        logger.debug("pop %s -> %s", gone.kind, self._pages[-1].kind)

    def replace_top(self, page: Page, focus: Optional[str] = None) -> None:
        """Swap the top page for ``page`` without uncovering the page beneath."""
        if self._pages:
            self._pages.pop().hide()
        self._pages.append(page)
        page.show(focus)
        logger.debug("replace top with %s (depth %d)", page.kind, len(self._pages))
