"""Per-date free-text notes, one markdown file per day."""

import logging
from datetime import date
from pathlib import Path

from db.paths import notes_dir
from db.repository import write_text_atomic

logger = logging.getLogger(__name__)


class NoteBook:
    def __init__(self, root: Path | str | None = None):
        self.root = Path(root) if root is not None else notes_dir()

    def note_path(self, day: date) -> Path:
        return self.root / f"{day.isoformat()}.md"

    def read_note(self, day: date) -> str:
        """Return the note for ``day``, creating an empty file on first access."""
        path = self.note_path(day)
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
            logger.info("Created empty note %s", path)
            return ""
        return path.read_text(encoding="utf-8")

    def write_note(self, day: date, text: str) -> None:
        path = self.note_path(day)
        write_text_atomic(path, text)
        logger.info("Saved note %s (%d chars)", path, len(text))
