"""
Load and save the dataset document.

The whole dataset lives in one JSON file. Saves go to a temporary file in the
same directory which then replaces the target, so a crash mid-write leaves the
previous file in place.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from db.paths import data_path
from tools.errors import SchemaError
from tools.health_schema import Dataset

logger = logging.getLogger(__name__)


def write_document(path: Path, document: Any) -> None:
    """Atomically write ``document`` (a JSON string or JSON-able object) to ``path``."""
    text = document if isinstance(document, str) else json.dumps(document, indent=2)
    write_text_atomic(path, text)


def write_text_atomic(path: Path, text: str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def load(path: Path | str | None = None) -> Dataset:
    """
    Read and validate the dataset.

    Raises:
        SchemaError: the file is unreadable, not JSON, or has the wrong structure.
        ValidationError: a symptom weight is outside (0, 1], or symptom ids or
            day dates are not unique.
    """
    path = Path(path) if path is not None else data_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaError(f"Cannot read data file {path}: {exc}") from exc

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Data file {path} is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise SchemaError(f"Data file {path} must contain a JSON object")

    try:
        dataset = Dataset.model_validate(document)
    except PydanticValidationError as exc:
        raise SchemaError(f"Error processing data file {path}: {exc}") from exc

    dataset.check_invariants()
    logger.info(
        "Loaded %d symptoms, %d days from %s", len(dataset.symptoms), len(dataset.days), path
    )
    return dataset


def save(dataset: Dataset, path: Path | str | None = None) -> None:
    """Persist the full dataset atomically."""
    path = Path(path) if path is not None else data_path()
    write_document(path, dataset.model_dump_json(by_alias=True, indent=2))
    logger.info("Saved dataset (%d days) to %s", len(dataset.days), path)


class Store:
    """The dataset file the session reads from and writes to."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path is not None else data_path()

    def load(self) -> Dataset:
        return load(self.path)

    def save(self, dataset: Dataset) -> None:
        save(dataset, self.path)

    def __repr__(self) -> str:
        return f"Store({str(self.path)!r})"

