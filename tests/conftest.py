import copy
import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from db.notes import NoteBook
from db.repository import Store
from tools.health_schema import Dataset

SAMPLE_DOC = {
    "profile": {"name": "Sam", "offDays": ["saturday"]},
    "symptoms": [
        {"id": "sleep", "name": "Sleep", "higherIsBetter": False, "weight": 1},
        {"id": "mood", "name": "Mood", "higherIsBetter": True, "weight": 0.5},
    ],
    "actions": [
        {"name": "Rest", "minScore": 0, "maxScore": 5},
        {"name": "Walk", "minScore": 5, "maxScore": 10},
    ],
    "days": [],
}


class RecordingStore:
    """Stands in for Store; counts saves and can be told to fail."""

    def __init__(self, fail: bool = False):
        self.saved = []
        self.fail = fail

    def save(self, dataset):
        if self.fail:
            raise OSError("disk full")
        self.saved.append(dataset.model_dump_json(by_alias=True))


@pytest.fixture()
def sample_doc():
    return copy.deepcopy(SAMPLE_DOC)


@pytest.fixture()
def dataset(sample_doc):
    return Dataset.model_validate(sample_doc)


@pytest.fixture()
def recording_store():
    return RecordingStore()


@pytest.fixture()
def data_file(tmp_path, sample_doc):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(sample_doc), encoding="utf-8")
    return path


@pytest.fixture()
def store(data_file):
    return Store(data_file)


@pytest.fixture()
def notes(tmp_path):
    return NoteBook(tmp_path / "notes")


@pytest.fixture()
def failing_store():
    return RecordingStore(fail=True)
