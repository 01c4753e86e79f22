"""Locations of the data file and notes directory."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

APP_NAME = "symptom-tracker"
DATA_FILE_NAME = "data.json"
NOTES_DIR_NAME = "notes"

# Written on first run when no data file exists yet.
STARTER_DATASET = {
    "profile": {"name": "friend", "offDays": []},
    "symptoms": [
        {"id": "sleep", "name": "Sleep quality", "higherIsBetter": True, "weight": 1},
        {"id": "energy", "name": "Energy", "higherIsBetter": True, "weight": 0.8},
        {"id": "pain", "name": "Pain", "higherIsBetter": False, "weight": 1},
        {"id": "stress", "name": "Stress", "higherIsBetter": False, "weight": 0.5},
    ],
    "actions": [
        {"name": "Take it easy and rest today", "minScore": 0, "maxScore": 4},
        {"name": "Go for a short walk", "minScore": 4, "maxScore": 7},
        {"name": "Keep doing what you're doing", "minScore": 7, "maxScore": 10},
    ],
    "days": [],
}


def data_dir() -> Path:
    """Return the per-application data directory.

    ``SYMPTOM_TRACKER_HOME`` wins; otherwise ``$XDG_CONFIG_HOME/symptom-tracker``
    or ``~/.config/symptom-tracker``.
    """
    env_path = os.environ.get("SYMPTOM_TRACKER_HOME")
    if env_path:
        return Path(env_path).expanduser().resolve()
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home).expanduser() if config_home else Path.home() / ".config"
    return (base / APP_NAME).resolve()


def data_path(root: Path | None = None) -> Path:
    return (root or data_dir()) / DATA_FILE_NAME


def notes_dir(root: Path | None = None) -> Path:
    return (root or data_dir()) / NOTES_DIR_NAME


def bootstrap(root: Path | None = None) -> Path:
    """Create the data directory, notes directory and a starter data file if missing.

    Returns the path of the data file.
    """
    root = root or data_dir()
    root.mkdir(parents=True, exist_ok=True)
    notes_dir(root).mkdir(parents=True, exist_ok=True)

    path = data_path(root)
    if not path.exists():
        from db.repository import write_document  # avoid import cycle

        write_document(path, STARTER_DATASET)
        logger.info("Created starter data file at %s", path)
    return path
