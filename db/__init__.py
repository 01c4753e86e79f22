from .repository import Store, load, save  # noqa: F401
from .notes import NoteBook  # noqa: F401
from .paths import bootstrap, data_dir, data_path, notes_dir  # noqa: F401

__all__ = [
    "Store",
    "NoteBook",
    "load",
    "save",
    "bootstrap",
    "data_dir",
    "data_path",
    "notes_dir",
]
