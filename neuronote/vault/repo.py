# neuronote/vault/repo.py

from __future__ import annotations

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Iterable

from neuronote.core.models import Note
from neuronote.settings import DATA_FILE

log = logging.getLogger(__name__)


# ───────────────────────── file helpers ─────────────────────────

def atomic_write_text(
    path: Path,
    text: str,
    *,
    encoding: str = "utf-8",
) -> None:
    """
    Atomic-ish file write:
    - write to temp file in same directory
    - fsync
    - replace()

    A crash mid-write leaves the previous notes file intact.
    """
    path = Path(path)
    parent = path.parent
    parent.mkdir(parents=True, exist_ok=True)

    tmp_path = parent / f".{path.name}.tmp-{uuid.uuid4().hex}"

    try:
        with open(tmp_path, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def read_notes_file(path: Path) -> list[Note]:
    """Parse a notes file. Raises on unreadable or malformed content."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array in {path}")
    return [Note.from_dict(item) for item in data]


def dump_notes(notes: Iterable[Note]) -> str:
    return json.dumps([n.to_dict() for n in notes], ensure_ascii=False, indent=2)


# ───────────────────────── repository ─────────────────────────

class NoteRepository:
    """
    Notes stored as one JSON array on disk.

    load_all()/save_all() never raise: failures are logged and reported as
    an empty list / False so the caller keeps its in-memory state.
    """

    def __init__(self, path: Path | str = DATA_FILE):
        self.path = Path(path)

    def load_all(self) -> list[Note]:
        if not self.path.exists():
            log.info("Notes file missing, starting empty: %s", self.path)
            return []
        try:
            notes = read_notes_file(self.path)
        except (OSError, ValueError, KeyError, TypeError):
            log.exception("Failed to load notes from %s", self.path)
            return []
        log.info("Loaded %d notes from %s", len(notes), self.path)
        return notes

    def save_all(self, notes: Iterable[Note]) -> bool:
        try:
            atomic_write_text(self.path, dump_notes(notes))
        except (OSError, TypeError, ValueError):
            log.exception("Failed to save notes to %s", self.path)
            return False
        return True
