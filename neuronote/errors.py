from __future__ import annotations


class NeuroNoteError(Exception):
    """Base class for errors raised by neuronote."""


class NoteNotFoundError(NeuroNoteError):
    def __init__(self, note_id: str):
        self.note_id = note_id
        super().__init__(f"Note not found: {note_id}")


class LastNoteError(NeuroNoteError):
    """Raised when deleting the only remaining note."""

    def __init__(self):
        super().__init__("Cannot delete the last note.")


class StaleRangeError(NeuroNoteError):
    """The caret range captured when a menu opened no longer points at its trigger."""


class UnlinkableTitleError(NeuroNoteError, ValueError):
    """The title would not survive being written as a [[wiki-link]]."""

    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Title cannot be linked: {title!r}")
