from .collection import NoteCollection
from .remote import RemoteNoteRepository
from .repo import NoteRepository, atomic_write_text

__all__ = ["NoteCollection",
           "RemoteNoteRepository",
           "NoteRepository",
           "atomic_write_text",
           ]
