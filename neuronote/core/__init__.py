from .editor import EditorSession, SyncState
from .markdown_codec import decode, encode
from .menus import FORMAT_COMMANDS, CommandMenu, FormatCommand, LinkCandidate
from .models import Note
from .mutator import DocumentMutator, EditResult
from .triggers import MenuKind, TriggerDetector
from .wikilinks import extract_link_titles, format_wikilink

__all__ = ["EditorSession",
           "SyncState",
           "decode",
           "encode",
           "FORMAT_COMMANDS",
           "CommandMenu",
           "FormatCommand",
           "LinkCandidate",
           "Note",
           "DocumentMutator",
           "EditResult",
           "MenuKind",
           "TriggerDetector",
           "extract_link_titles",
           "format_wikilink",
           ]
