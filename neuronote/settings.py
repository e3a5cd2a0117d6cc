from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "neuronote"
LOG_DIR = Path.home() / f".{APP_NAME}" / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"

DATA_FILE = Path(os.getenv("NEURONOTE_DATA_FILE", "") or (Path.home() / f".{APP_NAME}" / "data" / "notes.json"))
API_PORT = 3003
API_URL = os.getenv("NEURONOTE_API_URL", "")

GRAPH_DEBOUNCE_MS = 800
AUTOSAVE_DEBOUNCE_MS = 600

RIGHT_PANEL_DEFAULT_WIDTH = 500
RIGHT_PANEL_MIN_WIDTH = 250
RIGHT_PANEL_MAX_WIDTH = 800

# menu anchor sits this far below the caret line
MENU_ANCHOR_OFFSET = 24

DEFAULT_NOTE_TITLE = "Untitled Note"
WELCOME_TITLE = "Welcome to NeuroNote"
WELCOME_CONTENT = (
    "Start taking notes with [[wiki-style links]] to connect your ideas!\n\n"
    "Click the **+ button** to create a new note."
)
