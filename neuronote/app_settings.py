from __future__ import annotations

import logging
from dataclasses import dataclass

from PySide6.QtCore import QSettings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingsKeys:
    UI_GEOMETRY: str = "ui/geometry"
    RIGHT_PANEL_WIDTH: str = "ui/right_panel_width"
    SHOW_GRAPH: str = "ui/show_graph"
    SHOW_SIDEBAR: str = "ui/show_sidebar"
    LAST_NOTE: str = "nav/last_note"


def get_str(settings: QSettings, key: str, default: str) -> str:
    try:
        val = settings.value(key, default)
        return str(val) if val is not None else default
    except Exception:
        return default


def get_int(settings: QSettings, key: str, default: int) -> int:
    try:
        return int(settings.value(key, default))
    except Exception:
        return default


def get_bool(settings: QSettings, key: str, default: bool) -> bool:
    # QSettings hands back "true"/"false" strings from INI backends
    try:
        val = settings.value(key, default)
    except Exception:
        return default
    if isinstance(val, str):
        return val.strip().lower() in ("1", "true", "yes", "on")
    return bool(val) if val is not None else default


def safe_set_setting(settings: QSettings, key: str, value) -> None:
    """Best-effort QSettings write; never breaks the UI."""
    try:
        settings.setValue(key, value)
    except Exception:
        log.debug("QSettings write failed: key=%s", key, exc_info=True)
