# neuronote/server/api.py

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from neuronote.vault.repo import atomic_write_text

log = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path("data") / "notes.json"


class NotePayload(BaseModel):
    # unknown keys from other clients are stored untouched
    model_config = ConfigDict(extra="allow")

    id: str
    title: str = ""
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    createdAt: Optional[int] = None
    updatedAt: Optional[int] = None


def ensure_data_file(data_file: Path) -> None:
    data_file.parent.mkdir(parents=True, exist_ok=True)
    if not data_file.exists():
        data_file.write_text("[]", encoding="utf-8")
        log.info("Created empty notes file: %s", data_file)


def create_app(data_file: Path | str = DEFAULT_DATA_FILE) -> FastAPI:
    """
    Build the note store app. The whole note set is read and replaced at
    once; the file is created as an empty array on startup.
    """
    data_file = Path(data_file)
    ensure_data_file(data_file)

    app = FastAPI(title="NeuroNote Store", version="0.1.0")

    @app.get("/api/notes")
    def read_notes():
        try:
            return json.loads(data_file.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            log.exception("Error reading notes from %s", data_file)
            return JSONResponse(status_code=500, content={"error": "Failed to read notes"})

    @app.post("/api/notes")
    def write_notes(notes: list[NotePayload]):
        try:
            payload = [n.model_dump(exclude_none=True) for n in notes]
            atomic_write_text(data_file, json.dumps(payload, ensure_ascii=False, indent=2))
        except OSError:
            log.exception("Error writing notes to %s", data_file)
            return JSONResponse(status_code=500, content={"error": "Failed to save notes"})
        log.info("Saved %d notes", len(payload))
        return {"success": True, "message": "Notes saved successfully"}

    return app
