from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace


def now_ms() -> int:
    return int(time.time() * 1000)


def generate_note_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Note:
    id: str
    title: str
    content: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)
    created_at: int = field(default_factory=now_ms)
    updated_at: int = field(default_factory=now_ms)

    @classmethod
    def new(cls, title: str, content: str = "") -> "Note":
        ts = now_ms()
        return cls(id=generate_note_id(), title=title, content=content, created_at=ts, updated_at=ts)

    def edited(self, *, title: str | None = None, content: str | None = None) -> "Note":
        """Return a copy with the given fields replaced and updated_at bumped."""
        return replace(
            self,
            title=self.title if title is None else title,
            content=self.content if content is None else content,
            updated_at=now_ms(),
        )

    # ───────────────────────── wire format ─────────────────────────

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": sorted(self.tags),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Note":
        ts = now_ms()
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            tags=frozenset(str(t) for t in (data.get("tags") or ())),
            created_at=int(data.get("createdAt") or ts),
            updated_at=int(data.get("updatedAt") or ts),
        )
