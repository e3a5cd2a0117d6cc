import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from neuronote.core.models import Note


@pytest.fixture
def make_note():
    def _make(title: str, content: str = "", note_id: str | None = None) -> Note:
        return Note(id=note_id or title.lower().replace(" ", "-"), title=title, content=content)
    return _make
