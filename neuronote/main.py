from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from neuronote.logging_setup import install_global_exception_hooks, setup_logging
from neuronote.services.workspace import Workspace
from neuronote.settings import API_URL, DATA_FILE
from neuronote.ui.main_window import MainWindow
from neuronote.vault.remote import RemoteNoteRepository
from neuronote.vault.repo import NoteRepository

log = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="NeuroNote: linked notes with a knowledge graph")
    p.add_argument("--data-file", type=Path, default=DATA_FILE, help="Local notes file (JSON)")
    p.add_argument("--api-url", default=API_URL, help="Use a NeuroNote store server instead of the local file")
    return p.parse_args(argv)


def build_store(args: argparse.Namespace):
    if args.api_url:
        log.info("Using remote note store: %s", args.api_url)
        return RemoteNoteRepository(args.api_url)
    log.info("Using local note file: %s", args.data_file)
    return NoteRepository(args.data_file)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()
    install_global_exception_hooks()

    app = QApplication(sys.argv[:1])
    workspace = Workspace(store=build_store(args))
    win = MainWindow(workspace)
    workspace.load()
    win.restore_last_note()
    win.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
