from __future__ import annotations

import argparse
import logging
from pathlib import Path

import uvicorn

from neuronote.logging_setup import setup_logging
from neuronote.server.api import DEFAULT_DATA_FILE, create_app
from neuronote.settings import API_PORT

log = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="NeuroNote note store")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=API_PORT)
    parser.add_argument("--data-file", type=Path, default=DEFAULT_DATA_FILE)
    args = parser.parse_args(argv)

    setup_logging()
    app = create_app(args.data_file)
    log.info("Note store on http://%s:%d (data: %s)", args.host, args.port, args.data_file)

    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
