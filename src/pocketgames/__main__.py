"""Entry point for running Pocket Games via ``python -m pocketgames``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered Pocket Games web server."""

    host = os.environ.get("POCKETGAMES_HOST", "0.0.0.0")
    port = int(os.environ.get("POCKETGAMES_PORT", "8000"))
    level = os.environ.get("POCKETGAMES_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    uvicorn.run("pocketgames.ui:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
