from __future__ import annotations

import uvicorn

from .logger import get_logger
from .main import app

logger = get_logger(__name__)

_UVICORN_LEVELS = {"critical", "error", "warning", "info", "debug", "trace"}


def main() -> None:
    # The app module already loaded settings and configured logging.
    settings = app.state.settings
    level = settings.log_level.lower()
    logger.info("server_starting", url=f"http://{settings.host}:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=level if level in _UVICORN_LEVELS else "info",
    )


if __name__ == "__main__":
    main()
