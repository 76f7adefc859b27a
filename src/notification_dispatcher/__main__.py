"""Run the service: ``python -m notification_dispatcher``."""

from __future__ import annotations

import uvicorn

from .api.app import create_app
from .config import get_settings
from .log_config import configure_logging


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
