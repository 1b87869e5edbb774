"""Entrypoint: python -m cares_chat"""
from __future__ import annotations

import uvicorn

from cares_chat.config import settings
from cares_chat.logging_config import setup_logging


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "cares_chat.app:create_app",
        factory=True,
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
