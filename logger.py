"""
Logging setup shared by the API server and the seeder.
"""
import logging
import os
from typing import Optional

APP_LOGGER = "lesson_api"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logging for the app; LOG_LEVEL overrides the default INFO.

    basicConfig is a no-op once the root logger has handlers (uvicorn's
    --log-config, pytest), so the app logger's level is set explicitly.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger(APP_LOGGER).setLevel(level)
