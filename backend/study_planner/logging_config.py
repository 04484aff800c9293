import logging
import os
from logging.config import dictConfig
from typing import Optional

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
PLANNER_LOGGER = "study_planner"


def configure_logging(level: Optional[str] = None) -> None:
    """Install the planner's stream handler; ``level`` overrides STUDY_PLANNER_LOG_LEVEL."""
    resolved = (level or os.getenv("STUDY_PLANNER_LOG_LEVEL", "INFO")).upper()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": DEFAULT_LOG_FORMAT},
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                PLANNER_LOGGER: {"level": resolved},
            },
            "root": {
                "handlers": ["default"],
                "level": resolved,
            },
        }
    )

    if os.getenv("STUDY_PLANNER_DEBUG_HTTP", "0") == "1":
        logging.getLogger("httpx").setLevel(logging.DEBUG)
        logging.getLogger("uvicorn.access").setLevel(logging.DEBUG)
