"""Logging setup shared by scripts and services embedding the pipeline."""

import logging

from travel_content.configs.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging for the pipeline.

    Args:
        level: Log level name; defaults to ``Settings.LOG_LEVEL``
    """
    level_name = (level or get_settings().LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
