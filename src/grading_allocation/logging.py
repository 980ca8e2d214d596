from __future__ import annotations

import sys

from loguru import logger


def setup_logging(level: str = "INFO") -> None:
    """
    Configures loguru for the grading_allocation library.

    This function enables "grading_allocation" logs and sets up a standard
    format that includes the bound `assessment_id`.
    """
    logger.remove()
    logger.configure(extra={"assessment_id": "-"})

    fmt = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[assessment_id]}</cyan> - "
        "<level>{message}</level>"
    )

    logger.add(sys.stderr, format=fmt, level=level)
    logger.enable("grading_allocation")
