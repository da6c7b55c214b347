"""Logging setup shared by the dashboard pages and scripts."""

from __future__ import annotations

import logging
import sys
from typing import Optional

try:
    from .config import LOG_LEVEL
except ImportError:
    from config import LOG_LEVEL

_HANDLER_NAME = 'compound_dashboard'


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logging to output to stdout with proper formatting.

    Safe to call on every Streamlit rerun: the handler is installed once.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level or LOG_LEVEL)
    if any(getattr(h, 'name', None) == _HANDLER_NAME for h in root_logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Streamlit and plotly are chatty at INFO
    logging.getLogger("streamlit").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
