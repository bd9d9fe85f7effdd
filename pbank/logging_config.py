"""
Logging setup shared by the API server, the CLI and alembic.
"""
import logging
import sys


def setup_logging(level: str = "INFO"):
    """
    Configure the root logger once.

    - Level: taken from settings (LOG_LEVEL)
    - Format: timestamp, level, name, message
    - Handler: StreamHandler to stdout
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def safe_database_target(url: str) -> str:
    """Strip credentials from a database URL before it is logged."""
    return url.split("@")[-1] if "@" in url else url
