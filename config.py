"""
Runtime configuration.

Values are read from the environment (and a local ``.env`` file, if present)
once at import time.
"""
import logging
import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TIME_ZONE = os.environ.get("DEFAULT_TIME_ZONE", "America/Chicago")

# Passed straight through to dateparser: "current_period", "future" or "past".
PREFER_DATES_FROM = os.environ.get("DATEPARSER_PREFER_DATES_FROM", "current_period")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Attach a stream handler to the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    if any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        return
    formatter = logging.Formatter("%(levelname)-8s %(asctime)s %(name)-12s %(message)s")
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root.addHandler(handler)
