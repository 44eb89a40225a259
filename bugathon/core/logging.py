"""
Process-wide logging setup.

Everything goes to stdout so Railway / Render (and gunicorn's own
`errorlog = "-"`) capture it in one stream.
"""
import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    # Idempotent: uvicorn --reload and the test client import main repeatedly.
    if any(getattr(h, "_bugathon", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._bugathon = True  # type: ignore[attr-defined]
    root.addHandler(handler)
