import logging

from slotbook.app.core.config import settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger with a single console handler."""
    root_logger = logging.getLogger()
    root_logger.setLevel((level or settings.LOG_LEVEL).upper())

    # Clear existing handlers so reloads do not duplicate output
    root_logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(console_handler)

    # uvicorn access lines duplicate the router logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
