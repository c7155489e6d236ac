import logging
import sys

from pythonjsonlogger import jsonlogger

from yardloop.core.config import Environment, config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once for the whole process."""
    handler = logging.StreamHandler(sys.stdout)
    if config.render_env == Environment.DEVELOPMENT:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        # one JSON object per line for the log collector
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                fmt=LOG_FORMAT,
                rename_fields={"asctime": "timestamp", "levelname": "level"},
            )
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel((level or config.log_level).upper())

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
