import logging
from typing import Optional

from vedic_engine.config import settings


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for processes embedding the engine.

    The engine modules only create loggers; handlers are installed here
    so library users keep control of their own logging setup.
    """
    resolved = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("vedic_engine").setLevel(resolved)
