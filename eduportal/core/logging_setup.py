import logging
import sys

from eduportal.config import settings


def configure_logging(level: str | None = None) -> None:
    """Print eduportal loggers (gateway, controller, auth) to stdout."""
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stdout,
    )
    if settings.debug:
        logging.getLogger("eduportal").setLevel(logging.DEBUG)
