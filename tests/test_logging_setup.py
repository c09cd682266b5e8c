import logging

from eduportal.config import settings
from eduportal.core.logging_setup import configure_logging


def test_debug_setting_turns_on_package_debug_logs(monkeypatch):
    logger = logging.getLogger("eduportal")
    monkeypatch.setattr(settings, "debug", True)
    monkeypatch.setattr(logger, "level", logging.NOTSET)
    configure_logging("warning")
    assert logger.level == logging.DEBUG
