import logging

from contractdesk.shared.logging import ColorFormatter, get_logger, setup_logging


def test_color_formatter_preserves_level():
    fmt = ColorFormatter("%(levelname)s %(message)s")
    record = logging.LogRecord("test", logging.WARNING, "", 0, "msg", args=(), exc_info=None)
    formatted = fmt.format(record)
    assert "WARNING" in formatted
    assert "\033[33m" in formatted
    assert record.levelname == "WARNING"


def test_setup_logging_idempotent():
    setup_logging()
    handlers_before = list(logging.getLogger().handlers)
    setup_logging()  # second call should not replace handlers
    assert logging.getLogger().handlers == handlers_before
    logger = get_logger("test_logger")
    assert logger.name == "test_logger"
