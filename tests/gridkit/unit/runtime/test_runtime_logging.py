import logging
from logging.handlers import QueueHandler

from gridkit.runtime.logging import (
    LoggingConfig,
    configure_logging,
    shutdown_logging,
)


def _restore(root: logging.Logger, handlers: list[logging.Handler], level: int) -> None:
    shutdown_logging()
    root.handlers.clear()
    root.handlers.extend(handlers)
    root.setLevel(level)


def test_configure_logging_console_only() -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        configure_logging(LoggingConfig(level_name="warning"))
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)
    finally:
        _restore(root, original_handlers, original_level)


def test_configure_logging_streams_file_through_queue(tmp_path) -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    log_file = tmp_path / "nested" / "run.jsonl"
    try:
        configure_logging(LoggingConfig(level_name="INFO", file_path=str(log_file)))
        assert isinstance(root.handlers[0], QueueHandler)
        logging.getLogger("gridkit.test").info("queued %d", 7)
        shutdown_logging()
        content = log_file.read_text(encoding="utf-8")
        assert '"msg":"queued 7"' in content
        assert '"logger":"gridkit.test"' in content
    finally:
        _restore(root, original_handlers, original_level)
