"""Logging for queso.

The "queso" logger only carries a NullHandler: an application embedding the
library decides where records go. QUESO_LOG_LEVEL (e.g. "DEBUG") sets the
level at import time.

The CLI calls configure_logging(), which attaches a handler that writes to
stderr through click:

    DEBUG [2026-10-18 09:14:03] queso.qemu - Starting QEMU command='qemu-system-x86_64 -accel kvm'

Structured context passed as `extra={...}` is appended to the message as
key=value pairs. Records go through a bounded queue drained by a
QueueListener thread; when the queue is full the record is dropped and the
caller carries on.
"""

import contextlib
import logging
import logging.handlers
import os
import queue
import shlex

import click

LIBRARY_LOGGER_NAME: str = "queso"

_FMT = "%(levelname)s [%(asctime)s] %(name)s - %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_QUEUE_CAPACITY = 1024

# Attributes every LogRecord has; anything else came in through `extra`
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime", "taskName"}

_LEVEL_COLORS = {
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}


def _level_from_env() -> int | None:
    name = os.environ.get("QUESO_LOG_LEVEL", "").strip().upper()
    # NOTSET (0) counts as unset
    return logging.getLevelNamesMapping().get(name) or None


_library_logger = logging.getLogger(LIBRARY_LOGGER_NAME)
_library_logger.addHandler(logging.NullHandler())
if (_env_level := _level_from_env()) is not None:
    _library_logger.setLevel(_env_level)


class _ContextFormatter(logging.Formatter):
    """Formatter appending `extra` fields as shell-quoted key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = {key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS}
        if not context:
            return text
        pairs = " ".join(f"{key}={shlex.quote(str(value))}" for key, value in sorted(context.items()))
        return f"{text} {pairs}"


class _ClickHandler(logging.Handler):
    """Writes formatted records to stderr with click, colored by level.

    Runs on the listener thread. click.echo() drops the styling when stderr
    is not a terminal.
    """

    def __init__(self) -> None:
        super().__init__()
        self.setFormatter(_ContextFormatter(fmt=_FMT, datefmt=_DATEFMT))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            color = _LEVEL_COLORS.get(record.levelno)
            click.echo(click.style(self.format(record), fg=color, dim=color is None), err=True)
        except BlockingIOError:
            pass  # stderr full
        except Exception:  # noqa: BLE001
            self.handleError(record)


class _NonBlockingHandler(logging.handlers.QueueHandler):
    """QueueHandler over a bounded queue, drained to _ClickHandler."""

    def __init__(self) -> None:
        records: queue.Queue[logging.LogRecord] = queue.Queue(maxsize=_QUEUE_CAPACITY)
        super().__init__(records)
        self._listener = logging.handlers.QueueListener(records, _ClickHandler(), respect_handler_level=False)
        self._listener.start()

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        # Same process: hand the record over as-is so `extra` survives
        return record

    def enqueue(self, record: logging.LogRecord) -> None:
        with contextlib.suppress(queue.Full):
            self.queue.put_nowait(record)

    def close(self) -> None:
        self._listener.stop()
        super().close()


def get_logger(name: str) -> logging.Logger:
    """Logger for a queso module; pass __name__ so it nests under "queso"."""
    return logging.getLogger(name)


def configure_logging(
    *,
    level: int | str | None = None,
    quiet: bool = False,
) -> None:
    """Send queso log records to stderr (CLI use).

    Safe to call more than once: the stderr handler is only added the first
    time.

    Args:
        level: Log level such as logging.DEBUG or "WARNING"; overrides
            QUESO_LOG_LEVEL. None keeps the current level.
        quiet: Only show errors. Takes precedence over level.

    Raises:
        ValueError: level is an unknown level name
    """
    if not any(isinstance(h, _NonBlockingHandler) for h in _library_logger.handlers):
        _library_logger.addHandler(_NonBlockingHandler())

    if quiet:
        _library_logger.setLevel(logging.ERROR)
    elif level is not None:
        _library_logger.setLevel(level)
