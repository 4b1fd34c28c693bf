import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

LOG_DIR_ENV = "COMMAND_SYNC_LOG_DIR"

_LOGGERS = {}
_CONSOLE_HANDLERS = []
_CONSOLE_LEVEL = logging.WARNING
_FILE_HANDLER: Optional[logging.FileHandler] = None

_FORMATTER = logging.Formatter(
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)


def get_logger(
    name: str,
    *,
    runtime: str = "register",
) -> logging.Logger:
    """
    Create or retrieve a named logger.

    Parameters:
    - name: logger namespace (e.g. core.register_app, discord.registry)
    - runtime: logger name prefix, also used for the run log file name

    Console output goes to stderr so stdout stays reserved for
    operator-facing progress lines. The per-run log file is attached
    later by configure_logging(), once .env has been loaded.
    """
    cache_key = f"{runtime}:{name}"
    if cache_key in _LOGGERS:
        return _LOGGERS[cache_key]

    logger = logging.getLogger(cache_key)
    logger.setLevel(logging.DEBUG)

    # ------------------------------
    # Console handler
    # ------------------------------
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_FORMATTER)
    console.setLevel(_CONSOLE_LEVEL)
    logger.addHandler(console)
    _CONSOLE_HANDLERS.append(console)

    if _FILE_HANDLER is not None:
        logger.addHandler(_FILE_HANDLER)

    logger.propagate = False
    _LOGGERS[cache_key] = logger

    return logger


def _detach_file_handler() -> None:
    global _FILE_HANDLER

    if _FILE_HANDLER is None:
        return
    for logger in _LOGGERS.values():
        logger.removeHandler(_FILE_HANDLER)
    _FILE_HANDLER.close()
    _FILE_HANDLER = None


def configure_logging(
    *,
    debug: bool,
    log_dir: Optional[Union[str, Path]] = None,
    runtime: str = "register",
) -> Optional[Path]:
    """
    Apply run-level logging settings to every logger handed out so far
    (and any created later).

    - debug: console verbosity (DEBUG instead of WARNING)
    - log_dir: when set, write this run's log to
      <log_dir>/<runtime>-<timestamp>.log; when blank, stop file logging

    Returns the log file path, if one is active.
    """
    global _CONSOLE_LEVEL, _FILE_HANDLER

    _CONSOLE_LEVEL = logging.DEBUG if debug else logging.WARNING
    for handler in _CONSOLE_HANDLERS:
        handler.setLevel(_CONSOLE_LEVEL)

    # ------------------------------
    # File handler (one per run, opt-in)
    # ------------------------------
    _detach_file_handler()

    raw = str(log_dir or "").strip()
    if not raw:
        return None

    directory = Path(raw)
    directory.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    logfile = directory / f"{runtime}-{timestamp}.log"

    _FILE_HANDLER = logging.FileHandler(logfile, encoding="utf-8")
    _FILE_HANDLER.setFormatter(_FORMATTER)
    for logger in _LOGGERS.values():
        logger.addHandler(_FILE_HANDLER)

    return logfile


def mask_token(token: str) -> str:
    """Render a credential in a form that is safe to log."""
    if not token:
        return "<empty>"
    return f"<redacted:{len(token)} chars>"
