import logging
import os
import platform
from pathlib import Path
from typing import Optional


LOG_FILE_NAME = "ette.log"
LOG_DIR_ENV = "ETTE_LOG_DIR"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def default_log_dir() -> Path:
    override = os.getenv(LOG_DIR_ENV)
    if override:
        return Path(override)
    if os.name == "nt":
        base = os.getenv("APPDATA") or str(Path.home())
        return Path(base) / "ette" / "logs"
    if platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / "ette" / "logs"
    base = os.getenv("XDG_STATE_HOME") or str(Path.home() / ".local" / "share")
    return Path(base) / "ette" / "logs"


def _prepare_log_file(log_dir: Optional[Path]) -> Optional[Path]:
    """Create the log directory; None when it cannot be used."""
    target_dir = Path(log_dir) if log_dir else default_log_dir()
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None
    return target_dir / LOG_FILE_NAME


def _file_handler(log_file: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(debug: bool, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Route ette's logging for one run.

    Normal runs only keep warnings, in ``ette.log``. ``debug`` also logs
    open/save timing and cascade sizes to the file and echoes INFO to stderr.
    Document text and passwords never reach a log record.
    """
    logger = logging.getLogger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    formatter = logging.Formatter(LOG_FORMAT)
    log_file = _prepare_log_file(log_dir)

    if debug:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file is not None:
        logger.addHandler(_file_handler(log_file, logging.DEBUG if debug else logging.WARNING, formatter))
    elif not debug:
        logger.addHandler(logging.NullHandler())

    return logger
