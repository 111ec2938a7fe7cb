"""
Centralized logging configuration for SBRAC.

All loggers live under the "sbrac" namespace, one child per subsystem
(engine, participant, bit_proof, commitment, cli, benchmark). Output is
colored on the console; a plain-text copy goes to <log_dir>/sbrac.log
when file logging is enabled in AuctionConfig.

Secrets (bids, salts, exponents) are never passed to a logger; round
logs carry only positions, decided bits and elimination counts.
"""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import colorlog

if TYPE_CHECKING:
    from sbrac.core.config import AuctionConfig

NAMESPACE = "sbrac"
LOG_FILE = "sbrac.log"

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _console_handler(level: int) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(colorlog.ColoredFormatter(
        "%(log_color)s" + LOG_FORMAT.replace(" %(message)s", "%(reset)s %(message)s"),
        datefmt=DATE_FORMAT,
        log_colors=LOG_COLORS,
    ))
    return handler


def _file_handler(log_dir: Path, level: int) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILE)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


class SbracLogger:
    """Owns the handlers on the "sbrac" logger."""

    _initialized = False
    _log_path: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
        force: bool = False,
    ):
        """
        Install console (and optionally file) handlers.

        Args:
            level: Logging level for the namespace and every handler
            log_dir: Directory for sbrac.log; ./logs when None
            log_to_file: Whether to write a log file
            force: Replace handlers installed by an earlier call
        """
        if cls._initialized and not force:
            return

        cls.reset()
        root_logger = logging.getLogger(NAMESPACE)
        root_logger.setLevel(level)
        root_logger.addHandler(_console_handler(level))

        if log_to_file:
            directory = Path(log_dir) if log_dir else Path("logs")
            root_logger.addHandler(_file_handler(directory, level))
            cls._log_path = directory / LOG_FILE

        cls._initialized = True

    @classmethod
    def configure(cls, config: "AuctionConfig", debug: bool = False):
        """Apply an AuctionConfig; debug forces DEBUG regardless of log_level."""
        level = logging.DEBUG if debug else config.log_level_number
        cls.setup(
            level=level,
            log_dir=str(config.log_dir),
            log_to_file=config.log_to_file,
            force=True,
        )

    @classmethod
    def reset(cls):
        """Close and detach every handler; the next get_logger re-installs defaults."""
        root_logger = logging.getLogger(NAMESPACE)
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        cls._log_path = None
        cls._initialized = False

    @classmethod
    def log_path(cls) -> Optional[Path]:
        """Path of the active log file, if file logging is on."""
        return cls._log_path

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Logger for one subsystem, e.g. get_logger("engine") -> sbrac.engine."""
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"{NAMESPACE}.{name}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific subsystem"""
    return SbracLogger.get_logger(name)


def configure_logging(config: "AuctionConfig", debug: bool = False):
    """(Re)configure logging from an AuctionConfig."""
    SbracLogger.configure(config, debug=debug)
