import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

class LoggerSetup:
    """
    Centralized logging configuration for the health probe.

    Diagnostics go to stderr so stdout only carries the report. A rotating
    file handler is added when a log file is configured.
    """
    _initialized = False
    _console_level = logging.WARNING
    _log_file: Optional[str] = None
    _loggers: set[str] = set()

    @classmethod
    def configure(cls, console_level: int = logging.WARNING, log_file: Optional[str] = None) -> None:
        """
        Set process-wide logging options. Loggers created before this call
        are updated in place.

        Args:
            console_level: Level for the stderr handler
            log_file: Optional path for a rotating debug log
        """
        cls._console_level = console_level
        cls._log_file = log_file

        for name in cls._loggers:
            cls._reset_handlers(logging.getLogger(name))

    @classmethod
    def setup(cls, name: str) -> logging.Logger:
        """
        Set up and return a logger.

        Args:
            name: Logger name (__name__ for modules or __class__.__name__ for classes)
        Returns:
            logging.Logger: Configured logger instance
        Example:
            logger = LoggerSetup.setup(__name__)
        """
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)

        # Avoid adding handlers multiple times
        if not logger.handlers:
            cls._add_handlers(logger)
            cls._loggers.add(name)

        if not cls._initialized:
            # Quiet noisy loggers
            logging.getLogger('aiohttp').setLevel(logging.WARNING)
            logging.getLogger('asyncio').setLevel(logging.WARNING)
            cls._initialized = True

        return logger

    @classmethod
    def _add_handlers(cls, logger: logging.Logger) -> None:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(cls._console_level)
        console_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        ))
        logger.addHandler(console_handler)

        if cls._log_file:
            try:
                directory = os.path.dirname(cls._log_file)
                if directory:
                    os.makedirs(directory, exist_ok=True)

                file_handler = RotatingFileHandler(
                    cls._log_file,
                    maxBytes=10*1024*1024,  # 10MB per file
                    backupCount=5,
                    encoding='utf-8'
                )
                file_handler.setLevel(logging.DEBUG)
                file_handler.setFormatter(logging.Formatter(
                    '%(asctime)s - %(levelname)s - [%(name)s] - %(message)s'
                ))
                logger.addHandler(file_handler)
            except (PermissionError, OSError) as e:
                logger.warning(f"Could not set up file logging: {str(e)}")

    @classmethod
    def _reset_handlers(cls, logger: logging.Logger) -> None:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        cls._add_handlers(logger)

    @classmethod
    def level_from_verbosity(cls, verbosity: int) -> int:
        """Map -v count to a console log level"""
        if verbosity >= 2:
            return logging.DEBUG
        if verbosity == 1:
            return logging.INFO
        return logging.WARNING
