import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from strategy_conditions.config.settings import get_settings


ROOT_LOGGER_NAME = "strategy_conditions"


class Logger:
    """Centralized logging configuration for strategy_conditions."""

    _instance: Optional['Logger'] = None
    _logger: Optional[logging.Logger] = None

    def __new__(cls) -> 'Logger':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._logger is None:
            self._setup_logger()

    def _setup_logger(self) -> None:
        """Set up the logger with configuration from settings."""
        log_config = get_settings().logging
        log_level = getattr(logging, log_config.level.upper(), logging.INFO)

        self._logger = logging.getLogger(ROOT_LOGGER_NAME)
        self._logger.setLevel(log_level)
        self._logger.handlers.clear()

        formatter = logging.Formatter(log_config.format)

        # File handler with daily rotation
        if log_config.file_enabled:
            file_path = Path(log_config.file_path)
            file_path.parent.mkdir(parents=True, exist_ok=True)

            daily_handler = logging.handlers.TimedRotatingFileHandler(
                file_path,
                when='midnight',
                interval=1,
                backupCount=log_config.file_backup_count,
                encoding='utf-8',
            )
            daily_handler.suffix = "%Y-%m-%d"
            daily_handler.setLevel(log_level)
            daily_handler.setFormatter(formatter)
            self._logger.addHandler(daily_handler)

        if log_config.console_enabled:
            console_level = getattr(logging, log_config.console_level.upper(), logging.INFO)

            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(console_level)
            console_handler.setFormatter(formatter)
            self._logger.addHandler(console_handler)

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger instance for a specific module."""
        if self._logger is None:
            self._setup_logger()

        # Module names already live under the package logger
        if name == ROOT_LOGGER_NAME:
            return self._logger
        prefix = ROOT_LOGGER_NAME + "."
        if name.startswith(prefix):
            name = name[len(prefix):]
        return self._logger.getChild(name)

    @property
    def logger(self) -> logging.Logger:
        """Get the main logger instance."""
        if self._logger is None:
            self._setup_logger()
        return self._logger


# Global logger instance
logger_instance = Logger()


def get_logger(name: str) -> logging.Logger:
    """Convenience function to get a logger for a module."""
    return logger_instance.get_logger(name)

