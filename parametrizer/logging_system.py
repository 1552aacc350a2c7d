"""
Logging System for the Parametrizer

Centralized logger with verbosity levels. Parsing reports at debug level;
evaluation never logs.
"""

import logging
import sys
from typing import Optional
from enum import Enum
from datetime import datetime


class LogLevel(Enum):
    """Enumeration of logging levels"""
    SILENT = 0      # No output at all
    MINIMAL = 1     # Only warnings
    MODERATE = 2    # Warnings and info
    DETAILED = 3    # Parse failures as well
    VERBOSE = 4     # All information including debug details


class ParametrizerLogger:
    """
    Centralized logger wrapping the 'parametrizer' stdlib logger
    """

    def __init__(self, log_level: LogLevel = LogLevel.MINIMAL,
                 log_to_file: bool = False, log_file_path: Optional[str] = None,
                 stream=None):
        self.log_level = log_level
        self.stream = stream

        # Create logger
        self.logger = logging.getLogger('parametrizer')
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.logger.handlers.clear()  # Remove any existing handlers

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        # Console handler
        if self.log_level != LogLevel.SILENT:
            console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        # File handler (optional)
        if log_to_file:
            if log_file_path is None:
                log_file_path = f"parametrizer_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
            file_handler = logging.FileHandler(log_file_path)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _should_log(self, required_level: LogLevel) -> bool:
        """Check if message should be logged based on current log level"""
        return self.log_level.value >= required_level.value

    def info(self, message: str, required_level: LogLevel = LogLevel.MODERATE):
        if self._should_log(required_level):
            self.logger.info(message)

    def debug_enabled(self) -> bool:
        return self._should_log(LogLevel.VERBOSE)

    def warning(self, message: str):
        """Warnings - shown from minimal level onwards"""
        if self._should_log(LogLevel.MINIMAL):
            self.logger.warning(message)

    def parse_failure(self, expression: str, error: Exception):
        if self._should_log(LogLevel.DETAILED):
            self.logger.info(f"PARSE FAILED: {expression!r}: {type(error).__name__}: {error.reason}")

    def debug(self, message: str):
        """Debug information - only in verbose mode"""
        if self._should_log(LogLevel.VERBOSE):
            self.logger.debug(f"DEBUG: {message}")


# Global logger instance
_global_logger: Optional[ParametrizerLogger] = None


def get_logger() -> ParametrizerLogger:
    """Get or create the global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = ParametrizerLogger()
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global logging level"""
    global _global_logger
    if _global_logger is None:
        _global_logger = ParametrizerLogger(log_level=level)
    elif not _global_logger.logger.handlers and level != LogLevel.SILENT:
        # A SILENT logger was built without handlers
        _global_logger = ParametrizerLogger(log_level=level, stream=_global_logger.stream)
    else:
        _global_logger.log_level = level


def configure_logging(log_level: LogLevel = LogLevel.MINIMAL,
                      log_to_file: bool = False,
                      log_file_path: Optional[str] = None,
                      stream=None) -> ParametrizerLogger:
    """Configure the global logging system"""
    global _global_logger
    _global_logger = ParametrizerLogger(
        log_level=log_level,
        log_to_file=log_to_file,
        log_file_path=log_file_path,
        stream=stream
    )
    return _global_logger


def log_info(message: str, level: LogLevel = LogLevel.MODERATE):
    get_logger().info(message, level)


def log_warning(message: str):
    get_logger().warning(message)


def log_debug(message: str):
    get_logger().debug(message)
