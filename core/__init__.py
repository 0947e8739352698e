"""
Core infrastructure module for CSV Join.

This module provides the foundational components including configuration
management, logging setup, and custom exceptions.
"""

from .config import Config, CsvConfig, JoinConfig, LoggingConfig, OutputConfig
from .exceptions import (
    ConfigurationError,
    CSVFormatError,
    CSVJoinError,
    OutputWriteError,
    SchemaError,
    SourceIOError,
    UsageError,
)
from .logging_config import get_logger, set_log_level, setup_logging

__all__ = [
    # Configuration
    'Config',
    'CsvConfig',
    'JoinConfig',
    'LoggingConfig',
    'OutputConfig',

    # Exceptions
    'CSVJoinError',
    'ConfigurationError',
    'UsageError',
    'SourceIOError',
    'CSVFormatError',
    'SchemaError',
    'OutputWriteError',

    # Logging
    'setup_logging',
    'get_logger',
    'set_log_level',
]

# Version info
__version__ = "1.0.0"
