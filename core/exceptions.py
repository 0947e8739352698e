"""
Custom exceptions for CSV Join.

This module defines application-specific exceptions that provide
clear error messages and context for different types of failures.
Every error raised by the join is terminal.
"""

from typing import List, Optional


class CSVJoinError(Exception):
    """Base exception for all CSV Join errors."""

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class ConfigurationError(CSVJoinError):
    """Raised when there are issues with configuration loading or validation."""

    def __init__(self, message: str, config_file: Optional[str] = None, field: Optional[str] = None):
        context = {}
        if config_file:
            context['config_file'] = config_file
        if field:
            context['field'] = field
        super().__init__(message, context)


class UsageError(CSVJoinError):
    """Raised when the command line names fewer input files than a join needs."""


class SourceIOError(CSVJoinError):
    """Raised when an input file cannot be opened or read."""

    def __init__(self, message: str, file_path: Optional[str] = None, operation: Optional[str] = None):
        context = {}
        if file_path:
            context['file_path'] = file_path
        if operation:
            context['operation'] = operation
        super().__init__(message, context)


class CSVFormatError(CSVJoinError):
    """Raised when an input file has no header row or a malformed row."""

    def __init__(self, message: str, file_path: Optional[str] = None, row: Optional[int] = None):
        context = {}
        if file_path:
            context['file_path'] = file_path
        if row is not None:
            context['row'] = row
        super().__init__(message, context)


class SchemaError(CSVJoinError):
    """Raised when the input sources share no column to join on."""

    def __init__(self, message: str, headers: Optional[List[List[str]]] = None):
        context = {}
        if headers:
            context['sources'] = len(headers)
        super().__init__(message, context)


class OutputWriteError(CSVJoinError):
    """Raised when writing the joined output fails."""

    def __init__(self, message: str, destination: Optional[str] = None):
        context = {}
        if destination:
            context['destination'] = destination
        super().__init__(message, context)
