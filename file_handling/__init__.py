"""
File handling module for CSV Join.

This module reads CSV input sources and writes the joined CSV output.
"""

from .csv_utils import CsvSource, JoinedCsvWriter, read_csv_source, read_csv_sources

__all__ = [
    'CsvSource',
    'JoinedCsvWriter',
    'read_csv_source',
    'read_csv_sources',
]

# Version info
__version__ = "1.0.0"
