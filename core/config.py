"""
Configuration management for CSV Join.

This module provides a split configuration system that separates concerns
into focused configuration classes, loaded from and saved to TOML.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import toml

from .exceptions import ConfigurationError
from .logging_config import VALID_LEVELS


@dataclass
class JoinConfig:
    """Configuration for join key derivation."""

    # Separator placed between join column values in a composite key
    key_separator: str = '++'

    def validate(self) -> List[str]:
        """Validate the join configuration and return any errors."""
        errors = []

        if not self.key_separator:
            errors.append("key_separator cannot be empty")

        return errors


@dataclass
class CsvConfig:
    """Configuration for reading and writing CSV files."""

    delimiter: str = ','
    quotechar: str = '"'
    encoding: str = 'utf-8'

    def validate(self) -> List[str]:
        """Validate the CSV configuration and return any errors."""
        errors = []

        if len(self.delimiter) != 1:
            errors.append("delimiter must be a single character")

        if len(self.quotechar) != 1:
            errors.append("quotechar must be a single character")

        if self.delimiter == self.quotechar:
            errors.append("delimiter and quotechar must differ")

        if not self.encoding:
            errors.append("encoding cannot be empty")

        return errors


@dataclass
class OutputConfig:
    """Configuration for the joined output stream."""

    lineterminator: str = '\n'
    chunk_rows: int = 1000

    def validate(self) -> List[str]:
        """Validate the output configuration and return any errors."""
        errors = []

        if self.lineterminator not in ('\n', '\r\n'):
            errors.append("lineterminator must be '\\n' or '\\r\\n'")

        if not isinstance(self.chunk_rows, int) or self.chunk_rows <= 0:
            errors.append("chunk_rows must be a positive integer")

        return errors


@dataclass
class LoggingConfig:
    """Configuration for diagnostics."""

    level: str = 'WARNING'
    log_file: Optional[str] = None
    log_dir: str = 'logs'

    def validate(self) -> List[str]:
        """Validate the logging configuration and return any errors."""
        errors = []

        if str(self.level).upper() not in VALID_LEVELS:
            errors.append(f"level must be one of {list(VALID_LEVELS)}")

        return errors


@dataclass
class Config:
    """Main configuration class that combines all configuration sections."""

    config_file_path: Optional[str] = None

    # Configuration sections
    join: JoinConfig = field(default_factory=JoinConfig)
    csv: CsvConfig = field(default_factory=CsvConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Load configuration when an instance is created with a file path."""
        if self.config_file_path:
            self.load_config()

    def to_dict(self) -> dict:
        """Convert every section to plain TOML-compatible data."""
        logging_section = {
            'level': self.log.level,
            'log_dir': self.log.log_dir,
        }
        # TOML has no null
        if self.log.log_file:
            logging_section['log_file'] = self.log.log_file

        return {
            'join': {
                'key_separator': self.join.key_separator,
            },
            'csv': {
                'delimiter': self.csv.delimiter,
                'quotechar': self.csv.quotechar,
                'encoding': self.csv.encoding,
            },
            'output': {
                'lineterminator': self.output.lineterminator,
                'chunk_rows': self.output.chunk_rows,
            },
            'logging': logging_section,
        }

    def save_config(self, path: Optional[str] = None) -> str:
        """Save current configuration to a TOML file and return its path."""
        target = path or self.config_file_path
        if not target:
            raise ConfigurationError("No configuration file path given to save to")

        try:
            with open(target, 'w') as f:
                toml.dump(self.to_dict(), f)
            logging.info(f"Configuration saved to {target}")
        except OSError as e:
            error_msg = f"Error saving configuration: {e}"
            logging.error(error_msg)
            raise ConfigurationError(error_msg, config_file=target)

        return target

    def load_config(self) -> None:
        """Load configuration from the TOML file at config_file_path."""
        try:
            with open(self.config_file_path) as f:
                config_data = toml.load(f)
        except FileNotFoundError:
            raise ConfigurationError("Configuration file not found", config_file=self.config_file_path)
        except toml.TomlDecodeError as e:
            error_msg = f"Error decoding {self.config_file_path}: {e}"
            logging.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)
        except OSError as e:
            error_msg = f"Error loading configuration: {e}"
            logging.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)

        if 'join' in config_data:
            join_config = config_data['join']
            self.join.key_separator = join_config.get('key_separator', self.join.key_separator)

        if 'csv' in config_data:
            csv_config = config_data['csv']
            self.csv.delimiter = csv_config.get('delimiter', self.csv.delimiter)
            self.csv.quotechar = csv_config.get('quotechar', self.csv.quotechar)
            self.csv.encoding = csv_config.get('encoding', self.csv.encoding)

        if 'output' in config_data:
            output_config = config_data['output']
            self.output.lineterminator = output_config.get('lineterminator', self.output.lineterminator)
            self.output.chunk_rows = output_config.get('chunk_rows', self.output.chunk_rows)

        if 'logging' in config_data:
            logging_config = config_data['logging']
            self.log.level = logging_config.get('level', self.log.level)
            self.log.log_file = logging_config.get('log_file') or self.log.log_file
            self.log.log_dir = logging_config.get('log_dir', self.log.log_dir)

        errors = self.validate()
        if errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(errors)}",
                config_file=self.config_file_path
            )

        logging.info(f"Configuration loaded from {self.config_file_path}")

    def validate(self) -> List[str]:
        """Validate all configuration sections and return any errors."""
        errors = []
        errors.extend(self.join.validate())
        errors.extend(self.csv.validate())
        errors.extend(self.output.validate())
        errors.extend(self.log.validate())
        return errors
