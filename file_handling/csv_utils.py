"""
CSV utilities for CSV Join.

This module reads input sources into memory and writes the joined CSV
stream, using pandas for both directions. Every cell is kept as the
literal string found in the file: no type inference, no NA conversion.
"""

from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TextIO

import pandas as pd

from core.config import CsvConfig, OutputConfig
from core.exceptions import CSVFormatError, OutputWriteError, SourceIOError
from core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class CsvSource:
    """One input file, fully loaded."""
    name: str
    header: List[str]
    rows: List[List[str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def _open_source(stack: ExitStack, path: str, csv_config: CsvConfig) -> TextIO:
    try:
        return stack.enter_context(open(path, 'r', encoding=csv_config.encoding, newline=''))
    except FileNotFoundError:
        raise SourceIOError(f"cannot read CSV file {path}: file not found", file_path=path, operation='open')
    except OSError as e:
        raise SourceIOError(f"cannot read CSV file {path}: {e}", file_path=path, operation='open')


def _parse_source(handle: TextIO, path: str, csv_config: CsvConfig) -> CsvSource:
    try:
        df = pd.read_csv(
            handle,
            header=None,
            dtype=str,
            na_filter=True,
            keep_default_na=False,
            sep=csv_config.delimiter,
            quotechar=csv_config.quotechar,
            skip_blank_lines=True,
            low_memory=False,
        )
    except pd.errors.EmptyDataError:
        raise CSVFormatError(f"CSV file {path} has no headers. cannot process.", file_path=path)
    except pd.errors.ParserError as e:
        raise CSVFormatError(f"failed to read/parse CSV input {path}: {e}", file_path=path)
    except UnicodeDecodeError as e:
        raise CSVFormatError(f"CSV file {path} is not valid {csv_config.encoding}: {e}", file_path=path)
    except OSError as e:
        raise SourceIOError(f"cannot read CSV file {path}: {e}", file_path=path, operation='read')

    # Rows longer than the header fail to parse. Shorter ones come back padded
    # with NaN, while empty cells present in the file stay as ''.
    short_rows = df.isna().any(axis=1)
    if short_rows.any():
        position = short_rows.idxmax()
        raise CSVFormatError(
            f"wrong number of fields in CSV file {path}: expected {df.shape[1]}, "
            f"got {int(df.loc[position].notna().sum())}",
            file_path=path,
            row=int(position) + 1
        )

    values = df.values.tolist()
    header, rows = values[0], values[1:]

    logger.info(f"Read {len(rows)} data rows with {len(header)} columns from {path}")
    return CsvSource(name=path, header=header, rows=rows)


def read_csv_source(path: str, csv_config: Optional[CsvConfig] = None) -> CsvSource:
    """
    Read one CSV file; the first row is the header.

    Args:
        path: Path to the CSV file
        csv_config: Delimiter, quote character and encoding

    Returns:
        CsvSource with header and data rows as strings

    Raises:
        SourceIOError: If the file cannot be opened or read
        CSVFormatError: If the file has no header or cannot be parsed
    """
    return read_csv_sources([path], csv_config)[0]


def read_csv_sources(paths: Sequence[str], csv_config: Optional[CsvConfig] = None) -> List[CsvSource]:
    """
    Read every input file, in argument order.

    All files are opened before any of them is parsed, so an unreadable
    file is reported before work is spent on the others.
    """
    csv_config = csv_config or CsvConfig()

    with ExitStack() as stack:
        handles = [_open_source(stack, path, csv_config) for path in paths]
        return [_parse_source(handle, path, csv_config) for handle, path in zip(handles, paths)]


class JoinedCsvWriter:
    """Writes the header row and data rows of the joined output to a text sink."""

    def __init__(
        self,
        sink: TextIO,
        columns: Sequence[str],
        csv_config: Optional[CsvConfig] = None,
        output_config: Optional[OutputConfig] = None,
        destination: str = '<stdout>'
    ):
        self.sink = sink
        self.columns = list(columns)
        self.csv_config = csv_config or CsvConfig()
        self.output_config = output_config or OutputConfig()
        self.destination = destination
        self.rows_written = 0

    def _to_csv(self, df: pd.DataFrame, header: bool) -> None:
        try:
            df.to_csv(
                self.sink,
                index=False,
                header=header,
                sep=self.csv_config.delimiter,
                quotechar=self.csv_config.quotechar,
                lineterminator=self.output_config.lineterminator,
            )
        except OSError as e:
            raise OutputWriteError(f"failed to write CSV output: {e}", destination=self.destination)

    def write_header(self) -> None:
        self._to_csv(pd.DataFrame(columns=self.columns), header=True)

    def write_rows(self, rows: Sequence[Sequence[str]]) -> None:
        if not rows:
            return
        self._to_csv(pd.DataFrame(list(rows), columns=self.columns), header=False)
        self.rows_written += len(rows)

    def flush(self) -> None:
        try:
            self.sink.flush()
        except OSError as e:
            raise OutputWriteError(f"failed to flush CSV output: {e}", destination=self.destination)
