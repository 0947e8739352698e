"""
End-to-end join pipeline.

Phases run strictly in order: reconcile headers, load every source,
build the key universe, then expand and write each key. Everything is
validated and loaded before the first output byte is written, so a
failing run leaves no partial output behind.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, TextIO

from core.config import Config
from core.logging_config import get_logger
from file_handling.csv_utils import CsvSource, JoinedCsvWriter

from .headers import reconcile_headers
from .join import build_key_universe, expand_join, project_row
from .join_keys import JoinKeys
from .loader import KeyedCollection, load_source

logger = get_logger(__name__)


@dataclass
class PreparedJoin:
    """Everything needed to emit the joined rows."""
    join_keys: JoinKeys
    output_columns: List[str]
    collections: List[KeyedCollection]
    keys: List[str]


@dataclass
class JoinSummary:
    """What a join run produced."""
    sources: int
    join_columns: List[str]
    output_columns: List[str]
    keys: int
    rows_written: int


def prepare_join(sources: Sequence[CsvSource], config: Optional[Config] = None) -> PreparedJoin:
    """
    Reconcile headers and load every source into memory.

    Raises:
        SchemaError: If the sources share no column
        CSVFormatError: If a row does not match its source's header
    """
    config = config or Config()

    reconciliation = reconcile_headers([source.header for source in sources])
    join_keys = JoinKeys.from_columns(reconciliation.join_columns, separator=config.join.key_separator)

    collections = [
        load_source(source.rows, source.header, join_keys, source_name=source.name)
        for source in sources
    ]
    keys = build_key_universe(collections)
    logger.info(f"Key universe holds {len(keys)} distinct keys")

    return PreparedJoin(
        join_keys=join_keys,
        output_columns=reconciliation.output_columns,
        collections=collections,
        keys=keys,
    )


def iter_joined_rows(
    keys: Sequence[str],
    collections: Sequence[KeyedCollection],
    output_columns: Sequence[str]
) -> Iterator[List[str]]:
    """Yield projected output rows in key order."""
    for key in keys:
        for combination in expand_join(key, collections):
            yield project_row(combination, output_columns)


def write_join(
    prepared: PreparedJoin,
    sink: TextIO,
    config: Optional[Config] = None,
    destination: str = '<stdout>'
) -> JoinSummary:
    """Write the header row and every joined row to the sink, then flush it."""
    config = config or Config()
    writer = JoinedCsvWriter(
        sink,
        prepared.output_columns,
        csv_config=config.csv,
        output_config=config.output,
        destination=destination,
    )

    writer.write_header()

    chunk = []
    for row in iter_joined_rows(prepared.keys, prepared.collections, prepared.output_columns):
        chunk.append(row)
        if len(chunk) >= config.output.chunk_rows:
            writer.write_rows(chunk)
            chunk = []
    writer.write_rows(chunk)
    writer.flush()

    summary = JoinSummary(
        sources=len(prepared.collections),
        join_columns=list(prepared.join_keys.columns),
        output_columns=list(prepared.output_columns),
        keys=len(prepared.keys),
        rows_written=writer.rows_written,
    )
    logger.info(f"Wrote {summary.rows_written} rows for {summary.keys} keys to {destination}")
    return summary


def run_join(
    sources: Sequence[CsvSource],
    sink: TextIO,
    config: Optional[Config] = None,
    destination: str = '<stdout>'
) -> JoinSummary:
    """Join all sources and write the result to the sink."""
    prepared = prepare_join(sources, config)
    return write_join(prepared, sink, config, destination=destination)
