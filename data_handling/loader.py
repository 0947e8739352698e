"""
Source loading for N-way CSV joins.

This module turns the data rows of one source into records and groups
them by join key, keeping each key's records in input row order.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from core.exceptions import CSVFormatError
from core.logging_config import get_logger

from .join_keys import JoinKeys

logger = get_logger(__name__)

# One input row, mapped by column name
Record = Dict[str, str]


class KeyedCollection:
    """Records of one source, grouped by join key."""

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._data: Dict[str, List[Record]] = {}
        self._record_count = 0

    def add(self, key: str, record: Record) -> None:
        """Append a record to the list for its key."""
        self._data.setdefault(key, []).append(record)
        self._record_count += 1

    def get(self, key: str) -> List[Record]:
        """Records for a key; an unknown key has no records."""
        return self._data.get(key, [])

    def keys(self) -> Iterator[str]:
        return iter(self._data)

    @property
    def record_count(self) -> int:
        return self._record_count

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"KeyedCollection(name={self.name!r}, keys={len(self)}, records={self.record_count})"


def make_record(header: Sequence[str], row: Sequence[str]) -> Record:
    """Zip a row's values against the header by position."""
    return dict(zip(header, row))


def load_source(
    rows: Iterable[Sequence[str]],
    header: Sequence[str],
    join_keys: JoinKeys,
    source_name: Optional[str] = None
) -> KeyedCollection:
    """
    Build the keyed collection of one source.

    Args:
        rows: Data rows of the source, header excluded
        header: Column names of the source, in file order
        join_keys: Join columns agreed across all sources
        source_name: Name used in diagnostics (typically the file path)

    Returns:
        KeyedCollection holding every row of the source

    Raises:
        CSVFormatError: If a row's length does not match the header
    """
    collection = KeyedCollection(source_name)

    # The header is row 1
    for row_number, row in enumerate(rows, start=2):
        if len(row) != len(header):
            raise CSVFormatError(
                f"wrong number of fields: expected {len(header)}, got {len(row)}",
                file_path=source_name,
                row=row_number
            )
        record = make_record(header, row)
        collection.add(join_keys.key_for(record), record)

    logger.info(f"Loaded {collection.record_count} records under {len(collection)} keys from {source_name or 'source'}")
    return collection
