"""
Header reconciliation for N-way CSV joins.

This module compares the header rows of every input source and works out
which columns the sources are joined on and which columns the joined
output carries, in a deterministic order.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence

from core.exceptions import SchemaError
from core.logging_config import get_logger

logger = get_logger(__name__)


class OrderedColumnSet:
    """Distinct column names kept in first-seen order."""

    def __init__(self, columns: Iterable[str] = ()):
        self._columns: List[str] = []
        self._seen = set()
        self.extend(columns)

    def add(self, column: str) -> bool:
        """Add a column if not already present. Returns True if it was added."""
        if column in self._seen:
            return False
        self._seen.add(column)
        self._columns.append(column)
        return True

    def extend(self, columns: Iterable[str]) -> None:
        for column in columns:
            self.add(column)

    def to_list(self) -> List[str]:
        return list(self._columns)

    def __contains__(self, column: object) -> bool:
        return column in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)


@dataclass(frozen=True)
class HeaderReconciliation:
    """Result of comparing the headers of all sources."""
    join_columns: List[str]
    output_columns: List[str]


def identify_output_columns(headers: Sequence[Sequence[str]]) -> List[str]:
    """
    Return the distinct column names across all headers.

    Order is first-seen: the first source's columns in header order, then
    each later source's previously unseen columns.
    """
    output_columns = OrderedColumnSet()
    for header in headers:
        output_columns.extend(header)
    return output_columns.to_list()


def identify_join_columns(headers: Sequence[Sequence[str]]) -> List[str]:
    """
    Return the columns present in every source's header.

    A column repeated within one header counts once for that source. The
    result keeps first-seen order so every source derives its join keys
    from the same column sequence.

    Raises:
        SchemaError: If there are no headers or no column is common to all
    """
    if not headers:
        raise SchemaError("cannot identify join columns without any input headers")

    header_counts = {}
    for header in headers:
        for col in OrderedColumnSet(header):
            header_counts[col] = header_counts.get(col, 0) + 1

    join_columns = [
        col for col in identify_output_columns(headers)
        if header_counts[col] == len(headers)
    ]

    if not join_columns:
        raise SchemaError("cannot identify columns common to all input files to join", headers=list(headers))

    return join_columns


def reconcile_headers(headers: Sequence[Sequence[str]]) -> HeaderReconciliation:
    """Determine join columns and output columns for a set of source headers."""
    join_columns = identify_join_columns(headers)
    output_columns = identify_output_columns(headers)

    logger.info(f"Joining {len(headers)} sources on {join_columns}")
    logger.debug(f"Output columns: {output_columns}")

    return HeaderReconciliation(join_columns=join_columns, output_columns=output_columns)
