"""
Join expansion for N-way CSV joins.

For every join key, each source contributes all of its records for that
key; the joined rows are the cross-product of those records. A source
with no record for a key leaves an empty slot rather than dropping the
key, so its columns come out blank (or filled by another source that
defines the same column name).
"""

from typing import Iterator, List, Optional, Sequence

from .loader import KeyedCollection, Record


def build_key_universe(collections: Sequence[KeyedCollection]) -> List[str]:
    """Return the sorted, deduplicated union of keys across all sources."""
    keys = set()
    for collection in collections:
        keys.update(collection.keys())
    return sorted(keys)


def expand_join(
    key: str,
    collections: Sequence[KeyedCollection],
    accumulated: Optional[List[Record]] = None
) -> Iterator[List[Record]]:
    """
    Yield every combination of records sharing a key.

    Sources are visited in order, the first one outermost, so later
    sources vary fastest. A source without records for the key adds
    nothing to the combination but still lets it through.

    Args:
        key: Join key to expand
        collections: Keyed collections of the sources still to visit
        accumulated: Records already chosen from earlier sources

    Yields:
        Lists of records, one per source that has the key, in source order
    """
    if accumulated is None:
        accumulated = []

    if not collections:
        yield accumulated
        return

    this, remain = collections[0], collections[1:]
    records = this.get(key)

    if not records:
        yield from expand_join(key, remain, accumulated)
        return

    for record in records:
        # Each branch gets its own list
        yield from expand_join(key, remain, accumulated + [record])


def project_row(combination: Sequence[Record], output_columns: Sequence[str]) -> List[str]:
    """
    Flatten a combination of records into one output row.

    Each column takes its value from the first record in the combination
    that defines it, or an empty string if none does.
    """
    row = []
    for col in output_columns:
        for record in combination:
            if col in record:
                row.append(record[col])
                break
        else:
            row.append('')
    return row
