"""
Join key derivation for CSV records.

A join key is the composite of a record's values for every join column,
taken in one agreed column order and separated by a marker that does not
occur in typical cell content.
"""

from dataclasses import dataclass
from typing import Mapping, Sequence, Tuple

DEFAULT_KEY_SEPARATOR = '++'


@dataclass(frozen=True)
class JoinKeys:
    """Encapsulates the join columns shared by all sources."""
    columns: Tuple[str, ...]
    separator: str = DEFAULT_KEY_SEPARATOR

    def __post_init__(self):
        if not self.columns:
            raise ValueError("JoinKeys needs at least one join column")
        if not self.separator:
            raise ValueError("JoinKeys separator cannot be empty")
        # Accept any sequence but always store a tuple
        object.__setattr__(self, 'columns', tuple(self.columns))

    @classmethod
    def from_columns(cls, columns: Sequence[str], separator: str = DEFAULT_KEY_SEPARATOR) -> 'JoinKeys':
        return cls(columns=tuple(columns), separator=separator)

    def key_for(self, record: Mapping[str, str]) -> str:
        """Return the composite join key of a record."""
        return self.separator.join(record.get(col, '') for col in self.columns)
