"""Compute-specific types.

``ResultSet`` is the contract between the engine and the result encoder:
column names in cursor order and every fetched row, with SQL NULL as
``None``.
"""

from typing import Any, Iterable, Sequence, Tuple

from pydantic import Field

from adlsproxy.types.base import ProxyBaseModel


class ResultSet(ProxyBaseModel):
    """Materialized tabular result of one statement.

    Attributes:
        columns: Column names in cursor order; duplicates are kept
        rows: Row values, positionally aligned with ``columns``
    """
    columns: Tuple[str, ...] = Field(default=())
    rows: Tuple[Tuple[Any, ...], ...] = Field(default=())

    @classmethod
    def from_rows(cls, columns: Iterable[str], rows: Iterable[Sequence[Any]]) -> "ResultSet":
        """Build a result set from any column/row iterables (e.g. a DB-API cursor)."""
        return cls(
            columns=tuple(str(col) for col in columns),
            rows=tuple(tuple(row) for row in rows),
        )

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def column_name(self, index: int) -> str:
        return self.columns[index]
