"""Base request definitions.

A request is a pure data structure describing WHAT to query: the target
entity and the clauses to apply. Query builders turn requests into SQL;
engines execute that SQL.
"""

from datetime import date, datetime
from typing import Tuple, Union

from pydantic import Field, StrictBool, StrictFloat, StrictInt, StrictStr

from adlsproxy.constants.query import FilterOperator, OperationKind
from adlsproxy.types.base import ProxyBaseModel

# datetime before date: a datetime is also a date
ScalarValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, datetime, date]


class FilterClause(ProxyBaseModel):
    """One ``[field] <op> value`` condition, AND-combined with its siblings."""
    op: FilterOperator
    field: str = Field(..., min_length=1)
    value: ScalarValue


class SortKey(ProxyBaseModel):
    """One ORDER BY column and its direction."""
    field: str = Field(..., min_length=1)
    ascending: bool = True


class EntityRequest(ProxyBaseModel):
    """Base class for every request kind.

    Attributes:
        operation_kind: Which query the request asks for
        server: SQL endpoint hosting the database
        database: Database containing the entity
        entity: Table (or external table/view) to query
        filters: Conditions applied as a WHERE clause, in request order
    """
    operation_kind: OperationKind
    server: str = Field(..., min_length=1)
    database: str = Field(..., min_length=1)
    entity: str = Field(..., min_length=1)
    filters: Tuple[FilterClause, ...] = ()

    @property
    def target(self) -> str:
        """Human-readable ``database.entity`` label for logs."""
        return f"{self.database}.{self.entity}"
