"""Typed requests, one per operation kind."""

from typing import Literal, Optional, Tuple

from pydantic import Field

from adlsproxy.constants.query import OperationKind
from adlsproxy.operations.base import EntityRequest, SortKey


class FindSetRequest(EntityRequest):
    """Fetch matching rows.

    ``fields`` and ``order_by`` only have meaning for this kind.
    ``fields`` of None means every column.
    """
    operation_kind: Literal[OperationKind.FIND_SET] = Field(
        default=OperationKind.FIND_SET,
        frozen=True
    )
    fields: Optional[Tuple[str, ...]] = Field(default=None)
    order_by: Tuple[SortKey, ...] = Field(default=())


class CountRequest(EntityRequest):
    """Count matching rows."""
    operation_kind: Literal[OperationKind.COUNT] = Field(
        default=OperationKind.COUNT,
        frozen=True
    )


class IsEmptyRequest(EntityRequest):
    """Check whether any row matches."""
    operation_kind: Literal[OperationKind.IS_EMPTY] = Field(
        default=OperationKind.IS_EMPTY,
        frozen=True
    )
