"""Query-related constants.

Enumerations for the operations the proxy exposes and the comparison
operators a filter clause may use. They sit at the bottom of the import
graph so any layer can use them.
"""

from enum import Enum
from typing import Optional


class OperationKind(str, Enum):
    """Kind of query the proxy runs for a request.

    Values:
        FIND_SET: Return the matching rows, optionally projected, filtered
            and sorted.
        COUNT: Return the number of matching rows.
        IS_EMPTY: Return whether the filtered entity has no rows.
    """

    FIND_SET = "FindSet"
    COUNT = "Count"
    IS_EMPTY = "IsEmpty"


class FilterOperator(str, Enum):
    """Comparison operators accepted in a filter clause.

    Each member maps 1:1 to a T-SQL comparison symbol. Names are matched
    case-insensitively when parsing a request.
    """

    EQUALS = "Equals"
    NOT_EQUALS = "NotEquals"
    GREATER_THAN = "GreaterThan"
    GREATER_THAN_OR_EQUALS = "GreaterThanOrEquals"
    LESS_THAN = "LessThan"
    LESS_THAN_OR_EQUALS = "LessThanOrEquals"

    @property
    def symbol(self) -> str:
        """T-SQL comparison symbol for this operator."""
        return _OPERATOR_SYMBOLS[self]

    @classmethod
    def parse(cls, name: str) -> Optional["FilterOperator"]:
        """Look up an operator by name, ignoring case.

        Returns:
            The operator, or None when the name is not recognized
        """
        return _OPERATORS_BY_NAME.get(name.lower())


_OPERATOR_SYMBOLS = {
    FilterOperator.EQUALS: "=",
    FilterOperator.NOT_EQUALS: "!=",
    FilterOperator.GREATER_THAN: ">",
    FilterOperator.GREATER_THAN_OR_EQUALS: ">=",
    FilterOperator.LESS_THAN: "<",
    FilterOperator.LESS_THAN_OR_EQUALS: "<=",
}

_OPERATORS_BY_NAME = {op.value.lower(): op for op in FilterOperator}


DEFAULT_SCHEMA = "dbo"
