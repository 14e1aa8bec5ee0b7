from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from adlsproxy.constants.query import DEFAULT_SCHEMA, OperationKind
from adlsproxy.operations.base import EntityRequest, FilterClause, SortKey
from adlsproxy.operations.query import CountRequest, FindSetRequest, IsEmptyRequest


class BaseQueryBuilder(ABC):
    """Base interface for query builders.

    Query builders render a typed request into a single SQL statement.
    They do NOT execute or log anything - execution belongs to the engine
    and logging to the request processor. Builders hold no per-request
    state, so one instance can serve concurrent requests.

    Rendering contract:
        - Identifiers are bracket-quoted exactly as received.
        - String and date values are single-quoted exactly as received.
        - Numbers are rendered bare; booleans as ``1``/``0``.

    No escaping is applied to identifiers or values. A builder that binds
    values as parameters can be swapped in by implementing this interface.
    """

    def __init__(self, schema_name: str = DEFAULT_SCHEMA):
        """Initialize the builder.

        Args:
            schema_name: Schema that owns every queried entity
        """
        self.schema_name = schema_name

    @abstractmethod
    def _build_find_set(self, request: FindSetRequest) -> str:
        """Build the row-fetching statement.

        Args:
            request: FindSet request

        Returns:
            SELECT statement
        """
        pass

    @abstractmethod
    def _build_count(self, request: CountRequest) -> str:
        """Build the row-counting statement.

        Args:
            request: Count request

        Returns:
            SELECT COUNT(*) statement
        """
        pass

    @abstractmethod
    def _build_is_empty(self, request: IsEmptyRequest) -> str:
        """Build the existence-check statement.

        Args:
            request: IsEmpty request

        Returns:
            Statement returning a single 0/1 flag
        """
        pass

    def build_query(self, request: EntityRequest) -> str:
        """Build SQL text for a request.

        Args:
            request: Typed request produced by ``parse_request``

        Returns:
            SQL statement text

        Raises:
            NotImplementedError: If the operation kind is not supported
        """
        operation_mapping = {
            OperationKind.FIND_SET: self._build_find_set,
            OperationKind.COUNT: self._build_count,
            OperationKind.IS_EMPTY: self._build_is_empty,
        }

        builder_method = operation_mapping.get(request.operation_kind)
        if builder_method:
            return builder_method(request)

        raise NotImplementedError(
            f"Operation kind {request.operation_kind} not supported by {self.__class__.__name__}"
        )

    def quote_identifier(self, identifier: str) -> str:
        """Wrap an identifier in square brackets."""
        return f"[{identifier}]"

    def fully_qualified_name(self, database: str, entity: str) -> str:
        """Build ``[database].[schema].[entity]``."""
        return ".".join(
            self.quote_identifier(part) for part in (database, self.schema_name, entity)
        )

    def format_column_list(self, columns: Optional[Sequence[str]]) -> str:
        """Format the projection list; no columns means ``*``."""
        if not columns:
            return "*"
        return ", ".join(self.quote_identifier(col) for col in columns)

    def format_value(self, value: Any) -> str:
        """Render a filter value as a SQL literal.

        Args:
            value: Scalar filter value

        Returns:
            Quoted string/date literal, bare number, or 1/0 for booleans
        """
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, str):
            return f"'{value}'"
        if isinstance(value, date):
            return f"'{value.isoformat()}'"
        return str(value)

    def format_filter(self, clause: FilterClause) -> str:
        """Render ``[field] <symbol> <value>``."""
        return (
            f"{self.quote_identifier(clause.field)} {clause.op.symbol} "
            f"{self.format_value(clause.value)}"
        )

    def format_sort_key(self, key: SortKey) -> str:
        """Render ``[field] ASC`` or ``[field] DESC``."""
        direction = "ASC" if key.ascending else "DESC"
        return f"{self.quote_identifier(key.field)} {direction}"

    def build_where(self, filters: Iterable[FilterClause]) -> str:
        """Build the WHERE clause with a leading space, or an empty string."""
        clauses = [self.format_filter(clause) for clause in filters]
        if not clauses:
            return ""
        return f" WHERE {' AND '.join(clauses)}"

    def build_order_by(self, keys: Iterable[SortKey]) -> str:
        """Build the ORDER BY clause with a leading space, or an empty string."""
        rendered = [self.format_sort_key(key) for key in keys]
        if not rendered:
            return ""
        return f" ORDER BY {', '.join(rendered)}"
