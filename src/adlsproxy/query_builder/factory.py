"""Query Builder Factory.

Creates the query builder configured from environment settings.
"""

from typing import TYPE_CHECKING, Optional

from adlsproxy.query_builder.tsql_builder import TSqlQueryBuilder

if TYPE_CHECKING:
    from adlsproxy.settings import ProxySettings


class QueryBuilderFactory:
    """Factory for the platform query builder.

    Example:
        >>> builder = QueryBuilderFactory.create()
        >>> builder.build_query(request)
    """

    @staticmethod
    def create(settings: Optional['ProxySettings'] = None) -> TSqlQueryBuilder:
        """Create a T-SQL builder using the configured schema name.

        Args:
            settings: Settings to use; loaded from the environment if omitted

        Returns:
            Configured TSqlQueryBuilder instance
        """
        if settings is None:
            from adlsproxy.settings import get_settings
            settings = get_settings()

        return TSqlQueryBuilder(schema_name=settings.sql.schema_name)


def get_query_builder(settings: Optional['ProxySettings'] = None) -> TSqlQueryBuilder:
    """Convenience wrapper around ``QueryBuilderFactory.create``."""
    return QueryBuilderFactory.create(settings)
