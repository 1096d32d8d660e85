"""Composable SELECT statements with optional predicates.

Predicates are appended conjunctively and bound positionally ($1, $2, ...),
so user input only ever travels as a query parameter.

Example:
    query = QueryBuilder('SELECT * FROM "TokenBalance" tb')
    query.where_if(address, 'tb."accountAddress" = {}', address)
    query.where_if(positive_only, 'tb.balance > 0')
    query.order_by('tb."lastUpdated" DESC').limit(20)
    sql, params = query.build()
"""
from typing import Any, List, Optional, Tuple

class QueryBuilder:
    """Builds a SELECT from a base statement and ordered optional predicates."""

    def __init__(self, base: str, *params: Any):
        """Initialize the builder.

        Args:
            base: Statement up to (not including) its WHERE clause. May
                  reference $1..$n if matching params are supplied.
            params: Values for placeholders already present in base
        """
        self._base = base.strip()
        self._params: List[Any] = list(params)
        self._predicates: List[str] = []
        self._order_by: Optional[str] = None
        self._limit: Optional[str] = None

    def param(self, value: Any) -> str:
        """Register a bound value and return its placeholder."""
        self._params.append(value)
        return f"${len(self._params)}"

    def where(self, predicate: str, *values: Any) -> 'QueryBuilder':
        """Append a predicate; each {} in it is replaced by a placeholder."""
        placeholders = [self.param(value) for value in values]
        self._predicates.append(predicate.format(*placeholders))
        return self

    def where_if(self, condition: Any, predicate: str, *values: Any) -> 'QueryBuilder':
        """Append a predicate only when condition is truthy."""
        if condition:
            self.where(predicate, *values)
        return self

    def order_by(self, clause: str) -> 'QueryBuilder':
        self._order_by = clause
        return self

    def limit(self, count: int) -> 'QueryBuilder':
        self._limit = self.param(count)
        return self

    def build(self) -> Tuple[str, List[Any]]:
        """Render the statement and its parameter list."""
        parts = [self._base]
        if self._predicates:
            parts.append('WHERE ' + '\n  AND '.join(self._predicates))
        if self._order_by:
            parts.append(f'ORDER BY {self._order_by}')
        if self._limit:
            parts.append(f'LIMIT {self._limit}')
        return '\n'.join(parts), list(self._params)
