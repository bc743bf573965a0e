"""
Small immutable query builder for SELECT, UPDATE and DELETE statements.
The goal is to produce SQL with positional parameters, without execution.
"""

import re
from collections.abc import Callable
from typing import Any

_PARAM_PATTERN = re.compile(r"\$(\d+)")


class QueryBuilder:
    """
    Query builder for SELECT, UPDATE and DELETE statements.

    Usage:
        builder = QueryBuilder("posts")
        query, params = builder.scope("user_id", 7).where("id", post_id).build()

    Scope conditions are always ANDed with the rest of the predicate, so OR
    conditions added later can narrow the result but never widen it past the scope.
    """

    def __init__(self, table_name: str):
        self.table_name = table_name
        self.select_fields = "*"
        self.scope_conditions: list[str] = []
        self.where_conditions: list[str] = []
        self.or_where_conditions: list[str] = []
        self.params: list[Any] = []
        self.order_by_parts: list[str] = []
        self.limit_count: int | None = None
        self.offset_count: int | None = None

    def _clone(self) -> "QueryBuilder":
        new_builder = QueryBuilder(self.table_name)
        new_builder.select_fields = self.select_fields
        new_builder.scope_conditions = self.scope_conditions.copy()
        new_builder.where_conditions = self.where_conditions.copy()
        new_builder.or_where_conditions = self.or_where_conditions.copy()
        new_builder.params = self.params.copy()
        new_builder.order_by_parts = self.order_by_parts.copy()
        new_builder.limit_count = self.limit_count
        new_builder.offset_count = self.offset_count
        return new_builder

    def _render_condition(self, field: str, operator: str, value: Any) -> str:
        """Render one condition, appending its parameter when one is needed"""
        if value is None and operator == "=":
            return f"{field} IS NULL"
        if value is None and operator in ("!=", "<>"):
            return f"{field} IS NOT NULL"
        self.params.append(value)
        return f"{field} {operator} ${len(self.params)}"

    def _add_condition(
        self, field: str, value: Any, operator: str, is_or: bool = False
    ) -> "QueryBuilder":
        new_builder = self._clone()
        condition = new_builder._render_condition(field, operator, value)
        if is_or:
            new_builder.or_where_conditions.append(condition)
        else:
            new_builder.where_conditions.append(condition)
        return new_builder

    @staticmethod
    def _split_args(method: str, args: tuple[Any, ...]) -> tuple[str, Any]:
        # Length decides the style so that value=None works in the 3-arg form
        if len(args) == 2:
            return args[0], args[1]
        if len(args) == 1:
            return "=", args[0]
        raise TypeError(f"{method}() expects (field, value) or (field, operator, value)")

    def select(self, *fields: str) -> "QueryBuilder":
        """Set the SELECT fields; no fields means *"""
        new_builder = self._clone()
        new_builder.select_fields = ", ".join(fields) if fields else "*"
        return new_builder

    def scope(self, field: str, value: Any) -> "QueryBuilder":
        """Add a mandatory equality condition that every other condition is nested under"""
        if value is None:
            raise ValueError(f"Scope value for '{field}' must not be None")
        new_builder = self._clone()
        new_builder.scope_conditions.append(
            new_builder._render_condition(field, "=", value)
        )
        return new_builder

    def where(
        self,
        field_or_function: str | Callable[["QueryBuilder"], "QueryBuilder"],
        *args: Any,
    ) -> "QueryBuilder":
        """Add a WHERE condition or grouped WHERE clause.

        - where(field, value) -> operator defaults to '='
        - where(field, operator, value)
        - where(lambda qb: qb.where(...).or_where(...)) -> parenthesised group
        """
        if callable(field_or_function):
            return self.where_group(field_or_function)
        operator, value = self._split_args("where", args)
        return self._add_condition(field_or_function, value, operator, is_or=False)

    def or_where(
        self,
        field_or_function: str | Callable[["QueryBuilder"], "QueryBuilder"],
        *args: Any,
    ) -> "QueryBuilder":
        """Add an OR WHERE condition or grouped OR WHERE clause"""
        if callable(field_or_function):
            return self.or_where_group(field_or_function)
        operator, value = self._split_args("or_where", args)
        return self._add_condition(field_or_function, value, operator, is_or=True)

    def where_in(self, field: str, values: Any | list[Any]) -> "QueryBuilder":
        """Add a WHERE IN condition"""
        if not isinstance(values, list):
            values = [values]
        if not values:
            # IN () is not valid SQL; an empty set matches nothing
            new_builder = self._clone()
            new_builder.where_conditions.append("FALSE")
            return new_builder

        new_builder = self._clone()
        start_index = len(new_builder.params) + 1
        placeholders = ", ".join(f"${i + start_index}" for i in range(len(values)))
        new_builder.where_conditions.append(f"{field} IN ({placeholders})")
        new_builder.params.extend(values)
        return new_builder

    def _add_group_condition(
        self,
        group_function: Callable[["QueryBuilder"], "QueryBuilder"],
        is_or: bool = False,
    ) -> "QueryBuilder":
        group_builder = QueryBuilder("")
        result = group_function(group_builder)
        if result is not None:
            group_builder = result

        group_condition = group_builder._predicate()
        if not group_condition:
            return self

        # Shift the group's $n placeholders past the parameters we already hold
        offset = len(self.params)
        group_condition = _PARAM_PATTERN.sub(
            lambda m: f"${int(m.group(1)) + offset}", group_condition
        )

        new_builder = self._clone()
        if is_or:
            new_builder.or_where_conditions.append(f"({group_condition})")
        else:
            new_builder.where_conditions.append(f"({group_condition})")
        new_builder.params.extend(group_builder.params)
        return new_builder

    def where_group(
        self, group_function: Callable[["QueryBuilder"], "QueryBuilder"]
    ) -> "QueryBuilder":
        """Add a grouped WHERE clause using a function"""
        return self._add_group_condition(group_function, is_or=False)

    def or_where_group(
        self, group_function: Callable[["QueryBuilder"], "QueryBuilder"]
    ) -> "QueryBuilder":
        """Add a grouped OR WHERE clause using a function"""
        return self._add_group_condition(group_function, is_or=True)

    def order_by_asc(self, field: str) -> "QueryBuilder":
        new_builder = self._clone()
        new_builder.order_by_parts.append(f"{field} ASC")
        return new_builder

    def order_by_desc(self, field: str) -> "QueryBuilder":
        new_builder = self._clone()
        new_builder.order_by_parts.append(f"{field} DESC")
        return new_builder

    def limit(self, count: int) -> "QueryBuilder":
        new_builder = self._clone()
        new_builder.limit_count = count
        return new_builder

    def offset(self, count: int) -> "QueryBuilder":
        new_builder = self._clone()
        new_builder.offset_count = count
        return new_builder

    def paginate(self, page: int, per_page: int = 10) -> "QueryBuilder":
        """
        Set LIMIT and OFFSET for a 1-based page

        Args:
            page: Page number (1-based)
            per_page: Number of records per page (default: 10)
        """
        if page < 1:
            raise ValueError("Page number must be 1 or greater")
        if per_page < 1:
            raise ValueError("Per page count must be 1 or greater")

        return self.limit(per_page).offset((page - 1) * per_page)

    def _predicate(self) -> str:
        """Combine scope, AND and OR conditions into one predicate string"""
        body = ""
        if self.where_conditions and self.or_where_conditions:
            and_part = " AND ".join(self.where_conditions)
            if len(self.where_conditions) > 1:
                and_part = f"({and_part})"
            or_part = " OR ".join(self.or_where_conditions)
            body = f"{and_part} OR {or_part}"
        elif self.or_where_conditions:
            body = " OR ".join(self.or_where_conditions)
        elif self.where_conditions:
            body = " AND ".join(self.where_conditions)

        if not self.scope_conditions:
            return body

        scope = " AND ".join(self.scope_conditions)
        if not body:
            return scope
        if self.or_where_conditions:
            body = f"({body})"
        return f"{scope} AND {body}"

    def build(self) -> tuple[str, list[Any]]:
        """Build the SELECT query and parameters"""
        query_parts = [f"SELECT {self.select_fields} FROM {self.table_name}"]

        predicate = self._predicate()
        if predicate:
            query_parts.append(f"WHERE {predicate}")

        if self.order_by_parts:
            query_parts.append(f"ORDER BY {', '.join(self.order_by_parts)}")

        if self.limit_count is not None:
            query_parts.append(f"LIMIT {self.limit_count}")

        if self.offset_count is not None:
            query_parts.append(f"OFFSET {self.offset_count}")

        return " ".join(query_parts), self.params

    def build_delete(self) -> tuple[str, list[Any]]:
        """Build a DELETE for the current conditions; refuses to delete everything"""
        predicate = self._predicate()
        if not predicate:
            raise ValueError("Cannot delete without WHERE conditions")
        return f"DELETE FROM {self.table_name} WHERE {predicate}", self.params

    def build_update(self, values: dict[str, Any]) -> tuple[str, list[Any]]:
        """Build an UPDATE setting the given columns on rows matching the conditions"""
        if not values:
            raise ValueError("Cannot update without values")
        predicate = self._predicate()
        if not predicate:
            raise ValueError("Cannot update without WHERE conditions")

        offset = len(self.params)
        set_clause = ", ".join(
            f"{column} = ${offset + i + 1}" for i, column in enumerate(values)
        )
        query = f"UPDATE {self.table_name} SET {set_clause} WHERE {predicate}"
        return query, self.params + list(values.values())

    def to_sql(self) -> str:
        """Return only the SQL query string without parameters"""
        query, _ = self.build()
        return query
