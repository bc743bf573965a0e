"""Repository class"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from mapjournal.database_operations import DatabaseOperations
from mapjournal.query_builder import QueryBuilder

T_schema = TypeVar("T_schema", bound=BaseModel)  # Stored row
T_domain = TypeVar("T_domain", bound=BaseModel)  # What callers work with
U = TypeVar("U", bound=BaseModel)  # Update model type


class RepositoryConfig(BaseModel):
    """Configuration options for Repository"""

    db_schema: str | None = Field(default=None, description="Database schema name")


def _to_db_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


class Repository(Generic[T_schema, T_domain, U]):
    """Table gateway with a fluent, immutable query interface.

    Every refinement (where, scope, order_by_desc, paginate, ...) returns a new
    repository carrying a new QueryBuilder, so a scoped repository can be handed
    out without callers being able to strip the scope.

    Type Parameters:
        T_schema: Stored row model (column names match fields)
        T_domain: Domain entity returned to callers
        U: Update model type
    """

    def __init__(
        self,
        entity_schema_class: type[T_schema],
        entity_domain_class: type[T_domain] | None = None,
        update_class: type[U] | None = None,
        table_name: str | None = None,
        config: RepositoryConfig | None = None,
    ):
        if entity_schema_class is None:
            raise ValueError("entity_schema_class is required")
        if table_name is None:
            raise ValueError("table_name is required")

        if entity_domain_class is None:
            entity_domain_class = entity_schema_class  # type: ignore[assignment]

        self.entity_schema_class = entity_schema_class
        self.entity_domain_class = entity_domain_class
        self.update_class = update_class
        self.table_name = table_name
        self.config = config or RepositoryConfig()
        self._qualified_table_name = (
            f"{self.config.db_schema}.{table_name}"
            if self.config.db_schema
            else table_name
        )
        self._query_builder: QueryBuilder | None = None
        self._schema_fields = set(entity_schema_class.model_fields.keys())

        self.db_ops = DatabaseOperations()

    def to_domain_entity(self, schema_entity: T_schema) -> T_domain:
        """Convert a stored row to a domain entity.

        Override in subclasses to customise the mapping.
        """
        if self.entity_schema_class == self.entity_domain_class:
            return schema_entity  # type: ignore[return-value]
        return self.entity_domain_class(**schema_entity.model_dump())  # type: ignore[return-value]

    def _map_row(self, row: Any) -> T_domain:
        return self.to_domain_entity(self.entity_schema_class(**dict(row)))

    def _insertable_fields(self, entity: BaseModel) -> dict[str, Any]:
        """Columns to INSERT: schema fields only, leaving unset ids to the store"""
        fields = entity.model_dump()
        return {
            k: _to_db_value(v)
            for k, v in fields.items()
            if k in self._schema_fields and not (k == "id" and v is None)
        }

    def _get_or_create_query_builder(self) -> QueryBuilder:
        if self._query_builder is None:
            return QueryBuilder(self._qualified_table_name)
        return self._query_builder

    def _clone_with_query_builder(
        self, query_builder: QueryBuilder
    ) -> "Repository[T_schema, T_domain, U]":
        """Create a sibling repository (same class) holding the given builder"""
        new_repo = object.__new__(type(self))
        new_repo.__dict__.update(self.__dict__)
        new_repo._query_builder = query_builder
        return new_repo

    # Fluent query methods that return a new repository instance
    def select(self, *fields: str) -> "Repository[T_schema, T_domain, U]":
        """Set the SELECT fields. get() then returns plain dicts."""
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().select(*fields)
        )

    def scope(self, field: str, value: Any) -> "Repository[T_schema, T_domain, U]":
        """Restrict every later query on this repository to field = value"""
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().scope(str(field), _to_db_value(value))
        )

    def where(self, field: Any, *args: Any) -> "Repository[T_schema, T_domain, U]":
        """Add a WHERE condition.

        Supports where(field, value), where(field, operator, value) and
        where(lambda qb: ...) for a parenthesised group.
        """
        if not callable(field):
            field = str(field)
            args = tuple(_to_db_value(a) for a in args)
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().where(field, *args)
        )

    def where_in(self, field: Any, values: list) -> "Repository[T_schema, T_domain, U]":
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().where_in(
                str(field), [_to_db_value(v) for v in values]
            )
        )

    def order_by_asc(self, field: Any) -> "Repository[T_schema, T_domain, U]":
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().order_by_asc(str(field))
        )

    def order_by_desc(self, field: Any) -> "Repository[T_schema, T_domain, U]":
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().order_by_desc(str(field))
        )

    def paginate(
        self, page: int, per_page: int = 10
    ) -> "Repository[T_schema, T_domain, U]":
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().paginate(page, per_page)
        )

    # Execution methods for fluent queries
    async def get(self) -> list[T_domain]:
        """Execute the query and return all matching rows as domain entities"""
        builder = self._get_or_create_query_builder()
        query, params = builder.build()
        rows = await self.db_ops.fetch_all(query, params)

        # Custom projections come back as plain dicts
        if builder.select_fields.strip() != "*":
            return [dict(row) for row in rows]  # type: ignore[misc]

        return [self._map_row(row) for row in rows]

    async def first(self) -> T_domain | None:
        """Execute the query and return the first matching domain entity"""
        builder = self._get_or_create_query_builder().limit(1)
        query, params = builder.build()
        row = await self.db_ops.fetch_one(query, params)
        if row is None:
            return None
        if builder.select_fields.strip() != "*":
            return dict(row)  # type: ignore[return-value]
        return self._map_row(row)

    async def count(self) -> int:
        count_builder = self._get_or_create_query_builder().select("COUNT(*)")
        # ORDER BY / LIMIT are meaningless for a count
        count_builder.order_by_parts = []
        count_builder.limit_count = None
        count_builder.offset_count = None
        query, params = count_builder.build()
        result = await self.db_ops.fetch_value(query, params)
        return result or 0

    async def exists(self) -> bool:
        return await self.count() > 0

    def build(self) -> tuple[str, list[Any]]:
        return self._get_or_create_query_builder().build()

    # CRUD operations
    async def find_by_id(self, entity_id: int) -> T_domain | None:
        return await self.where("id", entity_id).first()

    async def create(self, entity: T_domain) -> T_domain:
        """Insert a row and return it as stored (with its assigned id)"""
        fields = self._insertable_fields(entity)
        columns = ", ".join(fields.keys())
        values = list(fields.values())
        placeholders = ", ".join(f"${i + 1}" for i in range(len(values)))

        row = await self.db_ops.fetch_one(
            f"INSERT INTO {self._qualified_table_name} ({columns}) "
            f"VALUES ({placeholders}) RETURNING *",
            values,
        )
        return self._map_row(row)

    async def create_many(self, entities: list[T_domain]) -> list[T_domain]:
        """Insert several rows in one statement.

        Returned rows keep input order; serial ids are assigned in that order.
        """
        if not entities:
            return []

        all_fields = [self._insertable_fields(entity) for entity in entities]
        columns = list(all_fields[0].keys())
        field_count = len(columns)

        rows_placeholders = []
        all_values: list[Any] = []
        for i, fields in enumerate(all_fields):
            all_values.extend(fields[column] for column in columns)
            row_placeholders = ", ".join(
                f"${j + i * field_count + 1}" for j in range(field_count)
            )
            rows_placeholders.append(f"({row_placeholders})")

        rows = await self.db_ops.fetch_all(
            f"INSERT INTO {self._qualified_table_name} ({', '.join(columns)}) "
            f"VALUES {', '.join(rows_placeholders)} RETURNING *",
            all_values,
        )
        return sorted(
            (self._map_row(row) for row in rows),
            key=lambda entity: entity.id,  # type: ignore[attr-defined]
        )

    async def update(self, entity_id: int, update_data: U) -> T_domain | None:
        """Update the explicitly set fields of a row within the current query scope"""
        update_dict = {
            k: _to_db_value(v)
            for k, v in update_data.model_dump(exclude_unset=True).items()
            if k in self._schema_fields
        }
        builder = self._get_or_create_query_builder().where("id", entity_id)

        if not update_dict:
            return await self._clone_with_query_builder(builder).first()

        query, params = builder.build_update(update_dict)
        row = await self.db_ops.fetch_one(f"{query} RETURNING *", params)
        return self._map_row(row) if row else None

    async def delete(self, entity_id: int | None = None) -> int:
        """
        Delete by id and/or the current conditions and return the affected count.

        - repo.delete(id) -> delete one row (within the current scope, if any)
        - repo.where(...).delete() -> delete all matching rows
        """
        builder = self._get_or_create_query_builder()
        if entity_id is not None:
            builder = builder.where("id", entity_id)

        query, params = builder.build_delete()
        result = await self.db_ops.execute_query(query, params)
        # Status string looks like "DELETE 3"
        return int(result.split()[-1])
