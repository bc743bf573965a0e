from enum import Enum
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel
from pydantic.config import ConfigDict

T = TypeVar("T")


class Field(Generic[T]):
    """Type-safe column reference for schema classes.

    Usage:
        class PostSchema(SchemaBase):
            title = Field[str]("title")

        repo.where(PostSchema.title, "Seoul Cafe")
    """

    def __init__(self, column_name: str):
        self._column_name = column_name

    @property
    def column(self) -> str:
        return self._column_name

    def __str__(self) -> str:
        """Return the column name when used in queries"""
        return self._column_name

    def __repr__(self) -> str:
        return f"Field({self._column_name})"


class SchemaBase:
    """Base class for column name holders built from Field[T] attributes"""

    pass


class BaseEntity(BaseModel):
    """Base class for stored rows. The id is assigned by the store on insert."""

    model_config: ClassVar[ConfigDict] = ConfigDict(use_enum_values=False)
    id: int | None = None


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class MarkerColor(str, Enum):
    """Closed set of post categories, also the keys of a user's category labels"""

    RED = "RED"
    YELLOW = "YELLOW"
    BLUE = "BLUE"
    GREEN = "GREEN"
    PURPLE = "PURPLE"
