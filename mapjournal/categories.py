"""Per-user labels for the five marker colors"""

from collections.abc import Mapping

from pydantic import BaseModel

from mapjournal.db_context import unit_of_work
from mapjournal.entities import BaseEntity, MarkerColor
from mapjournal.errors import NotFoundError, ValidationError
from mapjournal.post_entities import AuthUser
from mapjournal.repository import Repository, RepositoryConfig


class UserCategoriesRow(BaseEntity):
    email: str
    red: str = ""
    yellow: str = ""
    blue: str = ""
    green: str = ""
    purple: str = ""


class CategoriesUpdate(BaseModel):
    red: str
    yellow: str
    blue: str
    green: str
    purple: str


def validate_categories(categories: Mapping[str, str]) -> dict[MarkerColor, str]:
    """Check that the keys are exactly the five marker colors.

    Raises ValidationError on a missing, extra or unknown key, or a non-string label.
    """
    try:
        keys = {MarkerColor(key) for key in categories}
    except ValueError as e:
        raise ValidationError("Invalid category") from e

    if keys != set(MarkerColor) or len(categories) != len(MarkerColor):
        raise ValidationError("Categories must name every marker color exactly once")

    labels = {MarkerColor(key): label for key, label in categories.items()}
    if not all(isinstance(label, str) for label in labels.values()):
        raise ValidationError("Category labels must be strings")
    return labels


class UserCategoriesRepository(
    Repository[UserCategoriesRow, UserCategoriesRow, CategoriesUpdate]
):
    def __init__(self, config: RepositoryConfig | None = None):
        super().__init__(
            entity_schema_class=UserCategoriesRow,
            update_class=CategoriesUpdate,
            table_name="users",
            config=config,
        )


def _labels_of(row: UserCategoriesRow) -> dict[MarkerColor, str]:
    return {color: getattr(row, color.value.lower()) for color in MarkerColor}


class CategoryService:
    def __init__(
        self,
        db_name: str = "default",
        repository: UserCategoriesRepository | None = None,
    ):
        self.db_name = db_name
        self.repository = repository or UserCategoriesRepository()

    async def get_categories(self, user: AuthUser) -> dict[MarkerColor, str]:
        async with unit_of_work(
            self.db_name, "get_categories", "Failed to load categories"
        ):
            row = await self.repository.find_by_id(user.id)
        if row is None:
            raise NotFoundError("User not found")
        return _labels_of(row)

    async def update_categories(
        self, user: AuthUser, categories: Mapping[str, str]
    ) -> dict[MarkerColor, str]:
        labels = validate_categories(categories)
        update = CategoriesUpdate(
            **{color.value.lower(): label for color, label in labels.items()}
        )
        async with unit_of_work(
            self.db_name, "update_categories", "Failed to update categories"
        ):
            row = await self.repository.update(user.id, update)
        if row is None:
            raise NotFoundError("User not found")
        return _labels_of(row)
