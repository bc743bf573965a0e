from mapjournal.post_entities import FavoriteRow, FavoriteSchema
from mapjournal.repository import Repository, RepositoryConfig


class FavoriteRepository(Repository[FavoriteRow, FavoriteRow, FavoriteRow]):
    """Read-only view of favorite rows; another component creates and removes them"""

    def __init__(self, config: RepositoryConfig | None = None):
        super().__init__(
            entity_schema_class=FavoriteRow,
            table_name="favorites",
            config=config,
        )

    async def exists_for(self, post_id: int, user_id: int) -> bool:
        """Whether user_id has favorited post_id"""
        return await (
            self.where(FavoriteSchema.post_id, post_id)
            .where(FavoriteSchema.user_id, user_id)
            .exists()
        )
