from collections import defaultdict

from mapjournal.post_entities import ImageRow, ImageSchema
from mapjournal.repository import Repository, RepositoryConfig


class ImageRepository(Repository[ImageRow, ImageRow, ImageRow]):
    def __init__(self, config: RepositoryConfig | None = None):
        super().__init__(
            entity_schema_class=ImageRow,
            table_name="images",
            config=config,
        )

    async def create_for_post(self, post_id: int, uris: list[str]) -> list[ImageRow]:
        """Insert one image row per uri; ids ascend in input order"""
        return await self.create_many(
            [ImageRow(post_id=post_id, uri=uri) for uri in uris]
        )

    async def delete_for_post(self, post_id: int) -> int:
        return await self.where(ImageSchema.post_id, post_id).delete()

    async def find_for_posts(self, post_ids: list[int]) -> dict[int, list[ImageRow]]:
        """Images of several posts keyed by post id, each list in id order"""
        if not post_ids:
            return {}
        images = await (
            self.where_in(ImageSchema.post_id, post_ids)
            .order_by_asc(ImageSchema.id)
            .get()
        )
        by_post: dict[int, list[ImageRow]] = defaultdict(list)
        for image in images:
            by_post[image.post_id].append(image)
        return dict(by_post)
