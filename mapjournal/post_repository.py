from typing import Any

from mapjournal.entities import SortOrder
from mapjournal.image_repository import ImageRepository
from mapjournal.post_entities import Post, PostRow, PostRowUpdate, PostSchema
from mapjournal.post_filter import PostFilter
from mapjournal.repository import Repository, RepositoryConfig

MARKER_FIELDS = ("id", "latitude", "longitude", "color", "score")


class PostRepository(Repository[PostRow, Post, PostRowUpdate]):
    """Posts table. Every by-id read, update and delete is scoped to an owner."""

    def __init__(
        self,
        config: RepositoryConfig | None = None,
        image_repository: ImageRepository | None = None,
    ):
        super().__init__(
            entity_schema_class=PostRow,
            entity_domain_class=Post,
            update_class=PostRowUpdate,
            table_name="posts",
            config=config,
        )
        self.image_repository = image_repository or ImageRepository(config)

    def query_by_owner(self, owner_id: int) -> "PostRepository":
        """Repository permanently restricted to one owner's rows"""
        return self.scope(PostSchema.user_id, owner_id)  # type: ignore[return-value]

    async def attach_images(self, posts: list[Post]) -> list[Post]:
        """Load the image rows of the given posts in one query"""
        images = await self.image_repository.find_for_posts(
            [post.id for post in posts if post.id is not None]
        )
        for post in posts:
            post.images = images.get(post.id, [])
        return posts

    async def find_by_id_for_owner(
        self, post_id: int, owner_id: int, with_images: bool = False
    ) -> Post | None:
        post = await self.query_by_owner(owner_id).where(PostSchema.id, post_id).first()
        if post is not None and with_images:
            await self.attach_images([post])
        return post

    async def find_filtered(self, post_filter: PostFilter) -> list[Post]:
        """Posts matching the filter, with their images"""
        posts = await post_filter.apply(self).get()
        return await self.attach_images(posts)

    async def find_markers(self, owner_id: int) -> list[dict[str, Any]]:
        return await self.query_by_owner(owner_id).select(*MARKER_FIELDS).get()  # type: ignore[return-value]

    async def find_month_rows(
        self, owner_id: int, year: int, month: int
    ) -> list[dict[str, Any]]:
        """id, title, address and day-of-month of the owner's posts in one month"""
        post_filter = PostFilter(
            owner_id=owner_id, year=year, month=month, order=SortOrder.ASC
        )
        return await (
            post_filter.apply(self)
            .select("id", "title", "address", "EXTRACT(DAY FROM date)::int AS day")
            .get()
        )  # type: ignore[return-value]

    async def update_for_owner(
        self, post_id: int, owner_id: int, update_data: PostRowUpdate
    ) -> Post | None:
        return await self.query_by_owner(owner_id).update(post_id, update_data)

    async def delete_by_id_for_owner(self, post_id: int, owner_id: int) -> int:
        """Delete at most one row; 0 means no such post for this owner"""
        return await self.query_by_owner(owner_id).delete(post_id)
