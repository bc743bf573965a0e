import datetime
import logging

from mapjournal.db_context import unit_of_work
from mapjournal.errors import NotFoundError, ValidationError
from mapjournal.favorite_repository import FavoriteRepository
from mapjournal.image_association import ImageAssociationManager
from mapjournal.image_repository import ImageRepository
from mapjournal.post_entities import (
    AuthUser,
    Post,
    PostCreate,
    PostRow,
    PostRowUpdate,
    PostUpdate,
)
from mapjournal.post_filter import DEFAULT_PER_PAGE, PostFilter
from mapjournal.post_presenter import (
    MarkerView,
    MonthPostEntry,
    PostDetailView,
    PostView,
    group_by_day,
    to_marker,
    to_post_detail,
    to_post_view,
)
from mapjournal.post_repository import PostRepository
from mapjournal.repository import RepositoryConfig

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Post not found"

# Upper bound of a SERIAL (int4) id
MAX_POST_ID = 2**31 - 1


class PostService:
    """Read and write views over one user's posts.

    Each public method is one unit of work in its own transaction (or a
    savepoint when called inside an open one). Storage failures leave as
    InternalError with a generic message; NotFoundError and ValidationError
    pass through unchanged.
    """

    def __init__(
        self,
        db_name: str = "default",
        per_page: int = DEFAULT_PER_PAGE,
        config: RepositoryConfig | None = None,
        post_repository: PostRepository | None = None,
        favorite_repository: FavoriteRepository | None = None,
        image_manager: ImageAssociationManager | None = None,
    ):
        self.db_name = db_name
        self.per_page = per_page
        image_repository = ImageRepository(config)
        self.post_repository = post_repository or PostRepository(
            config, image_repository
        )
        self.favorite_repository = favorite_repository or FavoriteRepository(config)
        self.image_manager = image_manager or ImageAssociationManager(image_repository)

    def _unit_of_work(self, operation: str, failure_message: str):
        return unit_of_work(self.db_name, operation, failure_message)

    def _check_page(self, page: int):
        if page < 1:
            raise ValidationError(f"Page must be 1 or greater, got {page}")

    def _check_post_id(self, post_id: int):
        # No stored row can carry an id outside the column range
        if not 1 <= post_id <= MAX_POST_ID:
            raise NotFoundError(POST_NOT_FOUND)

    async def get_all_markers(self, user: AuthUser) -> list[MarkerView]:
        """Map-pin projection of every post the user owns"""
        async with self._unit_of_work("get_all_markers", "Failed to load markers"):
            rows = await self.post_repository.find_markers(user.id)
        return [to_marker(row) for row in rows]

    async def get_my_posts(self, page: int, user: AuthUser) -> list[PostView]:
        """One page of the user's posts, newest date first"""
        self._check_page(page)
        post_filter = PostFilter(owner_id=user.id, page=page, per_page=self.per_page)
        async with self._unit_of_work("get_my_posts", "Failed to load posts"):
            posts = await self.post_repository.find_filtered(post_filter)
        return [to_post_view(post) for post in posts]

    async def search_my_posts(
        self, query: str, page: int, user: AuthUser
    ) -> list[PostView]:
        """Like get_my_posts, restricted to posts whose title or address contains query"""
        self._check_page(page)
        post_filter = PostFilter(
            owner_id=user.id, search=query, page=page, per_page=self.per_page
        )
        async with self._unit_of_work("search_my_posts", "Failed to search posts"):
            posts = await self.post_repository.find_filtered(post_filter)
        return [to_post_view(post) for post in posts]

    async def _load_post(self, post_id: int, user: AuthUser) -> tuple[Post, bool]:
        post = await self.post_repository.find_by_id_for_owner(
            post_id, user.id, with_images=True
        )
        if post is None:
            raise NotFoundError(POST_NOT_FOUND)
        is_favorite = await self.favorite_repository.exists_for(post_id, user.id)
        return post, is_favorite

    async def get_post_by_id(self, post_id: int, user: AuthUser) -> PostDetailView:
        self._check_post_id(post_id)
        async with self._unit_of_work("get_post_by_id", "Failed to load post"):
            post, is_favorite = await self._load_post(post_id, user)
        return to_post_detail(post, is_favorite)

    async def create_post(self, post_create: PostCreate, user: AuthUser) -> PostView:
        """Create a post and its images atomically"""
        row = PostRow(
            user_id=user.id,
            **post_create.model_dump(exclude={"image_uris"}),
        )
        async with self._unit_of_work("create_post", "Failed to create post"):
            post = await self.post_repository.create(row)
            await self.image_manager.attach(post, post_create.image_uris)
        logger.info("Created post %s with %d image(s)", post.id, len(post.images))
        return to_post_view(post)

    async def update_post(
        self, post_id: int, post_update: PostUpdate, user: AuthUser
    ) -> PostDetailView:
        """Rewrite the editable fields and replace the full image set"""
        self._check_post_id(post_id)
        async with self._unit_of_work("update_post", "Failed to update post"):
            _, is_favorite = await self._load_post(post_id, user)
            post = await self.post_repository.update_for_owner(
                post_id,
                user.id,
                PostRowUpdate(**post_update.model_dump(exclude={"image_uris"})),
            )
            if post is None:
                raise NotFoundError(POST_NOT_FOUND)
            await self.image_manager.replace(post, post_update.image_uris)
        return to_post_detail(post, is_favorite)

    async def delete_post(self, post_id: int, user: AuthUser) -> int:
        """Delete the post and return its id"""
        self._check_post_id(post_id)
        async with self._unit_of_work("delete_post", "Failed to delete post"):
            affected = await self.post_repository.delete_by_id_for_owner(
                post_id, user.id
            )
        if affected == 0:
            raise NotFoundError(POST_NOT_FOUND)
        return post_id

    async def get_posts_by_month(
        self, year: int, month: int, user: AuthUser
    ) -> dict[int, list[MonthPostEntry]]:
        """Calendar view: {day-of-month: [{id, title, address}, ...]}"""
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")
        if not datetime.MINYEAR <= year < datetime.MAXYEAR:
            raise ValidationError(f"Year out of range: {year}")
        async with self._unit_of_work("get_posts_by_month", "Failed to load posts"):
            rows = await self.post_repository.find_month_rows(user.id, year, month)
        return group_by_day(rows)
