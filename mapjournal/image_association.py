import logging

from mapjournal.image_repository import ImageRepository
from mapjournal.post_entities import ImageInput, Post

logger = logging.getLogger(__name__)


class ImageAssociationManager:
    """Creates and replaces the full image set of a post.

    Must run inside the same transaction as the post write: a failure here
    raises and the whole unit of work rolls back.
    """

    def __init__(self, image_repository: ImageRepository | None = None):
        self.image_repository = image_repository or ImageRepository()

    async def attach(self, post: Post, image_inputs: list[ImageInput]) -> Post:
        """Persist one image row per input and set them as the post's images"""
        if post.id is None:
            raise ValueError("Post must be persisted before images can reference it")
        post.images = await self.image_repository.create_for_post(
            post.id, [image.uri for image in image_inputs]
        )
        return post

    async def replace(self, post: Post, image_inputs: list[ImageInput]) -> Post:
        """Drop every existing image of the post, then attach the new set"""
        removed = await self.image_repository.delete_for_post(post.id)
        logger.debug("Replacing %d image(s) of post %s", removed, post.id)
        return await self.attach(post, image_inputs)
