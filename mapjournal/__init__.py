"""Geotagged journal posts: owner-scoped storage and query views"""

from mapjournal.categories import CategoryService, validate_categories
from mapjournal.entities import MarkerColor
from mapjournal.post_entities import AuthUser, ImageInput, PostCreate, PostUpdate
from mapjournal.post_service import PostService
from mapjournal.repository import Repository, RepositoryConfig

__all__ = [
    "AuthUser",
    "CategoryService",
    "ImageInput",
    "MarkerColor",
    "PostCreate",
    "PostService",
    "PostUpdate",
    "Repository",
    "RepositoryConfig",
    "validate_categories",
]
