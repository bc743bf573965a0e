"""Response shapes for post reads and writes.

View models list the fields that may leave the service; anything not named
here (the owner id in particular) is dropped when a row is mapped.
"""

import datetime
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from mapjournal.entities import MarkerColor
from mapjournal.post_entities import ImageRow, Post


class MarkerView(BaseModel):
    id: int
    latitude: float
    longitude: float
    color: MarkerColor
    score: float


class ImageView(BaseModel):
    id: int
    uri: str


class PostView(BaseModel):
    id: int
    latitude: float
    longitude: float
    title: str
    color: MarkerColor
    address: str
    date: datetime.date
    description: str
    score: float
    images: list[ImageView]


class PostDetailView(PostView):
    is_favorite: bool


class MonthPostEntry(BaseModel):
    id: int
    title: str
    address: str


def to_marker(row: Mapping[str, Any]) -> MarkerView:
    return MarkerView(
        id=row["id"],
        latitude=row["latitude"],
        longitude=row["longitude"],
        color=row["color"],
        score=row["score"],
    )


def sort_images(images: Iterable[ImageRow]) -> list[ImageView]:
    """Images in creation order (ascending id), whatever order they arrived in"""
    return [
        ImageView(id=image.id, uri=image.uri)
        for image in sorted(images, key=lambda image: image.id)
    ]


def _post_fields(post: Post) -> dict[str, Any]:
    return {
        "id": post.id,
        "latitude": post.latitude,
        "longitude": post.longitude,
        "title": post.title,
        "color": post.color,
        "address": post.address,
        "date": post.date,
        "description": post.description,
        "score": post.score,
        "images": sort_images(post.images),
    }


def to_post_view(post: Post) -> PostView:
    return PostView(**_post_fields(post))


def to_post_detail(post: Post, is_favorite: bool) -> PostDetailView:
    return PostDetailView(**_post_fields(post), is_favorite=is_favorite)


def group_by_day(rows: Iterable[Mapping[str, Any]]) -> dict[int, list[MonthPostEntry]]:
    """Group month rows into {day-of-month: entries}.

    Only days that have posts appear as keys. Entries keep row order; keys ascend.
    """
    grouped: dict[int, list[MonthPostEntry]] = {}
    for row in rows:
        entry = MonthPostEntry(id=row["id"], title=row["title"], address=row["address"])
        grouped.setdefault(int(row["day"]), []).append(entry)
    return dict(sorted(grouped.items()))
