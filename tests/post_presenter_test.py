import datetime

from mapjournal.entities import MarkerColor
from mapjournal.post_entities import ImageRow, Post
from mapjournal.post_presenter import (
    PostDetailView,
    group_by_day,
    sort_images,
    to_marker,
    to_post_detail,
    to_post_view,
)


def make_post(images=None) -> Post:
    return Post(
        id=11,
        user_id=1,
        latitude=35.1,
        longitude=129.0,
        title="Busan Park",
        color=MarkerColor.GREEN,
        address="456 Main",
        date=datetime.date(2024, 5, 10),
        description="Windy",
        score=3,
        images=images or [],
    )


class TestPostPresenter:
    def test_images_sorted_by_id_for_any_input_order(self):
        images = [
            ImageRow(id=7, post_id=11, uri="c"),
            ImageRow(id=2, post_id=11, uri="a"),
            ImageRow(id=5, post_id=11, uri="b"),
        ]

        assert [image.id for image in sort_images(images)] == [2, 5, 7]
        assert [image.uri for image in sort_images(reversed(images))] == ["a", "b", "c"]

    def test_post_view_has_no_owner(self):
        view = to_post_view(make_post())

        dumped = view.model_dump()
        assert "user_id" not in dumped
        assert dumped["title"] == "Busan Park"
        assert dumped["address"] == "456 Main"

    def test_detail_carries_favorite_flag(self):
        detail = to_post_detail(
            make_post([ImageRow(id=9, post_id=11, uri="z"), ImageRow(id=1, post_id=11, uri="y")]),
            is_favorite=True,
        )

        assert isinstance(detail, PostDetailView)
        assert detail.is_favorite is True
        assert [image.id for image in detail.images] == [1, 9]
        assert "user_id" not in detail.model_dump()

    def test_marker_projection(self):
        marker = to_marker(
            {"id": 3, "latitude": 1.5, "longitude": 2.5, "color": "PURPLE", "score": 5}
        )

        assert marker.model_dump() == {
            "id": 3,
            "latitude": 1.5,
            "longitude": 2.5,
            "color": MarkerColor.PURPLE,
            "score": 5,
        }

    def test_group_by_day(self):
        rows = [
            {"id": 1, "title": "A", "address": "x", "day": 3},
            {"id": 2, "title": "B", "address": "y", "day": 3},
            {"id": 3, "title": "C", "address": "z", "day": 10},
        ]

        grouped = group_by_day(rows)

        assert list(grouped) == [3, 10]
        assert [entry.id for entry in grouped[3]] == [1, 2]
        assert [entry.title for entry in grouped[10]] == ["C"]
        assert grouped[3][0].model_dump() == {"id": 1, "title": "A", "address": "x"}

    def test_group_by_day_empty(self):
        assert group_by_day([]) == {}
