"""
Tests for LIMIT, OFFSET, and pagination functionality in QueryBuilder.
"""

import pytest

from mapjournal.query_builder import QueryBuilder


class TestPaginationFeatures:
    """Test cases for pagination functionality"""

    def test_limit_and_offset_together(self):
        query, params = QueryBuilder("posts").limit(10).offset(20).build()

        assert query == "SELECT * FROM posts LIMIT 10 OFFSET 20"
        assert params == []

    def test_paginate_first_page(self):
        query, _ = QueryBuilder("posts").paginate(page=1, per_page=10).build()

        assert query == "SELECT * FROM posts LIMIT 10 OFFSET 0"

    def test_paginate_second_page(self):
        query, _ = QueryBuilder("posts").paginate(page=2, per_page=10).build()

        assert query == "SELECT * FROM posts LIMIT 10 OFFSET 10"

    def test_pagination_with_where_and_order(self):
        query, params = (
            QueryBuilder("posts")
            .scope("user_id", 4)
            .order_by_desc("date")
            .paginate(3, 5)
            .build()
        )

        assert query == (
            "SELECT * FROM posts WHERE user_id = $1 ORDER BY date DESC LIMIT 5 OFFSET 10"
        )
        assert params == [4]

    @pytest.mark.parametrize("page", [0, -1])
    def test_paginate_rejects_pages_below_one(self, page):
        with pytest.raises(ValueError, match="Page number must be 1 or greater"):
            QueryBuilder("posts").paginate(page)

    def test_paginate_rejects_empty_pages(self):
        with pytest.raises(ValueError, match="Per page count must be 1 or greater"):
            QueryBuilder("posts").paginate(1, 0)
