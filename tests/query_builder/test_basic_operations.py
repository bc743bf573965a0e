"""
Tests for SELECT, WHERE and ORDER BY in QueryBuilder.
"""

import pytest

from mapjournal.query_builder import QueryBuilder


class TestBasicOperations:
    """Test cases for the basic clauses"""

    def test_basic_select_all(self):
        query, params = QueryBuilder("posts").build()

        assert query == "SELECT * FROM posts"
        assert params == []

    def test_select_specific_fields(self):
        query = QueryBuilder("posts").select("id", "latitude", "longitude").to_sql()

        assert query == "SELECT id, latitude, longitude FROM posts"

    def test_where_defaults_to_equality(self):
        query, params = QueryBuilder("posts").where("id", 7).build()

        assert query == "SELECT * FROM posts WHERE id = $1"
        assert params == [7]

    def test_where_with_operator(self):
        query, params = (
            QueryBuilder("posts").where("score", ">=", 3).where("title", "LIKE", "%a%").build()
        )

        assert query == "SELECT * FROM posts WHERE score >= $1 AND title LIKE $2"
        assert params == [3, "%a%"]

    def test_where_none_renders_is_null(self):
        query, params = QueryBuilder("posts").where("description", None).build()

        assert query == "SELECT * FROM posts WHERE description IS NULL"
        assert params == []

    def test_where_rejects_wrong_arity(self):
        with pytest.raises(TypeError):
            QueryBuilder("posts").where("id")

    def test_where_in(self):
        query, params = QueryBuilder("images").where_in("post_id", [1, 2, 3]).build()

        assert query == "SELECT * FROM images WHERE post_id IN ($1, $2, $3)"
        assert params == [1, 2, 3]

    def test_where_in_empty_list_matches_nothing(self):
        query, params = QueryBuilder("images").where_in("post_id", []).build()

        assert query == "SELECT * FROM images WHERE FALSE"
        assert params == []

    def test_order_by_chain(self):
        query, _ = (
            QueryBuilder("posts").order_by_desc("date").order_by_asc("id").build()
        )

        assert query == "SELECT * FROM posts ORDER BY date DESC, id ASC"

    def test_builder_is_immutable(self):
        base = QueryBuilder("posts").where("user_id", 1)
        base.where("id", 2)

        query, params = base.build()
        assert query == "SELECT * FROM posts WHERE user_id = $1"
        assert params == [1]
