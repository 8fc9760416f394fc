import pytest

from athena_query.core import InvalidQuery
from athena_query.validation import validate_query_syntax


@pytest.mark.parametrize("query", [
    "SELECT * FROM my_table",
    "SELECT id, name FROM my_table WHERE id > 10",
    "SELECT COUNT(*) FROM my_table GROUP BY category",
    "DROP TABLE my_table",
    "INSERT INTO my_table VALUES (1, 'test')",
    "WITH t AS (SELECT * FROM my_table) SELECT * FROM t",
    "SELECT 1",
    "SELECT 1 AS one",
    "SELECT CURRENT_DATE",
    "SELECT NOW()",
    "SELECT 1 + 1",
    "SELECT -1",
    "SELECT (SELECT max(id) FROM my_table) AS top_id",
    "SELECT transform(ARRAY[1, 2], x -> x + 1)",
])
def test_valid_queries(query):
    validate_query_syntax(query)


@pytest.mark.parametrize("query", [
    "SELECT * FROM my_table WHERE",
    "SELECT * WHERE id = 1",
    "SELECT name",
    "SELECT upper(name)",
    "SELECT 1, id + 1",
    "",
    "   ",
])
def test_invalid_queries(query):
    with pytest.raises(InvalidQuery):
        validate_query_syntax(query)


def test_error_message_mentions_syntax():
    with pytest.raises(InvalidQuery) as exc_info:
        validate_query_syntax("SELECT * WHERE id = 1")

    assert "missing FROM clause" in str(exc_info.value)
