"""
Local SQL syntax check

Catches syntax errors before a statement is sent to Athena, which saves a
round trip and the cost of a failed execution.
"""

import sqlglot
from sqlglot import expressions as exp
from sqlglot.errors import ParseError, TokenError

from .core import InvalidQuery

DIALECT = 'athena'


def validate_query_syntax(sql: str, dialect: str = DIALECT):
    """
    Parse SQL and reject obviously broken statements

    A SELECT without FROM is accepted when its projections are constant
    expressions: literals, arithmetic and function calls over them, or
    scalar subqueries (SELECT 1 + 1, SELECT -1, SELECT now()). A bare `*`
    or a column reference belonging to that SELECT is rejected.

    Args:
        sql: SQL text (may hold several statements)
        dialect: sqlglot dialect name

    Raises:
        InvalidQuery: Empty statement, parse error, or a SELECT without FROM
            that reads columns
    """
    if not sql or not sql.strip():
        raise InvalidQuery("SQL syntax error: empty statement")

    try:
        statements = sqlglot.parse(sql, read=dialect)
    except (ParseError, TokenError) as e:
        raise InvalidQuery(f"SQL syntax error: {e}") from e

    for statement in statements:
        if isinstance(statement, exp.Select):
            _check_select(statement)


def _check_select(select: exp.Select):
    has_from = any(isinstance(arg, exp.From) for arg in select.args.values())
    if has_from:
        return
    for projection in select.expressions:
        if isinstance(projection.unalias(), exp.Star) or _reads_columns(projection, select):
            raise InvalidQuery("SQL syntax error: SELECT query missing FROM clause")


def _reads_columns(projection: exp.Expression, select: exp.Select) -> bool:
    # columns inside a subquery or lambda are bound there, not by this SELECT
    return any(column.find_ancestor(exp.Select, exp.Lambda) is select
               for column in projection.find_all(exp.Column))
