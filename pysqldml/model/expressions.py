from dataclasses import dataclass, field
from typing import Any, Union

ParameterMap = dict[str, Any]
"""
Maps parameter names (without the leading colon) to values bound at execution time.

The map is owned by the caller and only ever appended to, so it can accumulate parameters across several statements.
"""


@dataclass(frozen=True)
class Expression:
    """
    A raw SQL fragment emitted verbatim instead of being bound as a parameter.

    :param sql: SQL text, which may reference parameters by name.
    :param params: Parameters referenced in the SQL text.
    """

    sql: str
    params: ParameterMap = field(default_factory=dict)

    def __str__(self) -> str:
        return self.sql


@dataclass(frozen=True)
class SubQuery:
    """
    A SELECT statement whose result set is the source of an INSERT or MERGE.

    :param sql: SQL text of the SELECT statement.
    :param names: Ordered names of the columns the SELECT statement produces.
    :param params: Parameters referenced in the SQL text.
    """

    sql: str
    names: tuple[str, ...]
    params: ParameterMap = field(default_factory=dict)

    def __str__(self) -> str:
        return self.sql


RawExpression = Union[Expression, SubQuery]
