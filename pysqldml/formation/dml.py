"""
Behavior shared by statement generators of all dialects.

Each function receives a `DMLContext`, which bundles the collaborators a dialect supplies (schema provider, quoter,
expression builder and type caster), and the caller-owned parameter map to append to.
"""

import itertools
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Sequence, Union

from ..model.expressions import ParameterMap, SubQuery
from ..model.id_types import Quoter
from ..schema import SchemaProvider
from .expression_builder import ExpressionBuilder
from .object_types import ColumnSchema, Constraint, InvalidArgumentError

Row = Union[Sequence[Any], Mapping[int, Any]]
"A row of values, addressed by column index."

InsertColumns = Union[Mapping[str, Any], SubQuery]
"Either a mapping of column names to values (or expressions), or a SELECT statement that produces the rows."

UpdateColumns = Union[bool, Mapping[str, Any]]
"`False` for no update, `True` to update all non-key columns, or a mapping of column names to values."


@dataclass(frozen=True)
class DMLContext:
    """
    Collaborators that shared statement building logic depends on.

    :param schema: Resolves table names to table metadata.
    :param quoter: Quotes table and column names.
    :param expressions: Binds parameters and builds conditions and SELECT fragments.
    :param typecast: Converts a value to the storage representation of a column.
    """

    schema: SchemaProvider
    quoter: Quoter
    expressions: ExpressionBuilder
    typecast: Callable[[Any, ColumnSchema], Any]


@dataclass
class InsertValues:
    """
    Column names and values of an INSERT statement.

    :param names: Quoted names of target columns.
    :param placeholders: Placeholders or raw SQL expressions, one for each name; empty for a SELECT source.
    :param values: The value clause to use when there are no placeholders, e.g. a SELECT statement.
    :param params: The parameter map that placeholders have been appended to.
    """

    names: list[str]
    placeholders: list[str]
    values: str
    params: ParameterMap


@dataclass
class UpsertColumns:
    """
    Columns that take part in an insert-or-update statement.

    :param unique_names: Quoted names of insert columns that belong to a key covered by the insert columns.
    :param insert_names: Quoted names of all insert columns.
    :param update_names: Quoted names of insert columns not part of a key, if all of them are to be updated.
    :param constraints: Keys (primary or unique) whose columns are all among the insert columns.
    """

    unique_names: list[str]
    insert_names: list[str]
    update_names: Optional[list[str]]
    constraints: list[Constraint]


def get_column_schemas(ctx: DMLContext, table: str) -> dict[str, ColumnSchema]:
    "Returns the columns of a table, or an empty mapping if the table is unknown."

    table_schema = ctx.schema.get_table_schema(table)
    if table_schema is None:
        return {}
    return table_schema.columns


def normalize_column_names(
    ctx: DMLContext, table: str, columns: Iterable[str]
) -> dict[str, str]:
    """
    Maps column names as supplied by the caller to unquoted column names as known to the schema.

    A qualifier that names the target table (e.g. `"t"."col"`) is stripped.

    :raises InvalidArgumentError: A column is specified more than once.
    """

    raw_table_name = ctx.schema.get_raw_table_name(table)
    normalized_names: dict[str, str] = {}
    for name in columns:
        parts = ctx.quoter.get_table_name_parts(name)
        qualifier = ".".join(parts[:-1])
        if qualifier and qualifier != raw_table_name:
            raise InvalidArgumentError(
                f"column `{name}` does not belong to table `{raw_table_name}`"
            )

        normalized_name = parts[-1]
        if normalized_name in normalized_names.values():
            raise InvalidArgumentError(f"column `{name}` is specified more than once")
        normalized_names[name] = normalized_name
    return normalized_names


def bind_column_value(
    ctx: DMLContext,
    value: Any,
    column: Optional[ColumnSchema],
    params: ParameterMap,
) -> str:
    "Casts a value to the storage type of its column (if known), and renders it as a placeholder or expression."

    if column is not None:
        value = ctx.typecast(value, column)
    return ctx.expressions.build_value(value, params)


def peek_rows(rows: Iterable[Row]) -> Optional[Iterator[Row]]:
    """
    Checks whether an iterable of rows has any items without losing the first one.

    :returns: An iterator over all rows, or `None` if there are no rows.
    """

    iterator = iter(rows)
    try:
        first = next(iterator)
    except StopIteration:
        return None
    return itertools.chain((first,), iterator)


def prepare_batch_values(
    ctx: DMLContext,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Row],
    params: ParameterMap,
) -> tuple[list[str], list[str]]:
    """
    Binds the values of several rows.

    Values in a position with a known column are cast to the storage type of the column; other values are bound
    as they are.

    :returns: Quoted column names and a parenthesized list of placeholders for each row.
    """

    if not columns:
        raise InvalidArgumentError(f"no columns to insert into table `{table}`")

    column_schemas = get_column_schemas(ctx, table)
    mapped_names = normalize_column_names(ctx, table, columns)
    targets = [column_schemas.get(mapped_names[name]) for name in columns]

    values: list[str] = []
    for row in rows:
        items = row.items() if isinstance(row, Mapping) else enumerate(row)
        placeholders: list[str] = []
        for index, value in items:
            column = targets[index] if 0 <= index < len(targets) else None
            placeholders.append(bind_column_value(ctx, value, column, params))
        values.append("(" + ", ".join(placeholders) + ")")

    names = [ctx.quoter.quote_column_name(mapped_names[name]) for name in columns]
    return names, values


def prepare_insert_select_subquery(
    ctx: DMLContext, query: SubQuery, params: ParameterMap
) -> tuple[list[str], str]:
    """
    Prepares a SELECT statement to act as the source of an INSERT statement.

    :returns: Quoted names of the columns the query produces, and the query text preceded by a space.
    """

    if not query.names:
        raise InvalidArgumentError(
            "expected: SELECT statement with named result columns"
        )

    names = [ctx.quoter.quote_column_name(name) for name in query.names]
    ctx.expressions.merge_params(query.params, params)
    return names, " " + query.sql


def prepare_insert_values(
    ctx: DMLContext, table: str, columns: InsertColumns, params: ParameterMap
) -> InsertValues:
    """
    Normalizes the columns of an insert into target column names and placeholders.

    A mapping of columns is cast and bound column by column. A SELECT statement contributes its result column names
    and its text as the value clause. Without any columns, the value clause is `DEFAULT VALUES`.
    """

    names: list[str] = []
    placeholders: list[str] = []
    values = " DEFAULT VALUES"

    if isinstance(columns, SubQuery):
        names, values = prepare_insert_select_subquery(ctx, columns, params)
    else:
        column_schemas = get_column_schemas(ctx, table)
        mapped_names = normalize_column_names(ctx, table, columns.keys())
        for name, value in columns.items():
            column_name = mapped_names[name]
            names.append(ctx.quoter.quote_column_name(column_name))
            placeholders.append(
                bind_column_value(ctx, value, column_schemas.get(column_name), params)
            )

    return InsertValues(names, placeholders, values, params)


def prepare_update_sets(
    ctx: DMLContext, table: str, columns: Mapping[str, Any], params: ParameterMap
) -> list[str]:
    "Builds the assignments of an UPDATE SET clause, e.g. `\"col\"=:qp0`."

    column_schemas = get_column_schemas(ctx, table)
    mapped_names = normalize_column_names(ctx, table, columns.keys())

    sets: list[str] = []
    for name, value in columns.items():
        column_name = mapped_names[name]
        placeholder = bind_column_value(
            ctx, value, column_schemas.get(column_name), params
        )
        sets.append(f"{ctx.quoter.quote_column_name(column_name)}={placeholder}")
    return sets


def get_table_unique_column_names(
    ctx: DMLContext, table: str, columns: list[str]
) -> tuple[list[str], list[Constraint]]:
    """
    Finds the keys of a table that a set of columns fully covers.

    :param columns: Quoted names of columns.
    :returns: Quoted names of columns that take part in any covered key, and the covered keys.
    """

    column_names: list[str] = []
    constraints: list[Constraint] = []
    for constraint in ctx.schema.get_table_unique_keys(table):
        constraint_names = [
            ctx.quoter.quote_column_name(name) for name in constraint.column_names
        ]
        if all(name in columns for name in constraint_names):
            constraints.append(constraint)
            for name in constraint_names:
                if name not in column_names:
                    column_names.append(name)
    return column_names, constraints


def prepare_upsert_columns(
    ctx: DMLContext,
    table: str,
    insert_columns: InsertColumns,
    update_columns: UpdateColumns,
) -> UpsertColumns:
    "Resolves key, insert and update columns of an insert-or-update statement."

    if isinstance(insert_columns, SubQuery):
        insert_names, _ = prepare_insert_select_subquery(ctx, insert_columns, {})
    else:
        mapped_names = normalize_column_names(ctx, table, insert_columns.keys())
        insert_names = [
            ctx.quoter.quote_column_name(name) for name in mapped_names.values()
        ]

    unique_names, constraints = get_table_unique_column_names(ctx, table, insert_names)

    if update_columns is True:
        update_names: Optional[list[str]] = [
            name for name in insert_names if name not in unique_names
        ]
    else:
        update_names = None

    return UpsertColumns(unique_names, insert_names, update_names, constraints)


def qualify_column_name(ctx: DMLContext, name: str, alias: str) -> str:
    "Prefixes a column name with a table alias unless the name is already qualified."

    quoted_name = ctx.quoter.quote_column_name(name)
    if "." in quoted_name:
        return quoted_name
    return f"{alias}.{quoted_name}"


def parse_sequence_value(value: Union[int, str]) -> int:
    "Validates an explicit restart value for a sequence."

    if isinstance(value, bool):
        raise InvalidArgumentError(f"expected: integer sequence value; got: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(
            f"expected: integer sequence value; got: {value!r}"
        ) from e
