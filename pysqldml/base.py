"""
pysqldml: Generate dialect-specific data manipulation statements.

This module defines the interface that statement generators of each dialect implement, and the engine abstraction
that instantiates generators.
"""

import abc
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Union

from .formation.dml import (
    DMLContext,
    InsertColumns,
    InsertValues,
    Row,
    UpdateColumns,
    peek_rows,
    prepare_batch_values,
    prepare_insert_values,
    prepare_update_sets,
)
from .formation.expression_builder import Condition, ExpressionBuilder
from .formation.object_types import ColumnSchema
from .formation.py_to_sql import DataclassConverter
from .formation.typecast import typecast_value
from .model.expressions import ParameterMap
from .model.id_types import Quoter
from .schema import SchemaCatalog, SchemaProvider

LOGGER = logging.getLogger("pysqldml")


@dataclass
class GeneratorOptions:
    """
    Database-agnostic generator options.

    :param param_prefix: Prefix of parameter names generated for bound values, e.g. `qp` for `:qp0`, `:qp1`, etc.
    """

    param_prefix: str = "qp"


class BaseGenerator(abc.ABC):
    """
    Generates SQL statements for inserting, updating, upserting or deleting data.

    Generators are stateless: table metadata is looked up through the schema provider each time a statement is
    built. Data values are never embedded in SQL text but bound as parameters, which are appended to a parameter map
    owned by the caller. The map may be shared across several statements; concurrent use of the same map requires
    external synchronization.

    :param schema: Resolves table names to table metadata.
    :param options: Database-agnostic generator options.
    """

    schema: SchemaProvider
    options: GeneratorOptions
    quoter: Quoter
    expressions: ExpressionBuilder

    def __init__(
        self, schema: SchemaProvider, options: Optional[GeneratorOptions] = None
    ) -> None:
        self.schema = schema
        self.options = options if options is not None else GeneratorOptions()
        self.quoter = self.create_quoter()
        self.expressions = ExpressionBuilder(
            self.quoter, self.placeholder, self.options.param_prefix
        )

    def create_quoter(self) -> Quoter:
        return Quoter()

    @property
    def context(self) -> DMLContext:
        return DMLContext(self.schema, self.quoter, self.expressions, self.typecast)

    @abc.abstractmethod
    def placeholder(self, name: str) -> str:
        """
        Returns a placeholder for a named parameter in a prepared statement.

        :param name: Parameter name without any prefix character.
        """
        ...

    def typecast(self, value: Any, column: ColumnSchema) -> Any:
        "Converts a value to the representation the database driver expects for the column."

        return typecast_value(value, column)

    def prepare_insert_values(
        self, table: str, columns: InsertColumns, params: ParameterMap
    ) -> InsertValues:
        """
        Normalizes the columns of an insert into target column names and value placeholders.

        :param table: The table to insert into.
        :param columns: Column names mapped to values, or a SELECT statement.
        :param params: Parameter map to append bound values to.
        """

        return prepare_insert_values(self.context, table, columns, params)

    def insert(self, table: str, columns: InsertColumns, params: ParameterMap) -> str:
        """
        Returns a SQL statement that inserts a single row, or the rows of a SELECT statement.

        :param table: The table to insert into.
        :param columns: Column names mapped to values (or raw SQL expressions), or a SELECT statement.
        :param params: Parameter map to append bound values to.
        """

        insert = self.prepare_insert_values(table, columns, params)
        statements: list[str] = [f"INSERT INTO {self.quoter.quote_table_name(table)}"]
        if insert.names:
            statements.append(" (" + ", ".join(insert.names) + ")")
        if insert.placeholders:
            statements.append(" VALUES (" + ", ".join(insert.placeholders) + ")")
        else:
            statements.append(insert.values)
        return "".join(statements)

    @abc.abstractmethod
    def insert_with_returning_pks(
        self, table: str, columns: InsertColumns, params: ParameterMap
    ) -> str:
        """
        Returns a SQL statement that inserts a row and returns the primary key values generated for it.

        :raises NotSupportedError: The dialect has no clause to return generated values.
        """
        ...

    def batch_insert(
        self,
        table: str,
        columns: Sequence[str],
        rows: Iterable[Row],
        params: ParameterMap,
    ) -> str:
        """
        Returns a single SQL statement that inserts several rows.

        :param table: The table to insert into.
        :param columns: Names of columns that row values are inserted into, in order.
        :param rows: Rows whose values are addressed by column index. The iterable is consumed once.
        :param params: Parameter map to append bound values to.
        :returns: A SQL statement, or an empty string if there are no rows.
        """

        iterator = peek_rows(rows)
        if iterator is None:
            return ""

        names, values = prepare_batch_values(
            self.context, table, columns, iterator, params
        )
        if not values:
            return ""

        return self.get_batch_insert_stmt(table, names, values)

    def get_batch_insert_stmt(
        self, table: str, names: list[str], values: list[str]
    ) -> str:
        "Assembles a multi-row insert statement from quoted column names and parenthesized value lists."

        column_list = ", ".join(names)
        value_list = ", ".join(values)
        return f"INSERT INTO {self.quoter.quote_table_name(table)} ({column_list}) VALUES {value_list}"

    def update(
        self,
        table: str,
        columns: dict[str, Any],
        condition: Condition,
        params: ParameterMap,
    ) -> str:
        """
        Returns a SQL statement that updates rows matching a condition.

        :param columns: Column names mapped to new values (or raw SQL expressions).
        :param condition: Selects the rows to update; see `ExpressionBuilder.build_condition`.
        """

        sets = prepare_update_sets(self.context, table, columns, params)
        sql = f"UPDATE {self.quoter.quote_table_name(table)} SET " + ", ".join(sets)
        where = self.expressions.build_where(condition, params)
        return f"{sql} {where}" if where else sql

    def delete(self, table: str, condition: Condition, params: ParameterMap) -> str:
        "Returns a SQL statement that deletes rows matching a condition."

        sql = f"DELETE FROM {self.quoter.quote_table_name(table)}"
        where = self.expressions.build_where(condition, params)
        return f"{sql} {where}" if where else sql

    @abc.abstractmethod
    def upsert(
        self,
        table: str,
        insert_columns: InsertColumns,
        update_columns: UpdateColumns,
        params: ParameterMap,
    ) -> str:
        """
        Returns a SQL statement that inserts a row, or updates the existing row that has the same unique key.

        :param table: The table to insert into or update.
        :param insert_columns: Column names mapped to values, or a SELECT statement.
        :param update_columns: `False` to leave existing rows intact, `True` to update all columns that are not part
            of a unique key, or column names mapped to the values to assign on update.
        :param params: Parameter map to append bound values to.
        """
        ...

    @abc.abstractmethod
    def reset_sequence(self, table: str, value: Union[None, int, str] = None) -> str:
        """
        Returns a SQL script that resets the sequence that generates primary key values for a table.

        :param table: The table whose sequence to reset.
        :param value: The next value the sequence should produce. If omitted, the sequence continues after the
            largest primary key value in the table.
        :raises InvalidArgumentError: The table is not found, has no sequence, or the next value cannot be inferred.
        """
        ...


class BaseEngine(abc.ABC):
    "Represents a specific database server type."

    @property
    @abc.abstractmethod
    def name(self) -> str: ...

    @abc.abstractmethod
    def get_generator_type(self) -> type[BaseGenerator]: ...

    def create_converter(self) -> DataclassConverter:
        "Instantiates a converter that maps data-classes to table metadata using dialect-specific types."

        return DataclassConverter()

    def create_catalog(self) -> SchemaCatalog:
        "Instantiates an empty in-memory schema catalog that uses dialect-specific types."

        return SchemaCatalog(converter=self.create_converter())

    def create_generator(
        self, schema: SchemaProvider, options: Optional[GeneratorOptions] = None
    ) -> BaseGenerator:
        "Instantiates a generator that can emit SQL statements."

        generator_options = options if options is not None else GeneratorOptions()
        generator_type = self.get_generator_type()
        LOGGER.debug("creating generator %s", generator_type.__name__)
        return generator_type(schema, generator_options)
