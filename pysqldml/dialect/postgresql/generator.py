import logging
from typing import Union

from pysqldml.base import BaseGenerator
from pysqldml.formation.dml import (
    InsertColumns,
    UpdateColumns,
    parse_sequence_value,
    prepare_update_sets,
    prepare_upsert_columns,
)
from pysqldml.formation.object_types import InvalidArgumentError
from pysqldml.model.expressions import Expression, ParameterMap
from pysqldml.model.id_types import QualifiedId
from pysqldml.util.typing import override

LOGGER = logging.getLogger("pysqldml")


def quote(s: str) -> str:
    "Quotes a string to be embedded in an SQL statement."

    return "'" + s.replace("'", "''") + "'"


class PostgreSQLGenerator(BaseGenerator):
    """
    Generator for PostgreSQL.

    PostgreSQL supports multi-row VALUES lists, `INSERT ... ON CONFLICT` and `RETURNING` natively. Placeholders use
    the `pyformat` parameter style of Python database drivers, e.g. `%(qp0)s`.
    """

    @override
    def placeholder(self, name: str) -> str:
        return f"%({name})s"

    @override
    def insert_with_returning_pks(
        self, table: str, columns: InsertColumns, params: ParameterMap
    ) -> str:
        sql = self.insert(table, columns, params)
        table_schema = self.schema.get_table_schema(table)
        if table_schema is None or not table_schema.primary_key:
            return sql

        keys = ", ".join(
            self.quoter.quote_column_name(name) for name in table_schema.primary_key
        )
        return f"{sql} RETURNING {keys}"

    @override
    def upsert(
        self,
        table: str,
        insert_columns: InsertColumns,
        update_columns: UpdateColumns,
        params: ParameterMap,
    ) -> str:
        ctx = self.context
        insert_sql = self.insert(table, insert_columns, params)
        upsert = prepare_upsert_columns(ctx, table, insert_columns, update_columns)

        if not upsert.unique_names:
            LOGGER.debug(
                "no unique key of table %s covered by insert columns; generating INSERT",
                table,
            )
            return insert_sql

        if upsert.update_names == [] or not update_columns:
            # there are no columns to update
            update_columns = False

        if update_columns is False:
            return f"{insert_sql} ON CONFLICT DO NOTHING"

        if update_columns is True:
            update_columns = {
                name: Expression(f"EXCLUDED.{self.quoter.quote_column_name(name)}")
                for name in upsert.update_names or []
            }

        updates = prepare_update_sets(ctx, table, update_columns, params)
        unique_list = ", ".join(upsert.unique_names)
        return f"{insert_sql} ON CONFLICT ({unique_list}) DO UPDATE SET " + ", ".join(
            updates
        )

    @override
    def reset_sequence(self, table: str, value: Union[None, int, str] = None) -> str:
        table_schema = self.schema.get_table_schema(table)
        if table_schema is None:
            raise InvalidArgumentError(f"table not found: `{table}`")

        sequence_name = table_schema.sequence_name
        if sequence_name is None:
            raise InvalidArgumentError(
                f"no sequence associated with table `{table}`"
            )

        if value is not None:
            next_value = str(parse_sequence_value(value))
        elif table_schema.primary_key:
            key = self.quoter.quote_column_name(table_schema.primary_key[0])
            next_value = f"(SELECT COALESCE(MAX({key}),0) FROM {table_schema.name})+1"
        else:
            raise InvalidArgumentError(
                f"cannot reset sequence for table `{table}` without a primary key"
            )

        sequence_id = QualifiedId(table_schema.name.namespace, sequence_name)
        sequence = quote(sequence_id.quoted_id)
        return f"SELECT SETVAL({sequence},{next_value},false)"
