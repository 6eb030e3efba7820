import datetime
import ipaddress
import logging
import uuid
from typing import Any, Union

from pysqldml.base import BaseGenerator
from pysqldml.formation.dml import (
    InsertColumns,
    InsertValues,
    UpdateColumns,
    parse_sequence_value,
    prepare_update_sets,
    prepare_upsert_columns,
    qualify_column_name,
)
from pysqldml.formation.object_types import (
    ColumnSchema,
    InvalidArgumentError,
    NotSupportedError,
)
from pysqldml.model.data_types import SqlVariableBinaryType
from pysqldml.model.expressions import Expression, ParameterMap, SubQuery
from pysqldml.model.id_types import QualifiedId
from pysqldml.util.typing import override

LOGGER = logging.getLogger("pysqldml")

# alias of the MERGE source row in ON, UPDATE and INSERT clauses
EXCLUDED = '"EXCLUDED"'


class OracleGenerator(BaseGenerator):
    """
    Generator for Oracle.

    Oracle has neither multi-row VALUES lists nor an UPSERT statement. Multiple rows are inserted with
    `INSERT ALL ... SELECT 1 FROM SYS.DUAL`, and insert-or-update is expressed with `MERGE`.
    """

    @override
    def placeholder(self, name: str) -> str:
        return f":{name}"

    @override
    def typecast(self, value: Any, column: ColumnSchema) -> Any:
        data_type = column.data_type
        if (
            isinstance(value, str)
            and isinstance(data_type, SqlVariableBinaryType)
            and data_type.storage == 16
        ):
            # UUID in string form bound to a `raw(16)` column
            try:
                value = uuid.UUID(value)
            except ValueError:
                pass

        value = super().typecast(value, column)
        if isinstance(value, uuid.UUID):
            return value.bytes
        elif isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
            return value.packed
        elif isinstance(value, datetime.time):
            return (
                datetime.datetime.combine(datetime.date.min, value)
                - datetime.datetime.min
            )
        return value

    @override
    def get_batch_insert_stmt(
        self, table: str, names: list[str], values: list[str]
    ) -> str:
        column_list = ", ".join(names)
        table_and_columns = (
            f" INTO {self.quoter.quote_table_name(table)} ({column_list}) VALUES "
        )
        rows = "".join(f"{table_and_columns}{value}" for value in values)
        return f"INSERT ALL{rows} SELECT 1 FROM SYS.DUAL"

    @override
    def insert_with_returning_pks(
        self, table: str, columns: InsertColumns, params: ParameterMap
    ) -> str:
        raise NotSupportedError(
            f"{type(self).__name__}.insert_with_returning_pks is not supported by Oracle"
        )

    @override
    def prepare_insert_values(
        self, table: str, columns: InsertColumns, params: ParameterMap
    ) -> InsertValues:
        insert = super().prepare_insert_values(table, columns, params)
        if isinstance(columns, SubQuery) or insert.names:
            return insert

        # Oracle has no `DEFAULT VALUES` clause; assign DEFAULT to key columns explicitly instead
        table_schema = self.schema.get_table_schema(table)
        if table_schema is None:
            raise InvalidArgumentError(
                f"table not found: `{table}`; cannot insert a row of default values"
            )
        if table_schema.primary_key:
            names = list(table_schema.primary_key)
        else:
            names = table_schema.get_column_names()[:1]
        for name in names:
            insert.names.append(self.quoter.quote_column_name(name))
            insert.placeholders.append("DEFAULT")
        return insert

    @override
    def upsert(
        self,
        table: str,
        insert_columns: InsertColumns,
        update_columns: UpdateColumns,
        params: ParameterMap,
    ) -> str:
        ctx = self.context
        upsert = prepare_upsert_columns(ctx, table, insert_columns, update_columns)

        if not upsert.unique_names:
            LOGGER.debug(
                "no unique key of table %s covered by insert columns; generating INSERT",
                table,
            )
            return self.insert(table, insert_columns, params)

        if upsert.update_names == [] or not update_columns:
            # there are no columns to update
            update_columns = False

        quoted_table = self.quoter.quote_table_name(table)
        on_condition: list[Any] = ["or"]
        for constraint in upsert.constraints:
            constraint_condition: list[Any] = ["and"]
            for name in constraint.column_names:
                quoted_name = self.quoter.quote_column_name(name)
                constraint_condition.append(
                    f"{quoted_table}.{quoted_name}={EXCLUDED}.{quoted_name}"
                )
            on_condition.append(constraint_condition)
        on = self.expressions.build_condition(on_condition, params)

        insert = self.prepare_insert_values(table, insert_columns, params)
        if insert.placeholders:
            select_values = {
                name: Expression(placeholder)
                for name, placeholder in zip(upsert.insert_names, insert.placeholders)
            }
            using = (
                self.expressions.build_select(select_values, params)
                + " "
                + self.expressions.build_from(["DUAL"], params)
            )
        else:
            using = insert.values.lstrip(" ")

        merge_sql = f"MERGE INTO {quoted_table} USING ({using}) {EXCLUDED} ON ({on})"

        insert_values = [
            qualify_column_name(ctx, name, EXCLUDED) for name in upsert.insert_names
        ]
        insert_sql = (
            "INSERT ("
            + ", ".join(upsert.insert_names)
            + ") VALUES ("
            + ", ".join(insert_values)
            + ")"
        )

        if update_columns is False:
            return f"{merge_sql} WHEN NOT MATCHED THEN {insert_sql}"

        if update_columns is True:
            update_columns = {
                name: Expression(qualify_column_name(ctx, name, EXCLUDED))
                for name in upsert.update_names or []
            }

        updates = prepare_update_sets(ctx, table, update_columns, params)
        update_sql = "UPDATE SET " + ", ".join(updates)
        return f"{merge_sql} WHEN MATCHED THEN {update_sql} WHEN NOT MATCHED THEN {insert_sql}"

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

        if value is None and len(table_schema.primary_key) > 1:
            raise InvalidArgumentError(
                f"cannot reset sequence for composite primary key in table `{table}`"
            )
        if value is None and not table_schema.primary_key:
            raise InvalidArgumentError(
                f"cannot reset sequence for table `{table}` without a primary key"
            )

        # sequence name appears inside a string literal passed to `execute immediate`
        sequence_id = QualifiedId(table_schema.name.namespace, sequence_name)
        sequence = sequence_id.quoted_id.replace("'", "''")

        lines: list[str] = ["declare"]
        if value is not None:
            lines.append(f"    lastSeq number := {parse_sequence_value(value)};")
        else:
            lines.append("    lastSeq number;")
        lines.append("begin")
        if value is None:
            key = self.quoter.quote_column_name(table_schema.primary_key[0])
            lines.append(
                f"    SELECT MAX({key}) + 1 INTO lastSeq FROM {table_schema.name};"
            )
        lines.extend(
            [
                "    if lastSeq IS NULL then lastSeq := 1; end if;",
                f"    execute immediate 'DROP SEQUENCE {sequence}';",
                f"    execute immediate 'CREATE SEQUENCE {sequence} START WITH ' || lastSeq"
                " || ' INCREMENT BY 1 NOMAXVALUE NOCACHE';",
                "end;",
            ]
        )
        return "\n".join(lines)
