"""
pysqldml: Generate dialect-specific data manipulation statements.

This module defines how statement generators look up table metadata such as columns, primary keys, unique constraints
and sequences.
"""

import abc
import logging
from typing import Iterable, Optional

from strong_typing.inspection import DataclassInstance

from .formation.object_types import Constraint, TableSchema
from .formation.py_to_sql import DataclassConverter
from .model.id_types import Quoter

LOGGER = logging.getLogger("pysqldml")


class SchemaProvider(abc.ABC):
    """
    Resolves a table name to table metadata.

    Statement generators call the provider each time they need metadata; results are not cached by generators.
    """

    quoter: Quoter

    def __init__(self, quoter: Optional[Quoter] = None) -> None:
        self.quoter = quoter if quoter is not None else Quoter()

    @abc.abstractmethod
    def get_table_schema(self, name: str) -> Optional[TableSchema]:
        """
        Looks up table metadata.

        :param name: A table name, optionally quoted and/or schema-qualified.
        :returns: Table metadata, or `None` if no such table exists.
        """
        ...

    def get_raw_table_name(self, name: str) -> str:
        "Strips quotes from each component of a (possibly schema-qualified) table name."

        return ".".join(self.quoter.get_table_name_parts(name))

    def get_table_primary_key(self, name: str) -> Optional[Constraint]:
        table = self.get_table_schema(name)
        if table is None or not table.primary_key:
            return None
        return Constraint(table.primary_key_constraint_id, table.primary_key)

    def get_table_uniques(self, name: str) -> list[Constraint]:
        table = self.get_table_schema(name)
        if table is None:
            return []
        return list(table.constraints)

    def get_table_unique_keys(self, name: str) -> list[Constraint]:
        """
        Returns all keys that identify a row: the primary key first, followed by unique constraints.

        Keys that consist of the same set of columns are reported only once.
        """

        constraints: list[Constraint] = []
        primary_key = self.get_table_primary_key(name)
        if primary_key is not None:
            constraints.append(primary_key)
        constraints.extend(self.get_table_uniques(name))

        unique: dict[tuple[str, ...], Constraint] = {}
        for constraint in constraints:
            key = tuple(sorted(constraint.column_names))
            unique.setdefault(key, constraint)
        return list(unique.values())


class SchemaCatalog(SchemaProvider):
    """
    An in-memory collection of table metadata.

    Tables are registered with their metadata directly or derived from Python data-class types.
    """

    tables: dict[str, TableSchema]
    converter: DataclassConverter

    def __init__(
        self,
        tables: Optional[Iterable[TableSchema]] = None,
        *,
        converter: Optional[DataclassConverter] = None,
        quoter: Optional[Quoter] = None,
    ) -> None:
        super().__init__(quoter)
        self.tables = {}
        self.converter = converter if converter is not None else DataclassConverter()
        for table in tables or []:
            self.add_table(table)

    def add_table(self, table: TableSchema) -> None:
        key = table.name.compact_id
        if key in self.tables:
            raise ValueError(f"table already in catalog: {table.name}")
        self.tables[key] = table

    def add_dataclass(
        self,
        cls: type[DataclassInstance],
        *,
        unique_keys: tuple[tuple[str, ...], ...] = (),
    ) -> TableSchema:
        "Registers a table whose metadata is derived from a data-class type."

        table = self.converter.dataclass_to_table(cls, unique_keys=unique_keys)
        self.add_table(table)
        return table

    def get_table_schema(self, name: str) -> Optional[TableSchema]:
        raw_name = self.get_raw_table_name(name)
        table = self.tables.get(raw_name)
        if table is None:
            LOGGER.debug("table not found in catalog: %s", raw_name)
        return table
