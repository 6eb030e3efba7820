import enum
from dataclasses import dataclass
from typing import Any, Optional

from ..model.data_types import SqlDataType
from ..model.id_types import LocalId, QualifiedId


@enum.unique
class ErrorKind(enum.Enum):
    "Classifies why a statement could not be generated."

    UNSUPPORTED_FEATURE = "unsupported"
    INVALID_ARGUMENT = "invalid"
    BINDING = "binding"


class DMLError(RuntimeError):
    "Raised when a data manipulation statement cannot be generated."

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT


class NotSupportedError(DMLError):
    "Raised when an operation has no valid translation in the target dialect."

    kind = ErrorKind.UNSUPPORTED_FEATURE


class InvalidArgumentError(DMLError, ValueError):
    "Raised when an argument (e.g. a table or a column) is rejected before any SQL is produced."

    kind = ErrorKind.INVALID_ARGUMENT


class BindingError(DMLError):
    "Raised when a value or a condition cannot be bound to a statement."

    kind = ErrorKind.BINDING


class ColumnCastError(InvalidArgumentError):
    "Raised when a value cannot be converted to the storage type of a column."

    column: LocalId

    def __init__(self, cause: str, column: LocalId) -> None:
        super().__init__(cause)
        self.column = column

    def __str__(self) -> str:
        return f"column {self.column}: {self.args[0]}"


@dataclass
class ColumnSchema:
    """
    A column in a database table.

    :param name: The name of the column within its host table.
    :param data_type: The declared SQL data type of the column.
    :param nullable: True if the column can take the value NULL.
    :param identity: Whether the column takes its values from a sequence.
    """

    name: LocalId
    data_type: SqlDataType
    nullable: bool = True
    identity: bool = False


@dataclass
class Constraint:
    """
    A unique key of a table, such as the primary key or a unique constraint.

    :param name: The name of the constraint.
    :param column_names: Unquoted names of the columns that comprise the key.
    """

    name: LocalId
    column_names: tuple[str, ...]


@dataclass
class TableSchema:
    """
    Metadata of a database table required to generate data manipulation statements.

    :param name: The (optionally schema-qualified) name of the table.
    :param columns: The columns that the table consists of, in declaration order.
    :param primary_key: Unquoted names of the primary key column(s) of the table.
    :param constraints: Unique constraints applied to the table.
    :param sequence_name: The sequence that supplies values to the identity column, if any.
    """

    name: QualifiedId
    columns: dict[str, ColumnSchema]
    primary_key: tuple[str, ...]
    constraints: list[Constraint]
    sequence_name: Optional[str]

    def __init__(
        self,
        name: QualifiedId,
        columns: list[ColumnSchema],
        *,
        primary_key: tuple[str, ...] = (),
        constraints: Optional[list[Constraint]] = None,
        sequence_name: Optional[str] = None,
    ) -> None:
        self.name = name
        self.columns = {}
        for column in columns:
            if column.name.id in self.columns:
                raise ValueError(f"duplicate column {column.name} in table {name}")
            self.columns[column.name.id] = column
        self.primary_key = primary_key
        self.constraints = constraints or []
        self.sequence_name = sequence_name

        for key in primary_key:
            if key not in self.columns:
                raise ValueError(
                    f"primary key column {LocalId(key)} not found in table {name}"
                )

    @property
    def primary_key_constraint_id(self) -> LocalId:
        return LocalId(f"pk_{self.name.compact_id.replace('.', '_')}")

    def get_column_names(self) -> list[str]:
        return list(self.columns.keys())

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, TableSchema):
            return False
        return (
            self.name == other.name
            and self.columns == other.columns
            and self.primary_key == other.primary_key
            and self.constraints == other.constraints
            and self.sequence_name == other.sequence_name
        )
