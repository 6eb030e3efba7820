from typing import Annotated, TypeVar

T = TypeVar("T")


class PrimaryKeyTag:
    "Marks a field as (part of) the primary key of a table."

    def __repr__(self) -> str:
        return "PrimaryKey"


class IdentityTag:
    "Marks a field as a column whose values are generated by a sequence."

    def __repr__(self) -> str:
        return "Identity"


class UniqueTag:
    "Marks a field as a column with a single-column unique constraint."

    def __repr__(self) -> str:
        return "Unique"


PrimaryKey = Annotated[T, PrimaryKeyTag()]
Identity = Annotated[T, PrimaryKeyTag(), IdentityTag()]
Unique = Annotated[T, UniqueTag()]
