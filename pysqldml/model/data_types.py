import datetime
import decimal
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from strong_typing.auxiliary import MaxLength, Precision, Storage, TimePrecision


@dataclass
class SqlDataType:
    """
    A declared SQL column type.

    Each type names the Python type values take when bound as a statement parameter, which drives type casting.
    """

    @property
    def python_type(self) -> Optional[type]:
        "Python type of values bound to a column of this type, or `None` if values pass through unchanged."

        return None

    @property
    def is_character(self) -> bool:
        "True for types that store an empty string as is."

        return False

    def parse_meta(self, meta: Any) -> None:
        raise TypeError(
            f"unrecognized Python type annotation for {type(self).__name__}: {meta}"
        )


@dataclass
class SqlBooleanType(SqlDataType):
    def __str__(self) -> str:
        return "boolean"

    @property
    def python_type(self) -> Optional[type]:
        return bool


@dataclass
class SqlIntegerType(SqlDataType):
    width: int = 8

    def __str__(self) -> str:
        if self.width == 1:
            return "tinyint"
        elif self.width == 2:
            return "smallint"
        elif self.width == 4:
            return "integer"
        elif self.width == 8:
            return "bigint"

        raise TypeError(f"invalid integer width: {self.width}")

    @property
    def python_type(self) -> Optional[type]:
        return int

    def parse_meta(self, meta: Any) -> None:
        if isinstance(meta, Storage):
            self.width = meta.bytes
        else:
            super().parse_meta(meta)


@dataclass
class SqlRealType(SqlDataType):
    def __str__(self) -> str:
        return "real"

    @property
    def python_type(self) -> Optional[type]:
        return float


@dataclass
class SqlDoubleType(SqlDataType):
    def __str__(self) -> str:
        return "double precision"

    @property
    def python_type(self) -> Optional[type]:
        return float


@dataclass
class SqlDecimalType(SqlDataType):
    """
    Fixed-point numeric type.

    :param precision: Numeric precision in base 10.
    :param scale: Scale in base 10.
    """

    precision: Optional[int] = None
    scale: Optional[int] = None

    def __str__(self) -> str:
        if self.precision is not None and self.scale is not None:
            return f"decimal({self.precision}, {self.scale})"
        elif self.precision is not None:
            return f"decimal({self.precision})"
        else:
            return "decimal"

    @property
    def python_type(self) -> Optional[type]:
        return decimal.Decimal

    def parse_meta(self, meta: Any) -> None:
        if isinstance(meta, Precision):
            self.precision = meta.significant_digits
            self.scale = meta.decimal_digits
        else:
            super().parse_meta(meta)


@dataclass
class SqlVariableBinaryType(SqlDataType):
    storage: Optional[int] = None

    def __str__(self) -> str:
        if self.storage is not None:
            return f"varbinary({self.storage})"
        else:
            return "blob"

    @property
    def python_type(self) -> Optional[type]:
        return bytes

    @property
    def is_character(self) -> bool:
        return True

    def parse_meta(self, meta: Any) -> None:
        if isinstance(meta, Storage):
            self.storage = meta.bytes
        else:
            super().parse_meta(meta)


@dataclass
class SqlFixedCharacterType(SqlDataType):
    limit: Optional[int] = None

    def __str__(self) -> str:
        limit = f"({self.limit})" if self.limit is not None else ""
        return f"char{limit}"

    @property
    def python_type(self) -> Optional[type]:
        return str

    @property
    def is_character(self) -> bool:
        return True


@dataclass
class SqlVariableCharacterType(SqlDataType):
    limit: Optional[int] = None

    def __str__(self) -> str:
        if self.limit is not None:
            return f"varchar({self.limit})"
        else:
            return "text"

    @property
    def python_type(self) -> Optional[type]:
        return str

    @property
    def is_character(self) -> bool:
        return True

    def parse_meta(self, meta: Any) -> None:
        if isinstance(meta, MaxLength):
            self.limit = meta.value
        else:
            super().parse_meta(meta)


@dataclass
class SqlTimestampType(SqlDataType):
    precision: Optional[int] = None
    with_time_zone: bool = False

    def __str__(self) -> str:
        precision = f"({self.precision})" if self.precision is not None else ""
        time_zone = " with time zone" if self.with_time_zone else ""
        return f"timestamp{precision}{time_zone}"

    @property
    def python_type(self) -> Optional[type]:
        return datetime.datetime

    def parse_meta(self, meta: Any) -> None:
        if isinstance(meta, TimePrecision):
            self.precision = meta.decimal_digits
        else:
            super().parse_meta(meta)


@dataclass
class SqlDateType(SqlDataType):
    def __str__(self) -> str:
        return "date"

    @property
    def python_type(self) -> Optional[type]:
        return datetime.date


@dataclass
class SqlTimeType(SqlDataType):
    precision: Optional[int] = None

    def __str__(self) -> str:
        precision = f"({self.precision})" if self.precision is not None else ""
        return f"time{precision}"

    @property
    def python_type(self) -> Optional[type]:
        return datetime.time

    def parse_meta(self, meta: Any) -> None:
        if isinstance(meta, TimePrecision):
            self.precision = meta.decimal_digits
        else:
            super().parse_meta(meta)


@dataclass
class SqlUuidType(SqlDataType):
    def __str__(self) -> str:
        return "uuid"

    @property
    def python_type(self) -> Optional[type]:
        return uuid.UUID


@dataclass
class SqlJsonType(SqlDataType):
    def __str__(self) -> str:
        return "json"
