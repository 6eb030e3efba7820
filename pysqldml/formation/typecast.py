"""
Converts raw values into the representation implied by the declared type of a column.
"""

import datetime
import decimal
import uuid
from typing import Any, Callable

from ..model.expressions import Expression, SubQuery
from .object_types import ColumnCastError, ColumnSchema

_FALSE_STRINGS = frozenset(["", "0", "\0", "false", "f", "no", "off"])


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _to_str(value: Any) -> str:
    if isinstance(value, float):
        return repr(value)
    elif isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return str(value)


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    elif isinstance(value, uuid.UUID):
        return value.bytes
    elif isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"expected: binary data; got: {type(value).__name__}")


def _to_decimal(value: Any) -> decimal.Decimal:
    try:
        return decimal.Decimal(str(value))
    except decimal.InvalidOperation as e:
        raise ValueError(f"not a decimal number: {value!r}") from e


def _to_datetime(value: Any) -> datetime.datetime:
    if isinstance(value, str):
        return datetime.datetime.fromisoformat(value)
    elif isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    raise TypeError(f"expected: timestamp; got: {type(value).__name__}")


def _to_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    elif isinstance(value, str):
        return datetime.date.fromisoformat(value)
    raise TypeError(f"expected: date; got: {type(value).__name__}")


def _to_time(value: Any) -> datetime.time:
    if isinstance(value, str):
        return datetime.time.fromisoformat(value)
    raise TypeError(f"expected: time; got: {type(value).__name__}")


def _to_uuid(value: Any) -> uuid.UUID:
    if isinstance(value, bytes):
        return uuid.UUID(bytes=value)
    return uuid.UUID(str(value))


_CONVERTERS: dict[type, Callable[[Any], Any]] = {
    bool: _to_bool,
    int: int,
    float: float,
    str: _to_str,
    bytes: _to_bytes,
    decimal.Decimal: _to_decimal,
    datetime.datetime: _to_datetime,
    datetime.date: _to_date,
    datetime.time: _to_time,
    uuid.UUID: _to_uuid,
}


def typecast_value(value: Any, column: ColumnSchema) -> Any:
    """
    Converts a value to the Python type bound to the column.

    An empty string stands for NULL unless the column stores character or binary data. `None`, raw SQL expressions,
    and values that already have the target type pass through unchanged.

    :param value: The value to convert.
    :param column: The column whose declared type determines the target type.
    :raises ColumnCastError: The value has no representation in the target type.
    """

    data_type = column.data_type
    if isinstance(value, str) and value == "" and not data_type.is_character:
        return None
    if value is None or isinstance(value, (Expression, SubQuery)):
        return value

    target_type = data_type.python_type
    if target_type is None:
        return value

    # `bool` is a subclass of `int` but an integer column expects a plain integer
    if type(value) is target_type:
        return value
    # `datetime` is a subclass of `date` but a date column drops the time part
    if target_type is datetime.date and isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, target_type) and not isinstance(value, bool):
        return value

    converter = _CONVERTERS[target_type]
    try:
        return converter(value)
    except (TypeError, ValueError) as e:
        raise ColumnCastError(
            f"cannot convert {value!r} to {data_type}", column.name
        ) from e
