from dataclasses import dataclass
from typing import Optional

ID_QUOTE_CHAR = '"'


def quote_id(name: str) -> str:
    return name.replace(ID_QUOTE_CHAR, 2 * ID_QUOTE_CHAR)


def unquote_id(name: str) -> str:
    return name.replace(2 * ID_QUOTE_CHAR, ID_QUOTE_CHAR)


def is_quoted(name: str) -> bool:
    "True if the identifier is already enclosed in quote characters."

    return (
        len(name) >= 2
        and name.startswith(ID_QUOTE_CHAR)
        and name.endswith(ID_QUOTE_CHAR)
    )


@dataclass(frozen=True)
class LocalId:
    id: str

    @property
    def quoted_id(self) -> str:
        return ID_QUOTE_CHAR + quote_id(self.id) + ID_QUOTE_CHAR

    def __str__(self) -> str:
        "Quotes an identifier to be embedded in a SQL statement."

        return self.quoted_id


@dataclass(frozen=True)
class QualifiedId:
    namespace: Optional[str]
    id: str

    @property
    def compact_id(self) -> str:
        if self.namespace is not None:
            return f"{self.namespace}.{self.id}"
        else:
            return self.id

    @property
    def quoted_id(self) -> str:
        if self.namespace is not None:
            return (
                ID_QUOTE_CHAR
                + quote_id(self.namespace)
                + ID_QUOTE_CHAR
                + "."
                + ID_QUOTE_CHAR
                + quote_id(self.id)
                + ID_QUOTE_CHAR
            )
        else:
            return ID_QUOTE_CHAR + quote_id(self.id) + ID_QUOTE_CHAR

    def __str__(self) -> str:
        "Quotes a qualified identifier to be embedded in a SQL statement."

        return self.quoted_id


def _is_raw_expression(name: str) -> bool:
    return "(" in name or "[[" in name or "{{" in name


class Quoter:
    """
    Quotes table and column names to be embedded in a SQL statement.

    Names that are already quoted are returned unchanged, which makes quoting idempotent. Names that look like
    expressions (e.g. contain a parenthesis) are never quoted.
    """

    def quote_simple_table_name(self, name: str) -> str:
        if is_quoted(name):
            return name
        return LocalId(name).quoted_id

    def quote_simple_column_name(self, name: str) -> str:
        if name == "*" or is_quoted(name):
            return name
        return LocalId(name).quoted_id

    def unquote_simple_column_name(self, name: str) -> str:
        if is_quoted(name):
            return unquote_id(name[1:-1])
        return name

    def unquote_simple_table_name(self, name: str) -> str:
        return self.unquote_simple_column_name(name)

    def get_table_name_parts(self, name: str) -> list[str]:
        "Splits a (possibly schema-qualified) table name into unquoted components."

        return [self.unquote_simple_table_name(part) for part in _split_name(name)]

    def quote_table_name(self, name: str) -> str:
        if _is_raw_expression(name):
            return name
        return ".".join(self.quote_simple_table_name(part) for part in _split_name(name))

    def quote_column_name(self, name: str) -> str:
        if _is_raw_expression(name):
            return name

        parts = _split_name(name)
        column = parts.pop()
        if parts:
            prefix = self.quote_table_name(".".join(parts)) + "."
        else:
            prefix = ""
        return prefix + self.quote_simple_column_name(column)


def _split_name(name: str) -> list[str]:
    "Splits a name on dots that are not enclosed in quote characters."

    parts: list[str] = []
    current: list[str] = []
    quoted = False
    for char in name:
        if char == ID_QUOTE_CHAR:
            quoted = not quoted
        elif char == "." and not quoted:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts
