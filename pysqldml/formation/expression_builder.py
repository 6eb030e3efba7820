"""
Turns values, raw SQL expressions and structured conditions into SQL text, binding data values as named parameters.
"""

from typing import Any, Callable, Iterable, Mapping, Union

from ..model.expressions import Expression, ParameterMap, RawExpression, SubQuery
from ..model.id_types import Quoter
from .object_types import BindingError

Condition = Union[None, str, Expression, Mapping[str, Any], list[Any], tuple[Any, ...]]

_BINARY_OPERATORS = frozenset(
    ["=", "<>", "!=", "<", ">", "<=", ">=", "like", "not like"]
)


class ExpressionBuilder:
    """
    Builds SQL fragments and accumulates parameters.

    :param quoter: Quotes table and column names.
    :param placeholder: Renders a parameter name as a placeholder in SQL text, e.g. `:qp0`.
    :param param_prefix: Prefix of generated parameter names.
    """

    quoter: Quoter
    placeholder: Callable[[str], str]
    param_prefix: str

    def __init__(
        self,
        quoter: Quoter,
        placeholder: Callable[[str], str],
        param_prefix: str = "qp",
    ) -> None:
        self.quoter = quoter
        self.placeholder = placeholder
        self.param_prefix = param_prefix

    def bind_param(self, value: Any, params: ParameterMap) -> str:
        "Appends a value to the parameter map under a fresh name, and returns its placeholder."

        index = len(params)
        name = f"{self.param_prefix}{index}"
        while name in params:
            index += 1
            name = f"{self.param_prefix}{index}"
        params[name] = value
        return self.placeholder(name)

    def merge_params(self, source: ParameterMap, params: ParameterMap) -> None:
        "Copies parameters of a raw expression into the parameter map without replacing existing entries."

        for name, value in source.items():
            if name in params and params[name] != value:
                raise BindingError(
                    f"parameter `{name}` is already bound to a different value"
                )
            params[name] = value

    def build_expression(self, expression: RawExpression, params: ParameterMap) -> str:
        self.merge_params(expression.params, params)
        if isinstance(expression, SubQuery):
            return f"({expression.sql})"
        return expression.sql

    def build_value(self, value: Any, params: ParameterMap) -> str:
        "Renders a raw expression verbatim, or binds any other value as a parameter."

        if isinstance(value, (Expression, SubQuery)):
            return self.build_expression(value, params)
        else:
            return self.bind_param(value, params)

    def build_condition(self, condition: Condition, params: ParameterMap) -> str:
        """
        Builds a Boolean SQL expression.

        Accepted forms:
        * a string, emitted verbatim;
        * an `Expression`;
        * a mapping of column names to values (hash format), joined with AND, where `None` yields `IS NULL` and a
          list yields `IN (...)`;
        * a list whose first item is an operator, e.g. `["and", c1, c2]`, `["not", c]`, `["in", "col", [1, 2]]`,
          `["between", "col", 1, 9]` or `[">", "col", 5]`.
        """

        if condition is None:
            return ""
        if isinstance(condition, str):
            return condition
        if isinstance(condition, Expression):
            return self.build_expression(condition, params)
        if isinstance(condition, Mapping):
            return self._build_hash_condition(condition, params)
        if isinstance(condition, (list, tuple)):
            return self._build_operator_condition(list(condition), params)

        raise BindingError(f"unrecognized condition: {condition!r}")

    def build_where(self, condition: Condition, params: ParameterMap) -> str:
        where = self.build_condition(condition, params)
        return f"WHERE {where}" if where else ""

    def build_select(
        self, columns: Mapping[str, Any], params: ParameterMap
    ) -> str:
        """
        Builds a SELECT clause from a mapping of aliases to column names or expressions.

        Expressions are emitted verbatim, strings are treated as column names.
        """

        items: list[str] = []
        for alias, column in columns.items():
            if isinstance(column, (Expression, SubQuery)):
                sql = self.build_expression(column, params)
            elif isinstance(column, str):
                sql = self.quoter.quote_column_name(column)
            else:
                raise BindingError(f"unrecognized select column: {column!r}")
            items.append(f"{sql} AS {self.quoter.quote_column_name(alias)}")
        return "SELECT " + ", ".join(items)

    def build_from(self, tables: Iterable[str], params: ParameterMap) -> str:
        return "FROM " + ", ".join(
            self.quoter.quote_table_name(table) for table in tables
        )

    def _quote_operand(self, column: str) -> str:
        return self.quoter.quote_column_name(column)

    def _build_hash_condition(
        self, condition: Mapping[str, Any], params: ParameterMap
    ) -> str:
        parts: list[str] = []
        for column, value in condition.items():
            name = self._quote_operand(column)
            if value is None:
                parts.append(f"{name} IS NULL")
            elif isinstance(value, (list, tuple, set, frozenset)):
                parts.append(self._build_in(name, list(value), False, params))
            elif isinstance(value, (Expression, SubQuery)):
                parts.append(f"{name}={self.build_expression(value, params)}")
            else:
                parts.append(f"{name}={self.bind_param(value, params)}")
        return _conjunction("AND", parts)

    def _build_in(
        self, name: str, values: list[Any], negated: bool, params: ParameterMap
    ) -> str:
        if not values:
            return "" if negated else "0=1"

        operator = "NOT IN" if negated else "IN"
        placeholders = ", ".join(self.build_value(value, params) for value in values)
        return f"{name} {operator} ({placeholders})"

    def _build_operator_condition(
        self, condition: list[Any], params: ParameterMap
    ) -> str:
        if not condition or not isinstance(condition[0], str):
            raise BindingError(f"expected: operator as first item; got: {condition!r}")

        operator = condition[0].lower()
        operands = condition[1:]

        if operator in ("and", "or"):
            parts = [self.build_condition(operand, params) for operand in operands]
            return _conjunction(operator.upper(), [part for part in parts if part])
        elif operator == "not":
            if len(operands) != 1:
                raise BindingError("operator NOT requires exactly one operand")
            inner = self.build_condition(operands[0], params)
            return f"NOT ({inner})" if inner else ""
        elif operator in ("in", "not in"):
            column, values = self._unpack(operator, operands, 2)
            subject = self._quote_operand(column)
            if isinstance(values, SubQuery):
                keyword = "NOT IN" if operator == "not in" else "IN"
                return f"{subject} {keyword} {self.build_expression(values, params)}"
            return self._build_in(subject, list(values), operator == "not in", params)
        elif operator in ("between", "not between"):
            column, low, high = self._unpack(operator, operands, 3)
            keyword = operator.upper()
            low_sql = self.build_value(low, params)
            high_sql = self.build_value(high, params)
            return f"{self._quote_operand(column)} {keyword} {low_sql} AND {high_sql}"
        elif operator in _BINARY_OPERATORS:
            column, value = self._unpack(operator, operands, 2)
            keyword = operator.upper()
            return f"{self._quote_operand(column)} {keyword} {self.build_value(value, params)}"

        raise BindingError(f"unrecognized operator: {condition[0]}")

    @staticmethod
    def _unpack(operator: str, operands: list[Any], count: int) -> list[Any]:
        if len(operands) != count:
            raise BindingError(
                f"operator {operator.upper()} requires {count} operands; got: {len(operands)}"
            )
        return operands


def _conjunction(operator: str, parts: list[str]) -> str:
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    return "(" + f") {operator} (".join(parts) + ")"

