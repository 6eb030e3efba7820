import unittest

from pysqldml.formation.expression_builder import ExpressionBuilder
from pysqldml.formation.object_types import BindingError, ErrorKind
from pysqldml.model.expressions import Expression, ParameterMap, SubQuery
from pysqldml.model.id_types import Quoter
from tests.params import configure

if __name__ == "__main__":
    configure()


class TestQuoter(unittest.TestCase):
    def test_quote_table_name(self) -> None:
        quoter = Quoter()
        self.assertEqual(quoter.quote_table_name("Customer"), '"Customer"')
        self.assertEqual(quoter.quote_table_name('"Customer"'), '"Customer"')
        self.assertEqual(quoter.quote_table_name("sales.Customer"), '"sales"."Customer"')
        self.assertEqual(
            quoter.quote_table_name('"sales"."Customer"'), '"sales"."Customer"'
        )

    def test_quote_column_name(self) -> None:
        quoter = Quoter()
        self.assertEqual(quoter.quote_column_name("email"), '"email"')
        self.assertEqual(quoter.quote_column_name("*"), "*")
        self.assertEqual(
            quoter.quote_column_name("Customer.email"), '"Customer"."email"'
        )
        self.assertEqual(quoter.quote_column_name("COUNT(*)"), "COUNT(*)")
        self.assertEqual(quoter.quote_column_name('we"ird'), '"we""ird"')

    def test_name_parts(self) -> None:
        quoter = Quoter()
        self.assertListEqual(
            quoter.get_table_name_parts('"sales"."Customer"'), ["sales", "Customer"]
        )
        self.assertListEqual(quoter.get_table_name_parts('"a.b"'), ["a.b"])


class TestExpressionBuilder(unittest.TestCase):
    builder: ExpressionBuilder

    def setUp(self) -> None:
        self.builder = ExpressionBuilder(Quoter(), lambda name: f":{name}")

    def test_bind_param(self) -> None:
        params: ParameterMap = {}
        self.assertEqual(self.builder.bind_param(1, params), ":qp0")
        self.assertEqual(self.builder.bind_param(2, params), ":qp1")
        self.assertDictEqual(params, {"qp0": 1, "qp1": 2})

    def test_bind_param_skips_taken_names(self) -> None:
        params: ParameterMap = {"qp1": "taken"}
        self.assertEqual(self.builder.bind_param(1, params), ":qp2")
        self.assertEqual(params["qp1"], "taken")

    def test_param_prefix(self) -> None:
        builder = ExpressionBuilder(Quoter(), lambda name: f":{name}", "p")
        params: ParameterMap = {}
        self.assertEqual(builder.bind_param("x", params), ":p0")

    def test_merge_params(self) -> None:
        params: ParameterMap = {"a": 1}
        self.builder.merge_params({"a": 1, "b": 2}, params)
        self.assertDictEqual(params, {"a": 1, "b": 2})

        with self.assertRaises(BindingError) as cm:
            self.builder.merge_params({"a": 3}, params)
        self.assertIs(cm.exception.kind, ErrorKind.BINDING)

    def test_build_value(self) -> None:
        params: ParameterMap = {}
        self.assertEqual(self.builder.build_value(Expression("NULL"), params), "NULL")
        self.assertEqual(
            self.builder.build_value(
                SubQuery("SELECT MAX(x) FROM t WHERE y = :y", ("x",), {"y": 1}), params
            ),
            "(SELECT MAX(x) FROM t WHERE y = :y)",
        )
        self.assertEqual(self.builder.build_value("text", params), ":qp1")
        self.assertDictEqual(params, {"y": 1, "qp1": "text"})

    def test_hash_condition(self) -> None:
        params: ParameterMap = {}
        self.assertEqual(
            self.builder.build_condition(
                {"status": 1, "address": None, "id": [1, 2]}, params
            ),
            '("status"=:qp0) AND ("address" IS NULL) AND ("id" IN (:qp1, :qp2))',
        )
        self.assertDictEqual(params, {"qp0": 1, "qp1": 1, "qp2": 2})

    def test_operator_condition(self) -> None:
        params: ParameterMap = {}
        self.assertEqual(
            self.builder.build_condition(
                ["or", [">=", "status", 2], ["not", {"email": None}]], params
            ),
            '("status" >= :qp0) OR (NOT ("email" IS NULL))',
        )
        self.assertEqual(
            self.builder.build_condition(["between", "id", 1, 10], params),
            '"id" BETWEEN :qp1 AND :qp2',
        )
        self.assertEqual(
            self.builder.build_condition(["like", "email", "%@example.com"], params),
            '"email" LIKE :qp3',
        )
        self.assertEqual(
            self.builder.build_condition(
                ["not in", "id", SubQuery("SELECT id FROM t", ("id",))], params
            ),
            '"id" NOT IN (SELECT id FROM t)',
        )

    def test_empty_in(self) -> None:
        params: ParameterMap = {}
        self.assertEqual(self.builder.build_condition(["in", "id", []], params), "0=1")
        self.assertEqual(self.builder.build_condition(["not in", "id", []], params), "")
        self.assertEqual(
            self.builder.build_condition(["and", ["not in", "id", []], "x=1"], params),
            "x=1",
        )
        self.assertDictEqual(params, {})

    def test_invalid_condition(self) -> None:
        with self.assertRaises(BindingError):
            self.builder.build_condition(["xor", "a", "b"], {})
        with self.assertRaises(BindingError):
            self.builder.build_condition(["between", "id", 1], {})
        with self.assertRaises(BindingError):
            self.builder.build_condition([1, 2], {})

    def test_build_where(self) -> None:
        self.assertEqual(self.builder.build_where(None, {}), "")
        self.assertEqual(self.builder.build_where("id = 1", {}), "WHERE id = 1")

    def test_build_select(self) -> None:
        params: ParameterMap = {}
        self.assertEqual(
            self.builder.build_select(
                {"email": Expression(":qp0"), "total": "amount"}, params
            ),
            'SELECT :qp0 AS "email", "amount" AS "total"',
        )
        self.assertEqual(self.builder.build_from(["DUAL"], params), 'FROM "DUAL"')


if __name__ == "__main__":
    unittest.main()
