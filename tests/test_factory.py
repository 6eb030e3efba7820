import unittest

from pysqldml.base import GeneratorOptions
from pysqldml.dialect.oracle.engine import OracleEngine
from pysqldml.dialect.oracle.generator import OracleGenerator
from pysqldml.dialect.postgresql.generator import PostgreSQLGenerator
from pysqldml.factory import (
    get_dialect,
    get_dialect_names,
    register_dialect,
    unregister_dialect,
)
from pysqldml.model.expressions import ParameterMap
from pysqldml.schema import SchemaCatalog
from tests import tables
from tests.params import configure

if __name__ == "__main__":
    configure()


class TestFactory(unittest.TestCase):
    def test_discovery(self) -> None:
        self.assertListEqual(get_dialect_names(), ["oracle", "postgresql"])
        self.assertIsInstance(get_dialect("oracle"), OracleEngine)

    def test_unrecognized(self) -> None:
        with self.assertRaises(ValueError):
            get_dialect("sybase")

    def test_register(self) -> None:
        engine = OracleEngine()
        with self.assertRaises(ValueError):
            register_dialect("oracle", engine)

        register_dialect("oracle-test", engine)
        try:
            self.assertIs(get_dialect("oracle-test"), engine)
        finally:
            unregister_dialect("oracle-test")
        self.assertNotIn("oracle-test", get_dialect_names())

    def test_create_generator(self) -> None:
        catalog = SchemaCatalog()
        self.assertIsInstance(
            get_dialect("oracle").create_generator(catalog), OracleGenerator
        )
        self.assertIsInstance(
            get_dialect("postgresql").create_generator(catalog), PostgreSQLGenerator
        )

    def test_dialect_types(self) -> None:
        catalog = get_dialect("oracle").create_catalog()
        table = catalog.add_dataclass(tables.Measurement)
        self.assertEqual(str(table.columns["id"].data_type), "number")
        self.assertEqual(str(table.columns["sensor"].data_type), "raw(16)")
        self.assertEqual(
            str(table.columns["local_time"].data_type), "interval day to second"
        )

    def test_options(self) -> None:
        catalog = get_dialect("oracle").create_catalog()
        catalog.add_dataclass(tables.Customer)
        generator = get_dialect("oracle").create_generator(
            catalog, GeneratorOptions(param_prefix="p")
        )
        params: ParameterMap = {}
        self.assertEqual(
            generator.insert("Customer", {"email": "a@example.com"}, params),
            'INSERT INTO "Customer" ("email") VALUES (:p0)',
        )
        self.assertDictEqual(params, {"p0": "a@example.com"})


if __name__ == "__main__":
    unittest.main()
