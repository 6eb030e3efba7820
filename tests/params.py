import abc
import logging
import os
import os.path

from pysqldml.base import BaseEngine, BaseGenerator
from pysqldml.factory import get_dialect
from pysqldml.formation.object_types import ColumnSchema, TableSchema
from pysqldml.model.data_types import SqlIntegerType
from pysqldml.model.id_types import LocalId, QualifiedId
from pysqldml.schema import SchemaCatalog
from tests import tables


class TestEngineBase(abc.ABC):
    @property
    @abc.abstractmethod
    def engine(self) -> BaseEngine: ...

    def create_catalog(self) -> SchemaCatalog:
        "Registers the test tables with a catalog that uses dialect-specific types."

        catalog = self.engine.create_catalog()
        catalog.add_dataclass(tables.Customer)
        catalog.add_dataclass(tables.Event, unique_keys=(("source", "external_id"),))
        catalog.add_dataclass(tables.OrderLine)
        catalog.add_dataclass(tables.Country)
        catalog.add_dataclass(tables.AuditLog)
        catalog.add_dataclass(tables.Measurement)
        catalog.add_table(
            TableSchema(
                QualifiedId("sales", "Invoice"),
                [ColumnSchema(LocalId("id"), SqlIntegerType(), False, True)],
                primary_key=("id",),
                sequence_name="Invoice_SEQ",
            )
        )
        return catalog

    def create_generator(self) -> BaseGenerator:
        return self.engine.create_generator(self.create_catalog())


class OracleBase(TestEngineBase):
    "Base class for testing Oracle features."

    @property
    def engine(self) -> BaseEngine:
        return get_dialect("oracle")


class PostgreSQLBase(TestEngineBase):
    "Base class for testing PostgreSQL features."

    @property
    def engine(self) -> BaseEngine:
        return get_dialect("postgresql")


def configure() -> None:
    """
    Configures logging in unit tests. To be invoked in module `__main__`.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    ch = logging.FileHandler(os.path.join(os.path.dirname(__file__), "test.log"), "w")
    ch.setLevel(logging.DEBUG)
    logger.addHandler(ch)
