from pysqldml.base import BaseEngine, BaseGenerator

from .generator import PostgreSQLGenerator


class PostgreSQLEngine(BaseEngine):
    @property
    def name(self) -> str:
        return "postgresql"

    def get_generator_type(self) -> type[BaseGenerator]:
        return PostgreSQLGenerator
