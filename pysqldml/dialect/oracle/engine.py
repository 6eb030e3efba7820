import datetime
import uuid

from strong_typing.auxiliary import int8, int16, int32, int64
from strong_typing.core import JsonType

from pysqldml.base import BaseEngine, BaseGenerator
from pysqldml.formation.py_to_sql import DataclassConverter, DataclassConverterOptions

from .data_types import (
    OracleIntegerType,
    OracleTimestampType,
    OracleTimeType,
    OracleVariableBinaryType,
    OracleVariableCharacterType,
)
from .generator import OracleGenerator


class OracleEngine(BaseEngine):
    @property
    def name(self) -> str:
        return "oracle"

    def get_generator_type(self) -> type[BaseGenerator]:
        return OracleGenerator

    def create_converter(self) -> DataclassConverter:
        return DataclassConverter(
            options=DataclassConverterOptions(
                substitutions={
                    bytes: OracleVariableBinaryType(),
                    datetime.time: OracleTimeType(),
                    datetime.datetime: OracleTimestampType(),
                    int: OracleIntegerType(),
                    int8: OracleIntegerType(),
                    int16: OracleIntegerType(),
                    int32: OracleIntegerType(),
                    int64: OracleIntegerType(),
                    str: OracleVariableCharacterType(),
                    uuid.UUID: OracleVariableBinaryType(16),
                    JsonType: OracleVariableCharacterType(),
                },
            )
        )
