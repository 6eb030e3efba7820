import copy
import dataclasses
import datetime
import decimal
import enum
import typing
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from strong_typing.auxiliary import (
    float32,
    float64,
    int8,
    int16,
    int32,
    int64,
)
from strong_typing.core import JsonType
from strong_typing.inspection import (
    DataclassField,
    DataclassInstance,
    TypeLike,
    dataclass_fields,
    get_annotation,
    is_dataclass_type,
    is_type_enum,
    is_type_optional,
    unwrap_annotated_type,
    unwrap_optional_type,
)

from ..model.data_types import (
    SqlBooleanType,
    SqlDataType,
    SqlDateType,
    SqlDecimalType,
    SqlDoubleType,
    SqlIntegerType,
    SqlJsonType,
    SqlRealType,
    SqlTimestampType,
    SqlTimeType,
    SqlUuidType,
    SqlVariableBinaryType,
    SqlVariableCharacterType,
)
from ..model.id_types import LocalId, QualifiedId
from ..model.key_types import IdentityTag, PrimaryKeyTag, UniqueTag
from .object_types import ColumnSchema, Constraint, TableSchema


def _is_constraint(item: Any) -> bool:
    return isinstance(item, (PrimaryKeyTag, IdentityTag, UniqueTag))


@dataclass
class FieldProperties:
    """
    Captures type information associated with a field type.

    :param plain_type: Unadorned type without any metadata.
    :param nullable: True if the field is optional.
    :param metadata: Any metadata that is not a constraint such as identity, primary key or unique.
    :param is_primary: True if the field is (part of) the primary key.
    :param is_identity: True if the field takes its values from a sequence.
    :param is_unique: True if values of this type must be unique.
    """

    plain_type: TypeLike
    nullable: bool
    metadata: tuple[Any, ...]
    is_primary: bool
    is_identity: bool
    is_unique: bool


def get_field_properties(field_type: TypeLike) -> FieldProperties:
    "Extracts column properties such as primary key, identity or unique constraints."

    metadata = list(getattr(field_type, "__metadata__", ()))
    is_primary = get_annotation(field_type, PrimaryKeyTag) is not None
    is_identity = get_annotation(field_type, IdentityTag) is not None
    is_unique = get_annotation(field_type, UniqueTag) is not None
    plain_type = unwrap_annotated_type(field_type)

    if is_type_optional(plain_type):
        nullable = True
        plain_type = unwrap_optional_type(plain_type)
    else:
        nullable = False

    # annotations may also wrap the type inside `Optional[...]`
    metadata.extend(getattr(plain_type, "__metadata__", ()))
    plain_type = unwrap_annotated_type(plain_type)

    return FieldProperties(
        plain_type=plain_type,
        nullable=nullable,
        metadata=tuple(item for item in metadata if not _is_constraint(item)),
        is_primary=is_primary or any(isinstance(m, PrimaryKeyTag) for m in metadata),
        is_identity=is_identity or any(isinstance(m, IdentityTag) for m in metadata),
        is_unique=is_unique or any(isinstance(m, UniqueTag) for m in metadata),
    )


@dataclass
class DataclassConverterOptions:
    """
    Options for converting a Python data-class into table metadata.

    :param namespace: SQL namespace (a.k.a. schema) the tables belong to.
    :param substitutions: SQL type to use for a Python type, overriding the default mapping.
    :param sequence_suffix: Suffix appended to the table name to derive the name of the identity sequence.
    """

    namespace: Optional[str] = None
    substitutions: dict[TypeLike, SqlDataType] = dataclasses.field(
        default_factory=dict
    )
    sequence_suffix: str = "_SEQ"


class DataclassConverter:
    "Maps Python data-class types into table metadata that statement generators consume."

    options: DataclassConverterOptions

    def __init__(self, *, options: Optional[DataclassConverterOptions] = None) -> None:
        self.options = options if options is not None else DataclassConverterOptions()

    def simple_type_to_sql_data_type(self, typ: TypeLike) -> SqlDataType:
        substitute = self.options.substitutions.get(typ)
        if substitute is not None:
            return copy.copy(substitute)

        if typ is bool:
            return SqlBooleanType()
        if typ is int or typ is int64:
            return SqlIntegerType(8)
        if typ is int8 or typ is int16:
            return SqlIntegerType(2)
        if typ is int32:
            return SqlIntegerType(4)
        if typ is float or typ is float64:
            return SqlDoubleType()
        if typ is float32:
            return SqlRealType()
        if typ is str:
            return SqlVariableCharacterType()
        if typ is bytes:
            return SqlVariableBinaryType()
        if typ is decimal.Decimal:
            return SqlDecimalType()
        if typ is datetime.datetime:
            return SqlTimestampType()
        if typ is datetime.date:
            return SqlDateType()
        if typ is datetime.time:
            return SqlTimeType()
        if typ is uuid.UUID:
            return SqlUuidType()
        if typ is JsonType:
            return SqlJsonType()
        if is_type_enum(typ):
            value_types = set(type(e.value) for e in typing.cast(type[enum.Enum], typ))
            if len(value_types) != 1:
                raise TypeError(f"inconsistent enumeration value types: {typ}")
            return self.simple_type_to_sql_data_type(value_types.pop())

        raise TypeError(f"not a simple type: {typ}")

    def member_to_sql_data_type(self, props: FieldProperties) -> SqlDataType:
        sql_type = self.simple_type_to_sql_data_type(props.plain_type)
        for meta in props.metadata:
            sql_type.parse_meta(meta)
        return sql_type

    def member_to_column(self, field: DataclassField) -> ColumnSchema:
        "Converts a data-class field into a table column."

        props = get_field_properties(field.type)

        return ColumnSchema(
            name=LocalId(field.name),
            data_type=self.member_to_sql_data_type(props),
            nullable=props.nullable,
            identity=props.is_identity,
        )

    def dataclass_to_table(
        self,
        cls: type[DataclassInstance],
        *,
        unique_keys: tuple[tuple[str, ...], ...] = (),
    ) -> TableSchema:
        """
        Converts a data-class into table metadata.

        Fields annotated with `PrimaryKey` make up the primary key, fields annotated with `Unique` receive a
        single-column unique constraint, and an `Identity` field associates the table with a sequence.

        :param cls: A data-class type.
        :param unique_keys: Additional (multi-column) unique keys.
        """

        if not is_dataclass_type(cls):
            raise TypeError(f"expected: dataclass type; got: {cls}")

        fields = dataclass_fields(cls)
        try:
            columns = [self.member_to_column(field) for field in fields]
        except TypeError as e:
            raise TypeError(f"error processing data-class: {cls}") from e

        primary_key: list[str] = []
        constraints: list[Constraint] = []
        has_identity = False
        for field in fields:
            props = get_field_properties(field.type)
            if props.is_primary:
                primary_key.append(field.name)
            if props.is_identity:
                has_identity = True
            if props.is_unique:
                constraints.append(
                    Constraint(
                        LocalId(f"uq_{cls.__name__}_{field.name}"), (field.name,)
                    )
                )

        for key in unique_keys:
            constraints.append(
                Constraint(LocalId(f"uq_{cls.__name__}_{'_'.join(key)}"), key)
            )

        return TableSchema(
            QualifiedId(self.options.namespace, cls.__name__),
            columns,
            primary_key=tuple(primary_key),
            constraints=constraints,
            sequence_name=(
                f"{cls.__name__}{self.options.sequence_suffix}"
                if has_identity
                else None
            ),
        )
