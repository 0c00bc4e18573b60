"""
Read-only descriptor model for processing operators and graph headers.

Descriptors describe what an operator consumes (source products, parameters)
and what it computes (target properties). Data types carry an explicit type tag
so that type names are derived without any runtime introspection.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class TypeTag(Enum):
    SCALAR = "scalar"
    ARRAY = "array"
    STRUCTURE = "structure"


class ScalarKind(Enum):
    """Scalar kinds; each value is the simple type name shown to users."""

    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    CHAR = "char"
    STRING = "String"
    FILE = "File"
    DATE = "Date"
    RECTANGLE = "Rectangle"
    GEOMETRY = "Geometry"
    PRODUCT = "Product"
    OBJECT = "Object"


@dataclass(frozen=True)
class DataType:
    tag: TypeTag
    scalar: Optional[ScalarKind] = None
    component: Optional["DataType"] = None
    name: str = ""
    members: Tuple["ParameterDescriptor", ...] = ()

    @property
    def is_array(self) -> bool:
        return self.tag is TypeTag.ARRAY

    @property
    def is_structure(self) -> bool:
        return self.tag is TypeTag.STRUCTURE

    @property
    def simple_name(self) -> str:
        """Unconverted type name, e.g. ``String``, ``float[]`` or ``BandDescriptor``."""
        if self.tag is TypeTag.ARRAY:
            return f"{self.component.simple_name}[]"
        if self.tag is TypeTag.SCALAR:
            return self.scalar.value
        return self.name


def scalar_type(kind: ScalarKind) -> DataType:
    return DataType(TypeTag.SCALAR, scalar=kind)


def array_of(component: DataType) -> DataType:
    return DataType(TypeTag.ARRAY, component=component)


def structure_of(name: str, members) -> DataType:
    return DataType(TypeTag.STRUCTURE, name=name, members=tuple(members))


def lower_first(text: str) -> str:
    if text and text[0].isupper():
        return text[0].lower() + text[1:]
    return text


def type_name(data_type: DataType) -> str:
    """Return the user-facing type name.

    Arrays repeat their component name three times followed by an ellipsis,
    so ``float[]`` becomes ``float,float,float,...``. Every other type is its
    simple name with the first character lower-cased.
    """
    if data_type.is_array:
        item = type_name(data_type.component)
        return f"{item},{item},{item},..."
    return lower_first(data_type.simple_name)


@dataclass(frozen=True)
class ElementDescriptor:
    name: str
    alias: Optional[str] = None

    @property
    def effective_name(self) -> str:
        return effective_name(self)


def effective_name(descriptor) -> str:
    """The alias when it is set and non-empty, otherwise the declared name."""
    alias = getattr(descriptor, "alias", None)
    return alias if alias else descriptor.name


@dataclass(frozen=True)
class ParameterDescriptor(ElementDescriptor):
    data_type: DataType = field(default_factory=lambda: scalar_type(ScalarKind.STRING))
    description: Optional[str] = None
    interval: Optional[str] = None
    pattern: Optional[str] = None
    format: Optional[str] = None
    value_set: Tuple[str, ...] = ()
    default_value: Optional[str] = None
    unit: Optional[str] = None
    not_null: bool = False
    not_empty: bool = False
    item_alias: Optional[str] = None
    items_inlined: bool = False
    converter: Optional[str] = None

    @property
    def is_structure(self) -> bool:
        return self.data_type.is_structure

    @property
    def structure_member_descriptors(self) -> Tuple["ParameterDescriptor", ...]:
        return self.data_type.members if self.data_type.is_structure else ()


@dataclass(frozen=True)
class SourceProductDescriptor(ElementDescriptor):
    description: Optional[str] = None
    product_type: Optional[str] = None
    optional: bool = False


@dataclass(frozen=True)
class SourceProductsDescriptor(ElementDescriptor):
    # < 0 means any number of source products
    count: int = -1


@dataclass(frozen=True)
class TargetPropertyDescriptor(ElementDescriptor):
    data_type: DataType = field(default_factory=lambda: scalar_type(ScalarKind.OBJECT))
    description: Optional[str] = None


@dataclass(frozen=True)
class OperatorDescriptor:
    name: str
    alias: Optional[str] = None
    description: Optional[str] = None
    internal: bool = False
    operator_class: str = ""
    source_product_descriptors: Tuple[SourceProductDescriptor, ...] = ()
    source_products_descriptor: Optional[SourceProductsDescriptor] = None
    parameter_descriptors: Tuple[ParameterDescriptor, ...] = ()
    target_property_descriptors: Tuple[TargetPropertyDescriptor, ...] = ()

    @property
    def effective_name(self) -> str:
        return effective_name(self)


def operator_alias(descriptor: OperatorDescriptor) -> str:
    """Canonical operator name written into graph templates."""
    if descriptor.alias:
        return descriptor.alias
    if descriptor.operator_class:
        return descriptor.operator_class.rsplit(".", 1)[-1]
    return descriptor.name


# --- Graph header model ---

@dataclass(frozen=True)
class HeaderSource:
    name: str
    description: Optional[str] = None
    optional: bool = False
    location: Optional[str] = None


@dataclass(frozen=True)
class HeaderParameter:
    name: str
    type: str = "String"
    description: Optional[str] = None
    interval: Optional[str] = None
    pattern: Optional[str] = None
    format: Optional[str] = None
    value_set: Tuple[str, ...] = ()
    default_value: Optional[str] = None
    unit: Optional[str] = None
    not_null: bool = False
    not_empty: bool = False


@dataclass(frozen=True)
class GraphHeader:
    target: Optional[str] = None
    sources: Tuple[HeaderSource, ...] = ()
    parameters: Tuple[HeaderParameter, ...] = ()


@dataclass(frozen=True)
class Graph:
    id: str
    version: str = "1.0"
    header: Optional[GraphHeader] = None
    node_ids: Tuple[str, ...] = ()
