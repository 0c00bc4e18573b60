"""
Conversion of descriptors into documentation elements.

A ``DocElement`` is a syntax label plus the sentences that describe it. The
functions here only build values; alignment is done by ``opdoc.layout``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from .descriptors import (
    DataType,
    GraphHeader,
    HeaderParameter,
    HeaderSource,
    OperatorDescriptor,
    ParameterDescriptor,
    ScalarKind,
    SourceProductDescriptor,
    TargetPropertyDescriptor,
    effective_name,
    type_name,
)


@dataclass(frozen=True)
class DocElement:
    syntax: str
    description_lines: Tuple[str, ...] = ()


ConverterCheck = Callable[[ParameterDescriptor], bool]


def _convertible(data_type: DataType, kinds: frozenset) -> bool:
    if data_type.is_array:
        return _convertible(data_type.component, kinds)
    if data_type.is_structure:
        return False
    return data_type.scalar in kinds


def make_converter_check(kinds: Iterable[ScalarKind]) -> ConverterCheck:
    """Build a converter check accepting the given scalar kinds and arrays of them.

    Parameters declaring their own converter are always accepted.
    """
    known = frozenset(kinds)

    def check(parameter: ParameterDescriptor) -> bool:
        if parameter.converter:
            return True
        return _convertible(parameter.data_type, known)

    return check


# no converters exist for product and generic object values
has_converter: ConverterCheck = make_converter_check(
    kind for kind in ScalarKind if kind not in (ScalarKind.PRODUCT, ScalarKind.OBJECT)
)


def _present(value: Optional[str]) -> bool:
    return value is not None and value != ""


def quote_values(values: Iterable[str]) -> str:
    return ", ".join(f"'{value}'" for value in values)


def _constraint_lines(
    interval: Optional[str],
    pattern: Optional[str],
    fmt: Optional[str],
    value_set: Tuple[str, ...],
    default_value: Optional[str],
    unit: Optional[str],
    not_null: bool,
    not_empty: bool,
    unit_label: str = "unit",
) -> List[str]:
    lines: List[str] = []
    if _present(interval):
        lines.append(f"Valid interval is {interval}.")
    if _present(pattern):
        lines.append(f"Pattern for valid values is '{pattern}'.")
    if _present(fmt):
        lines.append(f"Format for valid values is '{fmt}'.")
    if value_set:
        lines.append(f"Value must be one of {quote_values(value_set)}.")
    if _present(default_value):
        lines.append(f"Default value is '{default_value}'.")
    if _present(unit):
        lines.append(f"Parameter {unit_label} is '{unit}'.")
    if not_null:
        lines.append("This is a mandatory parameter.")
    if not_empty:
        lines.append("Value must not be empty.")
    return lines


def parameter_description_lines(parameter: ParameterDescriptor) -> List[str]:
    name = effective_name(parameter)
    if _present(parameter.description):
        lines = [parameter.description]
    else:
        lines = [f"Sets parameter '{name}' to <{type_name(parameter.data_type)}>."]
    lines.extend(
        _constraint_lines(
            parameter.interval,
            parameter.pattern,
            parameter.format,
            parameter.value_set,
            parameter.default_value,
            parameter.unit,
            parameter.not_null,
            parameter.not_empty,
        )
    )
    return lines


def _source_lines(name: str, description: Optional[str], product_type: Optional[str], optional: bool) -> List[str]:
    if _present(description):
        lines = [description]
    else:
        lines = [f"Sets source '{name}' to <filepath>."]
    if _present(product_type):
        lines.append(f"Valid product types must match '{product_type}'.")
    if optional:
        lines.append("This is an optional source.")
    else:
        lines.append("This is a mandatory source.")
    return lines


def parameter_doc_element(parameter: ParameterDescriptor) -> DocElement:
    syntax = f"  -P{effective_name(parameter)}=<{type_name(parameter.data_type)}>"
    return DocElement(syntax, tuple(parameter_description_lines(parameter)))


def source_doc_element(source: SourceProductDescriptor) -> DocElement:
    name = effective_name(source)
    lines = _source_lines(name, source.description, source.product_type, source.optional)
    return DocElement(f"  -S{name}=<file>", tuple(lines))


def property_doc_element(prop: TargetPropertyDescriptor) -> DocElement:
    syntax = f"{prop.data_type.simple_name} {effective_name(prop)}"
    lines = (prop.description,) if _present(prop.description) else ()
    return DocElement(syntax, lines)


def header_source_doc_element(source: HeaderSource) -> DocElement:
    lines = _source_lines(source.name, source.description, None, source.optional)
    return DocElement(f"  -S{source.name}=<file>", tuple(lines))


def header_parameter_doc_element(parameter: HeaderParameter) -> DocElement:
    if _present(parameter.description):
        lines = [parameter.description]
    else:
        lines = [f"Sets parameter '{parameter.name}' to <{parameter.type}>."]
    lines.extend(
        _constraint_lines(
            parameter.interval,
            parameter.pattern,
            parameter.format,
            parameter.value_set,
            parameter.default_value,
            parameter.unit,
            parameter.not_null,
            parameter.not_empty,
            unit_label="Unit",
        )
    )
    return DocElement(f"  -P{parameter.name}=<{parameter.type}>", tuple(lines))


def parameter_doc_elements(
    operator: OperatorDescriptor,
    converter_check: ConverterCheck = has_converter,
) -> List[DocElement]:
    """Doc elements for all parameters that can be given on the command line."""
    return [
        parameter_doc_element(parameter)
        for parameter in operator.parameter_descriptors
        if converter_check(parameter)
    ]


def source_doc_elements(operator: OperatorDescriptor) -> List[DocElement]:
    return [source_doc_element(source) for source in operator.source_product_descriptors]


def property_doc_elements(operator: OperatorDescriptor) -> List[DocElement]:
    return [property_doc_element(prop) for prop in operator.target_property_descriptors]


def header_source_doc_elements(header: GraphHeader) -> List[DocElement]:
    return [header_source_doc_element(source) for source in header.sources]


def header_parameter_doc_elements(header: GraphHeader) -> List[DocElement]:
    return [header_parameter_doc_element(parameter) for parameter in header.parameters]
