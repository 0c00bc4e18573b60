"""
Graph XML templates showing how an operator is invoked inside a processing graph.

The template is built as an ``xml.etree.ElementTree`` tree so callers can use
the tree directly or serialize it with ``template_to_xml``.
"""
from __future__ import annotations

import copy
import xml.etree.ElementTree as ET
from typing import List

from .descriptors import (
    OperatorDescriptor,
    ParameterDescriptor,
    SourceProductDescriptor,
    effective_name,
    operator_alias,
    type_name,
)

GRAPH_ID = "someGraphId"
NODE_ID = "someNodeId"
GRAPH_VERSION = "1.0"
ELLIPSIS_TAG = "..."


def _placeholder(name: str) -> str:
    return "${%s}" % name


def append_source(source: SourceProductDescriptor, sources_elem: ET.Element) -> ET.Element:
    name = effective_name(source)
    child = ET.SubElement(sources_elem, name)
    child.text = _placeholder(name)
    return child


def append_parameter(parameter: ParameterDescriptor, parent: ET.Element) -> None:
    """Append the template elements for ``parameter`` below ``parent``.

    Arrays with an item alias get one item element followed by an ellipsis
    marker; inlined items go directly into ``parent``. Structures recurse into
    their members.
    """
    name = effective_name(parameter)
    data_type = parameter.data_type
    if data_type.is_array and parameter.item_alias:
        container = parent if parameter.items_inlined else ET.SubElement(parent, name)
        item = ET.SubElement(container, parameter.item_alias)
        component = data_type.component
        if component.is_structure:
            for member in component.members:
                append_parameter(member, item)
        else:
            item.text = type_name(component)
        ET.SubElement(container, ELLIPSIS_TAG)
        return

    child = ET.SubElement(parent, name)
    if parameter.is_structure:
        for member in parameter.structure_member_descriptors:
            append_parameter(member, child)
    else:
        child.text = type_name(data_type)


def emit_template(operator: OperatorDescriptor) -> ET.Element:
    graph = ET.Element("graph", {"id": GRAPH_ID})
    ET.SubElement(graph, "version").text = GRAPH_VERSION
    node = ET.SubElement(graph, "node", {"id": NODE_ID})
    ET.SubElement(node, "operator").text = operator_alias(operator)

    sources = ET.SubElement(node, "sources")
    for source in operator.source_product_descriptors:
        append_source(source, sources)
    if operator.source_products_descriptor is not None:
        name = effective_name(operator.source_products_descriptor)
        ET.SubElement(sources, name).text = _placeholder(name)

    parameters = ET.SubElement(node, "parameters")
    for parameter in operator.parameter_descriptors:
        append_parameter(parameter, parameters)
    return graph


def template_to_xml(element: ET.Element) -> str:
    """Serialize a template tree with two-space indentation.

    The given tree is left untouched.
    """
    tree = copy.deepcopy(element)
    ET.indent(tree, space="  ")
    text = ET.tostring(tree, encoding="unicode")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def template_lines(element: ET.Element, indent: str = "  ") -> List[str]:
    return [indent + line for line in template_to_xml(element).split("\n") if line]
