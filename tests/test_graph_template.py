# tests/test_graph_template.py

import xml.etree.ElementTree as ET

from opdoc.descriptors import (
    OperatorDescriptor,
    ParameterDescriptor,
    ScalarKind,
    SourceProductDescriptor,
    SourceProductsDescriptor,
    array_of,
    scalar_type,
    structure_of,
)
from opdoc.graph_template import (
    ELLIPSIS_TAG,
    append_parameter,
    emit_template,
    template_lines,
    template_to_xml,
)


def _shape(elem):
    """Tag nesting, ids and text of a tree, ignoring indentation whitespace."""
    return (
        elem.tag,
        elem.get("id"),
        (elem.text or "").strip(),
        [_shape(child) for child in elem],
    )


def _parameters(operator):
    return emit_template(operator).find("node/parameters")


def test_template_skeleton():
    graph = emit_template(OperatorDescriptor(name="Tiny", operator_class="org.x.TinyOp"))
    assert graph.tag == "graph"
    assert graph.get("id") == "someGraphId"
    assert graph.find("version").text == "1.0"
    node = graph.find("node")
    assert node.get("id") == "someNodeId"
    assert [child.tag for child in node] == ["operator", "sources", "parameters"]
    assert node.find("operator").text == "TinyOp"


def test_template_serialization():
    operator = OperatorDescriptor(
        name="Tiny",
        operator_class="org.x.TinyOp",
        source_product_descriptors=(SourceProductDescriptor(name="input"),),
        parameter_descriptors=(
            ParameterDescriptor(name="factor", data_type=scalar_type(ScalarKind.FLOAT)),
        ),
    )
    assert template_to_xml(emit_template(operator)) == (
        '<graph id="someGraphId">\n'
        "  <version>1.0</version>\n"
        '  <node id="someNodeId">\n'
        "    <operator>TinyOp</operator>\n"
        "    <sources>\n"
        "      <input>${input}</input>\n"
        "    </sources>\n"
        "    <parameters>\n"
        "      <factor>float</factor>\n"
        "    </parameters>\n"
        "  </node>\n"
        "</graph>"
    )


def test_sources_use_placeholders_and_source_products(sample_operator):
    sources = emit_template(sample_operator).find("node/sources")
    assert [(child.tag, child.text) for child in sources] == [
        ("source", "${source}"),
        ("auxProduct", "${auxProduct}"),
        ("sourceProducts", "${sourceProducts}"),
    ]


def test_scalar_and_array_without_item_alias():
    operator = OperatorDescriptor(
        name="Op",
        parameter_descriptors=(
            ParameterDescriptor(name="count", alias="n", data_type=scalar_type(ScalarKind.INT)),
            ParameterDescriptor(name="values", data_type=array_of(scalar_type(ScalarKind.DOUBLE))),
        ),
    )
    params = _parameters(operator)
    assert [(child.tag, child.text) for child in params] == [
        ("n", "int"),
        ("values", "double,double,double,..."),
    ]


def test_array_with_item_alias_is_wrapped():
    parent = ET.Element("parameters")
    append_parameter(
        ParameterDescriptor(
            name="bandNames",
            alias="sourceBands",
            item_alias="band",
            data_type=array_of(scalar_type(ScalarKind.STRING)),
        ),
        parent,
    )
    wrapper = parent.find("sourceBands")
    assert [(child.tag, child.text) for child in wrapper] == [("band", "string"), (ELLIPSIS_TAG, None)]


def test_inlined_items_are_direct_children_of_parameters():
    operator = OperatorDescriptor(
        name="Op",
        parameter_descriptors=(
            ParameterDescriptor(
                name="bands",
                item_alias="band",
                items_inlined=True,
                data_type=array_of(scalar_type(ScalarKind.STRING)),
            ),
            ParameterDescriptor(name="factor", data_type=scalar_type(ScalarKind.FLOAT)),
        ),
    )
    params = _parameters(operator)
    assert [child.tag for child in params] == ["band", ELLIPSIS_TAG, "factor"]
    assert params.find("bands") is None


def test_array_of_structures_recurses_into_members(sample_operator):
    wrapper = _parameters(sample_operator).find("targetBands")
    item, marker = list(wrapper)
    assert item.tag == "targetBand"
    assert [(child.tag, child.text) for child in item] == [("name", "string"), ("expression", "string")]
    assert item.text is None
    assert marker.tag == ELLIPSIS_TAG


def test_structure_parameter_renders_members_without_value():
    point = structure_of(
        "Point",
        [
            ParameterDescriptor(name="x", data_type=scalar_type(ScalarKind.DOUBLE)),
            ParameterDescriptor(name="yCoord", alias="y", data_type=scalar_type(ScalarKind.DOUBLE)),
        ],
    )
    parent = ET.Element("parameters")
    append_parameter(ParameterDescriptor(name="origin", data_type=point), parent)
    origin = parent.find("origin")
    assert origin.text is None
    assert [(child.tag, child.text) for child in origin] == [("x", "double"), ("y", "double")]


def test_nested_structures_recurse():
    inner = structure_of("Inner", [ParameterDescriptor(name="leaf", data_type=scalar_type(ScalarKind.INT))])
    outer = structure_of("Outer", [ParameterDescriptor(name="inner", data_type=inner)])
    parent = ET.Element("parameters")
    append_parameter(ParameterDescriptor(name="outer", data_type=outer), parent)
    assert parent.find("outer/inner/leaf").text == "int"


def test_round_trip_through_parser_preserves_shape():
    point = structure_of(
        "Point",
        [
            ParameterDescriptor(name="x", data_type=scalar_type(ScalarKind.DOUBLE)),
            ParameterDescriptor(name="y", data_type=scalar_type(ScalarKind.DOUBLE)),
        ],
    )
    operator = OperatorDescriptor(
        name="Op",
        alias="Shape",
        source_product_descriptors=(SourceProductDescriptor(name="master"),),
        source_products_descriptor=SourceProductsDescriptor(name="sourceProducts", count=2),
        parameter_descriptors=(
            ParameterDescriptor(name="origin", data_type=point),
            ParameterDescriptor(name="names", data_type=array_of(scalar_type(ScalarKind.STRING))),
        ),
    )
    tree = emit_template(operator)
    parsed = ET.fromstring(template_to_xml(tree))
    assert _shape(parsed) == _shape(tree)


def test_serialization_does_not_modify_tree(sample_operator):
    tree = emit_template(sample_operator)
    before = ET.tostring(tree, encoding="unicode")
    template_to_xml(tree)
    assert ET.tostring(tree, encoding="unicode") == before


def test_template_lines_are_indented():
    lines = template_lines(emit_template(OperatorDescriptor(name="Tiny")))
    assert lines[0] == '  <graph id="someGraphId">'
    assert lines[-1] == "  </graph>"
    assert all(line.startswith("  ") for line in lines)
    assert "      <sources />" in lines
