"""
Reader for graph XML files.

Only the parts needed for usage text are extracted: the graph id and version,
the node ids and the optional ``<header>`` declaring the graph's sources and
parameters.
"""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from .descriptors import Graph, GraphHeader, HeaderParameter, HeaderSource
from .errors import GraphError

logger = logging.getLogger(__name__)

_VARIABLE_RE = re.compile(r"\$\{([A-Za-z0-9_.\-]+)\}")
_TRUE_VALUES = {"true", "yes", "1"}


def substitute_variables(text: str, params: Mapping[str, str]) -> str:
    """Replace ``${name}`` references found in ``params``; leave others as they are."""

    def _replace(match: re.Match) -> str:
        key = match.group(1)
        return str(params[key]) if key in params else match.group(0)

    return _VARIABLE_RE.sub(_replace, text)


def _flag(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUE_VALUES


def _text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_header(header_elem: ET.Element) -> GraphHeader:
    target_elem = header_elem.find("target")
    target = target_elem.get("refid") if target_elem is not None else None

    sources = []
    for elem in header_elem.findall("source"):
        name = elem.get("name")
        if not name:
            raise GraphError("Header source without 'name' attribute")
        sources.append(
            HeaderSource(
                name=name,
                description=elem.get("description"),
                optional=_flag(elem.get("optional")),
                location=_text(elem.text),
            )
        )

    parameters = []
    for elem in header_elem.findall("parameter"):
        name = elem.get("name")
        if not name:
            raise GraphError("Header parameter without 'name' attribute")
        value_set = elem.get("valueSet")
        parameters.append(
            HeaderParameter(
                name=name,
                type=elem.get("type") or "String",
                description=elem.get("description"),
                interval=elem.get("interval"),
                pattern=elem.get("pattern"),
                format=elem.get("format"),
                value_set=tuple(v.strip() for v in value_set.split(",")) if value_set else (),
                default_value=elem.get("defaultValue"),
                unit=elem.get("unit"),
                not_null=_flag(elem.get("notNull")),
                not_empty=_flag(elem.get("notEmpty")),
            )
        )
    return GraphHeader(target=target, sources=tuple(sources), parameters=tuple(parameters))


def parse_graph(text: str) -> Graph:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise GraphError(f"Invalid graph XML: {e}")
    if root.tag != "graph":
        raise GraphError(f"Expected <graph> root element, found <{root.tag}>")
    graph_id = root.get("id")
    if not graph_id:
        raise GraphError("Graph element without 'id' attribute")
    version_elem = root.find("version")
    header_elem = root.find("header")
    return Graph(
        id=graph_id,
        version=(_text(version_elem.text) if version_elem is not None else None) or "1.0",
        header=_parse_header(header_elem) if header_elem is not None else None,
        node_ids=tuple(node.get("id", "") for node in root.findall("node")),
    )


def read_graph(path: Union[str, Path], params: Optional[Dict[str, str]] = None) -> Graph:
    """Read a graph file, substituting ``${name}`` variables from ``params``.

    Raises:
        OSError: If the file cannot be read.
        GraphError: If the content is not a valid graph.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise GraphError(f"Graph file {path} is not UTF-8 encoded: {e}")
    if params:
        text = substitute_variables(text, params)
    graph = parse_graph(text)
    logger.debug(f"Read graph '{graph.id}' from {path} with {len(graph.node_ids)} node(s)")
    return graph
