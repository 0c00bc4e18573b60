"""
Composition of complete usage texts.

Three entry points are provided:

- ``usage_for_operator``: usage, options and graph XML template of one operator
- ``usage_for_graph``: usage and options declared by a graph file header
- ``operator_catalog_summary``: general tool usage listing all public operators

None of them raise for an unknown operator or an unreadable graph; the message
is returned as the usage text instead.
"""
from __future__ import annotations

import logging
from importlib.resources import files as pkg_files
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from .config import UsageConfig, load_config
from .descriptors import Graph, effective_name
from .doc_elements import (
    ConverterCheck,
    DocElement,
    has_converter,
    header_parameter_doc_elements,
    header_source_doc_elements,
    parameter_doc_elements,
    property_doc_elements,
    source_doc_elements,
)
from .errors import GraphError
from .graph_reader import read_graph
from .graph_template import emit_template, template_lines
from .layout import UsageText, layout_doc_elements, render_doc_elements, split_description
from .registry import OperatorRegistry, default_registry

logger = logging.getLogger(__name__)

USAGE_PATTERN_RESOURCE = "command_line_usage.txt"
NO_DESCRIPTION = "No description available."

GraphReader = Callable[[Union[str, Path], Dict[str, str]], Graph]


def load_usage_pattern() -> str:
    """Return the packaged usage pattern, or an empty string if it cannot be read."""
    try:
        resource = pkg_files("opdoc").joinpath("templates").joinpath(USAGE_PATTERN_RESOURCE)
        return resource.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Usage pattern not available: {e}")
        return ""


def source_files_placeholder(count: int) -> str:
    """Placeholder for the source files an operator accepts on the command line.

    A negative count means any number of files. A count of zero yields an
    empty string.
    """
    if count < 0:
        return "<source-file-1> <source-file-2> ..."
    if count == 1:
        return "<source-file>"
    if count == 2:
        return "<source-file-1> <source-file-2>"
    if count == 3:
        return "<source-file-1> <source-file-2> <source-file-3>"
    if count > 3:
        return f"<source-file-1> <source-file-2> ... <source-file-{count}>"
    return ""


def usage_for_operator(
    name: str,
    registry: Optional[OperatorRegistry] = None,
    converter_check: ConverterCheck = has_converter,
    config: Optional[UsageConfig] = None,
) -> str:
    """Full usage text for the operator registered under ``name``.

    Args:
        name: Operator name or alias.
        registry: Registry to look the operator up in; the default registry if None.
        converter_check: Decides which parameters can be set on the command line.
        config: Usage configuration; resolved with ``load_config`` if None.

    Returns:
        str: The usage text, or ``Unknown operator '<name>'.``.
    """
    if registry is None:
        registry = default_registry()
    descriptor = registry.lookup(name)
    if descriptor is None:
        return f"Unknown operator '{name}'."
    if config is None:
        config = load_config()

    invocation = f"  {config.tool_name} {name} [options] "
    if descriptor.source_products_descriptor is not None:
        invocation += source_files_placeholder(descriptor.source_products_descriptor.count)

    text = UsageText()
    text.line("Usage:").line(invocation)

    if descriptor.description is not None:
        text.section("Description", ["  " + line for line in split_description(descriptor.description)])

    properties = property_doc_elements(descriptor)
    if properties:
        text.section("Computed Properties", layout_doc_elements(properties))

    text.blank()
    sources = source_doc_elements(descriptor)
    if sources:
        text.section("Source Options", layout_doc_elements(sources))
    parameters = parameter_doc_elements(descriptor, converter_check)
    if parameters:
        text.section("Parameter Options", layout_doc_elements(parameters))

    text.section("Graph XML Format", template_lines(emit_template(descriptor)))
    return text.render()


def usage_for_graph(
    path: Union[str, Path],
    graph_reader: GraphReader = read_graph,
    params: Optional[Dict[str, str]] = None,
    config: Optional[UsageConfig] = None,
) -> str:
    """Usage text for a graph file, built from the sources and parameters of its header.

    Read and parse failures are returned as the usage text.
    """
    try:
        graph = graph_reader(path, dict(params or {}))
    except (OSError, GraphError) as e:
        logger.debug(f"Cannot read graph {path}: {e}")
        return str(e)

    header = graph.header
    if header is None:
        return ""
    if config is None:
        config = load_config()

    text = UsageText()
    text.line("Usage:").line(f"  {config.tool_name} {path} [options] ")
    sources = header_source_doc_elements(header)
    if sources:
        text.line("Source Options:").lines(layout_doc_elements(sources))
    parameters = header_parameter_doc_elements(header)
    if parameters:
        if sources:
            text.blank()
        text.line("Parameter Options:").lines(layout_doc_elements(parameters))
    return text.render()


def operator_catalog_summary(
    registry: Optional[OperatorRegistry] = None,
    config: Optional[UsageConfig] = None,
    pattern: Optional[str] = None,
) -> str:
    """General usage text listing every non-internal operator.

    The operator list and configuration defaults are interpolated into the
    usage pattern (positional fields ``{0}`` to ``{5}``).
    """
    if registry is None:
        registry = default_registry()
    if config is None:
        config = load_config()
    if pattern is None:
        pattern = load_usage_pattern()

    elements = [
        DocElement("  " + effective_name(descriptor), (descriptor.description or NO_DESCRIPTION,))
        for descriptor in registry.operators()
        if not descriptor.internal
    ]
    try:
        return pattern.format(
            config.tool_name,
            config.target_filepath,
            config.format_name,
            config.tile_cache_size_mb,
            config.tile_scheduler_parallelism,
            render_doc_elements(elements),
        )
    except (IndexError, KeyError, ValueError) as e:
        logger.warning(f"Malformed usage pattern, ignoring it: {e}")
        return ""
