"""
Operator registry backed by YAML descriptor files.

Each ``*.yaml`` file describes one operator. Packaged descriptors live in
``opdoc/operators``; descriptors in ``./operators`` (relative to the working
directory) and in any extra directories override packaged ones by name.

Type syntax used in descriptor files::

    type: float                 # scalar
    type: String[]              # array, may be nested: int[][]
    type:                       # structure
      structure: BandDescriptor
      members: [...]            # parameter entries
    type:
      array: {structure: ..., members: [...]}
"""
from __future__ import annotations

import logging
from importlib.resources import files as pkg_files
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import yaml

from .descriptors import (
    DataType,
    OperatorDescriptor,
    ParameterDescriptor,
    ScalarKind,
    SourceProductDescriptor,
    SourceProductsDescriptor,
    TargetPropertyDescriptor,
    array_of,
    effective_name,
    scalar_type,
    structure_of,
)
from .errors import DescriptorError

logger = logging.getLogger(__name__)

_SCALARS_BY_NAME = {kind.value: kind for kind in ScalarKind}
# lower-case spellings accepted for reference types
_SCALARS_BY_NAME.update({kind.value.lower(): kind for kind in ScalarKind})


def parse_data_type(spec: Any, where: str = "type") -> DataType:
    if isinstance(spec, str):
        text = spec.strip()
        if text.endswith("[]"):
            return array_of(parse_data_type(text[:-2], where))
        kind = _SCALARS_BY_NAME.get(text)
        if kind is None:
            raise DescriptorError(f"{where}: unknown type '{text}'")
        return scalar_type(kind)
    if isinstance(spec, dict):
        if "array" in spec:
            return array_of(parse_data_type(spec["array"], where))
        if "structure" in spec:
            members = spec.get("members") or []
            if not isinstance(members, list):
                raise DescriptorError(f"{where}: 'members' must be a list")
            return structure_of(
                str(spec["structure"]),
                [parse_parameter(m, f"{where}.{spec['structure']}") for m in members],
            )
    raise DescriptorError(f"{where}: cannot interpret type {spec!r}")


def _opt_str(entry: Dict[str, Any], key: str) -> Optional[str]:
    value = entry.get(key)
    return None if value is None else str(value)


def _flag(entry: Dict[str, Any], key: str, where: str) -> bool:
    value = entry.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DescriptorError(f"{where}: '{key}' must be true or false, got {value!r}")
    return value


def _require_name(entry: Any, where: str) -> str:
    if not isinstance(entry, dict) or not entry.get("name"):
        raise DescriptorError(f"{where}: every entry needs a 'name'")
    return str(entry["name"])


def parse_parameter(entry: Any, where: str = "parameters") -> ParameterDescriptor:
    name = _require_name(entry, where)
    value_set = entry.get("value_set") or []
    if isinstance(value_set, str):
        value_set = [v.strip() for v in value_set.split(",")]
    elif not isinstance(value_set, list):
        raise DescriptorError(f"{where}.{name}: 'value_set' must be a list or a comma separated string")
    return ParameterDescriptor(
        name=name,
        alias=_opt_str(entry, "alias"),
        data_type=parse_data_type(entry.get("type", "String"), f"{where}.{name}"),
        description=_opt_str(entry, "description"),
        interval=_opt_str(entry, "interval"),
        pattern=_opt_str(entry, "pattern"),
        format=_opt_str(entry, "format"),
        value_set=tuple(str(v) for v in value_set),
        default_value=_opt_str(entry, "default_value"),
        unit=_opt_str(entry, "unit"),
        not_null=_flag(entry, "not_null", f"{where}.{name}"),
        not_empty=_flag(entry, "not_empty", f"{where}.{name}"),
        item_alias=_opt_str(entry, "item_alias"),
        items_inlined=_flag(entry, "items_inlined", f"{where}.{name}"),
        converter=_opt_str(entry, "converter"),
    )


def parse_operator(data: Any, origin: str = "<descriptor>") -> OperatorDescriptor:
    """Build an ``OperatorDescriptor`` from a parsed YAML mapping.

    Raises:
        DescriptorError: If required keys are missing or a type is unknown.
    """
    if not isinstance(data, dict):
        raise DescriptorError(f"{origin}: expected a mapping at top level")
    name = _require_name(data, origin)

    sources = []
    for entry in data.get("sources") or []:
        source_name = _require_name(entry, f"{origin}: sources")
        sources.append(
            SourceProductDescriptor(
                name=source_name,
                alias=_opt_str(entry, "alias"),
                description=_opt_str(entry, "description"),
                product_type=_opt_str(entry, "product_type"),
                optional=_flag(entry, "optional", f"{origin}: sources.{source_name}"),
            )
        )

    products = None
    products_entry = data.get("source_products")
    if products_entry is not None:
        products_name = _require_name(products_entry, f"{origin}: source_products")
        try:
            count = int(products_entry.get("count", -1))
        except (TypeError, ValueError):
            raise DescriptorError(f"{origin}: source_products.count must be an integer")
        products = SourceProductsDescriptor(
            name=products_name,
            alias=_opt_str(products_entry, "alias"),
            count=count,
        )

    properties = []
    for entry in data.get("target_properties") or []:
        prop_name = _require_name(entry, f"{origin}: target_properties")
        properties.append(
            TargetPropertyDescriptor(
                name=prop_name,
                alias=_opt_str(entry, "alias"),
                data_type=parse_data_type(entry.get("type", "Object"), f"{origin}: {prop_name}"),
                description=_opt_str(entry, "description"),
            )
        )

    return OperatorDescriptor(
        name=name,
        alias=_opt_str(data, "alias"),
        description=_opt_str(data, "description"),
        internal=_flag(data, "internal", origin),
        operator_class=str(data.get("operator_class") or ""),
        source_product_descriptors=tuple(sources),
        source_products_descriptor=products,
        parameter_descriptors=tuple(
            parse_parameter(entry, f"{origin}: parameters") for entry in data.get("parameters") or []
        ),
        target_property_descriptors=tuple(properties),
    )


def load_operator_file(path: Path) -> OperatorDescriptor:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise DescriptorError(f"{path}: not a UTF-8 text file: {e}")
    except yaml.YAMLError as e:
        raise DescriptorError(f"{path}: invalid YAML: {e}")
    return parse_operator(data, str(path))


class OperatorRegistry:
    """Read-only lookup of operator descriptors by name or alias."""

    def __init__(self, descriptors: Iterable[OperatorDescriptor] = ()):
        self._by_name: Dict[str, OperatorDescriptor] = {}
        for descriptor in descriptors:
            self._by_name[descriptor.name] = descriptor

    def lookup(self, name: str) -> Optional[OperatorDescriptor]:
        descriptor = self._by_name.get(name)
        if descriptor is not None:
            return descriptor
        for candidate in self._by_name.values():
            if candidate.alias and candidate.alias == name:
                return candidate
        return None

    def operators(self) -> List[OperatorDescriptor]:
        return sorted(self._by_name.values(), key=effective_name)

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def __len__(self) -> int:
        return len(self._by_name)


def _iter_packaged_descriptors() -> Iterable[Path]:
    pkg_root = pkg_files("opdoc").joinpath("operators")
    if not pkg_root.is_dir():
        return []
    return sorted(Path(str(p)) for p in pkg_root.iterdir() if p.name.endswith(".yaml"))


def _iter_dir_descriptors(root: Path) -> Iterable[Path]:
    if not root.is_dir():
        return []
    return sorted(root.glob("*.yaml"))


def discover_operators(extra_dirs: Sequence[Path] = (), cwd: Optional[Path] = None) -> OperatorRegistry:
    """Index packaged, project and extra descriptor files into a registry.

    Files that cannot be parsed are logged and skipped.
    """
    cwd = Path.cwd() if cwd is None else Path(cwd)
    paths: List[Path] = list(_iter_packaged_descriptors())
    paths.extend(_iter_dir_descriptors(cwd / "operators"))
    for extra in extra_dirs:
        paths.extend(_iter_dir_descriptors(Path(extra)))

    index: Dict[str, OperatorDescriptor] = {}
    for path in paths:
        try:
            descriptor = load_operator_file(path)
        except (OSError, DescriptorError) as e:
            logger.warning(f"Skipping operator descriptor {path}: {e}")
            continue
        if descriptor.name in index:
            logger.debug(f"Operator '{descriptor.name}' overridden by {path}")
        index[descriptor.name] = descriptor
    logger.debug(f"Indexed {len(index)} operator(s)")
    return OperatorRegistry(index.values())


_default_registry: Optional[OperatorRegistry] = None


def default_registry() -> OperatorRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = discover_operators()
    return _default_registry
