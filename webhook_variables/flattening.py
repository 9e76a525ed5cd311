from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from lxml import etree

from .paths import field_key, field_path, index_key, index_path, nested_index_key


def string_of(value: Any) -> str:
    """Render a decoded JSON scalar the way it reads in the payload."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _compile_filter(regexp_filter: Optional[str]):
    if not regexp_filter:
        return None
    return re.compile(regexp_filter)


def _flatten_into(out: Dict[str, str], key: str, path: str, value: Any, pattern, nested: bool = False) -> None:
    if isinstance(value, list):
        for index, item in enumerate(value):
            # Only the base sequence appends its index directly ('name0').
            child_key = nested_index_key(key, index) if nested else index_key(key, index)
            _flatten_into(out, child_key, index_path(path, index), item, pattern, True)
    elif isinstance(value, dict):
        for name, item in value.items():
            _flatten_into(out, field_key(key, name), field_path(path, name), item, pattern, True)
    elif value is not None or nested:
        # Filter on the JSON path of the leaf, not on the flat key.
        if pattern is None or pattern.search(path):
            out[key] = '' if value is None else string_of(value)


def flatten_json(base_key: str, regexp_filter: Optional[str], value: Any, path: str = '$') -> Dict[str, str]:
    """Flatten a decoded JSON value into flat string entries under `base_key`.

    The base sequence appends the element index to the key ('name0'), nested
    sequences append '_' plus the index ('name_tags_0', 'name0_1') and mappings
    append '_' plus the field name ('name_field'). A top-level null yields
    nothing, a null inside a container yields ''. When `regexp_filter` is set
    only leaves whose JSON path matches it are kept.
    """
    flattened: Dict[str, str] = {}
    _flatten_into(flattened, base_key, path, value, _compile_filter(regexp_filter))
    return flattened


def flatten_json_matches(
    base_key: str,
    regexp_filter: Optional[str],
    matches: Iterable[Tuple[str, Any]],
) -> Dict[str, str]:
    """Flatten the matches of an indefinite JSON path as one sequence."""
    flattened: Dict[str, str] = {}
    pattern = _compile_filter(regexp_filter)
    for index, (path, value) in enumerate(matches):
        _flatten_into(flattened, index_key(base_key, index), path, value, pattern, True)
    return flattened


def xml_node_text(node: Any) -> str:
    if isinstance(node, etree._Element):
        if isinstance(node.tag, str):
            return str(node.xpath('string()'))
        # Comments and processing instructions.
        return node.text or ''
    return str(node)


def flatten_xml_nodes(variable_name: str, nodes: List[Any]) -> Dict[str, str]:
    """Flatten an XPath node-set, one entry per node in document order."""
    flattened: Dict[str, str] = {}
    if len(nodes) == 1:
        flattened[variable_name] = xml_node_text(nodes[0])
        return flattened
    for index, node in enumerate(nodes):
        flattened[index_key(variable_name, index)] = xml_node_text(node)
    return flattened
