from __future__ import annotations

from typing import Any, List, Tuple

from jsonpath_ng.ext import parse as parse_json_path
from jsonpath_ng.jsonpath import Child, Fields, Index, Root, This
from lxml import etree

from .errors import PathNotFoundError, XmlDoctypeError, XPathResultError
from .paths import field_path, index_path, is_definite_path


def _index_of(step: Index) -> int:
    indices = getattr(step, 'indices', None)
    if indices:
        return indices[0]
    return step.index


def _extend_path(path: str, step: Any) -> str:
    if isinstance(step, Child):
        return _extend_path(_extend_path(path, step.left), step.right)
    if isinstance(step, Root):
        return '$'
    if isinstance(step, This):
        return path
    if isinstance(step, Fields):
        for name in step.fields:
            path = field_path(path, name)
        return path
    if isinstance(step, Index):
        return index_path(path, _index_of(step))
    return f"{path}.{step}"


def match_path(match: Any) -> str:
    """Rebuild the '$'-rooted path of a jsonpath-ng match from its context chain.

    Segments are rendered with the same helpers the flattener uses, so a node
    has one path whichever expression selected it.
    """
    steps = []
    datum = match
    while datum is not None:
        steps.append(datum.path)
        datum = datum.context
    path = '$'
    for step in reversed(steps):
        path = _extend_path(path, step)
    return path


def find_json_path(data: Any, expression: str) -> List[Tuple[str, Any]]:
    """Evaluate a JSON path and return (path, value) pairs in match order."""
    compiled = parse_json_path(expression.strip())
    return [(match_path(match), match.value) for match in compiled.find(data)]


def read_json_path(data: Any, expression: str) -> Any:
    """Read a single value by definite JSON path.

    Raises PathNotFoundError when nothing matches.
    """
    matches = find_json_path(data, expression)
    if not matches:
        raise PathNotFoundError(f"No results for path: {expression}")
    if is_definite_path(expression):
        return matches[0][1]
    return [value for _, value in matches]


def _secure_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        dtd_validation=False,
    )


def parse_xml_document(payload: str):
    """Parse an XML payload into an element tree, rejecting any DOCTYPE."""
    if isinstance(payload, str):
        payload = payload.encode('utf-8')
    root = etree.fromstring(payload, _secure_parser())
    tree = root.getroottree()
    docinfo = tree.docinfo
    if docinfo.doctype or docinfo.internalDTD is not None or docinfo.externalDTD is not None:
        raise XmlDoctypeError("DOCTYPE is disallowed in XML payloads")
    return tree


def select_xml_nodes(tree, expression: str) -> list:
    """Evaluate an XPath expression that must produce a node-set."""
    result = tree.xpath(expression)
    if not isinstance(result, list):
        raise XPathResultError(f"XPath '{expression}' did not evaluate to a node-set")
    return result
