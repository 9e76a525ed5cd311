import json

import pytest

from webhook_variables.errors import XmlDoctypeError
from webhook_variables.resolver import resolve_all
from webhook_variables.rules import ExpressionType, load_rules
from webhook_variables.schema_utils import (
    default_variable_name,
    extract_json_paths,
    extract_xml_paths,
    suggest_rules,
)


def test_extract_json_paths_lists_every_leaf(json_payload):
    paths = extract_json_paths(json.loads(json_payload))
    assert paths == sorted(paths)
    assert "$.ref" in paths
    assert "$.repository.private" in paths
    assert "$.commits[1].author.name" in paths
    assert "$.tags[2]" in paths
    assert "$.nothing" in paths
    assert "$.commits" not in paths


def test_extract_json_paths_quotes_unusual_keys():
    assert extract_json_paths({"gpt-3.5": {"score": 1}}) == ["$['gpt-3.5'].score"]
    assert extract_json_paths("scalar") == ["$"]
    assert extract_json_paths({"a": [], "b": {}}) == []


def test_extract_xml_paths(xml_payload):
    assert extract_xml_paths(xml_payload) == [
        "/build",
        "/build/@id",
        "/build/job",
        "/build/job/@name",
        "/build/job/b",
        "/build/status",
    ]


def test_extract_xml_paths_rejects_doctype():
    with pytest.raises(XmlDoctypeError):
        extract_xml_paths("<!DOCTYPE a><a/>")


@pytest.mark.parametrize("path, name", [
    ("$.commits[0].author.name", "name"),
    ("$.tags[2]", "tags"),
    ("/build/job/@name", "name"),
    ("/build/status", "status"),
    ("$['gpt-3.5'].score", "score"),
    ("$", "payload"),
])
def test_default_variable_name(path, name):
    assert default_variable_name(path) == name


def test_suggested_rules_resolve_against_their_payload(json_payload):
    paths = ["$.ref", "$.repository.name"]
    suggestions = suggest_rules(paths, ExpressionType.JSONPATH)
    assert [s["variableName"] for s in suggestions] == ["ref", "name"]
    assert all(s["expressionType"] == "JSONPath" for s in suggestions)

    rules = load_rules(suggestions)
    assert resolve_all(rules, json_payload) == {"ref": "refs/heads/main", "name": "demo"}


def test_suggested_xpath_rules(xml_payload):
    rules = load_rules(suggest_rules(["/build/status", "/build/job/@name"], "XPath"))
    assert resolve_all(rules, xml_payload) == {"status": "ok", "name0": "compile", "name1": "test"}
