import dataclasses

import pytest

from webhook_variables.errors import ConfigurationError
from webhook_variables.rules import ExpressionType, GenericVariable, load_rules, rule_from_mapping


def test_expression_type_is_coerced_from_string():
    rule = GenericVariable("ref", "xpath", "/a")
    assert rule.expression_type is ExpressionType.XPATH
    assert GenericVariable("ref", "StringPart", "$.1").expression_type is ExpressionType.STRINGPART


def test_unknown_expression_type_is_rejected_at_load_time():
    with pytest.raises(ConfigurationError):
        GenericVariable("ref", "JMESPath", "a.b")


def test_empty_variable_name_is_rejected():
    with pytest.raises(ConfigurationError):
        GenericVariable("  ", ExpressionType.JSONPATH, "$.a")


def test_rules_are_immutable():
    rule = GenericVariable("ref", ExpressionType.JSONPATH, "$.ref")
    with pytest.raises(dataclasses.FrozenInstanceError):
        rule.expression = "$.other"


def test_rule_from_mapping_reads_camel_and_snake_case():
    camel = rule_from_mapping({
        "variableName": "ref",
        "expressionType": "JSONPath",
        "expression": "$.ref",
        "regexpFilter": "",
        "defaultValue": "",
    })
    assert camel.regexp_filter is None
    assert camel.default_value == ""

    snake = rule_from_mapping({"variable_name": "ref", "expression_type": "XPath", "expression": "/a", "default_value": 3})
    assert snake.expression_type is ExpressionType.XPATH
    assert snake.default_value == "3"


def test_rule_from_mapping_defaults_to_json_path():
    assert rule_from_mapping({"variableName": "ref", "expression": "$.ref"}).expression_type is ExpressionType.JSONPATH


def test_load_rules_accepts_list_or_wrapper_object():
    entries = [{"variableName": "a", "expression": "$.a"}, {"variableName": "b", "expression": "$.b"}]
    assert [r.variable_name for r in load_rules(entries)] == ["a", "b"]
    assert [r.variable_name for r in load_rules({"genericVariables": entries})] == ["a", "b"]
    assert load_rules(None) == []


@pytest.mark.parametrize("data", [
    "not a list",
    [["variableName", "a"]],
    [{"variableName": "", "expression": "$.a"}],
    [{"variableName": "a", "expressionType": "Regex", "expression": "a"}],
])
def test_load_rules_rejects_invalid_configuration(data):
    with pytest.raises(ConfigurationError):
        load_rules(data)
