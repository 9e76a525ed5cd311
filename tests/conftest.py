"""Shared fixtures for the webhook variable resolver tests."""

import json

import pytest

from webhook_variables.rules import ExpressionType, GenericVariable


@pytest.fixture
def json_payload() -> str:
    return json.dumps({
        "ref": "refs/heads/main",
        "repository": {"name": "demo", "private": False},
        "commits": [
            {"id": "a1", "author": {"name": "Ada"}},
            {"id": "b2", "author": {"name": "Lin"}},
        ],
        "tags": ["x", "y", "z"],
        "empty": "",
        "nothing": None,
    })


@pytest.fixture
def xml_payload() -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<build id="42">'
        '<job name="compile">make <b>all</b></job>'
        '<job name="test">pytest</job>'
        '<status>ok</status>'
        '</build>'
    )


@pytest.fixture
def chat_payload() -> str:
    return json.dumps({
        "type": "message",
        "text": "<at>Builder</at> param:deploy, prod|eu-west|v1.2</at>\nsent from chat",
    })


@pytest.fixture
def make_rule():
    def _make(name="var", expression_type=ExpressionType.JSONPATH, expression="$", regexp_filter=None, default_value=None):
        return GenericVariable(
            variable_name=name,
            expression_type=expression_type,
            expression=expression,
            regexp_filter=regexp_filter,
            default_value=default_value,
        )
    return _make
