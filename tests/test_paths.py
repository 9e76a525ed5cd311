import pytest

from webhook_variables.errors import ConfigurationError
from webhook_variables.paths import (
    field_key,
    field_path,
    index_key,
    index_path,
    is_definite_path,
    nested_index_key,
    split_string_part_index,
)


def test_keys_concatenate_index_and_field():
    assert index_key("name", 0) == "name0"
    assert index_key("name", 12) == "name12"
    assert nested_index_key("name_tags", 0) == "name_tags_0"
    assert nested_index_key("name1", 1) == "name1_1"
    assert field_key("name", "id") == "name_id"


def test_field_path_uses_brackets_for_unusual_names():
    assert field_path("$", "a") == "$.a"
    assert field_path("$.a", "gpt-3.5") == "$.a['gpt-3.5']"
    assert field_path("$", "it's") == "$['it\\'s']"
    assert index_path("$.items", 3) == "$.items[3]"


@pytest.mark.parametrize("expression, definite", [
    ("$", True),
    ("$.a.b", True),
    ("$.items[0].name", True),
    ("$['a b']", True),
    ("$['a,b']", True),
    ("$['x:y'].z", True),
    ("$['a','b']", False),
    ('$["a", "b"]', False),
    ("$.items[*].name", False),
    ("$..name", False),
    ("$.items[?(@.id == 'a1')]", False),
    ("$.items[0,1]", False),
    ("$.items[0:2]", False),
])
def test_is_definite_path(expression, definite):
    assert is_definite_path(expression) is definite


def test_split_string_part_index():
    assert split_string_part_index("$.2") == 2
    assert split_string_part_index(" $.10 ") == 10
    assert split_string_part_index("3") == 3


@pytest.mark.parametrize("expression", ["$.abc", "$.", "$.0", "$.-1", None])
def test_split_string_part_index_rejects_bad_expressions(expression):
    with pytest.raises(ConfigurationError):
        split_string_part_index(expression)
