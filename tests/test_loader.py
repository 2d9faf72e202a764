"""Tests for member-model loading"""

import json

import pytest

from docoracle.exceptions import ModelLoadError
from docoracle.loader import build_model, load_model
from docoracle.models import ElementKind

STACK_MODEL = """
types:
  - name: com.example.Stack
    supertypes: [java.util.Collection]
    members:
      - {kind: method, name: isEmpty, return_type: boolean}
      - {kind: method, name: push, parameters: [Object], return_type: void}
      - {kind: constructor, name: init, parameters: [int]}
members:
  - declaring_type: com.example.Stack
    name: empty
    return_type: boolean
    comment: Equivalent to isEmpty().
"""


class TestLoadModel:
    """YAML/JSON parsing and schema validation"""

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "stack.yaml"
        path.write_text(STACK_MODEL)

        types, members = load_model(path)

        assert [t.name for t in types] == ["com.example.Stack"]
        assert types[0].supertypes == ("java.util.Collection",)
        assert members[0].name == "empty"
        assert members[0].comment.text == "Equivalent to isEmpty()."

    def test_documented_members_join_their_type(self, tmp_path):
        path = tmp_path / "stack.yaml"
        path.write_text(STACK_MODEL)

        types, _ = load_model(path)

        assert [m.name for m in types[0].members] == ["isEmpty", "push", "Stack", "empty"]

    def test_constructor_is_named_after_type(self, tmp_path):
        path = tmp_path / "stack.yaml"
        path.write_text(STACK_MODEL)

        types, _ = load_model(path)
        constructor = [m for m in types[0].members if m.kind == ElementKind.CONSTRUCTOR][0]

        assert constructor.name == "Stack"
        assert constructor.parameter_types == ("int",)

    def test_load_json(self, tmp_path):
        path = tmp_path / "model.json"
        path.write_text(json.dumps({
            "members": [{
                "declaring_type": "Counter",
                "name": "next",
                "parameters": [{"name": "step", "type": "int"}],
                "return_type": "int",
                "comment": "Same as add(step)",
            }],
        }))

        types, members = load_model(path)

        assert types[0].name == "Counter"
        assert members[0].parameters[0].type == "int"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ModelLoadError, match="not found"):
            load_model(tmp_path / "missing.yaml")

    def test_unparsable_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ModelLoadError, match="Could not parse"):
            load_model(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ModelLoadError, match="mapping"):
            load_model(path)


class TestBuildModel:
    """Schema errors name the offending location"""

    def test_missing_member_name(self):
        with pytest.raises(ModelLoadError, match="members/0"):
            build_model({"members": [{"declaring_type": "Counter"}]})

    def test_bad_kind(self):
        data = {"types": [{"name": "T", "members": [{"name": "x", "kind": "property"}]}], "members": []}
        with pytest.raises(ModelLoadError):
            build_model(data)

    def test_missing_members_key(self):
        with pytest.raises(ModelLoadError, match="<root>"):
            build_model({"types": []})
