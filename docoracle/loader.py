"""
Member-model loader.

Reads a YAML or JSON file describing declared types and the documented
members to translate, validates it against MODEL_SCHEMA, and builds the
immutable model records.

Example (YAML):

    types:
      - name: com.example.Stack
        supertypes: [java.util.Collection]
        members:
          - {kind: method, name: isEmpty, return_type: boolean}
          - {kind: method, name: push, parameters: [Object], return_type: void}
    members:
      - declaring_type: com.example.Stack
        name: empty
        return_type: boolean
        comment: Equivalent to isEmpty().
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Tuple

import jsonschema
import yaml

from docoracle.exceptions import ModelLoadError
from docoracle.models import (
    CodeElement,
    DocumentedMember,
    ElementKind,
    FreeTextComment,
    Parameter,
    TypeModel,
    simple_type_name,
)

logger = logging.getLogger(__name__)


_KINDS = [kind.value for kind in ElementKind]

MODEL_SCHEMA = {
    "type": "object",
    "required": ["members"],
    "properties": {
        "types": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "supertypes": {"type": "array", "items": {"type": "string"}},
                    "members": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["name"],
                            "properties": {
                                "kind": {"enum": _KINDS},
                                "name": {"type": "string", "minLength": 1},
                                "parameters": {"type": "array", "items": {"type": "string"}},
                                "return_type": {"type": ["string", "null"]},
                                "static": {"type": "boolean"},
                            },
                        },
                    },
                },
            },
        },
        "members": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["declaring_type", "name"],
                "properties": {
                    "declaring_type": {"type": "string", "minLength": 1},
                    "name": {"type": "string", "minLength": 1},
                    "kind": {"enum": ["method", "constructor"]},
                    "static": {"type": "boolean"},
                    "parameters": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["name", "type"],
                            "properties": {
                                "name": {"type": "string"},
                                "type": {"type": "string"},
                            },
                        },
                    },
                    "return_type": {"type": ["string", "null"]},
                    "comment": {"type": "string"},
                },
            },
        },
    },
}


def _element(data: Dict, declaring_type: str) -> CodeElement:
    kind = ElementKind(data.get("kind", "method"))
    name = data["name"]
    if kind == ElementKind.CONSTRUCTOR:
        name = simple_type_name(declaring_type)
    return CodeElement(
        kind=kind,
        name=name,
        declaring_type=declaring_type,
        parameter_types=tuple(data.get("parameters", [])),
        return_type=data.get("return_type"),
        is_static=data.get("static", False),
    )


def _documented(data: Dict) -> DocumentedMember:
    kind = ElementKind(data.get("kind", "method"))
    return DocumentedMember(
        declaring_type=data["declaring_type"],
        name=data["name"],
        parameters=tuple(Parameter(p["name"], p["type"]) for p in data.get("parameters", [])),
        return_type=data.get("return_type"),
        comment=FreeTextComment(data.get("comment", "")),
        kind=kind,
        is_static=data.get("static", False),
    )


def _as_element(member: DocumentedMember) -> CodeElement:
    name = member.name
    if member.kind == ElementKind.CONSTRUCTOR:
        name = simple_type_name(member.declaring_type)
    return CodeElement(
        kind=member.kind,
        name=name,
        declaring_type=member.declaring_type,
        parameter_types=member.parameter_types,
        return_type=member.return_type,
        is_static=member.is_static,
    )


def build_model(data: Dict) -> Tuple[List[TypeModel], List[DocumentedMember]]:
    """
    Build type models and documented members from parsed model data.

    Documented members are also registered as members of their declaring
    type so they can be each other's equivalence targets.

    Raises:
        ModelLoadError: If data does not match MODEL_SCHEMA
    """
    try:
        jsonschema.validate(instance=data, schema=MODEL_SCHEMA)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ModelLoadError(f"Invalid member model at {location}: {e.message}") from e

    documented = [_documented(m) for m in data["members"]]

    declared: Dict[str, Dict] = {}
    for type_data in data.get("types", []):
        name = type_data["name"]
        declared[name] = {
            "supertypes": tuple(type_data.get("supertypes", [])),
            "members": [_element(m, name) for m in type_data.get("members", [])],
        }

    for member in documented:
        entry = declared.setdefault(member.declaring_type, {"supertypes": (), "members": []})
        element = _as_element(member)
        if all(e.identity != element.identity for e in entry["members"]):
            entry["members"].append(element)

    types = [
        TypeModel(name=name, supertypes=entry["supertypes"], members=tuple(entry["members"]))
        for name, entry in declared.items()
    ]
    logger.debug(f"Model: {len(types)} types, {len(documented)} documented members")
    return types, documented


def load_model(path: Path) -> Tuple[List[TypeModel], List[DocumentedMember]]:
    """
    Load a member-model file (.yaml, .yml or .json).

    Raises:
        ModelLoadError: If the file is missing, unparsable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ModelLoadError(f"Model file '{path}' not found")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ModelLoadError(f"Could not parse model file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ModelLoadError(f"Model file '{path}' must contain a mapping")

    types, members = build_model(data)
    logger.info(f"Loaded {len(members)} documented members from {path}")
    return types, members
