"""
Code model for documented members and their candidate targets.

These records describe Java-like members independently of how they were
discovered (source parsing, reflection, or a hand-written model file).
All of them are immutable.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


def erasure(type_name: str) -> str:
    """
    Reduce a type name to the form used for compatibility checks.

    Generic arguments and package qualifiers are dropped; array and varargs
    suffixes are kept.

    Examples:
        "java.util.List<java.lang.String>" -> "List"
        "java.lang.Object[]" -> "Object[]"
    """
    if not type_name:
        return ""
    # Strip nested generics from the innermost level outwards
    stripped = type_name.strip()
    while "<" in stripped:
        reduced = re.sub(r"<[^<>]*>", "", stripped)
        if reduced == stripped:
            break
        stripped = reduced
    suffix = ""
    match = re.search(r"((?:\[\])+|\.\.\.)$", stripped)
    if match:
        suffix = match.group(1)
        stripped = stripped[: match.start()]
    return stripped.rsplit(".", 1)[-1].rsplit("$", 1)[-1] + suffix


def simple_type_name(type_name: str) -> str:
    """Simple name of a (possibly qualified, possibly generic) type."""
    return erasure(type_name).rstrip(".[]")


class ElementKind(Enum):
    """Kinds of code elements eligible as equivalence targets."""
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    FIELD = "field"


@dataclass(frozen=True)
class Parameter:
    """A formal parameter of a documented member."""
    name: str
    type: str

    def to_dict(self) -> Dict:
        return {"name": self.name, "type": self.type}


@dataclass(frozen=True)
class FreeTextComment:
    """Raw natural-language text attached to a documented member."""
    text: str


@dataclass(frozen=True)
class DocumentedMember:
    """The executable being documented: a method or constructor."""
    declaring_type: str
    name: str
    parameters: Tuple[Parameter, ...] = ()
    return_type: Optional[str] = None     # None for constructors
    comment: FreeTextComment = field(default_factory=lambda: FreeTextComment(""))
    kind: ElementKind = ElementKind.METHOD
    is_static: bool = False

    @property
    def effective_return_type(self) -> str:
        """Constructors "return" an instance of their declaring type."""
        if self.kind == ElementKind.CONSTRUCTOR or not self.return_type:
            return self.declaring_type
        return self.return_type

    @property
    def parameter_types(self) -> Tuple[str, ...]:
        return tuple(p.type for p in self.parameters)

    def parameter(self, name: str) -> Optional[Parameter]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def signature(self) -> str:
        params = ", ".join(f"{p.type} {p.name}" for p in self.parameters)
        return f"{simple_type_name(self.declaring_type)}.{self.name}({params})"

    def to_dict(self) -> Dict:
        return {
            "declaring_type": self.declaring_type,
            "name": self.name,
            "kind": self.kind.value,
            "static": self.is_static,
            "parameters": [p.to_dict() for p in self.parameters],
            "return_type": self.return_type,
        }


@dataclass(frozen=True)
class CodeElement:
    """A candidate target member discovered on the declaring type or a supertype."""
    kind: ElementKind
    name: str
    declaring_type: str
    parameter_types: Tuple[str, ...] = ()
    return_type: Optional[str] = None
    is_static: bool = False

    @property
    def identity(self) -> Tuple:
        """Key used for de-duplication: two elements with equal identity are the same member."""
        return (
            self.kind,
            erasure(self.declaring_type),
            self.name,
            tuple(erasure(t) for t in self.parameter_types),
        )

    @property
    def override_key(self) -> Tuple:
        """Key under which a subtype declaration hides a supertype one."""
        return (self.kind, self.name, tuple(erasure(t) for t in self.parameter_types))

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    @property
    def is_varargs(self) -> bool:
        return bool(self.parameter_types) and self.parameter_types[-1].endswith("...")

    @property
    def effective_return_type(self) -> str:
        if self.kind == ElementKind.CONSTRUCTOR:
            return self.declaring_type
        return self.return_type or "void"

    def signature(self) -> str:
        if self.kind == ElementKind.FIELD:
            return f"{simple_type_name(self.declaring_type)}.{self.name}"
        params = ", ".join(self.parameter_types)
        return f"{simple_type_name(self.declaring_type)}.{self.name}({params})"

    def to_dict(self) -> Dict:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "declaring_type": self.declaring_type,
            "parameter_types": list(self.parameter_types),
            "return_type": self.return_type,
            "static": self.is_static,
        }


@dataclass(frozen=True)
class TypeModel:
    """A declared type: its supertypes (ordered) and its members."""
    name: str
    supertypes: Tuple[str, ...] = ()
    members: Tuple[CodeElement, ...] = ()

    @property
    def simple_name(self) -> str:
        return simple_type_name(self.name)
