"""
Tagged expression model for oracles.

Oracles are built as small trees (operator + operands) and rendered to
Java-like text only at the end, so structural mistakes are caught before
anything reaches a compiler.

    Guarded("x != null", Equality("RESULT", Negation(Invocation("isEmpty")), primitive=True))
        .render()  ->  'if (x != null) {RESULT==!isEmpty()}'
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_QUALIFIED = re.compile(r"^[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*$")


def balanced(text: str) -> bool:
    """True if (), [] and {} nest properly outside string/char literals."""
    pairs = {")": "(", "]": "[", "}": "{"}
    stack = []
    quote = None
    escaped = False
    for ch in text:
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch in "([{":
            stack.append(ch)
        elif ch in pairs:
            if not stack or stack.pop() != pairs[ch]:
                return False
    return not stack and quote is None


class Expression:
    """Base class of oracle expression nodes"""

    def render(self) -> str:
        raise NotImplementedError

    def check(self) -> List[str]:
        """Structural problems of this subtree; empty when well formed."""
        raise NotImplementedError

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class Invocation(Expression):
    """Method or constructor call: target.name(args) / new name(args)"""
    name: str
    arguments: Tuple[str, ...] = ()
    target: Optional[str] = None
    constructor: bool = False
    type: Optional[str] = field(default=None, compare=False)   # static type, not rendered

    def render(self) -> str:
        args = ", ".join(self.arguments)
        if self.constructor:
            return f"new {self.name}({args})"
        prefix = f"{self.target}." if self.target else ""
        return f"{prefix}{self.name}({args})"

    def check(self) -> List[str]:
        problems = []
        if not _IDENTIFIER.match(self.name or ""):
            problems.append(f"invalid member name {self.name!r}")
        if self.target is not None and not _QUALIFIED.match(self.target):
            problems.append(f"invalid invocation target {self.target!r}")
        for arg in self.arguments:
            if not arg.strip():
                problems.append("empty argument")
            elif not balanced(arg):
                problems.append(f"unbalanced argument {arg!r}")
        return problems


@dataclass(frozen=True)
class FieldAccess(Expression):
    """Field read: target.name"""
    name: str
    target: Optional[str] = None
    type: Optional[str] = field(default=None, compare=False)

    def render(self) -> str:
        prefix = f"{self.target}." if self.target else ""
        return f"{prefix}{self.name}"

    def check(self) -> List[str]:
        problems = []
        if not _IDENTIFIER.match(self.name or ""):
            problems.append(f"invalid field name {self.name!r}")
        if self.target is not None and not _QUALIFIED.match(self.target):
            problems.append(f"invalid field target {self.target!r}")
        return problems


@dataclass(frozen=True)
class Negation(Expression):
    """Logical not"""
    operand: Expression

    def render(self) -> str:
        return f"!{self.operand.render()}"

    def check(self) -> List[str]:
        if isinstance(self.operand, Negation):
            return ["double negation"]
        return self.operand.check()


@dataclass(frozen=True)
class Equality(Expression):
    """
    Comparison of the documented member's result with another expression.

    Primitive results use ==, everything else .equals(...).
    """
    result: str
    operand: Expression
    primitive: bool

    def render(self) -> str:
        if self.primitive:
            return f"{self.result}=={self.operand.render()}"
        return f"{self.result}.equals({self.operand.render()})"

    def check(self) -> List[str]:
        problems = []
        if not _IDENTIFIER.match(self.result or ""):
            problems.append(f"invalid result placeholder {self.result!r}")
        return problems + self.operand.check()


@dataclass(frozen=True)
class Guarded(Expression):
    """Oracle that only applies when guard holds: if (guard) {body}"""
    guard: str
    body: Expression

    def render(self) -> str:
        return f"if ({self.guard}) {{{self.body.render()}}}"

    def check(self) -> List[str]:
        problems = []
        if not self.guard or not self.guard.strip():
            problems.append("empty guard")
        elif not balanced(self.guard):
            problems.append(f"unbalanced guard {self.guard!r}")
        return problems + self.body.check()
