"""
Overload Resolver ("reverse best-args-type match")

Among candidates sharing the referenced name, pick the one whose parameter
types best fit the arguments implied by the comment.

Scoring (lower is better, total order):
1. Exact parameter type             -> 0
2. Widening / boxing / subtyping    -> number of conversion steps
3. Unknown argument type            -> fixed cost
4. Arity mismatch                   -> disqualified
Ties go to the candidate declared first. A candidate whose total exceeds
max_total_cost is not a match.

A reference written as a signature ("{@link #get(int)}") names parameter
types, not arguments: the types select the overload and the documented
member's own parameters are bound in their place.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import re
import logging

from docoracle.config import get_config
from docoracle.extraction.equivalence_detector import EquivalenceMatch
from docoracle.matching.type_compatibility import NULL_TYPE, UNKNOWN_TYPE, TypeCompatibility, is_primitive
from docoracle.models import CodeElement, DocumentedMember, ElementKind, erasure, simple_type_name
from docoracle.synthesis.expressions import Expression, FieldAccess, Invocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Match:
    """The resolver's chosen candidate and how to invoke it."""
    element: CodeElement
    expression: Expression
    arguments: Tuple[str, ...]
    cost: int

    @property
    def base_expression(self) -> str:
        return self.expression.render()


@dataclass(frozen=True)
class Argument:
    """An argument text and its inferred static type."""
    text: str
    type: str


_INT = re.compile(r"^[-+]?(?:0[xX][0-9a-fA-F_]+|\d[\d_]*)$")
_LONG = re.compile(r"^[-+]?(?:0[xX][0-9a-fA-F_]+|\d[\d_]*)[lL]$")
_FLOAT = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?[fF]$")
_DOUBLE = re.compile(r"^[-+]?(?:\d+\.\d*|\.\d+|\d+[eE][-+]?\d+)(?:[eE][-+]?\d+)?[dD]?$|^[-+]?\d+[dD]$")
_CHAR = re.compile(r"^'(?:[^'\\]|\\.)'$")
_STRING = re.compile(r'^"(?:[^"\\]|\\.)*"$')
_NEW = re.compile(r"^new\s+([\w$.]+)")


def infer_argument_type(text: str, member: DocumentedMember) -> str:
    """
    Static type of an argument expression written in a comment.

    Parameter names take their declared type; literals their literal type;
    anything else is unknown ("?").
    """
    text = text.strip()
    param = member.parameter(text)
    if param is not None:
        return param.type
    if text == "this":
        return member.declaring_type
    if text == "null":
        return NULL_TYPE
    if text in ("true", "false"):
        return "boolean"
    if _LONG.match(text):
        return "long"
    if _INT.match(text):
        return "int"
    if _FLOAT.match(text):
        return "float"
    if _DOUBLE.match(text):
        return "double"
    if _CHAR.match(text):
        return "char"
    if _STRING.match(text):
        return "String"
    new = _NEW.match(text)
    if new:
        return new.group(1)
    return UNKNOWN_TYPE


_TYPE_NAME = re.compile(
    r"^(?:[a-z_$][\w$]*\.)*(?P<simple>[A-Z][\w$]*)(?:<.*>)?(?:\[\]|\.\.\.)*$"
)


def is_type_name(text: str) -> bool:
    """
    True for texts that read as a parameter type rather than an argument.

    Examples: int, long[], Object, java.util.List<E>, String...
    ALL_CAPS names are constants, not types (single letters are type variables).
    """
    text = text.strip()
    if is_primitive(re.sub(r"(?:\[\]|\.\.\.)+$", "", text)):
        return True
    match = _TYPE_NAME.match(text)
    if not match:
        return False
    simple = match.group("simple")
    return len(simple) == 1 or not simple.isupper()


def written_signature(equivalence: EquivalenceMatch, member: DocumentedMember) -> Optional[Tuple[str, ...]]:
    """
    Parameter types of a reference written as a signature, e.g. "get(int)".

    Returns None when the reference carries argument expressions instead:
    any parameter name, literal, or non-type text among the arguments.
    """
    written = equivalence.arguments
    if not written:
        return None
    for text in written:
        if infer_argument_type(text, member) != UNKNOWN_TYPE or not is_type_name(text):
            return None
    return tuple(text.strip() for text in written)


def _as_array(type_name: str) -> str:
    return type_name.replace("...", "[]")


class OverloadResolver:
    """
    Pick the best-fitting overload for an equivalence reference.

    Usage:
        resolver = OverloadResolver(TypeCompatibility())
        match = resolver.resolve(equivalence, member, candidates)
    """

    def __init__(self, compatibility: Optional[TypeCompatibility] = None, config: Optional[dict] = None):
        config = config or get_config()
        settings = config["overload_resolution"]
        self.unknown_cost = settings["unknown_argument_cost"]
        self.varargs_cost = settings["varargs_cost"]
        self.max_total_cost = settings["max_total_cost"]
        self.compatibility = compatibility or TypeCompatibility(null_cost=settings["null_argument_cost"])

    def resolve(
        self,
        equivalence: EquivalenceMatch,
        member: DocumentedMember,
        candidates: Sequence[CodeElement],
    ) -> Optional[Match]:
        """
        Select the single best candidate.

        Args:
            equivalence: Detected equivalence (argument texts, qualifier)
            member: The documented member (its parameters type the arguments)
            candidates: Name-matching candidates in declaration order

        Returns:
            Best Match, or None if no candidate is compatible enough
        """
        scored: List[Tuple[int, int, CodeElement, Tuple[Argument, ...]]] = []
        written_types = written_signature(equivalence, member)

        for index, candidate in enumerate(candidates):
            if written_types is not None:
                signature_match = self._match_signature(written_types, member, candidate)
                if signature_match is None:
                    logger.debug(f"  {candidate.signature()}: does not fit written signature")
                    continue
                arguments, cost = signature_match
            else:
                arguments = self._bind_arguments(equivalence, member, candidate)
                if arguments is None:
                    logger.debug(f"  {candidate.signature()}: arity mismatch, disqualified")
                    continue
                cost = self._score(candidate, arguments)
                if cost is None:
                    logger.debug(f"  {candidate.signature()}: incompatible argument types")
                    continue
            logger.debug(f"  {candidate.signature()}: cost {cost}")
            if cost <= self.max_total_cost:
                scored.append((cost, index, candidate, arguments))

        if not scored:
            return None

        cost, _, best, arguments = min(scored, key=lambda item: (item[0], item[1]))
        expression = self._base_expression(equivalence, member, best, arguments)
        logger.debug(f"Resolved '{equivalence.signature}' to {best.signature()} (cost {cost})")
        return Match(
            element=best,
            expression=expression,
            arguments=tuple(a.text for a in arguments),
            cost=cost,
        )

    def _match_signature(
        self,
        written_types: Tuple[str, ...],
        member: DocumentedMember,
        candidate: CodeElement,
    ) -> Optional[Tuple[Tuple[Argument, ...], int]]:
        """
        Fit a reference written as a signature ("get(int)") to candidate.

        The written types must match the candidate's parameter types; the
        documented member's parameters are then bound to those positions by
        type, closest conversion first.
        """
        if candidate.kind == ElementKind.FIELD:
            return None
        params = tuple(_as_array(t) for t in candidate.parameter_types)
        if len(written_types) != len(params):
            return None

        total = 0
        for written, param in zip(written_types, params):
            step = self.compatibility.distance(_as_array(written), param)
            if step is None:
                return None
            total += step

        available = list(member.parameters)
        arguments = []
        for param in params:
            best = None
            for own in available:
                step = self.compatibility.distance(_as_array(own.type), param)
                if step is not None and (best is None or step < best[0]):
                    best = (step, own)
            if best is None:
                return None
            total += best[0]
            available.remove(best[1])
            arguments.append(Argument(best[1].name, best[1].type))

        return tuple(arguments), total

    def _bind_arguments(
        self,
        equivalence: EquivalenceMatch,
        member: DocumentedMember,
        candidate: CodeElement,
    ) -> Optional[Tuple[Argument, ...]]:
        if candidate.kind == ElementKind.FIELD:
            # A field referenced with parentheses is a call, not a field
            return () if equivalence.arguments is None else None

        if equivalence.arguments is not None:
            arguments = tuple(
                Argument(text, infer_argument_type(text, member)) for text in equivalence.arguments
            )
        elif candidate.arity == 0:
            arguments = ()
        else:
            # No arguments written: reuse the documented member's own parameters
            arguments = tuple(Argument(p.name, p.type) for p in member.parameters)

        if not self._arity_fits(candidate, len(arguments)):
            return None
        return arguments

    def _arity_fits(self, candidate: CodeElement, count: int) -> bool:
        if candidate.is_varargs:
            return count >= candidate.arity - 1
        return count == candidate.arity

    def _score(self, candidate: CodeElement, arguments: Tuple[Argument, ...]) -> Optional[int]:
        params = candidate.parameter_types
        fixed = params[:-1] if candidate.is_varargs else params
        total = 0

        for argument, param in zip(arguments, fixed):
            step = self._argument_cost(argument, param)
            if step is None:
                return None
            total += step

        if candidate.is_varargs:
            element_type = params[-1][:-3]
            rest = arguments[len(fixed):]
            # A single array argument is passed as the varargs array itself
            if len(rest) == 1 and erasure(rest[0].type) == erasure(element_type) + "[]":
                return total
            for argument in rest:
                step = self._argument_cost(argument, element_type)
                if step is None:
                    return None
                total += step
            total += self.varargs_cost

        return total

    def _argument_cost(self, argument: Argument, param_type: str) -> Optional[int]:
        if argument.type == UNKNOWN_TYPE:
            return self.unknown_cost
        return self.compatibility.distance(argument.type, param_type)

    def _base_expression(
        self,
        equivalence: EquivalenceMatch,
        member: DocumentedMember,
        element: CodeElement,
        arguments: Tuple[Argument, ...],
    ) -> Expression:
        texts = tuple(a.text for a in arguments)
        own_type = simple_type_name(member.declaring_type)
        element_type = simple_type_name(element.declaring_type)

        if element.kind == ElementKind.CONSTRUCTOR:
            return Invocation(element_type, texts, constructor=True, type=element.declaring_type)

        target = None
        if element.is_static:
            if element_type != own_type:
                target = element_type
        elif equivalence.qualifier and member.parameter(equivalence.qualifier) is not None:
            target = equivalence.qualifier

        if element.kind == ElementKind.FIELD:
            return FieldAccess(element.name, target, type=element.return_type)
        return Invocation(element.name, texts, target, type=element.return_type)
