"""
Oracle Validation

A synthesized oracle is only kept if a validator accepts it in the
documented member's context. Rejection is never fatal: the oracle is
discarded and the equivalence stays unresolved.

Validators:
- StructuralOracleValidator: toolchain-free checks on the expression tree
  (well-formedness, identifiers in scope, result/operand type agreement)
- JavacOracleValidator: compiles a generated Java stub with javac
"""

import re
import shutil
import subprocess
import tempfile
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from docoracle.config import BOXED_TYPES, get_config
from docoracle.exceptions import ValidatorUnavailableError
from docoracle.matching.type_compatibility import is_primitive, is_type_variable
from docoracle.models import DocumentedMember, erasure, simple_type_name
from docoracle.synthesis.expressions import Equality, Expression, FieldAccess, Guarded, Invocation, Negation

logger = logging.getLogger(__name__)


_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_KEYWORD_VALUES = {"this", "null", "true", "false"}


def unwrap(oracle: Expression):
    """Split an oracle into (guard, Equality body)."""
    if isinstance(oracle, Guarded):
        return oracle.guard, oracle.body
    return None, oracle


def operand_of(equality: Equality):
    """(target expression, negated) of an Equality's right-hand side."""
    operand = equality.operand
    if isinstance(operand, Negation):
        return operand.operand, True
    return operand, False


_RECEIVER = "__receiver"
_NOT_CALLS = {"if", "while", "for", "switch", "synchronized", "catch", "return", "new", "super", "this"}
_UNQUALIFIED_CALL = re.compile(r"(?<![\w$.])(?<!new )([a-z_$][\w$]*)(\s*\()")
_THIS = re.compile(r"(?<![\w$.])this\b")


def type_parameters(declaring_type: str) -> List[str]:
    """Top-level generic arguments of a type name: "Map<K, List<V>>" -> ["K", "List<V>"]."""
    if "<" not in declaring_type or not declaring_type.endswith(">"):
        return []
    inner = declaring_type[declaring_type.index("<") + 1:-1]
    arguments = []
    depth = 0
    start = 0
    for i, ch in enumerate(inner):
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        elif ch == "," and depth == 0:
            arguments.append(inner[start:i].strip())
            start = i + 1
    arguments.append(inner[start:].strip())
    return [a for a in arguments if a]


def qualify(text: str, receiver: str = _RECEIVER) -> str:
    """Route unqualified calls and 'this' in a Java snippet through receiver."""
    def call(match):
        if match.group(1) in _NOT_CALLS:
            return match.group(0)
        return f"{receiver}.{match.group(1)}{match.group(2)}"
    return _THIS.sub(receiver, _UNQUALIFIED_CALL.sub(call, text))


def _qualify_expression(expression: Expression, receiver: str) -> Expression:
    if isinstance(expression, Guarded):
        return replace(expression, guard=qualify(expression.guard, receiver),
                       body=_qualify_expression(expression.body, receiver))
    if isinstance(expression, Equality):
        return replace(expression, operand=_qualify_expression(expression.operand, receiver))
    if isinstance(expression, Negation):
        return replace(expression, operand=_qualify_expression(expression.operand, receiver))
    if isinstance(expression, Invocation):
        arguments = tuple(qualify(a, receiver) for a in expression.arguments)
        target = expression.target
        if target is None and not expression.constructor:
            target = receiver
        elif target == "this":
            target = receiver
        return replace(expression, arguments=arguments, target=target)
    if isinstance(expression, FieldAccess) and expression.target in (None, "this"):
        return replace(expression, target=receiver)
    return expression


def build_check_stub(member: DocumentedMember, oracle: Expression, guard: str = "",
                     result_placeholder: str = "RESULT", class_name: str = "DocOracleCheck") -> str:
    """
    Java source evaluating oracle for member.

    The stub lives in the declaring type's package and takes an instance of
    that type as a receiver parameter; unqualified member references are
    routed through it. Type variables of the declaring type become type
    parameters of the check method.
    """
    oracle_guard, body = unwrap(oracle)
    condition = qualify((guard or oracle_guard or "true").strip())
    body = _qualify_expression(body, _RECEIVER)

    arguments = type_parameters(member.declaring_type)
    variables = [a for a in arguments if is_type_variable(a.split()[0])]
    method_types = f"<{', '.join(variables)}> " if variables else ""
    receiver_args = ", ".join(a.split()[0] if a in variables else a for a in arguments)
    receiver_type = simple_type_name(member.declaring_type)
    if receiver_args:
        receiver_type += f"<{receiver_args}>"

    params = [f"{receiver_type} {_RECEIVER}", f"{member.effective_return_type} {result_placeholder}"]
    params += [f"{p.type.replace('...', '[]')} {p.name}" for p in member.parameters]

    package = ""
    qualified = member.declaring_type.split("<")[0]
    if "." in qualified:
        package = f"package {qualified.rsplit('.', 1)[0]};\n\n"

    return (
        f"{package}"
        f"class {class_name} {{\n"
        f"    @SuppressWarnings(\"unused\")\n"
        f"    static {method_types}void __check({', '.join(params)}) {{\n"
        f"        if ({condition}) {{\n"
        f"            boolean __oracle = {body.render()};\n"
        f"        }}\n"
        f"    }}\n"
        f"}}\n"
    )


class OracleValidator:
    """Interface for oracle validators"""

    def validate(self, member: DocumentedMember, oracle: Expression, guard: str = "") -> bool:
        """
        Check that oracle is well formed and type-correct for member.

        Args:
            member: Documented member providing parameters and result type
            oracle: Synthesized oracle (guarded or not)
            guard: Guard predicate text, "" when unconditional

        Returns:
            True if the oracle may be kept
        """
        raise NotImplementedError


class StructuralOracleValidator(OracleValidator):
    """
    Static validation without a compiler.

    Rejects an oracle when:
    - the expression tree reports structural problems
    - a bare identifier argument is neither a parameter nor a keyword value
    - the target returns void
    - a negated target is not boolean
    - a primitive result is compared with an incompatible target type
    """

    def validate(self, member: DocumentedMember, oracle: Expression, guard: str = "") -> bool:
        problems = self.problems(member, oracle, guard)
        for problem in problems:
            logger.debug(f"Oracle rejected ({member.name}): {problem}")
        return not problems

    def problems(self, member: DocumentedMember, oracle: Expression, guard: str = "") -> List[str]:
        problems = list(oracle.check())

        oracle_guard, body = unwrap(oracle)
        if guard and oracle_guard is not None and oracle_guard != guard.strip():
            problems.append("guard does not match the oracle")
        if not isinstance(body, Equality):
            problems.append(f"oracle body is {type(body).__name__}, expected Equality")
            return problems

        target, negated = operand_of(body)

        if isinstance(target, Invocation):
            for arg in target.arguments:
                arg = arg.strip()
                if _IDENTIFIER.match(arg) and arg not in _KEYWORD_VALUES and member.parameter(arg) is None:
                    problems.append(f"argument '{arg}' is not in scope")

        target_type = getattr(target, "type", None)
        if target_type is None:
            return problems

        target_type = erasure(target_type)
        result_type = erasure(member.effective_return_type)

        if target_type == "void":
            problems.append("target returns void")
            return problems

        if negated and target_type not in ("boolean", "Boolean"):
            problems.append(f"cannot negate a {target_type} value")

        if body.primitive:
            if not self._comparable(result_type, target_type):
                problems.append(f"cannot compare {result_type} result with {target_type}")

        return problems

    def _comparable(self, result_type: str, target_type: str) -> bool:
        # == between primitives: both boolean, or both numeric after unboxing
        unboxed = {boxed: primitive for primitive, boxed in BOXED_TYPES.items()}
        left = unboxed.get(result_type, result_type)
        right = unboxed.get(target_type, target_type)
        if not (is_primitive(left) and is_primitive(right)):
            return False
        if "boolean" in (left, right):
            return left == right
        return True


class JavacOracleValidator(OracleValidator):
    """
    Validate by compiling a Java stub that evaluates the oracle.

    The stub (see build_check_stub) takes the declaring type as a receiver
    parameter, so final types, generic types and types without a no-arg
    constructor all compile. The declaring type must be on the classpath.
    """

    STUB_CLASS = "DocOracleCheck"

    def __init__(self, classpath: Optional[str] = None, javac_path: Optional[str] = None,
                 timeout_seconds: Optional[int] = None, config: Optional[dict] = None):
        settings = (config or get_config())["validation"]
        self.javac = shutil.which(javac_path or settings["javac_path"])
        if self.javac is None:
            raise ValidatorUnavailableError(
                f"javac not found (looked for '{javac_path or settings['javac_path']}')"
            )
        self.classpath = classpath
        self.timeout_seconds = timeout_seconds or settings["timeout_seconds"]
        self.result_placeholder = (config or get_config())["return_value"]

    def build_stub(self, member: DocumentedMember, oracle: Expression, guard: str = "") -> str:
        return build_check_stub(member, oracle, guard, self.result_placeholder, self.STUB_CLASS)

    def validate(self, member: DocumentedMember, oracle: Expression, guard: str = "") -> bool:
        source = self.build_stub(member, oracle, guard)

        with tempfile.TemporaryDirectory(prefix="docoracle-") as workdir:
            stub_path = Path(workdir) / f"{self.STUB_CLASS}.java"
            stub_path.write_text(source, encoding="utf-8")

            cmd = [self.javac, "-d", workdir, "-proc:none"]
            if self.classpath:
                cmd += ["-cp", self.classpath]
            cmd.append(str(stub_path))

            try:
                result = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout_seconds,
                )
            except subprocess.TimeoutExpired:
                logger.warning(f"javac timed out after {self.timeout_seconds}s validating {member.signature()}")
                return False

        if result.returncode != 0:
            logger.debug(f"javac rejected oracle '{oracle.render()}':\n{result.stderr}")
            return False
        return True


def get_validator(name: Optional[str] = None, classpath: Optional[str] = None,
                  config: Optional[dict] = None) -> OracleValidator:
    """Build the validator named in validation.validator (or name)."""
    config = config or get_config()
    name = name or config["validation"]["validator"]
    if name == "structural":
        return StructuralOracleValidator()
    if name == "javac":
        return JavacOracleValidator(classpath=classpath, config=config)
    raise ValueError(f"Unknown validator '{name}'. Choose from: structural, javac")
