"""Tests for oracle validation"""

import shutil
import subprocess

import pytest

from conftest import LIST, documented
from docoracle.exceptions import ValidatorUnavailableError
from docoracle.synthesis.expressions import Equality, FieldAccess, Guarded, Invocation, Negation
from docoracle.synthesis.validation import (
    JavacOracleValidator,
    StructuralOracleValidator,
    build_check_stub,
    qualify,
    type_parameters,
    get_validator,
)


class TestStructuralOracleValidator:
    """Toolchain-free acceptance and rejection"""

    def setup_method(self):
        self.validator = StructuralOracleValidator()

    def test_accepts_matching_boolean(self):
        oracle = Equality("RESULT", Invocation("isEmpty", type="boolean"), True)
        assert self.validator.validate(documented("empty"), oracle)

    def test_accepts_guarded_oracle(self):
        oracle = Guarded("guardPredicate", Equality("RESULT", Invocation("isEmpty", type="boolean"), True))
        assert self.validator.validate(documented("empty"), oracle, "guardPredicate")

    def test_rejects_boolean_compared_with_int(self):
        """A boolean member said to be equivalent to size() is rejected."""
        oracle = Equality("RESULT", Invocation("size", type="int"), True)
        problems = self.validator.problems(documented("isBlank"), oracle)
        assert problems == ["cannot compare boolean result with int"]

    def test_accepts_numeric_with_boxing(self):
        oracle = Equality("RESULT", Invocation("count", type="Integer"), True)
        assert self.validator.validate(documented("length", returns="int"), oracle)

    def test_rejects_void_target(self):
        oracle = Equality("RESULT", Invocation("clear", type="void"), True)
        assert not self.validator.validate(documented("reset"), oracle)

    def test_rejects_negated_non_boolean(self):
        oracle = Equality("RESULT", Negation(Invocation("size", type="int")), True)
        assert "cannot negate a int value" in self.validator.problems(documented("x", returns="int"), oracle)

    def test_rejects_argument_out_of_scope(self):
        oracle = Equality("RESULT", Invocation("get", ("idx",), type="Object"), False)
        assert not self.validator.validate(documented("first", returns="Object"), oracle)

    def test_accepts_parameter_and_literal_arguments(self):
        oracle = Equality("RESULT", Invocation("indexOf", ("o", "0", "null"), type="int"), True)
        member = documented("find", params=[("o", "Object")], returns="int")
        assert self.validator.validate(member, oracle)

    def test_rejects_mismatched_guard(self):
        oracle = Guarded("a", Equality("RESULT", Invocation("isEmpty", type="boolean"), True))
        assert not self.validator.validate(documented("empty"), oracle, "b")

    def test_rejects_malformed_tree(self):
        oracle = Equality("RESULT", Negation(Negation(Invocation("isEmpty", type="boolean"))), True)
        assert not self.validator.validate(documented("empty"), oracle)

    def test_untyped_target_is_only_checked_structurally(self):
        oracle = Equality("RESULT", FieldAccess("count"), True)
        assert self.validator.validate(documented("x", returns="int"), oracle)

    def test_reference_result_is_not_type_checked(self):
        oracle = Equality("RESULT", Invocation("clone", type="Object"), False)
        assert self.validator.validate(documented("copy", returns=LIST), oracle)


class TestGetValidator:

    def test_default_is_structural(self):
        assert isinstance(get_validator(), StructuralOracleValidator)

    def test_unknown_validator(self):
        with pytest.raises(ValueError):
            get_validator("runtime")

    def test_missing_javac_raises(self):
        with pytest.raises(ValidatorUnavailableError):
            JavacOracleValidator(javac_path="docoracle-no-such-javac")


class TestCheckStub:
    """Java source generated for compilation-based validation"""

    def test_stub_declares_receiver_result_and_parameters(self):
        member = documented("contains", params=[("o", "Object")], owner="Counter")
        oracle = Equality("RESULT", Invocation("isEmpty"), True)

        stub = build_check_stub(member, oracle, "o != null")

        assert "extends" not in stub
        assert "static void __check(Counter __receiver, boolean RESULT, Object o)" in stub
        assert "if (o != null)" in stub
        assert "boolean __oracle = RESULT==__receiver.isEmpty();" in stub

    def test_package_of_declaring_type(self):
        member = documented("empty", owner=LIST)
        stub = build_check_stub(member, Equality("RESULT", Invocation("isEmpty"), True))
        assert stub.startswith("package com.example;\n")
        assert "SimpleList __receiver" in stub

    def test_type_variables_become_method_type_parameters(self):
        member = documented("peek", returns="E", owner="com.example.Box<E>")
        stub = build_check_stub(member, Equality("RESULT", Invocation("get"), False))
        assert "static <E> void __check(Box<E> __receiver, E RESULT)" in stub
        assert "RESULT.equals(__receiver.get())" in stub

    def test_bounded_and_concrete_type_arguments(self):
        assert type_parameters("Map<K extends Comparable<K>, List<V>>") == ["K extends Comparable<K>", "List<V>"]
        assert type_parameters("Cache<Map<A, B>, V>") == ["Map<A, B>", "V"]
        assert type_parameters("Counter") == []
        member = documented("x", owner="Table<K extends Comparable<K>, String>")
        stub = build_check_stub(member, Equality("RESULT", Invocation("isEmpty"), True))
        assert "static <K extends Comparable<K>> void __check(Table<K, String> __receiver" in stub

    def test_guard_and_arguments_are_qualified(self):
        member = documented("x", params=[("o", "Object")], owner="Counter")
        oracle = Guarded("!isEmpty() && this.size() > 0",
                         Equality("RESULT", Invocation("contains", ("o",)), True))
        stub = build_check_stub(member, oracle)
        assert "if (!__receiver.isEmpty() && __receiver.size() > 0)" in stub
        assert "RESULT==__receiver.contains(o)" in stub

    def test_explicit_targets_are_kept(self):
        oracle = Equality("RESULT", Negation(Invocation("isEmpty", target="other")), True)
        stub = build_check_stub(documented("x", owner="Counter"), oracle)
        assert "RESULT==!other.isEmpty()" in stub

    def test_field_access_goes_through_receiver(self):
        stub = build_check_stub(documented("x", returns="int", owner="Counter"),
                                Equality("RESULT", FieldAccess("count"), True))
        assert "RESULT==__receiver.count" in stub

    def test_qualify_leaves_keywords_and_members_alone(self):
        assert qualify("o != null && o.hashCode() == 0") == "o != null && o.hashCode() == 0"
        assert qualify("new Box(size())") == "new Box(__receiver.size())"
        assert qualify("this == o") == "__receiver == o"


@pytest.mark.skipif(shutil.which("javac") is None, reason="javac not installed")
class TestJavacOracleValidator:
    """Compilation-based validation against real classes"""

    SOURCES = {
        "Counter": (
            "public class Counter {\n"
            "    public int size() { return 0; }\n"
            "    public boolean isEmpty() { return true; }\n"
            "}\n"
        ),
        "Box": (
            "public class Box<E> {\n"
            "    public Box(int capacity) { }\n"
            "    public E get() { return null; }\n"
            "}\n"
        ),
        "Sealed": (
            "public final class Sealed {\n"
            "    private Sealed() { }\n"
            "    public boolean isOpen() { return false; }\n"
            "}\n"
        ),
    }

    @pytest.fixture
    def classpath(self, tmp_path):
        sources = []
        for name, text in self.SOURCES.items():
            path = tmp_path / f"{name}.java"
            path.write_text(text)
            sources.append(str(path))
        subprocess.run(["javac", "-d", str(tmp_path)] + sources, check=True, timeout=120)
        return str(tmp_path)

    def test_accepts_compilable_oracle(self, classpath):
        validator = JavacOracleValidator(classpath=classpath)
        member = documented("empty", owner="Counter")
        assert validator.validate(member, Equality("RESULT", Invocation("isEmpty"), True))

    def test_accepts_guarded_oracle(self, classpath):
        validator = JavacOracleValidator(classpath=classpath)
        member = documented("contains", params=[("o", "Object")], owner="Counter")
        oracle = Guarded("o != null", Equality("RESULT", Invocation("isEmpty"), True))
        assert validator.validate(member, oracle)

    def test_rejects_type_error(self, classpath):
        validator = JavacOracleValidator(classpath=classpath)
        member = documented("empty", owner="Counter")
        assert not validator.validate(member, Equality("RESULT", Invocation("size"), True))

    def test_generic_type_without_default_constructor(self, classpath):
        validator = JavacOracleValidator(classpath=classpath)
        member = documented("peek", returns="E", owner="Box<E>")
        assert validator.validate(member, Equality("RESULT", Invocation("get"), False))

    def test_final_type(self, classpath):
        validator = JavacOracleValidator(classpath=classpath)
        member = documented("isClosed", owner="Sealed")
        assert validator.validate(member, Equality("RESULT", Negation(Invocation("isOpen")), True))
