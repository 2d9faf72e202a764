"""Tests for the oracle expression model and synthesizer"""

from conftest import LIST, documented, method
from docoracle.config import get_config
from docoracle.matching.overload_resolver import Match
from docoracle.models import DocumentedMember, ElementKind
from docoracle.synthesis.expressions import (
    Equality,
    FieldAccess,
    Guarded,
    Invocation,
    Negation,
    balanced,
)
from docoracle.synthesis.synthesizer import OracleSynthesizer


def match_for(expression):
    return Match(element=method(expression.name), expression=expression, arguments=(), cost=0)


class TestExpressions:
    """Rendering and structural checks"""

    def test_invocation_render(self):
        assert Invocation("indexOf", ("o", "0")).render() == "indexOf(o, 0)"
        assert Invocation("size", target="other").render() == "other.size()"
        assert Invocation("SimpleList", ("3",), constructor=True).render() == "new SimpleList(3)"

    def test_field_render(self):
        assert FieldAccess("count").render() == "count"
        assert str(FieldAccess("length", "values")) == "values.length"

    def test_equality_render(self):
        assert Equality("RESULT", Invocation("isEmpty"), True).render() == "RESULT==isEmpty()"
        assert Equality("RESULT", Invocation("clone"), False).render() == "RESULT.equals(clone())"

    def test_guarded_render(self):
        oracle = Guarded("x != null", Equality("RESULT", Negation(Invocation("isEmpty")), True))
        assert oracle.render() == "if (x != null) {RESULT==!isEmpty()}"

    def test_type_is_not_rendered_or_compared(self):
        assert Invocation("size", type="int") == Invocation("size", type="long")

    def test_well_formed_tree_has_no_problems(self):
        oracle = Guarded("isEmpty()", Equality("RESULT", Invocation("isEmpty"), True))
        assert oracle.check() == []

    def test_problems_are_reported(self):
        assert Negation(Negation(Invocation("isEmpty"))).check() == ["double negation"]
        assert Invocation("bad name").check()
        assert Invocation("get", ("f(x",)).check()
        assert Guarded(" ", Equality("RESULT", Invocation("a"), True)).check() == ["empty guard"]

    def test_balanced(self):
        assert balanced("f(a[0], \")\")")
        assert not balanced("f(a")
        assert not balanced("f(a])")


class TestOracleSynthesizer:
    """RESULT comparisons, negation marker and guard wrapping"""

    def setup_method(self):
        self.synthesizer = OracleSynthesizer()

    def test_primitive_result_uses_double_equals(self):
        oracle = self.synthesizer.synthesize(documented("empty"), match_for(Invocation("isEmpty")))
        assert oracle.render() == "RESULT==isEmpty()"

    def test_reference_result_uses_equals(self):
        member = documented("copy", returns=LIST)
        oracle = self.synthesizer.synthesize(member, match_for(Invocation("clone")))
        assert oracle.render() == "RESULT.equals(clone())"

    def test_negated(self):
        oracle = self.synthesizer.synthesize(documented("full"), match_for(Invocation("isEmpty")), negated=True)
        assert oracle.render() == "RESULT==!isEmpty()"

    def test_guard_wraps_oracle(self):
        oracle = self.synthesizer.synthesize(
            documented("empty"), match_for(Invocation("isEmpty")), guard="guardPredicate"
        )
        assert oracle.render() == "if (guardPredicate) {RESULT==isEmpty()}"

    def test_blank_guard_is_unconditional(self):
        oracle = self.synthesizer.synthesize(documented("empty"), match_for(Invocation("isEmpty")), guard="  ")
        assert oracle.render() == "RESULT==isEmpty()"

    def test_constructor_result_is_a_reference(self):
        member = DocumentedMember(declaring_type=LIST, name="SimpleList", kind=ElementKind.CONSTRUCTOR)
        assert not self.synthesizer.is_primitive_result(member)

    def test_result_placeholder_is_configurable(self):
        config = get_config()
        config["return_value"] = "result"
        oracle = OracleSynthesizer(config).synthesize(documented("empty"), match_for(Invocation("isEmpty")))
        assert oracle.render() == "result==isEmpty()"
