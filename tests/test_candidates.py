"""Tests for candidate enumeration over a type model"""

import pytest

from conftest import COLLECTION, LIST, documented, method
from docoracle.exceptions import CandidateEnumerationError
from docoracle.matching.candidates import ModelCandidateEnumerator
from docoracle.models import CodeElement, ElementKind, TypeModel


class TestModelCandidateEnumerator:
    """Hierarchy walk, shadowing and de-duplication"""

    def test_declaring_type_comes_first(self, enumerator):
        candidates = enumerator.enumerate(LIST, documented("isEmptyList"))
        owners = [c.declaring_type for c in candidates]

        first_inherited = owners.index(COLLECTION)
        assert all(o == LIST for o in owners[:first_inherited])
        assert all(o == COLLECTION for o in owners[first_inherited:])
        assert any(c.name == "containsAll" for c in candidates)

    def test_subtype_declaration_hides_supertype(self, enumerator):
        """isEmpty() is redeclared in SimpleList, so the supertype one is hidden."""
        candidates = enumerator.enumerate(LIST, documented("isEmptyList"))
        is_empty = [c for c in candidates if c.name == "isEmpty"]

        assert len(is_empty) == 1
        assert is_empty[0].declaring_type == LIST

    def test_member_is_not_its_own_candidate(self, enumerator):
        member = documented("size", returns="int")
        candidates = enumerator.enumerate(LIST, member)
        assert all(c.name != "size" for c in candidates)

    def test_overloads_are_all_kept(self, enumerator):
        candidates = enumerator.enumerate(LIST, documented("isEmptyList"))
        assert [c.parameter_types for c in candidates if c.name == "indexOf"] == [
            ("Object",),
            ("Object", "int"),
        ]

    def test_constructors_are_not_inherited(self):
        types = [
            TypeModel(name="Child", supertypes=("Parent",), members=(method("run", owner="Child"),)),
            TypeModel(name="Parent", members=(
                CodeElement(kind=ElementKind.CONSTRUCTOR, name="Parent", declaring_type="Parent"),
            )),
        ]
        candidates = ModelCandidateEnumerator(types).enumerate("Child", documented("go", owner="Child"))
        assert [c.name for c in candidates] == ["run"]

    def test_repeated_supertype_is_visited_once(self, list_types):
        types = [
            TypeModel(name="Twice", supertypes=(COLLECTION, COLLECTION)),
            list_types[1],
        ]
        candidates = ModelCandidateEnumerator(types).enumerate("Twice", documented("x", owner="Twice"))
        names = [c.name for c in candidates]
        assert len(names) == len(set(names))

    def test_simple_name_lookup(self, enumerator):
        candidates = enumerator.enumerate("SimpleList", documented("isEmptyList"))
        assert candidates

    def test_enumeration_is_deterministic(self, enumerator):
        member = documented("isEmptyList")
        assert enumerator.enumerate(LIST, member) == enumerator.enumerate(LIST, member)

    def test_unknown_type_raises(self, enumerator):
        with pytest.raises(CandidateEnumerationError):
            enumerator.enumerate("com.example.Missing", documented("x", owner="com.example.Missing"))

    def test_supertype_edges(self, enumerator):
        assert ("SimpleList", "AbstractCollection") in enumerator.supertype_edges()
