"""Shared fixtures: a small list type hierarchy and documented members"""

import pytest

from docoracle.config import reset_config
from docoracle.matching.candidates import ModelCandidateEnumerator
from docoracle.models import (
    CodeElement,
    DocumentedMember,
    ElementKind,
    FreeTextComment,
    Parameter,
    TypeModel,
)

LIST = "com.example.SimpleList"
COLLECTION = "com.example.AbstractCollection"


def method(name, params=(), returns="void", owner=LIST, static=False):
    return CodeElement(
        kind=ElementKind.METHOD,
        name=name,
        declaring_type=owner,
        parameter_types=tuple(params),
        return_type=returns,
        is_static=static,
    )


def documented(name, comment="", params=(), returns="boolean", owner=LIST):
    return DocumentedMember(
        declaring_type=owner,
        name=name,
        parameters=tuple(Parameter(n, t) for n, t in params),
        return_type=returns,
        comment=FreeTextComment(comment),
    )


@pytest.fixture(autouse=True)
def default_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def list_types():
    simple_list = TypeModel(
        name=LIST,
        supertypes=(COLLECTION,),
        members=(
            method("isEmpty", returns="boolean"),
            method("size", returns="int"),
            method("get", ["int"], returns="Object"),
            method("indexOf", ["Object"], returns="int"),
            method("indexOf", ["Object", "int"], returns="int"),
            method("contains", ["Object"], returns="boolean"),
            method("add", ["Object"], returns="boolean"),
            method("clear"),
            method("clone", returns="Object"),
            method("valueOf", ["int"], returns=LIST, static=True),
            CodeElement(kind=ElementKind.FIELD, name="count", declaring_type=LIST, return_type="int"),
            CodeElement(kind=ElementKind.CONSTRUCTOR, name="SimpleList", declaring_type=LIST,
                        parameter_types=("int",)),
        ),
    )
    collection = TypeModel(
        name=COLLECTION,
        members=(
            method("isEmpty", returns="boolean", owner=COLLECTION),
            method("containsAll", ["Collection"], returns="boolean", owner=COLLECTION),
            method("emptyCollection", returns=COLLECTION, owner=COLLECTION, static=True),
        ),
    )
    return [simple_list, collection]


@pytest.fixture
def enumerator(list_types):
    return ModelCandidateEnumerator(list_types)
