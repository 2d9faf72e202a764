"""
docoracle - Equivalence oracles from free-text documentation

Turns natural-language comments such as "Equivalent to isEmpty()" or
"Returns the same as size(), if the list is not null" into boolean
expressions over the documented member's return value.
"""

from .models import CodeElement, DocumentedMember, ElementKind, FreeTextComment, Parameter, TypeModel
from .extraction.equivalence_detector import EquivalenceDetector, EquivalenceMatch
from .translation.free_text_translator import FreeTextTranslator, translate_members

__version__ = "0.3.0"

__all__ = [
    "CodeElement",
    "DocumentedMember",
    "ElementKind",
    "FreeTextComment",
    "Parameter",
    "TypeModel",
    "EquivalenceDetector",
    "EquivalenceMatch",
    "FreeTextTranslator",
    "translate_members",
]
