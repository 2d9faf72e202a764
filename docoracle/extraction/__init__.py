"""Sentence-level extraction: segmentation, equivalence detection, guard clauses"""

from .sentences import split_sentences
from .equivalence_detector import EquivalenceDetector, EquivalenceMatch, normalize_sentence
from .condition_extractor import (
    ConditionExtractor,
    CommaConditionExtractor,
    SentenceEndConditionExtractor,
    get_condition_extractor,
)

__all__ = [
    "split_sentences",
    "EquivalenceDetector",
    "EquivalenceMatch",
    "normalize_sentence",
    "ConditionExtractor",
    "CommaConditionExtractor",
    "SentenceEndConditionExtractor",
    "get_condition_extractor",
]
