"""Candidate enumeration, subject matching and overload resolution"""

from .candidates import CandidateEnumerator, ModelCandidateEnumerator
from .subject_matcher import SubjectMatcher
from .type_compatibility import TypeCompatibility
from .overload_resolver import Match, OverloadResolver

__all__ = [
    "CandidateEnumerator",
    "ModelCandidateEnumerator",
    "SubjectMatcher",
    "TypeCompatibility",
    "Match",
    "OverloadResolver",
]
