"""
Guard Translator - guard clauses to logical predicates.

General semantic parsing of prose is outside this package; the translator
is a collaborator boundary. PatternGuardTranslator covers the phrasings that
dominate API documentation:

    "if the index is negative"          -> index<0
    "if list is null or empty"          -> list==null || list.isEmpty()
    "when the stack has no elements"    -> isEmpty()
    "if key.isEmpty()"                  -> key.isEmpty()        (code passes through)

A clause with any part it cannot translate yields an empty translation,
which callers treat as "no usable predicate".
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import re
import logging

from docoracle.extraction.equivalence_detector import normalize_sentence
from docoracle.matching.subject_matcher import split_identifier
from docoracle.models import DocumentedMember, simple_type_name
from docoracle.synthesis.expressions import balanced

logger = logging.getLogger(__name__)


RECEIVER = ""   # Subject is the receiver: members are referenced unqualified


@dataclass
class Proposition:
    """One sub-clause: subject + predicate, with its translation (may be empty)."""
    subject: str
    predicate: str
    translation: str = ""


@dataclass
class PropositionSeries:
    """A guard clause as propositions joined by conjunctions ("and"/"or")."""
    clause: str
    propositions: List[Proposition] = field(default_factory=list)
    conjunctions: List[str] = field(default_factory=list)
    translation: str = ""

    def to_dict(self) -> Dict:
        return {
            "clause": self.clause,
            "propositions": [
                {"subject": p.subject, "predicate": p.predicate, "translation": p.translation}
                for p in self.propositions
            ],
            "conjunctions": list(self.conjunctions),
            "translation": self.translation,
        }


class GuardTranslator:
    """Interface for guard translators"""

    def translate(self, clause: str, member: DocumentedMember) -> List[PropositionSeries]:
        """
        Translate a guard clause over member's parameters and receiver.

        Returns:
            Zero or more series; an empty translation means no usable predicate
        """
        raise NotImplementedError


# =============================================================================
# Pattern-based default translator
# =============================================================================

_NUMBER = r"[-+]?\d+(?:\.\d+)?"

_KEYWORD = re.compile(r"^\s*(?:if|when|whenever)\s+", re.IGNORECASE)
_ARTICLES = re.compile(r"^(?:the|a|an|given|specified|provided|this|that)\s+", re.IGNORECASE)
_CONJUNCTION = re.compile(r"\s+(and|or)\s+", re.IGNORECASE)
_CODE_CALL = re.compile(r"^!?[\w$.]+\s*\(.*\)$")
_CODE_COMPARISON = re.compile(r"^[\w$.()\[\]\s]+\s*(?:==|!=|<=|>=|<|>)\s*[\w$.()\[\]\"'+-]+$")

_SUBJECT_PREDICATE = re.compile(
    r"^(?P<subject>.+?)\s+(?P<predicate>(?:is|are|has|have|does|do|contains)\b.*)$",
    re.IGNORECASE,
)

# (pattern, template for a parameter subject, template for the receiver or None)
_PREDICATES: List[Tuple[re.Pattern, str, Optional[str]]] = [
    (re.compile(r"^(?:is|are)\s+(?:not\s+null|non-null)$", re.I), "{s}!=null", None),
    (re.compile(r"^(?:is|are)\s+null$", re.I), "{s}==null", None),
    (re.compile(r"^(?:is|are)\s+not\s+empty$", re.I), "!{s}.isEmpty()", "!isEmpty()"),
    (re.compile(r"^(?:is|are)\s+empty$", re.I), "{s}.isEmpty()", "isEmpty()"),
    (re.compile(r"^(?:has|have)\s+no\s+(?:elements|entries|items|mappings)$", re.I), "{s}.isEmpty()", "isEmpty()"),
    (re.compile(r"^(?:has|have)\s+(?:elements|entries|items|mappings)$", re.I), "!{s}.isEmpty()", "!isEmpty()"),
    (re.compile(r"^(?:is|are)\s+true$", re.I), "{s}", None),
    (re.compile(r"^(?:is|are)\s+false$", re.I), "!{s}", None),
    (re.compile(r"^(?:is|are)\s+negative$", re.I), "{s}<0", None),
    (re.compile(r"^(?:is|are)\s+positive$", re.I), "{s}>0", None),
    (re.compile(r"^(?:is|are)\s+zero$", re.I), "{s}==0", None),
    (re.compile(r"^(?:is|are)\s+(?:greater|larger|more)\s+than\s+(?P<v>.+)$", re.I), "{s}>{v}", None),
    (re.compile(r"^(?:is|are)\s+(?:less|smaller|lower)\s+than\s+(?P<v>.+)$", re.I), "{s}<{v}", None),
    (re.compile(r"^(?:is|are)\s+at\s+least\s+(?P<v>.+)$", re.I), "{s}>={v}", None),
    (re.compile(r"^(?:is|are)\s+at\s+most\s+(?P<v>.+)$", re.I), "{s}<={v}", None),
    (re.compile(r"^(?:is|are)\s+(?:not\s+equal\s+to|different\s+from)\s+(?P<v>.+)$", re.I), "{s}!={v}", None),
    (re.compile(r"^(?:is|are)\s+(?:equal\s+to\s+)?(?P<v>" + _NUMBER + r")$", re.I), "{s}=={v}", None),
    (re.compile(r"^(?:does|do)\s+not\s+contain\s+(?P<v>.+)$", re.I), "!{s}.contains({v})", "!contains({v})"),
    (re.compile(r"^contains\s+(?P<v>.+)$", re.I), "{s}.contains({v})", "contains({v})"),
]


class PatternGuardTranslator(GuardTranslator):
    """
    Pattern-based translation of guard clauses.

    Subjects resolve to a parameter of the documented member or to the
    receiver ("this", "it", or words of the declaring type's name).
    Values in comparisons must be numbers, literals or parameter names.
    """

    def translate(self, clause: str, member: DocumentedMember) -> List[PropositionSeries]:
        if not clause or not clause.strip():
            return []

        body = _KEYWORD.sub("", normalize_sentence(clause).strip()).strip().rstrip(".,;")
        series = PropositionSeries(clause=clause)

        if self._is_code(body):
            series.propositions.append(Proposition(subject="", predicate=body, translation=body))
            series.translation = body
            return [series]

        parts = _CONJUNCTION.split(body)
        texts = parts[0::2]
        series.conjunctions = [c.lower() for c in parts[1::2]]

        previous_subject = None
        translations = []
        for text in texts:
            proposition = self._translate_part(text.strip(), member, previous_subject)
            series.propositions.append(proposition)
            translations.append(proposition.translation)
            if proposition.subject:
                previous_subject = proposition.subject

        if all(translations):
            operators = ["&&" if c == "and" else "||" for c in series.conjunctions]
            joined = translations[0]
            for operator, translation in zip(operators, translations[1:]):
                joined += f" {operator} {translation}"
            series.translation = joined
        else:
            logger.debug(f"Guard clause not fully translatable: {clause!r}")

        return [series]

    def _is_code(self, text: str) -> bool:
        if not balanced(text):
            return False
        return bool(_CODE_CALL.match(text) or _CODE_COMPARISON.match(text))

    def _translate_part(
        self, text: str, member: DocumentedMember, previous_subject: Optional[str]
    ) -> Proposition:
        match = _SUBJECT_PREDICATE.match(text)
        if match:
            subject_text, predicate = match.group("subject"), match.group("predicate")
        elif previous_subject is not None:
            # Elliptical: "if list is null or empty" -> subject carries over
            subject_text, predicate = previous_subject, "is " + text
        else:
            return Proposition(subject="", predicate=text)

        subject = self._resolve_subject(subject_text, member)
        proposition = Proposition(subject=subject_text, predicate=predicate)
        if subject is None:
            return proposition

        for pattern, param_template, receiver_template in _PREDICATES:
            hit = pattern.match(predicate.strip())
            if not hit:
                continue
            template = receiver_template if subject == RECEIVER else param_template
            if template is None:
                break
            value = hit.groupdict().get("v")
            if value is not None:
                value = self._resolve_value(value.strip(), member)
                if value is None:
                    break
            proposition.translation = template.format(s=subject, v=value)
            break

        return proposition

    def _resolve_subject(self, text: str, member: DocumentedMember) -> Optional[str]:
        subject = text.strip()
        if member.parameter(subject) is not None:
            return subject
        while True:
            stripped = _ARTICLES.sub("", subject)
            if stripped == subject:
                break
            subject = stripped
        if member.parameter(subject) is not None:
            return subject

        lowered = subject.lower()
        if lowered in self._receiver_aliases(member) or text.strip().lower() in ("this", "it"):
            return RECEIVER
        return None

    def _receiver_aliases(self, member: DocumentedMember) -> set:
        type_name = simple_type_name(member.declaring_type)
        aliases = {"this", "it", "object", "instance", type_name.lower()}
        words = split_identifier(type_name)
        aliases.update(words)
        aliases.add(" ".join(words))
        return aliases

    def _resolve_value(self, text: str, member: DocumentedMember) -> Optional[str]:
        text = _ARTICLES.sub("", text).strip()
        if re.fullmatch(_NUMBER, text):
            return text
        if text in ("null", "true", "false") or re.fullmatch(r'"[^"]*"', text):
            return text
        if member.parameter(text) is not None:
            return text
        return None
