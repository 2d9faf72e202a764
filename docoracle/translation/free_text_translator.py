"""
Free Text Translator - comment sentences to equivalence oracles.

Per sentence:
1. Equivalence detection
2. Guard extraction + translation (conditional equivalences only)
3. Subject matching against the enumerated candidates
4. Overload resolution
5. Oracle synthesis
6. Oracle validation

Every retained sentence yields exactly one EquivalenceMatch, resolved or
not, so the output is a complete record of what was recognized.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from tqdm import tqdm

from docoracle.config import get_config
from docoracle.exceptions import DocOracleError, GuardTranslationError
from docoracle.extraction.condition_extractor import ConditionExtractor, get_condition_extractor
from docoracle.extraction.equivalence_detector import (
    EMPTY_GUARD,
    INVALID,
    NO_CANDIDATE,
    NO_CONDITION,
    NO_OVERLOAD,
    EquivalenceDetector,
    EquivalenceMatch,
)
from docoracle.extraction.sentences import split_sentences
from docoracle.matching.candidates import CandidateEnumerator
from docoracle.matching.overload_resolver import OverloadResolver
from docoracle.matching.subject_matcher import SubjectMatcher
from docoracle.matching.type_compatibility import TypeCompatibility
from docoracle.models import CodeElement, DocumentedMember, FreeTextComment
from docoracle.synthesis.synthesizer import OracleSynthesizer
from docoracle.synthesis.validation import OracleValidator, StructuralOracleValidator
from docoracle.translation.guard_translator import GuardTranslator, PatternGuardTranslator

logger = logging.getLogger(__name__)


class FreeTextTranslator:
    """
    Translate free-text comments into equivalence oracles.

    Usage:
        translator = FreeTextTranslator(ModelCandidateEnumerator(types))
        matches = translator.translate(member.comment, member)
        oracles = [m.oracle for m in matches if m.oracle]
    """

    def __init__(
        self,
        enumerator: CandidateEnumerator,
        guard_translator: Optional[GuardTranslator] = None,
        validator: Optional[OracleValidator] = None,
        condition_extractor: Optional[ConditionExtractor] = None,
        config: Optional[dict] = None,
    ):
        config = config or get_config()
        self.config = config
        self.enumerator = enumerator

        null_cost = config["overload_resolution"]["null_argument_cost"]
        edges = enumerator.supertype_edges() if hasattr(enumerator, "supertype_edges") else []
        compatibility = TypeCompatibility(edges, null_cost=null_cost)

        self.detector = EquivalenceDetector(config)
        self.condition_extractor = condition_extractor or get_condition_extractor(config)
        self.guard_translator = guard_translator or PatternGuardTranslator()
        self.subject_matcher = SubjectMatcher(config)
        self.resolver = OverloadResolver(compatibility, config)
        self.synthesizer = OracleSynthesizer(config)
        self.validator = validator or StructuralOracleValidator()

    def translate(self, comment: FreeTextComment, member: DocumentedMember) -> List[EquivalenceMatch]:
        """
        Translate a free-text comment.

        Args:
            comment: The comment attached to member
            member: The documented member

        Returns:
            One EquivalenceMatch per retained sentence, in sentence order

        Raises:
            CandidateEnumerationError: If the member's candidates cannot be enumerated
            GuardTranslationError: If the guard translator fails
            DocOracleError: If any other stage crashes on a sentence

            Each carries the matches of the preceding sentences in
            partial_matches.
        """
        matches: List[EquivalenceMatch] = []
        candidates: Optional[Tuple[CodeElement, ...]] = None

        for sentence in split_sentences(comment.text, self.config):
            equivalence = self.detector.detect(sentence)

            if equivalence.found:
                try:
                    if candidates is None:
                        candidates = self.enumerator.enumerate(member.declaring_type, member)
                    if equivalence.similarity:
                        equivalence = self._translate_conditional(member, equivalence, sentence, candidates)
                    else:
                        equivalence = self._match_equivalent(member, equivalence, "", candidates)
                except DocOracleError as e:
                    e.partial_matches = list(matches)
                    raise
                except Exception as e:
                    raise DocOracleError(
                        f"Unexpected failure on {sentence!r}: {type(e).__name__}: {e}",
                        partial_matches=matches,
                    ) from e

            matches.append(equivalence)

        resolved = sum(1 for m in matches if m.oracle)
        detected = sum(1 for m in matches if m.found)
        logger.info(f"{member.signature()}: {len(matches)} sentences, {detected} equivalences, {resolved} oracles")
        return matches

    def _translate_conditional(
        self,
        member: DocumentedMember,
        equivalence: EquivalenceMatch,
        sentence: str,
        candidates: Tuple[CodeElement, ...],
    ) -> EquivalenceMatch:
        condition = self.condition_extractor.extract(sentence)
        if condition is None:
            logger.debug(f"Stage 2: Guard Extraction [NONE] {sentence!r}")
            return equivalence.with_status(NO_CONDITION)

        equivalence = equivalence.with_guard(condition)
        logger.debug(f"Stage 2: Guard Extraction [OK] {condition!r}")

        try:
            series_list = self.guard_translator.translate(condition, member)
        except DocOracleError:
            raise
        except Exception as e:
            raise GuardTranslationError(f"Guard translation failed for {condition!r}: {e}") from e

        if not series_list:
            return equivalence.with_status(EMPTY_GUARD)

        for series in series_list:
            if series.translation:
                equivalence = self._match_equivalent(member, equivalence, series.translation, candidates)
            else:
                equivalence = equivalence.with_status(EMPTY_GUARD)

        return equivalence

    def _match_equivalent(
        self,
        member: DocumentedMember,
        equivalence: EquivalenceMatch,
        guard: str,
        candidates: Tuple[CodeElement, ...],
    ) -> EquivalenceMatch:
        matching = self.subject_matcher.match(equivalence.simple_name, candidates)
        if not matching:
            logger.debug(f"Stage 3: Subject Matching [NONE] '{equivalence.simple_name}'")
            return equivalence.with_status(NO_CANDIDATE)

        match = self.resolver.resolve(equivalence, member, matching)
        if match is None:
            logger.debug(f"Stage 4: Overload Resolution [NONE] '{equivalence.signature}'")
            return equivalence.with_status(NO_OVERLOAD)

        oracle = self.synthesizer.synthesize(member, match, equivalence.negated, guard)

        if not self.validator.validate(member, oracle, guard):
            logger.debug(f"Stage 6: Validation [REJECTED] {oracle.render()}")
            return equivalence.with_status(INVALID)

        logger.debug(f"Stage 6: Validation [OK] {oracle.render()}")
        return equivalence.with_oracle(oracle.render())


@dataclass
class MemberResult:
    """Outcome of translating one member: its matches, or the error that stopped it."""
    member: DocumentedMember
    matches: List[EquivalenceMatch] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def oracles(self) -> List[str]:
        return [m.oracle for m in self.matches if m.oracle]

    def to_dict(self) -> Dict:
        return {
            "member": self.member.to_dict(),
            "signature": self.member.signature(),
            "comment": self.member.comment.text,
            "matches": [m.to_dict() for m in self.matches],
            "error": self.error,
        }


def translate_members(
    members: Iterable[DocumentedMember],
    translator: FreeTextTranslator,
    progress: bool = False,
) -> List[MemberResult]:
    """
    Translate many members, isolating failures per member.

    A member whose collaborators fail gets an error entry; the others are
    still translated and nothing already produced is lost.
    """
    members = list(members)
    results = []

    for member in tqdm(members, desc="Translating", unit="member", disable=not progress):
        try:
            matches = translator.translate(member.comment, member)
            results.append(MemberResult(member=member, matches=matches))
        except DocOracleError as e:
            logger.warning(f"Stopped {member.signature()} after {len(e.partial_matches)} sentences: {e}")
            results.append(MemberResult(member=member, matches=e.partial_matches, error=str(e)))
        except Exception as e:
            logger.error(f"Unexpected failure translating {member.signature()}: {e}")
            results.append(MemberResult(member=member, error=f"{type(e).__name__}: {e}"))

    failed = sum(1 for r in results if r.error)
    logger.info(f"Translated {len(results) - failed}/{len(results)} members")
    return results
