"""
Equivalence Detector

Scans one sentence for a statement that the documented member behaves like
another member:

1. Exact:     "Equivalent to isEmpty()"            -> similarity=False
2. Negated:   "Never equivalent to isEmpty()"      -> negated=True
3. Similar:   "Analogous to put(key, value)"       -> similarity=True
4. Guarded:   "Same as size(), if the list is set" -> similarity=True

Detection is purely lexical. The referenced member is identified by its
simple name (plus qualifier and argument texts, when written); finding the
actual code element is left to the subject matcher and overload resolver.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple
import re
import logging

from docoracle.config import get_config

logger = logging.getLogger(__name__)


# Statuses of an EquivalenceMatch, from "nothing detected" to "oracle produced"
NO_EQUIVALENCE = "no_equivalence"
DETECTED = "detected"
NO_CONDITION = "no_condition"
EMPTY_GUARD = "empty_guard"
NO_CANDIDATE = "no_candidate"
NO_OVERLOAD = "no_overload"
INVALID = "invalid"
RESOLVED = "resolved"


@dataclass(frozen=True)
class EquivalenceMatch:
    """
    Per-sentence detection result.

    An empty simple_name means no equivalence was found. The oracle stays
    None unless matching, overload resolution, and validation all succeeded.
    Records are immutable: each pipeline stage returns a new one.
    """
    sentence: str
    signature: str = ""
    simple_name: str = ""
    qualifier: str = ""
    arguments: Optional[Tuple[str, ...]] = None   # None: written without parentheses
    similarity: bool = False
    negated: bool = False
    guard: Optional[str] = None
    oracle: Optional[str] = None
    oracles: Tuple[str, ...] = ()
    status: str = NO_EQUIVALENCE

    @property
    def found(self) -> bool:
        return bool(self.simple_name)

    def with_status(self, status: str) -> "EquivalenceMatch":
        # A resolved match stays resolved when a later guard attempt fails
        if self.status == RESOLVED:
            return self
        return replace(self, status=status)

    def with_guard(self, guard: Optional[str]) -> "EquivalenceMatch":
        return replace(self, guard=guard)

    def with_oracle(self, oracle: str) -> "EquivalenceMatch":
        return replace(self, oracle=oracle, oracles=self.oracles + (oracle,), status=RESOLVED)

    def to_dict(self) -> Dict:
        return {
            "sentence": self.sentence,
            "signature": self.signature,
            "simple_name": self.simple_name,
            "qualifier": self.qualifier,
            "arguments": list(self.arguments) if self.arguments is not None else None,
            "similarity": self.similarity,
            "negated": self.negated,
            "guard": self.guard,
            "oracle": self.oracle,
            "oracles": list(self.oracles),
            "status": self.status,
        }


# =============================================================================
# Lexical patterns
# =============================================================================

# Javadoc inline tags: {@code x.foo()}, {@link #foo(int)}, {@linkplain Foo#bar label}
_CODE_TAG = re.compile(r"\{@(?:code|literal)\s+([^}]*)\}")
_LINK_TAG = re.compile(r"\{@link(?:plain)?\s+([^\s}(]+(?:\([^)]*\))?)[^}]*\}")

_IDENT = r"[A-Za-z_$][\w$]*"

# name(args) with an optional dotted qualifier; one level of nested parens in args
_CALL_REF = re.compile(
    r"(?P<ref>(?:(?P<qual>" + _IDENT + r"(?:\." + _IDENT + r")*)\.)?"
    r"(?P<name>" + _IDENT + r")\s*\((?P<args>[^()]*(?:\([^()]*\)[^()]*)*)\))"
)

# Bare references are only trusted when they look like code: camelCase or qualified
_BARE_REF = re.compile(
    r"^(?P<ref>(?:(?P<qual>" + _IDENT + r"(?:\." + _IDENT + r")*)\.)?"
    r"(?P<name>" + _IDENT + r"))\b"
)

_FILLER = re.compile(
    r"^(?:\s*(?:the|a|an|calling|invoking|call\s+to|a\s+call\s+to|method|function|invocation\s+of)\b)*\s*",
    re.IGNORECASE,
)


_WORD = re.compile(r"[\w']+|[,;]")
_ARTICLES = {"the", "a", "an"}
_AUXILIARIES = {"is", "are", "was", "were", "be", "been", "does", "do", "did", "has", "have"}


def normalize_sentence(sentence: str) -> str:
    """
    Replace javadoc inline tags by their content and '#' member links by dots.

    Example:
        >>> normalize_sentence("Same as {@link #isEmpty()}")
        'Same as isEmpty()'
    """
    text = _CODE_TAG.sub(lambda m: m.group(1).strip(), sentence)
    text = _LINK_TAG.sub(lambda m: m.group(1).strip(), text)
    text = re.sub(r"([\w$])#([\w$])", r"\1.\2", text)
    text = re.sub(r"(?<![\w$])#(?=[A-Za-z_$])", "", text)
    return text


def split_arguments(args_text: str) -> Tuple[str, ...]:
    """Split an argument list on top-level commas."""
    args = []
    depth = 0
    current = []
    quote = None
    for ch in args_text:
        if quote:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in "\"'":
            quote = ch
        elif ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        if ch == "," and depth == 0:
            args.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    tail = "".join(current).strip()
    if tail or args:
        args.append(tail)
    return tuple(a for a in args if a)


def _looks_like_code(name: str, qualifier: str) -> bool:
    if qualifier:
        return True
    return bool(re.match(r"^[a-z_$][\w$]*[A-Z][\w$]*$", name))


class EquivalenceDetector:
    """
    Detect equivalence/similarity declarations in a sentence.

    Pipeline:
    1. Normalize javadoc markup
    2. Find equivalence phrases, leftmost first
    3. Take the first member reference after the phrase, stopping at the
       next guard keyword
    4. Derive negation (negation word directly before the phrase, at most an
       auxiliary or article in between) and
       similarity (similar phrase, or any guard keyword in the sentence)
    """

    def __init__(self, config: Optional[dict] = None):
        config = config or get_config()
        eq_config = config["equivalence"]

        self.phrase_patterns: List[Tuple[bool, re.Pattern]] = []
        for category, phrases in eq_config["phrases"].items():
            similar = category == "similar"
            for phrase in phrases:
                self.phrase_patterns.append(
                    (similar, re.compile(r"\b" + phrase + r"\b", re.IGNORECASE))
                )

        self.negation_words = {w.lower() for w in eq_config["negation_words"]}

        guards = "|".join(re.escape(w) for w in eq_config["guard_keywords"])
        self.guard_pattern = re.compile(r"\b(?:" + guards + r")\b", re.IGNORECASE)

    def detect(self, sentence: str) -> EquivalenceMatch:
        """
        Detect an equivalence statement.

        Args:
            sentence: One sentence of a free-text comment

        Returns:
            EquivalenceMatch; simple_name is empty when nothing was detected
        """
        text = normalize_sentence(sentence)

        for similar, phrase in self._phrase_matches(text):
            reference = self._find_reference(text, phrase.end())
            if reference is None:
                continue

            signature, qualifier, name, arguments = reference
            negated = self._is_negated(text, phrase.start())
            similarity = similar or bool(self.guard_pattern.search(text))

            logger.debug(
                f"Equivalence '{phrase.group(0)}' -> {signature} "
                f"(similarity={similarity}, negated={negated})"
            )
            return EquivalenceMatch(
                sentence=sentence,
                signature=signature,
                simple_name=name,
                qualifier=qualifier,
                arguments=arguments,
                similarity=similarity,
                negated=negated,
                status=DETECTED,
            )

        return EquivalenceMatch(sentence=sentence)

    def _phrase_matches(self, text: str) -> List[Tuple[bool, re.Match]]:
        matches = []
        for similar, pattern in self.phrase_patterns:
            for match in pattern.finditer(text):
                matches.append((similar, match))
        # Leftmost first; at equal offsets the longer phrase wins
        matches.sort(key=lambda item: (item[1].start(), -(item[1].end() - item[1].start())))
        return matches

    def _find_reference(
        self, text: str, start: int
    ) -> Optional[Tuple[str, str, str, Optional[Tuple[str, ...]]]]:
        region = text[start:]
        guard = self.guard_pattern.search(region)
        if guard:
            region = region[: guard.start()]

        call = _CALL_REF.search(region)
        if call:
            return (
                call.group("ref").strip(),
                call.group("qual") or "",
                call.group("name"),
                split_arguments(call.group("args")),
            )

        rest = region[_FILLER.match(region).end():]
        bare = _BARE_REF.match(rest)
        if bare and _looks_like_code(bare.group("name"), bare.group("qual") or ""):
            return (bare.group("ref"), bare.group("qual") or "", bare.group("name"), None)

        return None

    def _is_negated(self, text: str, phrase_start: int) -> bool:
        # Only a negation modifying the phrase counts: "not equivalent to",
        # "is never the same as", "isn't equal to"
        words = _WORD.findall(text[:phrase_start].lower())
        while words and words[-1] in _ARTICLES:
            words.pop()
        if words and words[-1] in _AUXILIARIES:
            words.pop()
        return bool(words) and words[-1] in self.negation_words


def get_equivalent_or_similar_member(sentence: str) -> EquivalenceMatch:
    """Convenience wrapper using the active configuration."""
    return EquivalenceDetector().detect(sentence)
