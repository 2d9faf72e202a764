"""
Subject Matcher - filter candidates by the referenced member's name.

Matching runs in tiers and stops at the first tier with any hit:

1. Exact name                          isEmpty == isEmpty
2. Case-insensitive                    isempty ~ isEmpty
3. Normalized verb form (stemmed)      contains ~ contain, getSize ~ get_size

Every hit of the winning tier is returned, in candidate order. Ambiguity is
reported, not collapsed: picking among overloads is the resolver's job.
"""

import re
import logging
from typing import Iterable, Optional, Tuple

from nltk.stem import PorterStemmer

from docoracle.config import get_config
from docoracle.models import CodeElement

logger = logging.getLogger(__name__)

_stemmer = PorterStemmer()


def split_identifier(name: str) -> Tuple[str, ...]:
    """
    Split a camelCase / snake_case identifier into lowercase words.

    Examples:
        "getSize" -> ("get", "size")
        "toURLString" -> ("to", "url", "string")
    """
    parts = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", name)
    parts = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1 \2", parts)
    return tuple(w.lower() for w in re.split(r"[\s_$]+", parts) if w)


def normalize_name(name: str) -> str:
    """Stemmed, lowercased, separator-free form of an identifier."""
    return "".join(_stemmer.stem(word) for word in split_identifier(name))


class SubjectMatcher:
    """Name-based candidate filtering."""

    def __init__(self, config: Optional[dict] = None):
        config = config or get_config()
        self.fuzzy = config["subject_matching"]["fuzzy"]

    def match(self, name: str, candidates: Iterable[CodeElement]) -> Tuple[CodeElement, ...]:
        """
        Candidates whose simple name matches name.

        Args:
            name: Referenced member's simple name
            candidates: Enumerated candidates, in declaration order

        Returns:
            Matching candidates of the first non-empty tier (may be empty)
        """
        if not name:
            return ()
        candidates = tuple(candidates)

        tiers = [("exact", lambda c: c.name == name)]
        if self.fuzzy:
            lowered = name.lower()
            normalized = normalize_name(name)
            tiers.append(("case-insensitive", lambda c: c.name.lower() == lowered))
            tiers.append(("normalized", lambda c: normalize_name(c.name) == normalized))

        for tier_name, predicate in tiers:
            hits = tuple(c for c in candidates if predicate(c))
            if hits:
                logger.debug(f"Subject '{name}' matched {len(hits)} candidate(s) at tier {tier_name}")
                return hits

        logger.debug(f"Subject '{name}' matched no candidate")
        return ()
