"""
Condition Extractor - locate a guard clause inside a sentence.

Guard clauses in documentation prose are almost always set off by a comma:

    "if the list is empty, returns the same as size()"   (leading clause)
    "returns the same as size(), if the list is empty"   (trailing clause)

The extractors here only find the clause text. Turning it into a predicate
is the guard translator's job.
"""

import re
import logging
from typing import Optional, Tuple

from docoracle.config import get_config

logger = logging.getLogger(__name__)


class ConditionExtractor:
    """Interface for guard-clause extraction strategies"""

    def __init__(self, keywords=None):
        self.keywords = keywords or get_config()["equivalence"]["guard_keywords"]
        self._patterns = [
            re.compile(r"\b" + re.escape(kw) + r"\b", re.IGNORECASE) for kw in self.keywords
        ]

    def extract(self, text: str) -> Optional[str]:
        """
        Extract the guard clause from text.

        Returns:
            The clause, starting at its keyword, or None if no condition found
        """
        raise NotImplementedError

    def find_keyword(self, text: str) -> Optional[int]:
        """
        Offset of the guard keyword, trying keywords in priority order.

        "if" wins over "when" even if "when" occurs earlier in the text.
        """
        for pattern in self._patterns:
            match = pattern.search(text)
            if match:
                return match.start()
        return None

    def _bounds(self, text: str) -> Optional[Tuple[int, int]]:
        begin = self.find_keyword(text)
        if begin is None:
            # No keyword, no condition: a sentence prefix is never taken as a guard
            return None

        end = text.find(",", begin)
        if end > begin:
            return begin, end

        # Trailing clause: "..., if X" runs to the end of the sentence
        if text.rfind(",", 0, begin) != -1:
            return begin, len(text)

        return None


class CommaConditionExtractor(ConditionExtractor):
    """
    Comma-delimited guard extraction (default).

    A guard keyword with no comma anywhere in the sentence yields no
    condition. Sentences ending the clause with a period are missed on
    purpose; SentenceEndConditionExtractor relaxes this.
    """

    def extract(self, text: str) -> Optional[str]:
        bounds = self._bounds(text)
        if bounds is None:
            if self.find_keyword(text) is not None:
                logger.debug(f"Guard keyword without comma delimiter, no condition: {text!r}")
            return None
        begin, end = bounds
        return _clean(text[begin:end])


class SentenceEndConditionExtractor(ConditionExtractor):
    """Like the comma strategy, but a missing comma lets the clause run to the sentence end."""

    def extract(self, text: str) -> Optional[str]:
        bounds = self._bounds(text)
        if bounds is None:
            begin = self.find_keyword(text)
            if begin is None:
                return None
            bounds = (begin, len(text))
        begin, end = bounds
        return _clean(text[begin:end])


def _clean(clause: str) -> Optional[str]:
    clause = clause.strip().rstrip(".;").rstrip()
    return clause or None


EXTRACTION_STRATEGIES = {
    "comma": CommaConditionExtractor,
    "sentence_end": SentenceEndConditionExtractor,
}


def get_condition_extractor(config: Optional[dict] = None) -> ConditionExtractor:
    """Build the extractor named by condition_extraction.strategy."""
    config = config or get_config()
    strategy = config["condition_extraction"]["strategy"]
    if strategy not in EXTRACTION_STRATEGIES:
        raise ValueError(
            f"Unknown condition extraction strategy '{strategy}'. "
            f"Choose from: {', '.join(EXTRACTION_STRATEGIES)}"
        )
    return EXTRACTION_STRATEGIES[strategy](config["equivalence"]["guard_keywords"])
