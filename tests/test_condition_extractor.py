"""Tests for guard clause extraction"""

import pytest

from docoracle.config import get_config
from docoracle.extraction.condition_extractor import (
    CommaConditionExtractor,
    SentenceEndConditionExtractor,
    get_condition_extractor,
)


class TestCommaConditionExtractor:
    """Default comma-delimited strategy"""

    def setup_method(self):
        self.extractor = CommaConditionExtractor(["if", "when"])

    def test_leading_clause_ends_at_comma(self):
        """The clause runs from the keyword up to the next comma."""
        text = "returns true if list is empty, otherwise false"
        assert self.extractor.extract(text) == "if list is empty"

    def test_keyword_without_comma_is_no_condition(self):
        """A keyword with no comma delimiter yields no condition."""
        assert self.extractor.extract("returns true if list is empty") is None

    def test_no_keyword_is_no_condition(self):
        assert self.extractor.extract("Equivalent to isEmpty(), always") is None

    def test_trailing_clause_runs_to_sentence_end(self):
        """A clause set off by a preceding comma runs to the end."""
        text = "Returns the same as isEmpty(), if the list has no elements"
        assert self.extractor.extract(text) == "if the list has no elements"

    def test_trailing_period_is_stripped(self):
        text = "Same as size(), if the list is not null."
        assert self.extractor.extract(text) == "if the list is not null"

    def test_when_keyword(self):
        text = "Returns the same as peek() when the stack is not empty, otherwise null"
        assert self.extractor.extract(text) == "when the stack is not empty"

    def test_if_takes_priority_over_earlier_when(self):
        """Keywords are tried in priority order, not text order."""
        text = "When called, returns size() if index is zero, else -1"
        assert self.extractor.extract(text) == "if index is zero"

    def test_keyword_must_be_a_whole_word(self):
        """'if' inside another word is not a guard keyword."""
        assert self.extractor.extract("Modifies the list, then returns it") is None


class TestSentenceEndConditionExtractor:
    """Relaxed strategy: a missing comma lets the clause run to the end"""

    def test_clause_without_comma(self):
        extractor = SentenceEndConditionExtractor(["if", "when"])
        assert extractor.extract("returns true if list is empty.") == "if list is empty"

    def test_comma_still_delimits(self):
        extractor = SentenceEndConditionExtractor(["if", "when"])
        assert extractor.extract("returns true if list is empty, otherwise false") == "if list is empty"


class TestGetConditionExtractor:
    """Strategy selection from configuration"""

    def test_default_is_comma(self):
        assert isinstance(get_condition_extractor(), CommaConditionExtractor)

    def test_sentence_end_strategy(self):
        config = get_config()
        config["condition_extraction"]["strategy"] = "sentence_end"
        assert isinstance(get_condition_extractor(config), SentenceEndConditionExtractor)

    def test_unknown_strategy_raises(self):
        config = get_config()
        config["condition_extraction"]["strategy"] = "semantic"
        with pytest.raises(ValueError, match="semantic"):
            get_condition_extractor(config)
