"""
Oracle Synthesizer

Builds the oracle expression from a resolved Match:

    primitive-like return type:  RESULT==[!]base
    anything else:               RESULT.equals([!]base)
    with a guard predicate:      if (guard) {oracle}
"""

from typing import Optional
import logging

from docoracle.config import get_config
from docoracle.matching.overload_resolver import Match
from docoracle.models import DocumentedMember, erasure
from docoracle.synthesis.expressions import Equality, Expression, Guarded, Negation

logger = logging.getLogger(__name__)


class OracleSynthesizer:
    """Turn a resolved match into an oracle expression tree."""

    def __init__(self, config: Optional[dict] = None):
        config = config or get_config()
        self.result_placeholder = config["return_value"]
        self.primitive_types = set(config["primitive_types"])

    def is_primitive_result(self, member: DocumentedMember) -> bool:
        return erasure(member.effective_return_type) in self.primitive_types

    def synthesize(
        self,
        member: DocumentedMember,
        match: Match,
        negated: bool = False,
        guard: Optional[str] = None,
    ) -> Expression:
        """
        Build the oracle.

        Args:
            member: Documented member whose result the oracle constrains
            match: Resolved equivalence target
            negated: Emit "!" before the base expression
            guard: Guard predicate; None or blank means unconditional

        Returns:
            Expression tree (render() gives the oracle text)
        """
        operand = Negation(match.expression) if negated else match.expression
        oracle = Equality(self.result_placeholder, operand, self.is_primitive_result(member))

        if guard and guard.strip():
            oracle = Guarded(guard.strip(), oracle)

        logger.debug(f"Synthesized oracle: {oracle.render()}")
        return oracle
