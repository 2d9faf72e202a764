"""
Candidate Enumerator - code elements visible from a documented member.

The enumerator is a collaborator boundary: any introspection mechanism can
sit behind CandidateEnumerator as long as it returns an ordered,
duplicate-free snapshot. ModelCandidateEnumerator works over TypeModels
loaded from a member-model file.
"""

from collections import deque
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from docoracle.exceptions import CandidateEnumerationError
from docoracle.models import CodeElement, DocumentedMember, ElementKind, TypeModel, erasure, simple_type_name

logger = logging.getLogger(__name__)


class CandidateEnumerator:
    """Interface for candidate enumeration"""

    def enumerate(self, declaring_type: str, member: DocumentedMember) -> Tuple[CodeElement, ...]:
        """
        Return candidates visible from declaring_type and its supertypes.

        Order must be deterministic and the result free of duplicates.
        """
        raise NotImplementedError


class ModelCandidateEnumerator(CandidateEnumerator):
    """
    Enumerate candidates from an in-memory type model.

    Walks the declaring type first, then its supertypes breadth-first.
    A member redeclared in a subtype hides the supertype declaration, and
    the documented member itself is never its own candidate.
    """

    def __init__(self, types: Iterable[TypeModel]):
        self.types: Dict[str, TypeModel] = {}
        self._by_simple_name: Dict[str, TypeModel] = {}
        for type_model in types:
            self.types[type_model.name] = type_model
            self._by_simple_name.setdefault(type_model.simple_name, type_model)

    def lookup(self, type_name: str) -> Optional[TypeModel]:
        if type_name in self.types:
            return self.types[type_name]
        return self._by_simple_name.get(simple_type_name(type_name))

    def enumerate(self, declaring_type: str, member: DocumentedMember) -> Tuple[CodeElement, ...]:
        root = self.lookup(declaring_type)
        if root is None:
            raise CandidateEnumerationError(f"Type '{declaring_type}' is not in the model")

        collected: List[CodeElement] = []
        seen_identities = set()
        seen_overrides = set()
        own_key = (
            member.kind,
            member.name,
            tuple(erasure(t) for t in member.parameter_types),
        )

        for type_model in self._hierarchy(root):
            for element in type_model.members:
                if element.identity in seen_identities:
                    continue
                # Constructors are not inherited
                if element.kind == ElementKind.CONSTRUCTOR and type_model is not root:
                    continue
                if element.override_key in seen_overrides:
                    continue
                if element.override_key == own_key:
                    continue
                seen_identities.add(element.identity)
                seen_overrides.add(element.override_key)
                collected.append(element)

        logger.debug(f"Enumerated {len(collected)} candidates for {member.signature()}")
        return tuple(collected)

    def _hierarchy(self, root: TypeModel) -> List[TypeModel]:
        ordered = []
        visited = set()
        queue = deque([root])
        while queue:
            current = queue.popleft()
            if current.name in visited:
                continue
            visited.add(current.name)
            ordered.append(current)
            for supertype in current.supertypes:
                resolved = self.lookup(supertype)
                if resolved is None:
                    logger.debug(f"Supertype '{supertype}' of {current.name} not modelled, skipped")
                    continue
                queue.append(resolved)
        return ordered

    def supertype_edges(self) -> List[Tuple[str, str]]:
        """(subtype, supertype) pairs by simple name, for the type compatibility graph."""
        edges = []
        for type_model in self.types.values():
            for supertype in type_model.supertypes:
                edges.append((type_model.simple_name, simple_type_name(supertype)))
        return edges
