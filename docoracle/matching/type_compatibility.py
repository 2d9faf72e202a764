"""
Type compatibility for overload resolution.

Assignability is modelled as a directed graph whose edges are single
conversion steps (primitive widening, boxing, unboxing, subtyping). The
widening "distance" between an argument type and a parameter type is the
shortest path length; no path means the argument cannot be passed.
"""

import re
import logging
from typing import Dict, Iterable, List, Optional, Tuple

import networkx as nx

from docoracle.config import BOXED_TYPES, PRIMITIVE_WIDENING
from docoracle.models import erasure

logger = logging.getLogger(__name__)


NULL_TYPE = "null"
UNKNOWN_TYPE = "?"
OBJECT = "Object"

# Supertypes of the JDK types that commonly appear in documented signatures
JDK_SUPERTYPES: Dict[str, List[str]] = {
    "String": ["CharSequence", "Comparable"],
    "StringBuilder": ["CharSequence"],
    "Integer": ["Number", "Comparable"],
    "Long": ["Number", "Comparable"],
    "Short": ["Number", "Comparable"],
    "Byte": ["Number", "Comparable"],
    "Float": ["Number", "Comparable"],
    "Double": ["Number", "Comparable"],
    "Boolean": ["Comparable"],
    "Character": ["Comparable"],
    "ArrayList": ["List"],
    "LinkedList": ["List", "Deque"],
    "List": ["Collection"],
    "Set": ["Collection"],
    "HashSet": ["Set"],
    "TreeSet": ["SortedSet"],
    "SortedSet": ["Set"],
    "Queue": ["Collection"],
    "Deque": ["Queue"],
    "Collection": ["Iterable"],
    "HashMap": ["Map"],
    "TreeMap": ["SortedMap"],
    "SortedMap": ["Map"],
}


def is_primitive(type_name: str) -> bool:
    return type_name in BOXED_TYPES


def is_type_variable(type_name: str) -> bool:
    """Single-letter (optionally digit-suffixed) names such as E, K, V, T1."""
    return bool(re.match(r"^[A-Z][0-9]?$", type_name))


class TypeCompatibility:
    """
    Java-style assignability with conversion distances.

    Usage:
        compat = TypeCompatibility(supertype_edges=[("ArrayStack", "Stack")])
        compat.distance("int", "long")        # 1
        compat.distance("ArrayStack", "Stack")  # 1
        compat.distance("long", "int")        # None
    """

    def __init__(self, supertype_edges: Iterable[Tuple[str, str]] = (), null_cost: int = 1):
        self.null_cost = null_cost
        self.graph = nx.DiGraph()

        for source, targets in PRIMITIVE_WIDENING.items():
            for target in targets:
                self.graph.add_edge(source, target)

        for primitive, boxed in BOXED_TYPES.items():
            self.graph.add_edge(primitive, boxed)
            self.graph.add_edge(boxed, primitive)

        for subtype, supertypes in JDK_SUPERTYPES.items():
            for supertype in supertypes:
                self.graph.add_edge(subtype, supertype)

        for subtype, supertype in supertype_edges:
            self.graph.add_edge(erasure(subtype), erasure(supertype))

        # Every reference type reaches Object in one step
        for node in list(self.graph.nodes):
            if node != OBJECT and not is_primitive(node):
                self.graph.add_edge(node, OBJECT)

    def distance(self, source: str, target: str) -> Optional[int]:
        """
        Number of conversion steps from source to target.

        Returns:
            0 for identical types, a positive step count for assignable
            types, None when the source cannot be passed as target
        """
        source = erasure(source)
        target = erasure(target).replace("...", "")

        if source == target:
            return 0

        if source == NULL_TYPE:
            return None if is_primitive(target) else self.null_cost

        if is_type_variable(target):
            # Unbounded type variable: any reference, primitives after boxing
            return 2 if is_primitive(source) else 1

        if source in self.graph and target in self.graph:
            try:
                return nx.shortest_path_length(self.graph, source, target)
            except nx.NetworkXNoPath:
                return None

        if target == OBJECT:
            return 2 if is_primitive(source) else 1

        return None

    def is_assignable(self, source: str, target: str) -> bool:
        return self.distance(source, target) is not None
