"""Derived relationship graph over topics, domains, traits and behaviors."""

from .relationships import (
    RelationshipGraphBuilder,
    RelationshipTriple,
    TripleStore,
    Predicate,
    TOPIC_DOMAIN_MAP,
    TRAIT_BEHAVIOR_MAP,
    extract_topics,
    node,
)

__all__ = [
    "RelationshipGraphBuilder",
    "RelationshipTriple",
    "TripleStore",
    "Predicate",
    "TOPIC_DOMAIN_MAP",
    "TRAIT_BEHAVIOR_MAP",
    "extract_topics",
    "node",
]
