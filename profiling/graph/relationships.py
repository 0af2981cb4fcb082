"""
Relationship triples derived from aggregate domain scores.

Node kinds are distinguished by string prefixes (user:, topic:, domain:,
concept:, trait:, behavior:). The triple store is append-only: there is
no update, only insert and bulk delete, and repeated builds add repeated
edges.
"""

import logging
import threading
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..lexicon.extractor import tokenize

logger = logging.getLogger(__name__)


class Predicate(str, Enum):
    DISCUSSES = "discusses"
    INTERESTED_IN = "interested_in"
    EXHIBITS = "exhibits"
    BELONGS_TO_DOMAIN = "belongs_to_domain"
    RELATED_TO = "related_to"
    INDICATES = "indicates"
    CORRELATES_WITH = "correlates_with"
    CONTRADICTS = "contradicts"


NODE_PREFIXES = ("user", "topic", "domain", "concept", "trait", "behavior")

TOPIC_DOMAIN_MAP: Dict[str, Sequence[str]] = {
    "adventure": ("big_five_openness", "big_five_extraversion"),
    "creativity": ("big_five_openness", "creativity"),
    "organization": ("big_five_conscientiousness",),
    "social": ("big_five_extraversion", "big_five_agreeableness"),
    "conflict": ("big_five_agreeableness", "big_five_neuroticism"),
    "worry": ("big_five_neuroticism",),
    "analysis": ("cognitive_abilities", "information_processing"),
    "problem": ("cognitive_abilities", "decision_style"),
    "learn": ("learning_styles", "growth_mindset"),
    "feeling": ("emotional_intelligence",),
    "emotion": ("emotional_intelligence",),
    "stress": ("stress_coping", "big_five_neuroticism"),
    "ethics": ("moral_reasoning", "personal_values"),
    "politics": ("political_ideology",),
    "culture": ("cultural_values",),
    "future": ("time_orientation",),
    "past": ("time_orientation",),
    "present": ("time_orientation",),
    "career": ("work_career_style", "achievement_motivation"),
    "money": ("risk_tolerance",),
    "art": ("aesthetic_preferences", "creativity"),
}

TRAIT_BEHAVIOR_MAP: Dict[str, Sequence[str]] = {
    "big_five_openness": ("seeks_novelty", "creative_expression", "intellectual_curiosity"),
    "big_five_conscientiousness": ("organized_behavior", "goal_pursuit", "detailed_planning"),
    "big_five_extraversion": ("social_engagement", "verbal_expression", "group_activities"),
    "big_five_agreeableness": ("cooperative_behavior", "empathetic_response", "conflict_avoidance"),
    "big_five_neuroticism": ("worry_expression", "emotional_reactivity", "stress_sensitivity"),
    "growth_mindset": ("challenge_seeking", "effort_valuation", "feedback_reception"),
    "emotional_intelligence": ("emotion_recognition", "emotion_regulation", "social_awareness"),
}

TOPIC_DOMAIN_CONFIDENCE = 0.8
CORRELATION_WEIGHT = 0.7
CONTRADICTION_WEIGHT = 0.5


def node(kind: str, name: str) -> str:
    """Prefixed node id, e.g. node("domain", "creativity") -> "domain:creativity"."""
    if kind not in NODE_PREFIXES:
        raise ValueError(f"Unknown node kind: {kind}")
    return f"{kind}:{name}"


def strip_prefix(node_id: str) -> str:
    return node_id.split(":", 1)[1] if ":" in node_id else node_id


def extract_topics(text: str, topic_map: Dict[str, Sequence[str]] = TOPIC_DOMAIN_MAP) -> List[str]:
    """Known topics mentioned in a text, in first-seen order."""
    return list(dict.fromkeys(t for t in tokenize(text) if t in topic_map))


@dataclass
class RelationshipTriple:
    subject: str
    predicate: str
    object: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "predicate": self.predicate,
            "object": self.object,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RelationshipTriple":
        return cls(**d)


class TripleStore:
    """Append-only triple list with pattern queries."""

    def __init__(self):
        self._triples: List[RelationshipTriple] = []
        self._lock = threading.Lock()

    def add(self, subject: str, predicate, obj: str, metadata: Optional[Dict[str, Any]] = None) -> RelationshipTriple:
        triple = RelationshipTriple(
            subject=subject,
            predicate=Predicate(predicate).value,
            object=obj,
            metadata={**(metadata or {}), "timestamp": datetime.now(timezone.utc).isoformat()},
        )
        with self._lock:
            self._triples.append(triple)
        return triple

    def query(
        self,
        subject: Optional[str] = None,
        predicate=None,
        obj: Optional[str] = None,
    ) -> List[RelationshipTriple]:
        """Triples matching every given field."""
        predicate = Predicate(predicate).value if predicate is not None else None
        with self._lock:
            return [
                t for t in self._triples
                if (subject is None or t.subject == subject)
                and (predicate is None or t.predicate == predicate)
                and (obj is None or t.object == obj)
            ]

    def clear(self) -> int:
        """Delete every triple; returns how many were removed."""
        with self._lock:
            removed = len(self._triples)
            self._triples = []
        return removed

    def __len__(self) -> int:
        return len(self._triples)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            predicates = Counter(t.predicate for t in self._triples)
            nodes = {t.subject for t in self._triples} | {t.object for t in self._triples}
            return {
                "total_triples": len(self._triples),
                "unique_nodes": len(nodes),
                "predicates": dict(predicates),
            }

    def to_records(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [t.to_dict() for t in self._triples]

    def load_records(self, records: Iterable[Dict[str, Any]]) -> None:
        with self._lock:
            self._triples = [RelationshipTriple.from_dict(r) for r in records]

    # Query helpers

    def user_topics(self, user_id: str) -> List[str]:
        return list(dict.fromkeys(
            strip_prefix(t.object) for t in self.query(node("user", user_id), Predicate.DISCUSSES)
        ))

    def topic_domains(self, topic: str) -> List[str]:
        return list(dict.fromkeys(
            strip_prefix(t.object) for t in self.query(node("topic", topic), Predicate.BELONGS_TO_DOMAIN)
        ))

    def trait_behaviors(self, trait: str) -> List[str]:
        return list(dict.fromkeys(
            strip_prefix(t.object) for t in self.query(node("trait", trait), Predicate.INDICATES)
        ))

    def behavior_traits(self, behavior: str) -> List[str]:
        return list(dict.fromkeys(
            strip_prefix(t.subject) for t in self.query(None, Predicate.INDICATES, node("behavior", behavior))
        ))

    def related_domains(self, domain_id: str, predicate=Predicate.CORRELATES_WITH) -> List[str]:
        """Domains linked to domain_id by the predicate, in either direction."""
        target = node("domain", domain_id)
        related = []
        for t in self.query(predicate=predicate):
            if t.subject == target:
                related.append(strip_prefix(t.object))
            elif t.object == target:
                related.append(strip_prefix(t.subject))
        return list(dict.fromkeys(related))


class RelationshipGraphBuilder:
    """
    Emits triples from aggregate domain scores and discussed topics.

    Rules:
        - user DISCUSSES topic, and topic BELONGS_TO_DOMAIN each mapped domain
        - both domains > 0.6 -> CORRELATES_WITH (weight 0.7)
        - otherwise one > 0.7 and the other < 0.3 -> CONTRADICTS (weight 0.5)
        - mapped trait > 0.5 -> INDICATES each behavior (weight = score)
    """

    def __init__(
        self,
        store: TripleStore,
        topic_domain_map: Optional[Dict[str, Sequence[str]]] = None,
        trait_behavior_map: Optional[Dict[str, Sequence[str]]] = None,
        correlation_threshold: float = 0.6,
        contradiction_high: float = 0.7,
        contradiction_low: float = 0.3,
        indicates_threshold: float = 0.5,
    ):
        self.store = store
        self.topic_domain_map = topic_domain_map or TOPIC_DOMAIN_MAP
        self.trait_behavior_map = trait_behavior_map or TRAIT_BEHAVIOR_MAP
        self.correlation_threshold = correlation_threshold
        self.contradiction_high = contradiction_high
        self.contradiction_low = contradiction_low
        self.indicates_threshold = indicates_threshold

    def build(
        self,
        domain_scores: Dict[str, float],
        topics: Sequence[str] = (),
        user_id: str = "default_user",
    ) -> List[RelationshipTriple]:
        """
        Append triples for the current scores.

        Args:
            domain_scores: Domain id -> aggregate score
            topics: Topics discussed by the user
            user_id: Subject for DISCUSSES triples

        Returns:
            Triples appended by this call
        """
        emitted: List[RelationshipTriple] = []
        add = self.store.add

        for topic in topics:
            topic = topic.lower()
            emitted.append(add(node("user", user_id), Predicate.DISCUSSES, node("topic", topic)))
            for domain in self.topic_domain_map.get(topic, ()):
                emitted.append(add(
                    node("topic", topic), Predicate.BELONGS_TO_DOMAIN, node("domain", domain),
                    {"confidence": TOPIC_DOMAIN_CONFIDENCE},
                ))

        domains = list(domain_scores)
        for i, first in enumerate(domains):
            for second in domains[i + 1:]:
                a, b = domain_scores[first], domain_scores[second]
                if a > self.correlation_threshold and b > self.correlation_threshold:
                    emitted.append(add(
                        node("domain", first), Predicate.CORRELATES_WITH, node("domain", second),
                        {"weight": CORRELATION_WEIGHT},
                    ))
                elif (a > self.contradiction_high and b < self.contradiction_low) or (
                    b > self.contradiction_high and a < self.contradiction_low
                ):
                    emitted.append(add(
                        node("domain", first), Predicate.CONTRADICTS, node("domain", second),
                        {"weight": CONTRADICTION_WEIGHT},
                    ))

        for trait, behaviors in self.trait_behavior_map.items():
            score = domain_scores.get(trait)
            if score is None or score <= self.indicates_threshold:
                continue
            for behavior in behaviors:
                emitted.append(add(
                    node("trait", trait), Predicate.INDICATES, node("behavior", behavior),
                    {"weight": score, "evidence_count": 1},
                ))

        logger.info(f"Relationship build appended {len(emitted)} triples")
        return emitted
