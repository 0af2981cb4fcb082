"""
Domain score stores.

Each domain's estimate is an online weighted mean keyed by accumulated
sample count:

    score = (cur_score * cur_count + new_score * new_points) / (cur_count + new_points)

so the stored score always lies within the range of every score ever
contributed. Contributions with new_points <= 0 are ignored. Writes to
the same key are serialized by a per-key lock; distinct keys update
independently.

Confidence is tracked separately from score, as a weighted mean of named
confidence factors set by collaborators.
"""

import logging
import math
import threading
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Tuple

from ..domains import PSYCHOLOGICAL_DOMAINS, get_domain_category

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 0.5
CONFIDENCE_FACTORS = ("data_volume", "consistency", "temporal_stability", "cross_validation")
DEFAULT_FACTOR_WEIGHT = 0.25


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def weighted_mean_update(
    cur_score: float, cur_count: int, new_score: float, new_points: int
) -> Tuple[float, int]:
    """
    One step of the online weighted mean.

    Returns:
        Tuple of (score, count); unchanged when new_points <= 0
    """
    if new_points <= 0:
        return cur_score, cur_count
    if cur_count <= 0:
        return new_score, new_points
    total = cur_count + new_points
    return (cur_score * cur_count + new_score * new_points) / total, total


class KeyedLocks:
    """Lazily created lock per key."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}

    def __call__(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock


@dataclass
class ConfidenceFactor:
    name: str
    value: float = 0.0
    weight: float = DEFAULT_FACTOR_WEIGHT


@dataclass
class DomainScore:
    """Accumulated estimate for one domain."""
    domain_id: str
    category: str
    score: float = NEUTRAL_SCORE
    confidence: float = 0.0
    data_points_count: int = 0
    last_updated: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict) -> "DomainScore":
        return cls(**d)


@dataclass
class ContextDomainScore:
    """Accumulated estimate for one domain within one context."""
    domain_id: str
    context_type: str
    score: float = NEUTRAL_SCORE
    confidence: float = 0.0
    data_points_count: int = 0
    last_updated: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict) -> "ContextDomainScore":
        return cls(**d)


@dataclass
class HybridSignalRecord:
    """Latest observation of one signal type for one domain, kept for display."""
    domain_id: str
    signal_type: str
    score: float
    confidence: float
    weight_used: float
    evidence: Optional[str] = None
    matched_words: List[str] = field(default_factory=list)
    prototype_similarity: Optional[float] = None
    recorded_at: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict) -> "HybridSignalRecord":
        return cls(**d)


class DomainScoreStore:
    """
    Aggregate per-domain scores with confidence factors.

    Domains are created lazily at the neutral prior the first time they
    are referenced and are only removed by reset().
    """

    def __init__(self, on_change: Optional[Callable[[], None]] = None):
        self._scores: Dict[str, DomainScore] = {}
        self._factors: Dict[str, Dict[str, ConfidenceFactor]] = {}
        self._locks = KeyedLocks()
        self._create_lock = threading.Lock()
        self._on_change = on_change

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def get(self, domain_id: str) -> DomainScore:
        """Return the domain's score, creating the neutral prior if needed."""
        with self._create_lock:
            entry = self._scores.get(domain_id)
            if entry is None:
                entry = self._scores[domain_id] = DomainScore(
                    domain_id=domain_id, category=get_domain_category(domain_id)
                )
            return entry

    def update_domain_score(self, domain_id: str, new_score: float, new_data_points: int) -> DomainScore:
        """
        Fold a new contribution into the domain's weighted mean.

        Args:
            domain_id: Domain to update
            new_score: Contributed score in [0, 1]
            new_data_points: Sample weight of the contribution

        Returns:
            The updated DomainScore (unchanged if new_data_points <= 0)
        """
        entry = self.get(domain_id)
        if new_data_points <= 0:
            return entry
        with self._locks(domain_id):
            entry.score, entry.data_points_count = weighted_mean_update(
                entry.score, entry.data_points_count, new_score, new_data_points
            )
            entry.last_updated = _now()
        self._notify()
        return entry

    def set_confidence_factor(
        self, domain_id: str, name: str, value: float, weight: Optional[float] = None
    ) -> None:
        """Set one named confidence factor for a domain."""
        if name not in CONFIDENCE_FACTORS:
            raise ValueError(f"Unknown confidence factor: {name}")
        self.get(domain_id)
        with self._locks(domain_id):
            factors = self._factors.setdefault(domain_id, {})
            factor = factors.get(name) or ConfidenceFactor(name)
            factor.value = max(0.0, min(1.0, float(value)))
            if weight is not None:
                factor.weight = float(weight)
            factors[name] = factor
        self._notify()

    def has_confidence_factor(self, domain_id: str, name: str) -> bool:
        return name in self._factors.get(domain_id, {})

    def get_confidence_factors(self, domain_id: str) -> Dict[str, ConfidenceFactor]:
        """All four factors for a domain; unset factors read as value 0."""
        stored = self._factors.get(domain_id, {})
        return {name: stored.get(name, ConfidenceFactor(name)) for name in CONFIDENCE_FACTORS}

    def calculate_confidence(self, domain_id: str) -> float:
        """
        Weighted mean of the domain's confidence factors, stored on the score.

        Returns:
            Confidence in [0, 1]
        """
        factors = self.get_confidence_factors(domain_id).values()
        total_weight = sum(f.weight for f in factors)
        confidence = sum(f.value * f.weight for f in factors) / total_weight if total_weight > 0 else 0.0
        entry = self.get(domain_id)
        with self._locks(domain_id):
            entry.confidence = confidence
        self._notify()
        return confidence

    def all_scores(self) -> List[DomainScore]:
        with self._create_lock:
            return list(self._scores.values())

    def score_map(self, populated_only: bool = True) -> Dict[str, float]:
        """Domain id -> score, by default only for domains with data."""
        return {
            s.domain_id: s.score
            for s in self.all_scores()
            if s.data_points_count > 0 or not populated_only
        }

    def reset(self) -> None:
        with self._create_lock:
            self._scores = {}
            self._factors = {}
        self._notify()

    def to_records(self) -> Dict[str, List[Dict]]:
        return {
            "domain_scores": [s.to_dict() for s in self.all_scores()],
            "confidence_factors": [
                {"domain_id": domain, **asdict(factor)}
                for domain, factors in self._factors.items()
                for factor in factors.values()
            ],
        }

    def load_records(self, scores: Iterable[Dict], factors: Iterable[Dict] = ()) -> None:
        with self._create_lock:
            self._scores = {d["domain_id"]: DomainScore.from_dict(d) for d in scores}
            self._factors = {}
            for record in factors:
                record = dict(record)
                domain = record.pop("domain_id")
                self._factors.setdefault(domain, {})[record["name"]] = ConfidenceFactor(**record)


class ContextDomainScoreStore:
    """
    Per-(domain, context) weighted means.

    Every domain x context pair is seeded with the neutral prior.
    Confidence grows with sample count: min(1, log10(count + 1) / 2).
    """

    def __init__(
        self,
        contexts: Iterable[str],
        domains: Iterable[str] = PSYCHOLOGICAL_DOMAINS,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.contexts = tuple(contexts)
        self.domains = tuple(domains)
        self._locks = KeyedLocks()
        self._on_change = on_change
        self._scores: Dict[Tuple[str, str], ContextDomainScore] = {}
        self._seed()

    def _seed(self) -> None:
        self._scores = {
            (domain, context): ContextDomainScore(domain_id=domain, context_type=context)
            for domain in self.domains
            for context in self.contexts
        }

    def get(self, domain_id: str, context_type: str) -> ContextDomainScore:
        key = (domain_id, context_type)
        entry = self._scores.get(key)
        if entry is None:
            with self._locks("__create__"):
                entry = self._scores.setdefault(key, ContextDomainScore(domain_id, context_type))
        return entry

    def update_context_domain_score(
        self, domain_id: str, context_type: str, new_score: float, new_data_points: int
    ) -> ContextDomainScore:
        """Fold a contribution into one (domain, context) weighted mean."""
        entry = self.get(domain_id, context_type)
        if new_data_points <= 0:
            return entry
        with self._locks((domain_id, context_type)):
            entry.score, entry.data_points_count = weighted_mean_update(
                entry.score, entry.data_points_count, new_score, new_data_points
            )
            entry.confidence = min(1.0, math.log10(entry.data_points_count + 1) / 2)
            entry.last_updated = _now()
        if self._on_change is not None:
            self._on_change()
        return entry

    def for_domain(self, domain_id: str, populated_only: bool = True) -> List[ContextDomainScore]:
        """Scores of a domain across contexts, in context order."""
        entries = [self._scores[(domain_id, c)] for c in self.contexts if (domain_id, c) in self._scores]
        return [e for e in entries if e.data_points_count > 0 or not populated_only]

    def for_context(self, context_type: str, populated_only: bool = True) -> List[ContextDomainScore]:
        """Scores of every domain within one context, in domain order."""
        entries = [self._scores[(d, context_type)] for d in self.domains if (d, context_type) in self._scores]
        return [e for e in entries if e.data_points_count > 0 or not populated_only]

    def all_scores(self) -> List[ContextDomainScore]:
        return list(self._scores.values())

    def reset(self) -> None:
        self._seed()
        if self._on_change is not None:
            self._on_change()

    def to_records(self) -> List[Dict]:
        return [s.to_dict() for s in self._scores.values() if s.data_points_count > 0]

    def load_records(self, records: Iterable[Dict]) -> None:
        self._seed()
        for record in records:
            entry = ContextDomainScore.from_dict(record)
            self._scores[(entry.domain_id, entry.context_type)] = entry


class SignalRecordStore:
    """Latest HybridSignalRecord per (domain, signal type)."""

    def __init__(self, on_change: Optional[Callable[[], None]] = None):
        self._records: Dict[Tuple[str, str], HybridSignalRecord] = {}
        self._lock = threading.Lock()
        self._on_change = on_change

    def upsert(self, record: HybridSignalRecord) -> None:
        if record.recorded_at is None:
            record.recorded_at = _now()
        with self._lock:
            self._records[(record.domain_id, record.signal_type)] = record
        if self._on_change is not None:
            self._on_change()

    def for_domain(self, domain_id: str) -> List[HybridSignalRecord]:
        with self._lock:
            return [r for (d, _), r in self._records.items() if d == domain_id]

    def get(self, domain_id: str, signal_type: str) -> Optional[HybridSignalRecord]:
        with self._lock:
            return self._records.get((domain_id, signal_type))

    def reset(self) -> None:
        with self._lock:
            self._records = {}

    def to_records(self) -> List[Dict]:
        with self._lock:
            return [r.to_dict() for r in self._records.values()]

    def load_records(self, records: Iterable[Dict]) -> None:
        with self._lock:
            self._records = {}
            for d in records:
                record = HybridSignalRecord.from_dict(d)
                self._records[(record.domain_id, record.signal_type)] = record
