"""
Context variance analysis.

Identifies traits that are expressed differently across contexts. For
each domain with at least two populated contexts:

    overall_score   = confidence*count weighted mean of per-context scores
    variation_score = population std of the raw per-context scores
    significant     = variation_score > threshold (strict, default 0.10)

Domains with fewer than two populated contexts are skipped, not reported
as zero variance. Reports are derived on demand and never persisted.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from ..domains import PSYCHOLOGICAL_DOMAINS, get_domain_display_name
from ..storage.domain_store import ContextDomainScoreStore
from .classifier import ContextDetectionResult, ContextType, DEFAULT_CONTEXT, format_context_name

logger = logging.getLogger(__name__)

SIGNIFICANCE_THRESHOLD = 0.10


def is_significant(variation_score: float, threshold: float = SIGNIFICANCE_THRESHOLD) -> bool:
    """Strictly greater than the threshold counts as context-dependent."""
    return variation_score > threshold


@dataclass
class ContextVariation:
    """Derived report of how one domain varies across contexts."""
    domain_id: str
    domain_name: str
    overall_score: float
    context_scores: Dict[str, float]
    variation_score: float
    significant: bool
    highest_context: str
    lowest_context: str

    def to_dict(self) -> Dict:
        return {
            "domain_id": self.domain_id,
            "domain_name": self.domain_name,
            "overall_score": float(self.overall_score),
            "context_scores": {k: float(v) for k, v in self.context_scores.items()},
            "variation_score": float(self.variation_score),
            "significant": bool(self.significant),
            "highest_context": self.highest_context,
            "lowest_context": self.lowest_context,
        }


@dataclass
class ContextInsight:
    domain_id: str
    domain_name: str
    insight: str
    high_context: str
    low_context: str
    difference: float


@dataclass
class ContextStatistics:
    """Aggregate view of the context detection history."""
    total_detections: int
    context_distribution: Dict[str, int]
    average_confidence: float
    most_common_context: str

    def to_dict(self) -> Dict:
        return {
            "total_detections": self.total_detections,
            "context_distribution": dict(self.context_distribution),
            "average_confidence": float(self.average_confidence),
            "most_common_context": self.most_common_context,
        }


@dataclass
class ContextDetectionRecord:
    message_id: Optional[str]
    session_id: Optional[str]
    detected_context: str
    confidence: float
    context_scores: Dict[str, float] = field(default_factory=dict)
    detected_at: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "message_id": self.message_id,
            "session_id": self.session_id,
            "detected_context": self.detected_context,
            "confidence": float(self.confidence),
            "context_scores": dict(self.context_scores),
            "detected_at": self.detected_at,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "ContextDetectionRecord":
        return cls(**d)


class ContextDetectionHistory:
    """Append-only log of context detections."""

    def __init__(self):
        self._records: List[ContextDetectionRecord] = []
        self._lock = threading.Lock()

    def record(
        self,
        result: ContextDetectionResult,
        message_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> ContextDetectionRecord:
        entry = ContextDetectionRecord(
            message_id=message_id,
            session_id=session_id,
            detected_context=result.primary_context.value,
            confidence=result.confidence,
            context_scores={c.value: s for c, s in result.context_scores.items() if s > 0},
            detected_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._records.append(entry)
        return entry

    def records(self) -> List[ContextDetectionRecord]:
        with self._lock:
            return list(self._records)

    def statistics(self) -> ContextStatistics:
        """Distribution, mean confidence and most common detected context."""
        records = self.records()
        distribution = {c.value: 0 for c in ContextType}
        for r in records:
            distribution[r.detected_context] = distribution.get(r.detected_context, 0) + 1

        most_common = DEFAULT_CONTEXT.value
        max_count = 0
        for context, count in distribution.items():
            if count > max_count:
                max_count = count
                most_common = context

        return ContextStatistics(
            total_detections=len(records),
            context_distribution=distribution,
            average_confidence=float(np.mean([r.confidence for r in records])) if records else 0.0,
            most_common_context=most_common,
        )

    def reset(self) -> None:
        with self._lock:
            self._records = []

    def to_records(self) -> List[Dict]:
        return [r.to_dict() for r in self.records()]

    def load_records(self, records: Iterable[Dict]) -> None:
        with self._lock:
            self._records = [ContextDetectionRecord.from_dict(r) for r in records]


class ContextVarianceAnalyzer:
    """
    Computes cross-context variation from a ContextDomainScoreStore.

    Attributes:
        store: Per-context score store to read
        threshold: Significance threshold on the population std
    """

    def __init__(self, store: ContextDomainScoreStore, threshold: float = SIGNIFICANCE_THRESHOLD):
        self.store = store
        self.threshold = threshold

    def analyze_domain(self, domain_id: str) -> Optional[ContextVariation]:
        """
        Variation report for one domain.

        Returns:
            ContextVariation, or None with fewer than two populated contexts
        """
        entries = self.store.for_domain(domain_id, populated_only=True)
        if len(entries) < 2:
            return None

        scores = np.array([e.score for e in entries], dtype=float)
        weights = np.array([e.confidence * e.data_points_count for e in entries], dtype=float)
        overall = float(np.average(scores, weights=weights)) if weights.sum() > 0 else 0.5

        # exact zero for equal scores
        variation = 0.0 if np.ptp(scores) == 0 else float(np.std(scores))

        highest = entries[0]
        lowest = entries[0]
        for e in entries[1:]:
            if e.score > highest.score:
                highest = e
            if e.score < lowest.score:
                lowest = e

        return ContextVariation(
            domain_id=domain_id,
            domain_name=get_domain_display_name(domain_id),
            overall_score=overall,
            context_scores={e.context_type: e.score for e in entries},
            variation_score=variation,
            significant=is_significant(variation, self.threshold),
            highest_context=highest.context_type,
            lowest_context=lowest.context_type,
        )

    def analyze(self, domains: Iterable[str] = PSYCHOLOGICAL_DOMAINS) -> List[ContextVariation]:
        """All reportable domains, most variable first."""
        variations = [v for v in (self.analyze_domain(d) for d in domains) if v is not None]
        variations.sort(key=lambda v: v.variation_score, reverse=True)
        return variations

    def context_dependent_domains(self) -> List[ContextVariation]:
        return [v for v in self.analyze() if v.significant]

    def generate_insights(self) -> List[ContextInsight]:
        """Plain-language insights for each context-dependent domain."""
        insights = []
        for v in self.context_dependent_domains():
            high = v.context_scores.get(v.highest_context, 0.5)
            low = v.context_scores.get(v.lowest_context, 0.5)
            high_name = format_context_name(v.highest_context)
            low_name = format_context_name(v.lowest_context)

            if v.domain_id == "big_five_extraversion":
                text = (
                    f"You tend to be more extraverted in {high_name} situations ({high * 100:.0f}%) "
                    f"compared to {low_name} contexts ({low * 100:.0f}%)."
                )
            elif v.domain_id == "risk_tolerance":
                text = (
                    f"Your risk tolerance varies significantly: higher in {high_name} "
                    f"({high * 100:.0f}%) and lower in {low_name} ({low * 100:.0f}%)."
                )
            elif v.domain_id == "communication_style":
                style = "direct" if high > 0.5 else "indirect"
                text = (
                    f"Your communication style adapts to context: more {style} in "
                    f"{high_name} vs {low_name} situations."
                )
            else:
                text = (
                    f"Your {v.domain_name.lower()} varies across contexts: {high * 100:.0f}% in "
                    f"{high_name} vs {low * 100:.0f}% in {low_name}."
                )

            insights.append(ContextInsight(
                domain_id=v.domain_id,
                domain_name=v.domain_name,
                insight=text,
                high_context=v.highest_context,
                low_context=v.lowest_context,
                difference=high - low,
            ))
        return insights

    def to_frame(self, variations: Optional[List[ContextVariation]] = None) -> pd.DataFrame:
        """
        Tabular variation report: one row per domain, one column per context.

        Args:
            variations: Precomputed report (computed if omitted)

        Returns:
            DataFrame sorted by variation_score descending
        """
        variations = self.analyze() if variations is None else variations
        columns = [
            "domain_id", "domain_name", "overall_score", "variation_score",
            "significant", "highest_context", "lowest_context",
        ]
        rows = []
        for v in variations:
            row = {c: getattr(v, c) for c in columns}
            row.update({f"score_{context}": score for context, score in v.context_scores.items()})
            rows.append(row)
        if not rows:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame(rows)
