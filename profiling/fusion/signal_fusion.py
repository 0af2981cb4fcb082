"""
Confidence-weighted fusion of lexicon, embedding and LLM signals.

This module combines the independent per-domain signals into a single
score and confidence. Each signal carries its own confidence; the user
controls a relative weight per signal type.

Fusion Formula:
    final_score      = sum(score_i * weight_i * conf_i) / sum(weight_i * conf_i)
    final_confidence = sum(conf_i * weight_i) / sum(weight_i)

Absent signals simply drop out of both sums. When the score denominator
is zero the neutral prior (score 0.5, confidence 0) is returned.

Weights are integer percentages that sum to 100. Changing one weight
rescales the other two proportionally; rounding residue goes to the
untouched weight that is currently largest.
"""

import json
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Iterable, List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 0.5
NEUTRAL_CONFIDENCE = 0.0
WEIGHT_TOTAL = 100


class SignalType(str, Enum):
    """Signal sources, in canonical order."""
    LEXICON = "lexicon"
    EMBEDDING = "embedding"
    LLM = "llm"


SIGNAL_ORDER: Tuple[SignalType, ...] = (SignalType.LEXICON, SignalType.EMBEDDING, SignalType.LLM)


@dataclass
class SignalObservation:
    """
    One signal's reading for one domain.

    Transient: produced per fusion cycle and never persisted directly.
    """
    domain_id: str
    signal_type: SignalType
    score: float
    confidence: float
    weight: float
    evidence: Optional[str] = None
    matched_words: List[str] = field(default_factory=list)
    prototype_similarity: Optional[float] = None


@dataclass
class FusionResult:
    """Fused estimate for one domain."""
    domain_id: str
    score: float
    confidence: float
    observations: List[SignalObservation] = field(default_factory=list)

    @property
    def is_neutral(self) -> bool:
        """True when no signal carried weight (the neutral prior)."""
        return not any(o.weight * o.confidence > 0 for o in self.observations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain_id": self.domain_id,
            "score": float(self.score),
            "confidence": float(self.confidence),
            "signals": {o.signal_type.value: float(o.score) for o in self.observations},
        }


@dataclass
class FusionWeights:
    """
    User-tunable signal weights, as percentages.

    Attributes:
        lexicon: Weight of the lexicon signal
        embedding: Weight of the embedding signal
        llm: Weight of the generative-model signal
    """
    lexicon: int = 20
    embedding: int = 30
    llm: int = 50

    def get(self, signal: SignalType) -> int:
        return getattr(self, SignalType(signal).value)

    def total(self) -> int:
        return self.lexicon + self.embedding + self.llm

    def fraction(self, signal: SignalType) -> float:
        """Weight as a fraction of the total (0 if all weights are 0)."""
        total = self.total()
        return self.get(signal) / total if total else 0.0

    def validate(self) -> None:
        """Validate configuration values."""
        for signal in SIGNAL_ORDER:
            value = self.get(signal)
            if not 0 <= value <= WEIGHT_TOTAL:
                raise ValueError(f"{signal.value} weight must be in [0, 100], got {value}")
        if self.total() != WEIGHT_TOTAL:
            raise ValueError(f"Weights must sum to 100, got {self.total()}")

    def adjust(self, signal: SignalType, value: float) -> "FusionWeights":
        """
        Set one weight and rescale the other two to keep the sum at 100.

        The untouched weights absorb the remainder in proportion to their
        current values (equally if both are 0). Any rounding residue is
        applied to the untouched weight that is currently largest; ties go
        to the earlier signal in canonical order.

        Args:
            signal: Weight being changed
            value: New percentage for that signal

        Returns:
            New FusionWeights summing to 100
        """
        signal = SignalType(signal)
        new_value = int(round(max(0.0, min(float(WEIGHT_TOTAL), float(value)))))
        others = [s for s in SIGNAL_ORDER if s != signal]
        remainder = WEIGHT_TOTAL - new_value
        other_total = sum(self.get(s) for s in others)

        values = {signal: new_value}
        for s in others:
            share = self.get(s) / other_total if other_total else 1 / len(others)
            values[s] = int(round(remainder * share))

        residual = WEIGHT_TOTAL - sum(values.values())
        if residual:
            largest = max(others, key=lambda s: (self.get(s), -SIGNAL_ORDER.index(s)))
            values[largest] += residual

        return FusionWeights(**{s.value: v for s, v in values.items()})

    def normalized(self) -> "FusionWeights":
        """
        Redistribute weights proportionally so they sum to 100.

        Invalid totals are corrected rather than rejected; all-zero or
        negative weights fall back to the defaults.
        """
        raw = {s: max(0.0, float(self.get(s))) for s in SIGNAL_ORDER}
        total = sum(raw.values())
        if total <= 0:
            logger.warning("Fusion weights are all zero, falling back to defaults")
            return FusionWeights()
        if total == WEIGHT_TOTAL and all(float(v).is_integer() for v in raw.values()):
            return FusionWeights(**{s.value: int(v) for s, v in raw.items()})

        values = {s: int(round(v / total * WEIGHT_TOTAL)) for s, v in raw.items()}
        residual = WEIGHT_TOTAL - sum(values.values())
        if residual:
            largest = max(SIGNAL_ORDER, key=lambda s: (raw[s], -SIGNAL_ORDER.index(s)))
            values[largest] += residual
        logger.info(f"Redistributed fusion weights summing to {total} -> {values}")
        return FusionWeights(**{s.value: v for s, v in values.items()})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"lexicon": self.lexicon, "embedding": self.embedding, "llm": self.llm}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FusionWeights":
        """Create from dictionary, correcting totals other than 100."""
        return cls(
            lexicon=d.get("lexicon", 20),
            embedding=d.get("embedding", 30),
            llm=d.get("llm", 50),
        ).normalized()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "FusionWeights":
        """Create from main config dictionary."""
        return cls.from_dict(config.get("fusion", {}).get("weights", {}))

    def save(self, filepath: str) -> None:
        """Save to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved fusion weights to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "FusionWeights":
        """Load from JSON file."""
        with open(filepath, "r") as f:
            d = json.load(f)
        return cls.from_dict(d)


def signal_agreement(observations: Iterable[SignalObservation]) -> float:
    """
    Agreement between signals: 1 - 4 * variance of their scores, floored at 0.

    A single (or no) signal counts as full agreement.
    """
    scores = [o.score for o in observations]
    if len(scores) < 2:
        return 1.0
    return float(max(0.0, 1.0 - np.var(scores) * 4))


def confidence_interval(result: FusionResult) -> Tuple[float, float]:
    """
    Display interval around a fused score.

    Widens as confidence falls and as the signals disagree.
    """
    agreement = signal_agreement(result.observations)
    margin = 0.1 + (1 - result.confidence) * (1 - agreement * 0.5) * 0.3
    return max(0.0, result.score - margin), min(1.0, result.score + margin)


class SignalFusionEngine:
    """
    Fuses per-domain signal observations.

    Attributes:
        weights: Current FusionWeights
    """

    def __init__(self, weights: Optional[FusionWeights] = None):
        """
        Initialize the fusion engine.

        Args:
            weights: Signal weights (defaults to 20/30/50)
        """
        self.weights = (weights or FusionWeights()).normalized()
        logger.info(f"Initialized SignalFusionEngine with weights={self.weights.to_dict()}")

    def set_weight(self, signal: SignalType, value: float) -> FusionWeights:
        """Change one weight, rebalancing the others."""
        self.weights = self.weights.adjust(signal, value)
        logger.info(f"Fusion weights updated: {self.weights.to_dict()}")
        return self.weights

    def observe(
        self,
        domain_id: str,
        signal_type: SignalType,
        score: float,
        confidence: float,
        evidence: Optional[str] = None,
        matched_words: Optional[List[str]] = None,
        prototype_similarity: Optional[float] = None,
    ) -> SignalObservation:
        """Build an observation carrying the current weight for its signal type."""
        signal_type = SignalType(signal_type)
        return SignalObservation(
            domain_id=domain_id,
            signal_type=signal_type,
            score=float(score),
            confidence=float(confidence),
            weight=self.weights.fraction(signal_type),
            evidence=evidence,
            matched_words=list(matched_words or []),
            prototype_similarity=prototype_similarity,
        )

    def fuse(self, domain_id: str, observations: List[SignalObservation]) -> FusionResult:
        """
        Fuse the observations for one domain.

        Args:
            domain_id: Domain being fused
            observations: 0-3 observations for that domain

        Returns:
            FusionResult (neutral prior when nothing carries weight)
        """
        for o in observations:
            if o.domain_id != domain_id:
                raise ValueError(f"Observation for {o.domain_id} passed to fuse({domain_id})")

        weighted = sum(o.weight * o.confidence for o in observations)
        if weighted <= 0:
            return FusionResult(domain_id, NEUTRAL_SCORE, NEUTRAL_CONFIDENCE, list(observations))

        score = sum(o.score * o.weight * o.confidence for o in observations) / weighted
        total_weight = sum(o.weight for o in observations)
        confidence = sum(o.confidence * o.weight for o in observations) / total_weight

        return FusionResult(
            domain_id=domain_id,
            score=min(1.0, max(0.0, score)),
            confidence=min(1.0, max(0.0, confidence)),
            observations=list(observations),
        )

    def fuse_all(self, observations: Iterable[SignalObservation]) -> Dict[str, FusionResult]:
        """Group observations by domain (first-seen order) and fuse each group."""
        grouped: Dict[str, List[SignalObservation]] = OrderedDict()
        for o in observations:
            grouped.setdefault(o.domain_id, []).append(o)
        return {domain: self.fuse(domain, obs) for domain, obs in grouped.items()}
