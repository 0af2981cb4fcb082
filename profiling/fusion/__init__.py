"""Signal fusion module for combining lexicon, embedding and LLM signals."""

from .signal_fusion import (
    SignalFusionEngine,
    FusionWeights,
    FusionResult,
    SignalObservation,
    SignalType,
    signal_agreement,
    confidence_interval,
)

__all__ = [
    "SignalFusionEngine",
    "FusionWeights",
    "FusionResult",
    "SignalObservation",
    "SignalType",
    "signal_agreement",
    "confidence_interval",
]
