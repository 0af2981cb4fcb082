"""Context detection and cross-context variance analysis."""

from .classifier import (
    ContextClassifier,
    ContextDetectionResult,
    ContextType,
    CONTEXT_INDICATORS,
    format_context_name,
)
from .variance import (
    ContextVarianceAnalyzer,
    ContextVariation,
    ContextInsight,
    ContextStatistics,
    ContextDetectionHistory,
    is_significant,
)

__all__ = [
    "ContextClassifier",
    "ContextDetectionResult",
    "ContextType",
    "CONTEXT_INDICATORS",
    "format_context_name",
    "ContextVarianceAnalyzer",
    "ContextVariation",
    "ContextInsight",
    "ContextStatistics",
    "ContextDetectionHistory",
    "is_significant",
]
