"""Deep (generative-model) signal: batching, prompting and parsing."""

from .adapter import DeepSignalAdapter, QueuedMessage
from .client import GenerativeModel, OpenAICompatibleModel
from .parsing import (
    AnalysisOk,
    AnalysisErr,
    AnalysisErrorKind,
    AnalysisResult,
    DomainAssessment,
    build_prompt,
    parse_analysis_response,
)

__all__ = [
    "DeepSignalAdapter",
    "QueuedMessage",
    "GenerativeModel",
    "OpenAICompatibleModel",
    "AnalysisOk",
    "AnalysisErr",
    "AnalysisErrorKind",
    "AnalysisResult",
    "DomainAssessment",
    "build_prompt",
    "parse_analysis_response",
]
