"""
Prompt construction and response parsing for deep (generative-model) analysis.

Responses are parsed into a tagged result: AnalysisOk carries per-domain
assessments, AnalysisErr carries a failure kind. Callers branch on the
type instead of probing an untyped JSON blob.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Sequence, Union

from ..domains import PSYCHOLOGICAL_DOMAINS

logger = logging.getLogger(__name__)

DEFAULT_SCORE = 0.5
DEFAULT_CONFIDENCE = 0.2

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

_OUTPUT_TEMPLATE = "{" + ",".join(
    f'"{domain}":{{"score":X,"confidence":X,"evidence":"..."}}' for domain in PSYCHOLOGICAL_DOMAINS
) + "}"

DEEP_ANALYSIS_PROMPT = """Analyze these messages for psychological traits. Score each trait 0.0-1.0:
- 0.0-0.3 = LOW (absent/weak indicators)
- 0.4-0.6 = NEUTRAL (unclear/mixed)
- 0.7-1.0 = HIGH (strong indicators)

LOOK FOR:
- Curiosity/questions = high openness
- Planning/organization = high conscientiousness
- Social engagement = high extraversion
- Empathy/kindness = high agreeableness
- Worry/anxiety = high neuroticism
- Follow-up questions = high information_processing
- "Interesting/fascinating" = high openness + interests
- Systematic inquiry = high cognitive_abilities

Messages:
{MESSAGES}

Vary scores based on evidence. Do not use 0.5 for everything.
If there is no evidence for a trait, use 0.5 with LOW confidence (0.2-0.3).
Keep each evidence string to one short sentence quoting the message.

Output JSON only (no other text):
""" + _OUTPUT_TEMPLATE


class AnalysisErrorKind(str, Enum):
    """Why a deep analysis batch produced no signal."""
    UNAVAILABLE = "unavailable"
    BUSY = "busy"
    EMPTY_BATCH = "empty_batch"
    GENERATION_FAILED = "generation_failed"
    NO_JSON = "no_json"
    INVALID_JSON = "invalid_json"
    NO_DOMAINS = "no_domains"


@dataclass(frozen=True)
class DomainAssessment:
    """One domain's score, confidence and evidence from the model."""
    score: float
    confidence: float
    evidence: Optional[str] = None


@dataclass(frozen=True)
class AnalysisOk:
    domains: Dict[str, DomainAssessment]
    message_count: int
    message_ids: tuple = field(default_factory=tuple)
    messages: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class AnalysisErr:
    kind: AnalysisErrorKind
    detail: str = ""


AnalysisResult = Union[AnalysisOk, AnalysisErr]


def format_messages(messages: Sequence[str]) -> str:
    """Number and quote messages, separated by blank lines."""
    return "\n\n".join(f'Message {i + 1}: "{content}"' for i, content in enumerate(messages))


def build_prompt(messages: Sequence[str]) -> str:
    return DEEP_ANALYSIS_PROMPT.replace("{MESSAGES}", format_messages(messages))


def _clamp_unit(value, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return max(0.0, min(1.0, float(value)))


def parse_analysis_response(
    text: str,
    message_count: int,
    message_ids: Sequence = (),
    messages: Sequence[str] = (),
) -> AnalysisResult:
    """
    Parse a model response into a tagged result.

    The outermost {...} span is decoded as JSON. Known domains with an
    object value become assessments; scores and confidences are clamped
    into [0, 1]. Unknown keys are ignored.

    Args:
        text: Raw model output
        message_count: Number of messages in the analysed window
        message_ids: Ids of the analysed messages
        messages: Texts of the analysed messages

    Returns:
        AnalysisOk or AnalysisErr
    """
    match = _JSON_OBJECT.search(text or "")
    if match is None:
        return AnalysisErr(AnalysisErrorKind.NO_JSON, "No JSON object in model response")

    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        return AnalysisErr(AnalysisErrorKind.INVALID_JSON, str(e))

    if not isinstance(payload, dict):
        return AnalysisErr(AnalysisErrorKind.INVALID_JSON, "Top-level JSON value is not an object")

    domains = {}
    for domain in PSYCHOLOGICAL_DOMAINS:
        entry = payload.get(domain)
        if not isinstance(entry, dict):
            continue
        evidence = entry.get("evidence")
        domains[domain] = DomainAssessment(
            score=_clamp_unit(entry.get("score"), DEFAULT_SCORE),
            confidence=_clamp_unit(entry.get("confidence"), DEFAULT_CONFIDENCE),
            evidence=str(evidence) if evidence else None,
        )

    if not domains:
        return AnalysisErr(AnalysisErrorKind.NO_DOMAINS, "Response contained no known domains")

    logger.debug(f"Parsed deep analysis for {len(domains)} domains")
    return AnalysisOk(
        domains=domains,
        message_count=message_count,
        message_ids=tuple(message_ids),
        messages=tuple(messages),
    )
