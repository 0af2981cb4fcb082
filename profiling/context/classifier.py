"""
Rule-based conversation context detection.

Each context owns a keyword list and a regex pattern list. A keyword hit
adds 1 * context_weight, a pattern hit adds 2 * context_weight. The
primary context is the highest-scoring one (ties go to the earlier
context in enumeration order; social_casual when nothing matched).

    confidence = min(1, max_score / (total_score * 0.5))   single message
    confidence = min(1, max_score / (total_score * 0.4))   message batch
    confidence = 0.3                                        no evidence
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Pattern, Sequence, Tuple

from ..lexicon.extractor import find_matches, tokenize

logger = logging.getLogger(__name__)

NO_EVIDENCE_CONFIDENCE = 0.3
SINGLE_MESSAGE_MULTIPLIER = 0.5
MULTI_MESSAGE_MULTIPLIER = 0.4


class ContextType(str, Enum):
    """Conversation contexts, in tie-break priority order."""
    WORK_PROFESSIONAL = "work_professional"
    SOCIAL_CASUAL = "social_casual"
    PERSONAL_INTIMATE = "personal_intimate"
    CREATIVE_ARTISTIC = "creative_artistic"
    INTELLECTUAL_ACADEMIC = "intellectual_academic"
    STRESSFUL_CHALLENGING = "stressful_challenging"
    LEISURE_RECREATION = "leisure_recreation"
    FINANCIAL_ECONOMIC = "financial_economic"
    HEALTH_WELLNESS = "health_wellness"
    FAMILY_DOMESTIC = "family_domestic"


DEFAULT_CONTEXT = ContextType.SOCIAL_CASUAL

CONTEXT_DISPLAY_NAMES: Dict[ContextType, str] = {
    ContextType.WORK_PROFESSIONAL: "work/professional",
    ContextType.SOCIAL_CASUAL: "social/casual",
    ContextType.PERSONAL_INTIMATE: "personal/intimate",
    ContextType.CREATIVE_ARTISTIC: "creative/artistic",
    ContextType.INTELLECTUAL_ACADEMIC: "intellectual/academic",
    ContextType.STRESSFUL_CHALLENGING: "stressful/challenging",
    ContextType.LEISURE_RECREATION: "leisure/recreational",
    ContextType.FINANCIAL_ECONOMIC: "financial/economic",
    ContextType.HEALTH_WELLNESS: "health/wellness",
    ContextType.FAMILY_DOMESTIC: "family/domestic",
}


def format_context_name(context) -> str:
    """Display name for a context, e.g. "work/professional"."""
    try:
        return CONTEXT_DISPLAY_NAMES[ContextType(context)]
    except ValueError:
        return str(context)


@dataclass
class ContextIndicators:
    keywords: Tuple[str, ...]
    patterns: Tuple[Pattern, ...]
    weight: float = 1.0


def _patterns(*sources: str) -> Tuple[Pattern, ...]:
    return tuple(re.compile(source, re.IGNORECASE) for source in sources)


CONTEXT_INDICATORS: Dict[ContextType, ContextIndicators] = {
    ContextType.WORK_PROFESSIONAL: ContextIndicators(
        keywords=(
            "work", "job", "boss", "colleague", "meeting", "project", "deadline",
            "client", "manager", "office", "career", "promotion", "salary", "interview",
            "company", "business", "corporate", "professional", "team", "coworker",
            "presentation", "report", "email", "schedule", "performance", "review",
        ),
        patterns=_patterns(
            r"\b(my|the)\s+boss\b",
            r"\bat\s+work\b",
            r"\b(job|work)\s+(interview|application)\b",
            r"\bwork(-|\s)?(life|from\s+home)\b",
        ),
        weight=1.0,
    ),
    ContextType.SOCIAL_CASUAL: ContextIndicators(
        keywords=(
            "friend", "friends", "party", "hangout", "fun", "bar", "club", "game",
            "weekend", "chill", "hang", "buddy", "bro", "dude", "mate", "crew",
            "social", "gathering", "event", "concert", "festival", "catch up",
        ),
        patterns=_patterns(
            r"\bwith\s+(my\s+)?friends\b",
            r"\blet'?s\s+(hang|chill|go\s+out)\b",
            r"\b(party|parties)\b",
        ),
        weight=1.0,
    ),
    ContextType.PERSONAL_INTIMATE: ContextIndicators(
        keywords=(
            "love", "relationship", "partner", "boyfriend", "girlfriend", "spouse",
            "husband", "wife", "dating", "romantic", "feelings", "emotion", "heart",
            "vulnerable", "trust", "intimate", "personal", "private", "deep",
            "secret", "confide", "soul", "connection", "bond",
        ),
        patterns=_patterns(
            r"\b(my|the)\s+(partner|boyfriend|girlfriend|spouse|husband|wife)\b",
            r"\bin\s+love\b",
            r"\b(i|we)\s+feel\b",
            r"\bopen\s+up\b",
        ),
        weight=1.2,
    ),
    ContextType.CREATIVE_ARTISTIC: ContextIndicators(
        keywords=(
            "art", "create", "creative", "design", "music", "paint", "draw", "write",
            "story", "poem", "song", "compose", "imagine", "inspiration", "artistic",
            "craft", "style", "expression", "aesthetic", "beauty", "photography",
            "film", "movie", "theater", "dance", "sculpt",
        ),
        patterns=_patterns(
            r"\b(creative|artistic)\s+(process|expression|work)\b",
            r"\b(writing|painting|drawing|composing)\b",
            r"\bwork(ing)?\s+on\s+(a|my)\s+(project|piece|art|song)\b",
        ),
        weight=1.0,
    ),
    ContextType.INTELLECTUAL_ACADEMIC: ContextIndicators(
        keywords=(
            "learn", "study", "research", "theory", "concept", "analysis", "logic",
            "science", "philosophy", "debate", "argument", "evidence", "academic",
            "university", "school", "class", "lecture", "professor", "education",
            "knowledge", "intellectual", "think", "reason", "understand", "explain",
        ),
        patterns=_patterns(
            r"\bI\s+(think|believe|argue)\s+that\b",
            r"\b(research|study)\s+(shows?|suggests?)\b",
            r"\b(learn|study)(ing)?\s+(about|how)\b",
            r"\baccording\s+to\b",
        ),
        weight=1.0,
    ),
    ContextType.STRESSFUL_CHALLENGING: ContextIndicators(
        keywords=(
            "stress", "anxious", "worried", "problem", "difficult", "challenge",
            "struggle", "crisis", "conflict", "overwhelm", "pressure", "deadline",
            "emergency", "urgent", "frustrated", "angry", "upset", "fear", "scared",
            "panic", "nervous", "tense", "stuck", "help", "cope",
        ),
        patterns=_patterns(
            r"\b(so|really|very)\s+(stressed|worried|anxious)\b",
            r"\bcan'?t\s+(handle|cope|deal)\b",
            r"\b(help|need)\s+(me|advice)\b",
            r"\bI'?m\s+(struggling|overwhelmed)\b",
        ),
        weight=1.3,
    ),
    ContextType.LEISURE_RECREATION: ContextIndicators(
        keywords=(
            "hobby", "fun", "relax", "vacation", "travel", "game", "sport", "play",
            "enjoy", "entertainment", "movie", "book", "read", "watch", "leisure",
            "weekend", "holiday", "trip", "adventure", "explore", "beach", "nature",
        ),
        patterns=_patterns(
            r"\b(for|just\s+for)\s+fun\b",
            r"\bfree\s+time\b",
            r"\b(hobby|hobbies)\b",
            r"\b(relax|relaxing|vacation)\b",
        ),
        weight=0.9,
    ),
    ContextType.FINANCIAL_ECONOMIC: ContextIndicators(
        keywords=(
            "money", "finance", "invest", "stock", "budget", "save", "spend", "cost",
            "price", "expensive", "cheap", "debt", "loan", "mortgage", "bank",
            "income", "salary", "rich", "poor", "afford", "economy", "market",
            "crypto", "bitcoin", "retirement", "savings",
        ),
        patterns=_patterns(
            r"\$\d+",
            r"\b(save|spend|invest)\s+(money|time)\b",
            r"\b(afford|cost|price)\b",
            r"\bfinancial(ly)?\b",
        ),
        weight=1.0,
    ),
    ContextType.HEALTH_WELLNESS: ContextIndicators(
        keywords=(
            "health", "doctor", "medical", "exercise", "diet", "sleep", "fitness",
            "mental", "therapy", "therapist", "medication", "sick", "pain", "tired",
            "energy", "weight", "gym", "workout", "nutrition", "wellness", "mindful",
            "meditation", "yoga", "stress", "anxiety", "depression",
        ),
        patterns=_patterns(
            r"\b(feel|feeling)\s+(sick|tired|unwell)\b",
            r"\b(mental|physical)\s+health\b",
            r"\b(doctor|therapist)\s*(appointment|visit)?\b",
            r"\b(work\s*out|exercise|gym)\b",
        ),
        weight=1.1,
    ),
    ContextType.FAMILY_DOMESTIC: ContextIndicators(
        keywords=(
            "family", "parent", "mother", "father", "mom", "dad", "child", "kid",
            "son", "daughter", "sibling", "brother", "sister", "home", "house",
            "household", "domestic", "chore", "cook", "clean", "pet", "dog", "cat",
            "relative", "grandparent", "aunt", "uncle", "cousin",
        ),
        patterns=_patterns(
            r"\b(my|the)\s+(family|parents?|mom|dad|kids?|children)\b",
            r"\bat\s+home\b",
            r"\b(brother|sister|sibling)s?\b",
        ),
        weight=1.0,
    ),
}


@dataclass
class ContextDetectionResult:
    """Outcome of classifying one message (or a batch of messages)."""
    primary_context: ContextType
    context_scores: Dict[ContextType, float]
    confidence: float
    detected_keywords: List[str] = field(default_factory=list)
    detected_patterns: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "primary_context": self.primary_context.value,
            "context_scores": {c.value: float(s) for c, s in self.context_scores.items()},
            "confidence": float(self.confidence),
            "detected_keywords": list(self.detected_keywords),
            "detected_patterns": list(self.detected_patterns),
        }


def _dedupe(items: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(items))


class ContextClassifier:
    """
    Classifies messages into one of the fixed conversation contexts.

    Keywords are matched against lexicon tokens (punctuation stripped,
    phrases matched as consecutive tokens); patterns run on the raw text.
    """

    def __init__(self, indicators: Dict[ContextType, ContextIndicators] = None):
        self.indicators = indicators or CONTEXT_INDICATORS

    def score_message(self, text: str) -> Tuple[Dict[ContextType, float], List[str], List[str]]:
        """
        Raw per-context evidence scores for one message.

        Returns:
            Tuple of (scores, detected keywords, detected pattern sources)
        """
        tokens = tokenize(text)
        token_set = set(tokens)
        scores = {context: 0.0 for context in ContextType}
        keywords: List[str] = []
        patterns: List[str] = []

        for context, indicator in self.indicators.items():
            for keyword in indicator.keywords:
                hit = keyword in token_set if " " not in keyword else bool(find_matches(tokens, [keyword]))
                if hit:
                    scores[context] += 1 * indicator.weight
                    keywords.append(keyword)
            for pattern in indicator.patterns:
                if pattern.search(text):
                    scores[context] += 2 * indicator.weight
                    patterns.append(pattern.pattern)

        return scores, keywords, patterns

    @staticmethod
    def _select(scores: Dict[ContextType, float], multiplier: float) -> Tuple[ContextType, float]:
        primary = DEFAULT_CONTEXT
        max_score = 0.0
        for context in ContextType:
            if scores.get(context, 0.0) > max_score:
                max_score = scores[context]
                primary = context

        total = sum(scores.values())
        if total > 0:
            confidence = min(1.0, max_score / (total * multiplier))
        else:
            confidence = NO_EVIDENCE_CONFIDENCE
        return primary, confidence

    def classify(self, text: str) -> ContextDetectionResult:
        """Classify a single message."""
        scores, keywords, patterns = self.score_message(text)
        primary, confidence = self._select(scores, SINGLE_MESSAGE_MULTIPLIER)
        return ContextDetectionResult(
            primary_context=primary,
            context_scores=scores,
            confidence=confidence,
            detected_keywords=_dedupe(keywords),
            detected_patterns=_dedupe(patterns),
        )

    def classify_messages(self, messages: Sequence[str]) -> ContextDetectionResult:
        """
        Classify a batch by summing per-message score vectors.

        The concatenated text is never re-classified.
        """
        totals = {context: 0.0 for context in ContextType}
        keywords: List[str] = []
        patterns: List[str] = []
        for message in messages:
            scores, kw, pt = self.score_message(message)
            for context, score in scores.items():
                totals[context] += score
            keywords.extend(kw)
            patterns.extend(pt)

        primary, confidence = self._select(totals, MULTI_MESSAGE_MULTIPLIER)
        return ContextDetectionResult(
            primary_context=primary,
            context_scores=totals,
            confidence=confidence,
            detected_keywords=_dedupe(keywords),
            detected_patterns=_dedupe(patterns),
        )
