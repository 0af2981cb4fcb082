"""
Lexicon signal extraction.

Scores text by counting matches against fixed psychological word
categories (LIWC-style), then derives per-domain scores from a fixed
linear combination of per-word-count frequencies.

Big Five formulas (each term clamped into [0, 1] before combining):
    openness          = .4*vr + .4*cc + .2*(20*insight)
    conscientiousness = .3*(1-|awps-15|/15) + .3*(1-50*tentative) + .4*(50*causation)
    extraversion      = .2*(50*we) + .2*(50*you) + .3*(30*social) + .3*(30*positive)
    agreeableness     = .3*(30*positive) + .3*(1-30*negative) + .2*(50*you) + .2*(100*family)
    neuroticism       = .3*(30*negative) + .3*(50*anxiety) + .2*(20*i) + .2*(50*tentative)

Confidence grows with the number of analysed samples along a saturating
curve capped at 0.95.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .dictionaries import WORD_CATEGORIES, COMPLEX_WORDS, MARKER_CATEGORIES, DOMAIN_MARKERS

logger = logging.getLogger(__name__)

_STRIP_PATTERN = re.compile(r"[^\w\s']")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")

MAX_CONFIDENCE = 0.95
DENSITY_SCALE = 8.0

# Sub-categories feeding each Big Five domain, used to report matched words
_BIG_FIVE_SOURCES: Dict[str, Tuple[str, ...]] = {
    "big_five_openness": ("insight",),
    "big_five_conscientiousness": ("tentative", "causation"),
    "big_five_extraversion": ("we", "you", "family", "friends", "humans", "positive"),
    "big_five_agreeableness": ("positive", "negative", "you", "family"),
    "big_five_neuroticism": ("negative", "anxiety", "i", "tentative"),
}


def tokenize(text: str) -> List[str]:
    """Lowercase, replace everything but word chars, whitespace and apostrophes, split."""
    return [token for token in _STRIP_PATTERN.sub(" ", text.lower()).split() if token]


def count_sentences(text: str) -> int:
    sentences = [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]
    return max(len(sentences), 1)


def normalize(value: float, min_value: float = 0.0, max_value: float = 1.0) -> float:
    """Map value from [min_value, max_value] onto [0, 1], clamping outside values."""
    if max_value == min_value:
        return 0.0
    return max(0.0, min(1.0, (value - min_value) / (max_value - min_value)))


def sample_size_confidence(sample_size: int) -> float:
    """
    Confidence from sample size via a saturating curve.

    Starts at 0.3 and approaches (never exceeds) 0.95.
    """
    n = max(sample_size, 0)
    return min(MAX_CONFIDENCE, 0.3 + 0.65 * (1 - math.exp(-n / 30)))


def find_matches(tokens: Sequence[str], terms: Sequence[str]) -> List[str]:
    """
    Return every occurrence of a term in the token stream.

    Single words match whole tokens; multi-word terms match consecutive tokens.
    """
    single = {term for term in terms if " " not in term}
    matches = [token for token in tokens if token in single]

    for term in terms:
        parts = term.split()
        if len(parts) < 2:
            continue
        width = len(parts)
        for start in range(len(tokens) - width + 1):
            if list(tokens[start:start + width]) == parts:
                matches.append(term)
    return matches


@dataclass
class LexiconAnalysis:
    """Raw text statistics and category counts for one piece of text."""
    word_count: int
    sentence_count: int
    avg_words_per_sentence: float
    vocabulary_richness: float
    emotional_tone: float
    cognitive_complexity: float
    counts: Dict[str, int] = field(default_factory=dict)
    matches: Dict[str, List[str]] = field(default_factory=dict)

    def frequency(self, category: str) -> float:
        """Per-word frequency of a sub-category (0 for empty text)."""
        if self.word_count == 0:
            return 0.0
        return self.counts.get(category, 0) / self.word_count

    def to_dict(self) -> Dict:
        return {
            "word_count": self.word_count,
            "sentence_count": self.sentence_count,
            "avg_words_per_sentence": self.avg_words_per_sentence,
            "vocabulary_richness": self.vocabulary_richness,
            "emotional_tone": self.emotional_tone,
            "cognitive_complexity": self.cognitive_complexity,
            "counts": dict(self.counts),
        }


@dataclass
class LexiconSignal:
    """Per-domain lexicon scores for one message."""
    scores: Dict[str, float]
    confidence: float
    matched_words: Dict[str, List[str]]
    analysis: LexiconAnalysis


class LexiconSignalExtractor:
    """
    Extracts lexicon-based domain scores from text.

    Holds no mutable state, so a single instance can be shared across
    threads.

    Attributes:
        categories: Nested core word categories (pronouns, emotions, ...)
        marker_categories: Flat supplementary marker lists
        domain_markers: Marker recipes for non-Big-Five domains
    """

    def __init__(
        self,
        categories: Optional[Dict[str, Dict[str, Sequence[str]]]] = None,
        marker_categories: Optional[Dict[str, Sequence[str]]] = None,
        domain_markers: Optional[Dict[str, Dict[str, Sequence[str]]]] = None,
        complex_words: Optional[Sequence[str]] = None,
    ):
        self.categories = categories or WORD_CATEGORIES
        self.marker_categories = marker_categories or MARKER_CATEGORIES
        self.domain_markers = domain_markers or DOMAIN_MARKERS
        self.complex_words = complex_words or COMPLEX_WORDS

    def analyze(self, text: str) -> LexiconAnalysis:
        """
        Compute text statistics and category counts.

        Args:
            text: Raw message text

        Returns:
            LexiconAnalysis (all-zero counts for empty text)
        """
        tokens = tokenize(text)
        word_count = len(tokens)
        sentence_count = count_sentences(text)

        matches: Dict[str, List[str]] = {}
        for group in self.categories.values():
            for name, words in group.items():
                matches[name] = find_matches(tokens, words)
        for name, words in self.marker_categories.items():
            matches[name] = find_matches(tokens, words)
        matches["complex"] = find_matches(tokens, self.complex_words)

        counts = {name: len(found) for name, found in matches.items()}

        if word_count == 0:
            return LexiconAnalysis(
                word_count=0,
                sentence_count=sentence_count,
                avg_words_per_sentence=0.0,
                vocabulary_richness=0.0,
                emotional_tone=0.0,
                cognitive_complexity=0.0,
                counts=counts,
                matches=matches,
            )

        vocabulary_richness = len(set(tokens)) / word_count

        positive = counts.get("positive", 0)
        negative = counts.get("negative", 0)
        emotional_tone = (positive - negative) / (positive + negative) if positive + negative else 0.0

        avg_word_length = sum(len(token) for token in tokens) / word_count
        complexity_markers = (
            counts.get("insight", 0) + counts.get("causation", 0) + counts.get("complex", 0) * 2
        )
        cognitive_complexity = min(
            (complexity_markers / word_count * 10 + avg_word_length / 10) / 2, 1.0
        )

        return LexiconAnalysis(
            word_count=word_count,
            sentence_count=sentence_count,
            avg_words_per_sentence=word_count / sentence_count,
            vocabulary_richness=vocabulary_richness,
            emotional_tone=emotional_tone,
            cognitive_complexity=cognitive_complexity,
            counts=counts,
            matches=matches,
        )

    def score_big_five(self, analysis: LexiconAnalysis) -> Dict[str, float]:
        """Derive the five Big Five scores from a LexiconAnalysis."""
        f = analysis.frequency
        vr = analysis.vocabulary_richness
        cc = analysis.cognitive_complexity
        awps = analysis.avg_words_per_sentence
        social = f("family") + f("friends") + f("humans")

        return {
            "big_five_openness": (
                0.4 * normalize(vr)
                + 0.4 * normalize(cc)
                + 0.2 * normalize(f("insight") * 20)
            ),
            "big_five_conscientiousness": (
                0.3 * normalize(1 - abs(awps - 15) / 15)
                + 0.3 * normalize(1 - f("tentative") * 50)
                + 0.4 * normalize(f("causation") * 50)
            ),
            "big_five_extraversion": (
                0.2 * normalize(f("we") * 50)
                + 0.2 * normalize(f("you") * 50)
                + 0.3 * normalize(social * 30)
                + 0.3 * normalize(f("positive") * 30)
            ),
            "big_five_agreeableness": (
                0.3 * normalize(f("positive") * 30)
                + 0.3 * normalize(1 - f("negative") * 30)
                + 0.2 * normalize(f("you") * 50)
                + 0.2 * normalize(f("family") * 100)
            ),
            "big_five_neuroticism": (
                0.3 * normalize(f("negative") * 30)
                + 0.3 * normalize(f("anxiety") * 50)
                + 0.2 * normalize(f("i") * 20)
                + 0.2 * normalize(f("tentative") * 50)
            ),
        }

    def score_marker_domains(self, analysis: LexiconAnalysis) -> Dict[str, float]:
        """Score marker-based domains; domains without any marker hit are omitted."""
        scores = {}
        for domain, recipe in self.domain_markers.items():
            if "density" in recipe:
                hits = sum(analysis.counts.get(c, 0) for c in recipe["density"])
                if hits == 0:
                    continue
                density = hits / analysis.word_count * 100
                scores[domain] = normalize(
                    density * (1 + analysis.vocabulary_richness * 0.5) / DENSITY_SCALE
                )
            else:
                positive = sum(analysis.counts.get(c, 0) for c in recipe.get("positive", ()))
                negative = sum(analysis.counts.get(c, 0) for c in recipe.get("negative", ()))
                if positive + negative == 0:
                    continue
                scores[domain] = positive / (positive + negative)
        return scores

    def matched_words_for(self, domain_id: str, analysis: LexiconAnalysis) -> List[str]:
        """Words from the analysed text that contributed to a domain."""
        if domain_id in _BIG_FIVE_SOURCES:
            sources = _BIG_FIVE_SOURCES[domain_id]
        else:
            recipe = self.domain_markers.get(domain_id, {})
            sources = tuple(c for part in recipe.values() for c in part)

        words: List[str] = []
        for source in sources:
            for word in analysis.matches.get(source, []):
                if word not in words:
                    words.append(word)
        return words

    def extract(self, text: str, sample_size: int = 1) -> LexiconSignal:
        """
        Produce the lexicon signal for one message.

        Args:
            text: Raw message text
            sample_size: Number of samples analysed so far (drives confidence)

        Returns:
            LexiconSignal; empty text yields no scores and zero confidence
        """
        analysis = self.analyze(text)
        if analysis.word_count == 0:
            logger.debug("Empty text, lexicon signal has no scores")
            return LexiconSignal(scores={}, confidence=0.0, matched_words={}, analysis=analysis)

        scores = self.score_big_five(analysis)
        scores.update(self.score_marker_domains(analysis))

        matched = {domain: self.matched_words_for(domain, analysis) for domain in scores}

        return LexiconSignal(
            scores=scores,
            confidence=sample_size_confidence(max(sample_size, 1)),
            matched_words=matched,
            analysis=analysis,
        )
