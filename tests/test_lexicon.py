"""
Tests for the lexicon signal extractor

Run with: pytest tests/test_lexicon.py -v
"""

import math

import pytest

from profiling.lexicon import (
    LexiconSignalExtractor,
    find_matches,
    normalize,
    sample_size_confidence,
    tokenize,
)


class TestTokenize:
    """Tokenizer behaviour."""

    def test_strips_punctuation_keeps_apostrophes(self):
        assert tokenize("Hello, World! It's me.") == ["hello", "world", "it's", "me"]

    def test_empty_text(self):
        assert tokenize("") == []
        assert tokenize("  ?!  ") == []


class TestHelpers:
    """normalize, confidence curve and phrase matching."""

    def test_normalize_maps_and_clamps(self):
        assert normalize(5, 0, 10) == pytest.approx(0.5)
        assert normalize(-1) == 0.0
        assert normalize(2) == 1.0

    def test_normalize_degenerate_range(self):
        assert normalize(3, 1, 1) == 0.0

    def test_confidence_curve_saturates_below_cap(self):
        assert sample_size_confidence(30) == pytest.approx(0.3 + 0.65 * (1 - math.exp(-1)))
        assert sample_size_confidence(10_000) <= 0.95
        assert sample_size_confidence(1) < sample_size_confidence(10) < sample_size_confidence(100)

    def test_find_matches_words_and_phrases(self):
        tokens = ["i", "am", "for", "sure", "going"]
        assert sorted(find_matches(tokens, ["for sure", "am", "sure thing"])) == ["am", "for sure"]

    def test_find_matches_counts_repeats(self):
        assert find_matches(["good", "good", "bad"], ["good"]) == ["good", "good"]


class TestLexiconSignalExtractor:
    """Per-domain scoring."""

    @pytest.fixture
    def extractor(self):
        return LexiconSignalExtractor()

    def test_empty_text_has_no_scores(self, extractor):
        signal = extractor.extract("")
        assert signal.scores == {}
        assert signal.confidence == 0.0
        assert signal.analysis.word_count == 0
        assert all(count == 0 for count in signal.analysis.counts.values())

    def test_big_five_always_scored(self, extractor):
        signal = extractor.extract("The weather is fine today.")
        for domain in (
            "big_five_openness",
            "big_five_conscientiousness",
            "big_five_extraversion",
            "big_five_agreeableness",
            "big_five_neuroticism",
        ):
            assert 0.0 <= signal.scores[domain] <= 1.0

    def test_openness_formula(self, extractor):
        # one insight word: vr=1, cc saturates, insight term saturates
        signal = extractor.extract("think")
        assert signal.scores["big_five_openness"] == pytest.approx(1.0)

    def test_anxious_text_raises_neuroticism(self, extractor):
        calm = extractor.extract("The report is attached for review.")
        anxious = extractor.extract("I am so worried and anxious about my exam.")
        assert anxious.scores["big_five_neuroticism"] > calm.scores["big_five_neuroticism"]
        assert "worried" in anxious.matched_words["big_five_neuroticism"]

    def test_growth_mindset_balance(self, extractor):
        growth = extractor.extract("I learn from every mistake and keep going with effort")
        fixed = extractor.extract("Some people have innate talent")
        assert growth.scores["growth_mindset"] == pytest.approx(1.0)
        assert fixed.scores["growth_mindset"] == pytest.approx(0.0)

    def test_marker_domains_without_hits_are_omitted(self, extractor):
        signal = extractor.extract("hello there")
        assert "growth_mindset" not in signal.scores
        assert "risk_tolerance" not in signal.scores

    def test_confidence_follows_sample_size(self, extractor):
        signal = extractor.extract("I think so", sample_size=30)
        assert signal.confidence == pytest.approx(sample_size_confidence(30))
