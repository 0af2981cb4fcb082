"""
Tests for context detection and cross-context variance

Run with: pytest tests/test_context.py -v
"""

import pandas as pd
import pytest

from profiling.context import (
    ContextClassifier,
    ContextDetectionHistory,
    ContextType,
    ContextVarianceAnalyzer,
    format_context_name,
    is_significant,
)
from profiling.storage import ContextDomainScoreStore


@pytest.fixture
def classifier():
    return ContextClassifier()


@pytest.fixture
def context_store():
    return ContextDomainScoreStore([c.value for c in ContextType])


class TestContextClassifier:
    """Keyword and pattern scoring."""

    def test_work_message_with_pattern(self, classifier):
        result = classifier.classify("My boss wants a meeting")
        assert result.primary_context == ContextType.WORK_PROFESSIONAL
        # boss + meeting keywords (1 each) and the "my boss" pattern (2)
        assert result.context_scores[ContextType.WORK_PROFESSIONAL] == pytest.approx(4.0)
        assert result.confidence == pytest.approx(1.0)
        assert "boss" in result.detected_keywords
        assert result.detected_patterns

    def test_no_evidence_defaults_to_social(self, classifier):
        result = classifier.classify("zzz qqq")
        assert result.primary_context == ContextType.SOCIAL_CASUAL
        assert result.confidence == pytest.approx(0.3)

    def test_context_weight_applies(self, classifier):
        scores, _, _ = classifier.score_message("I need help")
        # "help" keyword x 1.3; "need help" does not match "(help|need) (me|advice)"
        assert scores[ContextType.STRESSFUL_CHALLENGING] == pytest.approx(1.3)

    def test_ties_go_to_earlier_context(self, classifier):
        # "salary" scores 1.0 for both work and financial contexts
        result = classifier.classify("salary")
        assert result.context_scores[ContextType.FINANCIAL_ECONOMIC] == pytest.approx(1.0)
        assert result.primary_context == ContextType.WORK_PROFESSIONAL

    def test_mixed_message_confidence(self, classifier):
        result = classifier.classify("money for the project")
        work = result.context_scores[ContextType.WORK_PROFESSIONAL]
        total = sum(result.context_scores.values())
        assert result.confidence == pytest.approx(min(1.0, max(result.context_scores.values()) / (total * 0.5)))
        assert work > 0

    def test_multi_message_sums_scores(self, classifier):
        messages = ["My boss wants a meeting", "the deadline is tomorrow"]
        batch = classifier.classify_messages(messages)
        single_totals = [classifier.score_message(m)[0] for m in messages]
        for context in ContextType:
            assert batch.context_scores[context] == pytest.approx(
                sum(scores[context] for scores in single_totals)
            )
        assert batch.primary_context == ContextType.WORK_PROFESSIONAL

    def test_multi_message_uses_looser_multiplier(self, classifier):
        messages = ["My boss wants a meeting", "I am so stressed"]
        batch = classifier.classify_messages(messages)
        top = max(batch.context_scores.values())
        total = sum(batch.context_scores.values())
        assert batch.confidence == pytest.approx(min(1.0, top / (total * 0.4)))

    def test_display_names(self):
        assert format_context_name(ContextType.WORK_PROFESSIONAL) == "work/professional"
        assert format_context_name("leisure_recreation") == "leisure/recreational"
        assert format_context_name("unknown") == "unknown"


class TestContextDetectionHistory:
    def test_statistics(self, classifier):
        history = ContextDetectionHistory()
        history.record(classifier.classify("My boss wants a meeting"), message_id="1")
        history.record(classifier.classify("at work again"), message_id="2")
        history.record(classifier.classify("zzz"), message_id="3")

        stats = history.statistics()
        assert stats.total_detections == 3
        assert stats.most_common_context == "work_professional"
        assert stats.context_distribution["social_casual"] == 1

    def test_empty_statistics(self):
        stats = ContextDetectionHistory().statistics()
        assert stats.total_detections == 0
        assert stats.average_confidence == 0.0
        assert stats.most_common_context == "social_casual"


class TestContextVarianceAnalyzer:
    def test_equal_scores_have_zero_variation(self, context_store):
        context_store.update_context_domain_score("creativity", "work_professional", 0.6, 3)
        context_store.update_context_domain_score("creativity", "social_casual", 0.6, 3)
        variation = ContextVarianceAnalyzer(context_store).analyze_domain("creativity")
        assert variation.variation_score == 0.0
        assert not variation.significant

    def test_threshold_is_strict(self):
        assert not is_significant(0.10)
        assert is_significant(0.1000001)

    def test_single_context_is_skipped(self, context_store):
        context_store.update_context_domain_score("creativity", "work_professional", 0.9, 3)
        analyzer = ContextVarianceAnalyzer(context_store)
        assert analyzer.analyze_domain("creativity") is None
        assert analyzer.analyze() == []

    def test_variation_and_extremes(self, context_store):
        context_store.update_context_domain_score("big_five_extraversion", "social_casual", 0.9, 9)
        context_store.update_context_domain_score("big_five_extraversion", "work_professional", 0.3, 9)
        variation = ContextVarianceAnalyzer(context_store).analyze_domain("big_five_extraversion")

        assert variation.variation_score == pytest.approx(0.3)
        assert variation.overall_score == pytest.approx(0.6)
        assert variation.highest_context == "social_casual"
        assert variation.lowest_context == "work_professional"
        assert variation.significant

    def test_sorted_most_variable_first(self, context_store):
        context_store.update_context_domain_score("creativity", "work_professional", 0.5, 1)
        context_store.update_context_domain_score("creativity", "social_casual", 0.6, 1)
        context_store.update_context_domain_score("risk_tolerance", "work_professional", 0.1, 1)
        context_store.update_context_domain_score("risk_tolerance", "social_casual", 0.9, 1)
        variations = ContextVarianceAnalyzer(context_store).analyze()
        assert [v.domain_id for v in variations] == ["risk_tolerance", "creativity"]

    def test_insights_for_dependent_domains(self, context_store):
        context_store.update_context_domain_score("big_five_extraversion", "social_casual", 0.9, 4)
        context_store.update_context_domain_score("big_five_extraversion", "work_professional", 0.3, 4)
        context_store.update_context_domain_score("creativity", "social_casual", 0.5, 4)
        context_store.update_context_domain_score("creativity", "work_professional", 0.52, 4)
        insights = ContextVarianceAnalyzer(context_store).generate_insights()

        assert [i.domain_id for i in insights] == ["big_five_extraversion"]
        assert "more extraverted in social/casual" in insights[0].insight
        assert insights[0].difference == pytest.approx(0.6)

    def test_frame_export(self, context_store):
        context_store.update_context_domain_score("creativity", "work_professional", 0.2, 1)
        context_store.update_context_domain_score("creativity", "social_casual", 0.8, 1)
        analyzer = ContextVarianceAnalyzer(context_store)
        frame = analyzer.to_frame()
        assert isinstance(frame, pd.DataFrame)
        assert frame.loc[0, "domain_id"] == "creativity"
        assert frame.loc[0, "score_social_casual"] == pytest.approx(0.8)

    def test_empty_frame_has_columns(self, context_store):
        frame = ContextVarianceAnalyzer(context_store).to_frame()
        assert frame.empty
        assert "variation_score" in frame.columns
