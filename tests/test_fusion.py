"""
Tests for signal fusion and fusion weights

Run with: pytest tests/test_fusion.py -v
"""

import pytest

from profiling.fusion import (
    FusionWeights,
    SignalFusionEngine,
    SignalType,
    confidence_interval,
    signal_agreement,
)


@pytest.fixture
def fusion():
    return SignalFusionEngine(FusionWeights(lexicon=20, embedding=30, llm=50))


class TestFuse:
    """Weighted fusion of per-domain observations."""

    def test_two_signal_weighted_mean(self, fusion):
        obs = [
            fusion.observe("big_five_openness", SignalType.LEXICON, 0.8, 0.5),
            fusion.observe("big_five_openness", SignalType.EMBEDDING, 0.6, 0.8),
        ]
        result = fusion.fuse("big_five_openness", obs)
        assert result.score == pytest.approx(0.224 / 0.34)
        assert result.score == pytest.approx(0.659, abs=1e-3)
        # confidence is the weight-averaged signal confidence
        assert result.confidence == pytest.approx((0.5 * 0.2 + 0.8 * 0.3) / 0.5)

    @pytest.mark.parametrize("weights", [(20, 30, 50), (34, 33, 33), (1, 1, 98), (70, 25, 5), (10, 80, 10)])
    @pytest.mark.parametrize("signal", list(SignalType))
    def test_single_full_confidence_signal_returns_its_score(self, weights, signal):
        lexicon, embedding, llm = weights
        fusion = SignalFusionEngine(FusionWeights(lexicon=lexicon, embedding=embedding, llm=llm))
        obs = [fusion.observe("creativity", signal, 0.83, 1.0)]
        assert fusion.fuse("creativity", obs).score == pytest.approx(0.83)

    def test_single_partial_confidence_signal_returns_its_score(self, fusion):
        obs = [fusion.observe("creativity", SignalType.LLM, 0.83, 0.4)]
        assert fusion.fuse("creativity", obs).score == pytest.approx(0.83)

    def test_no_weighted_signal_is_neutral(self, fusion):
        result = fusion.fuse("creativity", [])
        assert result.score == 0.5
        assert result.is_neutral

        zero_conf = [fusion.observe("creativity", SignalType.LEXICON, 0.9, 0.0)]
        assert fusion.fuse("creativity", zero_conf).is_neutral

    def test_zero_weight_signal_is_ignored(self):
        fusion = SignalFusionEngine(FusionWeights(lexicon=0, embedding=50, llm=50))
        obs = [
            fusion.observe("creativity", SignalType.LEXICON, 1.0, 1.0),
            fusion.observe("creativity", SignalType.EMBEDDING, 0.2, 1.0),
        ]
        assert fusion.fuse("creativity", obs).score == pytest.approx(0.2)

    def test_mismatched_domain_rejected(self, fusion):
        obs = [fusion.observe("creativity", SignalType.LLM, 0.5, 0.5)]
        with pytest.raises(ValueError):
            fusion.fuse("big_five_openness", obs)

    def test_fuse_all_groups_by_domain(self, fusion):
        obs = [
            fusion.observe("a", SignalType.LEXICON, 0.2, 1.0),
            fusion.observe("b", SignalType.LLM, 0.9, 1.0),
            fusion.observe("a", SignalType.LLM, 0.4, 1.0),
        ]
        results = fusion.fuse_all(obs)
        assert list(results) == ["a", "b"]
        assert len(results["a"].observations) == 2


class TestAgreement:
    def test_identical_scores_agree(self, fusion):
        obs = [
            fusion.observe("a", SignalType.LEXICON, 0.7, 1.0),
            fusion.observe("a", SignalType.LLM, 0.7, 1.0),
        ]
        assert signal_agreement(obs) == pytest.approx(1.0)

    def test_opposite_scores_disagree(self, fusion):
        obs = [
            fusion.observe("a", SignalType.LEXICON, 0.0, 1.0),
            fusion.observe("a", SignalType.LLM, 1.0, 1.0),
        ]
        assert signal_agreement(obs) == 0.0

    def test_interval_is_clamped(self, fusion):
        result = fusion.fuse("a", [fusion.observe("a", SignalType.LLM, 0.95, 0.2)])
        low, high = confidence_interval(result)
        assert low < 0.95 <= high == 1.0


class TestFusionWeights:
    """Percentage weights that always sum to 100."""

    def test_defaults_validate(self):
        FusionWeights().validate()

    def test_validate_rejects_bad_sum(self):
        with pytest.raises(ValueError):
            FusionWeights(lexicon=50, embedding=50, llm=50).validate()

    def test_adjust_rebalances_proportionally(self):
        weights = FusionWeights(20, 30, 50).adjust(SignalType.LLM, 70)
        assert weights.to_dict() == {"lexicon": 12, "embedding": 18, "llm": 70}
        assert weights.total() == 100

    def test_adjust_residual_goes_to_largest_untouched(self):
        # 85 split 1:1 rounds to 42 + 42; the residual 1 lands on the
        # earlier of the tied signals
        weights = FusionWeights(40, 40, 20).adjust(SignalType.LLM, 15)
        assert weights.to_dict() == {"lexicon": 43, "embedding": 42, "llm": 15}

    def test_adjust_from_zero_others_splits_equally(self):
        weights = FusionWeights(0, 0, 100).adjust(SignalType.LLM, 40)
        assert weights.to_dict() == {"lexicon": 30, "embedding": 30, "llm": 40}

    def test_adjust_clamps_value(self):
        weights = FusionWeights().adjust(SignalType.LEXICON, 150)
        assert weights.to_dict() == {"lexicon": 100, "embedding": 0, "llm": 0}

    def test_normalized_redistributes(self):
        weights = FusionWeights(10, 10, 20).normalized()
        assert weights.to_dict() == {"lexicon": 25, "embedding": 25, "llm": 50}

    def test_normalized_all_zero_falls_back(self):
        assert FusionWeights(0, 0, 0).normalized() == FusionWeights()

    def test_engine_set_weight_changes_observation_weight(self, fusion):
        fusion.set_weight(SignalType.LEXICON, 60)
        obs = fusion.observe("a", SignalType.LEXICON, 0.5, 1.0)
        assert obs.weight == pytest.approx(0.6)
        assert fusion.weights.total() == 100

    def test_save_load(self, tmp_path):
        path = str(tmp_path / "weights.json")
        FusionWeights(10, 20, 70).save(path)
        assert FusionWeights.load(path).to_dict() == {"lexicon": 10, "embedding": 20, "llm": 70}

    def test_from_config(self):
        config = {"fusion": {"weights": {"lexicon": 1, "embedding": 1, "llm": 2}}}
        assert FusionWeights.from_config(config).to_dict() == {"lexicon": 25, "embedding": 25, "llm": 50}
