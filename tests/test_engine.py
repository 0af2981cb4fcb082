"""
Tests for the profiling engine

Run with: pytest tests/test_engine.py -v
"""

import logging

import joblib
import pytest

from conftest import CrashingModel, CrashingProvider, FakeModel
from profiling.engine import ProfilingEngine
from profiling.errors import SignalUnavailableError
from profiling.fusion import SignalType

WORK_MESSAGES = [
    "My boss wants a meeting",
    "The project deadline is at work",
    "My boss liked the report",
]


class BrokenProvider:
    name = "broken"

    def embed(self, text):
        raise SignalUnavailableError("no embeddings today")


def _process(engine, messages):
    return [engine.process_message(m, message_id=f"m{i}") for i, m in enumerate(messages)]


class TestProcessMessage:
    def test_updates_aggregate_scores(self, engine):
        analysis = engine.process_message("My boss wants a meeting", message_id="m0")

        assert analysis.lexicon_available
        assert analysis.embedding_available
        assert analysis.context.primary_context.value == "work_professional"
        assert engine.messages_processed == 1
        openness = engine.domain_scores.get("big_five_openness")
        assert openness.data_points_count == 1
        assert 0.0 <= openness.score <= 1.0

    def test_records_every_signal(self, engine):
        engine.process_message("I think we should plan the trip together")
        lexicon = engine.signal_records.get("big_five_openness", "lexicon")
        embedding = engine.signal_records.get("big_five_openness", "embedding")
        assert lexicon is not None and lexicon.weight_used == pytest.approx(0.2)
        assert embedding is not None and embedding.prototype_similarity is not None

    def test_confident_context_updates_partition(self, engine):
        engine.process_message("My boss wants a meeting")
        work = engine.contextual_profile("work_professional")
        assert any(e.domain_id == "big_five_openness" for e in work)

    def test_weak_context_leaves_partition_alone(self, engine):
        engine.process_message("zzz qqq")
        assert engine.context_history.records()[-1].confidence == pytest.approx(0.3)
        assert engine.contextual_profile("social_casual") == []

    def test_empty_message(self, engine):
        analysis = engine.process_message("")
        assert not analysis.lexicon_available
        assert not analysis.embedding_available
        assert analysis.fused == {}
        assert engine.domain_scores.score_map() == {}

    def test_embedding_failure_degrades_to_lexicon(self, engine_config, memory_kv, fake_model, clock):
        engine = ProfilingEngine(
            engine_config, kv_store=memory_kv, embedding_provider=BrokenProvider(),
            generative_model=fake_model, clock=clock,
        ).init(start_background=False)
        analysis = engine.process_message("I am happy to help my friends")
        assert analysis.lexicon_available
        assert not analysis.embedding_available
        assert engine.domain_scores.get("big_five_extraversion").data_points_count == 1
        engine.close()

    def test_confidence_factors(self, engine):
        _process(engine, ["I love new ideas", "I really love new ideas"])
        factors = engine.domain_scores.get_confidence_factors("big_five_openness")
        assert factors["data_volume"].value == pytest.approx(2 / 30)
        assert engine.domain_scores.has_confidence_factor("big_five_openness", "consistency")
        assert engine.domain_scores.has_confidence_factor("big_five_openness", "temporal_stability")
        assert engine.domain_scores.get("big_five_openness").confidence > 0


class TestDeepAnalysis:
    def test_batch_applies_llm_signal_once(self, engine, fake_model):
        results = _process(engine, WORK_MESSAGES)

        assert results[-1].deep_triggered
        assert len(fake_model.prompts) == 1
        # three per-message contributions plus one batch of three
        assert engine.domain_scores.get("big_five_openness").data_points_count == 6
        # domains the model did not score are not touched by the batch
        assert engine.domain_scores.get("creativity").data_points_count == 3
        llm = engine.signal_records.get("big_five_openness", "llm")
        assert llm.score == pytest.approx(0.9)
        assert llm.evidence == "asks many questions"
        assert engine.adapter.queue_size == 0

    def test_batch_updates_detected_context(self, engine):
        _process(engine, WORK_MESSAGES)
        work = {e.domain_id: e for e in engine.contextual_profile("work_professional")}
        assert work["big_five_openness"].data_points_count == 6
        assert work["creativity"].data_points_count == 3

    def test_failed_batch_changes_nothing(self, engine_config, memory_kv, clock):
        model = FakeModel(fail=True)
        engine = ProfilingEngine(engine_config, kv_store=memory_kv, generative_model=model, clock=clock)
        engine.init(start_background=False)
        _process(engine, WORK_MESSAGES)

        assert engine.signal_records.get("big_five_openness", "llm") is None
        assert engine.domain_scores.get("big_five_openness").data_points_count == 3
        assert engine.adapter.queue_size == 3
        engine.close()

    def test_timeout_trigger(self, engine, fake_model, clock):
        engine.process_message("just one message")
        assert not engine.check_deep_timeout()
        clock.advance(61)
        assert engine.check_deep_timeout()
        assert len(fake_model.prompts) == 1
        assert engine.signal_records.get("big_five_openness", "llm") is not None

    def test_background_batch(self, engine_config, memory_kv, fake_model, clock):
        engine_config["deep_analysis"]["background"] = True
        with ProfilingEngine(engine_config, kv_store=memory_kv, generative_model=fake_model, clock=clock) as engine:
            _process(engine, WORK_MESSAGES)
            engine.wait_for_deep_analysis(timeout=10)
            assert engine.signal_records.get("big_five_openness", "llm") is not None
            assert engine.domain_scores.get("big_five_openness").data_points_count == 6

    def test_deep_disabled(self, engine_config, memory_kv):
        engine_config["deep_analysis"]["enabled"] = False
        engine = ProfilingEngine(engine_config, kv_store=memory_kv).init(start_background=False)
        assert engine.adapter is None
        results = _process(engine, WORK_MESSAGES)
        assert not any(r.deep_triggered for r in results)
        assert engine.run_deep_analysis() is None
        engine.close()


class TestCollaboratorFailures:
    """Collaborators raising arbitrary exceptions never escape the engine."""

    def test_model_connection_error_keeps_other_signals(self, engine_config, memory_kv, clock):
        engine_config["deep_analysis"]["batch_size"] = 1
        model = CrashingModel(ConnectionError("inference server reset"))
        engine = ProfilingEngine(engine_config, kv_store=memory_kv, generative_model=model, clock=clock)
        engine.init(start_background=False)

        analysis = engine.process_message("I think my project is interesting")

        assert analysis.deep_triggered
        assert analysis.lexicon_available
        assert len(model.prompts) == 1
        assert engine.signal_records.get("big_five_openness", "llm") is None
        assert engine.domain_scores.get("big_five_openness").data_points_count == 1
        assert engine.adapter.queue_size == 1
        engine.close()

    def test_embedding_runtime_error_degrades_to_lexicon(self, engine_config, memory_kv, fake_model, clock):
        provider = CrashingProvider(healthy_calls=0, error=RuntimeError("embedding backend died"))
        engine = ProfilingEngine(
            engine_config, kv_store=memory_kv, embedding_provider=provider,
            generative_model=fake_model, clock=clock,
        ).init(start_background=False)

        analysis = engine.process_message("boom goes the message")

        assert not analysis.embedding_available
        assert engine.messages_processed == 1
        assert engine.signal_records.get("big_five_openness", "embedding") is None
        engine.close()

    def test_corrupt_centroid_cache_is_rebuilt_on_init(self, engine_config, memory_kv, fake_model, clock, tmp_path):
        cache = tmp_path / "centroids.joblib"
        cache.write_bytes(b"\x80\x04truncated")
        engine_config["embedding"]["cache_path"] = str(cache)

        engine = ProfilingEngine(engine_config, kv_store=memory_kv, generative_model=fake_model, clock=clock)
        engine.init(start_background=False)

        assert engine.scorer.is_ready
        assert "centroids" in joblib.load(str(cache))
        assert engine.process_message("I love new ideas").embedding_available
        engine.close()

    def test_failed_background_batch_is_logged(self, engine_config, memory_kv, fake_model, clock, monkeypatch, caplog):
        engine_config["deep_analysis"]["background"] = True
        engine = ProfilingEngine(engine_config, kv_store=memory_kv, generative_model=fake_model, clock=clock)
        engine.init(start_background=False)

        def crash():
            raise RuntimeError("batch crashed")

        monkeypatch.setattr(engine, "run_deep_analysis", crash)
        with caplog.at_level(logging.ERROR, logger="profiling.engine"):
            _process(engine, WORK_MESSAGES)
            engine.wait_for_deep_analysis(timeout=10)
            engine.close()

        assert "Background deep analysis failed: RuntimeError: batch crashed" in caplog.text


class TestDerivedViews:
    def test_set_weight_rebalances(self, engine):
        weights = engine.set_weight(SignalType.LLM, 70)
        assert weights.to_dict() == {"lexicon": 12, "embedding": 18, "llm": 70}
        engine.process_message("I think so")
        record = engine.signal_records.get("big_five_openness", "lexicon")
        assert record.weight_used == pytest.approx(0.12)

    def test_profile_lists_every_domain(self, engine):
        profile = engine.profile()
        assert len(profile) == 39
        assert profile[0].domain_id == "big_five_openness"

    def test_relationships_from_topics(self, engine):
        engine.process_message("I worry about money and my career")
        engine.build_relationships()
        assert engine.triples.user_topics("default_user") == ["worry", "money", "career"]

    def test_report(self, engine):
        _process(engine, WORK_MESSAGES)
        report = engine.report().to_dict()
        assert report["messages_processed"] == 3
        assert report["domains_with_data"] > 0
        assert report["additional_metrics"]["fusion_weights"]["llm"] == 50
        assert report["additional_metrics"]["context_statistics"]["total_detections"] == 3

    def test_context_variations(self, engine):
        _process(engine, WORK_MESSAGES + ["My friends and I had fun at the party with friends"])
        variations = engine.analyze_context_variations()
        assert all(v.variation_score >= 0 for v in variations)
        assert engine.context_statistics().most_common_context == "work_professional"


class TestLifecycle:
    def test_reset(self, engine):
        _process(engine, WORK_MESSAGES[:2])
        engine.build_relationships(topics=["career"])
        engine.reset()

        assert engine.messages_processed == 0
        assert engine.domain_scores.score_map() == {}
        assert len(engine.triples) == 0
        assert engine.adapter.queue_size == 0
        assert engine.context_statistics().total_detections == 0

    def test_state_survives_restart(self, engine_config, memory_kv, fake_model, clock):
        first = ProfilingEngine(engine_config, kv_store=memory_kv, generative_model=fake_model, clock=clock)
        first.init(start_background=False)
        _process(first, WORK_MESSAGES)
        first.set_weight(SignalType.LEXICON, 40)
        first.build_relationships()
        expected = first.domain_scores.get("big_five_openness").score
        first.close()

        second = ProfilingEngine(engine_config, kv_store=memory_kv, generative_model=fake_model, clock=clock)
        second.init(start_background=False)
        assert second.messages_processed == 3
        assert second.domain_scores.get("big_five_openness").score == pytest.approx(expected)
        assert second.domain_scores.get("big_five_openness").data_points_count == 6
        assert second.weights.lexicon == 40
        assert len(second.triples) == len(first.triples)
        assert second.context_statistics().total_detections == 3
        second.close()

    def test_file_backend(self, engine_config, fake_model, clock, tmp_path):
        engine_config["storage"] = {"backend": "file", "path": str(tmp_path / "store")}
        with ProfilingEngine(engine_config, generative_model=fake_model, clock=clock) as engine:
            engine.process_message("My boss wants a meeting")
        assert (tmp_path / "store" / "domain_scores.json").exists()
        assert (tmp_path / "store" / "engine_state.json").exists()
