"""
Tests for the relationship graph

Run with: pytest tests/test_relationships.py -v
"""

import pytest

from profiling.graph import (
    Predicate,
    RelationshipGraphBuilder,
    TripleStore,
    extract_topics,
    node,
)


@pytest.fixture
def store():
    return TripleStore()


@pytest.fixture
def builder(store):
    return RelationshipGraphBuilder(store)


class TestRelationshipGraphBuilder:
    def test_correlation_between_high_domains(self, builder, store):
        builder.build({"big_five_openness": 0.8, "creativity": 0.75})
        triples = store.query(predicate=Predicate.CORRELATES_WITH)
        assert len(triples) == 1
        assert triples[0].metadata["weight"] == 0.7
        assert store.related_domains("creativity") == ["big_five_openness"]

    def test_contradiction_between_extremes(self, builder, store):
        builder.build({"big_five_extraversion": 0.2, "social_support": 0.9})
        triples = store.query(predicate=Predicate.CONTRADICTS)
        assert len(triples) == 1
        assert triples[0].metadata["weight"] == 0.5
        assert store.query(predicate=Predicate.CORRELATES_WITH) == []

    def test_thresholds_are_strict(self, builder, store):
        builder.build({"a_domain": 0.6, "b_domain": 0.9, "c_domain": 0.3})
        assert store.query(predicate=Predicate.CORRELATES_WITH) == []
        # 0.9 vs 0.3 is not below the low threshold
        assert store.query(predicate=Predicate.CONTRADICTS) == []

    def test_trait_indicates_behaviors(self, builder, store):
        builder.build({"big_five_openness": 0.72})
        behaviors = store.trait_behaviors("big_five_openness")
        assert behaviors == ["seeks_novelty", "creative_expression", "intellectual_curiosity"]
        triple = store.query(subject=node("trait", "big_five_openness"))[0]
        assert triple.metadata["weight"] == pytest.approx(0.72)
        assert store.behavior_traits("seeks_novelty") == ["big_five_openness"]

    def test_trait_at_threshold_indicates_nothing(self, builder, store):
        builder.build({"big_five_openness": 0.5})
        assert store.query(predicate=Predicate.INDICATES) == []

    def test_topics(self, builder, store):
        builder.build({}, topics=["Career"], user_id="u1")
        assert store.user_topics("u1") == ["career"]
        assert store.topic_domains("career") == ["work_career_style", "achievement_motivation"]
        belongs = store.query(predicate=Predicate.BELONGS_TO_DOMAIN)
        assert all(t.metadata["confidence"] == 0.8 for t in belongs)

    def test_repeated_builds_append(self, builder, store):
        scores = {"big_five_openness": 0.8, "creativity": 0.75}
        first = builder.build(scores)
        builder.build(scores)
        assert len(store) == 2 * len(first)
        assert store.clear() == 2 * len(first)
        assert len(store) == 0


class TestTripleStore:
    def test_records_roundtrip(self, store):
        store.add(node("user", "u1"), Predicate.DISCUSSES, node("topic", "art"))
        restored = TripleStore()
        restored.load_records(store.to_records())
        assert restored.user_topics("u1") == ["art"]
        assert "timestamp" in restored.query()[0].metadata

    def test_stats(self, store):
        store.add(node("user", "u1"), Predicate.DISCUSSES, node("topic", "art"))
        store.add(node("user", "u1"), Predicate.DISCUSSES, node("topic", "money"))
        stats = store.stats()
        assert stats["total_triples"] == 2
        assert stats["unique_nodes"] == 3
        assert stats["predicates"] == {"discusses": 2}

    def test_unknown_node_kind(self):
        with pytest.raises(ValueError):
            node("planet", "mars")


def test_extract_topics():
    assert extract_topics("Money talk, then ART and more money") == ["money", "art"]
