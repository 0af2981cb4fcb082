"""
Tests for profile reporting

Run with: pytest tests/test_report.py -v
"""

import json

import numpy as np
import pytest

from profiling.domains import PSYCHOLOGICAL_DOMAINS
from profiling.evaluation import (
    compute_profile_completeness,
    compute_score_distribution_stats,
    create_profile_report,
)
from profiling.storage import DomainScore


def _scores(values):
    """DomainScore entries for the first len(values) domains, rest neutral."""
    scores = []
    for i, domain in enumerate(PSYCHOLOGICAL_DOMAINS):
        if i < len(values):
            score, confidence = values[i]
            scores.append(DomainScore(domain, "x", score, confidence, 5))
        else:
            scores.append(DomainScore(domain, "x"))
    return scores


class TestDistributionStats:
    def test_basic_stats(self):
        stats = compute_score_distribution_stats(np.array([0.2, 0.4, 0.6, 0.8]))
        assert stats.mean == pytest.approx(0.5)
        assert stats.min == pytest.approx(0.2)
        assert stats.max == pytest.approx(0.8)
        assert set(stats.quantiles) == {"p10", "p25", "p50", "p75", "p90"}


class TestCompleteness:
    def test_empty_profile(self):
        assert compute_profile_completeness(_scores([])) == 0.0

    def test_blend_of_confidence_and_coverage(self):
        scores = _scores([(0.7, 0.8), (0.6, 0.2)])
        expected = 0.5 * (1.0 / 39) + 0.5 * (1 / 39)
        assert compute_profile_completeness(scores) == pytest.approx(expected)


class TestProfileReport:
    def test_notable_domains_sorted_by_deviation(self):
        report = create_profile_report(_scores([(0.9, 0.5), (0.55, 0.5), (0.2, 0.5)]), messages_processed=7)
        assert report.domains_with_data == 3
        assert [d["domain_id"] for d in report.notable_domains] == [
            PSYCHOLOGICAL_DOMAINS[0], PSYCHOLOGICAL_DOMAINS[2],
        ]
        assert report.category_coverage["Core Personality (Big Five)"] == pytest.approx(3 / 5)

    def test_empty_report(self):
        report = create_profile_report(_scores([]))
        assert report.distribution_stats is None
        assert report.notable_domains == []
        assert "Messages processed: 0" in report.summary()

    def test_save(self, tmp_path):
        report = create_profile_report(_scores([(0.9, 0.5)]), additional_metrics={"graph": {"total_triples": 0}})
        path = tmp_path / "out" / "report.json"
        report.save(str(path))
        saved = json.loads(path.read_text())
        assert saved["domains_with_data"] == 1
        assert saved["additional_metrics"]["graph"]["total_triples"] == 0
