"""
Profile summary reporting.

Summarizes the accumulated profile: score distribution over populated
domains, profile completeness, per-category coverage and the most
pronounced domains. The report describes what has been observed; it
makes no claim about psychometric validity.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Any, Optional, Sequence

import numpy as np
import pandas as pd

from ..domains import DOMAIN_CATEGORIES, PSYCHOLOGICAL_DOMAINS, get_domain_display_name
from ..storage.domain_store import DomainScore

logger = logging.getLogger(__name__)

CONFIDENT_THRESHOLD = 0.4
NOTABLE_DEVIATION = 0.15


@dataclass
class ScoreDistributionStats:
    """Statistics about score distribution."""
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 0.2, "p50": 0.5, "p90": 0.8}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class ProfileReport:
    """
    Summary of an accumulated profile.

    Completeness = 0.5 * mean confidence + 0.5 * share of domains with
    confidence >= 0.4, both taken over all 39 domains.
    """
    messages_processed: int
    domains_with_data: int
    completeness: float
    distribution_stats: Optional[ScoreDistributionStats]
    category_coverage: Dict[str, float]
    notable_domains: List[Dict[str, Any]] = field(default_factory=list)
    additional_metrics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "messages_processed": self.messages_processed,
            "domains_with_data": self.domains_with_data,
            "completeness": float(self.completeness),
            "category_coverage": {k: float(v) for k, v in self.category_coverage.items()},
            "notable_domains": self.notable_domains,
            "additional_metrics": self.additional_metrics,
        }
        if self.distribution_stats:
            result["distribution_stats"] = self.distribution_stats.to_dict()
        return result

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved profile report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        lines = [
            "Profile Report",
            "=" * 50,
            "",
            f"Messages processed: {self.messages_processed}",
            f"Domains with data:  {self.domains_with_data}/{len(PSYCHOLOGICAL_DOMAINS)}",
            f"Completeness:       {self.completeness:.2%}",
        ]

        if self.distribution_stats:
            lines.extend([
                "",
                "Score Distribution:",
                f"  Mean: {self.distribution_stats.mean:.4f}",
                f"  Std:  {self.distribution_stats.std:.4f}",
                f"  Min:  {self.distribution_stats.min:.4f}",
                f"  Max:  {self.distribution_stats.max:.4f}",
            ])

        if self.notable_domains:
            lines.extend(["", "Notable Domains:"])
            for d in self.notable_domains:
                lines.append(f"  {d['domain_name']}: {d['score']:.2f} (confidence {d['confidence']:.2f})")

        return "\n".join(lines)


def compute_score_distribution_stats(
    scores: np.ndarray,
    quantiles: Sequence[float] = (0.1, 0.25, 0.5, 0.75, 0.9)
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for scores.

    Args:
        scores: Array of domain scores
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance
    """
    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(scores, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        mean=float(np.mean(scores)),
        std=float(np.std(scores)),
        min=float(np.min(scores)),
        max=float(np.max(scores)),
        quantiles=quantile_dict
    )


def compute_profile_completeness(scores: Sequence[DomainScore], total_domains: int = len(PSYCHOLOGICAL_DOMAINS)) -> float:
    """Blend of average confidence and share of confidently scored domains."""
    if total_domains <= 0:
        return 0.0
    confidences = [s.confidence for s in scores]
    average = sum(confidences) / total_domains
    confident = sum(1 for c in confidences if c >= CONFIDENT_THRESHOLD) / total_domains
    return average * 0.5 + confident * 0.5


def scores_to_frame(scores: Sequence[DomainScore]) -> pd.DataFrame:
    """One row per domain score."""
    columns = ["domain_id", "category", "score", "confidence", "data_points_count", "last_updated"]
    return pd.DataFrame([s.to_dict() for s in scores], columns=columns)


def create_profile_report(
    scores: Sequence[DomainScore],
    messages_processed: int = 0,
    additional_metrics: Optional[Dict[str, Any]] = None,
) -> ProfileReport:
    """
    Create a ProfileReport from the aggregate domain scores.

    Args:
        scores: Aggregate DomainScore entries
        messages_processed: Messages analysed so far
        additional_metrics: Extra values to carry in the report

    Returns:
        ProfileReport instance
    """
    df = scores_to_frame(scores)
    populated = df[df["data_points_count"] > 0]

    stats = None
    if not populated.empty:
        stats = compute_score_distribution_stats(populated["score"].to_numpy())

    coverage = {}
    for category, domains in DOMAIN_CATEGORIES.items():
        covered = populated["domain_id"].isin(domains).sum()
        coverage[category] = float(covered) / len(domains)

    notable = populated[(populated["score"] - 0.5).abs() >= NOTABLE_DEVIATION]
    notable = notable.assign(deviation=(notable["score"] - 0.5).abs())
    notable = notable.sort_values("deviation", ascending=False)
    notable_domains = [
        {
            "domain_id": row.domain_id,
            "domain_name": get_domain_display_name(row.domain_id),
            "score": float(row.score),
            "confidence": float(row.confidence),
        }
        for row in notable.itertuples()
    ]

    report = ProfileReport(
        messages_processed=messages_processed,
        domains_with_data=int(len(populated)),
        completeness=compute_profile_completeness(scores),
        distribution_stats=stats,
        category_coverage=coverage,
        notable_domains=notable_domains,
        additional_metrics=additional_metrics or {},
    )
    logger.info(f"Profile report: {report.domains_with_data} domains with data, "
                f"completeness {report.completeness:.2%}")
    return report
