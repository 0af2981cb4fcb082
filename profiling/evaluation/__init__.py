"""Evaluation module for profile summaries."""

from .report import (
    compute_score_distribution_stats,
    compute_profile_completeness,
    scores_to_frame,
    ProfileReport,
    create_profile_report
)

__all__ = [
    "compute_score_distribution_stats",
    "compute_profile_completeness",
    "scores_to_frame",
    "ProfileReport",
    "create_profile_report"
]
