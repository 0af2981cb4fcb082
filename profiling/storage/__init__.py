"""
Score stores and persistence.

This module provides the aggregate and per-context domain score stores,
the key-value persistence port, and the debounced background writer.
"""

from .domain_store import (
    DomainScore,
    DomainScoreStore,
    ContextDomainScore,
    ContextDomainScoreStore,
    ConfidenceFactor,
    HybridSignalRecord,
    SignalRecordStore,
    CONFIDENCE_FACTORS,
    weighted_mean_update,
)
from .kv import (
    KeyValueStore,
    InMemoryKeyValueStore,
    FileKeyValueStore,
    DebouncedPersister,
    create_store,
)

__all__ = [
    "DomainScore",
    "DomainScoreStore",
    "ContextDomainScore",
    "ContextDomainScoreStore",
    "ConfidenceFactor",
    "HybridSignalRecord",
    "SignalRecordStore",
    "CONFIDENCE_FACTORS",
    "weighted_mean_update",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "FileKeyValueStore",
    "DebouncedPersister",
    "create_store",
]
