"""
Trait Profiling - multi-signal psychological profiling from text

This package turns a stream of conversational messages into persisted,
confidence-weighted estimates for 39 psychological domains.

Key Design Decisions:
- Three independent signals (lexicon counts, embedding similarity,
  generative-model analysis) are fused per domain with confidence weighting
- Domain scores are online weighted means keyed by accumulated sample count
- Every message is also attributed to a situational context so traits can
  be compared across contexts
- All mutable state lives on a constructed ProfilingEngine, never in globals
"""

__version__ = "1.0.0"
