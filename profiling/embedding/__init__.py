"""Embedding similarity signal against per-domain prototype centroids."""

from .providers import (
    EmbeddingProvider,
    HashEmbeddingProvider,
    SentenceTransformerProvider,
    create_provider,
)
from .scorer import (
    EmbeddingSimilarityScorer,
    EmbeddingSignal,
    cosine_similarity,
    rescale_similarity,
    compute_centroid,
)
from .prototypes import TRAIT_PROTOTYPE_TEXTS

__all__ = [
    "EmbeddingProvider",
    "HashEmbeddingProvider",
    "SentenceTransformerProvider",
    "create_provider",
    "EmbeddingSimilarityScorer",
    "EmbeddingSignal",
    "cosine_similarity",
    "rescale_similarity",
    "compute_centroid",
    "TRAIT_PROTOTYPE_TEXTS",
]
