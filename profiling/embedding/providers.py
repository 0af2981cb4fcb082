"""
Embedding providers.

A provider turns text into a fixed-length vector. Any object exposing
`name` and `embed(text) -> Optional[Sequence[float]]` can be plugged into
the scorer; `None` means the signal is unavailable for that text.
"""

import logging
from typing import List, Optional, Protocol, Sequence

import numpy as np
from sklearn.feature_extraction.text import HashingVectorizer

from ..errors import SignalUnavailableError

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    """Contract for embedding collaborators."""

    name: str

    def embed(self, text: str) -> Optional[Sequence[float]]:
        ...


class HashEmbeddingProvider:
    """
    Deterministic feature-hashing embeddings.

    Needs no model download: texts sharing content words land in the same
    hashed buckets, so prototype similarity still tracks lexical overlap.
    """

    def __init__(self, dim: int = 384):
        if dim < 1:
            raise ValueError(f"dim must be >= 1, got {dim}")
        self.dim = dim
        self.name = f"hash-{dim}"
        self._vectorizer = HashingVectorizer(
            n_features=dim,
            stop_words="english",
            alternate_sign=True,
            norm="l2",
        )

    def embed(self, text: str) -> Optional[List[float]]:
        matrix = self._vectorizer.transform([text or ""])
        return matrix.toarray()[0].tolist()


class SentenceTransformerProvider:
    """
    Embeddings from a sentence-transformers model.

    The model is loaded on first use. Requires the `embeddings` extra.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2", device: Optional[str] = None):
        self.model_name = model_name
        self.device = device
        self.name = f"sentence-transformers:{model_name}"
        self._model = None

    def _load(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer

            logger.info(f"Loading sentence-transformers model {self.model_name}")
            self._model = SentenceTransformer(self.model_name, device=self.device)
        return self._model

    def embed(self, text: str) -> Optional[List[float]]:
        try:
            model = self._load()
            vector = model.encode([text], normalize_embeddings=True)[0]
        except Exception as e:
            raise SignalUnavailableError(f"Embedding model failed: {e}") from e
        return np.asarray(vector, dtype=float).tolist()


def create_provider(provider: str = "hash", model_name: str = "all-MiniLM-L6-v2", dim: int = 384):
    """
    Build an embedding provider by name.

    Args:
        provider: "hash" or "sentence_transformers"
        model_name: Model for the sentence-transformers provider
        dim: Vector size for the hash provider

    Returns:
        Provider instance
    """
    if provider == "hash":
        return HashEmbeddingProvider(dim=dim)
    if provider == "sentence_transformers":
        return SentenceTransformerProvider(model_name=model_name)
    raise ValueError(f"Unknown embedding provider: {provider}")
