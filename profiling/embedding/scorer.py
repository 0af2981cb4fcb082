"""
Embedding similarity scoring.

Each domain is represented by a prototype centroid: the mean of its
example sentence embeddings, L2-normalized. A message is scored against
every centroid by cosine similarity, remapped from [-1, 1] to [0, 1]:

    score = (cosine(message, centroid) + 1) / 2

Centroids are computed once per set of prototype texts and cached. The
cache is fingerprinted so that changed texts (or a different provider)
force a rebuild.
"""

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import joblib
import numpy as np
from sklearn.preprocessing import normalize as l2_normalize

from ..errors import SignalUnavailableError
from .prototypes import TRAIT_PROTOTYPE_TEXTS

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 0.2


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 when either vector has zero norm or the lengths differ.
    """
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    if va.shape != vb.shape or va.size == 0:
        return 0.0

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.clip(np.dot(va, vb) / (norm_a * norm_b), -1.0, 1.0))


def rescale_similarity(similarity: float) -> float:
    """Map a cosine similarity from [-1, 1] onto [0, 1]."""
    return (similarity + 1) / 2


def compute_centroid(vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """Mean of the vectors, L2-normalized (a zero mean stays zero)."""
    matrix = np.asarray(vectors, dtype=float)
    mean = matrix.mean(axis=0).reshape(1, -1)
    return l2_normalize(mean, norm="l2")[0]


def prototype_fingerprint(prototype_texts: Dict[str, Sequence[str]], provider_name: str) -> str:
    """Stable hash of the prototype texts and the provider that embeds them."""
    digest = hashlib.sha256(provider_name.encode("utf-8"))
    for domain in sorted(prototype_texts):
        digest.update(domain.encode("utf-8"))
        for text in prototype_texts[domain]:
            digest.update(b"\x00" + text.encode("utf-8"))
    return digest.hexdigest()


@dataclass
class EmbeddingSignal:
    """Per-domain similarity scores for one message."""
    scores: Dict[str, float]
    similarities: Dict[str, float]
    confidence: float


class EmbeddingSimilarityScorer:
    """
    Scores messages against per-domain prototype centroids.

    Attributes:
        provider: Embedding collaborator
        prototype_texts: Example sentences per domain
    """

    def __init__(
        self,
        provider,
        prototype_texts: Optional[Dict[str, Sequence[str]]] = None,
        cache_path: Optional[str] = None,
    ):
        self.provider = provider
        self.prototype_texts = dict(prototype_texts or TRAIT_PROTOTYPE_TEXTS)
        self.cache_path = cache_path
        self._centroids: Optional[Dict[str, np.ndarray]] = None
        self._fingerprint: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self._centroids is not None and self._fingerprint == self._current_fingerprint()

    def _current_fingerprint(self) -> str:
        return prototype_fingerprint(self.prototype_texts, getattr(self.provider, "name", "unknown"))

    def set_prototype_texts(self, prototype_texts: Dict[str, Sequence[str]]) -> None:
        """Replace the prototype texts; centroids are rebuilt on next use."""
        self.prototype_texts = dict(prototype_texts)
        self._centroids = None
        self._fingerprint = None
        logger.info("Prototype texts changed, centroid cache invalidated")

    def ensure_centroids(self) -> Dict[str, np.ndarray]:
        """
        Return the centroid cache, building or loading it if stale.

        Raises:
            SignalUnavailableError: If the provider cannot embed the prototypes
        """
        fingerprint = self._current_fingerprint()
        if self._centroids is not None and self._fingerprint == fingerprint:
            return self._centroids

        if self.cache_path and self._load_cache(self.cache_path, fingerprint):
            return self._centroids

        logger.info(f"Building prototype centroids for {len(self.prototype_texts)} domains")
        centroids = {}
        for domain, texts in self.prototype_texts.items():
            try:
                vectors = [self.provider.embed(text) for text in texts]
            except SignalUnavailableError:
                raise
            except Exception as e:
                raise SignalUnavailableError(f"Provider failed embedding prototypes for {domain}: {e}") from e
            vectors = [v for v in vectors if v is not None]
            if not vectors:
                raise SignalUnavailableError(f"No prototype embeddings for {domain}")
            centroids[domain] = compute_centroid(vectors)

        self._centroids = centroids
        self._fingerprint = fingerprint
        if self.cache_path:
            try:
                self.save_cache(self.cache_path)
            except OSError as e:
                logger.warning(f"Could not write centroid cache to {self.cache_path}: {e}")
        return centroids

    def save_cache(self, filepath: str) -> None:
        """Save centroids and their fingerprint to disk."""
        if self._centroids is None:
            raise RuntimeError("No centroids to save; call ensure_centroids() first")
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        state = {
            "fingerprint": self._fingerprint,
            "centroids": self._centroids,
        }
        joblib.dump(state, filepath)
        logger.info(f"Saved prototype centroids to {filepath}")

    def _load_cache(self, filepath: str, fingerprint: str) -> bool:
        if not Path(filepath).exists():
            return False
        try:
            state = joblib.load(filepath)
        except Exception as e:
            logger.warning(f"Ignoring unreadable centroid cache at {filepath}: {e}")
            return False
        if not isinstance(state, dict) or state.get("fingerprint") != fingerprint:
            logger.info(f"Ignoring stale centroid cache at {filepath}")
            return False
        self._centroids = state["centroids"]
        self._fingerprint = fingerprint
        logger.info(f"Loaded prototype centroids from {filepath}")
        return True

    def score_embedding(self, embedding: Sequence[float]) -> Dict[str, float]:
        """Raw cosine similarity of an embedding to every domain centroid."""
        centroids = self.ensure_centroids()
        return {
            domain: cosine_similarity(embedding, centroid)
            for domain, centroid in centroids.items()
        }

    def score_text(self, text: str) -> Optional[EmbeddingSignal]:
        """
        Embed a message and score it against all prototypes.

        Returns:
            EmbeddingSignal, or None when the embedding is unavailable
            (provider failure, null result, or zero vector)
        """
        try:
            embedding = self.provider.embed(text)
            if embedding is None or not np.any(np.asarray(embedding, dtype=float)):
                return None
            similarities = self.score_embedding(embedding)
        except SignalUnavailableError as e:
            logger.warning(f"Embedding signal unavailable: {e}")
            return None
        except Exception as e:
            logger.error(f"Embedding provider raised {type(e).__name__}: {e}")
            return None

        values = np.array(list(similarities.values()))
        confidence = float(min(1.0, max(MIN_CONFIDENCE, np.std(values) * 4)))

        return EmbeddingSignal(
            scores={d: rescale_similarity(s) for d, s in similarities.items()},
            similarities=similarities,
            confidence=confidence,
        )

    def most_similar_domains(self, text: str, top_n: int = 5) -> List[Tuple[str, float]]:
        """Top-N domains by remapped similarity for a text."""
        signal = self.score_text(text)
        if signal is None:
            return []
        ranked = sorted(signal.scores.items(), key=lambda item: item[1], reverse=True)
        return ranked[:top_n]

    def reset(self) -> None:
        self._centroids = None
        self._fingerprint = None
