"""
Profiling engine.

Owns every piece of mutable profiling state (stores, caches, the deep
analysis queue, the debounce timer) behind an explicit init/reset
lifecycle, so several independent engines can coexist.

Per message:
1. Lexicon and embedding signals are computed and fused per domain
2. Fused scores update the aggregate store (one data point each)
3. The message context is detected; confident detections also update
   the per-context store
4. The message is queued for deep analysis; a due batch runs in the
   background (or inline) and its LLM observations are fused and applied
   in a secondary pass that never re-applies lexicon/embedding signals
"""

import json
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .configs import merge_with_defaults, get_config_value
from .context.classifier import ContextClassifier, ContextDetectionResult, ContextType
from .context.variance import (
    ContextDetectionHistory,
    ContextInsight,
    ContextStatistics,
    ContextVarianceAnalyzer,
    ContextVariation,
)
from .deep.adapter import DeepSignalAdapter
from .deep.client import OpenAICompatibleModel
from .deep.parsing import AnalysisErr
from .domains import PSYCHOLOGICAL_DOMAINS
from .embedding.providers import create_provider
from .embedding.scorer import EmbeddingSimilarityScorer
from .errors import SignalUnavailableError
from .evaluation.report import ProfileReport, create_profile_report
from .fusion.signal_fusion import (
    FusionResult,
    FusionWeights,
    SignalFusionEngine,
    SignalObservation,
    SignalType,
    signal_agreement,
)
from .graph.relationships import RelationshipGraphBuilder, RelationshipTriple, TripleStore, extract_topics
from .lexicon.extractor import LexiconSignalExtractor
from .storage.domain_store import (
    ContextDomainScore,
    ContextDomainScoreStore,
    DomainScore,
    DomainScoreStore,
    HybridSignalRecord,
    KeyedLocks,
    SignalRecordStore,
)
from .storage.kv import DebouncedPersister, create_store

logger = logging.getLogger(__name__)

DATA_VOLUME_SATURATION = 30
FACTOR_SMOOTHING = 0.3

STATE_KEYS = (
    "domain_scores",
    "confidence_factors",
    "context_domain_scores",
    "hybrid_signal_scores",
    "relationship_triples",
    "context_detection_history",
    "engine_state",
)


def _log_deep_failure(future: Future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error(f"Background deep analysis failed: {type(error).__name__}: {error}")


@dataclass
class MessageAnalysis:
    """What processing one message produced."""
    message_id: Optional[str]
    context: ContextDetectionResult
    fused: Dict[str, FusionResult]
    lexicon_available: bool
    embedding_available: bool
    deep_triggered: bool
    topics: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message_id": self.message_id,
            "context": self.context.to_dict(),
            "fused": {d: r.to_dict() for d, r in self.fused.items()},
            "lexicon_available": self.lexicon_available,
            "embedding_available": self.embedding_available,
            "deep_triggered": self.deep_triggered,
            "topics": list(self.topics),
        }


class ProfilingEngine:
    """
    Streaming, multi-signal profiler.

    Collaborators can be injected (tests pass fakes); otherwise they are
    built from the config.

    Attributes:
        config: Merged configuration dictionary
        domain_scores: Aggregate DomainScoreStore
        context_scores: Per-context ContextDomainScoreStore
        triples: Append-only relationship TripleStore
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        kv_store=None,
        embedding_provider=None,
        generative_model=None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = merge_with_defaults(config or {})
        cfg = self.config

        self.user_id = get_config_value(cfg, "global.user_id", "default_user")
        self.min_context_confidence = get_config_value(cfg, "context.min_confidence", 0.3)
        self.background_deep = get_config_value(cfg, "deep_analysis.background", True)

        self.extractor = LexiconSignalExtractor() if get_config_value(cfg, "lexicon.enabled", True) else None

        self.scorer = None
        if get_config_value(cfg, "embedding.enabled", True):
            provider = embedding_provider or create_provider(
                provider=get_config_value(cfg, "embedding.provider", "hash"),
                model_name=get_config_value(cfg, "embedding.model_name", "all-MiniLM-L6-v2"),
                dim=get_config_value(cfg, "embedding.dim", 384),
            )
            self.scorer = EmbeddingSimilarityScorer(
                provider, cache_path=get_config_value(cfg, "embedding.cache_path")
            )

        self.adapter = None
        if get_config_value(cfg, "deep_analysis.enabled", True):
            model = generative_model or OpenAICompatibleModel(
                endpoint=get_config_value(cfg, "deep_analysis.endpoint"),
                model=get_config_value(cfg, "deep_analysis.model"),
                timeout=get_config_value(cfg, "deep_analysis.timeout_seconds", 120),
                temperature=get_config_value(cfg, "deep_analysis.temperature", 0.3),
            )
            self.adapter = DeepSignalAdapter(
                model,
                batch_size=get_config_value(cfg, "deep_analysis.batch_size", 5),
                batch_timeout=get_config_value(cfg, "deep_analysis.batch_timeout_seconds", 300),
                max_window_messages=get_config_value(cfg, "deep_analysis.max_window_messages", 20),
                clock=clock,
            )

        self.fusion = SignalFusionEngine(FusionWeights.from_config(cfg))
        self.classifier = ContextClassifier()

        self.domain_scores = DomainScoreStore(on_change=self._mark_dirty)
        self.context_scores = ContextDomainScoreStore(
            [c.value for c in ContextType], on_change=self._mark_dirty
        )
        self.signal_records = SignalRecordStore(on_change=self._mark_dirty)
        self.context_history = ContextDetectionHistory()
        self.triples = TripleStore()

        self.variance = ContextVarianceAnalyzer(
            self.context_scores,
            threshold=get_config_value(cfg, "context.significance_threshold", 0.10),
        )
        self.graph_builder = RelationshipGraphBuilder(
            self.triples,
            correlation_threshold=get_config_value(cfg, "graph.correlation_threshold", 0.6),
            contradiction_high=get_config_value(cfg, "graph.contradiction_high", 0.7),
            contradiction_low=get_config_value(cfg, "graph.contradiction_low", 0.3),
            indicates_threshold=get_config_value(cfg, "graph.indicates_threshold", 0.5),
        )

        self.kv_store = kv_store or create_store(
            backend=get_config_value(cfg, "storage.backend", "memory"),
            path=get_config_value(cfg, "storage.path"),
        )
        self.persister = DebouncedPersister(
            self.kv_store,
            self._snapshot,
            interval=get_config_value(cfg, "storage.flush_interval_seconds", 1.0),
        )

        self._domain_locks = KeyedLocks()
        self._state_lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: Optional[Future] = None
        self._messages_processed = 0
        self._topics: List[str] = []
        self._initialized = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def init(self, start_background: bool = True) -> "ProfilingEngine":
        """
        Load persisted state, warm the prototype cache and start the flush timer.

        Args:
            start_background: Start the debounced flush thread

        Returns:
            self
        """
        if self._initialized:
            return self

        self._load_state()
        if self.scorer is not None:
            try:
                self.scorer.ensure_centroids()
            except SignalUnavailableError as e:
                logger.warning(f"Prototype centroids unavailable, embedding signal disabled for now: {e}")
        if start_background:
            self.persister.start()

        self._initialized = True
        logger.info(f"Profiling engine initialized ({self._messages_processed} messages on record)")
        return self

    def reset(self, clear_caches: bool = False) -> None:
        """
        Clear all accumulated profile state.

        Args:
            clear_caches: Also drop the prototype centroid cache
        """
        self.wait_for_deep_analysis()
        self.domain_scores.reset()
        self.context_scores.reset()
        self.signal_records.reset()
        self.context_history.reset()
        removed = self.triples.clear()
        if self.adapter is not None:
            self.adapter.reset()
        if clear_caches and self.scorer is not None:
            self.scorer.reset()
        with self._state_lock:
            self._messages_processed = 0
            self._topics = []
        self._mark_dirty()
        logger.info(f"Profile reset ({removed} relationship triples removed)")

    def flush(self) -> None:
        """
        Persist pending state now.

        Raises:
            PersistenceError: If the write fails
        """
        self.persister.flush()

    def close(self) -> None:
        """Wait for in-flight analysis, flush, and stop background work."""
        self.wait_for_deep_analysis()
        try:
            self.flush()
        finally:
            self.persister.stop()
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    def __enter__(self) -> "ProfilingEngine":
        return self.init()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # Message processing
    # =========================================================================

    @property
    def messages_processed(self) -> int:
        return self._messages_processed

    def process_message(
        self,
        text: str,
        message_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> MessageAnalysis:
        """
        Analyse one message and fold it into the profile.

        Args:
            text: Message text
            message_id: Optional caller id for the message
            session_id: Optional conversation/session id

        Returns:
            MessageAnalysis describing the signals, fusion and context
        """
        if not self._initialized:
            self.init()

        with self._state_lock:
            self._messages_processed += 1
            sample_size = self._messages_processed

        observations: List[SignalObservation] = []

        lexicon_available = False
        if self.extractor is not None:
            lexicon = self.extractor.extract(text, sample_size=sample_size)
            lexicon_available = bool(lexicon.scores)
            for domain, score in lexicon.scores.items():
                observations.append(self.fusion.observe(
                    domain, SignalType.LEXICON, score, lexicon.confidence,
                    matched_words=lexicon.matched_words.get(domain),
                ))

        embedding_available = False
        if self.scorer is not None:
            embedding = self.scorer.score_text(text)
            if embedding is not None:
                embedding_available = True
                for domain, score in embedding.scores.items():
                    observations.append(self.fusion.observe(
                        domain, SignalType.EMBEDDING, score, embedding.confidence,
                        prototype_similarity=embedding.similarities[domain],
                    ))

        fused = self.fusion.fuse_all(observations)
        applied = self._apply_fused(fused, data_points=1)

        context = self.classifier.classify(text)
        self.context_history.record(context, message_id=message_id, session_id=session_id)
        self._apply_context(context, applied, data_points=1)

        topics = extract_topics(text)
        if topics:
            with self._state_lock:
                self._topics.extend(t for t in topics if t not in self._topics)

        deep_triggered = False
        if self.adapter is not None and self.adapter.queue_message(message_id, text):
            deep_triggered = self._dispatch_deep()

        self._mark_dirty()
        logger.debug(
            f"Processed message {message_id or sample_size}: {len(applied)} domains updated, "
            f"context={context.primary_context.value} ({context.confidence:.2f})"
        )

        return MessageAnalysis(
            message_id=message_id,
            context=context,
            fused=applied,
            lexicon_available=lexicon_available,
            embedding_available=embedding_available,
            deep_triggered=deep_triggered,
            topics=topics,
        )

    def _apply_fused(self, fused: Dict[str, FusionResult], data_points: int) -> Dict[str, FusionResult]:
        """Fold non-neutral fusion results into the aggregate store."""
        applied = {}
        for domain, result in fused.items():
            if result.is_neutral:
                continue
            with self._domain_locks(domain):
                before = self.domain_scores.get(domain)
                had_data = before.data_points_count > 0
                previous_score = before.score

                entry = self.domain_scores.update_domain_score(domain, result.score, data_points)
                self._update_confidence_factors(
                    domain, entry, result, had_data, previous_score
                )
                self.domain_scores.calculate_confidence(domain)

            for o in result.observations:
                self.signal_records.upsert(HybridSignalRecord(
                    domain_id=domain,
                    signal_type=o.signal_type.value,
                    score=o.score,
                    confidence=o.confidence,
                    weight_used=o.weight,
                    evidence=o.evidence,
                    matched_words=list(o.matched_words),
                    prototype_similarity=o.prototype_similarity,
                ))
            applied[domain] = result
        return applied

    def _smoothed_factor(self, domain: str, name: str, value: float) -> float:
        if not self.domain_scores.has_confidence_factor(domain, name):
            return value
        current = self.domain_scores.get_confidence_factors(domain)[name].value
        return current * (1 - FACTOR_SMOOTHING) + value * FACTOR_SMOOTHING

    def _update_confidence_factors(
        self,
        domain: str,
        entry: DomainScore,
        result: FusionResult,
        had_data: bool,
        previous_score: float,
    ) -> None:
        store = self.domain_scores
        store.set_confidence_factor(
            domain, "data_volume", min(1.0, entry.data_points_count / DATA_VOLUME_SATURATION)
        )
        store.set_confidence_factor(
            domain, "cross_validation",
            self._smoothed_factor(domain, "cross_validation", signal_agreement(result.observations)),
        )
        if had_data:
            consistency = max(0.0, 1 - 2 * abs(result.score - previous_score))
            stability = max(0.0, 1 - 10 * abs(entry.score - previous_score))
            store.set_confidence_factor(
                domain, "consistency", self._smoothed_factor(domain, "consistency", consistency)
            )
            store.set_confidence_factor(
                domain, "temporal_stability",
                self._smoothed_factor(domain, "temporal_stability", stability),
            )

    def _apply_context(
        self, context: ContextDetectionResult, applied: Dict[str, FusionResult], data_points: int
    ) -> None:
        if context.confidence <= self.min_context_confidence:
            return
        for domain, result in applied.items():
            self.context_scores.update_context_domain_score(
                domain, context.primary_context.value, result.score, data_points
            )

    # =========================================================================
    # Deep analysis
    # =========================================================================

    def _dispatch_deep(self) -> bool:
        if not self.background_deep:
            self.run_deep_analysis()
            return True

        with self._state_lock:
            if self._pending is not None and not self._pending.done():
                return False
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="deep-analysis")
            self._pending = self._executor.submit(self.run_deep_analysis)
            self._pending.add_done_callback(_log_deep_failure)
        return True

    def check_deep_timeout(self) -> bool:
        """Start a batch if the timeout has elapsed; returns True if one started."""
        if self.adapter is None or not self.adapter.should_trigger():
            return False
        return self._dispatch_deep()

    def wait_for_deep_analysis(self, timeout: Optional[float] = None) -> None:
        """Block until any background deep batch finishes; failures are logged, not raised."""
        pending = self._pending
        if pending is not None:
            pending.exception(timeout=timeout)

    def run_deep_analysis(self) -> Optional[Dict[str, FusionResult]]:
        """
        Run one deep batch and apply its LLM observations.

        Only the new LLM signal is fused here; lexicon and embedding
        observations were already applied when each message was processed.

        Returns:
            Applied fusion results, or None if the batch produced no signal
        """
        if self.adapter is None:
            return None

        result = self.adapter.run_batch()
        if isinstance(result, AnalysisErr):
            logger.info(f"Deep analysis produced no signal: {result.kind.value}")
            return None

        observations = [
            self.fusion.observe(
                domain, SignalType.LLM, assessment.score, assessment.confidence,
                evidence=assessment.evidence,
            )
            for domain, assessment in result.domains.items()
        ]
        fused = self.fusion.fuse_all(observations)
        applied = self._apply_fused(fused, data_points=result.message_count)

        if result.messages:
            context = self.classifier.classify_messages(result.messages)
            self._apply_context(context, applied, data_points=result.message_count)

        self._mark_dirty()
        logger.info(f"Deep analysis applied to {len(applied)} domains from {result.message_count} messages")
        return applied

    # =========================================================================
    # Derived views
    # =========================================================================

    def set_weight(self, signal: SignalType, value: float) -> FusionWeights:
        """Change one signal weight; the other two are rebalanced to sum to 100."""
        weights = self.fusion.set_weight(signal, value)
        self._mark_dirty()
        return weights

    @property
    def weights(self) -> FusionWeights:
        return self.fusion.weights

    def build_relationships(self, topics: Optional[Sequence[str]] = None) -> List[RelationshipTriple]:
        """Append relationship triples for the current aggregate scores."""
        if topics is None:
            with self._state_lock:
                topics = list(self._topics)
        emitted = self.graph_builder.build(
            self.domain_scores.score_map(), topics=topics, user_id=self.user_id
        )
        self._mark_dirty()
        return emitted

    def analyze_context_variations(self) -> List[ContextVariation]:
        return self.variance.analyze()

    def generate_context_insights(self) -> List[ContextInsight]:
        return self.variance.generate_insights()

    def context_statistics(self) -> ContextStatistics:
        return self.context_history.statistics()

    def contextual_profile(self, context_type) -> List[ContextDomainScore]:
        """Populated domain scores within one context."""
        return self.context_scores.for_context(ContextType(context_type).value)

    def profile(self) -> List[DomainScore]:
        """Aggregate scores for all domains, in canonical order."""
        return [self.domain_scores.get(domain) for domain in PSYCHOLOGICAL_DOMAINS]

    def report(self) -> ProfileReport:
        return create_profile_report(
            self.profile(),
            messages_processed=self._messages_processed,
            additional_metrics={
                "fusion_weights": self.weights.to_dict(),
                "context_statistics": self.context_statistics().to_dict(),
                "graph": self.triples.stats(),
                "context_dependent_domains": [
                    v.domain_id for v in self.variance.context_dependent_domains()
                ],
            },
        )

    # =========================================================================
    # Persistence
    # =========================================================================

    def _mark_dirty(self) -> None:
        self.persister.mark_dirty()

    def _snapshot(self) -> Dict[str, bytes]:
        domain_records = self.domain_scores.to_records()
        with self._state_lock:
            engine_state = {
                "messages_processed": self._messages_processed,
                "topics": list(self._topics),
                "fusion_weights": self.fusion.weights.to_dict(),
            }
        payload = {
            "domain_scores": domain_records["domain_scores"],
            "confidence_factors": domain_records["confidence_factors"],
            "context_domain_scores": self.context_scores.to_records(),
            "hybrid_signal_scores": self.signal_records.to_records(),
            "relationship_triples": self.triples.to_records(),
            "context_detection_history": self.context_history.to_records(),
            "engine_state": engine_state,
        }
        return {key: json.dumps(value).encode("utf-8") for key, value in payload.items()}

    def _read(self, key: str, default):
        raw = self.kv_store.get(key)
        if raw is None:
            return default
        return json.loads(raw.decode("utf-8"))

    def _load_state(self) -> None:
        self.domain_scores.load_records(
            self._read("domain_scores", []), self._read("confidence_factors", [])
        )
        self.context_scores.load_records(self._read("context_domain_scores", []))
        self.signal_records.load_records(self._read("hybrid_signal_scores", []))
        self.triples.load_records(self._read("relationship_triples", []))
        self.context_history.load_records(self._read("context_detection_history", []))

        engine_state = self._read("engine_state", {})
        with self._state_lock:
            self._messages_processed = engine_state.get("messages_processed", 0)
            self._topics = list(engine_state.get("topics", []))
        if "fusion_weights" in engine_state:
            self.fusion.weights = FusionWeights.from_dict(engine_state["fusion_weights"])
