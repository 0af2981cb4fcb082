"""
Batched deep analysis against a generative model.

Messages are queued and analysed in batches. A batch is due once
`batch_size` messages are waiting or `batch_timeout` seconds have passed
since the window opened (end of the last batch, or the first queued
message if no batch has run yet). At most one batch is in flight; while it
runs, new messages keep queueing. Each batch is a single attempt: failures
leave the messages queued and restart the window.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..errors import SignalUnavailableError
from .parsing import (
    AnalysisErr,
    AnalysisErrorKind,
    AnalysisOk,
    AnalysisResult,
    build_prompt,
    parse_analysis_response,
)

logger = logging.getLogger(__name__)


@dataclass
class QueuedMessage:
    message_id: Optional[str]
    content: str
    queued_at: float


class DeepSignalAdapter:
    """
    Queue, trigger and run deep-analysis batches.

    Attributes:
        model: Generative-model collaborator (None disables analysis)
        batch_size: Messages that make a batch due
        batch_timeout: Seconds after which a non-empty queue is due
        max_window_messages: Most recent messages sent per batch
    """

    def __init__(
        self,
        model=None,
        batch_size: int = 5,
        batch_timeout: float = 300.0,
        max_window_messages: int = 20,
        clock: Callable[[], float] = time.monotonic,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.model = model
        self.batch_size = batch_size
        self.batch_timeout = batch_timeout
        self.max_window_messages = max(max_window_messages, batch_size)
        self._clock = clock
        self._lock = threading.Lock()
        self._queue: List[QueuedMessage] = []
        self._busy = False
        self._window_start: Optional[float] = None
        self._last_analysis_time: Optional[float] = None

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def queue_size(self) -> int:
        with self._lock:
            return len(self._queue)

    @property
    def last_analysis_time(self) -> Optional[float]:
        return self._last_analysis_time

    def queue_message(self, message_id: Optional[str], content: str) -> bool:
        """
        Add a message to the queue.

        Returns:
            True if a batch is now due and not already running
        """
        if self.model is None:
            return False
        with self._lock:
            now = self._clock()
            self._queue.append(QueuedMessage(message_id, content, now))
            if self._window_start is None:
                self._window_start = now
        return self.should_trigger()

    def should_trigger(self) -> bool:
        """Whether a batch is due (size or timeout) and none is in flight."""
        with self._lock:
            if self.model is None or self._busy or not self._queue:
                return False
            if len(self._queue) >= self.batch_size:
                return True
            start = self._window_start
            return start is not None and self._clock() - start >= self.batch_timeout

    def run_batch(self) -> AnalysisResult:
        """
        Analyse the current window with a single model call.

        Returns:
            AnalysisOk on success; AnalysisErr when busy, empty, unavailable
            or when generation/parsing fails
        """
        with self._lock:
            if self._busy:
                return AnalysisErr(AnalysisErrorKind.BUSY, "A batch is already in flight")
            if not self._queue:
                return AnalysisErr(AnalysisErrorKind.EMPTY_BATCH, "No queued messages")
            if self.model is None:
                return AnalysisErr(AnalysisErrorKind.UNAVAILABLE, "No generative model configured")
            self._busy = True
            snapshot_size = len(self._queue)
            window = self._queue[-self.max_window_messages:]

        result: AnalysisResult = AnalysisErr(AnalysisErrorKind.GENERATION_FAILED, "Batch aborted")
        try:
            result = self._analyze(window)
        finally:
            with self._lock:
                self._busy = False
                self._finish_batch(result, snapshot_size, len(window))
        return result

    def _analyze(self, window: List[QueuedMessage]) -> AnalysisResult:
        try:
            ready = self.model.is_ready()
        except Exception as e:
            logger.warning(f"Generative model readiness check failed: {e}")
            return AnalysisErr(AnalysisErrorKind.UNAVAILABLE, str(e))
        if not ready:
            logger.warning("Generative model not ready, skipping deep analysis for this cycle")
            return AnalysisErr(AnalysisErrorKind.UNAVAILABLE, "Model not ready")

        logger.info(f"Running deep analysis on {len(window)} messages")
        prompt = build_prompt([m.content for m in window])
        try:
            response = self.model.generate(prompt)
        except SignalUnavailableError as e:
            logger.warning(f"Deep analysis failed: {e}")
            return AnalysisErr(AnalysisErrorKind.GENERATION_FAILED, str(e))
        except Exception as e:
            logger.error(f"Generative model raised {type(e).__name__}: {e}")
            return AnalysisErr(AnalysisErrorKind.GENERATION_FAILED, f"{type(e).__name__}: {e}")

        result = parse_analysis_response(
            response,
            message_count=len(window),
            message_ids=[m.message_id for m in window],
            messages=[m.content for m in window],
        )
        if isinstance(result, AnalysisErr):
            logger.warning(f"Could not parse deep analysis ({result.kind.value}): {result.detail}")
        return result

    def _finish_batch(self, result: AnalysisResult, snapshot_size: int, window_size: int) -> None:
        # Caller holds the lock. Only messages queued after the snapshot survive a success.
        now = self._clock()
        if isinstance(result, AnalysisOk):
            skipped = snapshot_size - window_size
            if skipped > 0:
                logger.info(f"Dropped {skipped} queued messages older than the analysis window")
            self._queue = self._queue[snapshot_size:]
            self._last_analysis_time = now
        self._window_start = now

    def reset(self) -> None:
        """Drop queued messages and timing state."""
        with self._lock:
            self._queue = []
            self._window_start = None
            self._last_analysis_time = None
