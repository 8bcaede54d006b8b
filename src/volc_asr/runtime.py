from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Any

from .client import AsrClient, SessionState
from .config import ClientConfig
from .engine.facade import EngineFactory, build_engine_factory
from .engine.params import ParameterSet
from .engine.profiles import ModelSelector
from .engine.results import ErrorEvent, RecognitionEvent


class BoundedQueue:
    """
    Thread-safe queue that enforces a maximum size and drops newest items
    when the queue is full. Each put/get supports a timeout so callers can
    periodically check for shutdown signals.
    """

    def __init__(self, maxsize: int, name: str) -> None:
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._name = name

    def put(self, item: Any, timeout_ms: float) -> bool:
        """
        Attempt to enqueue ``item`` within the given timeout.

        Returns False when the queue is still full after ``timeout_ms``.
        """
        try:
            self._queue.put(item, timeout=timeout_ms / 1000.0)
            return True
        except queue.Full:
            return False

    def get(self, timeout_ms: float) -> tuple[bool, Any | None]:
        """
        Attempt to dequeue an item within ``timeout_ms`` milliseconds.

        Returns ``(False, None)`` when the queue is empty so consumers can
        poll again while respecting shutdown events.
        """
        try:
            return True, self._queue.get(timeout=timeout_ms / 1000.0)
        except queue.Empty:
            return False, None

    def qsize(self) -> int:
        """Return the current number of enqueued items (approximate)."""
        return self._queue.qsize()

    def name(self) -> str:
        """Human-readable queue name for logging."""
        return self._name


class QueueListener:
    """Listener that hands events from the engine thread to a consumer, in order."""

    def __init__(self, events: BoundedQueue, timeout_ms: float = 5) -> None:
        self.events = events
        self.timeout_ms = timeout_ms
        self.logger = logging.getLogger(__name__)

    def on_result(self, event: RecognitionEvent) -> None:
        self._put(event)

    def on_error(self, event: ErrorEvent) -> None:
        self._put(event)

    def _put(self, event: RecognitionEvent | ErrorEvent) -> None:
        if not self.events.put(event, timeout_ms=self.timeout_ms):
            self.logger.warning(
                "[%s] drop (qsize=%d)", self.events.name(), self.events.qsize()
            )


class AsrRuntime:
    """
    Wires an :class:`AsrClient` to a dispatch thread that drains recognition
    and error events.

    The dispatch thread only logs by default; pass ``on_event`` to forward
    events elsewhere.
    """

    def __init__(
        self,
        config: ClientConfig,
        engine_factory: EngineFactory | None = None,
        on_event=None,
    ) -> None:
        self.config = config
        self.events = BoundedQueue(maxsize=config.queues.events, name="EventQueue")
        self.on_event = on_event
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.logger = logging.getLogger(__name__)
        level_name = config.logging.level.upper()
        self.logger.setLevel(getattr(logging, level_name, logging.INFO))

        self.model = ModelSelector.parse(config.asr.model)
        self.params = ParameterSet.from_config(config.params)
        self.client = AsrClient(
            auth=config.auth,
            engine_factory=engine_factory or build_engine_factory(config.asr),
            listener=QueueListener(self.events),
            log_level=config.logging.engine_level,
        )

    def start(self) -> bool:
        """Launch the dispatch thread, configure the engine and begin a session."""
        self.logger.info("ASR runtime starting (model=%s)", self.model.value)
        self._stop.clear()
        self._thread = threading.Thread(
            target=self.dispatch_loop, name="DispatchThread", daemon=True
        )
        self._thread.start()
        if not self.client.setup(self.model, self.params):
            return False
        return self.client.start()

    def stop(self) -> None:
        """
        Finish the session gracefully, then release the engine.

        Waits up to ``asr.stop_timeout_ms`` for the engine to confirm the stop
        so trailing results reach the queue, then lets the dispatch thread
        drain whatever is queued before joining it.
        """
        self.logger.info("ASR runtime stopping...")
        if self.client.stop():
            deadline = time.monotonic() + self.config.asr.stop_timeout_ms / 1000.0
            while (
                self.client.state is SessionState.STOPPING
                and time.monotonic() < deadline
            ):
                time.sleep(0.01)
            if self.client.state is SessionState.STOPPING:
                self.logger.warning(
                    "Engine did not confirm stop within %d ms; releasing it",
                    self.config.asr.stop_timeout_ms,
                )
        self.client.destroy()
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
        self.logger.info("ASR runtime stopped.")

    def should_stop(self) -> bool:
        """Return ``True`` when :meth:`stop` has been requested."""
        return self._stop.is_set()

    def dispatch_loop(self) -> None:
        """Deliver queued events; after :meth:`stop`, exit once the queue is empty."""
        while True:
            ok, event = self.events.get(timeout_ms=50)
            if not ok:
                if self.should_stop():
                    break
                continue
            if isinstance(event, RecognitionEvent):
                self.logger.info(
                    "Transcript%s: %s", " (final)" if event.is_final else "", event.text
                )
            else:
                self.logger.error("ASR error: %s", event.message)
            if self.on_event is not None:
                try:
                    self.on_event(event)
                except Exception as exc:  # pragma: no cover - protect thread
                    self.logger.exception("Event handler error: %s", exc)
