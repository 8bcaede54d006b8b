import threading

from volc_asr.config import AsrConfig, ClientConfig, ParamsConfig, QueueConfig
from volc_asr.engine.facade import Directive, StubEngine
from volc_asr.engine.results import ErrorEvent, MessageKind, RecognitionEvent
from volc_asr.runtime import AsrRuntime, BoundedQueue, QueueListener


def test_bounded_queue_drops_when_full() -> None:
    q = BoundedQueue(maxsize=1, name="Q")
    assert q.put("a", timeout_ms=1)
    assert not q.put("b", timeout_ms=1)
    assert q.get(timeout_ms=1) == (True, "a")
    assert q.get(timeout_ms=1) == (False, None)


def test_queue_listener_preserves_order() -> None:
    q = BoundedQueue(maxsize=8, name="Q")
    listener = QueueListener(q)
    listener.on_result(RecognitionEvent("a", False))
    listener.on_error(ErrorEvent("e"))
    listener.on_result(RecognitionEvent("ab", True))
    drained = [q.get(timeout_ms=1)[1] for _ in range(3)]
    assert drained == [
        RecognitionEvent("a", False),
        ErrorEvent("e"),
        RecognitionEvent("ab", True),
    ]


def test_runtime_forwards_events_and_shuts_down() -> None:
    engines: list[StubEngine] = []

    def factory() -> StubEngine:
        engines.append(StubEngine())
        return engines[-1]

    received = []
    done = threading.Event()

    def on_event(event) -> None:
        received.append(event)
        if isinstance(event, RecognitionEvent) and event.is_final:
            done.set()

    cfg = ClientConfig(
        asr=AsrConfig(stop_timeout_ms=50),
        params=ParamsConfig(auto_stop=True),
        queues=QueueConfig(events=4),
    )
    runtime = AsrRuntime(cfg, engine_factory=factory, on_event=on_event)
    assert runtime.start()
    engines[0].emit(MessageKind.PARTIAL_RESULT, '{"result":[{"text":"hi"}]}')
    engines[0].emit(MessageKind.FINAL_RESULT, '{"result":[{"text":"hi there"}]}')
    assert done.wait(timeout=2.0)
    runtime.stop()

    assert received == [
        RecognitionEvent("hi", False),
        RecognitionEvent("hi there", True),
    ]
    assert engines[0].destroyed
    assert runtime.should_stop()


class DrainingEngine(StubEngine):
    """Emits a trailing final result, then confirms the stop, from its own thread."""

    def send_directive(self, directive: Directive, payload: bytes = b"") -> bool:
        ok = super().send_directive(directive, payload)
        if directive is Directive.FINISH_TALKING:
            threading.Timer(0.05, self._finish).start()
        return ok

    def _finish(self) -> None:
        self.emit(MessageKind.FINAL_RESULT, '{"result":{"text":"trailing words"}}')
        self.emit(MessageKind.ENGINE_STOP)


def test_stop_delivers_trailing_results_before_release() -> None:
    engines: list[DrainingEngine] = []

    def factory() -> DrainingEngine:
        engines.append(DrainingEngine())
        return engines[-1]

    received = []
    runtime = AsrRuntime(
        ClientConfig(asr=AsrConfig(stop_timeout_ms=2000)),
        engine_factory=factory,
        on_event=received.append,
    )
    assert runtime.start()
    runtime.stop()

    assert received == [RecognitionEvent("trailing words", True)]
    assert engines[0].destroyed
    assert engines[0].directives[-1] is Directive.FINISH_TALKING


def test_stop_gives_up_after_timeout() -> None:
    engines: list[StubEngine] = []

    def factory() -> StubEngine:
        engines.append(StubEngine())
        return engines[-1]

    runtime = AsrRuntime(ClientConfig(asr=AsrConfig(stop_timeout_ms=20)), engine_factory=factory)
    assert runtime.start()
    runtime.stop()
    assert engines[0].destroyed
    assert runtime.client.state.value == "uninitialized"
