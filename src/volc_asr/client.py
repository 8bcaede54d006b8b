"""Session lifecycle around the recognition engine.

``AsrClient`` is the single entry point callers use: pick a model, start and
stop sessions, and receive normalized events through a listener. It is not
internally synchronized; drive it from one thread at a time. The engine may
call :meth:`AsrClient.on_message` from its own thread.
"""

from __future__ import annotations

import enum
import logging
from typing import Protocol

from .config import AuthConfig
from .engine import keys
from .engine.facade import Directive, EngineFacade, EngineFactory
from .engine.params import ConfigAssignment, ParameterSet, build_config
from .engine.profiles import ModelSelector, resolve
from .engine.results import ErrorEvent, MessageKind, RecognitionEvent, normalize

logger = logging.getLogger(__name__)


class AsrListener(Protocol):
    """Receiver for normalized events, called in engine delivery order."""

    def on_result(self, event: RecognitionEvent) -> None:
        ...

    def on_error(self, event: ErrorEvent) -> None:
        ...


class SessionState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    CONFIGURED = "configured"
    RUNNING = "running"
    STOPPING = "stopping"


def _masked(key: str, value: object) -> object:
    if key == keys.KEY_APP_TOKEN and isinstance(value, str):
        return value[:7] + "***" if value.startswith(keys.BEARER_PREFIX) else "***"
    return value


class AsrClient:
    """Stable recognition API over interchangeable backend protocols.

    Parameters
    ----------
    auth:
        Credentials shared by every setup; never modified.
    engine_factory:
        Callable returning a fresh :class:`EngineFacade` per setup.
    listener:
        Receives :class:`RecognitionEvent` and :class:`ErrorEvent` values.
    log_level:
        Engine log verbosity; ``None`` uses the build-mode default.
    """

    def __init__(
        self,
        auth: AuthConfig,
        engine_factory: EngineFactory,
        listener: AsrListener | None = None,
        log_level: str | None = None,
    ) -> None:
        self.auth = auth
        self.listener = listener
        self.log_level = log_level
        self._engine_factory = engine_factory
        self._engine: EngineFacade | None = None
        self._state = SessionState.UNINITIALIZED
        self._model: ModelSelector | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def model(self) -> ModelSelector | None:
        """Model of the current configuration, if any."""
        return self._model

    def setup(
        self, model: ModelSelector | str, params: ParameterSet | None = None
    ) -> bool:
        """Tear down any previous engine and configure a new one for ``model``.

        Returns ``True`` once the engine initialized. On failure an
        :class:`ErrorEvent` is delivered and the client is left uninitialized.
        """
        selector = ModelSelector.parse(model)
        params = params or ParameterSet()
        self._teardown()

        profile = resolve(selector)
        try:
            assignment = build_config(profile, self.auth, params, self.log_level)
        except Exception as exc:
            logger.exception("Building engine configuration raised")
            self._fail_setup(f"Invalid engine configuration: {exc}")
            return False
        logger.info(
            "Configuring engine: model=%s protocol=%s uri=%s",
            selector.value,
            profile.protocol_family.name,
            profile.uri_path,
        )
        for note in assignment.notes:
            logger.info("Post-processing: %s", note)

        try:
            engine = self._engine_factory()
            self._engine = engine
            engine.create_instance(self.on_message)
            self._apply(engine, assignment)
            code = engine.init()
        except Exception as exc:
            logger.exception("Engine setup raised")
            self._fail_setup(f"Engine setup failed: {exc}")
            return False

        if code != keys.RESULT_OK:
            self._fail_setup(f"Engine init failed with code {code}")
            return False

        self._model = selector
        self._state = SessionState.CONFIGURED
        logger.info("Engine ready (%s)", selector.value)
        return True

    def start(self) -> bool:
        """Begin a recognition session, resetting any stale one first."""
        if self._engine is None or self._state not in (
            SessionState.CONFIGURED,
            SessionState.RUNNING,
        ):
            logger.warning("start() ignored in state %s", self._state.value)
            return False
        logger.info("Start recording")
        self._send(Directive.SYNC_STOP)
        if not self._send(Directive.START):
            self._state = SessionState.CONFIGURED
            self._deliver_error(ErrorEvent(message="Engine rejected start directive"))
            return False
        self._state = SessionState.RUNNING
        return True

    def stop(self) -> bool:
        """Finish talking; trailing results still arrive until the engine stops."""
        if self._engine is None or self._state is not SessionState.RUNNING:
            logger.debug("stop() ignored in state %s", self._state.value)
            return False
        logger.info("Stop recording")
        # The engine may confirm the stop before send_directive returns.
        self._state = SessionState.STOPPING
        if not self._send(Directive.FINISH_TALKING):
            if self._state is SessionState.STOPPING:
                self._state = SessionState.RUNNING
            return False
        return True

    def cancel(self) -> bool:
        """Stop immediately without waiting for trailing results."""
        if self._engine is None or self._state not in (
            SessionState.RUNNING,
            SessionState.STOPPING,
        ):
            logger.debug("cancel() ignored in state %s", self._state.value)
            return False
        logger.info("Cancel recording")
        self._send(Directive.STOP)
        self._state = SessionState.CONFIGURED
        return True

    def destroy(self) -> None:
        """Release the engine and return to the uninitialized state."""
        self._teardown()

    def on_message(self, kind: MessageKind, payload: bytes) -> None:
        """Inbound channel registered with the engine."""
        if kind is MessageKind.ENGINE_STOP:
            if self._state in (SessionState.RUNNING, SessionState.STOPPING):
                logger.info("Engine stopped")
                self._state = SessionState.CONFIGURED
            return
        if kind in (MessageKind.ENGINE_START, MessageKind.OTHER):
            logger.debug("Engine message %s (%d bytes)", kind.value, len(payload))
            return

        event = normalize(kind, payload)
        if isinstance(event, RecognitionEvent):
            self._deliver_result(event)
        elif isinstance(event, ErrorEvent):
            logger.warning("Engine error: %s", event.message)
            self._deliver_error(event)

    # --- internals ---

    def _apply(self, engine: EngineFacade, assignment: ConfigAssignment) -> None:
        for entry in assignment:
            logger.debug(
                "set %s=%r (%s)", entry.key, _masked(entry.key, entry.value), entry.kind.value
            )
            engine.set_param(entry.key, entry.value)

    def _send(self, directive: Directive) -> bool:
        if self._engine is None:
            logger.warning("No engine for directive %s", directive.value)
            return False
        ok = self._engine.send_directive(directive, b"")
        if not ok:
            logger.warning("Engine rejected directive %s", directive.value)
        return ok

    def _teardown(self) -> None:
        engine, self._engine = self._engine, None
        self._state = SessionState.UNINITIALIZED
        self._model = None
        if engine is None:
            return
        logger.info("Destroying engine instance")
        try:
            engine.destroy()
        except Exception:
            logger.exception("Engine destroy raised")

    def _fail_setup(self, message: str) -> None:
        logger.error(message)
        self._teardown()
        self._deliver_error(ErrorEvent(message=message))

    def _deliver_result(self, event: RecognitionEvent) -> None:
        if self.listener is None:
            return
        try:
            self.listener.on_result(event)
        except Exception:
            logger.exception("Listener raised while handling a result")

    def _deliver_error(self, event: ErrorEvent) -> None:
        if self.listener is None:
            return
        try:
            self.listener.on_error(event)
        except Exception:
            logger.exception("Listener raised while handling an error")
