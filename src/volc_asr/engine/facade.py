"""Engine bindings consumed by the client."""

from __future__ import annotations

import enum
import importlib
import logging
from collections.abc import Callable
from typing import Protocol

from ..config import AsrConfig
from . import keys
from .params import ParamValue
from .results import MessageKind

logger = logging.getLogger(__name__)

MessageHandler = Callable[[MessageKind, bytes], None]


class Directive(enum.Enum):
    """Control directives understood by the engine."""

    START = "start"
    STOP = "stop"
    FINISH_TALKING = "finish_talking"
    SYNC_STOP = "sync_stop"


class EngineFacade(Protocol):
    """Opaque recognition engine: a configuration sink plus a directive sender.

    Inbound traffic arrives through the ``on_message`` callback registered in
    :meth:`create_instance`, possibly on a thread owned by the engine.
    """

    def create_instance(self, on_message: MessageHandler) -> None:
        """Allocate the native engine and register the message callback."""

    def destroy(self) -> None:
        """Release the native engine; the instance is unusable afterwards."""

    def set_param(self, key: str, value: ParamValue) -> None:
        """Store one configuration value ahead of :meth:`init`."""

    def init(self) -> int:
        """Apply the configuration; ``0`` means success."""

    def send_directive(self, directive: Directive, payload: bytes = b"") -> bool:
        """Send ``directive``; ``False`` when the engine rejects it."""


EngineFactory = Callable[[], EngineFacade]


class StubEngine:
    """In-process engine that records everything it is asked to do.

    Nothing is recognized; callers can replay inbound traffic with
    :meth:`emit` to drive a client without the native SDK.
    """

    def __init__(self, init_code: int = keys.RESULT_OK) -> None:
        self.init_code = init_code
        self.params: dict[str, ParamValue] = {}
        self.directives: list[Directive] = []
        self.rejected: set[Directive] = set()
        self.created = False
        self.destroyed = False
        self.initialized = False
        self._on_message: MessageHandler | None = None

    def create_instance(self, on_message: MessageHandler) -> None:
        self._on_message = on_message
        self.created = True

    def destroy(self) -> None:
        self._on_message = None
        self.destroyed = True

    def set_param(self, key: str, value: ParamValue) -> None:
        self.params[key] = value

    def init(self) -> int:
        self.initialized = self.init_code == keys.RESULT_OK
        return self.init_code

    def send_directive(self, directive: Directive, payload: bytes = b"") -> bool:
        self.directives.append(directive)
        return directive not in self.rejected

    @property
    def alive(self) -> bool:
        return self.created and not self.destroyed

    def emit(self, kind: MessageKind, payload: bytes | str = b"") -> None:
        """Deliver an inbound message as the native engine would."""
        if self._on_message is None:
            raise RuntimeError("StubEngine has no registered message handler")
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        self._on_message(kind, payload)


def _load_factory(spec: str) -> EngineFactory:
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(
            f"Engine factory '{spec}' must look like 'package.module:callable'"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise RuntimeError(
            f"Engine binding module '{module_name}' is not installed."
        ) from exc
    try:
        factory = getattr(module, attr)
    except AttributeError as exc:
        raise ValueError(f"Module '{module_name}' has no attribute '{attr}'") from exc
    if not callable(factory):
        raise ValueError(f"Engine factory '{spec}' is not callable")
    return factory


def build_engine_factory(asr_cfg: AsrConfig) -> EngineFactory:
    """Factory that maps config settings to a concrete engine constructor."""
    mode = asr_cfg.engine.lower()
    if mode == "stub":
        return StubEngine
    if mode == "import":
        logger.info("Loading engine binding from %s", asr_cfg.factory)
        return _load_factory(asr_cfg.factory)
    raise ValueError(f"Unsupported engine mode: {asr_cfg.engine}")
