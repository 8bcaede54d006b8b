"""Streaming ASR client package exports."""

from .client import AsrClient, AsrListener, SessionState
from .config import AuthConfig, ClientConfig, load_config
from .engine.params import ParameterSet, build_config
from .engine.profiles import ModelProfile, ModelSelector, ProtocolFamily, resolve
from .engine.results import ErrorEvent, MessageKind, RecognitionEvent
from .runtime import AsrRuntime

__all__ = [
    "AsrClient",
    "AsrListener",
    "AsrRuntime",
    "AuthConfig",
    "ClientConfig",
    "ErrorEvent",
    "MessageKind",
    "ModelProfile",
    "ModelSelector",
    "ParameterSet",
    "ProtocolFamily",
    "RecognitionEvent",
    "SessionState",
    "build_config",
    "load_config",
    "resolve",
]
