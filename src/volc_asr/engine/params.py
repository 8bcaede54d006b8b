"""Translate a model profile and parameter bundle into engine configuration.

The mapper is pure: it never touches the engine. It returns an ordered
:class:`ConfigAssignment` that the client applies entry by entry before
asking the engine to initialize.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from ..config import AuthConfig, ParamsConfig
from . import keys
from .profiles import ModelProfile, ProtocolFamily

logger = logging.getLogger(__name__)

ParamValue = Union[bool, str, int, float]


class ParamType(enum.Enum):
    """Tag for the value types the engine accepts."""

    BOOL = "bool"
    STRING = "string"
    INT = "int"
    FLOAT = "float"


def classify_value(value: Any) -> ParamType | None:
    """Return the tag for ``value`` or ``None`` when the engine cannot take it."""
    # bool is a subclass of int, so it has to be checked first.
    if isinstance(value, bool):
        return ParamType.BOOL
    if isinstance(value, str):
        return ParamType.STRING
    if isinstance(value, int):
        return ParamType.INT
    if isinstance(value, float):
        return ParamType.FLOAT
    return None


@dataclass(slots=True, frozen=True)
class ParameterSet:
    """Desired recognition behaviour for one setup call."""

    enable_itn: bool = True
    enable_punc: bool = True
    enable_ddc: bool = False
    auto_stop: bool = False
    vad_tail_silence_ms: int = 2000  # only sent when auto_stop is on
    extras: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.vad_tail_silence_ms < 0:
            raise ValueError(
                f"vad_tail_silence_ms must be >= 0, got {self.vad_tail_silence_ms}"
            )
        object.__setattr__(self, "extras", MappingProxyType(dict(self.extras)))

    @classmethod
    def from_config(cls, cfg: ParamsConfig) -> ParameterSet:
        return cls(
            enable_itn=cfg.enable_itn,
            enable_punc=cfg.enable_punc,
            enable_ddc=cfg.enable_ddc,
            auto_stop=cfg.auto_stop,
            vad_tail_silence_ms=cfg.vad_tail_silence_ms,
            extras=cfg.extras,
        )


@dataclass(slots=True, frozen=True)
class ConfigEntry:
    key: str
    value: ParamValue
    kind: ParamType


@dataclass(slots=True)
class ConfigAssignment:
    """Ordered key/value pairs for one setup call.

    A key appears once unless an extras entry overrides it; the override is
    appended after the original so applying entries in order leaves the
    extras value in effect.
    """

    entries: list[ConfigEntry] = field(default_factory=list)
    overridden: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def add(self, key: str, value: ParamValue) -> None:
        kind = classify_value(value)
        if kind is None:
            raise TypeError(f"Unsupported value type for '{key}': {type(value).__name__}")
        self.entries.append(ConfigEntry(key=key, value=value, kind=kind))

    def keys(self) -> list[str]:
        return [entry.key for entry in self.entries]

    def as_dict(self) -> dict[str, ParamValue]:
        """Effective configuration after last-write-wins."""
        return {entry.key: entry.value for entry in self.entries}

    def __contains__(self, key: object) -> bool:
        return any(entry.key == key for entry in self.entries)

    def __iter__(self) -> Iterator[ConfigEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def default_log_level() -> str:
    """Engine log verbosity for the current build mode (``python -O`` is release)."""
    return keys.LOG_LEVEL_DEBUG if __debug__ else keys.LOG_LEVEL_WARN


def _resource_key(family: ProtocolFamily) -> str:
    if family is ProtocolFamily.WEBSOCKET_V2:
        return keys.KEY_ASR_CLUSTER
    return keys.KEY_RESOURCE_ID


def build_config(
    profile: ModelProfile,
    auth: AuthConfig,
    params: ParameterSet,
    log_level: str | None = None,
) -> ConfigAssignment:
    """Produce the full configuration for ``profile`` with ``params`` applied.

    Parameters
    ----------
    profile:
        Resolved backend profile; protocol-specific keys follow its family.
    auth:
        Application credentials. The token is passed raw and only prefixed
        here when the profile asks for it.
    params:
        Behaviour flags plus free-form ``extras`` applied last.
    log_level:
        SDK log verbosity; defaults to :func:`default_log_level`.
    """
    out = ConfigAssignment()

    out.add(keys.KEY_ENGINE_NAME, keys.ENGINE_NAME_ASR)
    out.add(keys.KEY_LOG_LEVEL, log_level or default_log_level())
    out.add(keys.KEY_APP_ID, auth.app_id)
    out.add(keys.KEY_UID, auth.uid)
    out.add(keys.KEY_RECORDER_TYPE, keys.RECORDER_TYPE_RECORDER)

    family = profile.protocol_family
    token = auth.token
    if profile.requires_bearer_prefix:
        token = keys.BEARER_PREFIX + token
    out.add(keys.KEY_ASR_ADDRESS, profile.address)
    out.add(keys.KEY_ASR_URI, profile.uri_path)
    out.add(keys.KEY_APP_TOKEN, token)
    out.add(_resource_key(family), profile.resource_id)
    out.add(keys.KEY_PROTOCOL_TYPE, family.protocol_type)

    if family is ProtocolFamily.SEED_V3:
        # The backend does not reliably infer the model from the resource id.
        out.add(keys.KEY_MODEL_NAME, keys.FORCED_MODEL_NAME)
        out.notes.append(f"forced {keys.KEY_MODEL_NAME}={keys.FORCED_MODEL_NAME}")

    out.add(keys.KEY_ENABLE_ITN, params.enable_itn)
    out.add(keys.KEY_SHOW_PUNC, params.enable_punc)
    out.add(keys.KEY_ENABLE_DDC, params.enable_ddc)
    out.add(keys.KEY_AUTO_STOP, params.auto_stop)
    if params.auto_stop:
        out.add(keys.KEY_VAD_TAIL_SILENCE, params.vad_tail_silence_ms)

    out.add(keys.KEY_RESULT_TYPE, keys.RESULT_TYPE_SINGLE)

    for key, value in params.extras.items():
        if classify_value(value) is None:
            logger.warning(
                "Dropping extra '%s': unsupported type %s", key, type(value).__name__
            )
            continue
        if key in out:
            logger.info("Extra '%s' overrides a mapped value", key)
            out.overridden.append(key)
        out.add(key, value)

    return out
