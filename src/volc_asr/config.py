from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


@dataclass(slots=True, frozen=True)
class AuthConfig:
    """Credentials handed to the engine on every setup."""

    app_id: str = ""
    token: str = ""  # raw token, never prefixed
    uid: str = ""


@dataclass(slots=True)
class AsrConfig:
    """Model selection and engine binding."""

    model: str = "standard"  # standard | bigModel | seedAsr
    engine: str = "stub"  # or "import" to load a real SDK binding
    factory: str = ""  # "module:attribute" used when engine == "import"
    stop_timeout_ms: int = 3000  # wait for trailing results on graceful stop


@dataclass(slots=True)
class ParamsConfig:
    """Recognition behaviour, mirrored into a ParameterSet at setup."""

    enable_itn: bool = True
    enable_punc: bool = True
    enable_ddc: bool = False
    auto_stop: bool = False
    vad_tail_silence_ms: int = 2000
    extras: dict[str, Any] = dataclasses.field(default_factory=dict)


@dataclass(slots=True)
class QueueConfig:
    """Capacity of the event hand-off queue."""

    events: int = 64


@dataclass(slots=True)
class LoggingConfig:
    """Global logging preferences."""

    level: str = "INFO"
    engine_level: str | None = None  # SDK log verbosity; None picks the build default


@dataclass(slots=True)
class ClientConfig:
    """Top-level configuration for the ASR client service."""

    auth: AuthConfig = dataclasses.field(default_factory=AuthConfig)
    asr: AsrConfig = dataclasses.field(default_factory=AsrConfig)
    params: ParamsConfig = dataclasses.field(default_factory=ParamsConfig)
    queues: QueueConfig = dataclasses.field(default_factory=QueueConfig)
    logging: LoggingConfig = dataclasses.field(default_factory=LoggingConfig)


def _load_auth(section: dict[str, Any]) -> AuthConfig:
    """Build credentials, coercing YAML scalars such as numeric app ids to strings."""
    values: dict[str, str] = {}
    for name, value in section.items():
        if value is None:
            raise ValueError(f"auth.{name} is set but empty")
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            raise ValueError(f"auth.{name} must be a string, got {type(value).__name__}")
        values[name] = str(value)
    return AuthConfig(**values)


def load_config(path: str | Path) -> ClientConfig:
    """
    Load configuration from ``path`` if it exists; otherwise, return defaults.

    Parameters
    ----------
    path : str | Path
        Location of the YAML config file.
    """

    data: dict[str, Any] = {}
    p = Path(path)
    if p.exists():
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file '{p}' must contain a mapping at top level")
    return ClientConfig(
        auth=_load_auth(data.get("auth") or {}),
        asr=AsrConfig(**data.get("asr", {})),
        params=ParamsConfig(**data.get("params", {})),
        queues=QueueConfig(**data.get("queues", {})),
        logging=LoggingConfig(**data.get("logging", {})),
    )
