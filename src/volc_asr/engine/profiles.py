"""Backend model profiles keyed by logical model selector."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType

DEFAULT_ADDRESS = "wss://openspeech.bytedance.com"


class ProtocolFamily(enum.Enum):
    """Wire/auth convention shared by one or more models."""

    WEBSOCKET_V2 = 0
    SEED_V3 = 1

    @property
    def protocol_type(self) -> int:
        """Numeric discriminator sent as ``protocol_type``."""
        return self.value


class ModelSelector(enum.Enum):
    """Logical recognition models exposed to callers."""

    STANDARD = "standard"
    BIG_MODEL = "bigModel"
    SEED_ASR = "seedAsr"

    @classmethod
    def parse(cls, name: str | ModelSelector) -> ModelSelector:
        """Accept ``bigModel``, ``big_model`` or ``BIG_MODEL`` style names."""
        if isinstance(name, cls):
            return name
        wanted = str(name).strip().replace("_", "").replace("-", "").lower()
        for member in cls:
            if wanted in (member.value.lower(), member.name.replace("_", "").lower()):
                return member
        raise ValueError(f"Unsupported ASR model: {name}")


@dataclass(slots=True, frozen=True)
class ModelProfile:
    """Everything the mapper needs to address one backend model."""

    protocol_family: ProtocolFamily
    address: str
    uri_path: str
    resource_id: str
    requires_bearer_prefix: bool


_PROFILES = MappingProxyType(
    {
        ModelSelector.STANDARD: ModelProfile(
            protocol_family=ProtocolFamily.WEBSOCKET_V2,
            address=DEFAULT_ADDRESS,
            uri_path="/api/v2/asr",
            resource_id="volcengine_input_common",
            requires_bearer_prefix=True,
        ),
        ModelSelector.BIG_MODEL: ModelProfile(
            protocol_family=ProtocolFamily.SEED_V3,
            address=DEFAULT_ADDRESS,
            uri_path="/api/v3/sauc/bigmodel_async",
            resource_id="volc.bigasr.sauc.duration",
            requires_bearer_prefix=False,
        ),
        ModelSelector.SEED_ASR: ModelProfile(
            protocol_family=ProtocolFamily.SEED_V3,
            address=DEFAULT_ADDRESS,
            uri_path="/api/v3/sauc/bigmodel_async",
            resource_id="volc.seedasr.sauc.duration",
            requires_bearer_prefix=False,
        ),
    }
)


def resolve(selector: ModelSelector) -> ModelProfile:
    """Return the profile for ``selector``; the table covers every member."""
    return _PROFILES[selector]
