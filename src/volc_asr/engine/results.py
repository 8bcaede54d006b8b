"""Normalize inbound engine messages into recognition and error events."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


class MessageKind(enum.Enum):
    """Tag attached by the engine to every inbound message."""

    PARTIAL_RESULT = "partial_result"
    FINAL_RESULT = "final_result"
    ENGINE_START = "engine_start"
    ENGINE_STOP = "engine_stop"
    ENGINE_ERROR = "engine_error"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class RecognitionEvent:
    """Canonical transcript update delivered to listeners."""

    text: str
    is_final: bool


@dataclass(slots=True, frozen=True)
class ErrorEvent:
    """Engine or setup failure delivered to listeners."""

    message: str


def _decode_object(payload: bytes | str) -> dict[str, Any] | None:
    try:
        data = json.loads(payload)
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError and UnicodeDecodeError are ValueErrors; pathological
        # nesting exhausts the decoder's recursion limit.
        logger.debug("Ignoring undecodable payload (%d bytes): %s", len(payload), exc)
        return None
    if not isinstance(data, dict):
        logger.debug("Ignoring payload with top-level %s", type(data).__name__)
        return None
    return data


def _extract_text(data: dict[str, Any]) -> Any:
    result = data.get("result")
    # websocket/v2 wraps results in a list, seed/v3 sends a single object.
    if isinstance(result, list):
        if not result or not isinstance(result[0], dict):
            return None
        return result[0].get("text")
    if isinstance(result, dict):
        return result.get("text")
    return None


def parse_result(payload: bytes | str, is_final: bool) -> RecognitionEvent | None:
    """Return a :class:`RecognitionEvent` for ``payload`` or ``None``.

    ``is_final`` comes from the message tag the payload arrived with; the JSON
    body looks the same for partial and final results. Malformed payloads,
    unknown shapes and empty transcripts all yield ``None``.
    """
    data = _decode_object(payload)
    if data is None:
        return None
    text = _extract_text(data)
    if not isinstance(text, str) or not text.strip():
        return None
    return RecognitionEvent(text=text, is_final=is_final)


def parse_error(payload: bytes | str) -> ErrorEvent | None:
    """Pull ``err_msg`` out of an engine error payload."""
    data = _decode_object(payload)
    if data is None:
        return None
    message = data.get("err_msg")
    if not isinstance(message, str):
        logger.warning("Engine error payload without err_msg: %s", data)
        return None
    return ErrorEvent(message=message)


def normalize(
    kind: MessageKind, payload: bytes | str
) -> RecognitionEvent | ErrorEvent | None:
    """Dispatch on ``kind``; lifecycle and unknown messages produce nothing."""
    if kind in (MessageKind.PARTIAL_RESULT, MessageKind.FINAL_RESULT):
        return parse_result(payload, is_final=kind is MessageKind.FINAL_RESULT)
    if kind is MessageKind.ENGINE_ERROR:
        return parse_error(payload)
    return None
