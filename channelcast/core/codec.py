"""Wire codec — turns envelopes into transport messages and back.

The codec is stateless and swappable: anything with ``serialize`` and
``deserialize`` methods can be handed to a BroadcastRouter.
"""

from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable


class SerializationError(ValueError):
    """Raised when a payload cannot be encoded for the wire."""


class DeserializationError(ValueError):
    """Raised when a wire message cannot be decoded."""


@runtime_checkable
class Codec(Protocol):
    """Serialize/deserialize pair used by the router."""

    def serialize(self, payload: Any) -> str: ...

    def deserialize(self, message: str | bytes) -> Any: ...


class JsonCodec:
    """JSON codec producing compact UTF-8 text.

    Parameters
    ----------
    sort_keys:
        Emit object keys in sorted order, giving byte-identical output for
        equal payloads.
    """

    def __init__(self, *, sort_keys: bool = False) -> None:
        self._sort_keys = sort_keys

    def serialize(self, payload: Any) -> str:
        try:
            return json.dumps(
                payload,
                sort_keys=self._sort_keys,
                separators=(",", ":"),
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Payload is not JSON serializable: {exc}") from exc

    def deserialize(self, message: str | bytes) -> Any:
        try:
            if isinstance(message, bytes):
                message = message.decode("utf-8")
            return json.loads(message)
        except UnicodeDecodeError as exc:
            raise DeserializationError(f"Invalid UTF-8: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise DeserializationError(f"Invalid JSON: {exc}") from exc

    def __repr__(self) -> str:
        return f"JsonCodec(sort_keys={self._sort_keys})"
