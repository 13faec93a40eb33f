"""Serialization of event batches for the Matomo bulk tracking API."""

import json
from collections.abc import Mapping, Sequence
from typing import Any, Protocol
from urllib.parse import urlencode

from pydantic import BaseModel

from matomo_tracker.exceptions import SerializationError


class EventSerializer(Protocol):
    """Turns a batch of events into a request body."""

    def serialize(self, events: Sequence[Any]) -> bytes:
        """Return the encoded payload or raise SerializationError."""
        ...


class JSONEventSerializer:
    """Encodes events in the Matomo bulk tracking format.

    Each event becomes one query string in ``{"requests": ["?idsite=1&..."]}``.
    Events are either mappings of tracking parameters or pydantic models,
    which are dumped by alias with unset (None) fields dropped.
    """

    def serialize(self, events: Sequence[Any]) -> bytes:
        requests = ["?" + urlencode(self._query_items(event)) for event in events]
        return json.dumps({"requests": requests}).encode("utf-8")

    def _query_items(self, event: Any) -> list[tuple[str, str]]:
        if isinstance(event, BaseModel):
            params = event.model_dump(mode="json", by_alias=True, exclude_none=True)
        elif isinstance(event, Mapping):
            params = dict(event)
        else:
            raise SerializationError(
                f"Cannot serialize event of type {type(event).__name__}"
            )

        items: list[tuple[str, str]] = []
        for key, value in params.items():
            if value is None:
                continue
            items.append((str(key), self._encode_value(key, value)))
        return items

    def _encode_value(self, key: Any, value: Any) -> str:
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (str, int, float)):
            return str(value)
        # Structured parameters such as custom variables (_cvar) travel as JSON
        if isinstance(value, (Mapping, list, tuple)):
            try:
                return json.dumps(value, separators=(",", ":"))
            except (TypeError, ValueError) as e:
                raise SerializationError(f"Parameter {key!r} is not JSON encodable") from e
        raise SerializationError(
            f"Parameter {key!r} has unsupported type {type(value).__name__}"
        )
