"""Tool temperature models and the tool-state response normalizer.

The tool endpoint answers with a single flat object: every tool key (``tool0``, ``bed``, ...)
sits next to an optional ``history`` array. The models here hold the split form
(``current`` vs. ``history``). The reshape is done generically on the parsed JSON and the
result is then validated strictly, so tool keys stay open-ended and server-defined.

How to use the most important parts:
- `ToolStateResponse.from_wire(raw)`: Turn the raw response bytes into a typed response.
- `split_history(payload)`: The generic reshape on its own, for already-parsed JSON.
- `split_entry(entry)`: The same reshape for a single history entry.
- `ToolStateResponse.to_wire()`: The inverse, producing the server's flat form again.
"""

import collections.abc
import datetime
import json
import typing

import pydantic
import structlog

from octoscreen.client import exceptions

from .common import WarnExtraFieldsModel, ZeroFloat

logger = structlog.get_logger(__name__)

HISTORY_KEY = "history"


class ToolState(WarnExtraFieldsModel):
    """Temperature state of a single heated component."""

    actual: ZeroFloat = 0.0
    target: ZeroFloat = 0.0
    offset: ZeroFloat = 0.0


class HistoryEntry(pydantic.BaseModel):
    """A temperature snapshot at a point in time, in split form.

    On the wire the entry is flat: ``time`` sits next to one key per tool. `split_entry`
    moves the per-tool snapshots under ``tools``. Scalar ``actual``/``target``/``offset``
    values are kept as-is for servers that report a single heater per entry.
    """

    timestamp: int = 0
    actual: ZeroFloat = 0.0
    target: ZeroFloat = 0.0
    offset: ZeroFloat = 0.0
    tools: dict[str, ToolState] = pydantic.Field(default_factory=dict)

    model_config = pydantic.ConfigDict(extra="allow")

    @property
    def at(self) -> datetime.datetime:
        """The snapshot time as an aware UTC datetime."""
        return datetime.datetime.fromtimestamp(self.timestamp, tz=datetime.UTC)

    def to_wire(self) -> dict[str, typing.Any]:
        """Return the flat wire form of this entry."""
        data: dict[str, typing.Any] = {
            name: getattr(self, name) for name in ("actual", "target", "offset") if name in self.model_fields_set
        }
        data.update(self.model_extra or {})
        # A leftover ``time`` means the entry carried both keys and ``timestamp`` won.
        data["timestamp" if "time" in data else "time"] = self.timestamp
        for key, state in self.tools.items():
            data[key] = state.model_dump(mode="json")
        return data


def split_entry(entry: collections.abc.Mapping[str, typing.Any]) -> dict[str, typing.Any]:
    """Reshape one flat history entry into the `HistoryEntry` split form.

    Every object value is a tool snapshot, whatever its key. ``timestamp`` takes precedence
    over ``time``; when both are present ``time`` stays behind as an extra field.
    """
    split: dict[str, typing.Any] = {}
    tools: dict[str, typing.Any] = {}
    for key, value in entry.items():
        if isinstance(value, collections.abc.Mapping):
            tools[key] = value
        else:
            split[key] = value

    if "timestamp" not in split and "time" in split:
        split["timestamp"] = split.pop("time")
    # A scalar ``tools`` key is left in place so the strict decode rejects it.
    split.setdefault("tools", tools)
    return split


def split_history(payload: collections.abc.Mapping[str, typing.Any]) -> dict[str, typing.Any]:
    """Reshape a flat tool-state object into ``{"current": ..., "history": ...}``.

    Every key other than ``history`` becomes a current-state entry and every history entry
    goes through `split_entry`. A missing or ``null`` history becomes an empty list. The
    input mapping is not modified.
    """
    current = dict(payload)
    history = current.pop(HISTORY_KEY, None)
    if history is None:
        history = []
    elif isinstance(history, list):
        history = [split_entry(e) if isinstance(e, collections.abc.Mapping) else e for e in history]
    return {"current": current, "history": history}


class ToolStateResponse(pydantic.BaseModel):
    """Current temperatures by tool key plus the (optional) temperature history."""

    current: dict[str, ToolState] = pydantic.Field(default_factory=dict)
    history: list[HistoryEntry] = pydantic.Field(default_factory=list)

    @classmethod
    def from_wire(cls, raw: bytes | str) -> "ToolStateResponse":
        """Normalize a raw tool-state response body.

        Args:
            raw: The response body exactly as returned by the transport.

        Returns:
            A `ToolStateResponse`.

        Raises:
            exceptions.OctoPrintPayloadError: If the body is not a JSON object or does not
                validate against the typed structure.
        """
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise exceptions.OctoPrintPayloadError(f"Tool state is not valid JSON: {e}", raw) from e

        if not isinstance(data, dict):
            raise exceptions.OctoPrintPayloadError(
                f"Tool state must be a JSON object, got {type(data).__name__}", raw
            )

        try:
            response = cls.model_validate(split_history(data))
        except pydantic.ValidationError as e:
            raise exceptions.OctoPrintPayloadError(f"Tool state does not match the expected shape: {e}", raw) from e

        logger.debug("Normalized tool state", tools=list(response.current), history=len(response.history))
        return response

    def to_wire(self) -> dict[str, typing.Any]:
        """Return the flat form the server sends (tool keys next to ``history``)."""
        data: dict[str, typing.Any] = {key: state.model_dump(mode="json") for key, state in self.current.items()}
        data[HISTORY_KEY] = [entry.to_wire() for entry in self.history]
        return data
