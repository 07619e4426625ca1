"""Typed commands for the OctoPrint tool endpoint.

Every operation on ``/api/printer/tool`` is one pydantic model. The set is closed: the read
command `ToolStateCommand` plus the write commands collected in `WriteCommand`, a union
discriminated by the ``command`` field the server expects in every POST body.

How to use the most important parts:
- Build a command (e.g. `SelectCommand(tool="tool1")`) and hand it to
  `octoscreen.client.services.tools.do` or `OctoPrintClient.tools.do`.
- `encode(command)`: Returns the `Request` (method, URI, body) without performing any I/O.
- `parse_command(body)`: Validate a raw JSON write body against the command union.
"""

import collections.abc
import json
import typing

import pydantic
import pydantic_core

from octoscreen.client import consts, exceptions


class Request(typing.NamedTuple):
    """An encoded command, ready for the transport."""

    method: str
    uri: str
    body: bytes | None = None


class ToolStateCommand(pydantic.BaseModel):
    """Retrieve actual, target and offset temperatures of all tools, plus an optional history."""

    history: bool = False
    limit: int = 0

    model_config = pydantic.ConfigDict(extra="forbid")

    def encode(self) -> Request:
        """Encode as a GET with ``history`` and ``limit`` in the query string."""
        history = "true" if self.history else "false"
        return Request("GET", f"{consts.URI_TOOL}?history={history}&limit={self.limit}")


class WriteToolCommand(pydantic.BaseModel):
    """Base for commands that POST a JSON body with a ``command`` discriminator."""

    command: str

    model_config = pydantic.ConfigDict(extra="forbid")

    def encode(self) -> Request:
        """Encode as a POST whose body holds ``command`` next to the payload fields.

        Raises:
            exceptions.OctoPrintEncodingError: If the payload cannot be serialized.
        """
        try:
            body = self.model_dump_json().encode("utf-8")
        except (pydantic_core.PydanticSerializationError, ValueError, TypeError) as e:
            raise exceptions.OctoPrintEncodingError(f"Failed to encode '{self.command}' command: {e}") from e
        return Request("POST", consts.URI_TOOL, body)


class TargetCommand(WriteToolCommand):
    """Set target temperatures, keyed ``tool{n}`` with n starting at 0."""

    command: typing.Literal["target"] = "target"
    target: dict[str, int]


class OffsetCommand(WriteToolCommand):
    """Set temperature offsets, keyed ``tool{n}`` with n starting at 0."""

    command: typing.Literal["offset"] = "offset"
    offsets: dict[str, int]


class ExtrudeCommand(WriteToolCommand):
    """Extrude filament from the selected tool. A negative amount (mm) retracts."""

    command: typing.Literal["extrude"] = "extrude"
    amount: int


class SelectCommand(WriteToolCommand):
    """Select the printer's current tool (``tool{n}``)."""

    command: typing.Literal["select"] = "select"
    tool: str


class FlowrateCommand(WriteToolCommand):
    """Change the flow rate factor applied to extrusion.

    The factor is a percentage (75-125 on stock firmware). It travels as a JSON string;
    integers are accepted and rendered in decimal. The range is left to the server.
    """

    command: typing.Literal["flowrate"] = "flowrate"
    factor: str

    @pydantic.field_validator("factor", mode="before")
    @classmethod
    def int_factor_to_str(cls, v: typing.Any) -> typing.Any:
        """Accept an integer percentage."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


WriteCommand = typing.Annotated[
    TargetCommand | OffsetCommand | ExtrudeCommand | SelectCommand | FlowrateCommand,
    pydantic.Field(discriminator="command"),
]
ToolCommand = ToolStateCommand | TargetCommand | OffsetCommand | ExtrudeCommand | SelectCommand | FlowrateCommand

WRITE_COMMANDS = (TargetCommand, OffsetCommand, ExtrudeCommand, SelectCommand, FlowrateCommand)

_write_command_adapter: pydantic.TypeAdapter = pydantic.TypeAdapter(WriteCommand)


def encode(command: ToolCommand) -> Request:
    """Encode any tool command into its `Request`.

    Raises:
        TypeError: If ``command`` is not one of the tool commands.
        exceptions.OctoPrintEncodingError: If a write payload cannot be serialized.
    """
    if isinstance(command, (ToolStateCommand, *WRITE_COMMANDS)):
        return command.encode()
    raise TypeError(f"Unsupported tool command: {type(command).__name__}")


def parse_command(data: str | bytes | collections.abc.Mapping[str, typing.Any]) -> WriteToolCommand:
    """Validate a raw write body (JSON text or mapping) into its command model.

    Raises:
        ValueError: If the body is not valid JSON, names an unknown command or
            carries unexpected fields. `pydantic.ValidationError` is a `ValueError`.
    """
    if isinstance(data, (str, bytes)):
        data = json.loads(data)
    return _write_command_adapter.validate_python(data)
