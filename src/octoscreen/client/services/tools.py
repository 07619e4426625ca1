"""Service for printer tool operations (temperatures, extrusion, tool selection)."""

import collections.abc
import typing

import structlog

from octoscreen.client import commands, models
from octoscreen.client.services.base import BaseService, Transport

logger = structlog.get_logger(__name__)


@typing.overload
def do(transport: Transport, command: commands.ToolStateCommand) -> models.ToolStateResponse: ...


@typing.overload
def do(transport: Transport, command: commands.WriteToolCommand) -> None: ...


def do(transport: Transport, command: commands.ToolCommand) -> models.ToolStateResponse | None:
    """Run one tool command: encode it, make exactly one round trip, decode the answer.

    Transport errors propagate unchanged. Nothing is retried or cached here.

    Args:
        transport: Anything providing ``do_request(method, uri, body) -> bytes``.
        command: The command to run.

    Returns:
        The normalized `ToolStateResponse` for a `ToolStateCommand`, None for write commands.

    Raises:
        exceptions.OctoPrintEncodingError: If the command cannot be encoded. No request is sent.
        exceptions.OctoPrintPayloadError: If a tool-state body cannot be normalized.
    """
    request = commands.encode(command)
    logger.debug("Dispatching tool command", command=type(command).__name__, method=request.method, uri=request.uri)
    body = transport.do_request(request.method, request.uri, request.body)

    if isinstance(command, commands.ToolStateCommand):
        return models.ToolStateResponse.from_wire(body)
    return None


class ToolService(BaseService):
    """Service for the printer's tools.

    Usage Example:
    ```python
        >>> state = client.tools.state(history=True, limit=5)
        >>> print(state.current["tool0"].actual)
        >>> client.tools.set_target({"tool0": 210})
    ```
    """

    def do(self, command: commands.ToolCommand) -> models.ToolStateResponse | None:
        """Run an arbitrary tool command through this service's transport."""
        return do(self._client, command)

    def state(self, history: bool = False, limit: int = 0) -> models.ToolStateResponse:
        """Fetch current temperatures of all tools, optionally with their history."""
        return do(self._client, commands.ToolStateCommand(history=history, limit=limit))

    def set_target(self, targets: collections.abc.Mapping[str, int]) -> None:
        """Set target temperatures, e.g. ``{"tool0": 210, "tool1": 200}``."""
        logger.info("Setting target temperatures", command="target", targets=dict(targets))
        do(self._client, commands.TargetCommand(target=dict(targets)))

    def set_offsets(self, offsets: collections.abc.Mapping[str, int]) -> None:
        """Set temperature offsets, e.g. ``{"tool0": 5}``."""
        logger.info("Setting temperature offsets", command="offset", offsets=dict(offsets))
        do(self._client, commands.OffsetCommand(offsets=dict(offsets)))

    def extrude(self, amount: int) -> None:
        """Extrude ``amount`` mm of filament from the selected tool (negative retracts)."""
        logger.info("Extruding", command="extrude", amount=amount)
        do(self._client, commands.ExtrudeCommand(amount=amount))

    def select(self, tool: str) -> None:
        """Select the active tool."""
        logger.info("Selecting tool", command="select", tool=tool)
        do(self._client, commands.SelectCommand(tool=tool))

    def set_flow_rate(self, factor: int | str) -> None:
        """Set the flow rate factor in percent."""
        logger.info("Setting flow rate", command="flowrate", factor=factor)
        do(self._client, commands.FlowrateCommand(factor=factor))
