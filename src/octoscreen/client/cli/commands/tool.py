"""Tool commands: temperatures, offsets, extrusion, tool selection and flow rate."""

import sys
import typing

import cyclopts

from octoscreen.client import commands, models
from octoscreen.client.cli import common, config

tool_app = cyclopts.App(name="tool", help="Printer tool control (temperatures, extrusion, selection)")


def _parse_assignments(values: list[str], what: str) -> dict[str, int]:
    """Parse ``tool0=210``-style arguments into a mapping.

    Calls `sys.exit` on malformed input.
    """
    parsed: dict[str, int] = {}
    for value in values:
        key, sep, number = value.partition("=")
        try:
            if not sep or not key:
                raise ValueError(value)
            parsed[key.strip()] = int(number)
        except ValueError:
            common.output_message(
                f"[red]Error[/red]: invalid {what} `{value}`, expected TOOL=INTEGER (e.g. tool0=210)",
                error=True,
            )
            sys.exit(1)
    return parsed


def _history_rows(history: list[models.HistoryEntry]) -> list[list[common.Cell]]:
    rows: list[list[common.Cell]] = []
    for entry in history:
        if entry.tools:
            for key, state in entry.tools.items():
                rows.append([entry.at, key, state.actual, state.target])
        else:
            rows.append([entry.at, "-", entry.actual, entry.target])
    return rows


@tool_app.command(name="state")
def tool_state(
    history: typing.Annotated[bool, cyclopts.Parameter(help="Include the temperature history")] = False,
    limit: typing.Annotated[
        int | None, cyclopts.Parameter(name=["--limit", "-n"], help="Maximum number of history points")
    ] = None,
):
    """Show current temperatures of all tools."""
    resolved_limit = limit if limit is not None else config.settings.default_history_limit
    common.logger.debug("Command started", command="tool state", history=history, limit=resolved_limit)
    client = common.get_client()

    state = client.tools.state(history=history, limit=resolved_limit)
    common.logger.info("Fetched tool state", tools=len(state.current), history=len(state.history))

    rows = [[key, s.actual, s.target, s.offset] for key, s in sorted(state.current.items())]
    common.output_table(
        "Tool Temperatures",
        ["Tool", "Actual", "Target", "Offset"],
        rows,
        column_styles=["cyan", "magenta", "green", "blue"],
    )

    if history and state.history:
        common.output_table(
            "Temperature History",
            ["Time", "Tool", "Actual", "Target"],
            _history_rows(state.history),
            column_styles=["dim", "cyan", "magenta", "green"],
        )


@tool_app.command(name="target")
def tool_target(
    targets: typing.Annotated[
        list[str], cyclopts.Parameter(help="Target temperatures as TOOL=TEMP (e.g. tool0=210)")
    ],
):
    """Set target temperatures."""
    parsed = _parse_assignments(targets, "target")
    client = common.get_client()
    client.tools.set_target(parsed)
    common.output_message(f"[green]Target set: {', '.join(f'{k}={v}' for k, v in parsed.items())}[/green]")


@tool_app.command(name="offset")
def tool_offset(
    offsets: typing.Annotated[
        list[str], cyclopts.Parameter(help="Temperature offsets as TOOL=DELTA (e.g. tool0=5)")
    ],
):
    """Set temperature offsets."""
    parsed = _parse_assignments(offsets, "offset")
    client = common.get_client()
    client.tools.set_offsets(parsed)
    common.output_message(f"[green]Offset set: {', '.join(f'{k}={v}' for k, v in parsed.items())}[/green]")


@tool_app.command(name="extrude")
def tool_extrude(
    amount: typing.Annotated[
        int, cyclopts.Parameter(help="Filament to extrude in mm (negative retracts)", allow_leading_hyphen=True)
    ],
):
    """Extrude (or retract) filament on the selected tool."""
    client = common.get_client()
    client.tools.extrude(amount)
    verb = "Retracted" if amount < 0 else "Extruded"
    common.output_message(f"[green]{verb} {abs(amount)} mm[/green]")


@tool_app.command(name="select")
def tool_select(
    tool: typing.Annotated[str, cyclopts.Parameter(help="Tool to select (e.g. tool1)")],
):
    """Select the active tool."""
    client = common.get_client()
    client.tools.select(tool)
    common.output_message(f"[green]Selected {tool}[/green]")


@tool_app.command(name="flowrate")
def tool_flowrate(
    factor: typing.Annotated[int, cyclopts.Parameter(help="Flow rate in percent (usually 75-125)")],
):
    """Set the extrusion flow rate factor."""
    client = common.get_client()
    client.tools.set_flow_rate(factor)
    common.output_message(f"[green]Flow rate set to {factor}%[/green]")


@tool_app.command(name="send")
def tool_send(
    body: typing.Annotated[
        str, cyclopts.Parameter(help="Raw JSON body, e.g. {\"command\": \"select\", \"tool\": \"tool0\"}")
    ],
):
    """Validate and send a raw tool command body."""
    try:
        command = commands.parse_command(body)
    except ValueError as e:
        common.output_message(f"[red]Error[/red]: invalid command body: {e}", error=True)
        sys.exit(1)

    client = common.get_client()
    client.tools.do(command)
    common.output_message(f"[green]Sent {command.command}[/green]")
