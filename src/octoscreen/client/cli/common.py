"""Shared CLI helpers: output rendering, logging setup and client construction.

Table cells are passed typed (text, temperatures as floats, snapshot times as datetimes)
and only turned into text by the renderer, so ``--format json`` keeps numbers numeric.
"""

import collections.abc
import datetime
import json
import logging
import sys
import typing

import better_exceptions
import structlog
from rich import console as rich_console
from rich.table import Table
from rich.text import Text

from octoscreen.client import auth, consts, sdk
from octoscreen.client.cli import config

if typing.TYPE_CHECKING:
    from structlog.typing import Processor

better_exceptions.hook()
console = rich_console.Console()
err_console = rich_console.Console(stderr=True)
logger = structlog.get_logger(consts.APP_NAME)

Cell = str | float | datetime.datetime

_output_format: config.OutputFormat | None = None  # None: settings, then TTY detection


def set_output_format(fmt: str | None) -> None:
    """Apply the ``--format`` flag. Exits with status 1 on an unknown format."""
    global _output_format
    if fmt is None:
        _output_format = None
        return
    try:
        _output_format = config.OutputFormat(fmt)
    except ValueError:
        choices = ", ".join(f.value for f in config.OutputFormat)
        output_message(f"[red]Error[/red]: unknown output format `{fmt}` (choose from {choices})", error=True)
        sys.exit(1)


def get_output_format() -> config.OutputFormat:
    """The ``--format`` flag wins, then the configured format, then rich on a terminal."""
    if _output_format is not None:
        return _output_format
    if config.settings.output_format is not None:
        return config.settings.output_format
    return config.OutputFormat.RICH if sys.stdout.isatty() else config.OutputFormat.PLAIN


def output_message(msg: str, *, error: bool = False) -> None:
    """Print a status line.

    Markup is only rendered in rich mode. In json mode every message goes to stderr so
    stdout carries nothing but the JSON document.
    """
    fmt = get_output_format()
    if fmt == config.OutputFormat.RICH:
        (err_console if error else console).print(msg)
        return
    stream = sys.stderr if error or fmt == config.OutputFormat.JSON else sys.stdout
    print(Text.from_markup(msg).plain, file=stream)


def _as_text(cell: Cell) -> str:
    """Render a cell for a table; text cells keep their rich markup."""
    if isinstance(cell, datetime.datetime):
        return cell.astimezone().strftime("%H:%M:%S")
    if isinstance(cell, float):
        return f"{cell:.1f}"
    return cell


def _as_json(cell: Cell) -> typing.Any:
    if isinstance(cell, datetime.datetime):
        return cell.isoformat()
    if isinstance(cell, str):
        return Text.from_markup(cell).plain
    return cell


def output_table(
    title: str,
    columns: list[str],
    rows: collections.abc.Iterable[collections.abc.Sequence[Cell]],
    *,
    column_styles: collections.abc.Sequence[str | None] = (),
) -> None:
    """Print a table in the active output format.

    json prints a list of objects keyed by the lower-cased column names, plain prints a
    ``# title`` line followed by tab-separated rows, rich prints a styled table.
    """
    fmt = get_output_format()

    if fmt == config.OutputFormat.JSON:
        keys = [c.lower() for c in columns]
        print(json.dumps([{k: _as_json(c) for k, c in zip(keys, row, strict=True)} for row in rows]))
        return

    if fmt == config.OutputFormat.PLAIN:
        print(f"# {title}")
        print("\t".join(columns))
        for row in rows:
            print("\t".join(Text.from_markup(_as_text(c)).plain for c in row))
        return

    table = Table(title=title)
    for col, style in zip(columns, [*column_styles, *[None] * len(columns)], strict=False):
        table.add_column(col, style=style)
    for row in rows:
        table.add_row(*(_as_text(c) for c in row))
    console.print(table)


_LOGGING_INITIALIZED = False


def _log_level(verbose: bool | None, debug: bool | None) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbose: bool | None, debug: bool | None) -> None:
    """Route structlog to stderr at the level picked by ``--verbose``/``--debug``.

    Without flags an earlier configuration is left alone. Output is JSON lines unless
    stderr is a terminal.
    """
    global _LOGGING_INITIALIZED, logger

    if verbose is None and debug is None and _LOGGING_INITIALIZED:
        return
    _LOGGING_INITIALIZED = True

    renderer: Processor = (
        structlog.dev.ConsoleRenderer(colors=True) if sys.stderr.isatty() else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False),
            structlog.dev.set_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_log_level(verbose, debug)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )
    logger = structlog.get_logger(consts.APP_NAME)


def get_client() -> sdk.OctoPrintClient:
    """Return a client configured from settings.

    The API key comes from settings (config.json, .env, ``OCTOPRINT_API_KEY``).
    Exits with status 1 if none is configured.
    """
    api_key = config.settings.octoprint_api_key
    try:
        creds = auth.ApiKeyCredentials(api_key=api_key) if api_key is not None else None
    except ValueError:
        creds = None

    if creds is None:
        output_message("No OctoPrint API key configured.", error=True)
        output_message(f"Set {consts.API_KEY_ENV} or add it to your .env file.", error=True)
        sys.exit(1)

    return sdk.OctoPrintClient(
        credentials=creds,
        base_url=config.settings.octoprint_url,
        timeout=config.settings.timeout,
    )
