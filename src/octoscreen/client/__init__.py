"""OctoScreen Client SDK.

This package provides a typed Python client for the tool endpoint of the OctoPrint API.

How to use the most important parts:
- `OctoPrintClient`: Exposes the HTTP transport and the `tools` service. Start here.
- `ApiKeyCredentials`: Pass this to `OctoPrintClient` to authenticate with an API key.
- `commands`: The typed tool commands. Run any of them with `client.tools.do(command)`.
- `models`: The typed responses, most importantly `ToolStateResponse`.
"""

import logging

import structlog

# Set default library logging level to WARNING if the user hasn't configured structlog
if not structlog.is_configured():
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING))

from octoscreen.client.__version__ import __version__
from octoscreen.client.auth import ApiKeyCredentials
from octoscreen.client.commands import (
    ExtrudeCommand,
    FlowrateCommand,
    OffsetCommand,
    SelectCommand,
    TargetCommand,
    ToolStateCommand,
)
from octoscreen.client.models import HistoryEntry, ToolState, ToolStateResponse
from octoscreen.client.sdk import AuthStrategy, OctoPrintClient

__all__ = [
    "ApiKeyCredentials",
    "AuthStrategy",
    "ExtrudeCommand",
    "FlowrateCommand",
    "HistoryEntry",
    "OctoPrintClient",
    "OffsetCommand",
    "SelectCommand",
    "TargetCommand",
    "ToolState",
    "ToolStateCommand",
    "ToolStateResponse",
    "__version__",
]
