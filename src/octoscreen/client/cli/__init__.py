"""OctoScreen CLI package.

This module provides a command-line tool `octoctl` used to drive the tools of an OctoPrint server.
"""

from octoscreen.client.cli.common import console, get_client, logger
from octoscreen.client.cli.main import app, main

__all__ = [
    "app",
    "console",
    "get_client",
    "logger",
    "main",
]
