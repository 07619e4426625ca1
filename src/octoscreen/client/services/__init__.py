"""Domain services exposed on `OctoPrintClient`."""

from octoscreen.client.services.base import BaseService, Transport
from octoscreen.client.services.tools import ToolService, do

__all__ = ["BaseService", "ToolService", "Transport", "do"]
