"""Pydantic models for OctoPrint API responses.

This module defines the data structures used by the client to parse
API responses into typed objects.
"""

from .common import WarnExtraFieldsModel, ZeroFloat
from .tools import HistoryEntry, ToolState, ToolStateResponse, split_entry, split_history

__all__ = [
    "HistoryEntry",
    "ToolState",
    "ToolStateResponse",
    "WarnExtraFieldsModel",
    "ZeroFloat",
    "split_entry",
    "split_history",
]
