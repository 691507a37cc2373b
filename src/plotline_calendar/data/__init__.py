"""Data access layer."""

from __future__ import annotations

from .backend import (
    BackendDecodeError,
    BackendError,
    BackendGateway,
    BackendNotConfiguredError,
    BackendResponseError,
    BackendStatusError,
    BackendTransportError,
)
from .event_store import EventStore

__all__ = [
    "BackendDecodeError",
    "BackendError",
    "BackendGateway",
    "BackendNotConfiguredError",
    "BackendResponseError",
    "BackendStatusError",
    "BackendTransportError",
    "EventStore",
]
