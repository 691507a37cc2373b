"""PlotLine calendar recurrence and aggregation engine."""

from __future__ import annotations

from .cli import main as main

__all__ = ["main"]
