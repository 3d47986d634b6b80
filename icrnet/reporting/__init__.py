"""Reporting utilities for icrnet."""

from .artifacts import write_manifest
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter
from .summary import write_summary
from .timer import Timer

__all__ = ["CsvSink", "JsonlSink", "PlotAdapter", "Timer", "write_manifest", "write_summary"]
