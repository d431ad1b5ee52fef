"""Reporting utilities for gradlearn."""

from .artifacts import config_hash, write_manifest
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter

__all__ = ["config_hash", "write_manifest", "CsvSink", "JsonlSink", "PlotAdapter"]
