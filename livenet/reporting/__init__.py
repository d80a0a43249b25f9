"""Reporting utilities for LiveNet."""

from .metrics import CsvSink, JsonlSink
from .plots import export_loss_chart

__all__ = ["CsvSink", "JsonlSink", "export_loss_chart"]
