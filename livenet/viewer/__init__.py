"""Presentation adapter for live training progress."""

from .adapter import TrainingSession
from .console import render_status

__all__ = ["TrainingSession", "render_status"]
