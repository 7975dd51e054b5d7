"""Renderers that present a finished report without re-ordering it."""

from .annotations import render_annotations
from .markdown import render_markdown

__all__ = ["render_annotations", "render_markdown"]
