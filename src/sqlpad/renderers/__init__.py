"""Renderer package for displaying query results."""

from sqlpad.renderers.grid import GridRenderer, LayoutCache, TextMetric

__all__ = ["GridRenderer", "LayoutCache", "TextMetric"]
