"""SVG rendering for diagram scenes."""

from boxflow.render.style import Theme
from boxflow.render.svg import render_svg

__all__ = ["Theme", "render_svg"]
