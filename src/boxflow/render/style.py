"""Theme and style lookup for diagram rendering."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass
class Theme:
    """Visual theme for a diagram.

    `palette` maps symbolic colour names (``foreground-1``, ``accent-1``,
    ...) to concrete colours. `lookup` is the stylesheet function handed
    to the layout pipeline.
    """

    name: str
    background_color: str
    font_family: str
    palette: Mapping[str, str] = field(default_factory=dict)

    def lookup(self, name: str) -> str | None:
        return self.palette.get(name)

    def color(self, name: str | None) -> str:
        """Resolve a name for drawing; unknown names are literal colours."""
        if name is None:
            return "none"
        return self.palette.get(name, name)
