"""Theme definitions for diagrams."""

from boxflow.themes.dark import DARK_THEME
from boxflow.themes.light import LIGHT_THEME

THEMES = {
    "light": LIGHT_THEME,
    "dark": DARK_THEME,
}

__all__ = ["THEMES", "DARK_THEME", "LIGHT_THEME"]
