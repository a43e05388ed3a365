"""Dark theme."""

from boxflow.render.style import Theme

DARK_THEME = Theme(
    name="dark",
    background_color="#1e1e1e",
    font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    palette={
        "foreground-1": "#d4d4d4",
        "foreground-2": "#a0a0a0",
        "foreground-3": "#707070",
        "foreground-light": "#3c3c3c",
        "foreground-dark": "#f0f0f0",
        "background-1": "#2d2d2d",
        "background-2": "#252525",
        "background-3": "#333333",
        "background-light": "#3c3c3c",
        "background-dark": "#121212",
        "text-1": "#e0e0e0",
        "text-2": "#b0b0b0",
        "text-3": "#808080",
        "text-light": "#ffffff",
        "text-dark": "#121212",
        "accent-1": "#64b5f6",
        "accent-2": "#0d2a44",
        "accent-3": "#1e4a72",
        "accent-light": "#90caf9",
        "accent-dark": "#1565c0",
        "secondary-1": "#ffb74d",
        "secondary-2": "#3e2a10",
        "secondary-3": "#5c3d14",
        "secondary-light": "#ffe0b2",
        "secondary-dark": "#e65100",
        "status-success": "#81c784",
        "status-warning": "#ffb74d",
        "status-error": "#e57373",
    },
)
