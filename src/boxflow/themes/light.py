"""Light theme."""

from boxflow.render.style import Theme

LIGHT_THEME = Theme(
    name="light",
    background_color="#ffffff",
    font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    palette={
        # Foreground (strokes, primary visual elements)
        "foreground-1": "#333333",
        "foreground-2": "#666666",
        "foreground-3": "#999999",
        "foreground-light": "#e0e0e0",
        "foreground-dark": "#1a1a1a",
        # Background (shape fills)
        "background-1": "#ffffff",
        "background-2": "#f5f5f5",
        "background-3": "#eeeeee",
        "background-light": "#ffffff",
        "background-dark": "#333333",
        # Text
        "text-1": "#333333",
        "text-2": "#666666",
        "text-3": "#999999",
        "text-light": "#ffffff",
        "text-dark": "#1a1a1a",
        # Accent (Material Blue)
        "accent-1": "#2196f3",
        "accent-2": "#e3f2fd",
        "accent-3": "#bbdefb",
        "accent-light": "#e3f2fd",
        "accent-dark": "#1565c0",
        # Secondary (Material Orange)
        "secondary-1": "#ff9800",
        "secondary-2": "#fff3e0",
        "secondary-3": "#ffe0b2",
        "secondary-light": "#fff3e0",
        "secondary-dark": "#e65100",
        # Status
        "status-success": "#4caf50",
        "status-warning": "#ff9800",
        "status-error": "#f44336",
    },
)
