"""Render constants used by svg.py.

Theme-dependent values remain in style.py.
"""

# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------
CANVAS_PADDING: float = 20.0
"""Padding around the drawn content."""

# ---------------------------------------------------------------------------
# Connections
# ---------------------------------------------------------------------------
ARROW_SIZE: float = 8.0
"""Length of an arrowhead along the path."""

ARROW_WIDTH_RATIO: float = 0.75
"""Arrowhead width as a fraction of its length."""

# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------
CONTAINER_CORNER_RADIUS: float = 4.0
"""Corner radius for styled container backgrounds."""
