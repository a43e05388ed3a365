"""Layout constants used across layout modules.

Centralizes the magic numbers from engine.py, constraints.py, routing/,
labels.py and validator.py.
"""

# ---------------------------------------------------------------------------
# Default shape sizes (width, height)
# ---------------------------------------------------------------------------
RECT_SIZE: tuple[float, float] = (80.0, 30.0)
"""Default rectangle size."""

CIRCLE_SIZE: tuple[float, float] = (50.0, 50.0)
"""Default circle bounding box (radius 25)."""

ELLIPSE_SIZE: tuple[float, float] = (80.0, 45.0)
"""Default ellipse size."""

LINE_SIZE: tuple[float, float] = (80.0, 4.0)
"""Default line shape size."""

# ---------------------------------------------------------------------------
# Font / text metrics
# ---------------------------------------------------------------------------
FONT_SIZE: float = 14.0
"""Default font size for text shapes and labels."""

CHAR_WIDTH_RATIO: float = 0.5
"""Approximate character width as a fraction of font size."""

LINE_HEIGHT_RATIO: float = 1.2
"""Text box height as a fraction of font size."""

# ---------------------------------------------------------------------------
# Container defaults (used as function parameter defaults)
# ---------------------------------------------------------------------------
GAP: float = 10.0
"""Spacing between sibling children of a container."""

PADDING: float = 0.0
"""Padding between a container's edge and its children."""

ALIGN: str = "start"
"""Cross-axis alignment of children."""

# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------
CONTAINER_LABEL_GAP: float = 5.0
"""Distance between a container's top edge and its label baseline box."""

LABEL_AT: float = 0.5
"""Default position of a connection label along its path (arc-length fraction)."""

# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------
ROUTE_CLEARANCE: float = 20.0
"""How far a same-side (U-shaped) route runs past the outer box edge."""

CURVE_FACTOR: float = 0.25
"""Control point offset for curved routes, as a fraction of chord length."""

CURVE_SAMPLES: int = 16
"""Samples per quadratic segment when flattening curves."""

COORD_TOLERANCE: float = 0.5
"""Tolerance for treating two coordinates as aligned (straight route)."""

SIDE_BIAS: float = 1.5
"""Vertical offset must exceed horizontal by this factor to prefer top/bottom."""

# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------
GEOM_EPSILON: float = 1e-6
"""Slack for float comparisons in overlap and containment checks."""

ALIGNMENT_THRESHOLD: float = 15.0
"""Largest center offset on one axis for a connection to count as nearly aligned."""

ALIGNMENT_RATIO: float = 4.0
"""The other axis offset must exceed the near one by this factor."""

ALIGNED_TOLERANCE: float = 0.5
"""Center offsets below this are treated as already aligned."""
