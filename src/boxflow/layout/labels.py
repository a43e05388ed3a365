"""Label placement for shapes, containers and connections.

Connection labels sit at a fraction of the path's arc length, pushed
sideways along the local normal. Positive offsets go to the right-hand
side of the direction of travel (y grows downward). Shape labels are
centered on their shape; container labels sit just above the top edge.
"""

from __future__ import annotations

import math

from boxflow.layout.constants import CONTAINER_LABEL_GAP, FONT_SIZE
from boxflow.layout.engine import text_size
from boxflow.layout.routing.common import Point
from boxflow.layout.tree import Box, Node


def label_box(x: float, y: float, text: str, font_size: float = FONT_SIZE) -> Box:
    """Bounding box of a label centered on (x, y)."""
    w, h = text_size(text, font_size)
    return Box(x - w / 2, y - h / 2, w, h)


def path_length(points: list[Point]) -> float:
    return sum(math.dist(a, b) for a, b in zip(points, points[1:]))


def point_along(points: list[Point], fraction: float) -> tuple[Point, Point]:
    """Point at `fraction` of the polyline's arc length and the unit tangent there."""
    total = path_length(points)
    if total == 0:
        return points[0], (1.0, 0.0)

    remaining = max(0.0, min(1.0, fraction)) * total
    last = None
    for a, b in zip(points, points[1:]):
        seg = math.dist(a, b)
        if seg == 0:
            continue
        tangent = ((b[0] - a[0]) / seg, (b[1] - a[1]) / seg)
        last = (b, tangent)
        if remaining <= seg:
            t = remaining / seg
            return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t), tangent
        remaining -= seg
    # Float drift past the end
    return last


def place_on_path(
    points: list[Point],
    text: str,
    at: float,
    offset: float = 0.0,
    font_size: float = FONT_SIZE,
) -> tuple[float, float, Box]:
    """Label position on a flattened path.

    Returns the label center and its bounding box.
    """
    (px, py), (tx, ty) = point_along(points, at)
    # Right-hand normal of travel in screen coordinates
    x = px - ty * offset
    y = py + tx * offset
    return x, y, label_box(x, y, text, font_size)


def place_on_node(
    node: Node, text: str, font_size: float = FONT_SIZE
) -> tuple[float, float, Box]:
    """Label position for a shape (centered) or container (above its top edge)."""
    box = node.box
    if node.is_container:
        _, h = text_size(text, font_size)
        x = box.center_x
        y = box.y - CONTAINER_LABEL_GAP - h / 2
    else:
        x, y = box.center
    return x, y, label_box(x, y, text, font_size)
