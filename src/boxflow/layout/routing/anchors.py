"""Named anchor points on a node's box and automatic side selection."""

from __future__ import annotations

from boxflow.layout.constants import SIDE_BIAS
from boxflow.layout.routing.common import Point
from boxflow.layout.tree import Box

ANCHORS = (
    "top_left",
    "top",
    "top_right",
    "left",
    "center",
    "right",
    "bottom_left",
    "bottom",
    "bottom_right",
)
SIDES = ("left", "right", "top", "bottom")

OPPOSITE = {"left": "right", "right": "left", "top": "bottom", "bottom": "top"}

# Spellings accepted besides the canonical names, keyed without separators
_ALIASES = {
    "topleft": "top_left",
    "lefttop": "top_left",
    "topright": "top_right",
    "righttop": "top_right",
    "bottomleft": "bottom_left",
    "leftbottom": "bottom_left",
    "bottomright": "bottom_right",
    "rightbottom": "bottom_right",
    "topcenter": "top",
    "centertop": "top",
    "bottomcenter": "bottom",
    "centerbottom": "bottom",
    "leftcenter": "left",
    "centerleft": "left",
    "rightcenter": "right",
    "centerright": "right",
    "middle": "center",
    "centre": "center",
}


def normalize_anchor(name: str) -> str | None:
    """Canonical anchor name, or None if unrecognized."""
    key = name.replace("-", "_").lower()
    if key in ANCHORS:
        return key
    return _ALIASES.get(key.replace("_", ""))


def anchor_point(box: Box, anchor: str) -> Point:
    """Absolute coordinates of a named anchor."""
    if anchor.startswith("top"):
        y = box.y
    elif anchor.startswith("bottom"):
        y = box.bottom
    else:
        y = box.center_y
    if anchor.endswith("left"):
        x = box.x
    elif anchor.endswith("right"):
        x = box.right
    else:
        x = box.center_x
    return (x, y)


def anchor_side(anchor: str) -> str | None:
    """The side an anchor sits on, None for corners and the center."""
    return anchor if anchor in SIDES else None


def is_horizontal(side: str) -> bool:
    """True for sides that a route leaves horizontally."""
    return side in ("left", "right")


def nearest_sides(source: Box, target: Box) -> tuple[str, str]:
    """Pick the facing sides of two boxes.

    Boxes that overlap horizontally (one above the other), or whose
    vertical offset dominates, connect top/bottom; boxes side by side
    connect left/right.
    """
    dx = target.center_x - source.center_x
    dy = target.center_y - source.center_y
    h_overlap = source.x < target.right and source.right > target.x
    v_overlap = source.y < target.bottom and source.bottom > target.y
    primarily_vertical = abs(dy) > abs(dx) * SIDE_BIAS

    if (h_overlap and not v_overlap) or primarily_vertical:
        vertical = True
    elif v_overlap and not h_overlap:
        vertical = False
    else:
        vertical = abs(dy) >= abs(dx)

    if vertical:
        return ("bottom", "top") if dy > 0 else ("top", "bottom")
    return ("right", "left") if dx > 0 else ("left", "right")
