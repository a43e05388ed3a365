"""Layout engine: two-pass box model.

Measure pass (bottom-up) computes every node's intrinsic size from its
children. Arrange pass (top-down) hands each node an absolute origin and
positions its children inside the padded content box according to the
container kind.
"""

from __future__ import annotations

import logging
import math

from boxflow.errors import LayoutError
from boxflow.layout.constants import (
    ALIGN,
    CHAR_WIDTH_RATIO,
    CIRCLE_SIZE,
    ELLIPSE_SIZE,
    FONT_SIZE,
    GAP,
    LINE_HEIGHT_RATIO,
    LINE_SIZE,
    PADDING,
    RECT_SIZE,
)
from boxflow.layout.tree import Box, Node
from boxflow.parser.model import ContainerKind, ShapeKind

logger = logging.getLogger(__name__)

_DEFAULT_SIZES = {
    ShapeKind.RECT: RECT_SIZE,
    ShapeKind.CIRCLE: CIRCLE_SIZE,
    ShapeKind.ELLIPSE: ELLIPSE_SIZE,
    ShapeKind.LINE: LINE_SIZE,
}


def compute_layout(
    root: Node,
    gap: float = GAP,
    padding: float = PADDING,
    align: str = ALIGN,
) -> None:
    """Assign every node in the tree an absolute box, root at the origin.

    `gap`, `padding` and `align` are the defaults for containers that do
    not set them explicitly.
    """
    measure(root, gap=gap, padding=padding)
    arrange(root, 0.0, 0.0, gap=gap, padding=padding, align=align)
    logger.debug(
        "Laid out %d nodes, root %s is %.1fx%.1f",
        sum(1 for _ in root.walk()), root.name, root.box.width, root.box.height,
    )


def text_size(text: str, font_size: float = FONT_SIZE) -> tuple[float, float]:
    """Approximate rendered size of a single line of text."""
    return (len(text) * font_size * CHAR_WIDTH_RATIO, font_size * LINE_HEIGHT_RATIO)


def _leaf_size(node: Node) -> tuple[float, float]:
    opts = node.options
    if node.is_text:
        default = text_size(opts.text or "", opts.font_size or FONT_SIZE)
    else:
        default = _DEFAULT_SIZES[node.kind]
    width = opts.width if opts.width is not None else default[0]
    height = opts.height if opts.height is not None else default[1]
    return width, height


def _gap(node: Node, default: float) -> float:
    return node.options.gap if node.options.gap is not None else default


def _padding(node: Node, default: float) -> float:
    return node.options.padding if node.options.padding is not None else default


def grid_shape(node: Node) -> tuple[int, int]:
    """Return (rows, columns) for a grid container.

    Explicit rows/columns win; otherwise the smallest square-ish
    factorization of the child count is used.
    """
    n = len(node.children)
    rows, cols = node.options.rows, node.options.columns
    if rows and cols:
        if rows * cols < n:
            raise LayoutError(
                f"Grid '{node.name}' has {n} children but rows x columns is "
                f"{rows} x {cols} = {rows * cols} cells",
                ids=(node.name,),
            )
        return rows, cols
    if n == 0:
        return (rows or 0), (cols or 0)
    if cols:
        return math.ceil(n / cols), cols
    if rows:
        return rows, math.ceil(n / rows)
    cols = math.ceil(math.sqrt(n))
    return math.ceil(n / cols), cols


def _span(count: int, cell: float, gap: float) -> float:
    """Length of `count` cells separated by `gap`."""
    if count <= 0:
        return 0.0
    return count * cell + (count - 1) * gap


def measure(node: Node, gap: float = GAP, padding: float = PADDING) -> None:
    """Bottom-up pass: set `node.width`/`node.height` for the whole subtree."""
    if not node.is_container:
        node.width, node.height = _leaf_size(node)
        return

    for child in node.children:
        measure(child, gap=gap, padding=padding)

    g = _gap(node, gap)
    pad = _padding(node, padding)
    widths = [c.width for c in node.children]
    heights = [c.height for c in node.children]
    n = len(node.children)

    if node.kind is ContainerKind.ROW:
        inner_w = sum(widths) + max(n - 1, 0) * g
        inner_h = max(heights, default=0.0)
    elif node.kind in (ContainerKind.COLUMN, ContainerKind.GROUP):
        inner_w = max(widths, default=0.0)
        inner_h = sum(heights) + max(n - 1, 0) * g
    elif node.kind is ContainerKind.STACK:
        inner_w = max(widths, default=0.0)
        inner_h = max(heights, default=0.0)
    else:
        rows, cols = grid_shape(node)
        inner_w = _span(cols, max(widths, default=0.0), g)
        inner_h = _span(rows, max(heights, default=0.0), g)

    node.width = inner_w + 2 * pad
    node.height = inner_h + 2 * pad


def _aligned(align: str, available: float, size: float) -> float:
    """Offset of an item of `size` inside `available` space."""
    if align == "center":
        return (available - size) / 2
    if align == "end":
        return available - size
    return 0.0


def arrange(
    node: Node,
    x: float,
    y: float,
    gap: float = GAP,
    padding: float = PADDING,
    align: str = ALIGN,
) -> None:
    """Top-down pass: place `node` at its normal position (x, y).

    A node's own dx/dy offset is added on top of its normal position, so
    it moves rigidly with its subtree while the siblings keep theirs.
    """
    x += node.options.dx
    y += node.options.dy
    node.box = Box(x, y, node.width, node.height)
    if not node.is_container or not node.children:
        return

    g = _gap(node, gap)
    pad = _padding(node, padding)
    al = node.options.align or align
    inner_w = node.width - 2 * pad
    inner_h = node.height - 2 * pad
    ox, oy = x + pad, y + pad

    def place(child: Node, cx: float, cy: float) -> None:
        arrange(child, cx, cy, gap=gap, padding=padding, align=align)

    if node.kind is ContainerKind.ROW:
        cx = ox
        for child in node.children:
            place(child, cx, oy + _aligned(al, inner_h, child.height))
            cx += child.width + g

    elif node.kind in (ContainerKind.COLUMN, ContainerKind.GROUP):
        cy = oy
        for child in node.children:
            place(child, ox + _aligned(al, inner_w, child.width), cy)
            cy += child.height + g

    elif node.kind is ContainerKind.STACK:
        for child in node.children:
            place(
                child,
                ox + _aligned(al, inner_w, child.width),
                oy + _aligned(al, inner_h, child.height),
            )

    else:
        _rows, cols = grid_shape(node)
        cell_w = max(c.width for c in node.children)
        cell_h = max(c.height for c in node.children)
        for i, child in enumerate(node.children):
            row, col = divmod(i, cols)
            place(
                child,
                ox + col * (cell_w + g) + _aligned(al, cell_w, child.width),
                oy + row * (cell_h + g) + _aligned(al, cell_h, child.height),
            )
