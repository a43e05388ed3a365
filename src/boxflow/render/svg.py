"""SVG generation for diagram scenes using drawsvg."""

from __future__ import annotations

import math

import drawsvg as draw

from boxflow.layout.routing.common import Point, flatten_path
from boxflow.layout.scene import Scene, ScenePath, SceneShape
from boxflow.render.constants import (
    ARROW_SIZE,
    ARROW_WIDTH_RATIO,
    CANVAS_PADDING,
    CONTAINER_CORNER_RADIUS,
)
from boxflow.render.style import Theme


def render_svg(
    scene: Scene,
    theme: Theme,
    padding: float = CANVAS_PADDING,
) -> str:
    """Render a scene to an SVG string."""
    bounds = scene.bounds()
    width = bounds.width + 2 * padding
    height = bounds.height + 2 * padding
    d = draw.Drawing(width, height, origin=(bounds.x - padding, bounds.y - padding))

    # Background
    d.append(draw.Rectangle(
        bounds.x - padding, bounds.y - padding, width, height,
        fill=theme.background_color,
    ))

    for shape in scene.shapes:
        _render_shape(d, shape, theme)
    for path in scene.paths:
        _render_path(d, path, theme)
    for label in scene.labels:
        d.append(draw.Text(
            label.text,
            label.font_size,
            label.x, label.y,
            fill=theme.color(label.color or "text-1"),
            font_family=theme.font_family,
            text_anchor="middle",
            dominant_baseline="central",
        ))

    svg = d.as_svg()
    return svg if svg.endswith("\n") else svg + "\n"


def _paint(shape: SceneShape, theme: Theme) -> dict:
    style = shape.style
    attrs = {
        "fill": theme.color(style.fill),
        "stroke": theme.color(style.stroke),
        "stroke_width": style.stroke_width,
    }
    if style.opacity < 1.0:
        attrs["opacity"] = style.opacity
    attrs.update(_rotation(shape))
    return attrs


def _rotation(shape: SceneShape) -> dict:
    """SVG transform turning a shape about its box center."""
    if not shape.style.rotation:
        return {}
    box = shape.box
    return {
        "transform": f"rotate({shape.style.rotation:g} {box.center_x:g} {box.center_y:g})"
    }


def _render_shape(d: draw.Drawing, shape: SceneShape, theme: Theme) -> None:
    box = shape.box
    attrs = _paint(shape, theme)

    if shape.kind == "container":
        d.append(draw.Rectangle(
            box.x, box.y, box.width, box.height,
            rx=CONTAINER_CORNER_RADIUS, ry=CONTAINER_CORNER_RADIUS,
            **attrs,
        ))
    elif shape.kind == "rect":
        d.append(draw.Rectangle(box.x, box.y, box.width, box.height, **attrs))
    elif shape.kind == "circle":
        r = min(box.width, box.height) / 2
        d.append(draw.Circle(box.center_x, box.center_y, r, **attrs))
    elif shape.kind == "ellipse":
        d.append(draw.Ellipse(
            box.center_x, box.center_y, box.width / 2, box.height / 2, **attrs
        ))
    elif shape.kind == "line":
        # A line shape is drawn along its box's horizontal center
        d.append(draw.Line(
            box.x, box.center_y, box.right, box.center_y,
            stroke=attrs["stroke"],
            stroke_width=shape.style.stroke_width,
            stroke_linecap="round",
            **_rotation(shape),
        ))
    else:
        d.append(draw.Text(
            shape.text or "",
            shape.font_size,
            box.center_x, box.center_y,
            fill=attrs["fill"],
            font_family=theme.font_family,
            text_anchor="middle",
            dominant_baseline="central",
            **({"opacity": attrs["opacity"]} if "opacity" in attrs else {}),
            **_rotation(shape),
        ))


def _arrowhead(points: list[Point]) -> list[float] | None:
    """Triangle for an arrow pointing at `points[0]`, as a flat coordinate list."""
    tip = points[0]
    prev = next((p for p in points[1:] if p != tip), None)
    if prev is None:
        return None
    dx, dy = tip[0] - prev[0], tip[1] - prev[1]
    length = math.hypot(dx, dy)
    ux, uy = dx / length, dy / length
    bx, by = tip[0] - ux * ARROW_SIZE, tip[1] - uy * ARROW_SIZE
    hw = ARROW_SIZE * ARROW_WIDTH_RATIO / 2
    return [
        tip[0], tip[1],
        bx - uy * hw, by + ux * hw,
        bx + uy * hw, by - ux * hw,
    ]


def _render_path(d: draw.Drawing, path: ScenePath, theme: Theme) -> None:
    color = theme.color(path.style.stroke)
    pts = list(path.points)

    if path.geometry == "quadratic":
        line = draw.Path(
            stroke=color,
            stroke_width=path.style.stroke_width,
            fill="none",
        )
        line.M(*pts[0])
        for i in range(1, len(pts) - 1, 2):
            line.Q(pts[i][0], pts[i][1], pts[i + 1][0], pts[i + 1][1])
        d.append(line)
    else:
        line = draw.Path(
            stroke=color,
            stroke_width=path.style.stroke_width,
            fill="none",
            stroke_linejoin="round",
        )
        line.M(*pts[0])
        for p in pts[1:]:
            line.L(*p)
        d.append(line)

    flat = flatten_path(path.geometry, pts)
    heads = []
    if path.direction in ("forward", "both"):
        heads.append(_arrowhead(flat[::-1]))
    if path.direction in ("backward", "both"):
        heads.append(_arrowhead(flat))
    for coords in heads:
        if coords is not None:
            d.append(draw.Lines(*coords, close=True, fill=color, stroke="none"))
