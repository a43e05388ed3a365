"""Scene assembly: the immutable output of a render.

Collects every leaf shape, styled container, routed path and label into
flat tuples with resolved styles. Style names are looked up in the
stylesheet passed by the caller; names it does not know are kept as
literal colours.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Optional

from boxflow.layout.constants import FONT_SIZE
from boxflow.layout.labels import place_on_node, place_on_path
from boxflow.layout.routing.common import Point, RoutedPath
from boxflow.layout.tree import Box, Node

Lookup = Callable[[str], Optional[str]]

DEFAULT_FILL = "background-1"
DEFAULT_STROKE = "foreground-1"
DEFAULT_TEXT = "text-1"
DEFAULT_STROKE_WIDTH = 1.0
DEFAULT_PATH_WIDTH = 1.5


@dataclass(frozen=True)
class ShapeStyle:
    fill: str | None
    stroke: str | None
    stroke_width: float = DEFAULT_STROKE_WIDTH
    opacity: float = 1.0
    rotation: float = 0.0


@dataclass(frozen=True)
class PathStyle:
    stroke: str | None
    stroke_width: float = DEFAULT_PATH_WIDTH


@dataclass(frozen=True)
class SceneShape:
    """A drawable shape. `kind` is a shape kind or ``"container"``."""

    node_id: str
    kind: str
    box: Box
    style: ShapeStyle
    text: str | None = None
    font_size: float | None = None


@dataclass(frozen=True)
class ScenePath:
    """A routed connection.

    `key` identifies the connection among all paths of the scene: its
    `name`, with a ``#n`` suffix when several connections share the same
    endpoints. Labels placed on the path are owned by this key.
    """

    source: str
    target: str
    key: str
    mode: str
    geometry: str
    points: tuple[Point, ...]
    style: PathStyle
    direction: str = "forward"

    @property
    def name(self) -> str:
        return f"{self.source}->{self.target}"


@dataclass(frozen=True)
class SceneLabel:
    """A text label centered on (x, y)."""

    owner: str
    text: str
    x: float
    y: float
    box: Box
    font_size: float
    color: str | None


@dataclass(frozen=True)
class Scene:
    shapes: tuple[SceneShape, ...]
    paths: tuple[ScenePath, ...]
    labels: tuple[SceneLabel, ...]
    width: float
    height: float

    def bounds(self) -> Box:
        """Smallest box around everything drawn, including the origin."""
        x0 = y0 = 0.0
        x1, y1 = self.width, self.height
        for shape in self.shapes:
            x0, y0 = min(x0, shape.box.x), min(y0, shape.box.y)
        for label in self.labels:
            x0, y0 = min(x0, label.box.x), min(y0, label.box.y)
        for path in self.paths:
            for px, py in path.points:
                x0, y0 = min(x0, px), min(y0, py)
        return Box(x0, y0, x1 - x0, y1 - y0)


def resolve_color(lookup: Lookup | None, value: str | None) -> str | None:
    """Resolve a symbolic style name, passing unknown names through."""
    if value is None or lookup is None:
        return value
    resolved = lookup(value)
    return resolved if resolved is not None else value


def _shape_style(node: Node, lookup: Lookup | None) -> ShapeStyle:
    opts = node.options
    if node.is_container:
        fill, stroke = opts.fill, opts.stroke
    elif node.is_text:
        fill, stroke = opts.fill or DEFAULT_TEXT, opts.stroke
    else:
        fill = opts.fill or DEFAULT_FILL
        stroke = opts.stroke or DEFAULT_STROKE
    return ShapeStyle(
        fill=resolve_color(lookup, fill),
        stroke=resolve_color(lookup, stroke),
        stroke_width=opts.stroke_width if opts.stroke_width is not None else DEFAULT_STROKE_WIDTH,
        opacity=opts.opacity,
        rotation=opts.rotation,
    )


def _collect_shapes(
    root: Node, lookup: Lookup | None
) -> tuple[list[SceneShape], list[SceneLabel]]:
    shapes: list[SceneShape] = []
    labels: list[SceneLabel] = []
    text_color = resolve_color(lookup, DEFAULT_TEXT)
    for node in root.walk():
        opts = node.options
        if node.is_container:
            if opts.fill is not None or opts.stroke is not None:
                shapes.append(
                    SceneShape(node.name, "container", node.box, _shape_style(node, lookup))
                )
        else:
            shapes.append(
                SceneShape(
                    node.name,
                    node.kind.value,
                    node.box,
                    _shape_style(node, lookup),
                    text=opts.text if node.is_text else None,
                    font_size=(opts.font_size or FONT_SIZE) if node.is_text else None,
                )
            )
        if opts.label:
            font_size = opts.font_size or FONT_SIZE
            x, y, box = place_on_node(node, opts.label, font_size)
            labels.append(
                SceneLabel(node.name, opts.label, x, y, box, font_size, text_color)
            )
    return shapes, labels


def _scene_path(path: RoutedPath, key: str, lookup: Lookup | None) -> ScenePath:
    opts = path.options
    style = PathStyle(
        stroke=resolve_color(lookup, opts.stroke or DEFAULT_STROKE),
        stroke_width=opts.stroke_width if opts.stroke_width is not None else DEFAULT_PATH_WIDTH,
    )
    return ScenePath(
        source=path.source.name,
        target=path.target.name,
        key=key,
        mode=path.mode,
        geometry=path.geometry,
        points=tuple(path.points),
        style=style,
        direction=path.decl.direction.value,
    )


def _path_label(path: RoutedPath, key: str, lookup: Lookup | None) -> SceneLabel | None:
    opts = path.options
    if not opts.label:
        return None
    font_size = opts.font_size or FONT_SIZE
    x, y, box = place_on_path(
        path.flattened(), opts.label, opts.label_at, opts.label_offset, font_size
    )
    return SceneLabel(
        key, opts.label, x, y, box, font_size, resolve_color(lookup, DEFAULT_TEXT)
    )


def path_keys(routed: Sequence[RoutedPath]) -> list[str]:
    """Unique key per path: `a->b`, or `a->b#1`, `a->b#2` for repeats."""
    totals = Counter(p.name for p in routed)
    seen: Counter[str] = Counter()
    keys = []
    for path in routed:
        if totals[path.name] == 1:
            keys.append(path.name)
            continue
        seen[path.name] += 1
        keys.append(f"{path.name}#{seen[path.name]}")
    return keys


def assemble_scene(
    root: Node, routed: Sequence[RoutedPath], lookup: Lookup | None = None
) -> Scene:
    """Build the immutable scene from the final tree and routed paths.

    Shapes are emitted in pre-order, so containers come before their
    children. The canvas size covers every box, label and path point.
    """
    shapes, labels = _collect_shapes(root, lookup)
    keys = path_keys(routed)
    paths = [_scene_path(p, k, lookup) for p, k in zip(routed, keys)]
    for path, key in zip(routed, keys):
        label = _path_label(path, key, lookup)
        if label is not None:
            labels.append(label)

    width = max([root.box.right] + [n.box.right for n in root.walk()])
    height = max([root.box.bottom] + [n.box.bottom for n in root.walk()])
    for label in labels:
        width = max(width, label.box.right)
        height = max(height, label.box.bottom)
    for path in paths:
        for px, py in path.points:
            width = max(width, px)
            height = max(height, py)

    return Scene(
        shapes=tuple(shapes),
        paths=tuple(paths),
        labels=tuple(labels),
        width=max(width, 0.0),
        height=max(height, 0.0),
    )
