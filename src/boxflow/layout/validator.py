"""Validator: advisory checks for geometric defects.

Runs a suite of checks against a finished scene and its layout tree and
returns a list of Diagnostic objects describing any problems found.
Diagnostics never abort a render.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from boxflow.layout.constants import (
    ALIGNED_TOLERANCE,
    ALIGNMENT_RATIO,
    ALIGNMENT_THRESHOLD,
    GEOM_EPSILON,
    PADDING,
)
from boxflow.layout.routing.common import Point, flatten_path
from boxflow.layout.scene import Scene
from boxflow.layout.tree import Box, Node, TreeIndex
from boxflow.parser.model import ContainerKind, ContainsDecl


class Severity(Enum):
    ADVISORY = "advisory"


@dataclass
class Diagnostic:
    kind: str
    severity: Severity
    message: str
    ids: tuple[str, ...] = ()
    context: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "severity": self.severity.value,
            "message": self.message,
            "ids": list(self.ids),
            "context": dict(self.context),
        }

    def __str__(self) -> str:
        return f"[{self.kind}] {self.message}"


@dataclass
class _Containment:
    container: Node
    elements: list[Node]
    padding: float


def _first(index: TreeIndex, name: str) -> Node | None:
    matches = index.find(name)
    return matches[0] if matches else None


def _containments(
    index: TreeIndex, contains: Sequence[ContainsDecl]
) -> list[_Containment]:
    result = []
    for decl in contains:
        container = _first(index, decl.container)
        elements = [n for n in (_first(index, e) for e in decl.elements) if n]
        if container is not None and elements:
            result.append(_Containment(container, elements, decl.padding))
    return result


def validate_scene(
    scene: Scene,
    index: TreeIndex,
    contains: Sequence[ContainsDecl] = (),
    padding: float = PADDING,
) -> list[Diagnostic]:
    """Run all checks and return diagnostics.

    `padding` is the default container padding the layout ran with.
    """
    relations = _containments(index, contains)
    diagnostics: list[Diagnostic] = []
    diagnostics.extend(check_sibling_overlap(index, relations))
    diagnostics.extend(check_containment(index, relations, padding))
    diagnostics.extend(check_label_overlap(scene, index))
    diagnostics.extend(check_crossings(scene, index))
    diagnostics.extend(check_alignment(scene, index))
    return diagnostics


def _tied(index: TreeIndex, a: Node, b: Node, relations: list[_Containment]) -> bool:
    """True when a `contains` declaration puts one node around the other."""
    for rel in relations:
        for outer, inner in ((a, b), (b, a)):
            if rel.container is outer and any(
                index.related(inner, e) for e in rel.elements
            ):
                return True
    return False


def check_sibling_overlap(
    index: TreeIndex, relations: list[_Containment] = ()
) -> list[Diagnostic]:
    """Check that no two children of one parent share positive area.

    Stack children overlap on purpose. Semi-transparent nodes, text over
    a non-text shape, and pairs tied by a `contains` declaration are
    exempt too.
    """
    diagnostics: list[Diagnostic] = []
    for parent in index.nodes():
        if not parent.is_container or parent.kind is ContainerKind.STACK:
            continue
        children = parent.children
        for i, a in enumerate(children):
            for b in children[i + 1 :]:
                if not (a.options.is_opaque and b.options.is_opaque):
                    continue
                if a.is_text != b.is_text:
                    continue
                if not a.box.intersects(b.box, GEOM_EPSILON):
                    continue
                if _tied(index, a, b, relations):
                    continue
                w, h = a.box.overlap(b.box)
                diagnostics.append(
                    Diagnostic(
                        kind="overlap",
                        severity=Severity.ADVISORY,
                        message=(
                            f"'{a.name}' and '{b.name}' overlap by "
                            f"{w:.1f}x{h:.1f} inside '{parent.name}'"
                        ),
                        ids=(a.name, b.name),
                        context={"parent": parent.name, "overlap": [w, h]},
                    )
                )
    return diagnostics


def _fmt(box: Box) -> str:
    return f"({box.x:.0f},{box.y:.0f},{box.right:.0f},{box.bottom:.0f})"


def check_containment(
    index: TreeIndex,
    relations: list[_Containment] = (),
    padding: float = PADDING,
) -> list[Diagnostic]:
    """Check that every node lies inside its parent's padded content box.

    Elements of a `contains` declaration are checked against the declared
    container (shrunk by the declared padding) instead of their tree parent.
    """
    declared: dict[int, list[_Containment]] = {}
    for rel in relations:
        for element in rel.elements:
            declared.setdefault(element.uid, []).append(rel)

    diagnostics: list[Diagnostic] = []
    for node in index.nodes():
        if node.uid in declared:
            bounds = [
                (rel.container, rel.container.box.inset(rel.padding))
                for rel in declared[node.uid]
            ]
        else:
            parent = index.parent(node)
            if parent is None:
                continue
            pad = parent.options.padding
            pad = pad if pad is not None else padding
            bounds = [(parent, parent.box.inset(pad))]

        for container, content in bounds:
            if content.contains(node.box, GEOM_EPSILON):
                continue
            diagnostics.append(
                Diagnostic(
                    kind="containment",
                    severity=Severity.ADVISORY,
                    message=(
                        f"'{node.name}' {_fmt(node.box)} extends outside "
                        f"'{container.name}' content box {_fmt(content)}"
                    ),
                    ids=(node.name, container.name),
                    context={"container": container.name},
                )
            )
    return diagnostics


def _blocking_shapes(index: TreeIndex) -> list[Node]:
    """Opaque, non-text leaf shapes."""
    return [
        n
        for n in index.nodes()
        if not n.is_container and not n.is_text and n.options.is_opaque
    ]


def check_label_overlap(scene: Scene, index: TreeIndex) -> list[Diagnostic]:
    """Check labels against each other and against unrelated shapes.

    A shape's own label, and a connection label's own endpoints, are
    exempt.
    """
    exempt: dict[str, set[str]] = {}
    for path in scene.paths:
        exempt[path.key] = {path.source, path.target}

    diagnostics: list[Diagnostic] = []
    labels = scene.labels
    for i, a in enumerate(labels):
        for b in labels[i + 1 :]:
            if a.owner == b.owner or not a.box.intersects(b.box, GEOM_EPSILON):
                continue
            diagnostics.append(
                Diagnostic(
                    kind="label",
                    severity=Severity.ADVISORY,
                    message=f"Label '{a.text}' of '{a.owner}' overlaps label "
                    f"'{b.text}' of '{b.owner}'",
                    ids=(a.owner, b.owner),
                    context={"labels": [a.text, b.text]},
                )
            )

    shapes = _blocking_shapes(index)
    for label in labels:
        skip = exempt.get(label.owner, set()) | {label.owner}
        for shape in shapes:
            if shape.name in skip or not label.box.intersects(shape.box, GEOM_EPSILON):
                continue
            diagnostics.append(
                Diagnostic(
                    kind="label",
                    severity=Severity.ADVISORY,
                    message=f"Label '{label.text}' of '{label.owner}' overlaps "
                    f"shape '{shape.name}'",
                    ids=(label.owner, shape.name),
                    context={"label": label.text},
                )
            )
    return diagnostics


def segment_crosses_box(p0: Point, p1: Point, box: Box) -> bool:
    """True if the segment runs through the box interior.

    Liang-Barsky clipping against the box shrunk by GEOM_EPSILON, so a
    segment that only touches an edge does not count.
    """
    inner = box.inset(GEOM_EPSILON)
    if inner.width <= 0 or inner.height <= 0:
        return False
    dx = p1[0] - p0[0]
    dy = p1[1] - p0[1]
    if dx == 0 and dy == 0:
        return False
    t0, t1 = 0.0, 1.0
    for p, q in (
        (-dx, p0[0] - inner.x),
        (dx, inner.right - p0[0]),
        (-dy, p0[1] - inner.y),
        (dy, inner.bottom - p0[1]),
    ):
        if p == 0:
            if q < 0:
                return False
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return False
            t0 = max(t0, r)
        else:
            if r < t0:
                return False
            t1 = min(t1, r)
    return t1 > t0


def check_crossings(scene: Scene, index: TreeIndex) -> list[Diagnostic]:
    """Check that no connection runs through an unrelated opaque shape.

    Shapes that are the connection's endpoints, that contain or sit inside
    an endpoint, or that contain the path's start or end point are exempt.
    """
    shapes = _blocking_shapes(index)
    diagnostics: list[Diagnostic] = []
    for path in scene.paths:
        source = _first(index, path.source)
        target = _first(index, path.target)
        points = flatten_path(path.geometry, list(path.points))
        start, end = points[0], points[-1]
        for shape in shapes:
            if any(
                ep is not None and index.related(shape, ep) for ep in (source, target)
            ):
                continue
            if shape.box.contains_point(*start) or shape.box.contains_point(*end):
                continue
            if not any(
                segment_crosses_box(a, b, shape.box) for a, b in zip(points, points[1:])
            ):
                continue
            diagnostics.append(
                Diagnostic(
                    kind="crossing",
                    severity=Severity.ADVISORY,
                    message=f"Connection '{path.name}' crosses shape '{shape.name}'",
                    ids=(path.source, path.target, shape.name),
                    context={"connection": path.name, "mode": path.mode},
                )
            )
    return diagnostics


def check_alignment(scene: Scene, index: TreeIndex) -> list[Diagnostic]:
    """Flag connections whose endpoints are almost, but not quite, aligned.

    Lining up the two centers would make such a route straight.
    """
    diagnostics: list[Diagnostic] = []
    for path in scene.paths:
        source = _first(index, path.source)
        target = _first(index, path.target)
        if source is None or target is None:
            continue
        dx = abs(source.box.center_x - target.box.center_x)
        dy = abs(source.box.center_y - target.box.center_y)
        if dx < ALIGNED_TOLERANCE or dy < ALIGNED_TOLERANCE:
            continue
        if dy < ALIGNMENT_THRESHOLD and dx > dy * ALIGNMENT_RATIO:
            direction, axis, off = "horizontal", "y", dy
        elif dx < ALIGNMENT_THRESHOLD and dy > dx * ALIGNMENT_RATIO:
            direction, axis, off = "vertical", "x", dx
        else:
            continue
        diagnostics.append(
            Diagnostic(
                kind="alignment",
                severity=Severity.ADVISORY,
                message=(
                    f"Connection '{path.key}' is nearly {direction} (off by "
                    f"{off:.0f}px); aligning the {axis} positions would straighten it"
                ),
                ids=(path.source, path.target),
                context={"connection": path.key, "axis": axis, "offset": off},
            )
        )
    return diagnostics
