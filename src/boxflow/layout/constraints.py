"""Constraint applicator: directional edge assignments.

``a.left = b.right + 20`` means "set a's left edge to b's right edge, as it
is right now, plus 20". Constraints run strictly in declaration order and a
later assignment to the same edge overwrites an earlier one. Moving a node
translates its whole subtree rigidly; nothing is re-laid-out.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from boxflow.errors import ConstraintError
from boxflow.layout.tree import Box, Node, TreeIndex
from boxflow.parser.model import Constraint, ConstraintDecl, ContainsDecl

logger = logging.getLogger(__name__)

POSITION_EDGES = ("left", "right", "top", "bottom", "center_x", "center_y")
SIZE_EDGES = ("width", "height")
EDGES = POSITION_EDGES + SIZE_EDGES

EDGE_ALIASES = {
    "x": "left",
    "y": "top",
    "centerx": "center_x",
    "centery": "center_y",
    "cx": "center_x",
    "cy": "center_y",
}


def normalize_edge(name: str) -> str | None:
    """Canonical edge name, or None if unrecognized."""
    key = name.replace("-", "_")
    if key in EDGES:
        return key
    return EDGE_ALIASES.get(key.replace("_", "").lower())


def edge_value(box: Box, edge: str) -> float:
    """Read an edge (or size) of a box."""
    if edge == "left":
        return box.x
    if edge == "right":
        return box.right
    if edge == "top":
        return box.y
    if edge == "bottom":
        return box.bottom
    if edge == "center_x":
        return box.center_x
    if edge == "center_y":
        return box.center_y
    if edge == "width":
        return box.width
    return box.height


def translate_subtree(node: Node, dx: float, dy: float) -> None:
    """Move a node and everything inside it by (dx, dy)."""
    if dx == 0 and dy == 0:
        return
    for n in node.walk():
        n.box = n.box.translated(dx, dy)


def set_edge(node: Node, edge: str, value: float) -> None:
    """Assign one edge of a node.

    Position edges translate the subtree; size edges resize only this
    node, keeping its top-left corner.
    """
    box = node.box
    if edge == "width" or edge == "height":
        if value < 0:
            raise ConstraintError(
                f"Constraint would give '{node.name}' a negative {edge} ({value:g})",
                ids=(node.name,),
            )
        if edge == "width":
            node.box = Box(box.x, box.y, value, box.height)
        else:
            node.box = Box(box.x, box.y, box.width, value)
        return

    if edge == "left":
        translate_subtree(node, value - box.x, 0.0)
    elif edge == "right":
        translate_subtree(node, value - box.right, 0.0)
    elif edge == "center_x":
        translate_subtree(node, value - box.center_x, 0.0)
    elif edge == "top":
        translate_subtree(node, 0.0, value - box.y)
    elif edge == "bottom":
        translate_subtree(node, 0.0, value - box.bottom)
    else:
        translate_subtree(node, 0.0, value - box.center_y)


@dataclass
class _EdgeStep:
    decl: ConstraintDecl
    target: Node
    edge: str
    source: Node | None = None
    source_edge: str | None = None

    def apply(self) -> None:
        if self.source is None:
            value = self.decl.value
        else:
            value = edge_value(self.source.box, self.source_edge) + self.decl.offset
        set_edge(self.target, self.edge, value)


@dataclass
class _ContainsStep:
    decl: ContainsDecl
    container: Node
    elements: list[Node]

    def apply(self) -> None:
        bounds = self.elements[0].box
        for element in self.elements[1:]:
            bounds = bounds.union(element.box)
        target = bounds.inset(-self.decl.padding)
        box = self.container.box
        translate_subtree(self.container, target.x - box.x, target.y - box.y)
        self.container.box = target


def _checked_edge(name: str, decl: Constraint) -> str:
    edge = normalize_edge(name)
    if edge is None:
        raise ConstraintError(
            f"Constraint '{decl}' uses unknown edge '{name}' "
            f"(expected one of: {', '.join(EDGES)})",
            ids=(name,),
        )
    return edge


def _resolve(index: TreeIndex, decl: Constraint) -> _EdgeStep | _ContainsStep:
    context = f"Constraint '{decl}'"
    if isinstance(decl, ContainsDecl):
        if not decl.elements:
            raise ConstraintError(
                f"{context} lists no elements", ids=(decl.container,)
            )
        container = index.resolve(decl.container, ConstraintError, context)
        elements = [index.resolve(e, ConstraintError, context) for e in decl.elements]
        for element in elements:
            if index.related(container, element) and element is not container:
                # A container moving onto its own descendant would chase itself
                if container in index.ancestors(element):
                    raise ConstraintError(
                        f"{context}: '{element.name}' is already inside "
                        f"'{container.name}' in the layout tree",
                        ids=(container.name, element.name),
                    )
        return _ContainsStep(decl=decl, container=container, elements=elements)

    edge = _checked_edge(decl.edge, decl)
    target = index.resolve(decl.target, ConstraintError, context)
    if decl.source is None:
        if decl.value is None:
            raise ConstraintError(
                f"{context} has neither a source edge nor a value", ids=(decl.target,)
            )
        if edge in SIZE_EDGES and decl.value < 0:
            raise ConstraintError(
                f"{context} would give '{target.name}' a negative {edge} "
                f"({decl.value:g})",
                ids=(target.name,),
            )
        return _EdgeStep(decl=decl, target=target, edge=edge)

    source_edge = _checked_edge(decl.source_edge or "", decl)
    source = index.resolve(decl.source, ConstraintError, context)
    return _EdgeStep(
        decl=decl, target=target, edge=edge, source=source, source_edge=source_edge
    )


def apply_constraints(index: TreeIndex, constraints: Sequence[Constraint]) -> None:
    """Apply constraints in declaration order.

    Every constraint is resolved (nodes, edge names, constant sizes) before
    the first one is applied, so a bad reference or a negative constant size
    leaves all boxes untouched. A size copied from another edge is only known
    while applying; if it comes out negative the error is raised mid-way and
    the render is abandoned.
    """
    steps = [_resolve(index, decl) for decl in constraints]
    for step in steps:
        step.apply()
        logger.debug("Applied constraint %s", step.decl)
    if steps:
        logger.debug("Applied %d constraints", len(steps))
