"""Internal geometry tree: boxes, nodes and the per-render containment index.

Nodes own their children and never point back at their parent. Anything
that needs the parent, ancestor or descendant relation asks a `TreeIndex`,
which is built once per render from the finished tree.
"""

from __future__ import annotations

__all__ = ["Box", "Node", "TreeIndex", "build_tree"]

import difflib
import itertools
from collections.abc import Iterator
from dataclasses import dataclass, field

import networkx as nx

from boxflow.errors import DiagramError
from boxflow.layout.options import (
    ContainerOptions,
    ShapeOptions,
    parse_container_options,
    parse_shape_options,
)
from boxflow.parser.model import ContainerDecl, ContainerKind, Decl, ShapeKind


@dataclass(frozen=True)
class Box:
    """Absolute position and size of a node."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def center(self) -> tuple[float, float]:
        return (self.center_x, self.center_y)

    def translated(self, dx: float, dy: float) -> Box:
        return Box(self.x + dx, self.y + dy, self.width, self.height)

    def inset(self, amount: float) -> Box:
        """Shrink by `amount` on every side (negative grows)."""
        return Box(
            self.x + amount,
            self.y + amount,
            self.width - 2 * amount,
            self.height - 2 * amount,
        )

    def union(self, other: Box) -> Box:
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Box(x, y, max(self.right, other.right) - x, max(self.bottom, other.bottom) - y)

    def overlap(self, other: Box) -> tuple[float, float]:
        """Width and height of the intersection (negative when disjoint)."""
        return (
            min(self.right, other.right) - max(self.x, other.x),
            min(self.bottom, other.bottom) - max(self.y, other.y),
        )

    def intersects(self, other: Box, epsilon: float = 0.0) -> bool:
        """True when the two boxes share a region of positive area."""
        ow, oh = self.overlap(other)
        return ow > epsilon and oh > epsilon

    def contains(self, other: Box, epsilon: float = 0.0) -> bool:
        return (
            other.x >= self.x - epsilon
            and other.y >= self.y - epsilon
            and other.right <= self.right + epsilon
            and other.bottom <= self.bottom + epsilon
        )

    def contains_point(self, x: float, y: float, epsilon: float = 0.0) -> bool:
        return (
            self.x - epsilon <= x <= self.right + epsilon
            and self.y - epsilon <= y <= self.bottom + epsilon
        )


@dataclass(eq=False)
class Node:
    """A shape or container in the layout tree."""

    uid: int
    kind: ShapeKind | ContainerKind
    id: str | None
    name: str
    options: ShapeOptions | ContainerOptions
    children: list[Node] = field(default_factory=list)
    # Intrinsic size, set by the measure pass
    width: float = 0.0
    height: float = 0.0
    # Absolute geometry, set by the arrange pass
    box: Box = field(default_factory=Box)

    @property
    def is_container(self) -> bool:
        return isinstance(self.kind, ContainerKind)

    @property
    def is_text(self) -> bool:
        return self.kind is ShapeKind.TEXT

    def walk(self) -> Iterator[Node]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def __repr__(self) -> str:
        return f"Node({self.kind.value} {self.name}, box={self.box})"


def build_tree(decl: Decl) -> Node:
    """Build the internal node tree from the structural tree.

    Option keys and values are validated here, so a bad option fails
    before any geometry is computed.
    """
    counter = itertools.count()
    return _build(decl, None, 0, counter)


def _build(
    decl: Decl, parent_name: str | None, index: int, counter: itertools.count
) -> Node:
    if decl.id:
        name = decl.id
    elif parent_name is None:
        name = "<root>"
    else:
        name = f"<child #{index + 1} of {parent_name}>"

    owner = f"{decl.kind.value} '{name}'"
    if isinstance(decl, ContainerDecl):
        node = Node(
            uid=next(counter),
            kind=decl.kind,
            id=decl.id,
            name=name,
            options=parse_container_options(decl.kind, owner, decl.options),
        )
        node.children = [
            _build(child, name, i, counter) for i, child in enumerate(decl.children)
        ]
        return node

    return Node(
        uid=next(counter),
        kind=decl.kind,
        id=decl.id,
        name=name,
        options=parse_shape_options(decl.kind, owner, decl.options),
    )


class TreeIndex:
    """Parent/ancestor/identifier lookups for one rendered tree.

    Containment edges (parent -> child) are kept in a networkx DiGraph keyed
    by node uid, so ancestor and descendant queries are graph reachability.
    """

    def __init__(self, root: Node) -> None:
        self.root = root
        self.graph = nx.DiGraph()
        self._nodes: dict[int, Node] = {}
        self._by_id: dict[str, list[Node]] = {}

        for node in root.walk():
            self._nodes[node.uid] = node
            self.graph.add_node(node.uid)
            if node.id:
                self._by_id.setdefault(node.id, []).append(node)
            for child in node.children:
                self.graph.add_edge(node.uid, child.uid)

    def __len__(self) -> int:
        return len(self._nodes)

    def nodes(self) -> list[Node]:
        return list(self._nodes.values())

    def parent(self, node: Node) -> Node | None:
        preds = list(self.graph.predecessors(node.uid))
        return self._nodes[preds[0]] if preds else None

    def ancestors(self, node: Node) -> list[Node]:
        return [self._nodes[uid] for uid in nx.ancestors(self.graph, node.uid)]

    def subtree(self, node: Node) -> list[Node]:
        """The node itself plus every descendant."""
        return list(node.walk())

    def related(self, a: Node, b: Node) -> bool:
        """True if a and b are the same node or one contains the other."""
        if a is b:
            return True
        return nx.has_path(self.graph, a.uid, b.uid) or nx.has_path(
            self.graph, b.uid, a.uid
        )

    def find(self, node_id: str) -> list[Node]:
        return list(self._by_id.get(node_id, []))

    def resolve(
        self,
        node_id: str,
        error_cls: type[DiagramError],
        context: str,
    ) -> Node:
        """Return the single node with this id or raise `error_cls`."""
        matches = self._by_id.get(node_id, [])
        if len(matches) == 1:
            return matches[0]
        if not matches:
            message = f"{context} references unknown node '{node_id}'"
            close = difflib.get_close_matches(node_id, self._by_id.keys(), n=3)
            if close:
                message += f" (did you mean: {', '.join(close)}?)"
            raise error_cls(message, ids=(node_id,))
        raise error_cls(
            f"{context} references '{node_id}', which is ambiguous: "
            f"{len(matches)} nodes share that id",
            ids=(node_id,),
        )
