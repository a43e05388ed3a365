"""Data model for the structural diagram tree.

This is the contract with whatever produces the tree (a source-syntax
parser, an agent emitting JSON, or Python code building it directly).
Everything here is immutable; the layout engine builds its own mutable
node tree from it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class ShapeKind(Enum):
    """Leaf shape variants."""

    RECT = "rect"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    LINE = "line"
    TEXT = "text"


class ContainerKind(Enum):
    """Container variants."""

    ROW = "row"  # sequential-horizontal
    COLUMN = "col"  # sequential-vertical
    STACK = "stack"
    GRID = "grid"
    GROUP = "group"  # arranged like a column


class ConnectionDirection(Enum):
    """Which ends of a connection carry an arrowhead."""

    FORWARD = "forward"
    BACKWARD = "backward"
    BOTH = "both"
    NONE = "none"


@dataclass(frozen=True)
class ShapeDecl:
    """A leaf shape: `rect a [size: 50]`."""

    kind: ShapeKind
    id: str | None = None
    options: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class ContainerDecl:
    """A container with ordered children: `row { ... }`."""

    kind: ContainerKind
    id: str | None = None
    options: Mapping[str, object] = field(default_factory=dict)
    children: tuple[Decl, ...] = ()


Decl = Union[ShapeDecl, ContainerDecl]


@dataclass(frozen=True)
class Endpoint:
    """A connection endpoint: a node id with an optional named anchor."""

    node_id: str
    anchor: str | None = None

    @classmethod
    def parse(cls, ref: str) -> Endpoint:
        """Parse `"node"` or `"node.anchor"`."""
        node_id, _, anchor = ref.partition(".")
        return cls(node_id=node_id, anchor=anchor or None)

    def __str__(self) -> str:
        if self.anchor:
            return f"{self.node_id}.{self.anchor}"
        return self.node_id


@dataclass(frozen=True)
class ConnectionDecl:
    """A declared connection between two nodes."""

    source: Endpoint
    target: Endpoint
    direction: ConnectionDirection = ConnectionDirection.FORWARD
    options: Mapping[str, object] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return f"{self.source.node_id}->{self.target.node_id}"


@dataclass(frozen=True)
class ConstraintDecl:
    """A directional edge assignment.

    Either `target.edge = source.source_edge + offset` (when `source` is
    set) or `target.edge = value`.
    """

    target: str
    edge: str
    source: str | None = None
    source_edge: str | None = None
    offset: float = 0.0
    value: float | None = None

    def __str__(self) -> str:
        lhs = f"{self.target}.{self.edge}"
        if self.source is None:
            return f"{lhs} = {self.value:g}"
        rhs = f"{self.source}.{self.source_edge}"
        if self.offset:
            sign = "+" if self.offset > 0 else "-"
            rhs += f" {sign} {abs(self.offset):g}"
        return f"{lhs} = {rhs}"


@dataclass(frozen=True)
class ContainsDecl:
    """An explicit containment relationship: `box contains a, b [padding]`."""

    container: str
    elements: tuple[str, ...]
    padding: float = 0.0

    def __str__(self) -> str:
        return f"{self.container} contains {', '.join(self.elements)}"


Constraint = Union[ConstraintDecl, ContainsDecl]


@dataclass(frozen=True)
class Document:
    """A complete diagram: one root container plus cross-cutting statements."""

    root: ContainerDecl
    connections: tuple[ConnectionDecl, ...] = ()
    constraints: tuple[Constraint, ...] = ()

    def contains_relations(self) -> list[ContainsDecl]:
        return [c for c in self.constraints if isinstance(c, ContainsDecl)]
