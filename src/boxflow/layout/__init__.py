"""Layout phases: tree building, box layout, constraints, routing, validation."""

from boxflow.layout.constraints import apply_constraints
from boxflow.layout.engine import compute_layout
from boxflow.layout.routing import route_connections
from boxflow.layout.scene import Scene, assemble_scene
from boxflow.layout.tree import Box, Node, TreeIndex, build_tree
from boxflow.layout.validator import Diagnostic, validate_scene

__all__ = [
    "Box",
    "Diagnostic",
    "Node",
    "Scene",
    "TreeIndex",
    "apply_constraints",
    "assemble_scene",
    "build_tree",
    "compute_layout",
    "route_connections",
    "validate_scene",
]
