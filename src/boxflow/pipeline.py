"""Render pipeline: build -> layout -> constrain -> route -> assemble.

Each call owns its tree, index and scene; nothing is shared between
calls, so independent renders may run concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from boxflow.layout.constants import GAP, PADDING
from boxflow.layout.constraints import apply_constraints
from boxflow.layout.engine import compute_layout
from boxflow.layout.routing import RoutedPath, route_connections
from boxflow.layout.scene import Lookup, Scene, assemble_scene
from boxflow.layout.tree import TreeIndex, build_tree
from boxflow.layout.validator import Diagnostic, validate_scene
from boxflow.parser.model import Document

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Everything one render produced, for callers that need the tree."""

    index: TreeIndex
    routed: list[RoutedPath]
    scene: Scene


def run_pipeline(
    document: Document,
    lookup: Lookup | None = None,
    *,
    gap: float = GAP,
    padding: float = PADDING,
) -> RenderResult:
    """Run every phase and keep the intermediate tree."""
    root = build_tree(document.root)
    compute_layout(root, gap=gap, padding=padding)
    index = TreeIndex(root)
    apply_constraints(index, document.constraints)
    routed = route_connections(index, document.connections)
    scene = assemble_scene(root, routed, lookup)
    logger.info(
        "Rendered %d shapes, %d paths, %d labels on a %.0fx%.0f canvas",
        len(scene.shapes), len(scene.paths), len(scene.labels),
        scene.width, scene.height,
    )
    return RenderResult(index=index, routed=routed, scene=scene)


def render_scene(
    document: Document,
    lookup: Lookup | None = None,
    *,
    gap: float = GAP,
    padding: float = PADDING,
) -> Scene:
    """Render a document to an immutable Scene.

    Raises:
        LayoutError: On an invalid option or grid shape.
        ConstraintError: On an unknown node or edge in a constraint.
        RoutingError: On an unknown anchor, endpoint or connection option.
    """
    return run_pipeline(document, lookup, gap=gap, padding=padding).scene


def lint_document(
    document: Document,
    lookup: Lookup | None = None,
    *,
    gap: float = GAP,
    padding: float = PADDING,
) -> tuple[Scene, list[Diagnostic]]:
    """Render a document and run the validator over the result."""
    result = run_pipeline(document, lookup, gap=gap, padding=padding)
    diagnostics = validate_scene(
        result.scene,
        result.index,
        contains=document.contains_relations(),
        padding=padding,
    )
    logger.info("Validator reported %d diagnostics", len(diagnostics))
    return result.scene, diagnostics
