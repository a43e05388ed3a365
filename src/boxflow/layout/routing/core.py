"""Core connection routing: the route_connections() dispatcher.

Resolves both endpoints of every connection to anchor points on the
final boxes and computes the path geometry for its routing mode:
orthogonal (axis-aligned, at most two bends, shared trunks), direct
(straight) or curved (quadratic Bezier). Boxes are only read, never moved.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from boxflow.errors import RoutingError
from boxflow.layout.constants import COORD_TOLERANCE, CURVE_FACTOR, ROUTE_CLEARANCE
from boxflow.layout.routing.anchors import (
    ANCHORS,
    anchor_point,
    anchor_side,
    is_horizontal,
    nearest_sides,
    normalize_anchor,
)
from boxflow.layout.routing.common import (
    ConnectionOptions,
    Point,
    RoutedPath,
    dedupe_points,
    parse_connection_options,
)
from boxflow.layout.routing.trunks import TrunkCandidate, assign_trunks
from boxflow.layout.tree import Box, TreeIndex
from boxflow.parser.model import ConnectionDecl, Endpoint

logger = logging.getLogger(__name__)


def _anchor_name(endpoint: Endpoint, decl: ConnectionDecl) -> str | None:
    if endpoint.anchor is None:
        return None
    anchor = normalize_anchor(endpoint.anchor)
    if anchor is None:
        raise RoutingError(
            f"Connection '{decl.name}' uses unknown anchor '{endpoint.anchor}' "
            f"on '{endpoint.node_id}' (expected one of: {', '.join(ANCHORS)})",
            ids=(endpoint.node_id,),
        )
    return anchor


def _waypoints(
    index: TreeIndex, opts: ConnectionOptions, context: str
) -> list[Point]:
    points = []
    for waypoint in opts.via:
        if isinstance(waypoint, str):
            node = index.resolve(waypoint, RoutingError, context)
            points.append(node.box.center)
        else:
            points.append(waypoint)
    return points


def _point_box(p: Point) -> Box:
    return Box(p[0], p[1], 0.0, 0.0)


def curve_control(start: Point, end: Point) -> Point:
    """Control point for a curved route without waypoints.

    The chord midpoint pushed along the chord's normal (-dy, dx) by
    CURVE_FACTOR of the chord length.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    mx = (start[0] + end[0]) / 2
    my = (start[1] + end[1]) / 2
    return (mx - dy * CURVE_FACTOR, my + dx * CURVE_FACTOR)


def curved_points(start: Point, end: Point, waypoints: list[Point]) -> list[Point]:
    """Start point followed by (control, end) pairs.

    One waypoint becomes the control point. Several waypoints each control
    one segment, and consecutive segments join at the midpoint between
    their waypoints.
    """
    if not waypoints:
        return [start, curve_control(start, end), end]
    points = [start]
    for i, control in enumerate(waypoints):
        points.append(control)
        if i + 1 < len(waypoints):
            nxt = waypoints[i + 1]
            points.append(((control[0] + nxt[0]) / 2, (control[1] + nxt[1]) / 2))
        else:
            points.append(end)
    return points


def elbow_points(start: Point, end: Point, waypoints: list[Point]) -> list[Point]:
    """Axis-aligned path through waypoints, horizontal leg first."""
    points = [start]
    current = start
    for target in [*waypoints, end]:
        points.append((target[0], current[1]))
        points.append(target)
        current = target
    return dedupe_points(points)


def z_points(start: Point, end: Point, axis: str, coord: float) -> list[Point]:
    """Two-bend route whose middle segment sits at `coord`."""
    if axis == "x":
        return [start, (coord, start[1]), (coord, end[1]), end]
    return [start, (start[0], coord), (end[0], coord), end]


def orthogonal_points(
    start: Point,
    source_side: str,
    end: Point,
    target_side: str,
    source_box: Box,
    target_box: Box,
) -> tuple[list[Point], str | None, float | None]:
    """Route between two anchors with at most two bends.

    Returns the points plus, for Z-shaped routes, the trunk axis and the
    gap midpoint (both None otherwise).
    """
    (x0, y0), (x1, y1) = start, end
    h_source = is_horizontal(source_side)
    h_target = is_horizontal(target_side)

    if h_source and h_target:
        if source_side == target_side:
            if source_side == "right":
                x = max(source_box.right, target_box.right) + ROUTE_CLEARANCE
            else:
                x = min(source_box.x, target_box.x) - ROUTE_CLEARANCE
            return [start, (x, y0), (x, y1), end], None, None
        if abs(y0 - y1) <= COORD_TOLERANCE:
            return [start, end], None, None
        mid = (x0 + x1) / 2
        return z_points(start, end, "x", mid), "x", mid

    if not h_source and not h_target:
        if source_side == target_side:
            if source_side == "bottom":
                y = max(source_box.bottom, target_box.bottom) + ROUTE_CLEARANCE
            else:
                y = min(source_box.y, target_box.y) - ROUTE_CLEARANCE
            return [start, (x0, y), (x1, y), end], None, None
        if abs(x0 - x1) <= COORD_TOLERANCE:
            return [start, end], None, None
        mid = (y0 + y1) / 2
        return z_points(start, end, "y", mid), "y", mid

    if h_source:
        corner = (x1, y0)
    else:
        corner = (x0, y1)
    return dedupe_points([start, corner, end]), None, None


def _route_one(
    index: TreeIndex, decl: ConnectionDecl, position: int
) -> tuple[RoutedPath, TrunkCandidate | None]:
    context = f"Connection '{decl.name}'"
    opts = parse_connection_options(decl.name, decl.options)
    source = index.resolve(decl.source.node_id, RoutingError, context)
    target = index.resolve(decl.target.node_id, RoutingError, context)
    source_anchor = _anchor_name(decl.source, decl)
    target_anchor = _anchor_name(decl.target, decl)
    waypoints = _waypoints(index, opts, context)

    # Auto sides face the nearest waypoint when there is one
    toward_source = _point_box(waypoints[0]) if waypoints else target.box
    toward_target = _point_box(waypoints[-1]) if waypoints else source.box
    auto_source, _ = nearest_sides(source.box, toward_source)
    _, auto_target = nearest_sides(toward_target, target.box)

    start = anchor_point(source.box, source_anchor or auto_source)
    end = anchor_point(target.box, target_anchor or auto_target)
    source_side = anchor_side(source_anchor or auto_source) or auto_source
    target_side = anchor_side(target_anchor or auto_target) or auto_target

    candidate = None
    geometry = "polyline"
    if opts.routing == "direct":
        points = [start, *waypoints, end]
    elif opts.routing == "curved":
        points = curved_points(start, end, waypoints)
        geometry = "quadratic"
    elif waypoints:
        points = elbow_points(start, end, waypoints)
    else:
        points, axis, mid = orthogonal_points(
            start, source_side, end, target_side, source.box, target.box
        )
        if axis is not None:
            k = 0 if axis == "x" else 1
            candidate = TrunkCandidate(
                position=position,
                axis=axis,
                midpoint=mid,
                source_key=(source.uid, source_side),
                target_key=(target.uid, target_side),
                trunk=opts.trunk,
                span=(min(start[k], end[k]), max(start[k], end[k])),
            )

    path = RoutedPath(
        decl=decl,
        source=source,
        target=target,
        mode=opts.routing,
        geometry=geometry,
        points=points,
        options=opts,
    )
    return path, candidate


def route_connections(
    index: TreeIndex, connections: Sequence[ConnectionDecl]
) -> list[RoutedPath]:
    """Route every connection in declaration order.

    Raises:
        RoutingError: On an unknown anchor, an unresolved or ambiguous
            endpoint or waypoint, or an invalid connection option.
    """
    paths: list[RoutedPath] = []
    candidates: list[TrunkCandidate] = []
    for position, decl in enumerate(connections):
        path, candidate = _route_one(index, decl, position)
        paths.append(path)
        if candidate is not None:
            candidates.append(candidate)

    coords = assign_trunks(candidates)
    for candidate in candidates:
        if candidate.position in coords:
            path = paths[candidate.position]
            path.points = z_points(
                path.points[0], path.points[-1], candidate.axis, coords[candidate.position]
            )

    logger.debug(
        "Routed %d connections (%d trunk candidates)", len(paths), len(candidates)
    )
    return paths
