"""Shared types and helper functions for connection routing."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union

from boxflow.errors import RoutingError
from boxflow.layout.constants import CURVE_SAMPLES, LABEL_AT
from boxflow.layout.tree import Node
from boxflow.parser.model import ConnectionDecl

Point = tuple[float, float]
Waypoint = Union[str, Point]

ROUTING_MODES = ("orthogonal", "direct", "curved")

CONNECTION_KEYS = frozenset(
    {
        "routing",
        "via",
        "trunk",
        "label",
        "label_at",
        "label_offset",
        "stroke",
        "stroke_width",
        "font_size",
    }
)


@dataclass(frozen=True)
class ConnectionOptions:
    """Typed options for one connection."""

    routing: str = "orthogonal"
    via: tuple[Waypoint, ...] = ()
    trunk: float | None = None
    label: str | None = None
    label_at: float = LABEL_AT
    label_offset: float = 0.0
    stroke: str | None = None
    stroke_width: float | None = None
    font_size: float | None = None


@dataclass
class RoutedPath:
    """A routed connection.

    For ``polyline`` geometry `points` are the vertices. For ``quadratic``
    geometry they are the start point followed by (control, end) pairs,
    one pair per chained quadratic segment.
    """

    decl: ConnectionDecl
    source: Node
    target: Node
    mode: str
    geometry: str
    points: list[Point]
    options: ConnectionOptions

    @property
    def name(self) -> str:
        return f"{self.source.name}->{self.target.name}"

    def flattened(self, samples: int = CURVE_SAMPLES) -> list[Point]:
        return flatten_path(self.geometry, self.points, samples)


def _invalid(name: str, key: str, reason: str, found: object = None) -> RoutingError:
    message = f"Invalid option '{key}' on connection '{name}': {reason}"
    if found is not None:
        message += f" (found {found!r})"
    return RoutingError(message, ids=(name,))


def _number(name: str, key: str, value: object, minimum: float | None = None) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _invalid(name, key, "expected a number", value)
    if minimum is not None and value < minimum:
        raise _invalid(name, key, f"must be >= {minimum:g}", value)
    return float(value)


def _string(name: str, key: str, value: object) -> str:
    if not isinstance(value, str):
        raise _invalid(name, key, "expected a string", value)
    return value


def _waypoint(name: str, value: object) -> Waypoint:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return (_number(name, "via", value[0]), _number(name, "via", value[1]))
    raise _invalid(name, "via", "expected a node id or an [x, y] pair", value)


def parse_connection_options(
    name: str, raw: Mapping[str, object]
) -> ConnectionOptions:
    """Validate a connection's raw options.

    Raises:
        RoutingError: On an unrecognized key or an ill-typed value.
    """
    opts: dict[str, object] = {}
    for key, value in raw.items():
        canon = str(key).replace("-", "_")
        if canon not in CONNECTION_KEYS:
            raise RoutingError(
                f"Unrecognized option '{key}' on connection '{name}' "
                f"(expected one of: {', '.join(sorted(CONNECTION_KEYS))})",
                ids=(name,),
            )
        opts[canon] = value

    fields: dict[str, object] = {}
    if "routing" in opts:
        routing = _string(name, "routing", opts["routing"])
        if routing not in ROUTING_MODES:
            raise _invalid(
                name, "routing", f"expected one of {', '.join(ROUTING_MODES)}", routing
            )
        fields["routing"] = routing
    if "via" in opts:
        via = opts["via"]
        if isinstance(via, str):
            via = [via]
        if not isinstance(via, (list, tuple)):
            raise _invalid(name, "via", "expected a list of waypoints", via)
        fields["via"] = tuple(_waypoint(name, w) for w in via)
    if "trunk" in opts:
        fields["trunk"] = _number(name, "trunk", opts["trunk"])
    for key in ("label", "stroke"):
        if key in opts:
            fields[key] = _string(name, key, opts[key])
    if "label_at" in opts:
        at = _number(name, "label_at", opts["label_at"], minimum=0)
        if at > 1:
            raise _invalid(name, "label_at", "must be <= 1", at)
        fields["label_at"] = at
    if "label_offset" in opts:
        fields["label_offset"] = _number(name, "label_offset", opts["label_offset"])
    if "stroke_width" in opts:
        fields["stroke_width"] = _number(
            name, "stroke_width", opts["stroke_width"], minimum=0
        )
    if "font_size" in opts:
        fields["font_size"] = _number(name, "font_size", opts["font_size"], minimum=1)

    return ConnectionOptions(**fields)


def quadratic_point(p0: Point, c: Point, p1: Point, t: float) -> Point:
    """Point at parameter t on a quadratic Bezier."""
    u = 1.0 - t
    return (
        u * u * p0[0] + 2 * u * t * c[0] + t * t * p1[0],
        u * u * p0[1] + 2 * u * t * c[1] + t * t * p1[1],
    )


def flatten_path(
    geometry: str, points: list[Point], samples: int = CURVE_SAMPLES
) -> list[Point]:
    """Return the path as a polyline, sampling curves."""
    if geometry != "quadratic":
        return list(points)
    flat = [points[0]]
    start = points[0]
    for i in range(1, len(points) - 1, 2):
        control, end = points[i], points[i + 1]
        for k in range(1, samples + 1):
            flat.append(quadratic_point(start, control, end, k / samples))
        start = end
    return flat


def dedupe_points(points: list[Point], epsilon: float = 1e-9) -> list[Point]:
    """Drop consecutive duplicate vertices."""
    result: list[Point] = []
    for p in points:
        if result and abs(p[0] - result[-1][0]) <= epsilon and abs(
            p[1] - result[-1][1]
        ) <= epsilon:
            continue
        result.append(p)
    if len(result) == 1:
        result.append(result[0])
    return result
