"""Typed, closed option sets for each node kind.

The structural tree carries raw ``options`` mappings. The tree builder runs
them through these parsers so that every key is checked against the
recognized set for the node's kind, and every value is checked for type,
before any layout work starts.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from boxflow.errors import InvalidOptionError
from boxflow.parser.model import ContainerKind, ShapeKind

ALIGNMENTS = ("start", "center", "end")

COMMON_KEYS = frozenset(
    {
        "label", "fill", "stroke", "stroke_width", "opacity", "font_size",
        "rotation", "dx", "dy",
    }
)
SHAPE_KEYS = COMMON_KEYS | {"size", "width", "height"}
TEXT_KEYS = SHAPE_KEYS | {"text"}
CONTAINER_KEYS = COMMON_KEYS | {"gap", "padding", "align"}
GRID_KEYS = CONTAINER_KEYS | {"columns", "rows"}


@dataclass(frozen=True)
class NodeOptions:
    """Options every node kind accepts."""

    label: str | None = None
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float | None = None
    opacity: float = 1.0
    font_size: float | None = None
    # Degrees clockwise about the box center, applied when drawing only
    rotation: float = 0.0
    # Post-hoc translation ("move right by dx")
    dx: float = 0.0
    dy: float = 0.0

    @property
    def is_opaque(self) -> bool:
        return self.opacity >= 1.0


@dataclass(frozen=True)
class ShapeOptions(NodeOptions):
    width: float | None = None
    height: float | None = None
    text: str | None = None


@dataclass(frozen=True)
class ContainerOptions(NodeOptions):
    gap: float | None = None
    padding: float | None = None
    align: str | None = None
    columns: int | None = None
    rows: int | None = None


def recognized_keys(kind: ShapeKind | ContainerKind) -> frozenset[str]:
    """Return the option keys accepted by a node kind."""
    if kind is ShapeKind.TEXT:
        return TEXT_KEYS
    if isinstance(kind, ShapeKind):
        return SHAPE_KEYS
    if kind is ContainerKind.GRID:
        return GRID_KEYS
    return CONTAINER_KEYS


def _normalize_keys(
    owner: str, raw: Mapping[str, object], allowed: frozenset[str]
) -> dict[str, object]:
    """Canonicalize hyphenated keys and reject anything unrecognized."""
    result: dict[str, object] = {}
    for key, value in raw.items():
        canon = str(key).replace("-", "_")
        if canon not in allowed:
            raise InvalidOptionError(owner, str(key), allowed)
        result[canon] = value
    return result


def _number(
    owner: str,
    key: str,
    value: object,
    allowed: frozenset[str],
    minimum: float | None = None,
) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidOptionError(
            owner, key, allowed, found=value, reason="expected a number"
        )
    if minimum is not None and value < minimum:
        raise InvalidOptionError(
            owner, key, allowed, found=value, reason=f"must be >= {minimum:g}"
        )
    return float(value)


def _string(owner: str, key: str, value: object, allowed: frozenset[str]) -> str:
    if not isinstance(value, str):
        raise InvalidOptionError(
            owner, key, allowed, found=value, reason="expected a string"
        )
    return value


def _common(
    owner: str, opts: dict[str, object], allowed: frozenset[str]
) -> dict[str, object]:
    fields: dict[str, object] = {}
    for key in ("label", "fill", "stroke"):
        if key in opts:
            fields[key] = _string(owner, key, opts[key], allowed)
    if "stroke_width" in opts:
        fields["stroke_width"] = _number(
            owner, "stroke_width", opts["stroke_width"], allowed, minimum=0
        )
    if "font_size" in opts:
        fields["font_size"] = _number(
            owner, "font_size", opts["font_size"], allowed, minimum=1
        )
    if "opacity" in opts:
        opacity = _number(owner, "opacity", opts["opacity"], allowed, minimum=0)
        if opacity > 1:
            raise InvalidOptionError(
                owner, "opacity", allowed, found=opacity, reason="must be <= 1"
            )
        fields["opacity"] = opacity
    for key in ("rotation", "dx", "dy"):
        if key in opts:
            fields[key] = _number(owner, key, opts[key], allowed)
    return fields


def parse_shape_options(
    kind: ShapeKind, owner: str, raw: Mapping[str, object]
) -> ShapeOptions:
    """Validate and convert a leaf shape's raw options."""
    allowed = recognized_keys(kind)
    opts = _normalize_keys(owner, raw, allowed)
    fields = _common(owner, opts, allowed)

    if "size" in opts:
        size = opts["size"]
        if isinstance(size, (list, tuple)):
            if len(size) != 2:
                raise InvalidOptionError(
                    owner, "size", allowed, found=size,
                    reason="expected a number or a [width, height] pair",
                )
            fields["width"] = _number(owner, "size", size[0], allowed, minimum=0)
            fields["height"] = _number(owner, "size", size[1], allowed, minimum=0)
        else:
            fields["width"] = fields["height"] = _number(
                owner, "size", size, allowed, minimum=0
            )
    # Explicit width/height win over size
    for key in ("width", "height"):
        if key in opts:
            fields[key] = _number(owner, key, opts[key], allowed, minimum=0)
    if "text" in opts:
        fields["text"] = _string(owner, "text", opts["text"], allowed)

    return ShapeOptions(**fields)


def parse_container_options(
    kind: ContainerKind, owner: str, raw: Mapping[str, object]
) -> ContainerOptions:
    """Validate and convert a container's raw options."""
    allowed = recognized_keys(kind)
    opts = _normalize_keys(owner, raw, allowed)
    fields = _common(owner, opts, allowed)

    for key in ("gap", "padding"):
        if key in opts:
            fields[key] = _number(owner, key, opts[key], allowed, minimum=0)
    if "align" in opts:
        align = _string(owner, "align", opts["align"], allowed)
        if align not in ALIGNMENTS:
            raise InvalidOptionError(
                owner, "align", allowed, found=align,
                reason=f"expected one of {', '.join(ALIGNMENTS)}",
            )
        fields["align"] = align
    for key in ("columns", "rows"):
        if key in opts:
            value = opts[key]
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidOptionError(
                    owner, key, allowed, found=value,
                    reason="expected a positive integer",
                )
            fields[key] = value

    return ContainerOptions(**fields)
