"""Loader for JSON structural trees.

The engine consumes an already-parsed tree. This module turns the JSON form
of that tree (what an agent or an upstream parser emits) into the frozen
model in `boxflow.parser.model`. Only structure is checked here; option
keys and values are validated later by the tree builder.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path

from boxflow.parser.model import (
    ConnectionDecl,
    ConnectionDirection,
    Constraint,
    ConstraintDecl,
    ContainerDecl,
    ContainerKind,
    ContainsDecl,
    Decl,
    Document,
    Endpoint,
    ShapeDecl,
    ShapeKind,
)

_SHAPE_KINDS = {k.value: k for k in ShapeKind}
_CONTAINER_KINDS = {k.value: k for k in ContainerKind}
# Accepted spellings for container kinds besides the canonical ones
_CONTAINER_ALIASES = {
    "column": ContainerKind.COLUMN,
    "horizontal": ContainerKind.ROW,
    "vertical": ContainerKind.COLUMN,
}
_DIRECTIONS = {d.value: d for d in ConnectionDirection}


def load_document(path: str | Path) -> Document:
    """Read a JSON file and parse it into a Document."""
    text = Path(path).read_text()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"{path}: not valid JSON ({e})") from e
    return parse_document(data)


def parse_document(data: object) -> Document:
    """Parse a JSON-like mapping into a Document.

    The root is either given explicitly under ``"root"`` or implied by a
    top-level ``"children"`` list, in which case the children are wrapped
    in an anonymous column.
    """
    if not isinstance(data, Mapping):
        raise ValueError("Diagram document must be a JSON object")

    if "root" in data:
        root = _parse_decl(data["root"], "root")
        if not isinstance(root, ContainerDecl):
            root = ContainerDecl(kind=ContainerKind.COLUMN, children=(root,))
    elif "children" in data:
        children = _parse_children(data["children"], "document")
        root = ContainerDecl(kind=ContainerKind.COLUMN, children=children)
    else:
        raise ValueError("Diagram document needs a 'root' object or a 'children' list")

    connections = tuple(
        _parse_connection(item, i)
        for i, item in enumerate(_as_list(data.get("connections", []), "connections"))
    )
    constraints = tuple(
        _parse_constraint(item, i)
        for i, item in enumerate(_as_list(data.get("constraints", []), "constraints"))
    )
    return Document(root=root, connections=connections, constraints=constraints)


def _as_list(value: object, where: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"'{where}' must be a list, got {type(value).__name__}")
    return value


def _options(item: Mapping, where: str) -> dict[str, object]:
    opts = item.get("options", {})
    if not isinstance(opts, Mapping):
        raise ValueError(f"'options' of {where} must be an object")
    return dict(opts)


def _parse_children(value: object, where: str) -> tuple[Decl, ...]:
    return tuple(
        _parse_decl(child, f"child #{i + 1} of {where}")
        for i, child in enumerate(_as_list(value, f"children of {where}"))
    )


def _parse_decl(item: object, where: str) -> Decl:
    if not isinstance(item, Mapping):
        raise ValueError(f"{where} must be an object")
    kind_name = item.get("kind")
    if not isinstance(kind_name, str):
        raise ValueError(f"{where} is missing a 'kind'")
    node_id = item.get("id")
    if node_id is not None and not isinstance(node_id, str):
        raise ValueError(f"'id' of {where} must be a string")
    label = repr(node_id) if node_id else where

    if kind_name in _SHAPE_KINDS:
        if "children" in item:
            raise ValueError(f"Shape {label} ({kind_name}) cannot have children")
        return ShapeDecl(
            kind=_SHAPE_KINDS[kind_name], id=node_id, options=_options(item, label)
        )

    kind = _CONTAINER_KINDS.get(kind_name) or _CONTAINER_ALIASES.get(kind_name)
    if kind is None:
        known = sorted([*_SHAPE_KINDS, *_CONTAINER_KINDS, *_CONTAINER_ALIASES])
        raise ValueError(
            f"Unknown kind '{kind_name}' for {label} (expected one of: {', '.join(known)})"
        )
    return ContainerDecl(
        kind=kind,
        id=node_id,
        options=_options(item, label),
        children=_parse_children(item.get("children", []), label),
    )


def _parse_connection(item: object, index: int) -> ConnectionDecl:
    where = f"connection #{index + 1}"
    if not isinstance(item, Mapping):
        raise ValueError(f"{where} must be an object")
    src = item.get("from")
    tgt = item.get("to")
    if not isinstance(src, str) or not isinstance(tgt, str):
        raise ValueError(f"{where} needs string 'from' and 'to' references")
    direction_name = item.get("direction", "forward")
    if direction_name not in _DIRECTIONS:
        raise ValueError(
            f"{where}: unknown direction '{direction_name}' "
            f"(expected one of: {', '.join(_DIRECTIONS)})"
        )
    return ConnectionDecl(
        source=Endpoint.parse(src),
        target=Endpoint.parse(tgt),
        direction=_DIRECTIONS[direction_name],
        options=_options(item, where),
    )


def _number(item: Mapping, key: str, where: str, default: float = 0.0) -> float:
    value = item.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}: '{key}' must be a number, got {value!r}")
    return float(value)


def _split_ref(ref: object, where: str) -> tuple[str, str]:
    if not isinstance(ref, str) or "." not in ref:
        raise ValueError(f"{where}: expected a 'node.edge' reference, got {ref!r}")
    node_id, _, edge = ref.partition(".")
    return node_id, edge


def _parse_constraint(item: object, index: int) -> Constraint:
    where = f"constraint #{index + 1}"
    if not isinstance(item, Mapping):
        raise ValueError(f"{where} must be an object")

    if "contains" in item:
        elements = item.get("elements", [])
        if not isinstance(item["contains"], str) or not all(
            isinstance(e, str) for e in _as_list(elements, f"elements of {where}")
        ):
            raise ValueError(f"{where}: 'contains' and 'elements' must be node ids")
        return ContainsDecl(
            container=item["contains"],
            elements=tuple(elements),
            padding=_number(item, "padding", where),
        )

    target, edge = _split_ref(item.get("target"), where)
    if "source" in item:
        source, source_edge = _split_ref(item["source"], where)
        return ConstraintDecl(
            target=target,
            edge=edge,
            source=source,
            source_edge=source_edge,
            offset=_number(item, "offset", where),
        )
    if "value" in item:
        return ConstraintDecl(target=target, edge=edge, value=_number(item, "value", where))
    raise ValueError(f"{where} needs either a 'source' reference or a 'value'")
