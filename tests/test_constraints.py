"""Tests for the directional constraint applicator."""

import pytest

from boxflow import render_scene
from boxflow.errors import ConstraintError
from boxflow.layout.constraints import apply_constraints, normalize_edge
from boxflow.layout.engine import compute_layout
from boxflow.layout.tree import Box, TreeIndex, build_tree
from boxflow.parser.model import (
    ConstraintDecl,
    ContainerDecl,
    ContainerKind,
    ContainsDecl,
    Document,
    ShapeDecl,
    ShapeKind,
)


def _make_tree():
    """row [a (50x50), col b [c (20x20)]]."""
    return ContainerDecl(
        ContainerKind.ROW,
        children=(
            ShapeDecl(ShapeKind.RECT, "a", {"size": 50}),
            ContainerDecl(
                ContainerKind.COLUMN,
                "b",
                children=(ShapeDecl(ShapeKind.RECT, "c", {"size": 20}),),
            ),
        ),
    )


def _setup(decl=None):
    root = build_tree(decl or _make_tree())
    compute_layout(root)
    return TreeIndex(root)


def _box(index, node_id):
    return index.find(node_id)[0].box


def _snapshot(index):
    return {n.uid: n.box for n in index.nodes()}


def test_edge_names_and_aliases():
    assert normalize_edge("left") == "left"
    assert normalize_edge("centerX") == "center_x"
    assert normalize_edge("center-y") == "center_y"
    assert normalize_edge("x") == "left"
    assert normalize_edge("y") == "top"
    assert normalize_edge("middle") is None


def test_position_edge_translates_subtree():
    index = _setup()
    apply_constraints(
        index, [ConstraintDecl("b", "left", source="a", source_edge="right", offset=20)]
    )
    assert _box(index, "b").x == 70
    assert _box(index, "c").x == 70
    assert _box(index, "a").x == 0


def test_value_constraint():
    index = _setup()
    apply_constraints(index, [ConstraintDecl("c", "bottom", value=100)])
    assert _box(index, "c") == Box(60, 80, 20, 20)
    # The parent does not follow its child
    assert _box(index, "b").y == 0


def test_last_writer_wins():
    index = _setup()
    apply_constraints(
        index,
        [
            ConstraintDecl("a", "left", value=100),
            ConstraintDecl("a", "left", value=30),
        ],
    )
    assert _box(index, "a").x == 30


def test_source_read_at_processing_time():
    """A later move of the source does not drag earlier targets along."""
    index = _setup()
    apply_constraints(
        index,
        [
            ConstraintDecl("b", "left", source="a", source_edge="right", offset=10),
            ConstraintDecl("a", "left", value=200),
        ],
    )
    assert _box(index, "b").x == 60
    assert _box(index, "a").x == 200


def test_constraints_are_idempotent():
    index = _setup()
    constraints = [
        ConstraintDecl("b", "left", source="a", source_edge="right", offset=20),
        ConstraintDecl("b", "top", source="a", source_edge="bottom", offset=5),
    ]
    apply_constraints(index, constraints)
    once = _snapshot(index)
    apply_constraints(index, constraints)
    assert _snapshot(index) == once


def test_center_alias():
    index = _setup()
    apply_constraints(
        index, [ConstraintDecl("b", "centerX", source="a", source_edge="center_x")]
    )
    assert _box(index, "b").center_x == 25
    assert _box(index, "c").x == 15


def test_size_edge_resizes_only_target():
    index = _setup()
    apply_constraints(index, [ConstraintDecl("b", "width", value=300)])
    assert _box(index, "b") == Box(60, 0, 300, 20)
    assert _box(index, "c") == Box(60, 0, 20, 20)
    assert _box(index, "a") == Box(0, 0, 50, 50)


def test_size_edge_from_source():
    index = _setup()
    apply_constraints(
        index, [ConstraintDecl("c", "height", source="a", source_edge="height")]
    )
    assert _box(index, "c").height == 50


def test_negative_size_rejected():
    index = _setup()
    with pytest.raises(ConstraintError, match="negative width"):
        apply_constraints(index, [ConstraintDecl("a", "width", value=-5)])


def test_negative_constant_size_applies_nothing():
    index = _setup()
    before = _snapshot(index)
    with pytest.raises(ConstraintError, match="negative height"):
        apply_constraints(
            index,
            [
                ConstraintDecl("a", "left", value=500),
                ConstraintDecl("c", "height", value=-1),
            ],
        )
    assert _snapshot(index) == before


def test_unknown_node_applies_nothing():
    index = _setup()
    before = _snapshot(index)
    with pytest.raises(ConstraintError) as exc:
        apply_constraints(
            index,
            [
                ConstraintDecl("a", "left", value=500),
                ConstraintDecl("ghost", "left", value=0),
            ],
        )
    assert exc.value.ids == ("ghost",)
    assert _snapshot(index) == before


def test_unknown_edge_rejected():
    index = _setup()
    with pytest.raises(ConstraintError, match="unknown edge 'middle'"):
        apply_constraints(index, [ConstraintDecl("a", "middle", value=0)])


def test_unknown_source_edge_rejected():
    index = _setup()
    with pytest.raises(ConstraintError, match="unknown edge 'rite'"):
        apply_constraints(
            index, [ConstraintDecl("b", "left", source="a", source_edge="rite")]
        )


def test_contains_wraps_elements():
    decl = ContainerDecl(
        ContainerKind.ROW,
        children=(
            ContainerDecl(ContainerKind.GROUP, "frame"),
            ShapeDecl(ShapeKind.RECT, "a", {"size": 50}),
            ShapeDecl(ShapeKind.RECT, "b", {"size": 50}),
        ),
    )
    index = _setup(decl)
    apply_constraints(index, [ContainsDecl("frame", ("a", "b"), padding=8)])
    # a spans 10..60, b spans 70..120
    assert _box(index, "frame") == Box(2, -8, 126, 66)


def test_contains_moves_container_children():
    decl = ContainerDecl(
        ContainerKind.COLUMN,
        children=(
            ShapeDecl(ShapeKind.RECT, "target", {"size": 50}),
            ContainerDecl(
                ContainerKind.ROW,
                "frame",
                {"padding": 5},
                children=(ShapeDecl(ShapeKind.TEXT, "caption", {"text": "x"}),),
            ),
        ),
    )
    index = _setup(decl)
    before = _box(index, "caption")
    frame_before = _box(index, "frame")
    apply_constraints(index, [ContainsDecl("frame", ("target",))])
    after = _box(index, "caption")
    assert after.x - before.x == 0 - frame_before.x
    assert after.y - before.y == 0 - frame_before.y


def test_contains_rejects_own_descendant():
    index = _setup()
    with pytest.raises(ConstraintError, match="already inside"):
        apply_constraints(index, [ContainsDecl("b", ("c",))])


def test_render_fails_on_unknown_constraint_node():
    document = Document(
        root=_make_tree(),
        constraints=(
            ConstraintDecl("ghost", "left", source="a", source_edge="right", offset=20),
        ),
    )
    with pytest.raises(ConstraintError) as exc:
        render_scene(document)
    assert "ghost" in str(exc.value)
