"""Tests for the tree builder and layout engine."""

import random

import pytest

from boxflow.errors import InvalidOptionError, LayoutError
from boxflow.layout.engine import compute_layout, grid_shape, text_size
from boxflow.layout.tree import Box, TreeIndex, build_tree
from boxflow.parser.model import ContainerDecl, ContainerKind, ShapeDecl, ShapeKind


def _rect(node_id=None, **options):
    return ShapeDecl(kind=ShapeKind.RECT, id=node_id, options=options)


def _box(kind, *children, node_id=None, **options):
    return ContainerDecl(kind=kind, id=node_id, options=options, children=children)


def _layout(decl, **kwargs):
    root = build_tree(decl)
    compute_layout(root, **kwargs)
    return root, TreeIndex(root)


def _get(index, node_id):
    return index.find(node_id)[0]


def test_row_of_two_squares():
    """Two 50px squares in a row with the default gap."""
    root, index = _layout(
        _box(ContainerKind.ROW, _rect("a", size=50), _rect("b", size=50))
    )
    assert root.box == Box(0, 0, 110, 50)
    assert _get(index, "a").box.x == 0
    assert _get(index, "b").box.x == 60


def test_column_with_padding():
    root, index = _layout(
        _box(ContainerKind.COLUMN, _rect("a"), _rect("b"), padding=5)
    )
    # Default rect is 80x30
    assert root.box.width == 90
    assert root.box.height == 5 + 30 + 10 + 30 + 5
    assert _get(index, "a").box == Box(5, 5, 80, 30)
    assert _get(index, "b").box == Box(5, 45, 80, 30)


def test_row_center_alignment():
    _, index = _layout(
        _box(
            ContainerKind.ROW,
            _rect("tall", size=50),
            _rect("short", width=30, height=20),
            align="center",
        )
    )
    assert _get(index, "short").box.y == 15


def test_column_end_alignment():
    _, index = _layout(
        _box(
            ContainerKind.COLUMN,
            _rect("wide", width=100, height=10),
            _rect("narrow", width=40, height=10),
            align="end",
        )
    )
    assert _get(index, "narrow").box.x == 60


def test_stack_overlays_children():
    root, index = _layout(
        _box(
            ContainerKind.STACK,
            _rect("back", size=100),
            _rect("front", size=40),
            align="center",
            padding=10,
        )
    )
    assert root.box == Box(0, 0, 120, 120)
    assert _get(index, "back").box == Box(10, 10, 100, 100)
    assert _get(index, "front").box == Box(40, 40, 40, 40)


def test_stack_defaults_to_start():
    _, index = _layout(
        _box(ContainerKind.STACK, _rect("back", size=100), _rect("front", size=40))
    )
    assert _get(index, "front").box.x == 0
    assert _get(index, "front").box.y == 0


def test_grid_square_factorization():
    """Five children fill a 2x3 grid row-major."""
    children = [_rect(f"c{i}", size=50) for i in range(5)]
    root, index = _layout(_box(ContainerKind.GRID, *children))
    assert grid_shape(root) == (2, 3)
    assert root.box.width == 3 * 50 + 2 * 10
    assert root.box.height == 2 * 50 + 10
    assert _get(index, "c2").box.x == 120
    assert _get(index, "c3").box.x == 0
    assert _get(index, "c3").box.y == 60


def test_grid_columns_only():
    children = [_rect(f"c{i}", size=10) for i in range(5)]
    root, _ = _layout(_box(ContainerKind.GRID, *children, columns=2))
    assert grid_shape(root) == (3, 2)


def test_grid_too_small_is_an_error():
    children = [_rect(f"c{i}") for i in range(5)]
    with pytest.raises(LayoutError, match="2 x 2"):
        _layout(_box(ContainerKind.GRID, *children, node_id="g", rows=2, columns=2))


def test_grid_cells_align_children():
    _, index = _layout(
        _box(
            ContainerKind.GRID,
            _rect("big", size=60),
            _rect("small", size=20),
            columns=2,
            align="center",
            gap=0,
        )
    )
    assert _get(index, "small").box == Box(80, 20, 20, 20)


def test_group_arranges_like_column():
    _, index = _layout(
        _box(ContainerKind.GROUP, _rect("a", size=20), _rect("b", size=20), gap=5)
    )
    assert _get(index, "b").box.y == 25
    assert _get(index, "b").box.x == 0


def test_offset_moves_subtree_not_siblings():
    root, index = _layout(
        _box(
            ContainerKind.ROW,
            _rect("a", size=50),
            _box(ContainerKind.ROW, _rect("c", size=20), node_id="inner", dx=15, dy=5),
            _rect("d", size=50),
        )
    )
    assert _get(index, "a").box.x == 0
    assert _get(index, "inner").box.x == 75
    assert _get(index, "c").box == Box(75, 5, 20, 20)
    # The sibling after the offset node keeps its normal position
    assert _get(index, "d").box.x == 90
    assert root.box.width == 50 + 20 + 50 + 20


def test_empty_container_measures_padding():
    root, _ = _layout(_box(ContainerKind.ROW, padding=7))
    assert root.box.width == 14
    assert root.box.height == 14


def test_default_shape_sizes():
    _, index = _layout(
        _box(
            ContainerKind.ROW,
            ShapeDecl(ShapeKind.CIRCLE, "c"),
            ShapeDecl(ShapeKind.ELLIPSE, "e"),
            ShapeDecl(ShapeKind.LINE, "l"),
        )
    )
    assert (_get(index, "c").box.width, _get(index, "c").box.height) == (50, 50)
    assert (_get(index, "e").box.width, _get(index, "e").box.height) == (80, 45)
    assert (_get(index, "l").box.width, _get(index, "l").box.height) == (80, 4)


def test_text_shape_uses_text_metrics():
    _, index = _layout(
        _box(ContainerKind.ROW, ShapeDecl(ShapeKind.TEXT, "t", {"text": "abcd", "font_size": 10}))
    )
    assert text_size("abcd", 10) == (20.0, 12.0)
    assert _get(index, "t").box.width == 20
    assert _get(index, "t").box.height == pytest.approx(12)


def test_size_pair_and_explicit_override():
    _, index = _layout(
        _box(ContainerKind.ROW, _rect("a", size=[40, 20], height=25))
    )
    assert _get(index, "a").box == Box(0, 0, 40, 25)


def test_unknown_option_names_node_and_key():
    with pytest.raises(InvalidOptionError) as exc:
        build_tree(_box(ContainerKind.ROW, _rect("a", colour="red")))
    err = exc.value
    assert err.key == "colour"
    assert "rect 'a'" in str(err)
    assert "fill" in err.expected


def test_grid_keys_rejected_on_row():
    with pytest.raises(InvalidOptionError, match="columns"):
        build_tree(_box(ContainerKind.ROW, columns=2))


def test_bad_alignment_rejected():
    with pytest.raises(InvalidOptionError, match="align"):
        build_tree(_box(ContainerKind.COLUMN, align="middle"))


def test_ill_typed_option_rejected():
    with pytest.raises(InvalidOptionError, match="expected a number"):
        build_tree(_box(ContainerKind.ROW, _rect("a", width="wide")))


def test_rotation_is_a_drawing_option():
    root = build_tree(_box(ContainerKind.ROW, _rect("a", size=40, rotation=30)))
    compute_layout(root)
    (a,) = root.children
    assert a.options.rotation == 30
    assert a.box == Box(0, 0, 40, 40)
    with pytest.raises(InvalidOptionError, match="rotation"):
        build_tree(_box(ContainerKind.ROW, _rect("a", rotation="half")))


def test_hyphenated_keys_accepted():
    root = build_tree(_box(ContainerKind.ROW, **{"stroke-width": 2}))
    assert root.options.stroke_width == 2


def test_anonymous_nodes_get_positional_names():
    root = build_tree(_box(ContainerKind.ROW, _rect("a"), _box(ContainerKind.COLUMN, _rect())))
    assert root.name == "<root>"
    inner = root.children[1]
    assert inner.name == "<child #2 of <root>>"
    assert inner.children[0].name == "<child #1 of <child #2 of <root>>>"


def test_tree_index_relations():
    root, index = _layout(
        _box(ContainerKind.ROW, _rect("a"), _box(ContainerKind.COLUMN, _rect("c"), node_id="b"))
    )
    a, b, c = _get(index, "a"), _get(index, "b"), _get(index, "c")
    assert index.parent(c) is b
    assert index.parent(root) is None
    assert set(n.name for n in index.ancestors(c)) == {"b", "<root>"}
    assert index.related(b, c)
    assert index.related(c, root)
    assert not index.related(a, c)
    assert len(index) == 4


def test_resolve_suggests_close_ids():
    _, index = _layout(_box(ContainerKind.ROW, _rect("ingest")))
    with pytest.raises(LayoutError, match="did you mean: ingest"):
        index.resolve("ingst", LayoutError, "Test")


def test_resolve_rejects_ambiguous_ids():
    _, index = _layout(_box(ContainerKind.ROW, _rect("a"), _rect("a")))
    with pytest.raises(LayoutError, match="ambiguous"):
        index.resolve("a", LayoutError, "Test")


# ---------------------------------------------------------------------------
# Properties over random trees
# ---------------------------------------------------------------------------


def _random_tree(rng, depth=0):
    if depth >= 3 or rng.random() < 0.3:
        return _rect(width=rng.randint(1, 120), height=rng.randint(1, 80))
    kind = rng.choice([ContainerKind.ROW, ContainerKind.COLUMN])
    children = [_random_tree(rng, depth + 1) for _ in range(rng.randint(0, 4))]
    return _box(kind, *children, gap=rng.randint(0, 30), padding=rng.randint(0, 15))


def _random_root(seed):
    rng = random.Random(seed)
    return _box(
        ContainerKind.ROW, *[_random_tree(rng) for _ in range(3)], gap=12, padding=0
    )


@pytest.mark.parametrize("seed", range(25))
def test_sequential_sizing_identity(seed):
    """main = sum(children) + (n-1)*gap + 2*padding, cross = max + 2*padding."""
    root, _ = _layout(_random_root(seed))
    for node in root.walk():
        if not node.is_container:
            continue
        gap = node.options.gap
        pad = node.options.padding
        n = len(node.children)
        if node.kind is ContainerKind.ROW:
            main = [c.box.width for c in node.children]
            cross = [c.box.height for c in node.children]
            assert node.box.width == pytest.approx(sum(main) + max(n - 1, 0) * gap + 2 * pad)
            assert node.box.height == pytest.approx(max(cross, default=0) + 2 * pad)
            for prev, nxt in zip(node.children, node.children[1:]):
                assert nxt.box.x == pytest.approx(prev.box.right + gap)
        else:
            main = [c.box.height for c in node.children]
            cross = [c.box.width for c in node.children]
            assert node.box.height == pytest.approx(sum(main) + max(n - 1, 0) * gap + 2 * pad)
            assert node.box.width == pytest.approx(max(cross, default=0) + 2 * pad)
            for prev, nxt in zip(node.children, node.children[1:]):
                assert nxt.box.y == pytest.approx(prev.box.bottom + gap)


@pytest.mark.parametrize("seed", range(25))
def test_children_inside_padded_parent(seed):
    root, _ = _layout(_random_root(seed))
    for node in root.walk():
        if not node.is_container:
            continue
        content = node.box.inset(node.options.padding)
        for child in node.children:
            assert content.contains(child.box, 1e-9)
