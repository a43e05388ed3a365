"""Tests for SVG rendering."""

import xml.etree.ElementTree as ET

from boxflow import render_scene
from boxflow.parser import parse_document
from boxflow.render import render_svg
from boxflow.themes import DARK_THEME, LIGHT_THEME, THEMES

SVG_NS = "{http://www.w3.org/2000/svg}"


def _make_document(direction="forward", routing="orthogonal"):
    return parse_document(
        {
            "root": {
                "kind": "row",
                "options": {"gap": 40},
                "children": [
                    {"kind": "rect", "id": "a", "options": {"label": "A"}},
                    {"kind": "circle", "id": "b"},
                    {"kind": "ellipse", "id": "c"},
                    {"kind": "line", "id": "d"},
                    {"kind": "text", "id": "e", "options": {"text": "hello"}},
                ],
            },
            "connections": [
                {
                    "from": "a",
                    "to": "b",
                    "direction": direction,
                    "options": {"routing": routing},
                }
            ],
        }
    )


def _render(document, theme=LIGHT_THEME):
    svg = render_svg(render_scene(document, theme.lookup), theme)
    return svg, ET.fromstring(svg)


def test_render_produces_valid_svg():
    svg, root = _render(_make_document())
    assert root.tag == f"{SVG_NS}svg"
    assert svg.endswith("\n")


def test_render_draws_every_shape_kind():
    _, root = _render(_make_document())
    # Background plus the rect
    assert len(root.findall(f".//{SVG_NS}rect")) == 2
    assert len(root.findall(f".//{SVG_NS}circle")) == 1
    assert len(root.findall(f".//{SVG_NS}ellipse")) == 1
    texts = ["".join(t.itertext()) for t in root.iter(f"{SVG_NS}text")]
    assert "hello" in texts
    assert "A" in texts


def test_arrowheads_follow_direction():
    counts = {}
    for direction in ("none", "forward", "both"):
        _, root = _render(_make_document(direction=direction))
        heads = [p for p in root.iter(f"{SVG_NS}path") if p.get("stroke") == "none"]
        counts[direction] = len(heads)
    assert counts == {"none": 0, "forward": 1, "both": 2}


def test_curved_paths_use_quadratic_segments():
    _, root = _render(_make_document(routing="curved", direction="none"))
    curves = [p for p in root.iter(f"{SVG_NS}path") if "Q" in p.get("d", "")]
    assert len(curves) == 1


def test_theme_colours_applied():
    svg, _ = _render(_make_document(), DARK_THEME)
    assert DARK_THEME.background_color in svg
    assert DARK_THEME.palette["background-1"] in svg
    assert "background-1" not in svg


def test_symbolic_colours_resolved_at_render_time():
    """A scene built without a lookup still renders concrete colours."""
    svg = render_svg(render_scene(_make_document()), LIGHT_THEME)
    assert "foreground-1" not in svg
    assert LIGHT_THEME.palette["foreground-1"] in svg


def test_theme_registry():
    assert set(THEMES) == {"light", "dark"}
    assert LIGHT_THEME.lookup("accent-1") == "#2196f3"
    assert LIGHT_THEME.lookup("nope") is None
    assert LIGHT_THEME.color("nope") == "nope"


def test_rotation_turns_shape_about_its_center():
    document = parse_document(
        {"children": [{"kind": "rect", "id": "a", "options": {"size": 40, "rotation": 45}}]}
    )
    scene = render_scene(document)
    assert scene.shapes[0].style.rotation == 45
    # Layout geometry is not rotated
    assert scene.shapes[0].box.width == 40
    _, root = _render(document)
    rects = root.findall(f".//{SVG_NS}rect")
    assert rects[-1].get("transform") == "rotate(45 20 20)"


def test_unrotated_shapes_have_no_transform():
    _, root = _render(_make_document())
    assert all(r.get("transform") is None for r in root.findall(f".//{SVG_NS}rect"))
