"""CLI for boxflow."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from boxflow import __version__
from boxflow.errors import DiagramError
from boxflow.layout.constants import GAP, PADDING
from boxflow.parser import load_document
from boxflow.pipeline import lint_document, run_pipeline
from boxflow.render import render_svg
from boxflow.themes import THEMES


def _fail(error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    raise SystemExit(1)


def _report(diagnostics: list) -> None:
    if not diagnostics:
        click.echo("No diagnostics.")
        return
    click.echo(f"{len(diagnostics)} diagnostics:")
    for diagnostic in diagnostics:
        click.echo(f"  - {diagnostic}")


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline progress to stderr")
def cli(verbose: bool) -> None:
    """boxflow: Lay out, route and lint declarative box diagrams."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output SVG file path. Defaults to <input>.svg")
@click.option("--theme", type=click.Choice(list(THEMES.keys())), default="light",
              help="Visual theme (default: light)")
@click.option("--gap", type=float, default=GAP,
              help=f"Default gap between siblings (default: {GAP:g})")
@click.option("--padding", type=float, default=PADDING,
              help=f"Default container padding (default: {PADDING:g})")
@click.option("--lint", "run_lint", is_flag=True,
              help="Also run the validator; exit 1 if it reports anything")
def render(
    input_file: Path,
    output: Path | None,
    theme: str,
    gap: float,
    padding: float,
    run_lint: bool,
) -> None:
    """Render a JSON diagram description to SVG."""
    theme_obj = THEMES[theme]
    try:
        document = load_document(input_file)
        if run_lint:
            scene, diagnostics = lint_document(
                document, theme_obj.lookup, gap=gap, padding=padding
            )
        else:
            scene = run_pipeline(
                document, theme_obj.lookup, gap=gap, padding=padding
            ).scene
            diagnostics = []
    except (DiagramError, ValueError) as e:
        _fail(e)

    svg = render_svg(scene, theme_obj)
    if output is None:
        output = input_file.with_suffix(".svg")
    output.write_text(svg)
    click.echo(f"Rendered {len(scene.shapes)} shapes, "
               f"{len(scene.paths)} connections, "
               f"{len(scene.labels)} labels -> {output}")

    if run_lint:
        _report(diagnostics)
        if diagnostics:
            raise SystemExit(1)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("--gap", type=float, default=GAP,
              help=f"Default gap between siblings (default: {GAP:g})")
@click.option("--padding", type=float, default=PADDING,
              help=f"Default container padding (default: {PADDING:g})")
@click.option("--json", "as_json", is_flag=True, help="Print diagnostics as JSON")
def lint(input_file: Path, gap: float, padding: float, as_json: bool) -> None:
    """Check a diagram for overlap, containment, label, crossing and alignment defects."""
    try:
        document = load_document(input_file)
        _scene, diagnostics = lint_document(document, gap=gap, padding=padding)
    except (DiagramError, ValueError) as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([d.to_dict() for d in diagnostics], indent=2))
    else:
        _report(diagnostics)
    if diagnostics:
        raise SystemExit(1)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def info(input_file: Path) -> None:
    """Show information about a diagram description."""
    try:
        document = load_document(input_file)
        result = run_pipeline(document)
    except (DiagramError, ValueError) as e:
        _fail(e)

    nodes = result.index.nodes()
    containers = sum(1 for n in nodes if n.is_container)
    scene = result.scene
    click.echo(f"Nodes: {len(nodes)} ({containers} containers, "
               f"{len(nodes) - containers} shapes)")
    click.echo(f"Connections: {len(document.connections)}")
    click.echo(f"Constraints: {len(document.constraints)}")
    click.echo(f"Labels: {len(scene.labels)}")
    click.echo(f"Canvas: {scene.width:g} x {scene.height:g}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
