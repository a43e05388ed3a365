"""boxflow: declarative diagram layout, routing and linting."""

__version__ = "0.1.0"

from boxflow.errors import (  # noqa: E402
    ConstraintError,
    DiagramError,
    InvalidOptionError,
    LayoutError,
    RoutingError,
)
from boxflow.pipeline import lint_document, render_scene  # noqa: E402

__all__ = [
    "ConstraintError",
    "DiagramError",
    "InvalidOptionError",
    "LayoutError",
    "RoutingError",
    "__version__",
    "lint_document",
    "render_scene",
]
