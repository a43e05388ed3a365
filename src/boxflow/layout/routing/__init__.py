"""Connection routing subpackage.

Public API:
- route_connections: Main routing dispatcher
- RoutedPath: Routed path dataclass
- ConnectionOptions / parse_connection_options: Typed connection options
- anchor_point / nearest_sides: Anchor resolution helpers
"""

from boxflow.layout.routing.anchors import ANCHORS, anchor_point, nearest_sides
from boxflow.layout.routing.common import (
    ConnectionOptions,
    RoutedPath,
    flatten_path,
    parse_connection_options,
)
from boxflow.layout.routing.core import route_connections

__all__ = [
    "ANCHORS",
    "ConnectionOptions",
    "RoutedPath",
    "anchor_point",
    "flatten_path",
    "nearest_sides",
    "parse_connection_options",
    "route_connections",
]
