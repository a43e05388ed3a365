"""Error taxonomy for the layout pipeline.

Every phase fails fast: the first error aborts the render and no scene is
produced. Errors subclass ValueError so callers that only care about "bad
input" can catch that.
"""

from __future__ import annotations

from collections.abc import Iterable


class DiagramError(ValueError):
    """Base class for all fatal diagram errors."""

    def __init__(self, message: str, ids: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.ids: tuple[str, ...] = tuple(ids)


class LayoutError(DiagramError):
    """Unresolved reference or invalid configuration during tree build/layout."""


class InvalidOptionError(LayoutError):
    """A node carries an option outside the recognized set for its kind."""

    def __init__(
        self,
        owner: str,
        key: str,
        expected: Iterable[str],
        found: object = None,
        reason: str = "",
    ) -> None:
        self.owner = owner
        self.key = key
        self.expected = tuple(sorted(expected))
        if reason:
            message = f"Invalid option '{key}' on {owner}: {reason}"
        else:
            message = (
                f"Unrecognized option '{key}' on {owner} "
                f"(expected one of: {', '.join(self.expected)})"
            )
        if found is not None and reason:
            message += f" (found {found!r})"
        super().__init__(message, ids=(owner,))


class ConstraintError(DiagramError):
    """Unknown target node or unrecognized edge name in a constraint."""


class RoutingError(DiagramError):
    """Unknown anchor, unresolved endpoint or invalid connection option."""
