"""Shared trunks for fan-out and fan-in orthogonal routes.

Z-shaped routes that leave the same side of the same node (fan-out), or
arrive at the same side of the same node (fan-in), bend at one shared
coordinate so their middle segments run along a single trunk line.
"""

from __future__ import annotations

import logging
import statistics
from collections import defaultdict
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrunkCandidate:
    """A Z-route whose bend coordinate may be shared.

    `axis` is ``"x"`` when the middle segment is vertical (the route leaves
    and enters horizontally) and ``"y"`` otherwise. `midpoint` is the
    coordinate halfway across the gap between the two anchors. `span` is
    the (low, high) range between the two anchors on the trunk axis; a
    shared coordinate outside it would bend past one of the boxes.
    """

    position: int
    axis: str
    midpoint: float
    source_key: tuple[int, str]
    target_key: tuple[int, str]
    trunk: float | None = None
    span: tuple[float, float] | None = None

    def accepts(self, coord: float) -> bool:
        if self.span is None:
            return True
        low, high = self.span
        return low < coord < high


def _group_coordinate(members: list[TrunkCandidate]) -> float:
    for member in members:
        if member.trunk is not None:
            return member.trunk
    return statistics.median(m.midpoint for m in members)


def assign_trunks(candidates: list[TrunkCandidate]) -> dict[int, float]:
    """Map candidate position -> bend coordinate.

    Fan-out groups (same source node and side) are formed first; the
    remaining routes then form fan-in groups by target. A group's
    coordinate is the median of its members' gap midpoints unless a member
    sets an explicit trunk, in which case the first such member in
    declaration order wins. A member whose own span does not contain the
    group coordinate keeps its own gap midpoint (or its own trunk). Ungrouped
    routes only appear in the result when they set a trunk themselves.
    """
    ordered = sorted(candidates, key=lambda c: c.position)
    groups: list[list[TrunkCandidate]] = []
    grouped: set[int] = set()

    by_source: dict[tuple, list[TrunkCandidate]] = defaultdict(list)
    for cand in ordered:
        by_source[(cand.axis, cand.source_key)].append(cand)
    for members in by_source.values():
        if len(members) >= 2:
            groups.append(members)
            grouped.update(m.position for m in members)

    by_target: dict[tuple, list[TrunkCandidate]] = defaultdict(list)
    for cand in ordered:
        if cand.position not in grouped:
            by_target[(cand.axis, cand.target_key)].append(cand)
    for members in by_target.values():
        if len(members) >= 2:
            groups.append(members)
            grouped.update(m.position for m in members)

    coords: dict[int, float] = {}
    for members in groups:
        coord = _group_coordinate(members)
        for member in members:
            if member.accepts(coord):
                coords[member.position] = coord
            elif member.trunk is not None:
                coords[member.position] = member.trunk
        logger.debug(
            "Trunk group of %d routes on %s = %.1f", len(members), members[0].axis, coord
        )

    for cand in ordered:
        if cand.position not in grouped and cand.trunk is not None:
            coords[cand.position] = cand.trunk

    return coords
