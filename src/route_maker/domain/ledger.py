# route_maker/domain/ledger.py
from __future__ import annotations

import math
from dataclasses import dataclass

from route_maker.app.protocols import GeodesicDistance
from route_maker.domain.entities.geography import GeoPoint, PathNode
from route_maker.domain.errors import LedgerContractError
from route_maker.domain.geodesy import HaversineDistance
from route_maker.domain.units import km, miles


@dataclass(frozen=True)
class LedgerSnapshot:
    points: tuple[GeoPoint, ...]
    distances_m: tuple[float, ...]  # distance from previous point
    cumulative_m: tuple[float, ...]
    total_m: float
    cursor: int | None
    dragging_index: int | None = None

    def __len__(self) -> int:
        return len(self.points)


class PathLedger:
    """
    Ordered, editable path of geographic points with running distances.

    ``cursor`` is the index of the selected point (the anchor for the next
    insert/remove) or ``None`` when nothing is selected. ``dragging_index`` is
    the index being dragged, set only between ``begin_drag`` and ``end_drag``.

    Each node keeps the geodesic distance from its predecessor and the
    cumulative distance from the head. Mutations re-measure only the
    adjacencies they touch and then propagate cumulative sums forward.
    """

    def __init__(self, distance: GeodesicDistance | None = None):
        self.distance = distance or HaversineDistance()
        self.nodes: list[PathNode] = []
        self.cursor: int | None = None
        self.dragging_index: int | None = None

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def points(self) -> list[GeoPoint]:
        return [n.point for n in self.nodes]

    @property
    def is_dragging(self) -> bool:
        return self.dragging_index is not None

    # --------------- Helpers -----------------------------

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.nodes):
            raise LedgerContractError(f"index {index} out of range for {len(self.nodes)} points")

    def _measure(self, index: int) -> None:
        """Re-measure nodes[index] against its predecessor."""
        node = self.nodes[index]
        if index == 0:
            node.distance_from_previous_m = 0.0
        else:
            node.distance_from_previous_m = self.distance(self.nodes[index - 1].point, node.point)

    def _accumulate(self, start: int) -> None:
        # cumulative distance only depends on the predecessor, so one pass suffices
        for i in range(max(start, 0), len(self.nodes)):
            node = self.nodes[i]
            if i == 0:
                node.cumulative_m = 0.0
            else:
                node.cumulative_m = self.nodes[i - 1].cumulative_m + node.distance_from_previous_m

    # --------------- Editing -----------------------------

    def insert(self, point: GeoPoint) -> int:
        """Insert ``point`` right after the cursor (at the head when there is none)."""
        if self.cursor is None:
            index, d = 0, 0.0
        else:
            index = self.cursor + 1
            d = self.distance(self.nodes[self.cursor].point, point)
        self.nodes.insert(index, PathNode(point=point, distance_from_previous_m=d))
        if index + 1 < len(self.nodes):
            self._measure(index + 1)
        self.cursor = index
        self._accumulate(index)
        return index

    def remove_at_cursor(self) -> None:
        if self.cursor is None:
            return
        if self.cursor > 0:
            del self.nodes[self.cursor]
            if self.cursor < len(self.nodes):
                self._measure(self.cursor)
            self.cursor -= 1
            self._accumulate(self.cursor)
        else:
            del self.nodes[0]
            if not self.nodes:
                self.cursor = None
            else:
                self.nodes[0].distance_from_previous_m = 0.0
                self._accumulate(-1)
        self.dragging_index = None

    def select_nearest(self, index: int) -> None:
        """Select an existing point (the shell has already hit-tested it)."""
        self._check_index(index)
        self.cursor = index

    def nearest_index(self, point: GeoPoint, max_distance_m: float | None = None) -> int | None:
        best, best_d = None, math.inf
        for i, node in enumerate(self.nodes):
            d = self.distance(node.point, point)
            if d < best_d:
                best, best_d = i, d
        if best is not None and max_distance_m is not None and best_d > max_distance_m:
            return None
        return best

    def begin_drag(self, index: int) -> None:
        self._check_index(index)
        self.cursor = index
        self.dragging_index = index

    def move_to(self, point: GeoPoint) -> None:
        i = self.dragging_index
        if i is None:
            raise LedgerContractError("move_to called while not dragging")
        self.nodes[i].point = point
        self._measure(i)
        if i + 1 < len(self.nodes):
            self._measure(i + 1)
        self._accumulate(i)

    def end_drag(self) -> None:
        self.dragging_index = None

    def reverse(self) -> None:
        if not self.nodes:
            return
        last = len(self.nodes) - 1
        self.nodes = [PathNode(point=n.point) for n in reversed(self.nodes)]
        # every adjacency changed
        for i in range(1, len(self.nodes)):
            self._measure(i)
        self._accumulate(0)
        if self.cursor is not None:
            self.cursor = last - self.cursor
        if self.dragging_index is not None:
            self.dragging_index = last - self.dragging_index

    def clear(self) -> None:
        self.nodes = []
        self.cursor = None
        self.dragging_index = None

    # --------------- Queries -----------------------------

    def total_distance(self) -> float:
        """Path length in meters (0 for an empty path)."""
        return self.nodes[-1].cumulative_m if self.nodes else 0.0

    def total_distance_km(self) -> float:
        return km(self.total_distance())

    def total_distance_miles(self) -> float:
        return miles(self.total_distance())

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            points=tuple(n.point for n in self.nodes),
            distances_m=tuple(n.distance_from_previous_m for n in self.nodes),
            cumulative_m=tuple(n.cumulative_m for n in self.nodes),
            total_m=self.total_distance(),
            cursor=self.cursor,
            dragging_index=self.dragging_index,
        )

    @classmethod
    def from_points(cls, points, distance: GeodesicDistance | None = None) -> PathLedger:
        """Build a ledger by inserting ``points`` in order, as a user would."""
        ledger = cls(distance)
        for p in points:
            ledger.insert(p)
        return ledger
