"""Reflecting world: an ordered collection of wall segments plus builders.

A world is populated once and then frozen into a read-only ``WallTable`` that
the tracer scans. Builders raise ``GeometryError`` on invalid input and
``RuntimeError`` once the world is frozen.

Example:
    >>> from rw_core.world import ReflectingWorld
    >>> world = ReflectingWorld().add_inward_box(0.0, 1.0, 0.0, 1.0, base_id=10)
    >>> [w.wall_id for w in world]
    [10, 11, 12, 13]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from rw_core.geometry import EPS_DIR, Vec2, as_vec2
from rw_core.surfaces import GeometryError, WallSegment


@dataclass(frozen=True)
class WallTable:
    """Column view of a frozen world. Row i is the i-th inserted wall.

    Segments are anchored at their midpoints so long strips keep precision
    near the region where particles move.
    """

    mid: NDArray[np.float64]
    seg: NDArray[np.float64]
    n_hat: NDArray[np.float64]
    ids: NDArray[np.int64]

    @property
    def count(self) -> int:
        return int(self.ids.shape[0])


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


@dataclass
class ReflectingWorld:
    walls: List[WallSegment] = field(default_factory=list)
    _table: Optional[WallTable] = field(default=None, init=False, repr=False)

    @classmethod
    def from_walls(cls, walls: Iterable[WallSegment]) -> "ReflectingWorld":
        return cls(walls=list(walls))

    def __len__(self) -> int:
        return len(self.walls)

    def __iter__(self) -> Iterator[WallSegment]:
        return iter(self.walls)

    @property
    def frozen(self) -> bool:
        return self._table is not None

    def _append(self, wall: WallSegment, builder: str) -> None:
        if self.frozen:
            raise RuntimeError(f"{builder}: world is frozen; build a new world instead")
        self.walls.append(wall)

    def add_segment(
        self,
        a: Vec2 | Sequence[float],
        b: Vec2 | Sequence[float],
        n: Vec2 | Sequence[float],
        wall_id: int = -1,
    ) -> "ReflectingWorld":
        """Add a segment with an explicit normal (normalized before storage)."""

        try:
            wall = WallSegment(as_vec2(a), as_vec2(b), as_vec2(n), wall_id)
        except GeometryError as exc:
            raise GeometryError(f"add_segment: {exc}") from exc
        self._append(wall, "add_segment")
        return self

    def add_segment_auto(
        self,
        a: Vec2 | Sequence[float],
        b: Vec2 | Sequence[float],
        inward: bool = False,
        wall_id: int = -1,
    ) -> "ReflectingWorld":
        try:
            wall = WallSegment.from_segment_auto_normal(a, b, inward=inward, wall_id=wall_id)
        except GeometryError as exc:
            raise GeometryError(f"add_segment_auto: {exc}") from exc
        self._append(wall, "add_segment_auto")
        return self

    def add_inward_box(self, xmin: float, xmax: float, ymin: float, ymax: float, base_id: int = 100) -> "ReflectingWorld":
        """Axis-aligned box with inward normals: bottom, right, top, left."""

        if not (xmin < xmax and ymin < ymax):
            raise GeometryError(f"add_inward_box: invalid bounds x=[{xmin}, {xmax}], y=[{ymin}, {ymax}]")
        self.add_segment((xmin, ymin), (xmax, ymin), (0.0, 1.0), base_id + 0)
        self.add_segment((xmax, ymin), (xmax, ymax), (-1.0, 0.0), base_id + 1)
        self.add_segment((xmax, ymax), (xmin, ymax), (0.0, -1.0), base_id + 2)
        self.add_segment((xmin, ymax), (xmin, ymin), (1.0, 0.0), base_id + 3)
        return self

    def add_half_plane_strip(
        self,
        n: Vec2 | Sequence[float],
        c: float,
        span: float = 1e6,
        wall_id: int = 200,
    ) -> "ReflectingWorld":
        """Approximate the line {x | n·x = c} by one segment of length ``span``.

        The segment is centred on c·n̂. It is finite: trajectories that travel
        farther than span/2 along the line pass its ends unreflected.
        """

        n_hat = as_vec2(n).normalized(EPS_DIR)
        if n_hat.x == 0.0 and n_hat.y == 0.0:
            raise GeometryError(f"add_half_plane_strip: normal {n} is near zero")
        x0 = c * n_hat
        t_hat = Vec2(-n_hat.y, n_hat.x)
        a = x0 - (0.5 * span) * t_hat
        b = x0 + (0.5 * span) * t_hat
        try:
            wall = WallSegment(a, b, n_hat, wall_id)
        except GeometryError as exc:
            raise GeometryError(f"add_half_plane_strip: {exc}") from exc
        self._append(wall, "add_half_plane_strip")
        return self

    def freeze(self) -> "ReflectingWorld":
        if self._table is None:
            n = len(self.walls)
            mid = np.empty((n, 2), dtype=np.float64)
            seg = np.empty((n, 2), dtype=np.float64)
            n_hat = np.empty((n, 2), dtype=np.float64)
            ids = np.empty(n, dtype=np.int64)
            for i, w in enumerate(self.walls):
                seg[i] = (w.p1.x - w.p0.x, w.p1.y - w.p0.y)
                mid[i] = (w.p0.x + 0.5 * seg[i, 0], w.p0.y + 0.5 * seg[i, 1])
                n_hat[i] = (w.n_hat.x, w.n_hat.y)
                ids[i] = w.wall_id
            self._table = WallTable(_readonly(mid), _readonly(seg), _readonly(n_hat), _readonly(ids))
        return self

    def table(self) -> WallTable:
        """Frozen column view; freezes the world on first call."""

        self.freeze()
        return self._table
