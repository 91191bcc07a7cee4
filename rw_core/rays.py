"""Ray container recording a reflected displacement.

Example:
    >>> from rw_core.geometry import Vec2
    >>> from rw_core.rays import Ray
    >>> r = Ray(Vec2(0.0, 1.0), Vec2(0.0, -2.0), path_points=[Vec2(0.0, 1.0), Vec2(0.0, 1.0)])
    >>> r.bounce_count, r.end
    (0, Vec2(x=0.0, y=1.0))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np
from numpy.typing import NDArray

from rw_core.geometry import Vec2


@dataclass
class Ray:
    origin: Vec2
    displacement: Vec2
    path_points: List[Vec2] = field(default_factory=list)
    wall_ids: List[int] = field(default_factory=list)
    wall_indices: List[int] = field(default_factory=list)
    truncated: bool = False

    @property
    def end(self) -> Vec2:
        return self.path_points[-1] if self.path_points else self.origin

    @property
    def bounce_count(self) -> int:
        return len(self.wall_ids)

    def path_array(self) -> NDArray[np.float64]:
        return np.array([(p.x, p.y) for p in self.path_points], dtype=np.float64).reshape(-1, 2)
