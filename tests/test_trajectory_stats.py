from pathlib import Path
import json

import numpy as np

from analysis.trajectory_stats import (
    frame_times,
    mean_squared_displacement,
    occupancy_histogram,
    outside_fraction,
    position_summary,
    save_stats_json,
    theoretical_msd,
)
from rw_core.world import ReflectingWorld


def test_msd_from_frame_zero_and_custom_origin():
    history = np.array(
        [
            [[0.0, 0.0], [1.0, 0.0], [2.0, 0.0]],
            [[1.0, 1.0], [1.0, 2.0], [1.0, 1.0]],
        ]
    )
    assert np.allclose(mean_squared_displacement(history), [0.0, 1.0, 2.0])
    assert np.allclose(mean_squared_displacement(history, origin=np.array([0.0, 0.0])), [1.0, 3.0, 3.0])
    assert mean_squared_displacement(np.zeros((4, 0, 2))).shape == (0,)


def test_theoretical_msd_and_frame_times():
    times = frame_times(4, 0.01, 10)
    assert np.allclose(times, [0.0, 0.1, 0.2, 0.3])
    assert np.allclose(theoretical_msd(times, 2.0), 8.0 * times)


def test_occupancy_histogram_is_a_density():
    rng = np.random.default_rng(0)
    pos = rng.uniform(0.0, 1.0, size=(1000, 2))
    h, xe, ye = occupancy_histogram(pos, (0.0, 1.0, 0.0, 1.0), 10)
    assert h.shape == (10, 10)
    area = np.outer(np.diff(xe), np.diff(ye))
    assert np.isclose(np.sum(h * area), 1.0)


def test_outside_fraction_counts_points_behind_walls():
    box = ReflectingWorld().add_inward_box(0.0, 1.0, 0.0, 1.0)
    pos = np.array([[0.5, 0.5], [1.0, 1.0], [1.1, 0.5], [0.5, -1e-6]])
    assert outside_fraction(box, pos) == 0.5
    assert outside_fraction(ReflectingWorld(), pos) == 0.0
    assert outside_fraction(box, np.zeros((0, 2))) == 0.0


def test_position_summary_and_json(tmp_path: Path):
    s = position_summary(np.array([[0.0, 1.0], [2.0, 3.0]]))
    assert s["count"] == 2
    assert s["mean_x"] == 1.0 and s["mean_y"] == 2.0
    assert position_summary(np.zeros((0, 2))) == {"count": 0}
    out = tmp_path / "stats" / "s.json"
    save_stats_json(str(out), s)
    assert json.loads(out.read_text())["count"] == 2
