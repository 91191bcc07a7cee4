import math

import numpy as np
import pytest

from rw_core.steps import BrownianParams, SpecifiedStepParams, brownian_step, make_rng, specified_step
from rw_core.geometry import Vec2


def test_zero_diffusion_is_pure_drift():
    rng = make_rng(1)
    p = BrownianParams(dt=0.25, D=0.0, mu_x=2.0, mu_y=-4.0)
    for _ in range(5):
        assert brownian_step(p, rng) == Vec2(0.5, -1.0)


def test_increment_mean_and_variance():
    p = BrownianParams(dt=0.01, D=2.0, mu_x=1.0, mu_y=0.0)
    rng = make_rng(42)
    n = 40000
    d = np.array([(s.x, s.y) for s in (brownian_step(p, rng) for _ in range(n))])
    var = 2.0 * p.D * p.dt
    se_mean = math.sqrt(var / n)
    assert abs(np.mean(d[:, 0]) - p.mu_x * p.dt) < 6.0 * se_mean
    assert abs(np.mean(d[:, 1])) < 6.0 * se_mean
    # sample variance of a normal has relative std sqrt(2/n)
    assert abs(np.var(d[:, 0]) / var - 1.0) < 6.0 * math.sqrt(2.0 / n)
    assert abs(np.var(d[:, 1]) / var - 1.0) < 6.0 * math.sqrt(2.0 / n)


def test_same_seed_same_steps_and_x_drawn_first():
    p = BrownianParams(dt=0.5, D=1.0)
    a = [brownian_step(p, make_rng(9)) for _ in range(1)]
    b = [brownian_step(p, make_rng(9)) for _ in range(1)]
    assert a == b
    g = np.random.default_rng(9).standard_normal(2)
    assert math.isclose(a[0].x, g[0], rel_tol=1e-15)
    assert math.isclose(a[0].y, g[1], rel_tol=1e-15)


@pytest.mark.parametrize("kwargs", [{"dt": 0.0}, {"dt": -1.0}, {"D": -0.1}])
def test_brownian_params_validation(kwargs):
    with pytest.raises(ValueError):
        BrownianParams(**kwargs)


def test_specified_step_has_no_builtin_policy():
    with pytest.raises(NotImplementedError):
        specified_step(SpecifiedStepParams(), 0, Vec2(0.0, 0.0), make_rng(0))
