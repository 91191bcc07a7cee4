from __future__ import annotations

from pathlib import Path
import sys

import numpy as np
import pytest

from rw_io.hdf5_io import load_sim_hdf5
from scenarios import S0_free_space, S1_unit_box, S2_quarter_plane, S3_eighth_plane
from scenarios.common import default_case, make_config
from scenarios.params import write_params_file
from scenarios.runner import resolve_geometry, run_all


def _tiny_params(tmp_path: Path) -> str:
    rows = [{"tf": 0.05, "D": 1.0, "x0": 0.2, "y0": 0.1, "nsteps": 10, "nreals": 8, "nbins": 5}]
    return write_params_file(str(tmp_path / "params_list.txt"), rows)


def test_resolve_geometry_aliases():
    assert resolve_geometry("both") == ["S2", "S3"]
    assert resolve_geometry("box") == ["S1"]
    assert resolve_geometry("S0") == ["S0"]
    assert resolve_geometry("all") == ["S0", "S1", "S2", "S3"]
    with pytest.raises(ValueError):
        resolve_geometry("hexagon")


def test_make_config_derives_dt():
    cfg = make_config(default_case("c", tf=0.5, nsteps=50, nreals=7, seed=3))
    assert cfg.brownian.dt == 0.01
    assert cfg.n_particles == 7 and cfg.base_seed == 3
    with pytest.raises(ValueError):
        make_config(default_case("c", nsteps=0))


def test_scenario_worlds():
    assert len(S0_free_space.build_world()) == 0
    assert [w.wall_id for w in S1_unit_box.build_world()] == [100, 101, 102, 103]
    assert [w.wall_id for w in S2_quarter_plane.build_world()] == [200, 201]
    wedge = list(S3_eighth_plane.build_world())
    assert np.isclose(wedge[1].n_hat.x, -wedge[1].n_hat.y)


@pytest.mark.parametrize("mod", [S1_unit_box, S2_quarter_plane, S3_eighth_plane])
def test_bounded_scenarios_keep_particles_inside(mod):
    world, sim = mod.run_case(default_case("t", tf=0.5, nsteps=20, nreals=20, x0=0.3, y0=0.1))
    pos = sim.positions_array()
    for w in world:
        assert np.all((pos - w.p0.to_array()) @ w.n_hat.to_array() >= -1e-9)


def test_run_all_writes_h5_plots_and_report(tmp_path: Path):
    out_h5 = tmp_path / "out" / "rw.h5"
    plot_dir = tmp_path / "out" / "plots"
    report = run_all(str(out_h5), str(plot_dir), geometries=["S0", "S1", "S3"], params_file=_tiny_params(tmp_path))

    text = Path(report).read_text(encoding="utf-8")
    assert Path(report) == tmp_path / "out" / "report.md"
    assert "## Failure Checks" in text
    assert "outside fraction: 0.000000" in text
    assert "S1:" not in text and "S3:" not in text

    scenarios, _ = load_sim_hdf5(str(out_h5))
    assert sorted(scenarios) == ["S0", "S1", "S3"]
    case = scenarios["S1"]["s1_p000"]
    assert case.positions.shape == (8, 2)
    assert case.params["nbins"] == 5
    assert (plot_dir / "S1" / "s1_p000" / "P2.png").exists()


def test_run_sweep_cli(monkeypatch, tmp_path: Path, capsys):
    from scripts import run_sweep

    params = _tiny_params(tmp_path)
    report = tmp_path / "copy" / "report.md"
    argv = [
        "run_sweep",
        "box",
        "--params",
        params,
        "--out-h5",
        str(tmp_path / "a" / "rw.h5"),
        "--plot-dir",
        str(tmp_path / "a" / "plots"),
        "--report",
        str(report),
        "--preview",
        "1",
    ]
    monkeypatch.setattr(sys, "argv", argv)
    run_sweep.main()
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "0.05 1.0 0.2 0.1 10 8 5"
    assert out[-1] == str(report)
    assert report.exists()


def test_generate_params_cli(monkeypatch, tmp_path: Path, capsys):
    from scripts import generate_params

    outfile = tmp_path / "p.txt"
    monkeypatch.setattr(sys, "argv", ["generate_params", "--outfile", str(outfile), "--D", "1", "2", "3", "--X0", "0.1", "--Y0", "0.2"])
    generate_params.main()
    assert "Wrote 12 configurations" in capsys.readouterr().out
    assert len(outfile.read_text().splitlines()) == 12

    monkeypatch.setattr(sys, "argv", ["generate_params", "--X0", "0.1", "0.2", "--Y0", "0.2"])
    with pytest.raises(SystemExit):
        generate_params.main()
