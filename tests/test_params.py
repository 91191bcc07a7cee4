from pathlib import Path

import pytest

from scenarios.params import DEFAULTS, FIELDS, format_params_line, generate_params, read_params_file, write_params_file


def test_default_grid_size_pairs_x0_y0():
    rows = generate_params(*(DEFAULTS[k] for k in FIELDS))
    # 2 tf * 2 D * 2 (x0,y0) pairs * 1 nsteps * 2 nreals * 1 nbins
    assert len(rows) == 16
    assert {(r["x0"], r["y0"]) for r in rows} == {(0.1, 0.1), (0.5, 0.5)}
    assert all(isinstance(r["nsteps"], int) for r in rows)


def test_generate_params_validation():
    with pytest.raises(ValueError):
        generate_params([0.1], [1.0], [0.1, 0.2], [0.1], [10], [10], [5])
    with pytest.raises(ValueError):
        generate_params([], [1.0], [0.1], [0.1], [10], [10], [5])


def test_write_then_read_params_file(tmp_path: Path):
    rows = generate_params([0.05], [1.0, 5.0], [0.1], [0.2], [500], [1000], [50])
    path = write_params_file(str(tmp_path / "sub" / "params_list.txt"), rows)
    lines = Path(path).read_text().splitlines()
    assert lines[0] == "0.05 1.0 0.1 0.2 500 1000 50"
    assert read_params_file(path) == rows
    assert format_params_line(rows[1]).split()[1] == "5.0"


def test_read_params_file_skips_comments_and_rejects_bad_lines(tmp_path: Path):
    good = tmp_path / "good.txt"
    good.write_text("# tf D x0 y0 nsteps nreals nbins\n\n0.1 1 0.5 0.5 10 20 5  # short run\n")
    assert read_params_file(str(good)) == [
        {"tf": 0.1, "D": 1.0, "x0": 0.5, "y0": 0.5, "nsteps": 10, "nreals": 20, "nbins": 5}
    ]
    bad = tmp_path / "bad.txt"
    bad.write_text("0.1 1 0.5 0.5 10\n")
    with pytest.raises(ValueError):
        read_params_file(str(bad))
    empty = tmp_path / "empty.txt"
    empty.write_text("# nothing\n")
    with pytest.raises(ValueError):
        read_params_file(str(empty))
