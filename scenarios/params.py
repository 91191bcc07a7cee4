"""Parameter-list generation for batch sweeps.

Each line of a params file is one configuration:
``tf D x0 y0 nsteps nreals nbins``. X0/Y0 are paired by index; every other
list is combined as a cartesian product.

Example:
    >>> rows = generate_params([0.05], [1.0, 5.0], [0.1], [0.1], [500], [1000], [50])
    >>> [r["D"] for r in rows]
    [1.0, 5.0]
"""

from __future__ import annotations

from itertools import product
from pathlib import Path
from typing import Any, Dict, List, Sequence

FIELDS = ("tf", "D", "x0", "y0", "nsteps", "nreals", "nbins")
INT_FIELDS = {"nsteps", "nreals", "nbins"}

DEFAULTS = {
    "tf": [0.05, 0.10],
    "D": [1.0, 5.0],
    "x0": [0.10, 0.50],
    "y0": [0.10, 0.50],
    "nsteps": [500],
    "nreals": [1000, 5000],
    "nbins": [50],
}


def generate_params(
    tf_vals: Sequence[float],
    d_vals: Sequence[float],
    x0_vals: Sequence[float],
    y0_vals: Sequence[float],
    nsteps_vals: Sequence[int],
    nreals_vals: Sequence[int],
    nbins_vals: Sequence[int],
) -> List[Dict[str, Any]]:
    named = {
        "TF": tf_vals,
        "D": d_vals,
        "X0": x0_vals,
        "Y0": y0_vals,
        "NSTEPS": nsteps_vals,
        "NREALS": nreals_vals,
        "NBINS": nbins_vals,
    }
    for name, vals in named.items():
        if len(vals) < 1:
            raise ValueError(f"{name} values are empty")
    if len(x0_vals) != len(y0_vals):
        raise ValueError("X0/Y0 must have equal length")

    rows: List[Dict[str, Any]] = []
    for tf, d, (x0, y0), nsteps, nreals, nbins in product(
        tf_vals, d_vals, list(zip(x0_vals, y0_vals)), nsteps_vals, nreals_vals, nbins_vals
    ):
        rows.append(
            {
                "tf": float(tf),
                "D": float(d),
                "x0": float(x0),
                "y0": float(y0),
                "nsteps": int(nsteps),
                "nreals": int(nreals),
                "nbins": int(nbins),
            }
        )
    return rows


def format_params_line(row: Dict[str, Any]) -> str:
    return " ".join(str(row[k]) for k in FIELDS)


def write_params_file(path: str, rows: Sequence[Dict[str, Any]]) -> str:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text("".join(format_params_line(r) + "\n" for r in rows), encoding="utf-8")
    return str(out)


def read_params_file(path: str) -> List[Dict[str, Any]]:
    """Parse a params file; blank lines and ``#`` comments are skipped."""

    rows: List[Dict[str, Any]] = []
    for lineno, line in enumerate(Path(path).read_text(encoding="utf-8").splitlines(), start=1):
        text = line.split("#", 1)[0].strip()
        if not text:
            continue
        parts = text.split()
        if len(parts) != len(FIELDS):
            raise ValueError(f"{path}:{lineno}: expected {len(FIELDS)} fields, got {len(parts)}")
        rows.append({k: (int(v) if k in INT_FIELDS else float(v)) for k, v in zip(FIELDS, parts)})
    if not rows:
        raise ValueError(f"Params file is empty: {path}")
    return rows
