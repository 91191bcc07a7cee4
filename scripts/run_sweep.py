"""Run a scenario sweep and store HDF5, plots and a markdown report.

Usage:
    python -m scripts.run_sweep both --params params_list.txt --preview 3
"""

from __future__ import annotations

import argparse
import shutil
from pathlib import Path

from scenarios.params import format_params_line, read_params_file
from scenarios.runner import GEOMETRIES, resolve_geometry, run_all


def main() -> None:
    parser = argparse.ArgumentParser(description="Run reflecting-walk scenario sweep.")
    parser.add_argument("geometry", choices=sorted(GEOMETRIES), help="Scenario group to run")
    parser.add_argument("--params", default=None, help="Params list file (tf D x0 y0 nsteps nreals nbins per line)")
    parser.add_argument("--out-h5", default="artifacts/rw_sweep.h5", help="Output HDF5 path")
    parser.add_argument("--plot-dir", default="artifacts/plots", help="Output plot directory")
    parser.add_argument("--report", default=None, help="Copy the markdown report to this path")
    parser.add_argument("--preview", type=int, default=0, help="Print the first N params lines before running")
    args = parser.parse_args()

    if args.params and args.preview > 0:
        for row in read_params_file(args.params)[: args.preview]:
            print(format_params_line(row))

    generated = Path(run_all(args.out_h5, args.plot_dir, geometries=resolve_geometry(args.geometry), params_file=args.params))
    out_path = generated
    if args.report:
        out_path = Path(args.report)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        if generated.resolve() != out_path.resolve():
            shutil.copyfile(generated, out_path)
    print(out_path)


if __name__ == "__main__":
    main()
