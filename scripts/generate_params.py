"""Write a params list file for batch sweeps.

Usage:
    python -m scripts.generate_params --TF 0.05 0.1 --D 1 5 --preview 3
"""

from __future__ import annotations

import argparse

from scenarios.params import DEFAULTS, format_params_line, generate_params, write_params_file


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate params_list.txt (one configuration per line).")
    parser.add_argument("--outfile", default="params_list.txt", help="Output params file")
    parser.add_argument("--TF", nargs="+", type=float, default=DEFAULTS["tf"], help="Final times")
    parser.add_argument("--D", nargs="+", type=float, default=DEFAULTS["D"], help="Diffusion coefficients")
    parser.add_argument("--X0", nargs="+", type=float, default=DEFAULTS["x0"], help="Initial x (paired with --Y0)")
    parser.add_argument("--Y0", nargs="+", type=float, default=DEFAULTS["y0"], help="Initial y (paired with --X0)")
    parser.add_argument("--NSTEPS", nargs="+", type=int, default=DEFAULTS["nsteps"], help="Time steps")
    parser.add_argument("--NREALS", nargs="+", type=int, default=DEFAULTS["nreals"], help="Realizations")
    parser.add_argument("--NBINS", nargs="+", type=int, default=DEFAULTS["nbins"], help="Histogram bins")
    parser.add_argument("--preview", type=int, default=0, help="Print the first N lines")
    args = parser.parse_args()

    try:
        rows = generate_params(args.TF, args.D, args.X0, args.Y0, args.NSTEPS, args.NREALS, args.NBINS)
    except ValueError as exc:
        parser.error(str(exc))
    path = write_params_file(args.outfile, rows)
    print(f"Wrote {len(rows)} configurations to {path}")
    for row in rows[: args.preview]:
        print(format_params_line(row))


if __name__ == "__main__":
    main()
