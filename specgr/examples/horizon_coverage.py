import argparse
from pathlib import Path

import pandas as pd

from specgr.domain import Sphere
from specgr.interpolation_target import KerrHorizonTarget
from specgr.kerr_horizon import AngularOrdering, KerrHorizon
from specgr.logging_config import setup_logging

# (inner radius, outer radius) of shells that cover all, some and none of
# the default horizon
DEFAULT_SHELLS = {"all": (0.9, 4.9), "some": (3.4, 4.9), "none": (4.9, 8.9)}


def coverage_case(horizon, label, inner_radius, outer_radius):
    domain = Sphere(inner_radius, outer_radius, initial_refinement=1,
                    initial_number_of_grid_points=5).create_domain()
    summary = KerrHorizonTarget(horizon).coverage(domain)
    radius = horizon.radius()
    return {
        "shell": label, "inner_radius": inner_radius, "outer_radius": outer_radius,
        "horizon_r_min": float(radius.min()), "horizon_r_max": float(radius.max()),
        **summary,
    }


def main(argv=None):
    ap = argparse.ArgumentParser(description="Coverage of a Kerr horizon by spherical-shell domains")
    ap.add_argument("--l-max", type=int, default=18)
    ap.add_argument("--mass", type=float, default=1.8)
    ap.add_argument("--spin", type=float, nargs=3, default=[0.2, 0.3, 0.4])
    ap.add_argument("--center", type=float, nargs=3, default=[0.05, 0.06, 0.07])
    ap.add_argument("--ordering", type=str, default="Strahlkorper",
                    choices=[o.name for o in AngularOrdering])
    ap.add_argument("--out-dir", type=str, default=None,
                    help="Write coverage.csv (and a plot, if matplotlib is available) here")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    if args.verbose:
        setup_logging()

    horizon = KerrHorizon(args.l_max, args.center, args.mass, args.spin,
                          AngularOrdering[args.ordering])
    print(f"\n=== Kerr horizon coverage (l_max={args.l_max}, "
          f"{horizon.number_of_points} points) ===")
    rows = [coverage_case(horizon, label, *radii) for label, radii in DEFAULT_SHELLS.items()]
    df = pd.DataFrame(rows)
    print(df.to_string(index=False, float_format='%.3f'))

    if args.out_dir is None:
        return df

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    csv_path = out_dir / "coverage.csv"
    df.to_csv(csv_path, index=False)
    print(f"\nSaved CSV -> {csv_path}")

    try:
        import matplotlib.pyplot as plt
    except ImportError as e:
        print("Plotting skipped:", e)
        return df
    plt.figure()
    plt.bar(df["shell"], df["mapped"], label="mapped")
    plt.bar(df["shell"], df["unmapped"], bottom=df["mapped"], label="unmapped")
    plt.xlabel("Shell"); plt.ylabel("Points"); plt.title("Horizon points per shell"); plt.legend()
    fig = out_dir / "coverage.png"
    plt.savefig(fig, dpi=160, bbox_inches="tight")
    print(f"Saved plot -> {fig}")
    return df


if __name__ == "__main__":
    main()
