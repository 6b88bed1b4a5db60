#!/usr/bin/env python3
"""
Simple position error evaluation for MCL runs
"""

import argparse
import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

COLORS = {"gt": "lime", "est": "red", "odom": "magenta"}


def load_trajectory(run_dir: Path) -> pd.DataFrame:
    """Load the per-tick trajectory written by run_mcl.py"""
    traj_path = Path(run_dir) / "mcl_traj.csv"
    if not traj_path.exists():
        raise FileNotFoundError(f"File not found: {traj_path}")
    return pd.read_csv(traj_path)


def compute_metrics(df: pd.DataFrame, skip_ticks: int = 0) -> dict:
    """Position error statistics of the filter estimate and of dead reckoning.

    Ticks without a valid estimate are counted but excluded from the statistics.
    """
    df = df.iloc[skip_ticks:]
    est_err = np.hypot(df["est_x"] - df["gt_x"], df["est_y"] - df["gt_y"]).to_numpy()
    odom_err = np.hypot(df["odom_x"] - df["gt_x"], df["odom_y"] - df["gt_y"]).to_numpy()

    valid = np.isfinite(est_err)
    est_valid = est_err[valid]
    if len(est_valid) == 0:
        logger.warning("  No valid estimates in trajectory")

    return {
        "n_ticks": len(df),
        "n_invalid": int((~valid).sum()),
        "n_degenerate": int(df["degenerate"].astype(str).eq("True").sum()),
        "est_rmse": float(np.sqrt(np.mean(est_valid**2))) if len(est_valid) else float("nan"),
        "est_median": float(np.median(est_valid)) if len(est_valid) else float("nan"),
        "est_max": float(np.max(est_valid)) if len(est_valid) else float("nan"),
        "odom_rmse": float(np.sqrt(np.mean(odom_err**2))) if len(odom_err) else float("nan"),
        "odom_final": float(odom_err[-1]) if len(odom_err) else float("nan"),
    }


def plot_trajectories(df: pd.DataFrame, arena_side: float, save_path: Path):
    fig, ax = plt.subplots(figsize=(10, 10))
    ax.plot(df["gt_x"], df["gt_y"], color=COLORS["gt"], linewidth=3, label="ground truth")
    ax.plot(df["odom_x"], df["odom_y"], color=COLORS["odom"], linewidth=2, linestyle=":", label="dead reckoning")
    ax.plot(df["est_x"], df["est_y"], color=COLORS["est"], linewidth=2, label="MCL estimate")

    ax.set_xlim(0, arena_side)
    ax.set_ylim(0, arena_side)
    ax.set_aspect("equal")
    ax.grid(True, linestyle="--", alpha=0.3)
    ax.legend()

    fig.savefig(save_path, dpi=100, bbox_inches="tight")
    plt.close(fig)


def main(run_dirs: list[Path], output_dir: Path, arena_side: float, skip_ticks: int, plot: bool):
    all_results = []
    for run_dir in run_dirs:
        logger.info(f"Run: {run_dir}")
        df = load_trajectory(run_dir)
        metrics = compute_metrics(df, skip_ticks=skip_ticks)
        logger.info(
            f"  MCL RMSE={metrics['est_rmse']:.3f}, dead-reckoning RMSE={metrics['odom_rmse']:.3f}, "
            f"invalid ticks={metrics['n_invalid']}, degenerate ticks={metrics['n_degenerate']}"
        )
        all_results.append({"run": str(run_dir), **metrics})

        if plot:
            plot_trajectories(df, arena_side, output_dir / f"{Path(run_dir).name}_trajectory.png")

    if all_results:
        df = pd.DataFrame(all_results)
        df.to_csv(output_dir / "results.csv", index=False)
        print(df[["est_rmse", "est_median", "est_max", "odom_rmse"]].agg(["mean", "std"]).round(3))

    logger.info(f"Results saved to {output_dir}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("runs", nargs="+", type=Path, help="run_mcl output directories")
    parser.add_argument("--output", type=Path, default=Path("paper_scripts/mcl_results"))
    parser.add_argument("--arena-side", type=float, default=144.0)
    parser.add_argument("--skip-ticks", type=int, default=0, help="ignore the first ticks while the filter converges")
    parser.add_argument("--no-plot", action="store_true")
    args = parser.parse_args()

    args.output.mkdir(parents=True, exist_ok=True)
    main(args.runs, args.output, args.arena_side, args.skip_ticks, plot=not args.no_plot)
