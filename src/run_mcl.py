import logging
import math
import os
from pathlib import Path

import hydra
from omegaconf import DictConfig, OmegaConf

from logger.csv_logger import CSVLogger
from particle_filter import ParticleFilter
from simulation import SimulatedAgent
from utils.misc import build_filter, seed_everything

logger = logging.getLogger(__name__)

TRAJ_COLUMNS = [
    "tick",
    "gt_x",
    "gt_y",
    "gt_theta",
    "est_x",
    "est_y",
    "odom_x",
    "odom_y",
    "est_error",
    "odom_error",
    "degenerate",
]


def run_mcl(pf: ParticleFilter, agent: SimulatedAgent, output_path: Path, cfg: DictConfig) -> list[float]:
    """Drive the filter for `cfg.run.ticks` ticks and log the trajectory. Returns per-tick errors."""
    pf.reset()
    init_xy = (agent.pose.x, agent.pose.y) if cfg.run.init_at_start else None
    pf.initialize(init_xy, init_sigma=cfg.filter.init_sigma)

    errors = []
    n_ticks = int(cfg.run.ticks)
    with CSVLogger(output_path / "mcl_traj.csv", TRAJ_COLUMNS) as traj_logger:
        for i in range(n_ticks):
            dx, dy = agent.displacement()
            result = pf.step(dx, dy, agent.sense())

            gt = agent.pose
            est = result.estimate
            est_error = math.hypot(est.x - gt.x, est.y - gt.y) if est.valid else math.nan
            odom_error = math.hypot(agent.odom_x - gt.x, agent.odom_y - gt.y)
            errors.append(est_error)

            traj_logger.log(
                [i, gt.x, gt.y, gt.theta, est.x, est.y, agent.odom_x, agent.odom_y, est_error, odom_error, result.degenerate]
            )

            degenerate_msg = "-> degenerate" if result.degenerate else ""
            print(
                f"\r[Tick {i + 1:>5}/{n_ticks}] | error: {est_error:.2f} | odom error: {odom_error:.2f} "
                f"{degenerate_msg:>13}",
                end="" if i < n_ticks - 1 else "\n",
                flush=True,
            )

            agent.advance()

    return errors


@hydra.main(version_base="1.3", config_path="../config", config_name="run_mcl")
def main(cfg: DictConfig):
    rng = seed_everything(cfg.seed)

    pf, sensor_model = build_filter(cfg, rng)
    agent = SimulatedAgent(sensor_model, rng, **cfg.run)
    logger.info(
        f"Running MCL with {pf.n_particles} particles in a {cfg.arena.side} arena "
        f"({len(sensor_model.ray_offsets)} rays, {pf.resampler.n_random} injected per tick)"
    )

    output_path = Path(cfg.output_dir)
    os.makedirs(output_path, exist_ok=True)
    OmegaConf.save(cfg, os.path.join(output_path, "config.yaml"))

    errors = run_mcl(pf, agent, output_path, cfg)

    valid = [e for e in errors if math.isfinite(e)]
    if len(valid) < len(errors):
        logger.warning(f"{len(errors) - len(valid)} ticks produced no valid estimate")
    if valid:
        rmse = math.sqrt(sum(e**2 for e in valid) / len(valid))
        logger.info(f"Position RMSE over {len(valid)} ticks: {rmse:.3f} (final error {errors[-1]:.3f})")


if __name__ == "__main__":
    main()
