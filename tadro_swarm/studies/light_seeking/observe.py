"""
Study: Light Seeking Observation

Run: python -m tadro_swarm.studies.light_seeking.observe

Watch a group of Tadros converge on the light,
then ask how stable the group stayed on the way.
"""

import argparse
import logging
from dataclasses import replace
from typing import Optional

import numpy as np

from tadro_swarm.core.config import SimulationConfig, load_config
from tadro_swarm.environments.light_field import LightField, make_rng
from tadro_swarm.metrics.stability import StabilityTable, compute_stability

logger = logging.getLogger(__name__)


def run_study(
    config: Optional[SimulationConfig] = None,
    seed: Optional[int] = None,
    plot: bool = True,
    save_path: Optional[str] = None
) -> StabilityTable:
    """
    Run one light-seeking simulation and measure its stability.

    Returns the stability table so callers can keep looking.
    """
    config = config or SimulationConfig()

    print("=" * 50)
    print(f"Study: Light Seeking (n={config.size}, g={config.goal_directedness})")
    print("=" * 50)

    field = LightField(config, rng=make_rng(seed))
    trajectory = field.run()
    table = compute_stability(trajectory)

    light = np.asarray(config.light_position)
    start = np.linalg.norm(trajectory.snapshot(0) - light, axis=1).mean()
    end = np.linalg.norm(trajectory.snapshot(config.iteration_count) - light, axis=1).mean()

    print("\nMean distance to light:")
    print(f"  Initial: {start:.2f}")
    print(f"  Final: {end:.2f}")

    summary = table.summary()
    print("\nStability ratio (Sg = Ii / Io):")
    if summary["mean_sg"] is None:
        print("  Undefined for every iteration")
    else:
        print(f"  Mean: {summary['mean_sg']:.2f}")
        print(f"  Min: {summary['min_sg']:.2f}")
        print(f"  Max: {summary['max_sg']:.2f}")
    print(f"  Undefined iterations: {summary['undefined']}")

    if field.degenerate_events:
        print(f"\nDegenerate events skipped: {len(field.degenerate_events)}")

    if plot or save_path:
        from tadro_swarm.observations.visualize import TrajectoryVisualizer, plot_stability

        viz = TrajectoryVisualizer(trajectory, config)
        stability_fig = None
        try:
            viz.render()
            if save_path:
                viz.save_frame(save_path)
                logger.info(f"Saved trajectory plot to {save_path}")
            if plot:
                stability_fig = plot_stability(table)
                viz.show()
        finally:
            if stability_fig is not None:
                import matplotlib.pyplot as plt
                plt.close(stability_fig)
            viz.close()

    print("\n" + "=" * 50)
    print("Study complete. Did the group hold together?")
    print("=" * 50)

    return table


def main():
    parser = argparse.ArgumentParser(description="Light Seeking Study")
    parser.add_argument("--config", default=None, help="YAML file of SimulationConfig options")
    parser.add_argument("--size", type=int, default=None)
    parser.add_argument("--goal", type=float, default=None, help="Goal-directedness in [0, 1]")
    parser.add_argument("--iterations", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--skip-degenerate", action="store_true",
                        help="Skip coincident pairs instead of halting")
    parser.add_argument("--no-plot", action="store_true")
    parser.add_argument("--save", default=None, help="Save the trajectory plot here")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    config = load_config(args.config) if args.config else SimulationConfig()

    overrides = {}
    if args.size is not None:
        overrides["size"] = args.size
    if args.goal is not None:
        overrides["goal_directedness"] = args.goal
    if args.iterations is not None:
        overrides["iteration_count"] = args.iterations
    if args.skip_degenerate:
        overrides["halt_on_degenerate"] = False
    if overrides:
        config = replace(config, **overrides)

    run_study(
        config=config,
        seed=args.seed,
        plot=not args.no_plot,
        save_path=args.save
    )


if __name__ == "__main__":
    main()
