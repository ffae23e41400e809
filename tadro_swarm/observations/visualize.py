"""
observations/visualize.py

Watch the Tadros find the light.

A path is a story. Arrows show where each Tadro came from;
the circle shows where they all want to go.

Inspired by:
- Scientific visualization
- Time-lapse photography
- Nature documentaries
"""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING
import numpy as np

from tadro_swarm.core.config import SimulationConfig

if TYPE_CHECKING:
    from tadro_swarm.environments.trajectory import Trajectory
    from tadro_swarm.metrics.stability import StabilityTable


class TrajectoryVisualizer:
    """
    Static and animated views of a finished run.

    Every Tadro gets its own color. Each iteration is drawn as an
    arrow from the previous position to the current one, the
    starting points as dots, the light as a circle.
    """

    def __init__(
        self,
        trajectory: Trajectory,
        config: SimulationConfig,
        figsize: tuple = (8, 8),
        margin: float = 1.0
    ):
        self.trajectory = trajectory
        self.config = config
        self.figsize = figsize
        self.margin = margin
        self.positions = trajectory.as_array()    # (iteration, agent, xy)

        # Lazy import matplotlib
        self._plt = None
        self._fig = None
        self._ax = None

    def _setup_plot(self):
        """Initialize matplotlib figure."""
        import matplotlib.pyplot as plt
        self._plt = plt

        self._fig, self._ax = plt.subplots(figsize=self.figsize)
        self._apply_axes()

    def _apply_axes(self) -> None:
        xs = self.positions[..., 0]
        ys = self.positions[..., 1]
        light_x, light_y = self.config.light_position
        self._ax.set_xlim(min(xs.min(), light_x) - self.margin, max(xs.max(), light_x) + self.margin)
        self._ax.set_ylim(min(ys.min(), light_y) - self.margin, max(ys.max(), light_y) + self.margin)
        self._ax.set_aspect('equal')
        self._ax.grid(True, alpha=0.3)
        self._ax.set_xlabel('x')
        self._ax.set_ylabel('y')

    def _colors(self):
        cmap = self._plt.get_cmap('tab10')
        return [cmap(i % 10) for i in range(self.trajectory.size)]

    def _render_light(self) -> None:
        from matplotlib.patches import Circle
        self._ax.add_patch(Circle(
            self.config.light_position, radius=0.3,
            facecolor='#ffd60a', edgecolor='#ff9f1c', zorder=3
        ))

    def _render_steps(self, upto: int) -> None:
        """Arrows for iterations 1..upto, one color per Tadro."""
        colors = self._colors()
        for i in range(self.trajectory.size):
            for t in range(1, upto + 1):
                start = self.positions[t - 1, i]
                end = self.positions[t, i]
                self._ax.annotate(
                    '', xy=end, xytext=start,
                    arrowprops=dict(arrowstyle='->', color=colors[i], lw=1, alpha=0.8)
                )

    def _render_start(self) -> None:
        self._ax.scatter(
            self.positions[0, :, 0], self.positions[0, :, 1],
            c=self._colors(), s=40, edgecolors='black', linewidths=0.5, zorder=4
        )

    def render(self, upto: Optional[int] = None) -> None:
        """Draw the paths up to an iteration (default: all of them)."""
        if self._plt is None:
            self._setup_plot()

        upto = self.trajectory.iteration_count if upto is None else upto

        self._ax.clear()
        self._apply_axes()
        self._render_light()
        self._render_start()
        self._render_steps(upto)
        self._ax.set_title(
            f"Iteration {upto} | Tadros: {self.trajectory.size} | "
            f"g = {self.config.goal_directedness}"
        )

    def animate(self, interval: int = 200):
        """
        Replay the run one iteration per frame.

        Returns the matplotlib FuncAnimation; keep a reference to it.
        """
        from matplotlib.animation import FuncAnimation

        if self._plt is None:
            self._setup_plot()

        return FuncAnimation(
            self._fig,
            lambda frame: self.render(upto=frame),
            frames=range(self.trajectory.iteration_count + 1),
            interval=interval,
            repeat=False,
        )

    def show(self) -> None:
        """Display every open figure."""
        if self._plt is not None:
            self._plt.show()

    def save_frame(self, path: str) -> None:
        """Save current frame to file."""
        if self._fig is not None:
            self._fig.savefig(path, dpi=150)

    def close(self) -> None:
        """Close the visualization."""
        if self._plt is not None:
            self._plt.close(self._fig)


def plot_stability(table: StabilityTable, save_path: Optional[str] = None):
    """
    Sg against iteration.

    Undefined iterations are marked along the x axis.
    """
    import matplotlib.pyplot as plt

    columns = table.as_arrays()
    fig, ax = plt.subplots(figsize=(8, 4))

    ax.plot(columns["iteration"], columns["Sg"], marker='o', color='#4361ee')

    undefined = table.undefined_iterations
    if undefined:
        ax.scatter(undefined, np.zeros(len(undefined)), marker='x', color='#f72585',
                   label='Sg undefined (Io = 0)')
        ax.legend()

    ax.set_xlabel('iteration')
    ax.set_ylabel('Sg')
    ax.set_title('Group stability')
    ax.grid(True, alpha=0.3)

    if save_path:
        fig.savefig(save_path, dpi=150)

    return fig
