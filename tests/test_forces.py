"""
Tests for core/forces.py and core/agent.py

Attraction, inertia, repulsion - each in isolation.
"""

import numpy as np
import pytest

from tadro_swarm.core.agent import AgentState
from tadro_swarm.core.config import SimulationConfig
from tadro_swarm.core.errors import DegenerateDistance
from tadro_swarm.core.forces import (
    Forces,
    attraction,
    compute_forces,
    inertia,
    repulsion,
    repulsion_magnitude,
)


class TestAgentState:
    """Tests for AgentState dataclass."""

    def test_state_from_lists(self):
        state = AgentState(agent_id=1, position=[1.0, 2.0])
        assert isinstance(state.position, np.ndarray)
        assert state.position.dtype == np.float64
        np.testing.assert_array_equal(state.last_displacement, [0.0, 0.0])

    def test_distance_to(self):
        a = AgentState(agent_id=1, position=[0.0, 0.0])
        b = AgentState(agent_id=2, position=[3.0, 4.0])
        assert a.distance_to(b) == pytest.approx(5.0)

    def test_repr(self):
        assert "id=3" in repr(AgentState(agent_id=3, position=[0.0, 0.0]))


class TestAttraction:
    """Tests for the light-seeking displacement."""

    def test_fully_goal_directed_points_at_light(self):
        config = SimulationConfig(goal_directedness=1.0, base_speed=0.5)
        rng = np.random.default_rng(42)
        step = attraction(np.array([3.0, 4.0]), config, rng)
        np.testing.assert_allclose(step, [-0.3, -0.4])

    def test_magnitude_is_base_speed_when_pure(self):
        rng = np.random.default_rng(42)
        for g in (0.0, 1.0):
            config = SimulationConfig(goal_directedness=g, base_speed=0.5)
            step = attraction(np.array([1.0, 1.0]), config, rng)
            assert np.linalg.norm(step) == pytest.approx(0.5)

    def test_blend_never_exceeds_base_speed(self):
        config = SimulationConfig(goal_directedness=0.5, base_speed=0.5)
        rng = np.random.default_rng(42)
        for _ in range(50):
            step = attraction(np.array([2.0, -1.0]), config, rng)
            assert np.linalg.norm(step) <= 0.5 + 1e-12

    def test_at_light_directed_term_is_zero(self):
        """A Tadro sitting on the light gets no directed pull."""
        config = SimulationConfig(goal_directedness=1.0, light_position=(1.0, 1.0))
        rng = np.random.default_rng(42)
        step = attraction(np.array([1.0, 1.0]), config, rng)
        np.testing.assert_array_equal(step, [0.0, 0.0])
        assert np.all(np.isfinite(step))

    def test_random_part_reproducible(self):
        config = SimulationConfig(goal_directedness=0.0)
        a = attraction(np.zeros(2) + 1, config, np.random.default_rng(7))
        b = attraction(np.zeros(2) + 1, config, np.random.default_rng(7))
        np.testing.assert_array_equal(a, b)

    def test_light_position_respected(self):
        config = SimulationConfig(goal_directedness=1.0, light_position=(10.0, 0.0))
        step = attraction(np.array([0.0, 0.0]), config, np.random.default_rng(0))
        np.testing.assert_allclose(step, [config.base_speed, 0.0])


class TestInertia:
    """Tests for the persistence term."""

    def test_scaled_by_drag(self):
        config = SimulationConfig(drag_coefficient=0.5)
        np.testing.assert_allclose(inertia(np.array([1.0, -2.0]), config), [0.5, -1.0])

    def test_zero_before_first_step(self):
        np.testing.assert_array_equal(inertia(np.zeros(2), SimulationConfig()), [0.0, 0.0])


class TestRepulsion:
    """Tests for pairwise repulsion."""

    def test_magnitude_strictly_decreasing(self):
        config = SimulationConfig(interaction_range=1.0)
        distances = [0.1, 0.5, 1.0, 2.0, 5.0]
        magnitudes = [repulsion_magnitude(d, config) for d in distances]
        assert all(m1 > m2 for m1, m2 in zip(magnitudes, magnitudes[1:]))

    def test_magnitude_value(self):
        config = SimulationConfig(interaction_range=2.0, base_speed=0.5)
        assert repulsion_magnitude(2.0, config) == pytest.approx(np.exp(-1) * 0.5)

    def test_magnitude_over_array(self):
        config = SimulationConfig(interaction_range=1.0, base_speed=0.5)
        magnitudes = repulsion_magnitude(np.array([0.5, 1.0, 3.0]), config)
        np.testing.assert_allclose(magnitudes, 0.5 * np.exp([-0.5, -1.0, -3.0]))
        assert np.all(np.diff(magnitudes) < 0)

    def test_push_follows_magnitude(self, monkeypatch):
        """The push is as strong as repulsion_magnitude says, in the pair's direction."""
        from tadro_swarm.core import forces as forces_module

        monkeypatch.setattr(
            forces_module, "repulsion_magnitude", lambda d, config: np.full(np.shape(d), 2.0)
        )
        config = SimulationConfig(size=2)
        positions = np.array([[0.0, 0.0], [4.0, 0.0]])
        np.testing.assert_allclose(repulsion(0, positions, config), [-2.0, 0.0])

    def test_single_agent_is_zero(self):
        config = SimulationConfig(size=1)
        push = repulsion(0, np.array([[1.0, 2.0]]), config)
        np.testing.assert_array_equal(push, [0.0, 0.0])

    def test_points_away_from_other(self):
        config = SimulationConfig(size=2, base_speed=0.5, interaction_range=1.0)
        positions = np.array([[0.0, 0.0], [1.0, 0.0]])
        push = repulsion(0, positions, config)
        assert push[0] == pytest.approx(-np.exp(-1) * 0.5)
        assert push[1] == pytest.approx(0.0)

    def test_pair_is_antisymmetric(self):
        config = SimulationConfig(size=2)
        positions = np.array([[0.3, -1.0], [1.2, 0.4]])
        np.testing.assert_allclose(
            repulsion(0, positions, config), -repulsion(1, positions, config)
        )

    def test_contributions_sum(self):
        """Symmetric neighbours cancel out."""
        config = SimulationConfig(size=3)
        positions = np.array([[0.0, 0.0], [1.0, 0.0], [-1.0, 0.0]])
        np.testing.assert_allclose(repulsion(0, positions, config), [0.0, 0.0], atol=1e-15)

    def test_coincident_agents_raise(self):
        """Overlap raises instead of producing NaN."""
        config = SimulationConfig(size=3)
        positions = np.array([[1.0, 1.0], [1.0, 1.0], [4.0, 0.0]])
        with pytest.raises(DegenerateDistance) as excinfo:
            repulsion(0, positions, config)
        assert excinfo.value.agent_id == 1
        assert excinfo.value.other_ids == (2,)

    def test_degenerate_is_arithmetic_error(self):
        config = SimulationConfig(size=2)
        with pytest.raises(ArithmeticError):
            repulsion(1, np.zeros((2, 2)), config)

    def test_ignore_skips_partner(self):
        config = SimulationConfig(size=3)
        positions = np.array([[1.0, 1.0], [1.0, 1.0], [4.0, 1.0]])
        push = repulsion(0, positions, config, ignore=[1])
        assert np.all(np.isfinite(push))
        assert push[0] < 0


class TestComputeForces:
    """Tests for the combined Force Model."""

    def test_returns_all_three(self):
        config = SimulationConfig(size=2, drag_coefficient=0.5)
        positions = np.array([[3.0, 0.0], [-3.0, 0.0]])
        forces = compute_forces(
            0, positions, np.array([0.2, 0.0]), config, np.random.default_rng(1)
        )
        assert isinstance(forces, Forces)
        np.testing.assert_allclose(forces.inertia, [0.1, 0.0])
        np.testing.assert_allclose(forces.attraction, [-0.5, 0.0])
        assert forces.repulsion[0] > 0
        np.testing.assert_allclose(
            forces.total(), forces.attraction + forces.inertia + forces.repulsion
        )

    def test_does_not_modify_snapshot(self):
        config = SimulationConfig(size=2)
        positions = np.array([[3.0, 0.0], [-3.0, 0.0]])
        before = positions.copy()
        compute_forces(0, positions, np.zeros(2), config, np.random.default_rng(1))
        np.testing.assert_array_equal(positions, before)

    def test_degenerate_leaves_generator_untouched(self):
        """A raising call draws nothing, so a retry with `ignore` stays in step."""
        config = SimulationConfig(size=2)
        positions = np.array([[1.0, 1.0], [1.0, 1.0]])
        rng = np.random.default_rng(5)
        with pytest.raises(DegenerateDistance):
            compute_forces(0, positions, np.zeros(2), config, rng)
        assert rng.uniform() == np.random.default_rng(5).uniform()
