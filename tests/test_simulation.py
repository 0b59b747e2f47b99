import math

import numpy as np
import pytest

from particle import ParticleSystem
from simulation import Simulation, update_particle


def test_side_wall_scenario(geometry):
    pos, vel = update_particle((199.0, 0.0, 0.0), (5.0, 0.0, 0.0), geometry)
    assert math.hypot(pos[0], pos[2]) == pytest.approx(195.0)
    np.testing.assert_allclose(pos, [195.0, 0.0, 0.0])
    np.testing.assert_allclose(vel, [-5.0, 0.0, 0.0])


def test_interior_particle_only_moves(geometry):
    pos, vel = update_particle((10.0, -20.0, 30.0), (1.0, 2.0, -3.0), geometry)
    np.testing.assert_allclose(pos, [11.0, -18.0, 27.0])
    np.testing.assert_allclose(vel, [1.0, 2.0, -3.0])


def test_inputs_are_not_modified(geometry):
    position = np.array([199.0, 0.0, 0.0])
    velocity = np.array([5.0, 0.0, 0.0])
    update_particle(position, velocity, geometry)
    np.testing.assert_array_equal(position, [199.0, 0.0, 0.0])
    np.testing.assert_array_equal(velocity, [5.0, 0.0, 0.0])


def test_top_cap_flips_vertical_velocity(geometry):
    eps = 0.25
    pos, vel = update_particle((0.0, geometry.cap_limit + eps, 0.0), (0.0, 2.0, 0.0), geometry)
    assert pos[1] == geometry.cap_limit
    assert vel[1] == -2.0


def test_bottom_cap_flips_vertical_velocity(geometry):
    pos, vel = update_particle((3.0, -194.0, -4.0), (0.5, -1.5, 0.5), geometry)
    assert pos[1] == -geometry.cap_limit
    np.testing.assert_allclose(vel, [0.5, 1.5, 0.5])
    np.testing.assert_allclose(pos[[0, 2]], [3.5, -3.5])


def test_tangential_motion_is_reclamped_not_reflected(geometry):
    # Moving along the wall (dot == 0): no reflection, but still pulled back
    # onto the boundary circle.
    pos, vel = update_particle((195.5, 0.0, 0.0), (0.0, 2.0, 0.0), geometry)
    np.testing.assert_array_equal(vel, [0.0, 2.0, 0.0])
    np.testing.assert_allclose(pos, [195.0, 2.0, 0.0])


def test_receding_particle_is_not_reflected_again(geometry):
    pos, vel = update_particle((196.0, 0.0, 0.0), (-0.5, 0.0, 0.0), geometry)
    np.testing.assert_array_equal(vel, [-0.5, 0.0, 0.0])
    np.testing.assert_allclose(pos, [195.0, 0.0, 0.0])


@pytest.mark.parametrize("angle", [0.0, 0.7, 1.9, 3.1, 4.4, 5.8])
def test_side_bounce_preserves_speed(angle, geometry):
    start = (194.0 * math.cos(angle), 0.0, 194.0 * math.sin(angle))
    heading = angle + 0.3
    velocity = (3.0 * math.cos(heading), 0.1, 3.0 * math.sin(heading))

    pos, vel = update_particle(start, velocity, geometry)

    assert math.hypot(pos[0], pos[2]) == pytest.approx(geometry.wall_limit)
    assert np.linalg.norm(vel) == pytest.approx(np.linalg.norm(velocity))
    assert vel[1] == 0.1
    # Now heading back into the cylinder
    normal = np.array([pos[0], 0.0, pos[2]]) / geometry.wall_limit
    assert np.dot(vel, normal) < 0


def test_corner_clamps_both_axes_in_one_tick(geometry):
    pos, vel = update_particle((194.0, 194.0, 0.0), (3.0, 3.0, 0.0), geometry)
    np.testing.assert_allclose(pos, [195.0, 195.0, 0.0])
    np.testing.assert_allclose(vel, [-3.0, -3.0, 0.0])


def test_containment_holds_over_many_steps(geometry):
    particles = ParticleSystem(
        {'seed': 11, 'particle_count': 300, 'min_speed': 1.0, 'max_speed': 25.0}, geometry
    )
    sim = Simulation(particles)
    for _ in range(2000):
        sim.step()
        assert sim.max_containment_error() < 1e-9

    horiz = np.hypot(particles.positions[:, 0], particles.positions[:, 2])
    assert horiz.max() <= geometry.wall_limit + 1e-9
    assert np.abs(particles.positions[:, 1]).max() <= geometry.cap_limit


def test_kinetic_energy_is_conserved(geometry):
    particles = ParticleSystem({'seed': 5, 'particle_count': 100}, geometry)
    sim = Simulation(particles)
    initial = sim.kinetic_energy()
    for _ in range(1000):
        sim.step()
    assert sim.kinetic_energy() == pytest.approx(initial, rel=1e-9)
    assert sim.wall_bounces > 0
    assert sim.cap_bounces > 0


def test_batch_step_matches_single_particle_update(geometry):
    particles = ParticleSystem({'seed': 21, 'particle_count': 50, 'max_speed': 40.0}, geometry)
    sim = Simulation(particles)
    for _ in range(10):
        before_pos = particles.positions.copy()
        before_vel = particles.velocities.copy()
        sim.step()
        for i in range(len(particles)):
            pos, vel = update_particle(before_pos[i], before_vel[i], geometry)
            np.testing.assert_allclose(particles.positions[i], pos, rtol=1e-12, atol=1e-12)
            np.testing.assert_allclose(particles.velocities[i], vel, rtol=1e-12, atol=1e-12)


def test_step_counts_ticks_and_bounces(geometry):
    particles = ParticleSystem({'seed': 0, 'particle_count': 2}, geometry)
    particles.positions[:] = [[199.0, 0.0, 0.0], [0.0, 194.0, 0.0]]
    particles.velocities[:] = [[5.0, 0.0, 0.0], [0.0, 3.0, 0.0]]
    sim = Simulation(particles)

    sim.step()

    assert sim.step_count == 1
    assert sim.wall_bounces == 1
    assert sim.cap_bounces == 1
    assert len(particles) == 2
    np.testing.assert_allclose(particles.velocities, [[-5.0, 0.0, 0.0], [0.0, -3.0, 0.0]])


def test_max_containment_error_reports_escapes(geometry):
    particles = ParticleSystem({'seed': 0, 'particle_count': 1}, geometry)
    particles.positions[:] = [[0.0, 200.0, 0.0]]
    sim = Simulation(particles)
    assert sim.max_containment_error() == pytest.approx(5.0)
