# simulation.py
"""
Handles the core simulation logic and physics calculations.

This module advances the particle system by one tick: every particle moves
along its velocity and reflects elastically off the cylinder's curved wall
and flat caps. Particles never interact with each other.
"""
import logging
import math
import numpy as np
from typing import Tuple
from numba import jit

from geometry import ContainmentGeometry
from particle import ParticleSystem

# --- Data Contracts ---
#
# update_particle(position, velocity, geometry) -> (position, velocity):
#   - Inputs: 3-vectors (any sequence of floats) and the containment geometry.
#   - Outputs: new float64 arrays; the inputs are not modified.
#   - Invariants: the returned position satisfies
#     sqrt(x^2 + z^2) <= geometry.wall_limit and |y| <= geometry.cap_limit.
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem):
#     - Inputs: An initialized ParticleSystem object. Its geometry is used
#       for every step.
#     - Side Effects: Stores a reference to the particles.
#
#   - step(self) -> None:
#     - Side Effects: Modifies the positions and velocities of the internal
#       ParticleSystem in place. Updates step and bounce counters.
#     - Invariants: Particle count remains constant. Every particle is inside
#       the shrunk cylinder after the step.


@jit(nopython=True)
def _update_particle_numba(pos, vel, wall_limit, cap_limit):
    """
    Numba-jitted update of a single particle, in place.

    One tick of motion (no delta-time) followed by the side-wall and cap
    checks. The checks are independent, so a particle near a rim can be
    clamped on both in the same tick.

    Returns:
        (wall_bounces, cap_bounces) for this particle, each 0 or 1.
    """
    # 1. Integrate position
    pos[0] += vel[0]
    pos[1] += vel[1]
    pos[2] += vel[2]

    wall_bounces = 0
    cap_bounces = 0

    # 2. Curved wall. Y is the cylinder axis, so only X and Z take part.
    horiz_dist = math.sqrt(pos[0] * pos[0] + pos[2] * pos[2])
    if horiz_dist > wall_limit:
        nx = pos[0] / horiz_dist
        nz = pos[2] / horiz_dist
        dot = vel[0] * nx + vel[2] * nz
        # Only reflect a particle that is still moving outward.
        if dot > 0:
            vel[0] -= 2.0 * dot * nx
            vel[2] -= 2.0 * dot * nz
            wall_bounces = 1
        pos[0] = nx * wall_limit
        pos[2] = nz * wall_limit

    # 3. Top and bottom caps
    if pos[1] > cap_limit:
        pos[1] = cap_limit
        vel[1] = -vel[1]
        cap_bounces = 1
    if pos[1] < -cap_limit:
        pos[1] = -cap_limit
        vel[1] = -vel[1]
        cap_bounces = 1

    return wall_bounces, cap_bounces


@jit(nopython=True)
def _update_particles_numba(positions, velocities, wall_limit, cap_limit):
    """
    Numba-jitted update of the whole population, in place.

    Returns the total number of wall and cap bounces in this tick.
    """
    wall_bounces = 0
    cap_bounces = 0
    for i in range(positions.shape[0]):
        w, c = _update_particle_numba(positions[i], velocities[i], wall_limit, cap_limit)
        wall_bounces += w
        cap_bounces += c
    return wall_bounces, cap_bounces


def update_particle(position, velocity, geometry: ContainmentGeometry) -> Tuple[np.ndarray, np.ndarray]:
    """
    Advances one particle by one tick without touching the inputs.

    Args:
        position: The particle centre (x, y, z).
        velocity: The particle velocity (vx, vy, vz), in units per tick.
        geometry (ContainmentGeometry): The container to collide against.

    Returns:
        Tuple[np.ndarray, np.ndarray]: The new position and velocity.
    """
    pos = np.array(position, dtype=np.float64)
    vel = np.array(velocity, dtype=np.float64)
    _update_particle_numba(pos, vel, float(geometry.wall_limit), float(geometry.cap_limit))
    return pos, vel


class Simulation:
    """
    Advances every particle once per frame.
    """
    def __init__(self, particles: ParticleSystem):
        """
        Initializes the simulation.

        Args:
            particles (ParticleSystem): The particle system to simulate.
        """
        self.particles = particles
        self.geometry = particles.geometry
        # Numba wants plain floats, not properties.
        self.wall_limit = float(self.geometry.wall_limit)
        self.cap_limit = float(self.geometry.cap_limit)

        self.step_count = 0
        self.wall_bounces = 0
        self.cap_bounces = 0

        logging.info(
            f"Simulation initialized: wall limit {self.wall_limit:.2f}, "
            f"cap limit +/-{self.cap_limit:.2f}."
        )

    def step(self):
        """
        Executes one tick of the simulation.
        """
        wall_bounces, cap_bounces = _update_particles_numba(
            self.particles.positions, self.particles.velocities,
            self.wall_limit, self.cap_limit
        )
        self.wall_bounces += wall_bounces
        self.cap_bounces += cap_bounces
        self.step_count += 1

    def kinetic_energy(self) -> float:
        """Total kinetic energy, taking every particle to have unit mass."""
        return float(0.5 * np.sum(self.particles.velocities ** 2))

    def max_containment_error(self) -> float:
        """
        How far the worst particle sits outside the shrunk cylinder.

        Zero (up to rounding) whenever the containment invariant holds.
        """
        positions = self.particles.positions
        if positions.shape[0] == 0:
            return 0.0
        horiz_dist = np.hypot(positions[:, 0], positions[:, 2])
        wall_excess = np.max(horiz_dist) - self.wall_limit
        cap_excess = np.max(np.abs(positions[:, 1])) - self.cap_limit
        return float(max(wall_excess, cap_excess, 0.0))
