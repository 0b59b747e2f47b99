# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the ParticleSystem class, which is responsible for
initializing and storing particle data (position, velocity, color) in
NumPy arrays, plus the sampling helpers used to seed the population inside
the cylinder.
"""
import logging
import numpy as np
from typing import Dict, Any, List, NamedTuple, Optional, Tuple

from constants import (
    DEFAULT_PARTICLE_COUNT, DEFAULT_MIN_SPEED, DEFAULT_MAX_SPEED,
    COLOR_CHANNEL_MIN, COLOR_CHANNEL_MAX
)
from geometry import ContainmentGeometry

# --- Data Contracts ---
#
# random_points_in_cylinder(rng, count, geometry) -> np.ndarray:
#   - Outputs: (count, 3) float64 positions, uniform over the volume of the
#     cylinder shrunk by the particle radius (horizontal distance
#     <= geometry.wall_limit, |y| <= geometry.cap_limit).
#
# random_velocities(rng, count, min_speed, max_speed) -> np.ndarray:
#   - Outputs: (count, 3) float64 velocities with directions uniform on the
#     unit sphere and speeds uniform in [min_speed, max_speed).
#
# random_colors(rng, count) -> np.ndarray:
#   - Outputs: (count, 3) int32 RGB triples, each channel in [100, 255].
#
# class ParticleSystem:
#   - __init__(self, params: Dict[str, Any], geometry: ContainmentGeometry,
#              rng: Optional[np.random.Generator] = None):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": int (used only when rng is None)
#         - "particle_count": int
#         - "min_speed", "max_speed": float
#       - geometry: validated containment geometry.
#       - rng: optional random source, for reproducible tests.
#     - Errors: ValueError for a negative particle count or a bad speed range.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 3) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 3) of dtype float64.
#       - self.colors is a NumPy array of shape (N, 3) of dtype int32.
#       - N never changes after construction.
#
#   - render_data(self) -> List[Tuple[position, color, radius]]:
#     - The per-frame contract consumed by the renderer.


class Particle(NamedTuple):
    """A snapshot of one particle's state."""
    position: Tuple[float, float, float]
    velocity: Tuple[float, float, float]
    color: Tuple[int, int, int]
    radius: float


def random_points_in_cylinder(
    rng: np.random.Generator, count: int, geometry: ContainmentGeometry
) -> np.ndarray:
    """
    Samples points uniformly over the volume of the shrunk cylinder.

    The radial coordinate is sqrt(u) * R so that the density per unit area
    is constant across the disk; a linear radius would crowd the axis.
    """
    angle = rng.uniform(0.0, 2.0 * np.pi, size=count)
    rad = np.sqrt(rng.uniform(0.0, 1.0, size=count)) * geometry.wall_limit
    y = rng.uniform(-geometry.cap_limit, geometry.cap_limit, size=count)

    points = np.empty((count, 3), dtype=np.float64)
    points[:, 0] = rad * np.cos(angle)
    points[:, 1] = y
    points[:, 2] = rad * np.sin(angle)
    return points


def random_velocities(
    rng: np.random.Generator,
    count: int,
    min_speed: float = DEFAULT_MIN_SPEED,
    max_speed: float = DEFAULT_MAX_SPEED
) -> np.ndarray:
    """Random directions on the unit sphere scaled by a uniform speed."""
    # Archimedes: a uniform height on [-1, 1] plus a uniform azimuth gives a
    # uniform direction on the sphere.
    angle = rng.uniform(0.0, 2.0 * np.pi, size=count)
    vz = rng.uniform(-1.0, 1.0, size=count)
    ring = np.sqrt(1.0 - vz * vz)

    directions = np.empty((count, 3), dtype=np.float64)
    directions[:, 0] = ring * np.cos(angle)
    directions[:, 1] = ring * np.sin(angle)
    directions[:, 2] = vz

    speeds = rng.uniform(min_speed, max_speed, size=count)
    return directions * speeds[:, np.newaxis]


def random_colors(rng: np.random.Generator, count: int) -> np.ndarray:
    return rng.integers(
        low=COLOR_CHANNEL_MIN,
        high=COLOR_CHANNEL_MAX + 1,
        size=(count, 3),
        dtype=np.int32
    )


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(
        self,
        params: Dict[str, Any],
        geometry: ContainmentGeometry,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Initializes the particle system.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            geometry (ContainmentGeometry): The container the particles live in.
            rng (Optional[np.random.Generator]): Random source. Defaults to a
                generator seeded from params["seed"].
        """
        self.particle_count = int(params.get('particle_count', DEFAULT_PARTICLE_COUNT))
        self.min_speed = float(params.get('min_speed', DEFAULT_MIN_SPEED))
        self.max_speed = float(params.get('max_speed', DEFAULT_MAX_SPEED))
        self.seed = params.get('seed')
        self.geometry = geometry
        self.radius = geometry.particle_radius

        if self.particle_count < 0:
            msg = f"Configuration error: particle_count must not be negative (got {self.particle_count})."
            logging.critical(msg)
            raise ValueError(msg)
        if not 0 <= self.min_speed <= self.max_speed:
            msg = (
                f"Configuration error: speed range [{self.min_speed}, {self.max_speed}) "
                f"must satisfy 0 <= min_speed <= max_speed."
            )
            logging.critical(msg)
            raise ValueError(msg)

        # Rule 12: All randomness is controlled by a single master seed,
        # unless the caller hands in its own generator.
        self.rng = rng if rng is not None else np.random.default_rng(self.seed)

        self.positions = random_points_in_cylinder(self.rng, self.particle_count, geometry)
        self.velocities = random_velocities(
            self.rng, self.particle_count, self.min_speed, self.max_speed
        )
        self.colors = random_colors(self.rng, self.particle_count)

        logging.info(f"ParticleSystem initialized with {self.particle_count} particles.")
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}, "
            f"Colors shape: {self.colors.shape}"
        )

    def __len__(self) -> int:
        return self.particle_count

    def particle(self, index: int) -> Particle:
        """Returns a copy of one particle's state."""
        return Particle(
            position=tuple(float(c) for c in self.positions[index]),
            velocity=tuple(float(c) for c in self.velocities[index]),
            color=tuple(int(c) for c in self.colors[index]),
            radius=self.radius,
        )

    def render_data(self) -> List[Tuple[Tuple[float, float, float], Tuple[int, int, int], float]]:
        """Position, color and radius of every particle, in index order."""
        return [
            (
                tuple(float(c) for c in self.positions[i]),
                tuple(int(c) for c in self.colors[i]),
                self.radius,
            )
            for i in range(self.particle_count)
        ]
