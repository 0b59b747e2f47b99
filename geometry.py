# geometry.py
"""
Containment geometry for the particle simulation.

The inner container is a cylinder centred at the origin with its axis along
Y. The outer container is a sphere that encloses the cylinder's rim with a
fixed margin. Both are constants for the lifetime of the process.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, Any

from constants import (
    DEFAULT_CYLINDER_RADIUS, DEFAULT_CYLINDER_HEIGHT, DEFAULT_PARTICLE_RADIUS,
    SPHERE_MARGIN
)

# --- Data Contracts ---
#
# class ContainmentGeometry (frozen):
#   - cylinder_radius: float, radius of the cylindrical wall.
#   - cylinder_height: float, full height of the cylinder (caps at +/- h/2).
#   - particle_radius: float, radius shared by every particle.
#   - sphere_margin: float, gap between the cylinder rim and the outer sphere.
#
#   - wall_limit -> float: largest horizontal distance a particle centre
#     may reach, cylinder_radius - particle_radius.
#   - cap_limit -> float: largest |y| a particle centre may reach,
#     cylinder_height / 2 - particle_radius.
#   - outer_sphere_radius -> float:
#     sqrt(cylinder_radius^2 + (cylinder_height / 2)^2) + sphere_margin.
#
#   - validate() -> ContainmentGeometry:
#     - Errors: ValueError if a size is not positive, the margin is negative,
#       or the particle does not fit inside the cylinder.


@dataclass(frozen=True)
class ContainmentGeometry:
    """The cylindrical boundary and the sphere derived from it."""
    cylinder_radius: float = DEFAULT_CYLINDER_RADIUS
    cylinder_height: float = DEFAULT_CYLINDER_HEIGHT
    particle_radius: float = DEFAULT_PARTICLE_RADIUS
    sphere_margin: float = SPHERE_MARGIN

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "ContainmentGeometry":
        """Builds the geometry from the `simulation_parameters` config section."""
        return cls(
            cylinder_radius=float(params.get('cylinder_radius', DEFAULT_CYLINDER_RADIUS)),
            cylinder_height=float(params.get('cylinder_height', DEFAULT_CYLINDER_HEIGHT)),
            particle_radius=float(params.get('particle_radius', DEFAULT_PARTICLE_RADIUS)),
            sphere_margin=float(params.get('sphere_margin', SPHERE_MARGIN)),
        )

    @property
    def wall_limit(self) -> float:
        return self.cylinder_radius - self.particle_radius

    @property
    def cap_limit(self) -> float:
        return self.cylinder_height / 2 - self.particle_radius

    @property
    def outer_sphere_radius(self) -> float:
        return math.sqrt(self.cylinder_radius ** 2 + (self.cylinder_height / 2) ** 2) + self.sphere_margin

    def validate(self) -> "ContainmentGeometry":
        """
        Checks the preconditions the collision update relies on.

        Meant to run once at startup. Returns self so it can be chained
        after construction.

        Raises:
            ValueError: If the geometry cannot contain a particle.
        """
        problems = []
        if self.cylinder_radius <= 0:
            problems.append(f"cylinder_radius must be positive (got {self.cylinder_radius})")
        if self.cylinder_height <= 0:
            problems.append(f"cylinder_height must be positive (got {self.cylinder_height})")
        if self.particle_radius <= 0:
            problems.append(f"particle_radius must be positive (got {self.particle_radius})")
        if self.sphere_margin < 0:
            problems.append(f"sphere_margin must not be negative (got {self.sphere_margin})")
        if self.particle_radius >= self.cylinder_radius:
            problems.append(
                f"particle_radius ({self.particle_radius}) must be smaller than "
                f"cylinder_radius ({self.cylinder_radius})"
            )
        if self.particle_radius >= self.cylinder_height / 2:
            problems.append(
                f"particle_radius ({self.particle_radius}) must be smaller than half "
                f"the cylinder_height ({self.cylinder_height / 2})"
            )

        if problems:
            msg = "Configuration error: " + "; ".join(problems) + "."
            logging.critical(msg)
            raise ValueError(msg)

        logging.info(
            f"Containment geometry validated: cylinder r={self.cylinder_radius}, "
            f"h={self.cylinder_height}, particle r={self.particle_radius}, "
            f"outer sphere r={self.outer_sphere_radius:.2f}."
        )
        return self
