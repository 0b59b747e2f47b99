# visualization.py
"""
Handles the visualization of the particle simulation using Pygame.

The renderer only reads the per-frame particle data and the containment
constants. Camera rotation, zoom oscillation and the fading trail are
presentation effects and never feed back into the physics.
"""
import logging
import math
import pygame
import numpy as np
from typing import Any, Dict, List, Optional, Tuple

from constants import (
    FULLSCREEN, WINDOW_WIDTH, WINDOW_HEIGHT, FPS, BACKGROUND_COLOR, TRAIL_ALPHA,
    ROTATION_SPEED, ROTATION_X_RATIO, ZOOM_AMPLITUDE, ZOOM_SPEED, BASE_ZOOM,
    FIELD_OF_VIEW, SPHERE_STROKE, SPHERE_STROKE_WIDTH, CYLINDER_STROKE,
    CYLINDER_STROKE_WIDTH, WIREFRAME_SEGMENTS, SPHERE_RINGS,
    PARTICLE_HIGHLIGHT_OFFSET, PARTICLE_HIGHLIGHT_RATIO, PARTICLE_HIGHLIGHT_MIX
)
from geometry import ContainmentGeometry
from particle import ParticleSystem

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Simulation


# --- Data Contracts ---
#
# zoom_factor(frame: int, ...) -> float:
#   - base_zoom + amplitude * sin(frame * speed).
#
# view_rotation(frame: int, ...) -> np.ndarray:
#   - (3, 3) rotation: about Y by frame * speed, then about X by half that.
#
# project(points, rotation, zoom, width, height) -> (screen, depth, scale):
#   - Inputs: (N, 3) world points.
#   - Outputs: (N, 2) pixel coordinates, (N,) camera-space depth (larger is
#     closer to the viewer), (N,) perspective scale. The z=0 plane maps 1:1
#     to pixels before zoom; the origin lands on the canvas centre.
#
# class Visualizer:
#   - __init__(self, geometry: ContainmentGeometry, vis_params: Optional[dict] = None):
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - draw(self, particles: ParticleSystem, simulation: "Simulation") -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Fades the previous frame, renders the wireframes and
#       particles, and handles Pygame events.


def zoom_factor(
    frame: int,
    base_zoom: float = BASE_ZOOM,
    amplitude: float = ZOOM_AMPLITUDE,
    speed: float = ZOOM_SPEED
) -> float:
    """Zoom that oscillates slowly around base_zoom."""
    return base_zoom + amplitude * math.sin(frame * speed)


def view_rotation(
    frame: int,
    speed: float = ROTATION_SPEED,
    x_ratio: float = ROTATION_X_RATIO
) -> np.ndarray:
    """Slow tumble of the scene: a Y rotation followed by a slower X rotation."""
    a = frame * speed
    b = a * x_ratio
    ca, sa = math.cos(a), math.sin(a)
    cb, sb = math.cos(b), math.sin(b)
    rot_y = np.array([[ca, 0.0, sa], [0.0, 1.0, 0.0], [-sa, 0.0, ca]])
    rot_x = np.array([[1.0, 0.0, 0.0], [0.0, cb, -sb], [0.0, sb, cb]])
    # X is applied to the points first.
    return rot_y @ rot_x


def project(
    points: np.ndarray,
    rotation: np.ndarray,
    zoom: float,
    width: int,
    height: int,
    fov: float = FIELD_OF_VIEW
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Perspective projection of world points onto the canvas.

    The camera sits on the +Z axis at the distance where the z=0 plane is
    drawn at one pixel per unit.
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    camera_distance = (height / 2) / math.tan(fov / 2)

    view = zoom * (points @ rotation.T)
    depth = view[:, 2]
    # Keep points that swing behind the camera in a small window from
    # blowing up the scale.
    denom = np.maximum(camera_distance - depth, camera_distance * 0.05)
    scale = camera_distance / denom

    screen = np.empty((points.shape[0], 2), dtype=np.float64)
    screen[:, 0] = width / 2 + view[:, 0] * scale
    screen[:, 1] = height / 2 + view[:, 1] * scale
    return screen, depth, scale


def sphere_wireframe(radius: float, rings: int = SPHERE_RINGS, segments: int = WIREFRAME_SEGMENTS) -> List[np.ndarray]:
    """Latitude and longitude rings of a sphere, each an (M, 3) polyline."""
    lines = []
    theta = np.linspace(0.0, 2.0 * np.pi, segments, endpoint=False)
    # Latitudes, skipping the poles
    for phi in np.linspace(0.0, np.pi, rings + 1)[1:-1]:
        ring_radius = radius * math.sin(phi)
        y = radius * math.cos(phi)
        lines.append(np.column_stack([
            ring_radius * np.cos(theta), np.full(segments, y), ring_radius * np.sin(theta)
        ]))
    # Longitudes as full great circles through the poles
    phi = np.linspace(0.0, 2.0 * np.pi, rings * 2, endpoint=False)
    for t in theta[: segments // 2]:
        lines.append(np.column_stack([
            radius * np.sin(phi) * math.cos(t),
            radius * np.cos(phi),
            radius * np.sin(phi) * math.sin(t),
        ]))
    return lines


def cylinder_wireframe(radius: float, height: float, segments: int = WIREFRAME_SEGMENTS) -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """Cap rings (closed polylines) and vertical struts of a Y-axis cylinder."""
    theta = np.linspace(0.0, 2.0 * np.pi, segments, endpoint=False)
    x = radius * np.cos(theta)
    z = radius * np.sin(theta)
    half = height / 2
    rings = [
        np.column_stack([x, np.full(segments, y), z]) for y in (-half, half)
    ]
    struts = [
        np.array([[x[i], -half, z[i]], [x[i], half, z[i]]]) for i in range(segments)
    ]
    return rings, struts


def _highlight_color(color: Tuple[int, int, int]) -> Tuple[int, int, int]:
    return tuple(int(c + (255 - c) * PARTICLE_HIGHLIGHT_MIX) for c in color)


class Visualizer:
    """
    Renders the containers and the particle system with a fading trail.
    """
    def __init__(self, geometry: ContainmentGeometry, vis_params: Optional[Dict[str, Any]] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        self.geometry = geometry
        self.fps = vis_params.get('fps', FPS)
        self.rotation_speed = vis_params.get('rotation_speed', ROTATION_SPEED)
        self.zoom_amplitude = vis_params.get('zoom_amplitude', ZOOM_AMPLITUDE)
        self.zoom_speed = vis_params.get('zoom_speed', ZOOM_SPEED)
        self.base_zoom = vis_params.get('base_zoom', BASE_ZOOM)
        self.trail_alpha = vis_params.get('trail_alpha', TRAIL_ALPHA)

        pygame.init()

        if vis_params.get('fullscreen', FULLSCREEN):
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width = vis_params.get('width', WINDOW_WIDTH)
            height = vis_params.get('height', WINDOW_HEIGHT)
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        pygame.display.set_caption("Cylinder Particles")
        self.clock = pygame.time.Clock()
        self._create_surfaces(width, height)

        # The containers never change, so their meshes are built once.
        self.sphere_lines = sphere_wireframe(geometry.outer_sphere_radius)
        self.cylinder_rings, self.cylinder_struts = cylinder_wireframe(
            geometry.cylinder_radius, geometry.cylinder_height
        )

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")
        logging.debug(
            f"Wireframes built: {len(self.sphere_lines)} sphere lines, "
            f"{len(self.cylinder_rings)} cylinder rings, {len(self.cylinder_struts)} struts."
        )

    def _create_surfaces(self, width: int, height: int):
        """(Re)creates the canvas and overlays for the given window size."""
        self.width = width
        self.height = height
        # The canvas persists between frames so the trail can fade out.
        self.canvas = pygame.Surface((width, height))
        self.canvas.fill(BACKGROUND_COLOR)
        self.trail_surface = pygame.Surface((width, height), pygame.SRCALPHA)
        self.trail_surface.fill((BACKGROUND_COLOR[0], BACKGROUND_COLOR[1], BACKGROUND_COLOR[2], self.trail_alpha))
        self.wire_surface = pygame.Surface((width, height), pygame.SRCALPHA)

    def _handle_events(self) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False

            if event.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self._create_surfaces(event.w, event.h)
                logging.info(f"Window resized to {event.w}x{event.h}.")
        return True

    def _draw_polyline(self, points: np.ndarray, rotation: np.ndarray, zoom: float,
                       color: tuple, width: int, closed: bool):
        screen, _, _ = project(points, rotation, zoom, self.width, self.height)
        pygame.draw.lines(self.wire_surface, color, closed, screen.tolist(), width)

    def _draw_wireframes(self, rotation: np.ndarray, zoom: float):
        self.wire_surface.fill((0, 0, 0, 0))
        for line in self.sphere_lines:
            self._draw_polyline(line, rotation, zoom, SPHERE_STROKE, SPHERE_STROKE_WIDTH, True)
        for ring in self.cylinder_rings:
            self._draw_polyline(ring, rotation, zoom, CYLINDER_STROKE, CYLINDER_STROKE_WIDTH, True)
        for strut in self.cylinder_struts:
            self._draw_polyline(strut, rotation, zoom, CYLINDER_STROKE, CYLINDER_STROKE_WIDTH, False)
        self.canvas.blit(self.wire_surface, (0, 0))

    def _draw_particles(self, particles: ParticleSystem, rotation: np.ndarray, zoom: float):
        frame_data = particles.render_data()
        if not frame_data:
            return

        positions = np.array([position for position, _, _ in frame_data])
        screen, depth, scale = project(positions, rotation, zoom, self.width, self.height)

        # No depth buffer, so paint the farthest particles first.
        for i in np.argsort(depth):
            _, color, radius = frame_data[i]
            center = (screen[i, 0], screen[i, 1])
            screen_radius = max(1.0, radius * zoom * scale[i])
            pygame.draw.circle(self.canvas, color, center, screen_radius)

            offset = screen_radius * PARTICLE_HIGHLIGHT_OFFSET
            pygame.draw.circle(
                self.canvas,
                _highlight_color(color),
                (center[0] - offset, center[1] - offset),
                max(1.0, screen_radius * PARTICLE_HIGHLIGHT_RATIO)
            )

    def draw(self, particles: ParticleSystem, simulation: "Simulation") -> bool:
        """
        Draws the containers and all particles, and handles events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        if not self._handle_events():
            return False

        frame = simulation.step_count
        zoom = zoom_factor(frame, self.base_zoom, self.zoom_amplitude, self.zoom_speed)
        rotation = view_rotation(frame, self.rotation_speed)

        # 1. Fade the previous frame instead of clearing it, leaving trails.
        self.canvas.blit(self.trail_surface, (0, 0))

        # 2. Containers, then particles on top
        self._draw_wireframes(rotation, zoom)
        self._draw_particles(particles, rotation, zoom)

        self.screen.blit(self.canvas, (0, 0))
        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
