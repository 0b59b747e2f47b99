# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They cover rendering properties, default window sizes, camera motion and
the containment defaults that the config file may override.
"""

# Visualization settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a resizable window (WINDOW_WIDTH x WINDOW_HEIGHT).
FULLSCREEN = False
WINDOW_WIDTH = 1200
WINDOW_HEIGHT = 900
FPS = 60
BACKGROUND_COLOR = (0, 0, 0)

# --- Trail Effect ---
# Alpha value of the black overlay drawn each frame (0-255). Lower is a longer trail.
TRAIL_ALPHA = 20

# --- Scene Transformations ---
ROTATION_SPEED = 0.005   # Radians per frame around the Y axis
ROTATION_X_RATIO = 0.5   # X rotation runs at half the Y rate
ZOOM_AMPLITUDE = 0.3
ZOOM_SPEED = 0.005
BASE_ZOOM = 1.0
# Vertical field of view of the perspective camera (radians).
FIELD_OF_VIEW = 1.0471975511965976  # pi / 3

# --- Wireframes ---
SPHERE_STROKE = (255, 255, 255, 150)
SPHERE_STROKE_WIDTH = 1
CYLINDER_STROKE = (255, 255, 255, 200)
CYLINDER_STROKE_WIDTH = 2
# Segments per ring and number of rings for the wireframe meshes.
WIREFRAME_SEGMENTS = 24
SPHERE_RINGS = 16

# --- Particles ---
# Highlight offset and size, as fractions of the on-screen radius.
PARTICLE_HIGHLIGHT_OFFSET = 0.35
PARTICLE_HIGHLIGHT_RATIO = 0.4
PARTICLE_HIGHLIGHT_MIX = 0.6

# --- Containment Defaults ---
DEFAULT_PARTICLE_COUNT = 25
DEFAULT_CYLINDER_RADIUS = 200.0
DEFAULT_CYLINDER_HEIGHT = 400.0
DEFAULT_PARTICLE_RADIUS = 5.0
# Gap between the cylinder's corner rim and the enclosing sphere.
SPHERE_MARGIN = 20.0
DEFAULT_MIN_SPEED = 1.0
DEFAULT_MAX_SPEED = 3.0

# Color channels are sampled in this range to keep particles bright.
COLOR_CHANNEL_MIN = 100
COLOR_CHANNEL_MAX = 255
