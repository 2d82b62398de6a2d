# constants.py

"""
Application Constants

This module defines static configuration values for the application's framework.
These are not expected to change between simulation runs.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Screen dimensions
WIDTH = 1600  # Pixels
HEIGHT = 900  # Pixels

# Framerate
FPS = 60  # Frames per second

# Colors (RGB)
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
PANEL_BACKGROUND = (8, 14, 28, 200)  # RGBA
PANEL_ACCENT = (0, 204, 255)
PANEL_TEXT = (200, 230, 255)

# Window Title
TITLE = "Accretion Disk"
SUBTITLE = "Relativistic Visualization"

# Disk temperature palette.
# Inner (hot) regions are cyan-white, outer (cold) regions deep blue.
DISK_COLORS = {
    'hot': (0, 255, 255),    # Cyan-white (hottest, inner regions)
    'warm': (0, 204, 255),   # Bright blue
    'cool': (0, 102, 255),   # Deep blue
    'cold': (0, 51, 170),    # Dark blue (coolest, outer regions)
}

# Event horizon rim and central light
HORIZON_GLOW_COLOR = (0, 255, 204)

# Glow rings drawn over the disk plane
GLOW_RING_COUNT = 3
GLOW_RING_HALF_WIDTH = 0.5   # World units either side of the ring radius
GLOW_RING_BASE_OPACITY = 0.05
GLOW_RING_SEGMENTS = 64

# Decorative wobble near the center of the disk
WOBBLE_AMPLITUDE = 0.2
WOBBLE_FALLOFF = 3.0         # World units; perturbation = exp(-r / falloff) * amplitude
WOBBLE_FREQUENCY = 3.0       # Radians per second
WOBBLE_INDEX_PHASE = 0.1     # Phase offset between neighbouring particles
VERTICAL_FREQUENCY = 2.0     # Radians per second

# Starfield
STARFIELD_RADIUS = 200.0     # World units
STAR_TWINKLE_FRACTION = 0.01

# Camera projection
NEAR_PLANE = 0.1
FAR_PLANE = 500.0

# Control surface ranges that are not derived from the radius solver
ROTATION_SPEED_RANGE = (0.1, 3.0, 0.1)   # (min, max, step)
GLOW_INTENSITY_RANGE = (0.5, 4.0, 0.1)
