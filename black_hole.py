# black_hole.py

import logging
import numpy as np
from logger_setup import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class BlackHole:
    """
    The central mass and its event horizon.

    Holds the event horizon radius that the accretion disk is constrained by,
    plus the visual state of the rim glow and the central light.

    Data Contract:
    - Inputs: config (dict) - The 'black_hole' section of the config file.
    - Outputs: None. The renderer reads `radius`, `glow_opacity` and
      `light_intensity` directly.
    - Invariants: min_radius <= radius <= max_radius.
    """
    def __init__(self, config: dict):
        self.min_radius = config.get('min_radius', 0.5)
        self.max_radius = config.get('max_radius', 5.0)
        self.radius = float(np.clip(config['radius'], self.min_radius, self.max_radius))
        self.base_radius = self.radius
        self.glow_opacity = 0.15
        self.light_intensity = 2.0

        logger.info(f"BlackHole created with event horizon radius {self.radius:.2f}.")

    def set_radius(self, event_horizon_radius: float) -> float:
        """Sets the event horizon radius, clamped to the configured range. Returns the applied value."""
        self.radius = float(np.clip(event_horizon_radius, self.min_radius, self.max_radius))
        return self.radius

    @property
    def scale(self) -> float:
        """Current radius relative to the radius the black hole was created with."""
        return self.radius / self.base_radius

    def set_glow_intensity(self, intensity: float):
        self.glow_opacity = float(np.clip(intensity * 0.08, 0.05, 0.35))
        self.light_intensity = float(np.clip(intensity, 0.5, 5.0))

    def is_inside_event_horizon(self, points: np.ndarray) -> np.ndarray:
        """Boolean mask of the (N, 3) points that lie within the event horizon."""
        points = np.asarray(points, dtype=float).reshape(-1, 3)
        return np.linalg.norm(points, axis=1) < self.radius

    def update(self, time: float):
        # Subtle pulsing of the rim glow
        self.glow_opacity = 0.1 + np.sin(time * 2) * 0.05
