# starfield.py

import numpy as np
import constants


class Starfield:
    """
    Distant background stars on a large sphere around the scene.
    Purely decorative; nothing else reads its state.
    """
    def __init__(self, count: int, rng: np.random.Generator, radius: float = constants.STARFIELD_RADIUS):
        self.count = count
        self.rng = rng

        theta = rng.random(count) * 2 * np.pi
        phi = np.arccos(2 * rng.random(count) - 1)
        self.positions = np.column_stack((
            radius * np.sin(phi) * np.cos(theta),
            radius * np.sin(phi) * np.sin(theta),
            radius * np.cos(phi),
        ))

        # Slight color variation, white to blue-white
        self.colors = self._star_colors(0.7 + rng.random(count) * 0.3, rng.random(count) * 0.2)
        self.sizes = rng.random(count) * 2 + 0.5

    @staticmethod
    def _star_colors(brightness: np.ndarray, blue_tint: np.ndarray) -> np.ndarray:
        return np.column_stack((brightness - blue_tint, brightness - blue_tint * 0.5, brightness))

    def update(self, time: float):
        """Re-tints a small random subset of stars to make them twinkle."""
        twinkling = np.where(self.rng.random(self.count) < constants.STAR_TWINKLE_FRACTION)[0]
        if len(twinkling) == 0:
            return
        brightness = 0.7 + np.sin(time + twinkling) * 0.15
        self.colors[twinkling] = self._star_colors(brightness, self.rng.random(len(twinkling)) * 0.2)
