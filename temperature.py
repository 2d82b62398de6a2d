# temperature.py

import numpy as np
from constants import DISK_COLORS


def rgb_to_unit(color: tuple) -> np.ndarray:
    """Converts an 8-bit (R, G, B) tuple to float components in [0, 1]."""
    return np.asarray(color[:3], dtype=float) / 255.0


COLD_COLOR = rgb_to_unit(DISK_COLORS['cold'])
HOT_COLOR = rgb_to_unit(DISK_COLORS['hot'])


def normalized_temperature(radii, inner_radius: float, outer_radius: float):
    """
    Maps an orbital radius to a disk-relative temperature.

    1.0 is the inner edge (hottest), 0.0 the outer edge (coolest). Works on
    scalars and NumPy arrays alike.

    Data Contract:
    - Inputs: radii (float or np.ndarray), inner_radius/outer_radius (float)
      with outer_radius > inner_radius.
    - Outputs: Same shape as radii.
    """
    return 1.0 - (radii - inner_radius) / (outer_radius - inner_radius)


def temperature_color(temperature: float, cold=COLD_COLOR, hot=HOT_COLOR) -> tuple:
    """
    Linearly interpolates between the cold and hot reference colors.
    Components are floats in [0, 1].
    """
    cold = np.asarray(cold, dtype=float)
    hot = np.asarray(hot, dtype=float)
    color = cold + (hot - cold) * temperature
    return (float(color[0]), float(color[1]), float(color[2]))


def temperature_colors(temperatures: np.ndarray, cold=COLD_COLOR, hot=HOT_COLOR) -> np.ndarray:
    """Vectorized form of temperature_color. Returns an (N, 3) array."""
    cold = np.asarray(cold, dtype=float)
    hot = np.asarray(hot, dtype=float)
    t = np.asarray(temperatures, dtype=float).reshape(-1, 1)
    return cold + (hot - cold) * t
