# particle_field.py

import logging
import numpy as np
import numba
import constants
from errors import FieldInvariantError
from temperature import COLD_COLOR, HOT_COLOR, normalized_temperature, temperature_colors
from logger_setup import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

TWO_PI = 2.0 * np.pi

# --- JIT-Compiled Orbital Integration ---
# Kept outside the ParticleField class and restricted to NumPy arrays and
# scalars, as required by Numba's nopython mode.

@numba.jit(nopython=True, fastmath=True)
def _advance_orbits_jit(angles, radii, speeds, vertical_phases, positions, dt, time, thickness,
                        wobble_amplitude, wobble_falloff, wobble_frequency, wobble_index_phase,
                        vertical_frequency):
    """
    Numba-accelerated orbital step.
    Advances every particle's angle and rewrites its slot in the flat position
    buffer. Radii, speeds and phases are read only.
    """
    half_thickness = thickness * 0.5
    for i in range(angles.shape[0]):
        angles[i] += speeds[i] * dt
        radius = radii[i]
        angle = angles[i]

        x = np.cos(angle) * radius
        z = np.sin(angle) * radius
        y = np.sin(vertical_phases[i] + time * vertical_frequency) * half_thickness

        # Wobble decays with distance from the center
        perturbation = np.exp(-radius / wobble_falloff) * wobble_amplitude
        phase = time * wobble_frequency + i * wobble_index_phase

        positions[i * 3] = x + np.sin(phase) * perturbation
        positions[i * 3 + 1] = y
        positions[i * 3 + 2] = z + np.cos(phase) * perturbation


def keplerian_speeds(radii: np.ndarray, rotation_speed: float) -> np.ndarray:
    """Angular speed for each radius: rotation_speed * sqrt(1 / r)."""
    return rotation_speed * np.sqrt(1.0 / radii)


class ParticleField:
    """
    The orbiting particle ensemble of the accretion disk, stored as a
    Structure of Arrays.

    Data Contract:
    - Inputs:
        - inner_radius, outer_radius (float): Sampling range, outer > inner.
        - thickness (float): Vertical extent of the disk.
        - particle_count (int): Number of particles to generate.
        - rotation_speed (float): Angular velocity multiplier.
        - rng (np.random.Generator | None): Random source. None draws a fresh,
          non-deterministic generator.
    - Outputs: Flat float32 `positions` and `colors` buffers of length
      3 * particle_count, consumed by the renderer.
    - Side Effects: advance() and set_rotation_speed() mutate arrays in place.
    - Invariants: The particle count and every particle's radius are fixed for
      the lifetime of the field. A radius change requires a new field.
    """
    def __init__(self, inner_radius: float, outer_radius: float, thickness: float,
                 particle_count: int, rotation_speed: float, rng: np.random.Generator = None,
                 cold_color=COLD_COLOR, hot_color=HOT_COLOR):
        if not outer_radius > inner_radius:
            raise FieldInvariantError(
                f"Cannot generate a disk with outer radius {outer_radius} <= inner radius {inner_radius}."
            )
        if particle_count < 1:
            raise FieldInvariantError(f"Particle count must be positive, got {particle_count}.")

        self.inner_radius = inner_radius
        self.outer_radius = outer_radius
        self.thickness = thickness
        self.num_particles = particle_count
        self.rotation_speed = rotation_speed
        rng = rng if rng is not None else np.random.default_rng()

        # --- Orbital parameters (Structure of Arrays) ---
        self.radii = rng.uniform(inner_radius, outer_radius, particle_count)
        self.angles = rng.uniform(0.0, TWO_PI, particle_count)
        heights = (rng.random(particle_count) - 0.5) * thickness
        self.speeds = keplerian_speeds(self.radii, rotation_speed)
        self.vertical_phases = rng.uniform(0.0, TWO_PI, particle_count)

        # --- Rendered buffers, interleaved (x, y, z) and (r, g, b) ---
        self.positions = np.empty(particle_count * 3, dtype=np.float32)
        self.positions[0::3] = np.cos(self.angles) * self.radii
        self.positions[1::3] = heights
        self.positions[2::3] = np.sin(self.angles) * self.radii

        temperatures = normalized_temperature(self.radii, inner_radius, outer_radius)
        self.colors = temperature_colors(temperatures, cold_color, hot_color).astype(np.float32).ravel()

        logger.info(
            f"ParticleField generated {particle_count} particles "
            f"between r={inner_radius:.2f} and r={outer_radius:.2f}."
        )

    def advance(self, dt: float, time: float):
        """
        Advances every particle by one elapsed-time step.

        `time` is a monotonically increasing clock that drives the vertical
        oscillation and the wobble; `dt` drives the orbital angle. Colors are
        left untouched.
        """
        _advance_orbits_jit(
            self.angles,
            self.radii,
            self.speeds,
            self.vertical_phases,
            self.positions,
            float(dt),
            float(time),
            float(self.thickness),
            constants.WOBBLE_AMPLITUDE,
            constants.WOBBLE_FALLOFF,
            constants.WOBBLE_FREQUENCY,
            constants.WOBBLE_INDEX_PHASE,
            constants.VERTICAL_FREQUENCY,
        )

    def set_rotation_speed(self, rotation_speed: float):
        """Recomputes every particle's angular speed in place from its existing radius."""
        self.rotation_speed = rotation_speed
        self.speeds[:] = keplerian_speeds(self.radii, rotation_speed)

    def position_triples(self) -> np.ndarray:
        """(N, 3) view onto the flat position buffer."""
        return self.positions.reshape(-1, 3)

    def color_triples(self) -> np.ndarray:
        """(N, 3) view onto the flat color buffer."""
        return self.colors.reshape(-1, 3)
