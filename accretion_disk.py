# accretion_disk.py

import logging
import math
from collections import namedtuple
import numpy as np
import constants
from errors import ConfigurationError, DisposedError, InvalidInputError
from particle_field import ParticleField
from radius_solver import find_config_faults, solve_radius_state
from logger_setup import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

# A translucent band drawn in the disk plane, rebuilt with every regeneration.
GlowRing = namedtuple('GlowRing', ['radius', 'inner_edge', 'outer_edge', 'opacity'])

REQUIRED_KEYS = (
    'inner_radius',
    'outer_radius',
    'min_inner_radius',
    'max_inner_radius',
    'min_outer_radius',
    'max_outer_radius',
    'min_outer_gap',
    'inner_radius_margin',
    'thickness',
    'particle_count',
    'rotation_speed',
)


def _require_finite(name: str, value) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a number, got {value!r}.") from exc
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value}.")
    return value


def validate_disk_config(config: dict, event_horizon_radius: float):
    """
    Rejects a disk configuration that can never satisfy the radius invariants.

    Data Contract:
    - Inputs: config (dict) - The 'disk' section of the config file.
              event_horizon_radius (float) - The radius the disk starts around.
    - Outputs: None.
    - Side Effects: Raises ConfigurationError listing every fault found.
    """
    missing = [key for key in REQUIRED_KEYS if key not in config]
    if missing:
        raise ConfigurationError(f"Disk configuration is missing: {', '.join(missing)}")

    faults = find_config_faults(config, event_horizon_radius)
    if config['thickness'] < 0:
        faults.append(f"thickness ({config['thickness']}) is negative")
    if int(config['particle_count']) < 1:
        faults.append(f"particle_count ({config['particle_count']}) must be at least 1")
    if faults:
        raise ConfigurationError("Invalid disk configuration: " + "; ".join(faults))


def build_glow_rings(inner_radius: float, outer_radius: float, ring_count: int = constants.GLOW_RING_COUNT) -> list:
    """Evenly spaced rings from the inner to the outer edge, fading outwards."""
    rings = []
    for i in range(ring_count):
        fraction = i / (ring_count - 1) if ring_count > 1 else 0.0
        radius = inner_radius + (outer_radius - inner_radius) * fraction
        rings.append(GlowRing(
            radius=radius,
            inner_edge=radius - constants.GLOW_RING_HALF_WIDTH,
            outer_edge=radius + constants.GLOW_RING_HALF_WIDTH,
            opacity=constants.GLOW_RING_BASE_OPACITY * (1 - i / ring_count),
        ))
    return rings


class AccretionDisk:
    """
    Rotating disk of matter around the black hole.

    Owns the particle field and decides when it has to be rebuilt. Radius
    requests go through the constraint solver; the field is regenerated only
    when the committed (inner, outer) pair actually changes. Rotation speed is
    the one parameter applied to the existing particles in place.

    Data Contract:
    - Inputs:
        - config (dict): The 'disk' section of the config file. A private copy
          is kept; only this class's setters update it.
        - event_horizon_radius (float): Initial radius of the central mass.
        - rng (np.random.Generator | None): Random source for every generation.
    - Outputs: `field` (ParticleField) and `glow_rings` for the renderer.
    - Side Effects: Replaces `field` on regeneration.
    - Invariants: The committed radii always equal the solver's output for
      themselves. No method may be used after dispose().
    """
    def __init__(self, config: dict, event_horizon_radius: float, rng: np.random.Generator = None):
        event_horizon_radius = _require_finite("event_horizon_radius", event_horizon_radius)
        validate_disk_config(config, event_horizon_radius)

        self._config = dict(config)
        self._config['particle_count'] = int(self._config['particle_count'])
        self._config.setdefault('opacity', 0.8)
        self.event_horizon_radius = event_horizon_radius
        self.rng = rng if rng is not None else np.random.default_rng()
        self.opacity = min(1.0, max(0.0, float(self._config['opacity'])))

        self.field = None
        self.glow_rings = []
        self.generation = 0
        self.elapsed_time = 0.0
        self._disposed = False

        # Commit the solver's view of the configured radii before the first build.
        state = solve_radius_state(
            self._config['inner_radius'], self._config['outer_radius'],
            self.event_horizon_radius, self._config
        )
        self._commit(state)
        self._regenerate()

    # --- Read access ---

    @property
    def config(self) -> dict:
        """A copy of the current disk configuration."""
        return dict(self._config)

    @property
    def inner_radius(self) -> float:
        return self._config['inner_radius']

    @property
    def outer_radius(self) -> float:
        return self._config['outer_radius']

    @property
    def rotation_speed(self) -> float:
        return self._config['rotation_speed']

    @property
    def disposed(self) -> bool:
        return self._disposed

    def get_radius_state(self):
        """The solver's result for the currently committed radii. Does not touch the field."""
        self._check_alive()
        return self._solve(self.inner_radius, self.outer_radius)

    # --- Radius changes ---

    def set_inner_radius(self, radius: float):
        """Requests a new inner radius. Returns the committed RadiusState."""
        self._check_alive()
        radius = _require_finite("inner radius", radius)
        return self._apply(self._solve(radius, self.outer_radius))

    def set_outer_radius(self, radius: float):
        """Requests a new outer radius. Returns the committed RadiusState."""
        self._check_alive()
        radius = _require_finite("outer radius", radius)
        return self._apply(self._solve(self.inner_radius, radius))

    def on_event_horizon_radius_change(self, radius: float):
        """
        Re-validates the committed radii against a new event horizon radius.
        The disk regenerates only if the solver moves either radius.
        """
        self._check_alive()
        radius = _require_finite("event horizon radius", radius)
        self.event_horizon_radius = radius

        faults = find_config_faults(self._config, radius)
        if faults:
            logger.warning(f"Event horizon radius {radius} leaves the disk degenerate: {'; '.join(faults)}")

        return self._apply(self._solve(self.inner_radius, self.outer_radius))

    # --- In-place changes ---

    def set_rotation_speed(self, speed: float):
        """Updates the angular velocity multiplier without regenerating the field."""
        self._check_alive()
        speed = _require_finite("rotation speed", speed)
        self._config['rotation_speed'] = speed
        self.field.set_rotation_speed(speed)
        logger.debug(f"Rotation speed set to {speed:.2f}.")

    def set_opacity(self, opacity: float):
        self._check_alive()
        opacity = _require_finite("opacity", opacity)
        self.opacity = min(1.0, max(0.0, opacity))
        self._config['opacity'] = self.opacity

    # --- Per-frame ---

    def update(self, delta_time: float, clock_time: float = None):
        """
        Advances the disk by one frame.

        When clock_time is None the disk's own accumulated simulated time drives
        the wobble and vertical oscillation, which makes a given dt sequence
        reproducible. Passing a wall-clock reading animates against real time.
        """
        self._check_alive()
        delta_time = _require_finite("delta time", delta_time)
        if clock_time is not None:
            clock_time = _require_finite("clock time", clock_time)
        self.elapsed_time += delta_time
        time = self.elapsed_time if clock_time is None else clock_time
        self.field.advance(delta_time, time)

    def dispose(self):
        """Releases the particle field and the glow rings. The disk is unusable afterwards."""
        self._check_alive()
        self.field = None
        self.glow_rings = []
        self._disposed = True
        logger.info(f"AccretionDisk disposed after {self.generation} generation(s).")

    # --- Internals ---

    def _check_alive(self):
        if self._disposed:
            raise DisposedError("AccretionDisk has been disposed.")

    def _solve(self, inner: float, outer: float):
        return solve_radius_state(inner, outer, self.event_horizon_radius, self._config)

    def _commit(self, state):
        self._config['inner_radius'] = state.inner_radius
        self._config['outer_radius'] = state.outer_radius

    def _apply(self, state):
        previous = (self.inner_radius, self.outer_radius)
        self._commit(state)
        if (state.inner_radius, state.outer_radius) != previous:
            logger.info(
                f"Disk radii changed from inner={previous[0]:.2f}, outer={previous[1]:.2f} "
                f"to inner={state.inner_radius:.2f}, outer={state.outer_radius:.2f}. Regenerating."
            )
            self._regenerate()
        return state

    def _regenerate(self):
        # The old field is dropped wholesale; nothing migrates between generations.
        self.field = ParticleField(
            inner_radius=self.inner_radius,
            outer_radius=self.outer_radius,
            thickness=self._config['thickness'],
            particle_count=self._config['particle_count'],
            rotation_speed=self._config['rotation_speed'],
            rng=self.rng,
        )
        self.glow_rings = build_glow_rings(self.inner_radius, self.outer_radius)
        self.generation += 1
