# radius_solver.py

import logging
from collections import namedtuple
from logger_setup import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

# The solver's authoritative inner/outer pair plus the range each may currently take.
RadiusState = namedtuple(
    'RadiusState',
    ['inner_radius', 'outer_radius', 'inner_min', 'inner_max', 'outer_min', 'outer_max']
)

# Keys of the disk configuration the solver reads.
BOUND_KEYS = (
    'min_inner_radius',
    'max_inner_radius',
    'min_outer_radius',
    'max_outer_radius',
    'min_outer_gap',
    'inner_radius_margin',
)


def _clamp(value: float, low: float, high: float) -> float:
    # When the bounds are inverted the lower bound wins.
    return max(low, min(value, high))


def inner_bounds(event_horizon_radius: float, config: dict):
    """Returns (inner_min, inner_max) for the given event horizon radius."""
    inner_min = max(config['min_inner_radius'], event_horizon_radius + config['inner_radius_margin'])
    inner_max = min(config['max_inner_radius'], config['max_outer_radius'] - config['min_outer_gap'])
    return inner_min, inner_max


def solve_radius_state(requested_inner: float, requested_outer: float,
                       event_horizon_radius: float, config: dict) -> RadiusState:
    """
    Computes the nearest legal inner/outer radius pair.

    Inner-radius legality is resolved before outer-radius legality. If the gap
    between the two cannot be restored by raising the outer radius, the inner
    radius is lowered instead.

    Data Contract:
    - Inputs:
        - requested_inner, requested_outer (float): Finite requested radii.
        - event_horizon_radius (float): Current radius of the central mass.
        - config (dict): Disk configuration holding the keys in BOUND_KEYS.
    - Outputs: RadiusState satisfying every radius invariant of a non-degenerate
      configuration.
    - Side Effects: None.
    - Invariants: Idempotent. Feeding the returned inner/outer pair back in
      yields the same RadiusState.
    """
    min_outer_gap = config['min_outer_gap']

    # --- 1. Inner radius ---
    inner_min, inner_max = inner_bounds(event_horizon_radius, config)
    safe_inner = _clamp(requested_inner, inner_min, inner_max)

    # --- 2. Outer radius ---
    outer_min = max(config['min_outer_radius'], safe_inner + min_outer_gap)
    outer_max = config['max_outer_radius']
    safe_outer = _clamp(requested_outer, outer_min, outer_max)

    # --- 3. Gap repair ---
    # Compared as inner + gap, the same expression outer_min is built from.
    if safe_outer < safe_inner + min_outer_gap:
        safe_outer = min(outer_max, safe_inner + min_outer_gap)
        if safe_outer < safe_inner + min_outer_gap:
            safe_inner = max(inner_min, safe_outer - min_outer_gap)

    state = RadiusState(
        inner_radius=safe_inner,
        outer_radius=safe_outer,
        inner_min=inner_min,
        inner_max=inner_max,
        outer_min=max(config['min_outer_radius'], safe_inner + min_outer_gap),
        outer_max=outer_max,
    )
    logger.debug(
        f"Radius request inner={requested_inner}, outer={requested_outer} "
        f"(event horizon {event_horizon_radius}) resolved to {state}"
    )
    return state


def find_config_faults(config: dict, event_horizon_radius: float) -> list:
    """
    Lists the reasons a disk configuration cannot satisfy its radius invariants
    at the given event horizon radius. An empty list means the configuration is
    sound.
    """
    faults = []
    missing = [key for key in BOUND_KEYS if key not in config]
    if missing:
        return [f"missing configuration keys: {', '.join(missing)}"]

    if config['max_outer_radius'] < config['min_outer_radius']:
        faults.append(
            f"max_outer_radius ({config['max_outer_radius']}) is below "
            f"min_outer_radius ({config['min_outer_radius']})"
        )
    if config['max_inner_radius'] < config['min_inner_radius']:
        faults.append(
            f"max_inner_radius ({config['max_inner_radius']}) is below "
            f"min_inner_radius ({config['min_inner_radius']})"
        )
    if config['min_outer_gap'] <= 0:
        faults.append(f"min_outer_gap ({config['min_outer_gap']}) must be positive")
    elif config['max_inner_radius'] + config['min_outer_gap'] <= config['max_inner_radius']:
        # A gap below float resolution at the inner bound lets outer collapse onto inner
        faults.append(
            f"min_outer_gap ({config['min_outer_gap']}) vanishes against "
            f"max_inner_radius ({config['max_inner_radius']})"
        )
    if config['inner_radius_margin'] < 0:
        faults.append(f"inner_radius_margin ({config['inner_radius_margin']}) is negative")

    inner_min, inner_max = inner_bounds(event_horizon_radius, config)
    if inner_min > inner_max:
        faults.append(
            f"no legal inner radius for event horizon {event_horizon_radius}: "
            f"inner_min {inner_min} exceeds inner_max {inner_max}"
        )
    if config['max_outer_radius'] - inner_min < config['min_outer_gap']:
        faults.append(
            f"min_outer_gap ({config['min_outer_gap']}) does not fit between "
            f"inner_min {inner_min} and max_outer_radius {config['max_outer_radius']}"
        )
    return faults
