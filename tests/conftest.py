import numpy as np
import pytest


@pytest.fixture
def disk_config() -> dict:
    return {
        "inner_radius": 3.0,
        "outer_radius": 12.0,
        "min_inner_radius": 1.0,
        "max_inner_radius": 10.0,
        "min_outer_radius": 4.0,
        "max_outer_radius": 30.0,
        "min_outer_gap": 2.0,
        "inner_radius_margin": 0.5,
        "thickness": 0.3,
        "particle_count": 500,
        "rotation_speed": 1.0,
        "opacity": 0.8,
    }


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
