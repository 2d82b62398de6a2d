import numpy as np
import pytest

from temperature import (
    COLD_COLOR,
    HOT_COLOR,
    normalized_temperature,
    rgb_to_unit,
    temperature_color,
    temperature_colors,
)


def test_reference_colors_come_from_disk_palette() -> None:
    np.testing.assert_allclose(COLD_COLOR, [0.0, 0.2, 170 / 255])
    np.testing.assert_allclose(HOT_COLOR, [0.0, 1.0, 1.0])


def test_edges_map_to_reference_colors() -> None:
    assert temperature_color(1.0) == pytest.approx(tuple(HOT_COLOR))
    assert temperature_color(0.0) == pytest.approx(tuple(COLD_COLOR))


def test_midpoint_is_linear_blend() -> None:
    color = temperature_color(0.5, cold=(0.0, 0.0, 0.0), hot=(1.0, 0.5, 0.2))

    assert color == pytest.approx((0.5, 0.25, 0.1))


def test_temperature_is_one_at_inner_edge_and_zero_at_outer_edge() -> None:
    radii = np.array([3.0, 7.5, 12.0])

    np.testing.assert_allclose(normalized_temperature(radii, 3.0, 12.0), [1.0, 0.5, 0.0])


def test_vectorized_colors_match_scalar_mapper() -> None:
    temperatures = np.linspace(0.0, 1.0, 7)
    colors = temperature_colors(temperatures)

    assert colors.shape == (7, 3)
    for t, color in zip(temperatures, colors):
        assert tuple(color) == pytest.approx(temperature_color(t))


def test_rgb_to_unit_ignores_alpha() -> None:
    np.testing.assert_allclose(rgb_to_unit((255, 0, 51, 128)), [1.0, 0.0, 0.2])
