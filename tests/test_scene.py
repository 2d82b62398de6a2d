import json
from pathlib import Path

import numpy as np
import pygame
import pytest

import constants
from accretion_disk import AccretionDisk, validate_disk_config
from black_hole import BlackHole
from camera import PHI_MARGIN, CameraController
from control_panel import ControlPanel, Slider
from main import build_callbacks
from renderer import Renderer, fog_attenuation, horizon_occlusion, project_points
from starfield import Starfield

CONFIG_PATH = Path(__file__).resolve().parents[1] / "config.json"


@pytest.fixture
def app_config(disk_config: dict) -> dict:
    with open(CONFIG_PATH, "r") as f:
        config = json.load(f)
    config["disk"] = disk_config
    return config


@pytest.fixture
def scene(app_config: dict, rng: np.random.Generator):
    black_hole = BlackHole(app_config["black_hole"])
    disk = AccretionDisk(app_config["disk"], black_hole.radius, rng=rng)
    camera = CameraController(app_config["camera"])
    panel = ControlPanel(app_config, build_callbacks(black_hole, disk, camera))
    return black_hole, disk, camera, panel


def test_shipped_config_is_valid_at_largest_horizon() -> None:
    with open(CONFIG_PATH, "r") as f:
        config = json.load(f)

    validate_disk_config(config["disk"], config["black_hole"]["max_radius"])


def test_black_hole_radius_is_clamped() -> None:
    black_hole = BlackHole({"radius": 2.0, "min_radius": 0.5, "max_radius": 5.0})

    assert black_hole.set_radius(9.0) == 5.0
    assert black_hole.set_radius(0.1) == 0.5
    assert black_hole.scale == pytest.approx(0.25)


def test_black_hole_glow_is_bounded() -> None:
    black_hole = BlackHole({"radius": 2.0})

    black_hole.set_glow_intensity(100.0)
    assert black_hole.glow_opacity == pytest.approx(0.35)
    assert black_hole.light_intensity == 5.0

    black_hole.set_glow_intensity(0.1)
    assert black_hole.glow_opacity == pytest.approx(0.05)
    assert black_hole.light_intensity == 0.5


def test_points_inside_event_horizon_are_flagged() -> None:
    black_hole = BlackHole({"radius": 2.0})
    points = np.array([[0.0, 0.0, 1.0], [3.0, 0.0, 0.0], [1.0, 1.0, 1.0]])

    np.testing.assert_array_equal(black_hole.is_inside_event_horizon(points), [True, False, True])


def test_camera_distance_is_clamped(app_config: dict) -> None:
    camera = CameraController(app_config["camera"])

    camera.set_distance(1000.0)
    assert camera.distance == 80.0

    camera.set_distance(0.0)
    assert camera.distance == 8.0


def test_camera_keys_move_and_clamp(app_config: dict) -> None:
    camera = CameraController(app_config["camera"])

    camera.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q))
    for _ in range(100):
        camera.update(0.1)
    camera.handle_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_q))

    assert camera.phi == pytest.approx(PHI_MARGIN)
    assert not camera.keys["up"]


def test_space_toggles_auto_rotate(app_config: dict) -> None:
    camera = CameraController(app_config["camera"])
    theta = camera.theta

    camera.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE))
    camera.update(1.0)

    assert camera.auto_rotate
    assert camera.theta == pytest.approx(theta + 0.1)


def test_camera_position_is_on_orbit_sphere(app_config: dict) -> None:
    camera = CameraController(app_config["camera"])
    camera.orbit(120, -40)

    assert np.linalg.norm(camera.position()) == pytest.approx(camera.distance)


def test_origin_projects_to_screen_center() -> None:
    eye = np.array([0.0, 0.0, 10.0])
    target = np.zeros(3)
    points = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 20.0]])

    xs, ys, depth, visible = project_points(points, eye, target, 60, 800, 600)

    assert xs[0] == pytest.approx(400.0)
    assert ys[0] == pytest.approx(300.0)
    assert depth[0] == pytest.approx(10.0)
    assert xs[1] > 400.0
    assert ys[2] < 300.0
    np.testing.assert_array_equal(visible, [True, True, True, False])


def test_points_behind_horizon_are_occluded() -> None:
    xs = np.array([400.0, 400.0, 600.0])
    ys = np.array([300.0, 300.0, 300.0])
    depth = np.array([12.0, 8.0, 12.0])

    hidden = horizon_occlusion(xs, ys, depth, (400.0, 300.0), 50.0, 10.0)

    np.testing.assert_array_equal(hidden, [True, False, False])


def test_starfield_lies_on_sphere(rng: np.random.Generator) -> None:
    starfield = Starfield(300, rng)

    np.testing.assert_allclose(np.linalg.norm(starfield.positions, axis=1), constants.STARFIELD_RADIUS)
    assert starfield.colors.shape == (300, 3)
    assert np.all((starfield.sizes >= 0.5) & (starfield.sizes <= 2.5))

    starfield.update(1.0)
    assert np.all((starfield.colors >= 0.0) & (starfield.colors <= 1.0))


def test_slider_snaps_and_clamps() -> None:
    slider = Slider("inner_radius", "Disk Inner Radius", 1.0, 10.0, 0.5, 3.0)
    slider.track = pygame.Rect(0, 0, 90, 6)

    assert slider.snap(3.3) == 3.5
    assert slider.snap(42.0) == 10.0
    assert slider.value_at(45) == pytest.approx(5.5)
    assert slider.value_at(-20) == 1.0


def test_slider_range_change_clamps_value() -> None:
    slider = Slider("outer_radius", "Disk Outer Radius", 5.0, 30.0, 1.0, 6.0)

    slider.set_range(8.5, 30.0)

    assert slider.value == 8.5
    assert slider.fraction() == 0.0


def test_panel_starts_from_disk_radius_state(scene) -> None:
    _, disk, _, panel = scene
    state = disk.get_radius_state()

    assert panel.slider("inner_radius").minimum == state.inner_min
    assert panel.slider("inner_radius").maximum == state.inner_max
    assert panel.slider("outer_radius").minimum == state.outer_min


def test_panel_horizon_change_reranges_radius_sliders(scene) -> None:
    black_hole, disk, _, panel = scene

    panel.change("event_horizon_radius", 5.0)

    inner = panel.slider("inner_radius")
    assert black_hole.radius == 5.0
    assert disk.inner_radius == pytest.approx(5.5)
    assert inner.minimum == pytest.approx(5.5)
    assert inner.value == pytest.approx(5.5)
    assert panel.slider("outer_radius").minimum == pytest.approx(7.5)


def test_panel_outer_change_reports_committed_value(scene) -> None:
    _, disk, _, panel = scene

    panel.change("outer_radius", 4.0)

    assert panel.slider("outer_radius").value == pytest.approx(disk.outer_radius)
    assert disk.outer_radius == pytest.approx(5.0)


def test_panel_forwards_speed_distance_and_glow(scene) -> None:
    black_hole, disk, camera, panel = scene

    panel.change("rotation_speed", 2.0)
    panel.change("distance", 40.0)
    panel.change("glow_intensity", 1.0)

    assert disk.rotation_speed == 2.0
    assert camera.distance == 40.0
    assert disk.opacity == pytest.approx(0.8)
    assert black_hole.light_intensity == 1.0


def test_hidden_panel_ignores_clicks(scene) -> None:
    _, _, _, panel = scene
    track = panel.slider("inner_radius").track

    panel.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_h))
    used = panel.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=track.center))

    assert not panel.visible
    assert not used


def test_fog_fades_with_depth() -> None:
    factors = fog_attenuation(np.array([0.0, 10.0, 25.0, 200.0]), 0.015)

    assert factors[0] == 1.0
    assert factors[1] == pytest.approx(np.exp(-0.0225))
    assert np.all(np.diff(factors) < 0.0)
    np.testing.assert_array_equal(fog_attenuation(np.array([5.0, 500.0]), 0.0), [1.0, 1.0])


@pytest.mark.parametrize("fog", [True, False])
def test_splat_covers_point_size_block_and_applies_fog(fog: bool) -> None:
    screen = pygame.Surface((40, 30))
    renderer = Renderer(screen, {"point_size": 2, "fog_density": 0.1}, 60)
    eye = np.array([0.0, 0.0, 10.0])
    color = np.array([[0.5, 0.25, 1.0]])

    renderer._splat(np.zeros((1, 3)), color, eye, np.zeros(3), None, fog=fog)

    expected = color[0] * (np.exp(-1.0) if fog else 1.0)
    lit = np.argwhere(renderer.accumulation.sum(axis=2) > 0.0)
    assert sorted(map(tuple, lit)) == [(19, 14), (19, 15), (20, 14), (20, 15)]
    np.testing.assert_allclose(renderer.accumulation[20, 15], expected, rtol=1e-6)


def test_shipped_rendering_config_sets_point_size_and_fog() -> None:
    with open(CONFIG_PATH, "r") as f:
        rendering = json.load(f)["rendering"]

    renderer = Renderer(pygame.Surface((40, 30)), rendering, 60)

    assert renderer.point_size == rendering["point_size"]
    assert renderer.fog_density == rendering["fog_density"]
