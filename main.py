# main.py

import pygame
import constants
import json
import logging
import logger_setup
import numpy as np
from logger_setup import LOGGER_NAME
from accretion_disk import AccretionDisk, validate_disk_config
from black_hole import BlackHole
from camera import CameraController
from control_panel import ControlPanel
from renderer import Renderer
from starfield import Starfield

# Get the application's dedicated logger
logger = logging.getLogger(LOGGER_NAME)

LOG_EVERY_TICKS = 300


def build_callbacks(black_hole, disk, camera):
    """
    Wires control-panel events to the simulation objects.

    The event horizon callback pushes the clamped radius to the disk so the
    panel can re-range its radius sliders from the returned RadiusState.
    """
    def on_event_horizon_radius_change(radius):
        applied = black_hole.set_radius(radius)
        return disk.on_event_horizon_radius_change(applied)

    def on_glow_change(intensity):
        black_hole.set_glow_intensity(intensity)
        disk.set_opacity(0.6 + intensity * 0.2)

    return {
        'on_event_horizon_radius_change': on_event_horizon_radius_change,
        'on_inner_radius_change': disk.set_inner_radius,
        'on_outer_radius_change': disk.set_outer_radius,
        'on_rotation_speed_change': disk.set_rotation_speed,
        'on_distance_change': camera.set_distance,
        'on_glow_change': on_glow_change,
        'get_disk_radius_state': disk.get_radius_state,
    }


def run_simulation_loop(screen, clock, renderer, black_hole, disk, starfield, camera, panel):
    """
    The main frame loop. Each frame: input, one simulation step, draw.
    """
    running = True
    tick = 0

    while running:
        # --- Event handling: the panel gets first refusal, then the camera ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False
            elif not panel.handle_event(event):
                camera.handle_event(event)

        # --- Simulation step ---
        delta_time = clock.tick(constants.FPS) / 1000.0
        wall_time = pygame.time.get_ticks() / 1000.0

        black_hole.update(wall_time)
        disk.update(delta_time, wall_time)
        starfield.update(wall_time)
        camera.update(delta_time)

        # --- Logging (throttled) ---
        if tick % LOG_EVERY_TICKS == 0:
            state = disk.get_radius_state()
            logger.debug(
                f"Tick={tick}, "
                f"FPS={clock.get_fps():.1f}, "
                f"EventHorizon={black_hole.radius:.2f}, "
                f"Inner={state.inner_radius:.2f}, "
                f"Outer={state.outer_radius:.2f}, "
                f"Generation={disk.generation}, "
                f"CameraDistance={camera.distance:.1f}"
            )

        # --- Drawing ---
        renderer.draw(camera, black_hole, disk, starfield)
        panel.draw(screen)
        pygame.display.flip()
        tick += 1

    return tick


def main():
    """
    Main function to initialize and run the accretion disk visualization.
    """
    # --- Setup ---
    with open('config.json', 'r') as f:
        config = json.load(f)

    log_file = logger_setup.setup_logging(config)

    logger.info(f"Application starting, logging to {log_file}")
    logger.info(f"Loaded configuration: {config}")

    # Initialize the master random number generator (RNG)
    rng = np.random.default_rng(config.get('master_seed'))
    logger.info(f"Master RNG initialized with seed: {config.get('master_seed')}")

    # --- Initialization ---
    pygame.init()
    screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT))
    pygame.display.set_caption(f"{constants.TITLE} - {constants.SUBTITLE}")
    clock = pygame.time.Clock()

    black_hole = BlackHole(config['black_hole'])
    black_hole.set_glow_intensity(config['rendering']['glow_intensity'])
    # The event horizon slider can reach max_radius, so the disk must stay legal there too
    validate_disk_config(config['disk'], black_hole.max_radius)
    disk = AccretionDisk(config['disk'], black_hole.radius, rng=rng)
    starfield = Starfield(config['rendering']['starfield_density'], rng)
    camera = CameraController(config['camera'])
    renderer = Renderer(screen, config['rendering'], camera.fov)
    panel = ControlPanel(config, build_callbacks(black_hole, disk, camera))

    ticks = run_simulation_loop(screen, clock, renderer, black_hole, disk, starfield, camera, panel)

    logger.info(f"Application shutting down after {ticks} frames. Log written to {log_file}")
    disk.dispose()
    pygame.quit()


if __name__ == "__main__":
    main()
