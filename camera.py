# camera.py

import logging
import numpy as np
import pygame
from logger_setup import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

PHI_MARGIN = 0.1
DRAG_SENSITIVITY = 0.005
WHEEL_ZOOM = 1.0  # Distance units per wheel notch
KEY_MOVE_SPEED = 10.0

# Key bindings: action -> keys
KEY_ACTIONS = {
    'forward': (pygame.K_w, pygame.K_UP),
    'backward': (pygame.K_s, pygame.K_DOWN),
    'left': (pygame.K_a, pygame.K_LEFT),
    'right': (pygame.K_d, pygame.K_RIGHT),
    'up': (pygame.K_q,),
    'down': (pygame.K_e,),
}


class CameraController:
    """
    Orbital camera around the black hole, in spherical coordinates.

    Mouse drag orbits, the wheel zooms, WASD/arrows move, Q/E change height
    and space toggles auto-rotation.

    Data Contract:
    - Inputs: config (dict) - The 'camera' section of the config file.
    - Outputs: position() gives the Cartesian eye position; the target is the origin.
    - Invariants: min_distance <= distance <= max_distance and
      PHI_MARGIN <= phi <= pi - PHI_MARGIN after every update.
    """
    def __init__(self, config: dict, target=(0.0, 0.0, 0.0)):
        self.config = config
        self.target = np.asarray(target, dtype=float)
        self.min_distance = config['min_distance']
        self.max_distance = config['max_distance']
        self.orbit_speed = config.get('orbit_speed', 0.3)
        self.fov = config.get('fov', 60)

        self.distance = config['distance']
        self.phi = np.pi / 2  # Polar angle (0 = top, pi = bottom)
        self.theta = 0.0      # Azimuthal angle

        self.auto_rotate = config.get('auto_rotate', False)
        self.auto_rotate_speed = config.get('auto_rotate_speed', 0.1)

        self.dragging = False
        self.keys = {action: False for action in KEY_ACTIONS}

    def handle_event(self, event) -> bool:
        """Consumes a pygame event. Returns True if the camera used it."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.dragging = True
            return True
        if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.dragging = False
            return True
        if event.type == pygame.MOUSEMOTION and self.dragging:
            self.orbit(*event.rel)
            return True
        if event.type == pygame.MOUSEWHEEL:
            # Scrolling up zooms in
            self.set_distance(self.distance - event.y * WHEEL_ZOOM)
            return True
        if event.type in (pygame.KEYDOWN, pygame.KEYUP):
            pressed = event.type == pygame.KEYDOWN
            if pressed and event.key == pygame.K_SPACE:
                self.set_auto_rotate(not self.auto_rotate)
                return True
            for action, keys in KEY_ACTIONS.items():
                if event.key in keys:
                    self.keys[action] = pressed
                    return True
        return False

    def orbit(self, delta_x: float, delta_y: float):
        self.theta -= delta_x * DRAG_SENSITIVITY * self.orbit_speed
        self.phi += delta_y * DRAG_SENSITIVITY * self.orbit_speed
        self.phi = float(np.clip(self.phi, PHI_MARGIN, np.pi - PHI_MARGIN))

    def update(self, delta_time: float):
        move_speed = KEY_MOVE_SPEED * delta_time

        if self.keys['forward']:
            self.distance -= move_speed
        if self.keys['backward']:
            self.distance += move_speed
        if self.keys['left']:
            self.theta -= move_speed * 0.5
        if self.keys['right']:
            self.theta += move_speed * 0.5
        if self.keys['up']:
            self.phi -= move_speed * 0.5
        if self.keys['down']:
            self.phi += move_speed * 0.5

        self.distance = float(np.clip(self.distance, self.min_distance, self.max_distance))
        self.phi = float(np.clip(self.phi, PHI_MARGIN, np.pi - PHI_MARGIN))

        if self.auto_rotate:
            self.theta += self.auto_rotate_speed * delta_time

    def set_distance(self, distance: float):
        self.distance = float(np.clip(distance, self.min_distance, self.max_distance))

    def set_auto_rotate(self, enabled: bool):
        self.auto_rotate = enabled
        logger.debug(f"Camera auto-rotate {'enabled' if enabled else 'disabled'}.")

    def position(self) -> np.ndarray:
        """Eye position from the spherical coordinates."""
        x = self.distance * np.sin(self.phi) * np.cos(self.theta)
        y = self.distance * np.cos(self.phi)
        z = self.distance * np.sin(self.phi) * np.sin(self.theta)
        return self.target + np.array([x, y, z])
