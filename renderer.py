# renderer.py

import logging
import numpy as np
import pygame
import constants
from temperature import rgb_to_unit
from logger_setup import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

WORLD_UP = np.array([0.0, 1.0, 0.0])
RING_ALPHA_SCALE = 4.0  # Rings are thin polylines, not filled bands, so they need more alpha


def project_points(points: np.ndarray, eye: np.ndarray, target: np.ndarray, fov: float,
                   width: int, height: int):
    """
    Perspective-projects world points onto the screen.

    Data Contract:
    - Inputs:
        - points (np.ndarray): (N, 3) world coordinates.
        - eye, target (np.ndarray): Camera position and look-at point.
        - fov (float): Vertical field of view in degrees.
        - width, height (int): Screen size in pixels.
    - Outputs: (xs, ys, depth, visible) arrays of length N. xs/ys are float
      pixel coordinates, depth is the distance along the view axis and visible
      marks points between the clip planes that land on screen.
    """
    points = np.asarray(points, dtype=float).reshape(-1, 3)
    forward = target - eye
    forward = forward / np.linalg.norm(forward)
    right = np.cross(forward, WORLD_UP)
    right = right / np.linalg.norm(right)
    up = np.cross(right, forward)

    relative = points - eye
    cam_x = relative @ right
    cam_y = relative @ up
    depth = relative @ forward

    focal = (height / 2) / np.tan(np.radians(fov) / 2)
    # Points behind the eye get a dummy depth so the division stays finite
    safe_depth = np.where(depth > constants.NEAR_PLANE, depth, 1.0)
    xs = width / 2 + cam_x / safe_depth * focal
    ys = height / 2 - cam_y / safe_depth * focal

    visible = (
        (depth > constants.NEAR_PLANE) & (depth < constants.FAR_PLANE) &
        (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
    )
    return xs, ys, depth, visible


def fog_attenuation(depth, density: float) -> np.ndarray:
    """Exponential-squared fog factor in [0, 1]: exp(-(density * depth) ** 2)."""
    return np.exp(-(density * np.asarray(depth, dtype=float)) ** 2)


def horizon_occlusion(xs, ys, depth, center, radius_px: float, center_depth: float) -> np.ndarray:
    """Mask of projected points hidden behind the event horizon's silhouette."""
    inside = (xs - center[0]) ** 2 + (ys - center[1]) ** 2 < radius_px ** 2
    return inside & (depth > center_depth)


class Renderer:
    """
    Draws the scene onto a pygame surface.

    Points are splatted additively into a floating-point accumulation buffer,
    which stands in for additive blending, then a bloom pass is layered on top.

    Data Contract:
    - Inputs:
        - screen (pygame.Surface): Target surface.
        - config (dict): The 'rendering' section of the config file.
        - fov (float): Camera field of view in degrees.
    - Side Effects: Draws to `screen` on every draw() call.
    """
    def __init__(self, screen: pygame.Surface, config: dict, fov: float):
        self.screen = screen
        self.width, self.height = screen.get_size()
        self.fov = fov
        self.bloom_radius = config.get('bloom_radius', 12)
        self.bloom_intensity = config.get('bloom_intensity', 40)
        self.point_size = max(1, int(config.get('point_size', 1)))
        self.fog_density = max(0.0, float(config.get('fog_density', 0.0)))
        self.accumulation = np.zeros((self.width, self.height, 3), dtype=np.float32)
        self.ring_color = constants.DISK_COLORS['warm']
        self.horizon_color = rgb_to_unit(constants.HORIZON_GLOW_COLOR)

        logger.info(f"Renderer initialized at {self.width}x{self.height}, fov {fov}.")

    def _focal(self) -> float:
        return (self.height / 2) / np.tan(np.radians(self.fov) / 2)

    def _splat(self, points, colors, eye, target, horizon, fog: bool = True):
        xs, ys, depth, visible = project_points(points, eye, target, self.fov, self.width, self.height)
        if horizon is not None:
            visible &= ~horizon_occlusion(xs, ys, depth, *horizon)

        colors = colors[visible]
        if fog:
            colors = colors * fog_attenuation(depth[visible], self.fog_density)[:, None]
        px = xs[visible].astype(np.int32)
        py = ys[visible].astype(np.int32)

        # Each point covers a point_size x point_size block centred on its pixel
        offset = self.point_size // 2
        for dx in range(self.point_size):
            for dy in range(self.point_size):
                sx = px + dx - offset
                sy = py + dy - offset
                inside = (sx >= 0) & (sx < self.width) & (sy >= 0) & (sy < self.height)
                np.add.at(self.accumulation, (sx[inside], sy[inside]), colors[inside])

    def draw(self, camera, black_hole, disk, starfield):
        eye = camera.position()
        target = camera.target

        # --- Event horizon silhouette ---
        cx, cy, center_depth, center_visible = project_points(
            target, eye, target, self.fov, self.width, self.height
        )
        horizon = None
        if center_visible[0]:
            radius_px = black_hole.radius * self._focal() / center_depth[0]
            horizon = ((cx[0], cy[0]), radius_px, center_depth[0])

        # --- Additive points ---
        self.accumulation.fill(0.0)
        # Stars sit far beyond the fog range and are drawn unfogged
        self._splat(starfield.positions, starfield.colors * 0.9, eye, target, horizon, fog=False)
        self._splat(disk.field.position_triples(), disk.field.color_triples() * disk.opacity, eye, target, horizon)

        pixels = (np.clip(self.accumulation, 0.0, 1.0) * 255).astype(np.uint8)
        pygame.surfarray.blit_array(self.screen, pixels)

        overlay = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        self._draw_glow_rings(overlay, disk.glow_rings, eye, target)
        if horizon is not None:
            self._draw_horizon_rim(overlay, horizon, black_hole)
        self.screen.blit(overlay, (0, 0))

        self._bloom(black_hole.light_intensity)

    def _draw_glow_rings(self, overlay, rings, eye, target):
        angles = np.linspace(0.0, 2 * np.pi, constants.GLOW_RING_SEGMENTS, endpoint=False)
        for ring in rings:
            circle = np.column_stack((np.cos(angles) * ring.radius, np.zeros_like(angles), np.sin(angles) * ring.radius))
            xs, ys, depth, _ = project_points(circle, eye, target, self.fov, self.width, self.height)
            if np.any(depth <= constants.NEAR_PLANE):
                continue
            alpha = int(255 * min(1.0, ring.opacity * RING_ALPHA_SCALE))
            pygame.draw.lines(overlay, (*self.ring_color, alpha), True, list(zip(xs, ys)), 2)

    def _draw_horizon_rim(self, overlay, horizon, black_hole):
        center, radius_px, _ = horizon
        # The rim sphere is 5% larger than the horizon itself
        rim_px = max(1, int(radius_px * 1.05))
        alpha = int(255 * np.clip(black_hole.glow_opacity, 0.0, 1.0))
        color = tuple(int(c * 255) for c in self.horizon_color)
        pygame.draw.circle(overlay, (*color, alpha), (int(center[0]), int(center[1])), rim_px, 3)

    def _bloom(self, light_intensity: float):
        scale = max(1, self.bloom_radius)
        scaled_size = (max(1, self.width // scale), max(1, self.height // scale))
        scaled_surface = pygame.transform.smoothscale(self.screen, scaled_size)
        blurred_surface = pygame.transform.smoothscale(scaled_surface, (self.width, self.height))

        # The central light brightens the halo; 2.0 is the default light intensity
        intensity = int(np.clip(self.bloom_intensity * light_intensity / 2.0, 0, 255))
        blurred_surface.fill((intensity, intensity, intensity), special_flags=pygame.BLEND_RGB_MULT)
        self.screen.blit(blurred_surface, (0, 0), special_flags=pygame.BLEND_RGB_ADD)
