# control_panel.py

import logging
import numpy as np
import pygame
import constants
from logger_setup import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

PANEL_X = 20
PANEL_Y = 20
PANEL_WIDTH = 320
ROW_HEIGHT = 52
TRACK_HEIGHT = 6
HANDLE_RADIUS = 7
PADDING = 16


class Slider:
    """
    A horizontal value slider with a pixel track.

    The value logic is independent of pygame's display so the panel can be
    driven and tested without a window.
    """
    def __init__(self, key: str, label: str, minimum: float, maximum: float, step: float,
                 value: float, fmt: str = "{:.1f}", suffix: str = ""):
        self.key = key
        self.label = label
        self.minimum = minimum
        self.maximum = maximum
        self.step = step
        self.fmt = fmt
        self.suffix = suffix
        self.track = pygame.Rect(0, 0, 0, 0)
        self.value = self.clamp(value)

    def clamp(self, value: float) -> float:
        return float(np.clip(value, self.minimum, max(self.minimum, self.maximum)))

    def snap(self, value: float) -> float:
        """Rounds to the nearest step counted from the minimum, then clamps."""
        if self.step > 0:
            value = self.minimum + round((value - self.minimum) / self.step) * self.step
        return self.clamp(value)

    def set_range(self, minimum: float, maximum: float):
        self.minimum = minimum
        self.maximum = maximum
        self.value = self.clamp(self.value)

    def set_value(self, value: float):
        """Sets the value exactly (no step snapping), clamped to the current range."""
        self.value = self.clamp(value)

    def fraction(self) -> float:
        span = self.maximum - self.minimum
        return (self.value - self.minimum) / span if span > 0 else 0.0

    def value_at(self, x: int) -> float:
        """The snapped value under screen x on the track."""
        if self.track.width <= 0:
            return self.value
        fraction = np.clip((x - self.track.left) / self.track.width, 0.0, 1.0)
        return self.snap(self.minimum + fraction * (self.maximum - self.minimum))

    def display_value(self) -> str:
        return self.fmt.format(self.value) + self.suffix


class ControlPanel:
    """
    On-screen control surface for live parameter tuning.

    Slider changes are forwarded to the callbacks. After any change that can
    move the disk radii, the panel re-reads the disk's RadiusState and re-ranges
    the inner and outer sliders, so they never offer a value the solver would
    reject.

    Data Contract:
    - Inputs:
        - config (dict): The full application config (read once for initial values).
        - callbacks (dict): Any of 'on_event_horizon_radius_change',
          'on_inner_radius_change', 'on_outer_radius_change',
          'on_rotation_speed_change', 'on_distance_change', 'on_glow_change',
          'get_disk_radius_state'. Missing callbacks are skipped.
    - Side Effects: Invokes callbacks from handle_event().
    """
    def __init__(self, config: dict, callbacks: dict):
        self.callbacks = callbacks
        self.visible = True
        self.active_slider = None
        self._fonts = None

        black_hole = config['black_hole']
        disk = config['disk']
        camera = config['camera']
        rendering = config['rendering']
        rotation_min, rotation_max, rotation_step = constants.ROTATION_SPEED_RANGE
        glow_min, glow_max, glow_step = constants.GLOW_INTENSITY_RANGE

        self.sliders = [
            Slider('event_horizon_radius', "Black Hole Radius (Event Horizon)",
                   black_hole['min_radius'], black_hole['max_radius'], 0.1, black_hole['radius'], "{:.2f}"),
            Slider('inner_radius', "Disk Inner Radius",
                   disk['min_inner_radius'], disk['max_inner_radius'], 0.5, disk['inner_radius']),
            Slider('outer_radius', "Disk Outer Radius",
                   disk['min_outer_radius'], disk['max_outer_radius'], 1.0, disk['outer_radius']),
            Slider('rotation_speed', "Rotation Speed",
                   rotation_min, rotation_max, rotation_step, disk['rotation_speed'], "{:.2f}", "x"),
            Slider('distance', "Camera Distance",
                   camera['min_distance'], camera['max_distance'], 1.0, camera['distance']),
            Slider('glow_intensity', "Glow Intensity",
                   glow_min, glow_max, glow_step, rendering['glow_intensity']),
        ]
        self._layout()
        self.apply_disk_radius_state(self._call('get_disk_radius_state'))

    def slider(self, key: str) -> Slider:
        for slider in self.sliders:
            if slider.key == key:
                return slider
        raise KeyError(key)

    def _layout(self):
        top = PANEL_Y + 48
        for i, slider in enumerate(self.sliders):
            y = top + i * ROW_HEIGHT + 28
            slider.track = pygame.Rect(PANEL_X + PADDING, y, PANEL_WIDTH - 2 * PADDING, TRACK_HEIGHT)
        self.rect = pygame.Rect(PANEL_X, PANEL_Y, PANEL_WIDTH, top + len(self.sliders) * ROW_HEIGHT + 70 - PANEL_Y)

    def _call(self, name: str, *args):
        callback = self.callbacks.get(name)
        return callback(*args) if callback is not None else None

    # --- Input ---

    def handle_event(self, event) -> bool:
        """Consumes a pygame event. Returns True if the panel used it."""
        if event.type == pygame.KEYDOWN and event.key == pygame.K_h:
            self.toggle()
            return True
        if not self.visible:
            return False

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for slider in self.sliders:
                if slider.track.inflate(0, HANDLE_RADIUS * 3).collidepoint(event.pos):
                    self.active_slider = slider
                    self.change(slider.key, slider.value_at(event.pos[0]))
                    return True
            return self.rect.collidepoint(event.pos)
        if event.type == pygame.MOUSEMOTION and self.active_slider is not None:
            self.change(self.active_slider.key, self.active_slider.value_at(event.pos[0]))
            return True
        if event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self.active_slider is not None:
            self.active_slider = None
            return True
        return False

    def change(self, key: str, value: float):
        """Applies a slider value as if the user had moved it."""
        slider = self.slider(key)
        slider.set_value(value)
        value = slider.value

        if key == 'event_horizon_radius':
            state = self._call('on_event_horizon_radius_change', value)
            self.apply_disk_radius_state(state or self._call('get_disk_radius_state'))
        elif key == 'inner_radius':
            state = self._call('on_inner_radius_change', value)
            self.apply_disk_radius_state(state or self._call('get_disk_radius_state'))
        elif key == 'outer_radius':
            state = self._call('on_outer_radius_change', value)
            self.apply_disk_radius_state(state or self._call('get_disk_radius_state'))
        elif key == 'rotation_speed':
            self._call('on_rotation_speed_change', value)
        elif key == 'distance':
            self._call('on_distance_change', value)
        elif key == 'glow_intensity':
            self._call('on_glow_change', value)

    def apply_disk_radius_state(self, state):
        if state is None:
            return
        inner = self.slider('inner_radius')
        inner.set_range(state.inner_min, state.inner_max)
        inner.set_value(state.inner_radius)

        outer = self.slider('outer_radius')
        outer.set_range(state.outer_min, state.outer_max)
        outer.set_value(state.outer_radius)

    def toggle(self):
        self.visible = not self.visible
        self.active_slider = None

    # --- Drawing ---

    def draw(self, screen: pygame.Surface):
        if self._fonts is None:
            self._fonts = (pygame.font.SysFont(None, 28), pygame.font.SysFont(None, 20))
        title_font, font = self._fonts

        hint = font.render("Show UI (H)" if not self.visible else "Hide UI (H)", True, constants.PANEL_TEXT)
        screen.blit(hint, (screen.get_width() - hint.get_width() - PADDING, PADDING))
        if not self.visible:
            return

        background = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        background.fill(constants.PANEL_BACKGROUND)
        screen.blit(background, self.rect.topleft)
        screen.blit(title_font.render("Black Hole Control", True, constants.PANEL_ACCENT),
                    (PANEL_X + PADDING, PANEL_Y + PADDING))

        for slider in self.sliders:
            label = font.render(slider.label, True, constants.PANEL_TEXT)
            value = font.render(slider.display_value(), True, constants.PANEL_ACCENT)
            screen.blit(label, (slider.track.left, slider.track.top - 20))
            screen.blit(value, (slider.track.right - value.get_width(), slider.track.top - 20))

            pygame.draw.rect(screen, (40, 60, 90), slider.track, border_radius=3)
            filled = slider.track.copy()
            filled.width = int(slider.track.width * slider.fraction())
            pygame.draw.rect(screen, constants.PANEL_ACCENT, filled, border_radius=3)
            pygame.draw.circle(screen, constants.WHITE, (filled.right, slider.track.centery), HANDLE_RADIUS)

        info_top = self.sliders[-1].track.bottom + 16
        for i, line in enumerate(("Drag to orbit - Scroll to zoom",
                                  "WASD / Arrows to move - Q/E for height",
                                  "Space to toggle auto-rotate")):
            screen.blit(font.render(line, True, constants.PANEL_TEXT), (PANEL_X + PADDING, info_top + i * 18))
