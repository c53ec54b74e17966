"""
Parameter Integrator - Turns held keys and input deltas into smoothly evolving parameters.

Per tick, in this order:
  1. Drain queued pointer/orientation/remote input
  2. Advance the active preset transition (overrides the live state while running)
  3. Mouse mode toggle (TAB)
  4. Reset (SPACE)
  5. Key-driven momentum integration, with decay when idle
  6. Normalize (rotation and position wrap)
  7. Preset store (SHIFT + digit) or recall (digit)

Nothing here raises: unknown slots, empty presets and redundant toggles are
quiet no-ops.
"""

import math
from typing import AbstractSet, List, Optional, Tuple

from engine.input_queue import (
    InputQueue,
    InputCommand,
    PointerDelta,
    OrientationDelta,
    StorePresetCommand,
    RecallPresetCommand,
    ResetCommand,
)
from managers.preset_store import PresetStore, is_valid_slot
from models.config import IntegrationConfig, TransitionSettings
from models.control_binding import CONTROL_BINDINGS, ControlBinding
from models.enums import InputKey, MouseMode, LogCategory
from models.events import (
    Event,
    ControlModeChangedEvent,
    ControlsResetEvent,
    PresetStoredEvent,
    PresetRecalledEvent,
)
from models.parameter_state import ParameterVector
from models.transition import TransitionComposer, SnapshotOrigin, ComposerOrigin
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.CONTROLS)
transition_log = get_logger().for_category(LogCategory.TRANSITION)


class ParameterIntegrator:
    """
    Owner of the live ParameterVector

    Owns:
    - the live parameter state
    - the preset store
    - at most one active TransitionComposer

    Input entry points (on_pointer_delta, on_orientation_changed) are safe to
    call from any thread: they enqueue, and tick() applies them.

    Example:
        controls = ParameterIntegrator()
        controls.set_viewport_size(640, 360)

        # every frame
        state = controls.tick(held_keys)
        renderer.draw(zoom=state.zoom, rotation=state.rotation, ...)
    """

    MODE_TOGGLE_KEY = InputKey.TAB
    RESET_KEY = InputKey.SPACE
    MODIFIER_KEY = InputKey.SHIFT

    def __init__(
        self,
        integration: Optional[IntegrationConfig] = None,
        transition: Optional[TransitionSettings] = None,
        presets: Optional[PresetStore] = None,
        bindings: Tuple[ControlBinding, ...] = CONTROL_BINDINGS
    ):
        self.integration = integration or IntegrationConfig()
        self.transition_settings = transition or TransitionSettings()
        self.presets = presets if presets is not None else PresetStore()
        self.bindings = bindings

        self.mouse_mode = MouseMode.ZOOM
        self.viewport_size: Optional[Tuple[float, float]] = None
        self.transition: Optional[TransitionComposer] = None

        self._state = ParameterVector.initial()
        self._input = InputQueue()
        self._events: List[Event] = []

    # === Read access ===

    @property
    def state(self) -> ParameterVector:
        """Copy of the live parameters"""
        return self._state.copy()

    @property
    def zoom(self) -> float:
        return self._state.zoom

    @property
    def rotation(self) -> float:
        return self._state.rotation

    @property
    def position(self) -> Tuple[float, float]:
        return self._state.position

    @property
    def color_offset(self) -> float:
        return self._state.color_offset

    @property
    def linearity(self) -> float:
        return self._state.linearity

    @property
    def transition_active(self) -> bool:
        return self.transition is not None and not self.transition.complete

    @property
    def input_queue(self) -> InputQueue:
        return self._input

    # === Event ingestion ===

    def set_viewport_size(self, width: float, height: float) -> None:
        """Record viewport size used to scale pointer deltas"""
        self.viewport_size = (float(width), float(height))

    def on_pointer_delta(self, dx: float, dy: float) -> None:
        """Queue pointer movement (pixels); applied at the next tick"""
        self._input.put(PointerDelta(dx, dy))

    def on_orientation_changed(self, yaw: float, pitch: float, roll: float) -> None:
        """Queue a device attitude change; applied at the next tick"""
        self._input.put(OrientationDelta(yaw, pitch, roll))

    def pop_events(self) -> List[Event]:
        """Domain events raised since the last call"""
        events, self._events = self._events, []
        return events

    # === Per-frame step ===

    def tick(self, pressed: AbstractSet[InputKey]) -> ParameterVector:
        """
        Advance one frame

        Args:
            pressed: Input identifiers currently held

        Returns:
            Copy of the resulting live parameters
        """
        self._apply_queued_input()

        if self.transition_active:
            self._state = self.transition.advance()
            if self.transition.complete:
                transition_log.info("Transition complete", steps=self.transition.step_count)

        if self.MODE_TOGGLE_KEY in pressed:
            self._toggle_mode()

        if self.RESET_KEY in pressed:
            self.reset()

        self._integrate(pressed)
        self._state.normalize()

        slot = self._selected_slot(pressed)
        if slot is not None:
            if self.MODIFIER_KEY in pressed:
                self.store_preset(slot)
            else:
                self.recall_preset(slot)

        return self._state.copy()

    def reset(self) -> None:
        """Reset live parameters to defaults (zoom 1, everything else 0)"""
        self._state.reset()
        self._events.append(ControlsResetEvent())
        log.debug("Controls reset")

    def _toggle_mode(self) -> None:
        old = self.mouse_mode
        self.mouse_mode = old.toggled()
        self._events.append(ControlModeChangedEvent(old, self.mouse_mode))
        log.info("Mouse mode changed", mode_from=old.name, mode_to=self.mouse_mode.name)

    def _integrate(self, pressed: AbstractSet[InputKey]) -> None:
        multiplier = self.integration.accelerate_multiplier if self.MODIFIER_KEY in pressed else 1.0
        step = self.integration.base_step * multiplier

        for binding in self.bindings:
            momentum = binding.momentum.get(self._state)

            if not binding.decrement.isdisjoint(pressed):
                momentum -= step
            elif not binding.increment.isdisjoint(pressed):
                momentum += step
            else:
                momentum *= self.integration.falloff

            binding.momentum.set(self._state, momentum)
            binding.target.set(self._state, binding.target.get(self._state) + momentum)

    @staticmethod
    def _selected_slot(pressed: AbstractSet[InputKey]) -> Optional[int]:
        # Lowest held digit wins when several are down
        digits = [key.digit for key in pressed if key.digit is not None]
        return min(digits) if digits else None

    # === Queued input ===

    def _apply_queued_input(self) -> None:
        for command in self._input.drain():
            self._apply(command)

    def _apply(self, command: InputCommand) -> None:
        if isinstance(command, PointerDelta):
            self._apply_pointer(command)
        elif isinstance(command, OrientationDelta):
            self._apply_orientation(command)
        elif isinstance(command, StorePresetCommand):
            self.store_preset(command.slot)
        elif isinstance(command, RecallPresetCommand):
            self.recall_preset(command.slot)
        elif isinstance(command, ResetCommand):
            self.reset()

    def _apply_pointer(self, delta: PointerDelta) -> None:
        if not (math.isfinite(delta.dx) and math.isfinite(delta.dy)):
            log.debug("Pointer delta ignored, not finite", dx=delta.dx, dy=delta.dy)
            return
        if not self.viewport_size or not all(self.viewport_size):
            log.debug("Pointer delta ignored, viewport size unknown", dx=delta.dx, dy=delta.dy)
            return

        width, height = self.viewport_size
        divisor = self.integration.pointer_divisor
        adjusted_dx = delta.dx / width / divisor
        adjusted_dy = delta.dy / height / divisor

        if self.mouse_mode is MouseMode.ZOOM:
            self._state.rotation_momentum += adjusted_dx
            self._state.zoom_momentum += adjusted_dy
        else:
            px, py = self._state.position_momentum
            self._state.position_momentum = (px + adjusted_dx, py + adjusted_dy)

    def _apply_orientation(self, delta: OrientationDelta) -> None:
        if not all(math.isfinite(v) for v in (delta.yaw, delta.pitch, delta.roll)):
            log.debug("Orientation delta ignored, not finite", yaw=delta.yaw, pitch=delta.pitch, roll=delta.roll)
            return
        divisor = self.integration.orientation_divisor
        self._state.rotation_momentum += delta.roll / divisor
        self._state.zoom_momentum += delta.yaw / divisor
        px, py = self._state.position_momentum
        self._state.position_momentum = (
            px + math.sin(delta.pitch) / divisor,
            py + math.cos(delta.pitch) / divisor,
        )

    # === Presets ===

    def store_preset(self, slot: int) -> None:
        """Snapshot the live parameters into a preset slot (overwrites)"""
        if not is_valid_slot(slot):
            log.debug("Store ignored, invalid preset slot", slot=slot)
            return
        if self.presets.get(slot) == self._state:
            return
        self.presets.store(slot, self._state)
        self._events.append(PresetStoredEvent(slot))
        log.info("Preset stored", slot=slot)

    def recall_preset(self, slot: int) -> None:
        """
        Start a transition toward a stored preset

        If a transition is still running, the new one starts from its live
        output (the old transition keeps advancing underneath). Empty slots
        are ignored.
        """
        target = self.presets.get(slot)
        if target is None:
            log.debug("Recall ignored, preset slot empty", slot=slot)
            return

        duration = self.transition_settings.duration_steps
        chained = self.transition_active
        if chained:
            origin = ComposerOrigin(self.transition)
        else:
            origin = SnapshotOrigin(self._state.copy())

        self.transition = TransitionComposer(origin, target, duration=duration)
        self._events.append(PresetRecalledEvent(slot, chained))
        log.info("Preset recalled", slot=slot, chained=chained, depth=self.transition.depth)
        transition_log.info("Transition started", duration=duration, chained=chained, depth=self.transition.depth)
