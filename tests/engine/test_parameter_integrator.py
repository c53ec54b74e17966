"""
Tests for ParameterIntegrator: key integration, pointer/orientation input,
mode switching and presets
"""

import math

import pytest

from engine.parameter_integrator import ParameterIntegrator
from models.config import IntegrationConfig
from models.enums import InputKey, MouseMode
from models.events import (
    ControlModeChangedEvent,
    ControlsResetEvent,
    PresetStoredEvent,
    PresetRecalledEvent,
)
from models.parameter_state import ParameterVector
from models.transition import DURATION, ComposerOrigin, SnapshotOrigin

NO_KEYS = frozenset()


def keys(*pressed: InputKey) -> frozenset:
    return frozenset(pressed)


class TestMomentumIntegration:

    def test_zoom_decrement_then_decay(self, integrator):
        state = integrator.tick(keys(InputKey.UP))
        assert state.zoom_momentum == pytest.approx(-0.00005)
        assert state.zoom == pytest.approx(0.99995)

        state = integrator.tick(NO_KEYS)
        assert state.zoom_momentum == pytest.approx(-0.0000475)
        assert state.zoom == pytest.approx(0.9999025)

    def test_increment_key(self, integrator):
        state = integrator.tick(keys(InputKey.L))
        assert state.rotation_momentum == pytest.approx(0.00005)
        assert state.rotation == pytest.approx(0.00005)

    def test_decrement_wins_tie(self, integrator):
        state = integrator.tick(keys(InputKey.UP, InputKey.DOWN))
        assert state.zoom_momentum == pytest.approx(-0.00005)

        state = integrator.tick(keys(InputKey.A, InputKey.D, InputKey.X, InputKey.Z))
        assert state.position_momentum[0] == pytest.approx(-0.00005)
        assert state.color_offset_momentum == pytest.approx(-0.00005)

    def test_shift_multiplies_step_by_ten(self):
        plain = ParameterIntegrator()
        fast = ParameterIntegrator()

        slow_state = plain.tick(keys(InputKey.PERIOD))
        fast_state = fast.tick(keys(InputKey.PERIOD, InputKey.SHIFT))

        assert fast_state.linearity_momentum == pytest.approx(10 * slow_state.linearity_momentum)
        assert fast_state.linearity_momentum == pytest.approx(0.0005)

    def test_decay_is_geometric_and_never_zero(self, integrator):
        integrator.tick(keys(InputKey.W))
        previous = integrator.state.position_momentum[1]

        for _ in range(500):
            momentum = integrator.tick(NO_KEYS).position_momentum[1]
            assert momentum == pytest.approx(previous * 0.95)
            assert 0.0 < momentum < previous
            previous = momentum

    def test_axes_are_independent(self, integrator):
        state = integrator.tick(keys(InputKey.S, InputKey.COMMA))
        assert state.position_momentum == (0.0, pytest.approx(-0.00005))
        assert state.linearity_momentum == pytest.approx(-0.00005)
        assert state.zoom_momentum == 0.0

    def test_rotation_stays_normalized(self, integrator):
        for _ in range(300):
            state = integrator.tick(keys(InputKey.LEFT, InputKey.SHIFT))
            assert 0.0 <= state.rotation < 2 * math.pi

    def test_position_stays_normalized(self, integrator):
        for _ in range(800):
            state = integrator.tick(keys(InputKey.D, InputKey.SHIFT))
            assert -1.0 <= state.position[0] < 1.0

    def test_custom_integration_constants(self):
        controls = ParameterIntegrator(integration=IntegrationConfig(base_step=0.001, falloff=0.5))
        controls.tick(keys(InputKey.Z))
        state = controls.tick(NO_KEYS)
        assert state.color_offset_momentum == pytest.approx(0.0005)

    def test_tick_returns_copy(self, integrator):
        state = integrator.tick(NO_KEYS)
        state.zoom = 50.0
        assert integrator.zoom == 1.0


class TestModeAndReset:

    def test_tab_toggles_mode(self, integrator):
        assert integrator.mouse_mode is MouseMode.ZOOM
        integrator.tick(keys(InputKey.TAB))
        assert integrator.mouse_mode is MouseMode.PAN
        integrator.tick(keys(InputKey.TAB))
        assert integrator.mouse_mode is MouseMode.ZOOM

    def test_toggle_emits_event(self, integrator):
        integrator.tick(keys(InputKey.TAB))
        events = integrator.pop_events()
        assert len(events) == 1
        assert isinstance(events[0], ControlModeChangedEvent)
        assert events[0].old is MouseMode.ZOOM
        assert events[0].new is MouseMode.PAN
        assert integrator.pop_events() == []

    def test_space_resets(self, integrator):
        for _ in range(20):
            integrator.tick(keys(InputKey.DOWN, InputKey.J, InputKey.D))

        state = integrator.tick(keys(InputKey.SPACE))

        assert state == ParameterVector.initial()
        assert any(isinstance(e, ControlsResetEvent) for e in integrator.pop_events())

    def test_reset_then_held_key_integrates_same_tick(self, integrator):
        integrator.tick(keys(InputKey.K))
        state = integrator.tick(keys(InputKey.SPACE, InputKey.K))
        assert state.zoom_momentum == pytest.approx(0.00005)
        assert state.zoom == pytest.approx(1.00005)


class TestPointerAndOrientation:

    def test_zoom_mode_pointer(self, integrator):
        integrator.on_pointer_delta(30.0, 18.0)
        state = integrator.tick(NO_KEYS)

        rotation_momentum = 30.0 / 640 / 3 * 0.95
        zoom_momentum = 18.0 / 360 / 3 * 0.95
        assert state.rotation_momentum == pytest.approx(rotation_momentum)
        assert state.rotation == pytest.approx(rotation_momentum)
        assert state.zoom_momentum == pytest.approx(zoom_momentum)
        assert state.zoom == pytest.approx(1.0 + zoom_momentum)
        assert state.position_momentum == (0.0, 0.0)

    def test_pan_mode_pointer(self, integrator):
        integrator.tick(keys(InputKey.TAB))
        integrator.on_pointer_delta(-64.0, 36.0)
        state = integrator.tick(NO_KEYS)

        assert state.position_momentum[0] == pytest.approx(-64.0 / 640 / 3 * 0.95)
        assert state.position_momentum[1] == pytest.approx(36.0 / 360 / 3 * 0.95)
        assert state.rotation_momentum == 0.0
        assert state.zoom_momentum == 0.0

    def test_pointer_waits_for_tick(self, integrator):
        integrator.on_pointer_delta(100.0, 100.0)
        assert integrator.state.rotation_momentum == 0.0
        assert len(integrator.input_queue) == 1

    def test_pointer_ignored_without_viewport(self):
        controls = ParameterIntegrator()
        controls.on_pointer_delta(50.0, 50.0)
        state = controls.tick(NO_KEYS)
        assert state == ParameterVector.initial()

    @pytest.mark.parametrize("dx, dy", [
        (math.inf, 0.0),
        (0.0, -math.inf),
        (math.nan, 10.0),
    ])
    def test_non_finite_pointer_ignored(self, integrator, dx, dy):
        integrator.on_pointer_delta(dx, dy)

        for _ in range(3):
            state = integrator.tick(NO_KEYS)

        assert state == ParameterVector.initial()

    @pytest.mark.parametrize("yaw, pitch, roll", [
        (math.nan, 0.0, 0.0),
        (0.0, math.inf, 0.0),
        (0.0, 0.0, -math.inf),
    ])
    def test_non_finite_orientation_ignored(self, integrator, yaw, pitch, roll):
        integrator.on_orientation_changed(yaw=yaw, pitch=pitch, roll=roll)
        integrator.on_orientation_changed(yaw=3.0, pitch=0.0, roll=0.0)

        state = integrator.tick(NO_KEYS)
        state = integrator.tick(NO_KEYS)

        assert math.isfinite(state.zoom)
        assert state.zoom_momentum == pytest.approx(3.0 / 3000 * 0.95 * 0.95)
        assert state.rotation_momentum == 0.0

    def test_orientation(self, integrator):
        integrator.on_orientation_changed(yaw=3.0, pitch=0.0, roll=6.0)
        state = integrator.tick(NO_KEYS)

        assert state.rotation_momentum == pytest.approx(6.0 / 3000 * 0.95)
        assert state.zoom_momentum == pytest.approx(3.0 / 3000 * 0.95)
        assert state.position_momentum[0] == pytest.approx(0.0)
        assert state.position_momentum[1] == pytest.approx(1.0 / 3000 * 0.95)

    def test_orientation_pitch_drives_position(self, integrator):
        integrator.on_orientation_changed(yaw=0.0, pitch=math.pi / 2, roll=0.0)
        state = integrator.tick(NO_KEYS)
        assert state.position_momentum[0] == pytest.approx(1.0 / 3000 * 0.95)
        assert state.position_momentum[1] == pytest.approx(0.0, abs=1e-12)


class TestPresets:

    def _drive(self, integrator, *pressed, ticks=30):
        for _ in range(ticks):
            integrator.tick(keys(*pressed))

    def test_store_reset_recall_returns_exact_snapshot(self, integrator):
        self._drive(integrator, InputKey.DOWN, InputKey.L, InputKey.W, InputKey.PERIOD)
        snapshot = integrator.state

        integrator.store_preset(3)
        integrator.reset()
        integrator.recall_preset(3)

        for _ in range(DURATION - 1):
            integrator.transition.advance()
        assert integrator.transition.advance() == snapshot

    def test_recall_through_ticks_ends_at_snapshot(self, integrator):
        self._drive(integrator, InputKey.K, InputKey.J)
        self._drive(integrator, ticks=400)  # let momenta decay to ~0
        snapshot = integrator.state
        integrator.store_preset(1)

        integrator.tick(keys(InputKey.SPACE))
        integrator.tick(keys(InputKey.DIGIT_1))
        for _ in range(DURATION):
            state = integrator.tick(NO_KEYS)

        assert state.zoom == pytest.approx(snapshot.zoom)
        assert state.rotation == pytest.approx(snapshot.rotation)
        assert not integrator.transition_active

    def test_shift_digit_stores(self, integrator):
        state = integrator.tick(keys(InputKey.SHIFT, InputKey.DIGIT_4, InputKey.UP))
        assert integrator.presets.get(4) == state
        assert integrator.transition is None
        assert any(isinstance(e, PresetStoredEvent) and e.slot == 4 for e in integrator.pop_events())

    def test_held_store_of_unchanged_state_emits_once(self, integrator):
        for _ in range(5):
            integrator.tick(keys(InputKey.SHIFT, InputKey.DIGIT_8))

        stored = [e for e in integrator.pop_events() if isinstance(e, PresetStoredEvent)]
        assert [e.slot for e in stored] == [8]
        assert integrator.presets.get(8) == ParameterVector.initial()

    def test_digit_recalls(self, integrator):
        integrator.store_preset(2)
        integrator.tick(keys(InputKey.DIGIT_2))
        assert integrator.transition_active
        events = [e for e in integrator.pop_events() if isinstance(e, PresetRecalledEvent)]
        assert events[0].slot == 2
        assert events[0].chained is False

    def test_lowest_digit_wins(self, integrator):
        integrator.store_preset(2)
        self._drive(integrator, InputKey.DOWN)
        integrator.store_preset(5)

        integrator.tick(keys(InputKey.DIGIT_5, InputKey.DIGIT_2))

        assert integrator.transition.target == integrator.presets.get(2)

    def test_recall_unused_slot_is_noop(self, integrator):
        self._drive(integrator, InputKey.L)
        integrator.store_preset(0)
        integrator.recall_preset(0)
        composer = integrator.transition
        before = integrator.state

        integrator.recall_preset(7)

        assert integrator.transition is composer
        assert integrator.state == before

    def test_recall_while_running_chains(self, integrator):
        integrator.store_preset(1)
        self._drive(integrator, InputKey.DOWN)
        integrator.store_preset(2)

        integrator.recall_preset(1)
        first = integrator.transition
        integrator.tick(NO_KEYS)
        integrator.recall_preset(2)

        assert isinstance(integrator.transition.origin, ComposerOrigin)
        assert integrator.transition.origin.composer is first
        assert integrator.transition.depth == 2
        recalled = [e for e in integrator.pop_events() if isinstance(e, PresetRecalledEvent)]
        assert recalled[-1].chained is True

    def test_recall_after_finished_transition_starts_from_snapshot(self, integrator):
        integrator.store_preset(1)
        integrator.recall_preset(1)
        for _ in range(DURATION):
            integrator.tick(NO_KEYS)

        integrator.recall_preset(1)
        assert isinstance(integrator.transition.origin, SnapshotOrigin)

    def test_transition_start_and_completion_logged(self, integrator, capsys):
        integrator.store_preset(1)
        integrator.recall_preset(1)
        assert "Transition started" in capsys.readouterr().out

        for _ in range(DURATION - 1):
            integrator.tick(NO_KEYS)
        assert "Transition complete" not in capsys.readouterr().out

        integrator.tick(NO_KEYS)
        out = capsys.readouterr().out
        assert "TRANSITION" in out
        assert "Transition complete" in out

    def test_transition_overrides_live_state(self, integrator):
        integrator.store_preset(6)
        self._drive(integrator, InputKey.K, ticks=10)
        live = integrator.state
        integrator.recall_preset(6)

        state = integrator.tick(NO_KEYS)

        # Blends from the live state toward the stored reset state
        assert state.zoom < live.zoom + live.zoom_momentum
        assert integrator.transition.step_count == 1

    def test_invalid_slot_ignored(self, integrator):
        integrator.store_preset(12)
        integrator.recall_preset(-1)
        assert len(integrator.presets) == 0
        assert integrator.transition is None
