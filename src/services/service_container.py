"""Service Container - Dependency injection container for the control services"""

from dataclasses import dataclass
from typing import Optional

from engine.frame_clock import FrameClock
from engine.parameter_integrator import ParameterIntegrator
from hardware.input.keyboard.held_keys import HeldKeys
from managers.config_manager import ConfigManager
from managers.preset_store import PresetStore
from services.event_bus import EventBus


@dataclass
class ServiceContainer:
    """
    Aggregates the services the API layer and the frame loop share.

    Services included:
    - integrator: Live parameters, mode, presets, transitions
    - preset_store: Slot → snapshot mapping (owned by the integrator)
    - held_keys: Keyboard state fed by the keyboard adapter
    - event_bus: Pub-sub routing for control events
    - frame_clock: Fixed-rate driver (absent in tests that tick manually)

    Usage:
        services = ServiceContainer(
            config_manager=config_manager,
            integrator=integrator,
            preset_store=integrator.presets,
            held_keys=held_keys,
            event_bus=event_bus,
            frame_clock=frame_clock
        )
        set_service_container(services)
    """

    config_manager: ConfigManager
    integrator: ParameterIntegrator
    preset_store: PresetStore
    held_keys: HeldKeys
    event_bus: EventBus
    frame_clock: Optional[FrameClock] = None
