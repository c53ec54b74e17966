import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from engine.parameter_integrator import ParameterIntegrator
from hardware.input.keyboard.held_keys import HeldKeys
from managers.preset_store import PresetStore
from services.event_bus import EventBus


@pytest.fixture
def integrator():
    controls = ParameterIntegrator()
    controls.set_viewport_size(640, 360)
    return controls


@pytest.fixture
def preset_store():
    return PresetStore()


@pytest.fixture
def held_keys():
    return HeldKeys()


@pytest.fixture
def event_bus():
    return EventBus()
