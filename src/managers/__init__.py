"""
Managers for configuration and presets
"""

from .config_manager import ConfigManager
from .preset_store import PresetStore

__all__ = ['ConfigManager', 'PresetStore']
