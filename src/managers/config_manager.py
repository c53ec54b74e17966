"""
Config Manager

Loads the YAML configuration (with include system support) and exposes it
as a typed ControlsConfig.
"""

import yaml
from pathlib import Path
from typing import Dict, List, Optional
from utils.logger import get_logger, LogCategory
from models.config import ControlsConfig

log = get_logger().for_category(LogCategory.CONFIG)

SRC_DIR = Path(__file__).parent.parent


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes the include: directive to merge modular
    YAML files. Falls back to factory_defaults.yaml when the main config is
    missing or invalid.

    Example:
        config = ConfigManager()
        config.load()

        config.controls.integration.falloff   # 0.95
        config.controls.render.fps            # 30
    """

    def __init__(self, config_path="config/config.yaml", defaults_path="config/factory_defaults.yaml"):
        """
        Initialize ConfigManager

        Args:
            config_path: Path to main config.yaml (relative to src/ unless absolute)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path)
        self.data: Dict = {}
        self.controls: ControlsConfig = ControlsConfig()

    @staticmethod
    def _resolve(path: Path) -> Path:
        return path if path.is_absolute() else SRC_DIR / path

    def load(self) -> ControlsConfig:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main config.yaml
        2. If it has 'include:' list, load and merge those files
        3. Otherwise treat as monolithic config
        4. Fallback to factory defaults on failure (built-in defaults last)

        Returns:
            Typed ControlsConfig
        """
        try:
            full_path = self._resolve(self.config_path)
            main_config = self._read_yaml(full_path)

            if 'include' in main_config:
                log.info("Using include-based configuration")
                self.data = self._load_with_includes(main_config['include'], full_path.parent)
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

            self.controls = ControlsConfig.from_dict(self.data)

        except Exception as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.controls = self._load_factory_defaults()

        log.info(
            "Configuration loaded",
            fps=self.controls.render.fps,
            transition_steps=self.controls.transition.duration_steps,
            presets=self.controls.presets.path
        )
        return self.controls

    def _load_factory_defaults(self) -> ControlsConfig:
        try:
            self.data = self._read_yaml(self._resolve(self.factory_defaults_path))
            return ControlsConfig.from_dict(self.data)
        except Exception as ex:
            log.error("Failed to load factory defaults, using built-in values", error=str(ex))
            self.data = {}
            return ControlsConfig()

    @staticmethod
    def _read_yaml(path: Path) -> Dict:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path.name} must contain a mapping at top level")
        return data

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: List of filenames to load (e.g., ["controls.yaml", "api.yaml"])
            config_dir: Directory containing config files

        Returns:
            Merged config dict
        """
        merged = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                file_data = self._read_yaml(filepath)
                if file_data:
                    merged.update(file_data)
                    log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise
            except Exception as ex:
                log.error(f"Error loading {filename}", error=str(ex))
                raise

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())[:10]))
        return merged

    def presets_path(self) -> Path:
        """
        Absolute path of the preset file

        User data, so it never lives inside the package: `~` expands to the
        home directory and relative paths follow the working directory.
        """
        path = Path(self.controls.presets.path).expanduser()
        return path if path.is_absolute() else Path.cwd() / path

    def get(self, key: str, default: Optional[object] = None):
        """Raw config value by top-level key"""
        return self.data.get(key, default)
