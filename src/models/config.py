"""
Configuration models - Typed view of config.yaml

Each section is an immutable dataclass built from the raw YAML dict by
ControlsConfig.from_dict(). Missing keys keep their defaults.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from models.enums import LogLevel, LogCategory
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.CONFIG)

T = TypeVar("T")


def _section(cls: Type[T], data: Any, section: str) -> T:
    """Build one dataclass section, ignoring (and reporting) unknown keys"""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"Config section '{section}' must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        log.warn(f"Unknown keys in '{section}' ignored", keys=sorted(unknown))
    return cls(**{k: v for k, v in data.items() if k in known})


def _log_level(value) -> LogLevel:
    if isinstance(value, LogLevel):
        return value
    try:
        return LogLevel[str(value).upper()]
    except KeyError:
        raise ValueError(f"Invalid log level: {value}")


@dataclass(frozen=True)
class IntegrationConfig:
    """
    Per-tick integration constants

    Attributes:
        base_step: Momentum change per tick while a key is held
        accelerate_multiplier: Step multiplier while SHIFT is held
        falloff: Momentum decay factor per tick without input
        pointer_divisor: Pointer delta (viewport fractions) is divided by this
        orientation_divisor: Orientation deltas are divided by this
    """
    base_step: float = 0.00005
    accelerate_multiplier: float = 10.0
    falloff: float = 0.95
    pointer_divisor: float = 3.0
    orientation_divisor: float = 3000.0

    def __post_init__(self):
        if self.base_step <= 0:
            raise ValueError(f"base_step must be positive, got {self.base_step}")
        if not 0 < self.falloff < 1:
            raise ValueError(f"falloff must be in (0, 1), got {self.falloff}")
        if self.pointer_divisor == 0 or self.orientation_divisor == 0:
            raise ValueError("pointer_divisor and orientation_divisor must be non-zero")


@dataclass(frozen=True)
class TransitionSettings:
    duration_steps: int = 180

    def __post_init__(self):
        if self.duration_steps < 1:
            raise ValueError(f"duration_steps must be at least 1, got {self.duration_steps}")


@dataclass(frozen=True)
class RenderConfig:
    fps: int = 30
    viewport: Tuple[int, int] = (640, 360)
    time_step: float = 0.01

    def __post_init__(self):
        object.__setattr__(self, "fps", max(1, min(int(self.fps), 240)))
        width, height = self.viewport
        object.__setattr__(self, "viewport", (int(width), int(height)))


@dataclass(frozen=True)
class PresetConfig:
    path: str = "~/.feedback-controls/presets.json"
    persist: bool = True


@dataclass(frozen=True)
class ApiConfig:
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if self.cors_origins is not None:
            object.__setattr__(self, "cors_origins", tuple(str(o) for o in self.cors_origins))


@dataclass(frozen=True)
class LoggingConfig:
    """
    Attributes:
        level: Global minimum level
        colors: ANSI colors in terminal output
        categories: Per-category level overrides, e.g. {"RENDER": "DEBUG"}
    """
    level: LogLevel = LogLevel.INFO
    colors: bool = True
    categories: Dict[LogCategory, LogLevel] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "level", _log_level(self.level))

        overrides = {}
        for name, level in (self.categories or {}).items():
            try:
                category = name if isinstance(name, LogCategory) else LogCategory[str(name).upper()]
            except KeyError:
                raise ValueError(f"Invalid log category: {name}")
            overrides[category] = _log_level(level)
        object.__setattr__(self, "categories", overrides)


@dataclass(frozen=True)
class ControlsConfig:
    """Complete application configuration"""
    integration: IntegrationConfig = field(default_factory=IntegrationConfig)
    transition: TransitionSettings = field(default_factory=TransitionSettings)
    render: RenderConfig = field(default_factory=RenderConfig)
    presets: PresetConfig = field(default_factory=PresetConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ControlsConfig":
        """
        Build typed config from raw YAML data

        Raises:
            ValueError: If a section is malformed or a value is out of range
        """
        data = data or {}
        try:
            return cls(
                integration=_section(IntegrationConfig, data.get("integration"), "integration"),
                transition=_section(TransitionSettings, data.get("transition"), "transition"),
                render=_section(RenderConfig, data.get("render"), "render"),
                presets=_section(PresetConfig, data.get("presets"), "presets"),
                api=_section(ApiConfig, data.get("api"), "api"),
                logging=_section(LoggingConfig, data.get("logging"), "logging"),
            )
        except TypeError as e:
            raise ValueError(f"Malformed configuration: {e}") from e
