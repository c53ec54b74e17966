import sys
import threading
from datetime import datetime
from typing import Dict, Optional, TextIO
from models.enums import LogLevel, LogCategory

# === ANSI COLORS ===
class Colors:
    """ANSI escape codes for colored terminal output"""
    RESET = '\033[0m'
    DIM = '\033[2m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'

    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'
    BRIGHT_CYAN = '\033[96m'
    BRIGHT_WHITE = '\033[97m'


CATEGORY_COLORS = {
    LogCategory.CONFIG: Colors.CYAN,
    LogCategory.INPUT: Colors.BRIGHT_BLUE,
    LogCategory.CONTROLS: Colors.BRIGHT_CYAN,
    LogCategory.TRANSITION: Colors.MAGENTA,
    LogCategory.PRESET: Colors.BRIGHT_YELLOW,
    LogCategory.RENDER: Colors.BRIGHT_GREEN,
    LogCategory.EVENT: Colors.BRIGHT_MAGENTA,
    LogCategory.API: Colors.BLUE,
    LogCategory.SYSTEM: Colors.BRIGHT_WHITE,
}

# level -> (priority, symbol, color)
LEVEL_STYLE = {
    LogLevel.DEBUG: (0, '·', Colors.DIM),
    LogLevel.INFO: (1, '✓', Colors.GREEN),
    LogLevel.WARN: (2, '⚠', Colors.YELLOW),
    LogLevel.ERROR: (3, '✗', Colors.RED),
}

DETAIL_INDENT = " " * 11


def format_detail_value(value) -> str:
    """
    Render a detail value compactly

    Parameters are floats that drift by 1e-5 per tick, so they are shown
    with 6 significant digits; tuples (position, viewport) element-wise.
    """
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        return f"{value:.6g}"
    if isinstance(value, tuple):
        return "(" + ", ".join(format_detail_value(v) for v in value) + ")"
    name = getattr(value, "name", None)
    if isinstance(name, str):
        return name
    return str(value)


# === CORE LOGGER ===
class Logger:
    """
    Structured logger with compact output format

    Format:
    [HH:MM:SS] CATEGORY · Message
               ├─ Detail 1
               └─ Detail 2

    Example:
    [14:23:45] PRESET     ✓ Preset stored
               ├─ slot: 3
               └─ zoom: 1.02

    The keyboard reader and the API server log from other threads than the
    frame loop; a lock keeps the message and its detail lines together.
    """

    def __init__(
        self,
        min_level: LogLevel = LogLevel.INFO,
        use_colors: bool = True,
        stream: Optional[TextIO] = None
    ):
        """
        Args:
            min_level: Minimum log level to display
            use_colors: Enable ANSI color codes (disable for file output)
            stream: Output stream (default: sys.stdout at write time)
        """
        self.min_level = min_level
        self.use_colors = use_colors
        self.stream = stream
        self.category_levels: Dict[LogCategory, LogLevel] = {}
        self._lock = threading.Lock()

    def is_enabled(self, category: LogCategory, level: LogLevel) -> bool:
        """Per-category override first, global minimum otherwise"""
        threshold = self.category_levels.get(category, self.min_level)
        return LEVEL_STYLE[level][0] >= LEVEL_STYLE[threshold][0]

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{Colors.RESET}"

    def format(self, category: LogCategory, message: str, level: LogLevel, details: Dict) -> str:
        """Build the full (possibly multi-line) entry without writing it"""
        _, symbol, level_color = LEVEL_STYLE[level]
        lines = [
            " ".join((
                datetime.now().strftime('[%H:%M:%S]'),
                self._colorize(category.name.ljust(10), CATEGORY_COLORS.get(category, Colors.WHITE)),
                self._colorize(symbol, level_color),
                self._colorize(message, level_color),
            ))
        ]

        items = list(details.items())
        for i, (key, value) in enumerate(items):
            branch = "└─" if i == len(items) - 1 else "├─"
            lines.append(f"{DETAIL_INDENT}{self._colorize(branch, Colors.DIM)} {key}: {format_detail_value(value)}")

        return "\n".join(lines)

    def log(self, category: LogCategory, message: str, level: LogLevel = LogLevel.INFO, **details):
        """
        Log a structured message

        Keyword arguments become the detail lines under the message.

        Example:
            logger.log(LogCategory.CONTROLS, "Mouse mode changed", old=MouseMode.ZOOM, new=MouseMode.PAN)

            [14:23:45] CONTROLS   ✓ Mouse mode changed
                       ├─ old: ZOOM
                       └─ new: PAN
        """
        if not self.is_enabled(category, level):
            return

        entry = self.format(category, message, level, details)
        stream = self.stream or sys.stdout
        with self._lock:
            stream.write(entry + "\n")
            stream.flush()

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        """Return a logger bound to a specific category."""
        return BoundLogger(self, category)


class BoundLogger:
    """Logger bound to one category; every module creates one at import."""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self.category = category

    def is_enabled(self, level: LogLevel) -> bool:
        return self._base.is_enabled(self.category, level)

    def debug(self, message: str, **kw): self._base.log(self.category, message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self._base.log(self.category, message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self._base.log(self.category, message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self._base.log(self.category, message, LogLevel.ERROR, **kw)


# === Global instance helpers ===
_logger = Logger()

def get_logger() -> Logger:
    return _logger

def configure_logger(
    min_level: LogLevel = LogLevel.INFO,
    use_colors: bool = True,
    category_levels: Optional[Dict[LogCategory, LogLevel]] = None
):
    """
    Configure the logger singleton (modify in-place, don't create new instance).

    Module-level BoundLoggers keep a reference to the singleton, so replacing
    it would silently detach them.
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
    _logger.category_levels = dict(category_levels or {})
