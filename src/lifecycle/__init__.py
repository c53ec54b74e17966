"""
Lifecycle subsystem
-------------------

Exports the public API for:
- graceful shutdown
- shutdown handlers

External code should import from:
    from lifecycle import ShutdownCoordinator
    from lifecycle.handlers import FrameClockShutdownHandler
"""

from .shutdown_coordinator import ShutdownCoordinator, IShutdownHandler

__all__ = [
    "ShutdownCoordinator",
    "IShutdownHandler",
]
