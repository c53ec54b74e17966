from .frame_clock_shutdown_handler import FrameClockShutdownHandler
from .preset_save_shutdown_handler import PresetSaveShutdownHandler
from .task_cancellation_handler import TaskCancellationHandler

__all__ = [
    "FrameClockShutdownHandler",
    "PresetSaveShutdownHandler",
    "TaskCancellationHandler",
]
