from engine.frame_clock import FrameClock
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


class FrameClockShutdownHandler:
    """
    Stops the frame loop so no tick runs during the rest of shutdown.

    Priority: 100 (first)
    """

    def __init__(self, frame_clock: FrameClock):
        self.frame_clock = frame_clock

    @property
    def shutdown_priority(self) -> int:
        return 100

    async def shutdown(self) -> None:
        log.info("Stopping frame clock...")
        await self.frame_clock.stop()
