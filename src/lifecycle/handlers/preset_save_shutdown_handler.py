from services.preset_persistence import PresetPersistence
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


class PresetSaveShutdownHandler:
    """
    Writes presets one last time (stores queued in the final frame included).

    Priority: 80 (after the frame clock stops)
    """

    def __init__(self, persistence: PresetPersistence):
        self.persistence = persistence

    @property
    def shutdown_priority(self) -> int:
        return 80

    async def shutdown(self) -> None:
        if not self.persistence.enabled:
            return
        log.info("Saving presets...", count=len(self.persistence.store))
        await self.persistence.store.save(self.persistence.path)
