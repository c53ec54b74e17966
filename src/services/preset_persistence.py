"""
Preset Persistence - Keeps presets.json in sync with the preset store

Subscribes to PRESET_STORED and writes the whole store after each store that
changed it. Holding SHIFT+digit stores every frame, so identical contents are
not rewritten. Saving happens on the event loop, outside tick().
"""

from pathlib import Path
from typing import Dict, Optional, Union

from managers.preset_store import PresetStore
from models.events import EventType, PresetStoredEvent
from services.event_bus import EventBus
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.PRESET)


class PresetPersistence:
    """
    Example:
        persistence = PresetPersistence(store, event_bus, config_manager.presets_path())
        await persistence.load()     # at startup
        # stores made with SHIFT+digit are now written to disk automatically
    """

    def __init__(self, store: PresetStore, event_bus: EventBus, path: Union[str, Path], enabled: bool = True):
        self.store = store
        self.path = Path(path)
        self.enabled = enabled
        self.saves = 0
        self._saved: Optional[Dict] = None

        if enabled:
            event_bus.subscribe(EventType.PRESET_STORED, self._on_preset_stored)
        else:
            log.info("Preset persistence disabled, presets live in memory only")

    async def load(self) -> int:
        if not self.enabled:
            return 0
        count = await self.store.load(self.path)
        self._saved = self.store.to_dict()
        return count

    async def _on_preset_stored(self, event: PresetStoredEvent) -> None:
        contents = self.store.to_dict()
        if contents == self._saved:
            return
        try:
            await self.store.save(self.path)
            self.saves += 1
            self._saved = contents
        except OSError as e:
            log.error("Saving presets failed", slot=event.slot, path=str(self.path), error=str(e))
