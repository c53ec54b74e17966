"""
Preset Store

Maps the ten digit slots to stored parameter snapshots, with async JSON
persistence.
"""

import aiofiles
import json
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from models.parameter_state import ParameterVector
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.PRESET)

PRESET_SLOTS = range(10)


def is_valid_slot(slot) -> bool:
    return isinstance(slot, int) and not isinstance(slot, bool) and slot in PRESET_SLOTS


class PresetStore:
    """
    Slot → ParameterVector snapshot mapping

    Snapshots are copied on the way in and on the way out, so stored presets
    never alias the live state. Entries are only created or overwritten by
    store(); they never expire.

    File format (presets.json):
    {
        "version": 1,
        "presets": {
            "3": {"zoom": 1.2, "zoom_momentum": 0.0, ..., "position": [0.1, -0.4], ...}
        }
    }

    Example:
        store = PresetStore()
        store.store(3, state)
        snapshot = store.get(3)     # copy, or None if slot 3 is empty
        await store.save(path)
    """

    FORMAT_VERSION = 1

    def __init__(self):
        self._presets: Dict[int, ParameterVector] = {}

    def store(self, slot: int, state: ParameterVector) -> None:
        """
        Store snapshot, overwriting any previous one

        Raises:
            ValueError: If slot is not one of the ten digit slots
        """
        if not is_valid_slot(slot):
            raise ValueError(f"Invalid preset slot: {slot!r}")
        self._presets[slot] = state.copy()

    def get(self, slot: int) -> Optional[ParameterVector]:
        """Copy of the stored snapshot, None if the slot is empty"""
        state = self._presets.get(slot)
        return state.copy() if state is not None else None

    def __contains__(self, slot) -> bool:
        return slot in self._presets

    def __len__(self) -> int:
        return len(self._presets)

    def __iter__(self) -> Iterator[int]:
        return iter(self.slots())

    def slots(self) -> List[int]:
        """Occupied slots in ascending order"""
        return sorted(self._presets)

    def clear(self) -> None:
        self._presets.clear()

    # === Serialization ===

    def to_dict(self) -> Dict:
        return {
            "version": self.FORMAT_VERSION,
            "presets": {str(slot): self._presets[slot].to_dict() for slot in self.slots()},
        }

    def load_dict(self, data: Dict) -> int:
        """
        Replace contents from a dict produced by to_dict()

        Invalid entries are skipped with a warning.

        Returns:
            Number of presets loaded
        """
        self._presets.clear()
        entries = (data or {}).get("presets", {})
        if not isinstance(entries, dict):
            log.warn("Preset data has no 'presets' mapping, ignoring")
            return 0

        for key, raw in entries.items():
            try:
                slot = int(key)
            except (TypeError, ValueError):
                log.warn("Skipping preset with invalid slot", slot=key)
                continue
            if not is_valid_slot(slot):
                log.warn("Skipping preset with out-of-range slot", slot=slot)
                continue
            try:
                self._presets[slot] = ParameterVector.from_dict(raw)
            except (ValueError, TypeError, AttributeError) as e:
                log.warn("Skipping malformed preset", slot=slot, error=str(e))

        return len(self._presets)

    # === Persistence ===

    async def load(self, path: Union[str, Path]) -> int:
        """
        Load presets from JSON; an absent or unreadable file leaves the store empty

        Returns:
            Number of presets loaded
        """
        path = Path(path)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
            count = self.load_dict(json.loads(content))
            log.info("Presets loaded", path=str(path), count=count, slots=self.slots())
            return count
        except FileNotFoundError:
            # First run
            self._presets.clear()
            log.debug("No preset file yet", path=str(path))
            return 0
        except (OSError, ValueError) as ex:
            self._presets.clear()
            log.warn("Loading presets failed, starting empty", path=str(path), error=str(ex))
            return 0

    async def save(self, path: Union[str, Path]) -> None:
        """Write presets to JSON (indented for readability)"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(self.to_dict(), indent=2))
        log.debug("Presets saved", path=str(path), count=len(self))
