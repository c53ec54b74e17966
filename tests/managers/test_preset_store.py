import json

import pytest

from managers.preset_store import PresetStore, is_valid_slot
from models.parameter_state import ParameterVector


def _state(zoom: float) -> ParameterVector:
    state = ParameterVector.initial()
    state.zoom = zoom
    state.position = (0.25, -0.75)
    return state


class TestPresetStore:

    def test_store_and_get(self, preset_store):
        preset_store.store(3, _state(1.2))
        assert preset_store.get(3) == _state(1.2)
        assert 3 in preset_store
        assert preset_store.get(4) is None

    def test_copies_on_the_way_in_and_out(self, preset_store):
        state = _state(1.2)
        preset_store.store(3, state)
        state.zoom = 9.0
        fetched = preset_store.get(3)
        fetched.zoom = 7.0
        assert preset_store.get(3).zoom == 1.2

    def test_overwrite(self, preset_store):
        preset_store.store(0, _state(1.0))
        preset_store.store(0, _state(2.0))
        assert preset_store.get(0).zoom == 2.0
        assert len(preset_store) == 1

    @pytest.mark.parametrize("slot", [-1, 10, 3.0, "3", True])
    def test_invalid_slot(self, preset_store, slot):
        assert not is_valid_slot(slot)
        with pytest.raises(ValueError):
            preset_store.store(slot, _state(1.0))

    def test_slots_sorted(self, preset_store):
        for slot in (7, 1, 4):
            preset_store.store(slot, _state(float(slot)))
        assert preset_store.slots() == [1, 4, 7]
        assert list(preset_store) == [1, 4, 7]

    def test_to_dict_format(self, preset_store):
        preset_store.store(3, _state(1.2))
        data = preset_store.to_dict()
        assert data["version"] == 1
        assert data["presets"]["3"]["zoom"] == 1.2
        assert data["presets"]["3"]["position"] == [0.25, -0.75]

    def test_load_dict_skips_bad_entries(self, preset_store):
        count = preset_store.load_dict({
            "presets": {
                "2": _state(1.5).to_dict(),
                "11": _state(1.0).to_dict(),
                "x": _state(1.0).to_dict(),
                "5": {"zoom": "big"},
            }
        })
        assert count == 1
        assert preset_store.slots() == [2]


class TestPresetPersistenceFiles:

    @pytest.mark.asyncio
    async def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "presets.json"
        store = PresetStore()
        store.store(1, _state(1.1))
        store.store(9, _state(0.9))
        await store.save(path)

        loaded = PresetStore()
        assert await loaded.load(path) == 2
        assert loaded.get(1) == _state(1.1)
        assert loaded.get(9) == _state(0.9)

    @pytest.mark.asyncio
    async def test_missing_file_gives_empty_store(self, tmp_path):
        store = PresetStore()
        store.store(1, _state(1.0))
        assert await store.load(tmp_path / "absent.json") == 0
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_corrupt_file_gives_empty_store(self, tmp_path):
        path = tmp_path / "presets.json"
        path.write_text("{not json", encoding="utf-8")
        store = PresetStore()
        assert await store.load(path) == 0
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_saved_file_is_readable_json(self, tmp_path):
        path = tmp_path / "presets.json"
        store = PresetStore()
        store.store(0, _state(1.0))
        await store.save(path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert list(data["presets"]) == ["0"]
