from media_pipeline.stores.map_store import MapStore, moved, without


class TestMapStore:
    def test_get_returns_snapshot(self) -> None:
        store: MapStore[str, int] = MapStore({"a": 1})
        snapshot = store.get()
        snapshot["b"] = 2
        assert store.get() == {"a": 1}

    def test_update_replaces_wholesale(self) -> None:
        store: MapStore[str, int] = MapStore({"a": 1})
        store.update(lambda current: {**current, "b": 2})
        assert store.get() == {"a": 1, "b": 2}

    def test_contains_and_len(self) -> None:
        store: MapStore[str, int] = MapStore({"a": 1})
        assert "a" in store
        assert len(store) == 1


class TestUpdaters:
    def test_without_drops_key(self) -> None:
        store: MapStore[str, int] = MapStore({"a": 1, "b": 2})
        store.update(without("a"))
        assert store.get() == {"b": 2}

    def test_without_missing_key_is_noop(self) -> None:
        store: MapStore[str, int] = MapStore({"a": 1})
        store.update(without("zzz"))
        assert store.get() == {"a": 1}

    def test_moved_rekeys_value(self) -> None:
        store: MapStore[str, int] = MapStore({"old": 1})
        store.update(moved("old", "new", 5))
        assert store.get() == {"new": 5}

    def test_moved_without_value_only_drops(self) -> None:
        store: MapStore[str, int] = MapStore({"old": 1})
        store.update(moved("old", "new", None))
        assert store.get() == {}
