from collections.abc import Callable, Mapping
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class MapStore(Generic[K, V]):
    """Process-local map replaced wholesale on every update.

    Readers always get a snapshot; writers pass a function from the old map
    to the new one, so a delete and an insert land in the same update.
    """

    def __init__(self, initial: Mapping[K, V] | None = None) -> None:
        self._value: dict[K, V] = dict(initial or {})

    def get(self) -> dict[K, V]:
        return dict(self._value)

    def update(self, fn: Callable[[dict[K, V]], Mapping[K, V]]) -> None:
        self._value = dict(fn(dict(self._value)))

    def __contains__(self, key: object) -> bool:
        return key in self._value

    def __len__(self) -> int:
        return len(self._value)


def without(key: K) -> Callable[[dict[K, V]], dict[K, V]]:
    """Updater that drops one key."""
    return lambda current: {k: v for k, v in current.items() if k != key}


def moved(old_key: K, new_key: K, value: V | None) -> Callable[[dict[K, V]], dict[K, V]]:
    """Updater that drops old_key and, when value is given, stores it under new_key."""

    def apply(current: dict[K, V]) -> dict[K, V]:
        updated = {k: v for k, v in current.items() if k != old_key}
        if value is not None:
            updated[new_key] = value
        return updated

    return apply
