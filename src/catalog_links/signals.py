#!filepath: src/catalog_links/signals.py
from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Dict, List

from catalog_links.utils.logger import get_logger

logger = get_logger(__name__)

Slot = Callable[..., None]

BEFORE_BUILD_URI = "before_build_uri"


class SignalDispatcher:
    """Named signals with ordered slots.

    Slots receive keyword arguments and may mutate the objects they are given.
    A failing slot is logged and skipped, the emitter keeps going.
    """

    def __init__(self) -> None:
        self._slots: Dict[str, List[Slot]] = defaultdict(list)

    def connect(self, signal: str, slot: Slot) -> Callable[[], None]:
        self._slots[signal].append(slot)

        def _disconnect() -> None:
            try:
                self._slots[signal].remove(slot)
            except ValueError:
                pass

        return _disconnect

    def emit(self, signal: str, **kwargs: Any) -> None:
        for slot in list(self._slots.get(signal, ())):
            try:
                slot(**kwargs)
            except Exception as e:
                name = getattr(slot, "__name__", repr(slot))
                logger.warning(f"Slot {name} failed on {signal}: {e}")

    def slot_count(self, signal: str) -> int:
        return len(self._slots.get(signal, ()))
