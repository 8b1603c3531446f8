"""In-memory status store shared by the poller and the dashboard."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Protocol

from sitewatch.models import Observation, TargetStatus

logger = logging.getLogger("sitewatch.store")


class Persister(Protocol):
    def save(self, snapshot: Mapping[str, TargetStatus]) -> bool: ...


class StatusStore:
    """Thread-safe map of target URL -> current observation + append-only history.

    Every read and write takes the same lock, so a reader never sees a target
    whose ``current`` disagrees with the tail of its history. Readers only ever
    get frozen ``TargetStatus`` copies.
    """

    def __init__(
        self,
        persister: Persister | None = None,
        initial: Mapping[str, TargetStatus] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        # Serializes snapshot+save so a newer snapshot is always written last.
        self._save_lock = threading.Lock()
        self._persister = persister
        self._history: dict[str, list[Observation]] = {}
        for target, status in (initial or {}).items():
            self._history[target] = list(status.history)

    # --- Writes ---

    def record_observation(self, target: str, observation: Observation) -> TargetStatus:
        """Append ``observation`` for ``target``.

        A brand-new target is inserted without saving; every later observation
        for a known target triggers a synchronous save of the whole store.
        """
        with self._lock:
            history = self._history.get(target)
            existed = history is not None
            if history is None:
                history = self._history[target] = []
            history.append(observation)
            status = TargetStatus.from_history(target, history)

        if existed and self._persister is not None:
            with self._save_lock:
                self._persister.save(self.snapshot())
        elif not existed:
            logger.debug("First observation for %s", target)
        return status

    # --- Reads ---

    def snapshot(self) -> dict[str, TargetStatus]:
        """Consistent point-in-time copy of every target."""
        with self._lock:
            return {
                target: TargetStatus.from_history(target, history)
                for target, history in self._history.items()
            }

    def get(self, target: str) -> TargetStatus | None:
        with self._lock:
            history = self._history.get(target)
            if history is None:
                return None
            return TargetStatus.from_history(target, history)

    def targets(self) -> list[str]:
        with self._lock:
            return list(self._history)

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

    def __contains__(self, target: object) -> bool:
        with self._lock:
            return target in self._history
