"""Sequential round-robin poll loop."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence

from sitewatch.core.store import StatusStore
from sitewatch.models import Observation

logger = logging.getLogger("sitewatch.scheduler")


class PollScheduler:
    """Probe each target in order, sleeping a fixed interval after every probe.

    The delay is measured from the end of a probe, so a slow target pushes
    back everything after it. There is no stop signal; the loop lives as long
    as the process unless ``rounds`` bounds it.
    """

    def __init__(
        self,
        store: StatusStore,
        prober: Callable[[str], Observation],
        targets: Sequence[str],
        interval: float,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.store = store
        self.prober = prober
        self.targets = tuple(targets)
        self.interval = interval
        self._sleep = sleep

    def probe_target(self, target: str) -> Observation | None:
        """Probe one target and record the result. Unexpected errors are logged, not raised."""
        try:
            observation = self.prober(target)
            self.store.record_observation(target, observation)
        except Exception:
            logger.exception("Failed to probe %s", target)
            return None
        return observation

    def run(self, rounds: int | None = None) -> None:
        """Poll forever, or for ``rounds`` complete passes over the targets."""
        if not self.targets:
            logger.warning("No targets configured; poller is idle")

        logger.info(
            "Polling %d targets every %.1fs", len(self.targets), self.interval
        )
        completed = 0
        while rounds is None or completed < rounds:
            if not self.targets:
                self._sleep(self.interval)
            for target in self.targets:
                self.probe_target(target)
                self._sleep(self.interval)
            completed += 1

    def start(self, rounds: int | None = None) -> threading.Thread:
        """Run the poll loop in a daemon thread."""
        thread = threading.Thread(
            target=self.run,
            kwargs={"rounds": rounds},
            name="sitewatch-poller",
            daemon=True,
        )
        thread.start()
        return thread
