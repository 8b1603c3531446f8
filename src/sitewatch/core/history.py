"""JSON history file: whole-store save and startup load."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Mapping
from datetime import datetime, timedelta
from pathlib import Path

from sitewatch.models import Observation, TargetStatus

logger = logging.getLogger("sitewatch.history")

FORMAT_VERSION = 1


def _iso(dt: datetime) -> str:
    return dt.isoformat()


def encode_observation(o: Observation) -> dict:
    return {
        "status_code": o.status_code,
        "status_label": o.status_label,
        "observed_at": _iso(o.observed_at),
        "latency_us": o.latency // timedelta(microseconds=1),
    }


def decode_observation(d: Mapping) -> Observation:
    return Observation(
        status_code=int(d["status_code"]),
        status_label=str(d["status_label"]),
        observed_at=datetime.fromisoformat(d["observed_at"]),
        latency=timedelta(microseconds=int(d["latency_us"])),
    )


def encode_status(status: TargetStatus) -> dict:
    return {
        "target": status.target,
        "current": encode_observation(status.current),
        "history": [encode_observation(o) for o in status.history],
    }


def decode_status(target: str, d: Mapping) -> TargetStatus:
    """Rebuild a TargetStatus; ``current`` is always re-derived from history."""
    history = [decode_observation(o) for o in d.get("history") or []]
    if not history and d.get("current"):
        history = [decode_observation(d["current"])]
    return TargetStatus.from_history(target, history)


class HistoryFile:
    """Best-effort persistence of the status store to a single JSON file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def save(self, snapshot: Mapping[str, TargetStatus]) -> bool:
        """Overwrite the file with ``snapshot``. Returns False (and logs) on failure."""
        try:
            payload = json.dumps(
                {
                    "version": FORMAT_VERSION,
                    "targets": {t: encode_status(s) for t, s in snapshot.items()},
                }
            )
        except (TypeError, ValueError) as exc:
            logger.error("Error encoding history: %s", exc)
            return False

        with self._lock:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=self._path.parent, prefix=self._path.name, suffix=".tmp"
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        f.write(payload)
                    os.replace(tmp_name, self._path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
            except OSError as exc:
                logger.error("Error writing history file %s: %s", self._path, exc)
                return False

        logger.debug("Saved history for %d targets to %s", len(snapshot), self._path)
        return True

    def load(self) -> dict[str, TargetStatus]:
        """Read the file back. Any failure yields an empty mapping."""
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            logger.info("No history file at %s, starting empty", self._path)
            return {}
        except OSError as exc:
            logger.warning("Error opening history file %s: %s", self._path, exc)
            return {}

        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.warning("Error decoding history file %s: %s", self._path, exc)
            return {}

        targets = data.get("targets") if isinstance(data, dict) else None
        if not isinstance(targets, dict):
            logger.warning("History file %s has no targets mapping, ignoring", self._path)
            return {}

        result: dict[str, TargetStatus] = {}
        for target, entry in targets.items():
            try:
                result[target] = decode_status(target, entry)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping malformed history for %s: %s", target, exc)

        logger.info("Loaded history for %d targets from %s", len(result), self._path)
        return result
