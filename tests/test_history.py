"""Tests for the JSON history file."""

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from sitewatch.core.history import (
    FORMAT_VERSION,
    HistoryFile,
    decode_status,
    encode_status,
)
from sitewatch.models import Observation, TargetStatus


def _obs(code, label, seconds=0, latency=timedelta(0)):
    return Observation(
        status_code=code,
        status_label=label,
        observed_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc) + timedelta(seconds=seconds),
        latency=latency,
    )


@pytest.fixture
def history_file(tmp_path):
    return HistoryFile(tmp_path / "status_history.json")


@pytest.fixture
def sample():
    ok = TargetStatus.from_history(
        "https://zerojudge.tw/",
        [
            _obs(200, "OK", 0, timedelta(milliseconds=123, microseconds=456)),
            _obs(200, "OK", 10, timedelta(seconds=1, microseconds=7)),
        ],
    )
    down = TargetStatus.from_history(
        "http://10.255.255.1",
        [_obs(0, "Connection Error", 20)],
    )
    return {ok.target: ok, down.target: down}


class TestRoundTrip:
    def test_save_then_load(self, history_file, sample):
        assert history_file.save(sample) is True
        loaded = history_file.load()
        assert loaded == sample

    def test_zero_latency_and_status_survive(self, history_file, sample):
        history_file.save(sample)
        down = history_file.load()["http://10.255.255.1"]
        assert down.current.status_code == 0
        assert down.current.latency == timedelta(0)

    def test_overwrites_wholesale(self, history_file, sample):
        history_file.save(sample)
        only = {"http://x.test/": TargetStatus.from_history("http://x.test/", [_obs(404, "Not Found")])}
        history_file.save(only)
        assert set(history_file.load()) == {"http://x.test/"}

    def test_file_layout(self, history_file, sample):
        history_file.save(sample)
        data = json.loads(history_file.path.read_text(encoding="utf-8"))
        assert data["version"] == FORMAT_VERSION
        entry = data["targets"]["https://zerojudge.tw/"]
        assert entry["current"] == entry["history"][-1]
        assert entry["history"][0]["latency_us"] == 123456

    def test_creates_parent_dirs(self, tmp_path, sample):
        hf = HistoryFile(tmp_path / "nested" / "dir" / "h.json")
        assert hf.save(sample) is True
        assert hf.path.is_file()

    def test_no_temp_files_left(self, history_file, sample):
        history_file.save(sample)
        assert [p.name for p in history_file.path.parent.iterdir()] == ["status_history.json"]


class TestLoadFailures:
    def test_missing_file(self, history_file):
        assert history_file.load() == {}

    def test_empty_file(self, history_file, caplog):
        history_file.path.write_text("")
        with caplog.at_level(logging.WARNING, logger="sitewatch.history"):
            assert history_file.load() == {}
        assert "Error decoding" in caplog.text

    def test_garbage(self, history_file):
        history_file.path.write_text("{not json")
        assert history_file.load() == {}

    def test_wrong_shape(self, history_file):
        history_file.path.write_text("[1, 2, 3]")
        assert history_file.load() == {}

    def test_bad_entry_skipped(self, history_file, sample):
        history_file.save(sample)
        data = json.loads(history_file.path.read_text())
        data["targets"]["http://broken.test/"] = {"history": [{"status_code": "x"}]}
        history_file.path.write_text(json.dumps(data))
        loaded = history_file.load()
        assert "http://broken.test/" not in loaded
        assert set(loaded) == set(sample)

    def test_unreadable_path(self, tmp_path):
        directory = tmp_path / "a_dir"
        directory.mkdir()
        assert HistoryFile(directory).load() == {}


class TestSaveFailures:
    def test_write_error_is_swallowed(self, tmp_path, sample, caplog):
        target = tmp_path / "is_a_dir"
        target.mkdir()
        hf = HistoryFile(target)
        with caplog.at_level(logging.ERROR, logger="sitewatch.history"):
            assert hf.save(sample) is False
        assert "Error writing history file" in caplog.text

    def test_unencodable_snapshot_leaves_file_untouched(self, history_file, sample, caplog):
        assert history_file.save(sample) is True
        before = history_file.path.read_text()

        bad = TargetStatus.from_history("http://bad.test/", [_obs(200, object())])
        with caplog.at_level(logging.ERROR, logger="sitewatch.history"):
            assert history_file.save({"http://bad.test/": bad}) is False
        assert "Error encoding history" in caplog.text
        assert history_file.path.read_text() == before


class TestDecodeStatus:
    def test_current_only_entry(self):
        current = {
            "status_code": 200,
            "status_label": "OK",
            "observed_at": "2024-05-01T12:00:00+00:00",
            "latency_us": 5,
        }
        status = decode_status("http://a.test/", {"current": current, "history": []})
        assert status.checks == 1
        assert status.current.latency == timedelta(microseconds=5)

    def test_current_rederived_from_history(self, sample):
        encoded = encode_status(sample["https://zerojudge.tw/"])
        encoded["current"] = encoded["history"][0]
        status = decode_status("https://zerojudge.tw/", encoded)
        assert status.current == status.history[-1]

    def test_empty_entry_rejected(self):
        with pytest.raises(ValueError):
            decode_status("http://a.test/", {})
