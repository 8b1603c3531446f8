"""Tests for sitewatch data models."""

from datetime import datetime, timedelta, timezone

import pytest

from sitewatch.models import Observation, StatusClass, TargetStatus


def _obs(code: int = 200, label: str = "OK", ms: int = 10) -> Observation:
    return Observation(
        status_code=code,
        status_label=label,
        observed_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        latency=timedelta(milliseconds=ms),
    )


class TestStatusClass:
    def test_ok(self):
        assert StatusClass.for_code(200) == StatusClass.OK
        assert StatusClass.OK == "ok"

    def test_warning_range(self):
        assert StatusClass.for_code(400) == StatusClass.WARNING
        assert StatusClass.for_code(404) == StatusClass.WARNING
        assert StatusClass.for_code(499) == StatusClass.WARNING

    def test_error_range(self):
        assert StatusClass.for_code(500) == StatusClass.ERROR
        assert StatusClass.for_code(502) == StatusClass.ERROR

    def test_unclassified(self):
        assert StatusClass.for_code(0) == StatusClass.NONE
        assert StatusClass.for_code(201) == StatusClass.NONE
        assert StatusClass.for_code(302) == StatusClass.NONE
        assert StatusClass.NONE == ""


class TestObservation:
    def test_default_latency(self):
        o = Observation(status_code=0, status_label="Connection Error",
                        observed_at=datetime.now(timezone.utc))
        assert o.latency == timedelta(0)
        assert o.status_class == StatusClass.NONE

    def test_frozen(self):
        o = _obs()
        with pytest.raises(AttributeError):
            o.status_code = 500  # type: ignore


class TestTargetStatus:
    def test_from_history(self):
        first, second = _obs(200), _obs(404, "Not Found")
        status = TargetStatus.from_history("http://a.test/", [first, second])
        assert status.current == second
        assert status.history == (first, second)
        assert status.checks == 2
        assert status.status_class == StatusClass.WARNING

    def test_empty_history_rejected(self):
        with pytest.raises(ValueError):
            TargetStatus.from_history("http://a.test/", [])

    def test_current_must_match_tail(self):
        with pytest.raises(ValueError):
            TargetStatus(target="http://a.test/", current=_obs(500), history=(_obs(200),))

    def test_history_is_a_copy(self):
        history = [_obs()]
        status = TargetStatus.from_history("http://a.test/", history)
        history.append(_obs(500))
        assert status.checks == 1
