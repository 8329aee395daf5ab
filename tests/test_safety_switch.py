"""Tests for safety/switch.py."""

import logging

import pytest

from arcsight.exceptions import AliasAmbiguous, ConfigurationError, ErrorCode, GraphIncomplete, TimeoutExceeded
from arcsight.safety import ACTIVE, SILENT, Deadline, SafetySwitch


class _StepClock:
    """Clock advancing by a fixed step on every reading."""

    def __init__(self, step):
        self.step = step
        self.now = 0.0

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


class TestSafetySwitch:
    def test_starts_active(self):
        switch = SafetySwitch()
        assert switch.state == ACTIVE
        assert not switch.is_silent
        assert switch.error_code is None

    def test_trip_is_one_way_and_first_code_wins(self):
        switch = SafetySwitch()
        switch.trip(ErrorCode.LOW_CONFIDENCE)
        switch.trip(ErrorCode.INTERNAL_ERROR)
        assert switch.state == SILENT
        assert switch.error_code == ErrorCode.LOW_CONFIDENCE

    def test_guard_converts_engine_errors(self):
        switch = SafetySwitch()
        with switch.guard():
            raise AliasAmbiguous("two candidates")
        assert switch.error_code == ErrorCode.ALIAS_AMBIGUOUS

    def test_guard_logs_structured_engine_error(self):
        records = []
        handler = logging.Handler(level=logging.DEBUG)
        handler.emit = records.append
        logger = logging.getLogger("arcsight.safety.switch")
        previous = logger.level
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        try:
            with SafetySwitch().guard():
                raise GraphIncomplete("too many files", context={"files": 9})
        finally:
            logger.removeHandler(handler)
            logger.setLevel(previous)
        assert [r.args for r in records] == [
            {"error_code": "GRAPH_INCOMPLETE", "message": "too many files", "context": {"files": 9}}
        ]

    def test_guard_converts_unexpected_exceptions(self):
        switch = SafetySwitch()
        with switch.guard():
            raise KeyError("boom")
        assert switch.error_code == ErrorCode.INTERNAL_ERROR

    def test_guard_converts_other_arcsight_errors(self):
        switch = SafetySwitch()
        with switch.guard():
            raise ConfigurationError("bad")
        assert switch.error_code == ErrorCode.INTERNAL_ERROR

    def test_guard_keeps_earlier_trip(self):
        switch = SafetySwitch()
        with switch.guard():
            switch.trip(ErrorCode.MONOREPO)
            raise GraphIncomplete("too big")
        assert switch.error_code == ErrorCode.MONOREPO

    def test_clean_block_stays_active(self):
        switch = SafetySwitch()
        with switch.guard():
            pass
        assert not switch.is_silent


class TestDeadline:
    def test_within_budget(self):
        deadline = Deadline(_StepClock(1.0), budget_seconds=7.0)
        deadline.check("graph")

    def test_over_budget_raises(self):
        deadline = Deadline(_StepClock(8.0), budget_seconds=7.0)
        with pytest.raises(TimeoutExceeded) as exc_info:
            deadline.check("cycles")
        assert exc_info.value.code == ErrorCode.TIMEOUT_EXCEEDED
        assert exc_info.value.context["stage"] == "cycles"

    def test_budget_boundary_is_allowed(self):
        deadline = Deadline(_StepClock(7.0), budget_seconds=7.0)
        deadline.check()
