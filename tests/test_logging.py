"""Tests for structured and integrity logging."""

import logging

import pytest

from clinic_booking.core.logging import StructuredFormatter, integrity_logger


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="clinic_booking.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="slot claimed",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_includes_context_fields(self) -> None:
        line = StructuredFormatter().format(_record(slot_id="s-1", booking_id="b-1"))

        assert "level=INFO" in line
        assert "message=slot claimed" in line
        assert "slot_id=s-1" in line
        assert "booking_id=b-1" in line

    def test_skips_unset_context(self) -> None:
        line = StructuredFormatter().format(_record(slot_id=None))

        assert "slot_id" not in line
        assert "booking_id" not in line


class TestIntegrityLogger:
    def test_fault_logged_at_error(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="integrity"):
            integrity_logger.fault(
                "slot_update_failed",
                slot_id="s-1",
                booking_id=None,
                detail="flag not cleared",
            )

        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.levelno == logging.ERROR
        assert "fault=slot_update_failed" in record.getMessage()
        assert "booking=none" in record.getMessage()
        assert record.slot_id == "s-1"
