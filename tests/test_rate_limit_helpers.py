"""Tests for client identification and wait-time formatting."""

import pytest
from starlette.datastructures import Headers

from petvalues.core.rate_limit import (
    format_wait_time,
    get_client_identifier,
    retry_after_seconds,
)

NOW = 1_700_000_000_000


class TestGetClientIdentifier:
    def test_prefers_first_forwarded_for_entry(self) -> None:
        headers = {"x-forwarded-for": " 1.2.3.4 , 10.0.0.1", "x-real-ip": "5.6.7.8"}
        assert get_client_identifier(headers, "127.0.0.1") == "1.2.3.4"

    def test_falls_back_to_real_ip(self) -> None:
        assert get_client_identifier({"x-real-ip": "5.6.7.8"}, "127.0.0.1") == "5.6.7.8"

    def test_empty_forwarded_entry_is_skipped(self) -> None:
        headers = {"x-forwarded-for": " , 10.0.0.1", "x-real-ip": "5.6.7.8"}
        assert get_client_identifier(headers) == "5.6.7.8"

    def test_falls_back_to_remote_address(self) -> None:
        assert get_client_identifier({}, "192.168.1.20") == "192.168.1.20"

    def test_unknown_when_nothing_available(self) -> None:
        assert get_client_identifier({}) == "unknown"
        assert get_client_identifier({"x-forwarded-for": ""}, None) == "unknown"

    def test_starlette_headers_are_case_insensitive(self) -> None:
        headers = Headers({"X-Forwarded-For": "9.9.9.9", "X-Real-IP": "8.8.8.8"})
        assert get_client_identifier(headers) == "9.9.9.9"


class TestFormatWaitTime:
    @pytest.mark.parametrize(
        ("offset_ms", "expected"),
        [
            (30_000, "30 seconds"),
            (150_000, "3 minutes"),
            (1_000, "1 second"),
            (400, "1 second"),
            (59_000, "59 seconds"),
            (59_001, "1 minute"),
            (60_000, "1 minute"),
            (120_000, "2 minutes"),
            (0, "0 seconds"),
            (-5_000, "0 seconds"),
        ],
    )
    def test_renders_remaining_time(self, offset_ms: int, expected: str) -> None:
        assert format_wait_time(NOW + offset_ms, now=NOW) == expected

    def test_uses_wall_clock_by_default(self) -> None:
        assert format_wait_time(0) == "0 seconds"


class TestRetryAfterSeconds:
    def test_rounds_up(self) -> None:
        assert retry_after_seconds(NOW + 1_500, now=NOW) == 2

    def test_clamped_at_zero(self) -> None:
        assert retry_after_seconds(NOW - 10_000, now=NOW) == 0
