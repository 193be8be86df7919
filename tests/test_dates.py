"""
Test suite for date helpers
"""

from datetime import datetime, timedelta, timezone

from solarnetwork_sdk.util import ensure_utc, floor_utc_day, http_date, iso8601_date, utc_now


class TestDates:
    """Test UTC date formatting"""

    def test_utc_now(self):
        now = utc_now()
        assert now.tzinfo is not None
        assert now.utcoffset() == timedelta(0)

    def test_ensure_utc_naive(self):
        """Test that naive values are taken as UTC"""
        assert ensure_utc(datetime(2017, 4, 25, 14, 30)) == datetime(2017, 4, 25, 14, 30, tzinfo=timezone.utc)

    def test_ensure_utc_offset(self):
        value = datetime(2017, 4, 26, 2, 30, tzinfo=timezone(timedelta(hours=12)))
        result = ensure_utc(value)
        assert result.tzinfo == timezone.utc
        assert (result.day, result.hour) == (25, 14)

    def test_iso8601_date(self):
        value = datetime(2017, 4, 25, 14, 30, 5, tzinfo=timezone.utc)
        assert iso8601_date(value) == "20170425"
        assert iso8601_date(value, include_time=True) == "20170425T143005Z"

    def test_iso8601_date_converts_to_utc(self):
        value = datetime(2017, 4, 26, 2, 30, tzinfo=timezone(timedelta(hours=12)))
        assert iso8601_date(value) == "20170425"

    def test_http_date(self):
        assert http_date(datetime(2017, 4, 25, 14, 30, tzinfo=timezone.utc)) == "Tue, 25 Apr 2017 14:30:00 GMT"
        assert http_date(datetime(2017, 3, 1, 12, 0)) == "Wed, 01 Mar 2017 12:00:00 GMT"

    def test_http_date_converts_to_utc(self):
        value = datetime(2017, 4, 25, 10, 30, tzinfo=timezone(timedelta(hours=-4)))
        assert http_date(value) == "Tue, 25 Apr 2017 14:30:00 GMT"

    def test_floor_utc_day(self):
        value = datetime(2017, 4, 25, 14, 30, 5, 123, tzinfo=timezone.utc)
        assert floor_utc_day(value) == datetime(2017, 4, 25, tzinfo=timezone.utc)
