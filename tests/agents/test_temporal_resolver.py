"""
测试 TemporalResolver 的分层时间解析
"""
from datetime import datetime, timedelta, timezone

import pytest

from eventfusion.agents.temporal_resolver import TemporalResolver, resolve_event_time

# Friday 10:00 UTC
PUB = datetime(2025, 6, 13, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def resolver():
    return TemporalResolver(PUB)


class TestRelativeOffsets:

    def test_hours_ago(self, resolver):
        result = resolver.resolve("Explosions were heard 3 hours ago near the port")
        assert result.event_time == PUB - timedelta(hours=3)
        assert result.confidence == 0.85
        assert result.tier == "relative"
        assert result.is_explicit is False

    @pytest.mark.parametrize("text,expected,confidence", [
        ("45 minutes ago", PUB - timedelta(minutes=45), 0.9),
        ("2 days ago", PUB - timedelta(days=2), 0.8),
        ("1 week ago", PUB - timedelta(weeks=1), 0.75),
        ("earlier today", PUB - timedelta(hours=6), 0.85),
        ("this morning", datetime(2025, 6, 13, 9, 0, tzinfo=timezone.utc), 0.8),
        ("last night", datetime(2025, 6, 12, 21, 0, tzinfo=timezone.utc), 0.85),
        ("yesterday", PUB - timedelta(days=1), 0.9),
    ])
    def test_fixed_offsets(self, resolver, text, expected, confidence):
        result = resolver.resolve(f"Sirens sounded {text} across the north")
        assert result.event_time == expected
        assert result.confidence == confidence

    def test_rule_order_within_tier(self, resolver):
        result = resolver.resolve("Yesterday's barrage ended 3 hours ago")
        assert result.event_time == PUB - timedelta(hours=3)


class TestExplicitDates:

    def test_on_month_day(self, resolver):
        result = resolver.resolve("The facility was struck on March 5 by drones")
        assert result.event_time == datetime(2025, 3, 5, tzinfo=timezone.utc)
        assert result.confidence == 0.9
        assert result.is_explicit is True

    def test_future_date_rolls_back_a_year(self, resolver):
        result = resolver.resolve("Talks collapsed on December 25")
        assert result.event_time == datetime(2024, 12, 25, tzinfo=timezone.utc)

    def test_full_date(self, resolver):
        result = resolver.resolve("Reported first on March 5, 2024 by state media")
        assert result.event_time == datetime(2024, 3, 5, tzinfo=timezone.utc)
        assert result.confidence == 0.95

    def test_explicit_beats_relative(self, resolver):
        result = resolver.resolve("The strike on May 2 was confirmed 3 hours ago")
        assert result.tier == "explicit"
        assert result.event_time == datetime(2025, 5, 2, tzinfo=timezone.utc)

    def test_impossible_date_falls_through(self, resolver):
        result = resolver.resolve("Officials cited a strike on February 30")
        assert result.event_time == PUB
        assert result.confidence == 0.3


class TestWeekdays:

    def test_last_weekday(self, resolver):
        result = resolver.resolve("Drones were launched last Monday")
        assert result.event_time == PUB - timedelta(days=4)
        assert result.confidence == 0.8

    def test_last_same_weekday_goes_back_a_week(self, resolver):
        result = resolver.resolve("The convoy was hit last Friday")
        assert result.event_time == PUB - timedelta(days=7)

    def test_on_weekday_most_recent_prior(self, resolver):
        result = resolver.resolve("The base was attacked on Wednesday")
        assert result.event_time == PUB - timedelta(days=2)
        assert result.confidence == 0.7

    def test_on_later_weekday_wraps(self, resolver):
        result = resolver.resolve("Protests began on Saturday")
        assert result.event_time == PUB - timedelta(days=6)

    def test_on_publish_weekday_rolls_back_seven(self, resolver):
        result = resolver.resolve("The meeting happened on Friday")
        assert result.event_time == PUB - timedelta(days=7)


class TestFallback:

    def test_no_time_phrase(self, resolver):
        result = resolver.resolve("Missile strike kills 12 in Tel Aviv")
        assert result.event_time == PUB
        assert result.confidence == 0.3
        assert result.tier == "fallback"

    def test_naive_publish_time_is_utc(self):
        result = resolve_event_time("nothing here", datetime(2025, 6, 13, 10, 0))
        assert result.event_time == PUB

    @pytest.mark.parametrize("text", [
        "Shelling was reported 99999999999 days ago",
        "Shelling was reported 999999 days ago",
    ])
    def test_out_of_range_offset_falls_back(self, resolver, text):
        result = resolver.resolve(text)
        assert result.event_time == PUB
        assert result.confidence == 0.3

    def test_out_of_range_offset_tries_next_rule(self, resolver):
        result = resolver.resolve("Shelling began 99999999999 days ago and resumed this morning")
        assert result.event_time == datetime(2025, 6, 13, 9, 0, tzinfo=timezone.utc)
        assert result.confidence == 0.8

    def test_resolve_all(self, resolver):
        refs = resolver.resolve_all("Sirens sounded this morning. Officials met yesterday. Nothing else")
        assert [r.confidence for r in refs] == [0.8, 0.9]
