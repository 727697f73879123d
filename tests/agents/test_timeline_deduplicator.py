from datetime import datetime, timedelta, timezone

import pytest

from eventfusion.agents.timeline_deduplicator import (
    calculate_similarity,
    compare_locations,
    compare_time_windows,
    deduplicate_events,
    extract_keywords,
    merge_cluster,
)
from eventfusion.core.models.events import CandidateEvent, CanonicalEvent, EventType, Severity

T0 = datetime(2025, 6, 13, 10, 0, tzinfo=timezone.utc)


def make_event(
    id, title, event_type=EventType.MISSILE, location="Tel Aviv", event_time=T0,
    severity=Severity.HIGH, source="Reuters", description=None, batch_index=0,
):
    return CandidateEvent(
        id=id,
        event_time=event_time,
        temporal_confidence=0.3,
        event_type=event_type,
        severity=severity,
        title=title,
        description=title if description is None else description,
        location=location,
        confidence=0.6475,
        source=source,
        batch_index=batch_index,
    )


@pytest.fixture
def tel_aviv_reports():
    """同一次导弹袭击的两篇报道 (AP 晚半小时发布)"""
    ap = make_event(
        "b", "12 killed as missile hits Tel Aviv",
        severity=Severity.CRITICAL, source="Associated Press", batch_index=0,
    )
    reuters = make_event(
        "a", "Missile strike kills 12 in Tel Aviv",
        event_time=T0 - timedelta(minutes=30), batch_index=1,
    )
    return ap, reuters


class TestSimilarityComponents:

    def test_location_scores(self):
        assert compare_locations("Tel Aviv", "tel-aviv") == 1.0
        assert compare_locations("Gaza", "Gaza City") == 0.8
        assert compare_locations("Natanz Facility", "Natanz Site") == pytest.approx(1 / 3)
        assert compare_locations("Haifa", "Tehran") == 0.0

    @pytest.mark.parametrize("hours,expected", [
        (0.5, 1.0), (3, 0.8), (10, 0.6), (20, 0.4), (40, 0.2), (72, 0.0),
    ])
    def test_time_bands(self, hours, expected):
        assert compare_time_windows(T0, T0 + timedelta(hours=hours)) == expected

    def test_keywords_include_numbers(self):
        assert extract_keywords("12 killed as missile hits Tel Aviv") == {"missile", "killed", "hit", "num:12"}

    def test_type_mismatch_is_zero(self):
        a = make_event("a", "Missile hits Haifa")
        b = make_event("b", "Missile hits Haifa", event_type=EventType.STRIKE)
        assert calculate_similarity(a, b) == 0.0

    def test_same_story(self, tel_aviv_reports):
        ap, reuters = tel_aviv_reports
        # 0.3 location + 0.2 time + 0.3 * 2/5 keywords + 0.1 severity mismatch
        assert calculate_similarity(ap, reuters) == pytest.approx(0.72)


class TestDeduplicate:

    def test_merge_keeps_anchor_identity(self, tel_aviv_reports):
        ap, reuters = tel_aviv_reports
        result = deduplicate_events([reuters, ap])

        assert len(result) == 1
        merged = result[0]
        assert isinstance(merged, CanonicalEvent)
        assert merged.id == "b"
        assert merged.title == "12 killed as missile hits Tel Aviv"
        assert merged.event_time == T0 - timedelta(minutes=30)
        assert merged.severity == Severity.CRITICAL
        assert merged.sources == ["Associated Press", "Reuters"]
        assert merged.merged_from == ["b", "a"]
        assert merged.confidence == pytest.approx(0.7)
        assert merged.description == "12 killed as missile hits Tel Aviv | Missile strike kills 12 in Tel Aviv"

    def test_threshold_is_strict(self):
        # 0.3 location + 0.2 time + 0 keywords + 0.2 severity == 0.7 exactly
        a = make_event("a", "Envoys meet in Vienna", event_type=EventType.DIPLOMACY,
                       location="Vienna", severity=Severity.LOW)
        b = make_event("b", "Ambassadors gather in Vienna", event_type=EventType.DIPLOMACY,
                       location="Vienna", severity=Severity.LOW, batch_index=1)
        assert calculate_similarity(a, b) == 0.7
        assert len(deduplicate_events([a, b])) == 2

    def test_singleton_unchanged(self):
        event = make_event("solo", "Missile hits Haifa", location="Haifa")
        result = deduplicate_events([event])
        assert len(result) == 1
        canonical = result[0]
        assert canonical.id == "solo"
        assert canonical.title == event.title
        assert canonical.description == event.description
        assert canonical.confidence == event.confidence
        assert canonical.sources == ["Reuters"]
        assert canonical.merged_from == ["solo"]

    def test_idempotent(self, tel_aviv_reports):
        other = make_event("c", "Talks resume in Vienna", event_type=EventType.DIPLOMACY,
                           location="Vienna", event_time=T0 - timedelta(days=1), severity=Severity.LOW)
        once = deduplicate_events(list(tel_aviv_reports) + [other])
        twice = deduplicate_events(once)
        assert [e.id for e in once] == ["b", "c"]
        assert twice == once

    def test_sorted_newest_first(self):
        older = make_event("old", "Missile hits Haifa", location="Haifa", event_time=T0 - timedelta(days=3))
        newer = make_event("new", "Envoys meet in Vienna", event_type=EventType.DIPLOMACY, location="Vienna")
        assert [e.id for e in deduplicate_events([older, newer])] == ["new", "old"]

    def test_empty(self):
        assert deduplicate_events([]) == []


def test_merge_cluster_unions_sources():
    first = make_event("x", "Missile hits Haifa", location="Haifa", source="BBC")
    second = make_event("y", "Missile hits Haifa", location="Haifa", source="BBC", batch_index=1)
    merged = merge_cluster([first, second])
    assert merged.sources == ["BBC"]
    assert merged.merged_from == ["x", "y"]
    assert merged.description == "Missile hits Haifa"
    assert merged.confidence == pytest.approx(0.6)
