"""
测试跨来源交叉验证
"""
from datetime import timedelta

import pytest

from eventfusion.core.models.events import CandidateEvent, CanonicalEvent, EventType, Severity
from eventfusion.core.models.verification import Consensus
from eventfusion.core.verification.verifier import (
    INSUFFICIENT_SOURCES,
    EventVerifier,
    extract_claim_casualties,
    location_matches,
)


@pytest.fixture
def verifier():
    return EventVerifier()


@pytest.fixture
def make_event(published):
    def _make(title="Missile strike in Haifa", location="Haifa", event_time=None, id="event-1"):
        candidate = CandidateEvent(
            id=id,
            event_time=event_time or published,
            temporal_confidence=0.3,
            event_type=EventType.MISSILE,
            severity=Severity.HIGH,
            title=title,
            description=title,
            location=location,
            confidence=0.65,
            source="Reuters",
        )
        return CanonicalEvent.from_candidate(candidate)
    return _make


class TestHelpers:

    @pytest.mark.parametrize("text,expected", [
        ("5 killed in haifa", 5),
        ("12 dead after strike", 12),
        ("death toll rises to 30", 30),
        ("20 casualties reported", 20),
        ("no figures yet", None),
    ])
    def test_claim_casualties(self, text, expected):
        assert extract_claim_casualties(text) == expected

    def test_location_matches(self):
        assert location_matches("Tel Aviv", "sirens in tel aviv")
        assert location_matches("Gaza City", "strikes across gaza")
        assert not location_matches("Haifa", "talks in vienna")
        assert not location_matches("Unknown location", "unknown location reported")


class TestVerifyEvent:

    def test_casualty_discrepancy_still_verified(self, verifier, make_event, make_article):
        corpus = [
            make_article(title="5 killed in Haifa missile strike", source="Reuters"),
            make_article(title="40 killed in Haifa missile strike", source="BBC"),
        ]
        result = verifier.verify_event(make_event(), corpus)

        assert result.sources == ["Reuters", "BBC"]
        assert result.consensus.location == "Haifa"
        assert result.consensus.casualty_range == (5, 40)
        assert result.discrepancies == ["Casualty reports vary significantly: 5-40"]
        assert result.confidence == pytest.approx(0.95)
        assert result.verified is True

    def test_consistent_non_wire_sources(self, verifier, make_event, make_article):
        corpus = [
            make_article(title="3 killed in Haifa missile strike", source="Haaretz"),
            make_article(title="3 killed as missile hits Haifa", source="Al Jazeera"),
        ]
        result = verifier.verify_event(make_event(), corpus)
        assert result.discrepancies == []
        assert result.confidence == pytest.approx(0.9)
        assert result.verified is True

    def test_multiple_locations(self, verifier, make_event, make_article):
        corpus = [
            make_article(title="Drone attack hits Haifa in Israel", source="BBC"),
            make_article(title="Drone attack hits Tel Aviv in Israel", source="CNN"),
            make_article(title="Drone attack hits Jerusalem in Israel", source="Reuters"),
        ]
        event = make_event(title="Drone attack on Israel", location="Israel")
        result = verifier.verify_event(event, corpus)

        assert result.consensus.location == "Haifa"
        assert result.consensus.casualty_range is None
        assert result.discrepancies == ["Multiple locations reported: Haifa, Tel Aviv, Jerusalem"]
        assert result.confidence == pytest.approx(0.95)

    def test_timing_discrepancy(self, verifier, make_event, make_article, published):
        corpus = [
            make_article(title="Missile hits Haifa port", source="Reuters",
                         published_at=published - timedelta(hours=15)),
            make_article(title="Missile hits Haifa port", source="BBC",
                         published_at=published + timedelta(hours=15)),
        ]
        result = verifier.verify_event(make_event(), corpus)
        assert result.discrepancies == ["Event timing varies by more than 24 hours across sources"]
        assert result.consensus.median_time == published + timedelta(hours=15)
        assert result.confidence == pytest.approx(0.85)

    def test_single_source_is_insufficient(self, verifier, make_event, make_article):
        corpus = [
            make_article(title="5 killed in Haifa missile strike", source="Reuters", url="https://r.example/1"),
            make_article(title="Haifa strike: toll unclear", source="Reuters", url="https://r.example/2"),
        ]
        result = verifier.verify_event(make_event(), corpus)
        assert result.verified is False
        assert result.confidence == 0.3
        assert result.discrepancies == [INSUFFICIENT_SOURCES]
        assert result.sources == ["Reuters"]
        assert result.claim_count == 2

    def test_articles_outside_window_ignored(self, verifier, make_event, make_article, published):
        corpus = [
            make_article(title="5 killed in Haifa missile strike", source="Reuters"),
            make_article(title="5 killed in Haifa missile strike", source="BBC",
                         published_at=published - timedelta(hours=72)),
        ]
        result = verifier.verify_event(make_event(), corpus)
        assert result.sources == ["Reuters"]
        assert result.verified is False

    def test_word_overlap_without_location(self, verifier, make_event, make_article):
        event = make_event(title="Explosion reported near power station", location="Unknown location")
        claims = verifier.find_related_claims(event, [
            make_article(title="Explosion reported near power station", source="BBC"),
            make_article(title="Football results", source="CNN"),
        ])
        assert [c.source for c in claims] == ["BBC"]
        assert claims[0].location == "Unknown location"

    def test_empty_corpus(self, verifier, make_event):
        result = verifier.verify_event(make_event(), [])
        assert result.verified is False
        assert result.claim_count == 0


def test_verify_batch_keyed_by_id(verifier, make_event, make_article):
    events = [make_event(id="e1"), make_event(title="Talks in Vienna", location="Vienna", id="e2")]
    results = verifier.verify_batch(events, [make_article(title="5 killed in Haifa missile strike")])
    assert set(results) == {"e1", "e2"}
    assert results["e1"].claim_count == 1
    assert results["e2"].claim_count == 0


def test_confidence_formula():
    consensus = Consensus(location="Haifa", casualty_range=(3, 3))
    score = EventVerifier.calculate_confidence(["Haaretz", "Ynet", "Maariv", "Walla"], consensus, [])
    # source bonus capped at 0.3
    assert score == pytest.approx(1.0)
    assert EventVerifier.calculate_confidence(["A", "B"], Consensus(), ["x", "y", "z", "w"]) == pytest.approx(0.1)
