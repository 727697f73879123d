"""
Cross-source verification.

For a canonical event, collect independent claims from the recent article
corpus, build a consensus (location / casualty range / median time) and
flag discrepancies between sources.
"""
import logging
import re
from collections import Counter
from datetime import timedelta
from typing import Dict, List, Optional, Sequence

from ...agents.entity_extractor import EntityExtractor
from ...config.settings import settings
from ..models.article import RawArticle
from ..models.entities import preferred_location
from ..models.events import CanonicalEvent
from ..models.source_registry import any_wire_service
from ..models.verification import Claim, Consensus, VerificationResult
from ..utils.text import dedupe, word_jaccard

logger = logging.getLogger(__name__)

INSUFFICIENT_SOURCES = "insufficient sources"
UNKNOWN_LOCATION = "Unknown location"

CLAIM_CASUALTY_PATTERNS = [
    re.compile(r"(\d+)\s*(?:people\s*)?killed", re.IGNORECASE),
    re.compile(r"(\d+)\s*dead", re.IGNORECASE),
    re.compile(r"(\d+)\s*casualties", re.IGNORECASE),
    re.compile(r"death\s*toll\s*(?:rises?\s*to\s*)?(\d+)", re.IGNORECASE),
]


def extract_claim_casualties(text: str) -> Optional[int]:
    for pattern in CLAIM_CASUALTY_PATTERNS:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return None


def location_matches(event_location: str, text: str) -> bool:
    """整体子串匹配，或任一长度 > 3 的地名片段出现在文本中"""
    if not event_location or event_location == UNKNOWN_LOCATION:
        return False
    location = event_location.lower()
    lowered = text.lower()
    if location in lowered:
        return True
    parts = [p for p in re.split(r"[,\s]+", location) if len(p) > 3]
    return any(part in lowered for part in parts)


class EventVerifier:
    """
    Verifies canonical events against a corpus snapshot.
    All thresholds come from settings unless overridden.
    """

    def __init__(
        self,
        window_hours: Optional[float] = None,
        similarity_threshold: Optional[float] = None,
        min_sources: Optional[int] = None,
        confidence_threshold: Optional[float] = None,
        max_discrepancies: Optional[int] = None,
        extractor: Optional[EntityExtractor] = None,
    ):
        self.window = timedelta(hours=window_hours if window_hours is not None else settings.VERIFICATION_WINDOW_HOURS)
        self.similarity_threshold = (
            similarity_threshold if similarity_threshold is not None else settings.CLAIM_SIMILARITY_THRESHOLD
        )
        self.min_sources = min_sources if min_sources is not None else settings.MIN_VERIFICATION_SOURCES
        self.confidence_threshold = (
            confidence_threshold if confidence_threshold is not None else settings.VERIFIED_CONFIDENCE_THRESHOLD
        )
        self.max_discrepancies = (
            max_discrepancies if max_discrepancies is not None else settings.MAX_VERIFIED_DISCREPANCIES
        )
        self.extractor = extractor or EntityExtractor()

    def verify_event(self, event: CanonicalEvent, corpus: Sequence[RawArticle]) -> VerificationResult:
        claims = self.find_related_claims(event, corpus)
        sources = dedupe(c.source for c in claims)

        if len(sources) < self.min_sources:
            return VerificationResult(
                verified=False,
                confidence=settings.UNVERIFIED_CONFIDENCE,
                discrepancies=[INSUFFICIENT_SOURCES],
                sources=sources,
                claim_count=len(claims),
            )

        consensus = self.analyze_consensus(claims)
        discrepancies = self.find_discrepancies(claims, consensus)
        confidence = self.calculate_confidence(sources, consensus, discrepancies)

        return VerificationResult(
            verified=confidence > self.confidence_threshold and len(discrepancies) < self.max_discrepancies,
            confidence=confidence,
            consensus=consensus,
            discrepancies=discrepancies,
            sources=sources,
            claim_count=len(claims),
        )

    def verify_batch(
        self, events: Sequence[CanonicalEvent], corpus: Sequence[RawArticle]
    ) -> Dict[str, VerificationResult]:
        return {event.id: self.verify_event(event, corpus) for event in events}

    def find_related_claims(self, event: CanonicalEvent, corpus: Sequence[RawArticle]) -> List[Claim]:
        event_text = f"{event.title} {event.description}".lower()
        claims = []

        for article in corpus:
            if abs(article.published_at - event.event_time) > self.window:
                continue

            text = article.headline_text.lower()
            similarity = word_jaccard(text, event_text)
            if similarity < self.similarity_threshold and not location_matches(event.location, text):
                continue

            reported_location = preferred_location(self.extractor.extract_locations(article.headline_text))
            claims.append(Claim(
                source=article.source_name,
                timestamp=article.published_at,
                location=reported_location or event.location,
                casualties=extract_claim_casualties(text),
                description=article.description or article.title,
                url=article.url,
            ))

        return claims

    @staticmethod
    def analyze_consensus(claims: Sequence[Claim]) -> Consensus:
        locations = [c.location for c in claims if c.location]
        # most_common keeps first-seen order on ties
        consensus_location = Counter(locations).most_common(1)[0][0] if locations else None

        casualties = [c.casualties for c in claims if c.casualties is not None]
        casualty_range = (min(casualties), max(casualties)) if casualties else None

        times = sorted(c.timestamp for c in claims)
        median_time = times[len(times) // 2] if times else None

        return Consensus(location=consensus_location, casualty_range=casualty_range, median_time=median_time)

    @staticmethod
    def find_discrepancies(claims: Sequence[Claim], consensus: Consensus) -> List[str]:
        discrepancies = []

        if consensus.casualty_range:
            low, high = consensus.casualty_range
            spread = high - low
            if spread > settings.CASUALTY_SPREAD_ABSOLUTE and spread / high > settings.CASUALTY_SPREAD_RATIO:
                discrepancies.append(f"Casualty reports vary significantly: {low}-{high}")

        unique_locations = dedupe(c.location for c in claims if c.location)
        if len(unique_locations) > settings.MAX_CONSISTENT_LOCATIONS:
            discrepancies.append(f"Multiple locations reported: {', '.join(unique_locations)}")

        if claims:
            times = [c.timestamp for c in claims]
            if max(times) - min(times) > timedelta(hours=settings.MAX_CLAIM_SPAN_HOURS):
                discrepancies.append("Event timing varies by more than 24 hours across sources")

        return discrepancies

    @staticmethod
    def calculate_confidence(sources: Sequence[str], consensus: Consensus, discrepancies: Sequence[str]) -> float:
        confidence = 0.5
        confidence += min(0.3, len(sources) * 0.1)
        if any_wire_service(sources):
            confidence += 0.2
        if consensus.location:
            confidence += 0.1
        if consensus.casualty_range:
            confidence += 0.1
        confidence -= 0.15 * len(discrepancies)
        return max(0.0, min(1.0, confidence))
