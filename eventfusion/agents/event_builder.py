"""
事件构建器：把单篇文章的抽取结果组合成候选事件，并给出综合置信度。
"""
import hashlib
import logging
import re
from typing import List, Optional, Sequence

from ..config.settings import settings
from ..core.gazetteer import CONTEXT_LOCATIONS
from ..core.models.article import RawArticle
from ..core.models.entities import EntityBundle, preferred_location
from ..core.models.events import CandidateEvent, EventType
from ..core.models.source_registry import get_source_reliability
from .entity_extractor import EntityExtractor
from .event_categorizer import assess_severity, categorize
from .temporal_resolver import TemporalResolver

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown location"

# 置信度权重 (总和 1.0)
CONFIDENCE_WEIGHTS = {
    "temporal": 0.25,
    "location": 0.2,
    "detail": 0.15,
    "source": 0.25,
    "category": 0.15,
}

_GENERIC_LOCATION = re.compile(r"\b(?:in|at|near)\s+([A-Z][a-zA-Z]+(?:\s+[A-Z][a-zA-Z]+)*)")
_TRAILING_SOURCE = re.compile(r"\s+[-–—]\s+[^-–—]+$")
_LEADING_SOURCE = re.compile(r"^\[[^\]]+\]\s*")


def calculate_confidence(
    temporal_confidence: float,
    has_location: bool,
    has_details: bool,
    source_reliability: float,
    category_confidence: float,
) -> float:
    score = (
        temporal_confidence * CONFIDENCE_WEIGHTS["temporal"]
        + (1 if has_location else 0) * CONFIDENCE_WEIGHTS["location"]
        + (1 if has_details else 0) * CONFIDENCE_WEIGHTS["detail"]
        + source_reliability * CONFIDENCE_WEIGHTS["source"]
        + category_confidence * CONFIDENCE_WEIGHTS["category"]
    )
    return min(max(score, 0.0), 1.0)


def select_location(entities: EntityBundle, text: str, title: str) -> str:
    return preferred_location(entities.locations) or fallback_location(text, title)


def fallback_location(text: str, title: str) -> str:
    search_text = f"{title} {text}".lower()

    for name, variants in CONTEXT_LOCATIONS:
        for variant in variants:
            if variant in search_text and re.search(
                rf"(?:in|at|near|outside)\s+{re.escape(variant)}", search_text
            ):
                return name

    match = _GENERIC_LOCATION.search(text)
    if match:
        return match.group(1)

    if "iran" in search_text:
        return "Iran"
    if "israel" in search_text:
        return "Israel"

    return UNKNOWN_LOCATION


def generate_event_title(original_title: str, event_type: EventType) -> str:
    """去掉来源标注；标题里没有类型词时加上 "Type: " 前缀"""
    clean = _TRAILING_SOURCE.sub("", original_title or "")
    clean = _LEADING_SOURCE.sub("", clean).strip()

    if event_type != EventType.OTHER and event_type.value not in clean.lower():
        clean = f"{event_type.value.capitalize()}: {clean}"
    return clean


def make_event_id(article: RawArticle) -> str:
    key = f"{article.url}|{article.title}|{article.published_at.isoformat()}"
    return "event-" + hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]


def build_candidate_event(
    article: RawArticle,
    batch_index: int = 0,
    extractor: Optional[EntityExtractor] = None,
) -> CandidateEvent:
    """单篇文章 -> 候选事件 (纯函数，可并行调用)"""
    extractor = extractor or EntityExtractor()
    full_text = article.full_text

    temporal = TemporalResolver(article.published_at).resolve(full_text)
    entities, summary = extractor.analyze_article(article)
    category = categorize(full_text, summary)
    severity = assess_severity(full_text, category.event_type, entities)
    location = select_location(entities, full_text, article.title)

    confidence = calculate_confidence(
        temporal_confidence=temporal.confidence,
        has_location=location != UNKNOWN_LOCATION,
        has_details=len(full_text) > settings.MIN_DETAIL_LENGTH,
        source_reliability=get_source_reliability(
            article.source_name, settings.DEFAULT_SOURCE_RELIABILITY
        ),
        category_confidence=0.9 if category.event_type != EventType.OTHER else 0.5,
    )

    return CandidateEvent(
        id=make_event_id(article),
        event_time=temporal.event_time,
        temporal_confidence=temporal.confidence,
        time_phrase=temporal.time_phrase,
        event_type=category.event_type,
        severity=severity,
        title=generate_event_title(article.title, category.event_type),
        description=article.description or article.title,
        location=location,
        confidence=confidence,
        source=article.source_name,
        url=article.url,
        published_at=article.published_at,
        batch_index=batch_index,
        entities=entities,
    )


def is_publishable(event: CandidateEvent, min_confidence: Optional[float] = None) -> bool:
    threshold = settings.MIN_CANDIDATE_CONFIDENCE if min_confidence is None else min_confidence
    return event.confidence > threshold


def build_candidate_events(
    articles: Sequence[RawArticle],
    min_confidence: Optional[float] = None,
) -> List[CandidateEvent]:
    """顺序版本；流水线中使用并发版本 (graph/nodes/extract_node.py)"""
    extractor = EntityExtractor()
    candidates = []
    for index, article in enumerate(articles):
        event = build_candidate_event(article, index, extractor)
        if is_publishable(event, min_confidence):
            candidates.append(event)
        else:
            logger.info(f"Dropping low-confidence candidate ({event.confidence:.2f}): {event.title[:60]}")
    return candidates
