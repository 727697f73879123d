"""
事件去重：贪心单链聚类 + 聚类合并。

按事件时间降序排列后，每个尚未分配的事件作为锚点，
扫描其后所有未分配事件，相似度严格大于阈值即并入锚点聚类。
"""
import logging
import re
from datetime import datetime
from typing import List, Optional, Sequence, Set, Union

from ..config.settings import settings
from ..core.gazetteer import IMPORTANT_LOCATION_KEYWORDS
from ..core.models.events import CandidateEvent, CanonicalEvent, EventSignature, Severity
from ..core.utils.text import dedupe, jaccard, normalize_location
from ..infrastructure.utils.time_util import hours_between

logger = logging.getLogger(__name__)

Event = Union[CandidateEvent, CanonicalEvent]

SIMILARITY_WEIGHTS = {
    "location": 0.3,
    "time": 0.2,
    "keywords": 0.3,
}
SEVERITY_MATCH_SCORE = 0.2
SEVERITY_MISMATCH_SCORE = 0.1

# (max hours apart, score)
TIME_BANDS = [(1, 1.0), (6, 0.8), (12, 0.6), (24, 0.4), (48, 0.2)]

KEYWORD_VOCABULARY = {
    "military": ("missile", "strike", "attack", "bomb", "explosion", "aircraft",
                 "drone", "rocket", "artillery", "raid"),
    "damage": ("killed", "injured", "wounded", "casualties", "damage", "destroyed",
               "hit", "struck", "targeted"),
    "nuclear": ("nuclear", "uranium", "enrichment", "reactor", "facility",
                "radiation", "contamination"),
}

DESCRIPTION_SEPARATOR = " | "


def extract_location_keywords(location: str) -> Set[str]:
    keywords = set()
    lowered = (location or "").lower()
    for keyword in IMPORTANT_LOCATION_KEYWORDS:
        if keyword in lowered:
            keywords.add(keyword)

    # Capitalized words look like place names
    for word in (location or "").split():
        if word[0].isupper() and len(word) > 2:
            keywords.add(word.lower())
    return keywords


def compare_locations(loc1: str, loc2: str) -> float:
    norm1 = normalize_location(loc1)
    norm2 = normalize_location(loc2)

    if norm1 == norm2:
        return 1.0
    if norm1 in norm2 or norm2 in norm1:
        return 0.8

    return jaccard(extract_location_keywords(loc1), extract_location_keywords(loc2))


def compare_time_windows(time1: datetime, time2: datetime) -> float:
    hours = hours_between(time1, time2)
    for limit, score in TIME_BANDS:
        if hours <= limit:
            return score
    return 0.0


def extract_keywords(text: str) -> Set[str]:
    """固定词表命中 + 文本中出现的所有数字 (num:N)"""
    lowered = (text or "").lower()
    keywords = {
        word
        for words in KEYWORD_VOCABULARY.values()
        for word in words
        if word in lowered
    }
    keywords.update(f"num:{n}" for n in re.findall(r"\d+", lowered))
    return keywords


def signature_similarity(a: EventSignature, b: EventSignature) -> float:
    if a.event_type != b.event_type:
        return 0.0

    score = (
        compare_locations(a.location, b.location) * SIMILARITY_WEIGHTS["location"]
        + compare_time_windows(a.event_time, b.event_time) * SIMILARITY_WEIGHTS["time"]
        + jaccard(extract_keywords(a.text), extract_keywords(b.text)) * SIMILARITY_WEIGHTS["keywords"]
        + (SEVERITY_MATCH_SCORE if a.severity == b.severity else SEVERITY_MISMATCH_SCORE)
    )
    # 消除浮点误差，保证 0.7 边界判断稳定
    return round(score, 6)


def calculate_similarity(event1: Event, event2: Event) -> float:
    """计算两个事件的相似度 (0.0 - 1.0)"""
    return signature_similarity(event1.signature(), event2.signature())


def merge_cluster(cluster: Sequence[Event]) -> CanonicalEvent:
    """
    合并一个聚类。第一个成员为锚点，其 id / 标题 / 类型 / 地点保留。
    单成员聚类原样返回 (候选事件提升为规范事件，字段不变)。
    """
    anchor = cluster[0]
    if len(cluster) == 1:
        return CanonicalEvent.from_candidate(anchor)

    members = [CanonicalEvent.from_candidate(e) for e in cluster]

    sources = dedupe(s for m in members for s in m.sources)
    merged_from = dedupe(i for m in members for i in m.merged_from)
    descriptions = dedupe(d for m in members for d in m.descriptions)
    earliest = min(members, key=lambda m: m.event_time)

    return members[0].model_copy(update={
        "event_time": earliest.event_time,
        "temporal_confidence": earliest.temporal_confidence,
        "time_phrase": earliest.time_phrase,
        "severity": Severity.highest([m.severity for m in members]),
        "description": DESCRIPTION_SEPARATOR.join(descriptions),
        "descriptions": descriptions,
        "confidence": min(0.5 + 0.1 * len(sources), 1.0),
        "sources": sources,
        "merged_from": merged_from,
    })


def sort_events(events: Sequence[Event]) -> List[Event]:
    """时间降序；同一时间保持批内到达顺序"""
    return sorted(events, key=lambda e: e.event_time, reverse=True)


def deduplicate_events(
    events: Sequence[Event],
    similarity_threshold: Optional[float] = None,
) -> List[CanonicalEvent]:
    """
    Greedy single-link clustering.

    Only anchor-to-candidate similarity is checked, so a cluster may hold
    members that are not pairwise similar to each other.
    """
    threshold = settings.DEDUP_SIMILARITY_THRESHOLD if similarity_threshold is None else similarity_threshold
    ordered = sort_events(events)
    assigned = set()
    result: List[CanonicalEvent] = []

    for i, anchor in enumerate(ordered):
        if i in assigned:
            continue
        assigned.add(i)
        cluster = [anchor]
        anchor_sig = anchor.signature()

        for j in range(i + 1, len(ordered)):
            if j in assigned:
                continue
            similarity = signature_similarity(anchor_sig, ordered[j].signature())
            if similarity > threshold:
                logger.debug(f"Merging '{ordered[j].title[:40]}' into '{anchor.title[:40]}' ({similarity:.3f})")
                cluster.append(ordered[j])
                assigned.add(j)

        result.append(merge_cluster(cluster))

    merged_count = len(events) - len(result)
    if merged_count:
        logger.info(f"Deduplicated {len(events)} events into {len(result)} ({merged_count} merged)")
    return sort_events(result)
