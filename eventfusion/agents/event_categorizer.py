"""
事件分类与严重程度评估。
"""
import logging
import re
from typing import Dict, Optional

from pydantic import BaseModel, Field

from ..core.models.entities import ArticleSummary, EntityBundle
from ..core.models.events import EventType, Severity

logger = logging.getLogger(__name__)

# 获胜类别得分低于该值时归为 OTHER
MIN_CATEGORY_SCORE = 5

NUCLEAR_CONTENT_BONUS = 10
OPERATION_STRIKE_BONUS = 5


class CategoryMatch(BaseModel):
    """分类结果"""
    event_type: EventType
    score: float = 0.0
    scores: Dict[str, float] = Field(default_factory=dict, description="各类别得分明细")


def score_categories(text: str, summary: Optional[ArticleSummary] = None) -> Dict[EventType, float]:
    """每个命中的关键词贡献一次该类别的优先级权重"""
    lowered = (text or "").lower()
    scores: Dict[EventType, float] = {}
    for category in EventType.categories():
        hits = sum(1 for keyword in category.keywords if keyword in lowered)
        scores[category] = float(category.priority * hits)

    if summary is not None:
        if summary.has_nuclear_content:
            scores[EventType.NUCLEAR] += NUCLEAR_CONTENT_BONUS
        if summary.military_operations:
            scores[EventType.STRIKE] += OPERATION_STRIKE_BONUS

    return scores


def categorize(text: str, summary: Optional[ArticleSummary] = None) -> CategoryMatch:
    scores = score_categories(text, summary)

    best_type = EventType.OTHER
    best_score = 0.0
    # 严格大于：平局时保留先声明的类别
    for category, score in scores.items():
        if score > best_score:
            best_type, best_score = category, score

    if best_score < MIN_CATEGORY_SCORE:
        best_type = EventType.OTHER

    return CategoryMatch(
        event_type=best_type,
        score=best_score,
        scores={k.value: v for k, v in scores.items()},
    )


_THREE_DIGITS = re.compile(r"\d{3,}")
_KILLED_COUNT = re.compile(r"(\d+)\s*(killed|dead)")


def weighted_casualty_score(entities: Optional[EntityBundle]) -> int:
    """killed x2，其余伤亡类型 x1"""
    if entities is None:
        return 0
    return sum(
        c.count * 2 if c.casualty_type == "killed" else c.count
        for c in entities.casualties
    )


def assess_severity(
    text: str,
    event_type: EventType,
    entities: Optional[EntityBundle] = None,
) -> Severity:
    """
    顺序决策表，第一条满足的规则生效。

    伤亡相关规则中 critical 分支先于 high 分支判断 ("12 killed" -> critical)。
    """
    lowered = (text or "").lower()

    if "nuclear" in lowered and ("leak" in lowered or "radiation" in lowered):
        return Severity.CRITICAL
    # 3+ digit numbers suggest mass casualties
    if _THREE_DIGITS.search(lowered):
        return Severity.CRITICAL

    weighted = weighted_casualty_score(entities)
    mentions_deaths = "killed" in lowered or "dead" in lowered
    death_match = _KILLED_COUNT.search(lowered) if mentions_deaths else None

    if weighted > 100:
        return Severity.CRITICAL
    if death_match and int(death_match.group(1)) > 10:
        return Severity.CRITICAL
    if weighted > 20:
        return Severity.HIGH
    if mentions_deaths:
        return Severity.HIGH

    if event_type in (EventType.NUCLEAR, EventType.MISSILE):
        return Severity.HIGH

    if any(word in lowered for word in ("injured", "wounded", "damage", "strike")):
        return Severity.MEDIUM

    return Severity.LOW
