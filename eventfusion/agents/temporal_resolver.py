"""
时间解析器：把文本中的时间短语换算成事件发生的绝对时间 (区别于发布时间)。

按层级依次尝试，前一层命中则不再继续：
1. 显式日期    "on March 5" / "March 5, 2025"          0.9 ~ 0.95
2. 相对时间    "3 hours ago" / "last night" / ...      0.75 ~ 0.9
3. 星期引用    "last Monday" / "on Monday"             0.7 ~ 0.8
4. 回退        发布时间本身                              0.3
"""
import logging
import re
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from ..core.models.events import TemporalResolution
from ..infrastructure.utils.time_util import ensure_utc

logger = logging.getLogger(__name__)

MONTHS = [
    "january", "february", "march", "april", "may", "june", "july",
    "august", "september", "october", "november", "december",
]
MONTH_ABBR = ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"]

# Monday = 0，与 datetime.weekday() 一致
WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_MONTH_RE = "|".join(MONTHS + MONTH_ABBR)
_WEEKDAY_RE = "|".join(WEEKDAYS)

ON_DATE_PATTERN = re.compile(rf"\bon\s+({_MONTH_RE})\.?\s+(\d{{1,2}})\b")
FULL_DATE_PATTERN = re.compile(rf"\b({_MONTH_RE})\.?\s+(\d{{1,2}}),?\s+(\d{{4}})\b")
LAST_WEEKDAY_PATTERN = re.compile(rf"\blast\s+({_WEEKDAY_RE})\b")
ON_WEEKDAY_PATTERN = re.compile(rf"\bon\s+({_WEEKDAY_RE})\b")


def _month_index(token: str) -> int:
    if token in MONTHS:
        return MONTHS.index(token) + 1
    return MONTH_ABBR.index(token) + 1


def _at_hour(dt: datetime, hour: int) -> datetime:
    return dt.replace(hour=hour, minute=0, second=0, microsecond=0)


# (pattern, confidence, offset from publish time given the match)
RELATIVE_RULES: List[tuple] = [
    (re.compile(r"(\d+)\s*hours?\s*ago"), 0.85,
     lambda pub, m: pub - timedelta(hours=int(m.group(1)))),
    (re.compile(r"(\d+)\s*minutes?\s*ago"), 0.9,
     lambda pub, m: pub - timedelta(minutes=int(m.group(1)))),
    (re.compile(r"(\d+)\s*days?\s*ago"), 0.8,
     lambda pub, m: pub - timedelta(days=int(m.group(1)))),
    (re.compile(r"(\d+)\s*weeks?\s*ago"), 0.75,
     lambda pub, m: pub - timedelta(weeks=int(m.group(1)))),
    (re.compile(r"\bearlier\s+today\b"), 0.85,
     lambda pub, m: pub - timedelta(hours=6)),
    (re.compile(r"\bthis\s+morning\b"), 0.8,
     lambda pub, m: _at_hour(pub, 9)),
    (re.compile(r"\blast\s+night\b"), 0.85,
     lambda pub, m: _at_hour(pub - timedelta(days=1), 21)),
    (re.compile(r"\byesterday\b"), 0.9,
     lambda pub, m: pub - timedelta(days=1)),
]


class TemporalResolver:
    """相对于某篇文章发布时间的时间解析器"""

    FALLBACK_CONFIDENCE = 0.3

    def __init__(self, published_at: datetime):
        self.published_at = ensure_utc(published_at)

    def resolve(self, text: str) -> TemporalResolution:
        lowered = (text or "").lower()
        tiers: List[Callable[[str], Optional[TemporalResolution]]] = [
            self._explicit_date,
            self._relative_offset,
            self._weekday_reference,
        ]
        for tier in tiers:
            resolution = tier(lowered)
            if resolution is not None:
                return resolution

        return TemporalResolution(
            event_time=self.published_at,
            confidence=self.FALLBACK_CONFIDENCE,
            time_phrase="",
            is_explicit=False,
            tier="fallback",
        )

    def resolve_all(self, text: str, min_confidence: float = 0.5) -> List[TemporalResolution]:
        """逐句解析，返回置信度高于阈值的全部时间引用"""
        references = []
        for sentence in re.split(r"[.!?]", text or ""):
            resolution = self.resolve(sentence)
            if resolution.confidence > min_confidence:
                references.append(resolution)
        return references

    def _explicit_date(self, text: str) -> Optional[TemporalResolution]:
        pub = self.published_at

        # 带年份的日期优先，避免 "on March 5, 2025" 被当作无年份日期
        match = FULL_DATE_PATTERN.search(text)
        if match:
            try:
                event_time = pub.replace(
                    year=int(match.group(3)), month=_month_index(match.group(1)),
                    day=int(match.group(2)), hour=0, minute=0, second=0, microsecond=0,
                )
                return TemporalResolution(
                    event_time=event_time, confidence=0.95,
                    time_phrase=match.group(0), is_explicit=True, tier="explicit",
                )
            except ValueError:
                logger.debug(f"Skipping impossible date '{match.group(0)}'")

        match = ON_DATE_PATTERN.search(text)
        if match:
            try:
                event_time = pub.replace(
                    month=_month_index(match.group(1)), day=int(match.group(2)),
                    hour=0, minute=0, second=0, microsecond=0,
                )
                if event_time > pub:
                    # 尚未发生的日期视为去年
                    event_time = event_time.replace(year=event_time.year - 1)
                return TemporalResolution(
                    event_time=event_time, confidence=0.9,
                    time_phrase=match.group(0), is_explicit=True, tier="explicit",
                )
            except ValueError:
                logger.debug(f"Skipping impossible date '{match.group(0)}'")

        return None

    def _relative_offset(self, text: str) -> Optional[TemporalResolution]:
        for pattern, confidence, compute in RELATIVE_RULES:
            match = pattern.search(text)
            if match:
                try:
                    event_time = compute(self.published_at, match)
                except (OverflowError, ValueError):
                    logger.debug(f"Skipping out-of-range offset '{match.group(0)}'")
                    continue
                return TemporalResolution(
                    event_time=event_time,
                    confidence=confidence,
                    time_phrase=match.group(0),
                    is_explicit=False,
                    tier="relative",
                )
        return None

    def _weekday_reference(self, text: str) -> Optional[TemporalResolution]:
        current = self.published_at.weekday()

        match = LAST_WEEKDAY_PATTERN.search(text)
        if match:
            days_ago = current - WEEKDAYS.index(match.group(1))
            if days_ago <= 0:
                days_ago += 7
            return TemporalResolution(
                event_time=self.published_at - timedelta(days=days_ago),
                confidence=0.8, time_phrase=match.group(0), tier="weekday",
            )

        match = ON_WEEKDAY_PATTERN.search(text)
        if match:
            days_ago = current - WEEKDAYS.index(match.group(1))
            if days_ago < 0:
                days_ago += 7
            if days_ago == 0:
                days_ago = 7
            return TemporalResolution(
                event_time=self.published_at - timedelta(days=days_ago),
                confidence=0.7, time_phrase=match.group(0), tier="weekday",
            )

        return None


def resolve_event_time(text: str, published_at: datetime) -> TemporalResolution:
    return TemporalResolver(published_at).resolve(text)
