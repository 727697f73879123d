"""
事件模型：候选事件 (单篇文章) -> 规范事件 (聚类合并后)。
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from .entities import EntityBundle


class EventType(str, Enum):
    """事件类别 (封闭集合)，声明顺序即平局时的优先顺序"""
    NUCLEAR = "nuclear"
    MISSILE = "missile"
    STRIKE = "strike"
    CYBER = "cyber"
    ALERT = "alert"
    DIPLOMACY = "diplomacy"
    INTELLIGENCE = "intelligence"
    OTHER = "other"

    @property
    def priority(self) -> int:
        return _CATEGORY_RULES.get(self, (0, ()))[0]

    @property
    def keywords(self) -> Tuple[str, ...]:
        return _CATEGORY_RULES.get(self, (0, ()))[1]

    @classmethod
    def categories(cls) -> List["EventType"]:
        """所有可打分的类别 (不含 OTHER)"""
        return [member for member in cls if member in _CATEGORY_RULES]


# (priority, keywords)
_CATEGORY_RULES = {
    EventType.NUCLEAR: (10, ("nuclear", "uranium", "enrichment", "reactor", "radiation",
                             "contamination", "natanz", "arak", "bushehr", "fordow")),
    EventType.MISSILE: (9, ("missile", "rocket", "ballistic", "cruise", "launch", "fired")),
    EventType.STRIKE: (8, ("strike", "airstrike", "attack", "bomb", "explosion", "raid", "hit")),
    EventType.CYBER: (7, ("cyber", "hack", "malware", "stuxnet", "digital", "network")),
    EventType.ALERT: (6, ("alert", "warning", "siren", "emergency", "evacuation")),
    EventType.DIPLOMACY: (5, ("diplomatic", "talks", "negotiation", "meeting", "summit",
                              "ambassador", "sanctions")),
    EventType.INTELLIGENCE: (6, ("intelligence", "spy", "espionage", "surveillance",
                                 "mossad", "cia")),
}


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)

    @classmethod
    def highest(cls, levels: List["Severity"]) -> "Severity":
        return max(levels, key=lambda s: s.rank, default=cls.LOW)


_SEVERITY_ORDER = [Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]


class TemporalResolution(BaseModel):
    """时间解析结果"""

    event_time: datetime
    confidence: float = Field(..., ge=0.0, le=1.0)
    time_phrase: str = Field(default="", description="命中的时间短语")
    is_explicit: bool = False
    tier: str = Field(default="fallback", description="explicit / relative / weekday / fallback")


class EventSignature(BaseModel):
    """去重比较时使用的字段快照"""

    event_type: EventType
    location: str
    event_time: datetime
    text: str
    severity: Severity


class CandidateEvent(BaseModel):
    """单篇文章抽取出的候选事件"""

    id: str
    event_time: datetime
    temporal_confidence: float = Field(..., ge=0.0, le=1.0)
    time_phrase: str = ""
    event_type: EventType = EventType.OTHER
    severity: Severity = Severity.LOW
    title: str
    description: str = ""
    location: str = "Unknown location"
    confidence: float = Field(default=0.5, ge=0.0, le=1.0, description="置信度 (0.0 ~ 1.0)")
    source: str = "Unknown"
    url: str = ""
    published_at: Optional[datetime] = None
    batch_index: int = Field(default=0, description="批内到达顺序，用于稳定排序")
    entities: EntityBundle = Field(default_factory=EntityBundle)

    def signature(self) -> EventSignature:
        return EventSignature(
            event_type=self.event_type,
            location=self.location,
            event_time=self.event_time,
            text=f"{self.title} {self.description}",
            severity=self.severity,
        )


class CanonicalEvent(CandidateEvent):
    """一个聚类合并后的规范事件"""

    sources: List[str] = Field(..., min_length=1, description="贡献来源 (非空)")
    merged_from: List[str] = Field(default_factory=list)
    descriptions: List[str] = Field(default_factory=list, description="去重后的各条描述")
    anchor: EventSignature

    @classmethod
    def from_candidate(cls, event: CandidateEvent) -> "CanonicalEvent":
        """单成员聚类：字段原样保留"""
        if isinstance(event, CanonicalEvent):
            return event
        return cls(
            **event.model_dump(exclude={"entities"}),
            entities=event.entities,
            sources=[event.source],
            merged_from=[event.id],
            descriptions=[event.description] if event.description else [],
            anchor=event.signature(),
        )

    def signature(self) -> EventSignature:
        return self.anchor
