"""
交叉验证相关模型。
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from .events import CanonicalEvent, EventType, Severity
from ...infrastructure.utils.time_util import to_iso


class Claim(BaseModel):
    """语料库中与某事件相关的一条独立报道"""

    source: str
    timestamp: datetime
    location: Optional[str] = None
    casualties: Optional[int] = None
    description: str = ""
    url: str = ""


class Consensus(BaseModel):
    location: Optional[str] = None
    casualty_range: Optional[Tuple[int, int]] = Field(None, description="[min, max]")
    median_time: Optional[datetime] = None


class VerificationResult(BaseModel):
    verified: bool = False
    confidence: float = Field(..., ge=0.0, le=1.0)
    consensus: Consensus = Field(default_factory=Consensus)
    discrepancies: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list, description="佐证来源")
    claim_count: int = 0


class VerifiedEvent(BaseModel):
    """交付给时间线聚合器的最终事件"""

    id: str
    event_time: datetime
    event_type: EventType
    severity: Severity
    title: str
    description: str
    location: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    verified: bool
    verification_confidence: float = Field(..., ge=0.0, le=1.0)
    sources: List[str]
    discrepancies: List[str] = Field(default_factory=list)
    merged_from: List[str] = Field(default_factory=list)
    batch_index: int = 0

    @classmethod
    def from_canonical(cls, event: CanonicalEvent, result: VerificationResult) -> "VerifiedEvent":
        return cls(
            id=event.id,
            event_time=event.event_time,
            event_type=event.event_type,
            severity=event.severity,
            title=event.title,
            description=event.description,
            location=event.location,
            confidence=event.confidence,
            verified=result.verified,
            verification_confidence=result.confidence,
            sources=list(event.sources),
            discrepancies=list(result.discrepancies),
            merged_from=list(event.merged_from),
            batch_index=event.batch_index,
        )

    @property
    def timestamp(self) -> str:
        return to_iso(self.event_time)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "type": self.event_type.value,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "confidence": self.confidence,
            "verified": self.verified,
            "verification_confidence": self.verification_confidence,
            "sources": list(self.sources),
            "discrepancies": list(self.discrepancies),
        }
