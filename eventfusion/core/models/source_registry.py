from pydantic import BaseModel
import re
from typing import Iterable


class SourceReliability(BaseModel):
    """
    来源可靠度 (0.0 - 1.0)
    """
    score: float
    reason: str
    matched: str = ""

    @property
    def tier(self) -> str:
        if self.score >= 0.9: return "wire"
        if self.score >= 0.8: return "established"
        return "unrated"


# 知名通讯社 / 媒体 (按声明顺序匹配)
SOURCE_RELIABILITY = {
    "reuters": 0.95,
    "associated press": 0.95,
    "ap": 0.95,
    "bbc": 0.9,
    "cnn": 0.85,
    "the guardian": 0.85,
    "the new york times": 0.9,
    "washington post": 0.9,
    "al jazeera": 0.85,
    "haaretz": 0.85,
    "the times of israel": 0.8,
    "jerusalem post": 0.8,
}

DEFAULT_RELIABILITY = 0.7

# 验证阶段的可信加分来源
WIRE_SERVICES = ("reuters", "associated press", "ap", "bbc", "cnn")


def _mentions(source_name: str, key: str) -> bool:
    # 整词匹配，避免 "ap" 命中 "Japan Times"
    return re.search(rf"\b{re.escape(key)}\b", source_name.lower()) is not None


def evaluate_source(source_name: str, default: float = DEFAULT_RELIABILITY) -> SourceReliability:
    """按来源名称查表打分，未知来源返回默认值"""
    if not source_name:
        return SourceReliability(score=default, reason="No source name")

    for key, score in SOURCE_RELIABILITY.items():
        if _mentions(source_name, key):
            return SourceReliability(score=score, reason=f"Known outlet match: {key}", matched=key)

    return SourceReliability(score=default, reason="Unrated outlet")


def get_source_reliability(source_name: str, default: float = DEFAULT_RELIABILITY) -> float:
    return evaluate_source(source_name, default).score


def is_wire_service(source_name: str) -> bool:
    return any(_mentions(source_name or "", key) for key in WIRE_SERVICES)


def any_wire_service(source_names: Iterable[str]) -> bool:
    return any(is_wire_service(name) for name in source_names)
