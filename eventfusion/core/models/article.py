"""
原始文章模型：由上游采集层提供，流水线只读不改。
"""
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...infrastructure.utils.time_util import parse_timestamp


class RawArticle(BaseModel):
    """已抓取的新闻文章"""

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="标题")
    description: str = Field(default="", description="摘要 (可为空)")
    body: str = Field(default="", description="正文 (可为空)")
    published_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="发布时间",
    )
    source_name: str = Field(default="Unknown", description="来源媒体名称")
    url: str = Field(default="", description="原文链接")

    @model_validator(mode="before")
    @classmethod
    def _accept_feed_layout(cls, data: Any) -> Any:
        """兼容新闻聚合接口的字段布局: source.name / publishedAt / content"""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        source = data.pop("source", None)
        if "source_name" not in data:
            data["source_name"] = source.get("name") if isinstance(source, dict) else source
        if "published_at" not in data and "publishedAt" in data:
            data["published_at"] = data.pop("publishedAt")
        if "body" not in data and "content" in data:
            data["body"] = data.pop("content")
        return data

    @field_validator("title", "description", "body", "url", mode="before")
    @classmethod
    def _empty_if_missing(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("source_name", mode="before")
    @classmethod
    def _unknown_source(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            return "Unknown"
        return str(v).strip()

    @field_validator("published_at", mode="before")
    @classmethod
    def _parse_published(cls, v: Any) -> datetime:
        parsed = parse_timestamp(v)
        if parsed is None:
            return datetime.now(timezone.utc)
        return parsed

    @property
    def headline_text(self) -> str:
        """title + description"""
        return f"{self.title} {self.description}".strip()

    @property
    def full_text(self) -> str:
        """title / description / body 之间补句号，避免大写短语跨字段粘连"""
        parts = [p.strip() for p in (self.title, self.description, self.body) if p and p.strip()]
        return " ".join(
            p if i == len(parts) - 1 or p[-1] in ".!?" else p + "."
            for i, p in enumerate(parts)
        )
