"""
实体模型：每种实体一个显式的带标签记录，各自携带置信度。
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    lat: float
    lng: float


class PersonMention(BaseModel):
    kind: Literal["person"] = "person"
    name: str
    role: Optional[str] = None
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)


class OrganizationMention(BaseModel):
    kind: Literal["organization"] = "organization"
    name: str
    org_type: Optional[str] = None
    confidence: float = Field(default=0.7, ge=0.0, le=1.0)


class LocationMention(BaseModel):
    kind: Literal["location"] = "location"
    name: str
    location_type: str = "unknown"
    coordinates: Optional[Coordinates] = None
    confidence: float = Field(default=0.7, ge=0.0, le=1.0)


class WeaponMention(BaseModel):
    kind: Literal["weapon"] = "weapon"
    name: str
    weapon_class: str
    quantity: Optional[int] = None
    confidence: float = Field(default=0.85, ge=0.0, le=1.0)


class CasualtyMention(BaseModel):
    kind: Literal["casualty"] = "casualty"
    casualty_type: Literal["killed", "injured", "wounded", "casualties"]
    count: int = Field(..., ge=0)
    party: Optional[str] = Field(None, description="伤亡归属方，无法判断时为空")
    context: str = Field(default="", description="匹配位置前后的上下文")
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)


class OperationMention(BaseModel):
    kind: Literal["operation"] = "operation"
    name: str
    country: Optional[str] = None
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)


class EntityBundle(BaseModel):
    """单篇文章抽取出的全部实体"""

    people: List[PersonMention] = Field(default_factory=list)
    organizations: List[OrganizationMention] = Field(default_factory=list)
    locations: List[LocationMention] = Field(default_factory=list)
    weapons: List[WeaponMention] = Field(default_factory=list)
    casualties: List[CasualtyMention] = Field(default_factory=list)
    operations: List[OperationMention] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(
            (self.people, self.organizations, self.locations,
             self.weapons, self.casualties, self.operations)
        )


class ArticleSummary(BaseModel):
    """文章级分析摘要"""

    has_nuclear_content: bool = False
    has_casualties: bool = False
    military_operations: List[str] = Field(default_factory=list)
    primary_locations: List[str] = Field(default_factory=list)
    key_people: List[str] = Field(default_factory=list)
    weapon_types: List[str] = Field(default_factory=list)


def preferred_location(locations: List[LocationMention]) -> Optional[str]:
    """核设施 > 城市 > 第一个抽取到的地点"""
    if not locations:
        return None
    for loc in locations:
        if loc.location_type == "nuclear facility":
            return loc.name
    for loc in locations:
        if "city" in loc.location_type:
            return loc.name
    return locations[0].name
