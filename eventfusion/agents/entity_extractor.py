"""
实体抽取器：从新闻文本中抽取人物、组织、地点、武器、伤亡与军事行动代号。

三种策略组合使用：
1. Gazetteer 查表 (已知城市、核设施、组织、领导人、行动代号)
2. 通用大写短语识别 (头衔 + 人名、"X said"、"... Ministry"、"in X")
3. 正则规则 (武器数量、伤亡数字与归属方、行动名称)
"""
import logging
import re
from typing import List, Optional, Tuple

from ..config.settings import settings
from ..core.gazetteer import (
    CASUALTY_PARTIES,
    KNOWN_LEADERS,
    KNOWN_OPERATIONS,
    NUCLEAR_TERMS,
    PERSON_TITLES,
    WEAPON_CLASSES,
    find_known_locations,
    find_known_organizations,
    is_known_entity_name,
)
from ..core.models.article import RawArticle
from ..core.models.entities import (
    ArticleSummary,
    CasualtyMention,
    Coordinates,
    EntityBundle,
    LocationMention,
    OperationMention,
    OrganizationMention,
    PersonMention,
    WeaponMention,
)
from ..core.utils.text import context_window, dedupe

logger = logging.getLogger(__name__)

_NAME = r"[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*"
_PLACE = r"[A-Z][a-zA-Z]+(?:\s+[A-Z][a-zA-Z]+)*"

_TITLES = "|".join(re.escape(t) for t in PERSON_TITLES)
_LEADERS = "|".join(re.escape(n) for n in KNOWN_LEADERS)

# (pattern, role)；role 为 None 时使用匹配到的头衔
PERSON_PATTERNS = [
    (re.compile(rf"\b({_TITLES})\s+{_NAME}"), None),
    (re.compile(rf"\b(?:[A-Z][a-z]+\s+)+(?:{_LEADERS})\b"), "leader"),
    (re.compile(rf"\b(?:IDF|IRGC)\s+(?:Chief|Commander|Spokesperson)\s+{_NAME}"), "military"),
]

SPEAKER_PATTERN = re.compile(
    r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)+)\s+(?:said|says|told|warned|announced|stated)\b"
)

ORG_PATTERNS = [
    re.compile(
        r"\b((?:(?!The\b)[A-Z][a-z]+\s+){1,3}"
        r"(?:Ministry|Forces|Agency|Council|Corps|Command|Army|Navy|Guard|Organization|Committee))\b"
    ),
    re.compile(r"\b(Ministry\s+of\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)"),
]

PLACE_PATTERN = re.compile(rf"\b(?:in|at|near|outside|around)\s+({_PLACE})")

# (pattern, casualty type, confidence)
CASUALTY_PATTERNS = [
    (re.compile(r"(\d+)\s*(?:people\s*)?killed", re.IGNORECASE), "killed", 0.9),
    (re.compile(r"(\d+)\s*(?:people\s*)?injured", re.IGNORECASE), "injured", 0.9),
    (re.compile(r"(\d+)\s*(?:people\s*)?wounded", re.IGNORECASE), "wounded", 0.85),
    (re.compile(r"(\d+)\s*casualties", re.IGNORECASE), "casualties", 0.8),
    (re.compile(r"death\s*toll\s*(?:rises?\s*to\s*)?(\d+)", re.IGNORECASE), "killed", 0.8),
]

_OP_NAME = r"[A-Z][a-zA-Z]+(?:\s+(?:of\s+the\s+|of\s+|and\s+)?[A-Z][a-zA-Z]+)*"

OPERATION_PATTERNS = [
    re.compile(rf"\bOperation\s+({_OP_NAME})"),
    re.compile(r'"Operation\s+([^"]+)"'),
    re.compile(r'\bOperation\s+"([^"]+)"'),
    re.compile(rf"\b(?i:launched)\s+(?:an?\s+)?({_OP_NAME})\s+(?i:operation)\b"),
    re.compile(rf"\b(?i:codenamed|code-named)\s+\"?({_OP_NAME})\"?"),
]

OPERATION_STOPWORDS = {"The", "And", "Or", "In", "At", "On", "For"}

_NOT_PLACES = {
    "The", "A", "An", "This", "That", "Monday", "Tuesday", "Wednesday", "Thursday",
    "Friday", "Saturday", "Sunday", "January", "February", "March", "April", "May",
    "June", "July", "August", "September", "October", "November", "December",
}


class EntityExtractor:
    """
    规则驱动的实体抽取器。

    无状态：同一文本多次调用返回相同结果，可安全地在多个线程中共享。
    """

    def __init__(self, context_window_chars: Optional[int] = None):
        self.window = context_window_chars if context_window_chars is not None else settings.CONTEXT_WINDOW_CHARS

    def extract(self, text: str) -> EntityBundle:
        text = text or ""
        locations = self.extract_locations(text)
        organizations = self.extract_organizations(text)
        return EntityBundle(
            people=self.extract_people(text),
            organizations=organizations,
            locations=locations,
            weapons=self.extract_weapons(text),
            casualties=self.extract_casualties(text),
            operations=self.extract_operations(text),
        )

    def analyze_article(self, article: RawArticle) -> Tuple[EntityBundle, ArticleSummary]:
        """抽取实体并生成文章级摘要"""
        bundle = self.extract(article.full_text)
        summary = ArticleSummary(
            has_nuclear_content=self.detect_nuclear_content(article),
            has_casualties=bool(bundle.casualties),
            military_operations=[op.name for op in bundle.operations],
            primary_locations=[loc.name for loc in bundle.locations[:3]],
            key_people=[p.name for p in bundle.people if p.confidence > 0.8],
            weapon_types=dedupe(w.weapon_class for w in bundle.weapons),
        )
        logger.debug(
            f"Extracted {len(bundle.locations)} locations, {len(bundle.casualties)} casualty "
            f"mentions, {len(bundle.operations)} operations from '{article.title[:60]}'"
        )
        return bundle, summary

    @staticmethod
    def detect_nuclear_content(article: RawArticle) -> bool:
        lowered = article.headline_text.lower()
        return any(term in lowered for term in NUCLEAR_TERMS)

    # ------------------------------------------------------------------ people

    def extract_people(self, text: str) -> List[PersonMention]:
        people: List[PersonMention] = []

        def covered(name: str) -> bool:
            return any(name in p.name or p.name in name for p in people)

        for pattern, role in PERSON_PATTERNS:
            for match in pattern.finditer(text):
                name = match.group(0).strip()
                if covered(name):
                    continue
                people.append(PersonMention(
                    name=name,
                    role=role or match.group(1),
                    confidence=0.9,
                ))

        for leader in KNOWN_LEADERS:
            if re.search(rf"\b{leader}\b", text) and not covered(leader):
                people.append(PersonMention(name=leader, role="leader", confidence=0.85))

        for match in SPEAKER_PATTERN.finditer(text):
            name = match.group(1)
            first_word = name.split()[0]
            if covered(name) or first_word in PERSON_TITLES or first_word in _NOT_PLACES:
                continue
            if any(is_known_entity_name(part) for part in [name] + name.split()):
                continue
            people.append(PersonMention(name=name, confidence=0.8))

        return people

    # ----------------------------------------------------------- organizations

    def extract_organizations(self, text: str) -> List[OrganizationMention]:
        orgs: List[OrganizationMention] = []

        for org in find_known_organizations(text):
            name = org.name
            if org.full_name and org.full_name in text:
                name = org.full_name
            orgs.append(OrganizationMention(name=name, org_type=org.org_type, confidence=0.95))

        for pattern in ORG_PATTERNS:
            for match in pattern.finditer(text):
                name = match.group(1).strip()
                if any(name in o.name or o.name in name for o in orgs):
                    continue
                orgs.append(OrganizationMention(name=name, org_type="organization", confidence=0.7))

        return orgs

    # --------------------------------------------------------------- locations

    def extract_locations(self, text: str) -> List[LocationMention]:
        locations = [
            LocationMention(
                name=loc.name,
                location_type=loc.location_type,
                coordinates=Coordinates(lat=loc.lat, lng=loc.lng),
                confidence=0.95,
            )
            for loc, _ in find_known_locations(text)
        ]

        known = {loc.name for loc in locations}
        for match in PLACE_PATTERN.finditer(text):
            name = match.group(1).strip()
            if name in known or name.split()[0] in _NOT_PLACES:
                continue
            if is_known_entity_name(name) or any(k in name for k in known):
                continue
            known.add(name)
            locations.append(LocationMention(name=name, location_type="unknown", confidence=0.7))

        return locations

    # ----------------------------------------------------------------- weapons

    def extract_weapons(self, text: str) -> List[WeaponMention]:
        weapons: List[WeaponMention] = []
        lowered = text.lower()

        for weapon_class, keywords in WEAPON_CLASSES.items():
            for keyword in keywords:
                if keyword.lower() not in lowered:
                    continue
                quantity = None
                qty_match = re.search(rf"(\d+)\s*{re.escape(keyword)}", text, re.IGNORECASE)
                if qty_match:
                    quantity = int(qty_match.group(1))
                weapons.append(WeaponMention(
                    name=keyword,
                    weapon_class=weapon_class,
                    quantity=quantity,
                ))

        return weapons

    # -------------------------------------------------------------- casualties

    def extract_casualties(self, text: str) -> List[CasualtyMention]:
        casualties: List[CasualtyMention] = []

        for pattern, casualty_type, confidence in CASUALTY_PATTERNS:
            for match in pattern.finditer(text):
                context = context_window(text, match.start(), match.end(), self.window)
                casualties.append(CasualtyMention(
                    casualty_type=casualty_type,
                    count=int(match.group(1)),
                    party=self.attribute_party(context),
                    context=context.strip(),
                    confidence=confidence,
                ))

        return casualties

    @staticmethod
    def attribute_party(context: str) -> Optional[str]:
        """在上下文中查找第一个命中的参与方别名"""
        lowered = context.lower()
        for party, aliases in CASUALTY_PARTIES.items():
            if any(alias in lowered for alias in aliases):
                return party
        return None

    # -------------------------------------------------------------- operations

    def extract_operations(self, text: str) -> List[OperationMention]:
        operations: List[OperationMention] = []
        seen = set()

        for pattern in OPERATION_PATTERNS:
            for match in pattern.finditer(text):
                name = match.group(1).strip()
                if name.startswith("Operation "):
                    name = name[len("Operation "):].strip()
                if len(name) <= 3 or name in OPERATION_STOPWORDS or name in seen:
                    continue
                seen.add(name)
                context = context_window(text, match.start(), match.end(), self.window)
                operations.append(OperationMention(
                    name=f"Operation {name}",
                    country=self.infer_country(context),
                    confidence=0.8,
                ))

        for name, country in KNOWN_OPERATIONS:
            if name in seen:
                continue
            if re.search(rf"\b{re.escape(name)}\b", text, re.IGNORECASE):
                seen.add(name)
                operations.append(OperationMention(
                    name=f"Operation {name}",
                    country=country,
                    confidence=0.95,
                ))

        return operations

    @staticmethod
    def infer_country(context: str) -> Optional[str]:
        if re.search(r"\b(?:Israel|Israeli|IDF)\b", context, re.IGNORECASE):
            return "Israel"
        if re.search(r"\b(?:Iran|Iranian|IRGC)\b", context, re.IGNORECASE):
            return "Iran"
        return None
