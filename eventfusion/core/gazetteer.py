"""
Gazetteer：已知地点、组织、人物、武器、行动代号的固定查找表。

这些词表本身就是领域知识，修改时需要同步更新对应的单元测试。
"""
import re
from typing import Dict, List, NamedTuple, Optional, Tuple


class KnownLocation(NamedTuple):
    name: str
    location_type: str   # city / nuclear facility / territory / country
    lat: float
    lng: float
    variants: Tuple[str, ...] = ()

    @property
    def spellings(self) -> Tuple[str, ...]:
        return (self.name,) + self.variants


class KnownOrganization(NamedTuple):
    name: str
    full_name: Optional[str]
    org_type: str


KNOWN_LOCATIONS: List[KnownLocation] = [
    KnownLocation("Tel Aviv", "city", 32.0853, 34.7818, ("Tel-Aviv",)),
    KnownLocation("Jerusalem", "city", 31.7683, 35.2137),
    KnownLocation("Tehran", "city", 35.6892, 51.3890),
    KnownLocation("Natanz", "nuclear facility", 33.7245, 51.7263),
    KnownLocation("Arak", "nuclear facility", 34.3773, 49.7643),
    KnownLocation("Bushehr", "nuclear facility", 28.8296, 50.8884),
    KnownLocation("Fordow", "nuclear facility", 34.8845, 50.9936),
    KnownLocation("Damascus", "city", 33.5138, 36.2765),
    KnownLocation("Beirut", "city", 33.8938, 35.5018),
    KnownLocation("Gaza", "territory", 31.3547, 34.3088),
    KnownLocation("Isfahan", "city", 32.6546, 51.6680, ("Esfahan",)),
    KnownLocation("Haifa", "city", 32.7940, 34.9896),
    KnownLocation("Baghdad", "city", 33.3152, 44.3661),
    KnownLocation("Sanaa", "city", 15.3694, 44.1910, ("Sana'a",)),
    KnownLocation("Israel", "country", 31.0461, 34.8516),
    KnownLocation("Iran", "country", 32.4279, 53.6880),
    KnownLocation("Lebanon", "country", 33.8547, 35.8623),
    KnownLocation("Syria", "country", 34.8021, 38.9968),
    KnownLocation("Iraq", "country", 33.2232, 43.6793),
    KnownLocation("Yemen", "country", 15.5527, 48.5164),
]

KNOWN_ORGANIZATIONS: List[KnownOrganization] = [
    KnownOrganization("IDF", "Israel Defense Forces", "military"),
    KnownOrganization("IRGC", "Islamic Revolutionary Guard Corps", "military"),
    KnownOrganization("Hezbollah", None, "militant"),
    KnownOrganization("Hamas", None, "militant"),
    KnownOrganization("Houthis", None, "militant"),
    KnownOrganization("UN", "United Nations", "international"),
    KnownOrganization("IAEA", "International Atomic Energy Agency", "international"),
    KnownOrganization("NATO", None, "military alliance"),
    KnownOrganization("Mossad", None, "intelligence"),
    KnownOrganization("CIA", None, "intelligence"),
    KnownOrganization("Pentagon", None, "military"),
    KnownOrganization("Shin Bet", None, "intelligence"),
]

KNOWN_LEADERS = ("Netanyahu", "Khamenei", "Biden", "Gallant", "Salami")

PERSON_TITLES = ("President", "Prime Minister", "General", "Admiral", "Colonel")

WEAPON_CLASSES: Dict[str, Tuple[str, ...]] = {
    "missiles": ("missile", "ballistic", "cruise", "hypersonic", "interceptor"),
    "drones": ("drone", "UAV", "unmanned", "quadcopter", "Shahed"),
    "aircraft": ("F-16", "F-35", "fighter", "bomber", "jet", "aircraft"),
    "defense": ("Iron Dome", "Patriot", "S-300", "S-400", "Arrow", "David's Sling"),
    "naval": ("destroyer", "submarine", "frigate", "carrier", "naval"),
}

# 伤亡归属方：按声明顺序检查，第一个命中者胜出
CASUALTY_PARTIES: Dict[str, Tuple[str, ...]] = {
    "israel": ("israeli", "idf", "israel defense forces"),
    "iran": ("iranian", "irgc", "iran", "islamic revolutionary guard"),
    "usa": ("american", "us ", "u.s.", "united states", "us forces", "us military"),
    "houthis": ("houthi", "yemen", "ansar allah"),
    "hezbollah": ("hezbollah", "lebanese", "lebanon"),
    "syria": ("syrian", "syria"),
    "iraq": ("iraqi", "iraq"),
}

KNOWN_OPERATIONS: List[Tuple[str, str]] = [
    ("Rising Lion", "Israel"),
    ("True Promise", "Iran"),
    ("Desert Shield", "Israel"),
    ("Swords of Iron", "Israel"),
    ("Guardian of the Walls", "Israel"),
    ("Breaking Dawn", "Israel"),
    ("Shield and Arrow", "Israel"),
]

NUCLEAR_TERMS = (
    "nuclear", "uranium", "enrichment", "reactor", "radiation",
    "centrifuge", "plutonium", "atomic", "radioactive", "iaea",
)

# 正文定位回退：需要 "in/at/near/outside" 上下文
CONTEXT_LOCATIONS: List[Tuple[str, Tuple[str, ...]]] = [
    ("Tel Aviv", ("tel aviv", "telaviv")),
    ("Jerusalem", ("jerusalem",)),
    ("Tehran", ("tehran",)),
    ("Natanz", ("natanz",)),
    ("Arak", ("arak",)),
    ("Bushehr", ("bushehr",)),
    ("Fordow", ("fordow", "qom")),
    ("Isfahan", ("isfahan", "esfahan")),
    ("Haifa", ("haifa",)),
    ("Gaza", ("gaza",)),
    ("Lebanon", ("lebanon", "lebanese")),
    ("Syria", ("syria", "syrian", "damascus")),
    ("Iraq", ("iraq", "iraqi", "baghdad")),
    ("Iran", ("iran", "iranian")),
    ("Israel", ("israel", "israeli")),
]

# 去重时用于地点比较的重要地名
IMPORTANT_LOCATION_KEYWORDS = (
    "israel", "iran", "tehran", "tel aviv", "jerusalem", "natanz", "arak",
    "bushehr", "fordow", "isfahan", "gaza", "lebanon", "syria", "iraq",
)


def _word_pattern(term: str, flags: int = 0) -> "re.Pattern":
    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", flags)


_LOCATION_PATTERNS = [
    (loc, [_word_pattern(s) for s in loc.spellings]) for loc in KNOWN_LOCATIONS
]


def find_known_locations(text: str) -> List[Tuple[KnownLocation, int]]:
    """
    返回文本中出现的已知地点及其首次出现位置，按位置排序。
    大小写敏感，与新闻标题中的专有名词写法一致。
    """
    hits = []
    for loc, patterns in _LOCATION_PATTERNS:
        positions = [m.start() for p in patterns for m in [p.search(text)] if m]
        if positions:
            hits.append((loc, min(positions)))
    hits.sort(key=lambda item: item[1])
    return hits


def lookup_location(name: str) -> Optional[KnownLocation]:
    lowered = (name or "").lower()
    for loc in KNOWN_LOCATIONS:
        if lowered in (s.lower() for s in loc.spellings):
            return loc
    return None


def find_known_organizations(text: str) -> List[KnownOrganization]:
    found = []
    for org in KNOWN_ORGANIZATIONS:
        spellings = [org.name] + ([org.full_name] if org.full_name else [])
        if any(_word_pattern(s).search(text) for s in spellings):
            found.append(org)
    return found


def is_known_entity_name(name: str) -> bool:
    """是否为已知地点或组织名 (用于过滤泛化人名/地名识别的误报)"""
    if lookup_location(name):
        return True
    for org in KNOWN_ORGANIZATIONS:
        if name in (org.name, org.full_name):
            return True
    return False
