import re
from typing import Hashable, Iterable, List, Set, TypeVar

T = TypeVar("T", bound=Hashable)

_WORD_RE = re.compile(r"\w+")


def dedupe(items: Iterable[T]) -> List[T]:
    """Deduplicate while preserving order"""
    seen = set()
    deduped = []
    for item in items:
        if item not in seen:
            seen.add(item)
            deduped.append(item)
    return deduped


def jaccard(a: Set, b: Set) -> float:
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def word_set(text: str) -> Set[str]:
    return set(_WORD_RE.findall((text or "").lower()))


def word_jaccard(a: str, b: str) -> float:
    return jaccard(word_set(a), word_set(b))


def context_window(text: str, start: int, end: int, window: int = 100) -> str:
    """匹配位置前后各 window 个字符"""
    return text[max(0, start - window):min(len(text), end + window)]


def normalize_location(location: str) -> str:
    lowered = (location or "").lower()
    lowered = re.sub(r"[^\w\s]", " ", lowered)
    return re.sub(r"\s+", " ", lowered).strip()
