from typing import TypedDict, List, Annotated, Tuple
import operator

from ..core.models.article import RawArticle
from ..core.models.events import CandidateEvent, CanonicalEvent
from ..core.models.verification import VerifiedEvent


class FusionState(TypedDict, total=False):
    """
    事件融合图状态定义。
    使用 total=False 允许部分更新。
    使用 Annotated[List, operator.add] 实现列表增量聚合。
    """
    # Input
    articles: List[RawArticle]
    corpus: Tuple[RawArticle, ...]  # 本批次使用的语料快照 (已包含本批文章)

    # Intermediate
    candidates: Annotated[List[CandidateEvent], operator.add]
    dropped_count: int
    canonical_events: List[CanonicalEvent]

    # Output
    verified_events: List[VerifiedEvent]

    # History & Tracking
    steps: Annotated[List[str], operator.add]
