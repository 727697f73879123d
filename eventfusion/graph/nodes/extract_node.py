import asyncio
import logging
from typing import Optional

from ..state import FusionState
from ...agents.entity_extractor import EntityExtractor
from ...agents.event_builder import build_candidate_event, is_publishable
from ...config.settings import settings
from ...core.models.article import RawArticle
from ...core.models.events import CandidateEvent

logger = logging.getLogger(__name__)


async def extract_candidates_node(state: FusionState) -> FusionState:
    """
    Extract Node: 每篇文章独立构建候选事件 (并发)。
    Reads: state.articles
    Writes: state.candidates, state.dropped_count
    """
    articles = state.get("articles", [])

    if not articles:
        return {
            "dropped_count": 0,
            "steps": ["extract: no articles, skip"],
        }

    extractor = EntityExtractor()
    semaphore = asyncio.Semaphore(settings.EXTRACTION_CONCURRENCY)

    async def build(index: int, article: RawArticle) -> Optional[CandidateEvent]:
        async with semaphore:
            try:
                return await asyncio.to_thread(build_candidate_event, article, index, extractor)
            except Exception as e:
                logger.warning(f"Extraction failed for '{article.title[:60]}': {e}", exc_info=settings.debug)
                return None

    # 并发处理所有文章；结果顺序与输入顺序一致
    results = await asyncio.gather(*(build(i, a) for i, a in enumerate(articles)))

    candidates = []
    dropped = 0
    for event in results:
        if event is None:
            dropped += 1
        elif is_publishable(event):
            candidates.append(event)
        else:
            dropped += 1
            logger.debug(f"Dropping low-confidence candidate ({event.confidence:.2f}): {event.title[:60]}")

    logger.info(f"[Extract] {len(articles)} articles -> {len(candidates)} candidates ({dropped} dropped)")
    return {
        "candidates": candidates,
        "dropped_count": dropped,
        "steps": [f"extract: {len(candidates)} candidates from {len(articles)} articles"],
    }
