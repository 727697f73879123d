import asyncio
import logging
from typing import Any, Iterable, List, Optional, Union

from langgraph.graph import StateGraph, END

from .state import FusionState
from .nodes.extract_node import extract_candidates_node
from .nodes.dedup_node import deduplicate_node
from .nodes.verify_node import verify_node
from ..core.corpus import ArticleCorpus
from ..core.models.article import RawArticle
from ..core.models.verification import VerifiedEvent

logger = logging.getLogger(__name__)


def route_after_extract(state: FusionState) -> str:
    """没有候选事件时直接结束"""
    if not state.get("candidates"):
        return "finish"
    return "deduplicate"


async def finish_node(state: FusionState) -> FusionState:
    return {
        "verified_events": [],
        "steps": ["finish: no candidates"],
    }


def create_fusion_graph():
    """
    extract -> deduplicate -> verify

    Extraction fans out per article; dedup and verify are batch barriers.
    """
    workflow = StateGraph(FusionState)

    workflow.add_node("extract", extract_candidates_node)
    workflow.add_node("deduplicate", deduplicate_node)
    workflow.add_node("verify", verify_node)
    workflow.add_node("finish", finish_node)

    workflow.set_entry_point("extract")

    workflow.add_conditional_edges(
        "extract",
        route_after_extract,
        {
            "deduplicate": "deduplicate",
            "finish": "finish",
        },
    )
    workflow.add_edge("deduplicate", "verify")
    workflow.add_edge("verify", END)
    workflow.add_edge("finish", END)

    return workflow.compile()


ArticleInput = Union[RawArticle, dict]


def coerce_articles(articles: Iterable[ArticleInput]) -> List[RawArticle]:
    return [a if isinstance(a, RawArticle) else RawArticle.model_validate(a) for a in articles]


class FusionPipeline:
    """
    Batch-level entry point.

    The corpus is only extended after the whole graph has finished, so a
    cancelled batch leaves no trace.
    """

    def __init__(self, corpus: Optional[ArticleCorpus] = None):
        self.corpus = corpus if corpus is not None else ArticleCorpus()
        self.app = create_fusion_graph()

    async def process_batch(self, articles: Iterable[ArticleInput]) -> List[VerifiedEvent]:
        batch = coerce_articles(articles)
        if not batch:
            logger.info("Empty batch, nothing to process")
            return []

        initial_state: FusionState = {
            "articles": batch,
            "corpus": self.corpus.preview(batch),
            "steps": [],
        }
        final_state: Any = await self.app.ainvoke(initial_state)

        self.corpus.extend(batch)
        for step in final_state.get("steps", []):
            logger.debug(f"step: {step}")
        return list(final_state.get("verified_events", []))

    def run_batch(self, articles: Iterable[ArticleInput]) -> List[VerifiedEvent]:
        """同步封装"""
        return asyncio.run(self.process_batch(articles))


async def process_batch(
    articles: Iterable[ArticleInput],
    corpus: Optional[ArticleCorpus] = None,
) -> List[VerifiedEvent]:
    return await FusionPipeline(corpus).process_batch(articles)
