import logging

from ..state import FusionState
from ...agents.timeline_deduplicator import deduplicate_events

logger = logging.getLogger(__name__)


async def deduplicate_node(state: FusionState) -> FusionState:
    """
    Dedup Node: 批次屏障，等待全部候选事件后再聚类合并。
    Reads: state.candidates
    Writes: state.canonical_events
    """
    candidates = state.get("candidates", [])
    canonical = deduplicate_events(candidates)
    return {
        "canonical_events": canonical,
        "steps": [f"deduplicate: {len(candidates)} -> {len(canonical)} events"],
    }
