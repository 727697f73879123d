import logging

from ..state import FusionState
from ...core.models.verification import VerifiedEvent
from ...core.verification.verifier import EventVerifier

logger = logging.getLogger(__name__)


async def verify_node(state: FusionState) -> FusionState:
    """
    Verify Node: 用语料快照交叉验证每个规范事件。
    Reads: state.canonical_events, state.corpus
    Writes: state.verified_events
    """
    events = state.get("canonical_events", [])
    corpus = state.get("corpus", ())

    results = EventVerifier().verify_batch(events, corpus)
    verified = [VerifiedEvent.from_canonical(e, results[e.id]) for e in events]

    # 时间降序，同一时间按批内到达顺序
    verified.sort(key=lambda e: e.batch_index)
    verified.sort(key=lambda e: e.event_time, reverse=True)

    confirmed = sum(1 for e in verified if e.verified)
    logger.info(f"[Verify] {confirmed}/{len(verified)} events verified against {len(corpus)} articles")
    return {
        "verified_events": verified,
        "steps": [f"verify: {confirmed}/{len(verified)} verified"],
    }
