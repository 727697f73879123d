"""
EventFusion: turns batches of conflict news articles into a deduplicated,
verified, time-ordered list of events.
"""
from .core.corpus import ArticleCorpus
from .core.models import CanonicalEvent, CandidateEvent, RawArticle, VerifiedEvent
from .graph.workflow import FusionPipeline, process_batch

__version__ = "0.1.0"

__all__ = [
    "ArticleCorpus",
    "CanonicalEvent",
    "CandidateEvent",
    "FusionPipeline",
    "RawArticle",
    "VerifiedEvent",
    "process_batch",
]
