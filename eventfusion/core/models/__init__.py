"""
Core domain models for the event fusion pipeline.
"""
from .article import RawArticle
from .entities import (
    preferred_location,
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
from .events import (
    CandidateEvent,
    CanonicalEvent,
    EventSignature,
    EventType,
    Severity,
    TemporalResolution,
)
from .verification import Claim, Consensus, VerificationResult, VerifiedEvent

__all__ = [
    "RawArticle",
    "ArticleSummary",
    "CasualtyMention",
    "Coordinates",
    "EntityBundle",
    "LocationMention",
    "OperationMention",
    "OrganizationMention",
    "PersonMention",
    "WeaponMention",
    "preferred_location",
    "CandidateEvent",
    "CanonicalEvent",
    "EventSignature",
    "EventType",
    "Severity",
    "TemporalResolution",
    "Claim",
    "Consensus",
    "VerificationResult",
    "VerifiedEvent",
]
