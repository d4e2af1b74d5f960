"""Data models for the meeting search system."""

from .document import (
    Attendee,
    ConferenceInfo,
    DocumentMetadata,
    DocumentRecord,
    FolderRef,
    MeetingEnrichment,
    Utterance,
)
from .query import SearchQuery, SearchQueryModel, DateRange
from .result import CacheStats, SearchMatch, SearchResponse

__all__ = [
    "Attendee",
    "ConferenceInfo",
    "DocumentMetadata",
    "DocumentRecord",
    "FolderRef",
    "MeetingEnrichment",
    "Utterance",
    "SearchQuery",
    "SearchQueryModel",
    "DateRange",
    "CacheStats",
    "SearchMatch",
    "SearchResponse",
]
