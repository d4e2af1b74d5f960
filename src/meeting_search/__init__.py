"""
Meeting Search over Locally Synced Meeting Documents

Fast, offline, multi-dimensional lookup over synced meeting documents:
filter by attendee, date range, workspace, folder and content, with
heuristic relevance ranking and in-place refresh of attendee data.
"""

from .api.service import MeetingSearchService
from .config import ServiceConfig
from .models.document import DocumentRecord, MeetingEnrichment, Attendee
from .models.query import SearchQuery, DateRange
from .models.result import SearchResponse, SearchMatch, CacheStats
from .core.engine import MeetingSearchEngine

__version__ = "1.0.0"

__all__ = [
    "MeetingSearchService",
    "MeetingSearchEngine",
    "ServiceConfig",
    "DocumentRecord",
    "MeetingEnrichment",
    "Attendee",
    "SearchQuery",
    "DateRange",
    "SearchResponse",
    "SearchMatch",
    "CacheStats",
]
