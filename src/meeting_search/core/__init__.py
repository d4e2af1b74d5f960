"""Core engine components for meeting search."""

from .engine import MeetingSearchEngine
from .cache_parser import parse_cache_file, load_cache_file
from .date_parser import parse_relative_date, parse_date_range
from .indexes import DocumentIndexes, build_indexes, build_attendee_index
from .exceptions import (
    MeetingSearchError,
    SyncDirectoryError,
    MetadataParseError,
    CacheParseError,
    CacheRefreshError,
    DateParseError,
    SearchError,
    ValidationError
)

__all__ = [
    "MeetingSearchEngine",
    "parse_cache_file",
    "load_cache_file",
    "parse_relative_date",
    "parse_date_range",
    "DocumentIndexes",
    "build_indexes",
    "build_attendee_index",
    "MeetingSearchError",
    "SyncDirectoryError",
    "MetadataParseError",
    "CacheParseError",
    "CacheRefreshError",
    "DateParseError",
    "SearchError",
    "ValidationError"
]
