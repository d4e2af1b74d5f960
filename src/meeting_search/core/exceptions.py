"""Custom exceptions for the meeting search system."""


class MeetingSearchError(Exception):
    """Base exception for meeting search operations."""
    pass


class SyncDirectoryError(MeetingSearchError):
    """Exception raised when the sync directory cannot be enumerated."""
    pass


class MetadataParseError(MeetingSearchError):
    """Exception raised when a document's metadata file is malformed."""
    pass


class CacheParseError(MeetingSearchError):
    """Exception raised when the enrichment cache cannot be read or parsed."""
    pass


class CacheRefreshError(MeetingSearchError):
    """Exception raised when a refresh fails and prior state was kept."""
    pass


class DateParseError(MeetingSearchError, ValueError):
    """Exception raised for unsupported date expressions."""
    pass


class SearchError(MeetingSearchError):
    """Exception raised during search operations."""
    pass


class ValidationError(MeetingSearchError):
    """Exception raised during input validation."""
    pass
