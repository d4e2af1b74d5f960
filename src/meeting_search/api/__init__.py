"""Service layer for meeting search."""

from .service import MeetingSearchService

__all__ = ["MeetingSearchService"]
