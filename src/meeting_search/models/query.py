"""Query data model with filtering capabilities."""

from datetime import datetime
from typing import Optional
from dataclasses import dataclass
from pydantic import BaseModel, Field, field_validator

MAX_LIMIT = 1000


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range; a missing bound leaves that side open."""
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, date: Optional[datetime]) -> bool:
        """Check if date falls within range."""
        if date is None:
            return False
        if self.start and date < self.start:
            return False
        if self.end and date > self.end:
            return False
        return True


@dataclass(frozen=True)
class SearchQuery:
    """
    Search query over the meeting corpus.

    Attributes:
        attendee_email: Attendee email substring (case-insensitive)
        start_date: Start date expression (ISO-8601 or relative)
        end_date: End date expression (ISO-8601 or relative)
        workspace_id: Exact workspace identifier
        folder_name: Folder name substring (case-insensitive)
        content_query: Text searched in titles and transcripts
        limit: Maximum number of matches to return
        include_transcript: Attach the rendered transcript to each match
    """
    attendee_email: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    workspace_id: Optional[str] = None
    folder_name: Optional[str] = None
    content_query: Optional[str] = None
    limit: int = 10
    include_transcript: bool = False

    def __post_init__(self) -> None:
        """Validate query parameters."""
        if self.limit <= 0:
            raise ValueError("Limit must be positive")
        if self.limit > MAX_LIMIT:
            raise ValueError(f"Limit cannot exceed {MAX_LIMIT}")

    @property
    def has_date_filter(self) -> bool:
        return bool(self.start_date or self.end_date)


class SearchQueryModel(BaseModel):
    """Pydantic model for query validation in API contexts."""

    attendee_email: Optional[str] = Field(None, description="Attendee email (partial match)")
    start_date: Optional[str] = Field(None, description="Start date, ISO-8601 or relative")
    end_date: Optional[str] = Field(None, description="End date, ISO-8601 or relative")
    workspace_id: Optional[str] = Field(None, description="Workspace identifier")
    folder_name: Optional[str] = Field(None, description="Folder name (partial match)")
    content_query: Optional[str] = Field(None, description="Title and transcript search text")
    limit: int = Field(10, ge=1, le=MAX_LIMIT, description="Maximum results to return")
    include_transcript: bool = Field(False, description="Include full transcripts")

    @field_validator(
        "attendee_email", "start_date", "end_date",
        "workspace_id", "folder_name", "content_query"
    )
    @classmethod
    def blank_as_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat whitespace-only filters as absent."""
        if v is None or not v.strip():
            return None
        return v.strip()

    def to_query(self) -> SearchQuery:
        """Convert to SearchQuery dataclass."""
        return SearchQuery(
            attendee_email=self.attendee_email,
            start_date=self.start_date,
            end_date=self.end_date,
            workspace_id=self.workspace_id,
            folder_name=self.folder_name,
            content_query=self.content_query,
            limit=self.limit,
            include_transcript=self.include_transcript
        )
