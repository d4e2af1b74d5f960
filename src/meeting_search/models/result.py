"""Search result data models."""

from datetime import datetime
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

from .document import Attendee


@dataclass
class SearchMatch:
    """
    Single ranked match with presentation data.

    Attributes:
        document_id: Matched document identifier
        title: Document title
        meeting_date: Meeting instant, or creation instant as fallback
        workspace_name: Workspace display name
        folders: Folder names
        attendees: Meeting participants
        relevance_score: Heuristic relevance (higher is better)
        snippet: Start of the rendered notes
        transcript: Full rendered transcript, when requested
    """
    document_id: str
    title: str
    meeting_date: Optional[datetime]
    workspace_name: Optional[str]
    folders: List[str]
    attendees: List[Attendee]
    relevance_score: float
    snippet: Optional[str] = None
    transcript: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate search match."""
        if self.relevance_score < 0:
            raise ValueError("Relevance score cannot be negative")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: Dict[str, Any] = {
            "document_id": self.document_id,
            "title": self.title,
            "meeting_date": self.meeting_date.isoformat() if self.meeting_date else None,
            "workspace_name": self.workspace_name,
            "folders": list(self.folders),
            "attendees": [attendee.to_dict() for attendee in self.attendees],
            "relevance_score": round(self.relevance_score, 4),
        }
        if self.snippet is not None:
            data["snippet"] = self.snippet
        if self.transcript is not None:
            data["transcript"] = self.transcript
        return data


@dataclass
class SearchResponse:
    """Ranked, truncated matches plus the pre-truncation count."""
    matches: List[SearchMatch] = field(default_factory=list)
    total_matches: int = 0
    query_summary: str = ""

    @property
    def document_ids(self) -> List[str]:
        return [match.document_id for match in self.matches]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "matches": [match.to_dict() for match in self.matches],
            "total_matches": self.total_matches,
            "query_summary": self.query_summary,
        }


@dataclass(frozen=True)
class CacheStats:
    """Aggregate statistics over the loaded document set."""
    total_documents: int = 0
    documents_with_attendees: int = 0
    unique_attendees: int = 0
    unique_folders: int = 0
    unique_workspaces: int = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert to the camelCase shape reported by refresh."""
        return {
            "totalDocuments": self.total_documents,
            "documentsWithAttendees": self.documents_with_attendees,
            "uniqueAttendees": self.unique_attendees,
            "uniqueFolders": self.unique_folders,
            "uniqueWorkspaces": self.unique_workspaces,
        }
