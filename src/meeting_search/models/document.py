"""Document data models with validation."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into a timezone-aware UTC datetime.

    Naive timestamps are interpreted as UTC. Returns None when the value is
    missing or cannot be parsed.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class FolderRef(BaseModel):
    """Folder (document list) membership of a document."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class DocumentMetadata(BaseModel):
    """Pydantic model for a document's on-disk metadata record."""

    model_config = ConfigDict(extra="allow")

    document_id: str = Field(..., min_length=1, description="Document identifier")
    title: str = Field(..., description="Document title")
    created_at: str = Field(..., description="Creation timestamp (ISO-8601)")
    updated_at: str = Field(..., description="Last update timestamp (ISO-8601)")
    workspace_id: Optional[str] = Field(None, description="Workspace identifier")
    workspace_name: Optional[str] = Field(None, description="Workspace display name")
    folders: List[FolderRef] = Field(default_factory=list, description="Folder memberships")
    meeting_date: Optional[str] = Field(None, description="First utterance timestamp")
    sources: List[str] = Field(default_factory=list, description="Audio source kinds")

    @field_validator("folders", "sources", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        """Treat explicit nulls as empty lists."""
        return [] if v is None else v


class Utterance(BaseModel):
    """A single transcript utterance."""

    model_config = ConfigDict(extra="allow")

    source: str = "unknown"
    text: str = ""
    start_timestamp: Optional[str] = None
    end_timestamp: Optional[str] = None
    confidence: Optional[float] = None


@dataclass(frozen=True)
class Attendee:
    """Meeting participant taken from the enrichment cache."""
    email: Optional[str] = None
    name: Optional[str] = None
    organizer: bool = False
    response_status: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the public attendee shape."""
        return {
            "email": self.email,
            "name": self.name,
            "organizer": self.organizer,
        }


@dataclass(frozen=True)
class ConferenceInfo:
    """Video conference entry point (Zoom, Google Meet, ...)."""
    url: Optional[str] = None
    platform: Optional[str] = None


@dataclass(frozen=True)
class MeetingEnrichment:
    """
    Participant and conference data merged into a document record.

    Attributes:
        attendees: Meeting participants
        conference: First conference entry point, if any
        calendar_id: Calendar the meeting event belongs to
    """
    attendees: Tuple[Attendee, ...] = ()
    conference: Optional[ConferenceInfo] = None
    calendar_id: Optional[str] = None

    @property
    def has_attendees(self) -> bool:
        return len(self.attendees) > 0


EMPTY_ENRICHMENT = MeetingEnrichment()


@dataclass(frozen=True)
class DocumentRecord:
    """
    Synced meeting document with enrichment data.

    Attributes:
        id: Document identifier (the sync subdirectory name)
        title: Document title
        created_at: Creation instant (UTC), None if unparseable
        updated_at: Last update instant (UTC), None if unparseable
        workspace_id: Workspace identifier
        workspace_name: Workspace display name
        folders: Folder memberships, in metadata order
        meeting_date: Meeting instant (UTC), None if unknown
        sources: Audio source kinds present in the transcript
        enrichment: Participant and conference data
    """
    id: str
    title: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    workspace_id: Optional[str] = None
    workspace_name: Optional[str] = None
    folders: Tuple[FolderRef, ...] = ()
    meeting_date: Optional[datetime] = None
    sources: Tuple[str, ...] = ()
    enrichment: MeetingEnrichment = field(default=EMPTY_ENRICHMENT)

    def __post_init__(self) -> None:
        """Validate record after initialization."""
        if not self.id.strip():
            raise ValueError("Document ID cannot be empty")

    @property
    def effective_date(self) -> Optional[datetime]:
        """Meeting instant when known, creation instant otherwise."""
        return self.meeting_date or self.created_at

    @property
    def folder_names(self) -> List[str]:
        return [folder.name for folder in self.folders]

    @classmethod
    def from_metadata(
        cls,
        document_id: str,
        metadata: DocumentMetadata,
        enrichment: Optional[MeetingEnrichment] = None
    ) -> "DocumentRecord":
        """Build a record from a validated metadata file."""
        return cls(
            id=document_id,
            title=metadata.title,
            created_at=parse_timestamp(metadata.created_at),
            updated_at=parse_timestamp(metadata.updated_at),
            workspace_id=metadata.workspace_id,
            workspace_name=metadata.workspace_name,
            folders=tuple(metadata.folders),
            meeting_date=parse_timestamp(metadata.meeting_date),
            sources=tuple(metadata.sources),
            enrichment=enrichment or EMPTY_ENRICHMENT
        )
