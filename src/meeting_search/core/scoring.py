"""Relevance scoring heuristic."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..models.document import DocumentRecord

TITLE_MATCH_POINTS = 10.0
TRANSCRIPT_MATCH_POINTS = 5.0
MAX_RECENCY_POINTS = 5.0
RECENCY_DECAY_DAYS = 7.0
FOLDER_POINTS = 0.5
ATTENDEE_POINTS = 1.0

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class RelevanceScore:
    """Score broken down into content and context contributions."""
    title: float = 0.0
    transcript: float = 0.0
    recency: float = 0.0
    folders: float = 0.0
    attendees: float = 0.0

    @property
    def content(self) -> float:
        """Points earned from the content query (title and transcript)."""
        return self.title + self.transcript

    @property
    def total(self) -> float:
        return self.title + self.transcript + self.recency + self.folders + self.attendees


def recency_points(moment: Optional[datetime], now: datetime) -> float:
    """
    Linear decay from 5 points today to 0 after five weeks.

    Future meetings are capped at the maximum.
    """
    if moment is None:
        return 0.0
    days_ago = (now - moment).total_seconds() / SECONDS_PER_DAY
    return min(MAX_RECENCY_POINTS, max(0.0, MAX_RECENCY_POINTS - days_ago / RECENCY_DECAY_DAYS))


def score_document(
    record: DocumentRecord,
    now: datetime,
    title_matched: bool = False,
    transcript_matched: bool = False
) -> RelevanceScore:
    """
    Compute the relevance of one candidate.

    Args:
        record: Candidate document
        now: Reference instant for recency
        title_matched: Content query matched a title token
        transcript_matched: Content query found in the transcript

    Returns:
        Score breakdown
    """
    return RelevanceScore(
        title=TITLE_MATCH_POINTS if title_matched else 0.0,
        transcript=TRANSCRIPT_MATCH_POINTS if transcript_matched else 0.0,
        recency=recency_points(record.effective_date, now),
        folders=len(record.folders) * FOLDER_POINTS,
        attendees=ATTENDEE_POINTS if record.enrichment.has_attendees else 0.0
    )
