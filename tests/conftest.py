"""Pytest configuration and shared fixtures."""

import json
import pytest
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from meeting_search.core.engine import MeetingSearchEngine

# Monday
FIXED_NOW = datetime(2025, 6, 16, 12, 0, tzinfo=timezone.utc)

LONG_NOTES = (
    "## Budget Review\n\n"
    "The team walked through the quarterly forecast and agreed to trim the "
    "travel budget by ten percent. Marketing spend stays flat until the "
    "next review. Action items were assigned to finance and to the leadership "
    "group, with follow-ups scheduled for next week."
)


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture
def write_document():
    """Factory writing one synced document directory."""

    def _write(
        root: Path,
        document_id: str,
        title: str,
        created_at: str = "2025-06-01T10:00:00Z",
        meeting_date: Optional[str] = None,
        workspace_id: Optional[str] = None,
        workspace_name: Optional[str] = None,
        folders: Optional[List[Dict[str, str]]] = None,
        notes: Optional[str] = None,
        utterances: Optional[List[str]] = None,
        transcript_md: Optional[str] = None,
    ) -> Path:
        doc_dir = root / document_id
        doc_dir.mkdir(parents=True, exist_ok=True)
        metadata = {
            "document_id": document_id,
            "title": title,
            "created_at": created_at,
            "updated_at": created_at,
            "workspace_id": workspace_id,
            "workspace_name": workspace_name,
            "folders": folders or [],
            "meeting_date": meeting_date,
            "sources": ["microphone", "system"] if utterances else [],
        }
        _write_json(doc_dir / "metadata.json", metadata)
        if notes is not None:
            (doc_dir / "resume.md").write_text(notes, encoding="utf-8")
        if utterances is not None:
            _write_json(doc_dir / "transcript.json", [
                {
                    "source": "microphone",
                    "text": text,
                    "start_timestamp": meeting_date or created_at,
                    "end_timestamp": meeting_date or created_at,
                    "confidence": 0.9,
                }
                for text in utterances
            ])
        if transcript_md is not None:
            (doc_dir / "transcript.md").write_text(transcript_md, encoding="utf-8")
        return doc_dir

    return _write


@pytest.fixture
def write_cache():
    """Factory writing an enrichment cache file."""

    def _write(path: Path, data: Any) -> Path:
        _write_json(path, data)
        return path

    return _write


@pytest.fixture
def cache_data() -> Dict[str, Any]:
    """Enrichment cache mixing field aliases and malformed entries."""
    return {
        "meetings": [
            {
                "id": "d1",
                "attendees": [
                    {"email": "Joe@X.com", "displayName": "Joe", "organizer": True,
                     "responseStatus": "accepted"},
                    {"email": "ann@acme.com", "name": "Ann"},
                ],
                "conferenceData": {
                    "entryPoints": [
                        {"uri": "https://meet.google.com/abc-defg-hij", "entryPointType": "video"}
                    ]
                },
                "calendarId": "primary",
            },
            {
                "document_id": "d3",
                "participants": [
                    {"emailAddress": "alice@globex.com", "full_name": "Alice"},
                    {"email": "joe@x.com", "isOrganizer": True},
                ],
                "calendar_id": "sales",
            },
            "not-an-entry",
            {"id": "d9", "attendees": "not-a-list"},
            {"title": "entry without an id"},
        ]
    }


@pytest.fixture
def sync_dir(tmp_path, write_document) -> Path:
    """Sync directory with four documents plus broken and empty entries."""
    root = tmp_path / "sync"
    root.mkdir()

    write_document(
        root, "d1", "Budget Review",
        created_at="2025-06-12T09:00:00Z",
        meeting_date="2025-06-13T15:00:00Z",
        workspace_id="ws1", workspace_name="Acme",
        folders=[{"id": "f1", "name": "Finance"}, {"id": "f2", "name": "Leadership"}],
        notes=LONG_NOTES,
        utterances=["Let's look at the quarterly forecast.", "Travel is over plan."],
        transcript_md="**Joe**: Let's look at the quarterly forecast.",
    )
    write_document(
        root, "d2", "Standup",
        created_at="2025-06-16T08:55:00Z",
        meeting_date="2025-06-16T09:00:00Z",
        workspace_id="ws1", workspace_name="Acme",
        notes="Short standup notes.",
        utterances=["Yesterday I looked at the Budget spreadsheet."],
    )
    write_document(
        root, "d3", "Customer Call - Globex",
        created_at="2025-05-01T10:00:00Z",
        workspace_id="ws2", workspace_name="Globex",
        folders=[{"id": "f3", "name": "Sales"}],
        notes="Globex renewal discussion.",
    )
    write_document(
        root, "d4", "Planning: Q3 Roadmap",
        created_at="2025-04-01T10:00:00Z",
        meeting_date="2025-04-01T10:30:00Z",
        workspace_id="ws1", workspace_name="Acme",
        folders=[{"id": "f1", "name": "Finance"}],
    )

    broken = root / "broken"
    broken.mkdir()
    (broken / "metadata.json").write_text("{not json", encoding="utf-8")
    (root / "no-metadata").mkdir()
    (root / "stray.txt").write_text("not a document", encoding="utf-8")
    return root


@pytest.fixture
def cache_file(tmp_path, write_cache, cache_data) -> Path:
    return write_cache(tmp_path / "cache-v3.json", cache_data)


@pytest.fixture
async def engine(sync_dir, cache_file):
    """Initialized engine over the sample corpus with a fixed clock."""
    engine = MeetingSearchEngine(
        sync_dir=sync_dir,
        cache_path=cache_file,
        max_workers=2,
        max_concurrency=2,
        clock=lambda: FIXED_NOW
    )
    await engine.initialize()
    yield engine
    await engine.close()
