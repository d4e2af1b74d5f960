"""Test index construction and lookups."""

from datetime import date, datetime, timezone

from meeting_search.core.indexes import build_attendee_index, build_indexes
from meeting_search.models.document import (
    Attendee,
    DocumentRecord,
    FolderRef,
    MeetingEnrichment,
)


def make_records():
    return [
        DocumentRecord(
            id="d1",
            title="Budget Review",
            created_at=datetime(2025, 6, 12, 9, tzinfo=timezone.utc),
            meeting_date=datetime(2025, 6, 13, 23, 30, tzinfo=timezone.utc),
            workspace_id="ws1",
            folders=(FolderRef(id="f1", name="Finance"), FolderRef(id="f2", name="Leadership")),
            enrichment=MeetingEnrichment(attendees=(
                Attendee(email="Joe@X.com"),
                Attendee(name="No Email"),
            )),
        ),
        DocumentRecord(
            id="d2",
            title="Budget: planning (Q3)",
            created_at=datetime(2025, 6, 13, 8, tzinfo=timezone.utc),
            folders=(FolderRef(id="f1", name="Finance"),),
            enrichment=MeetingEnrichment(attendees=(Attendee(email="ann@acme.com"),)),
        ),
        DocumentRecord(id="d3", title="Untitled"),
    ]


class TestBuildIndexes:
    """Test the five-way index build."""

    def test_attendee_index_lowercased(self):
        """Test attendee emails are indexed in lowercase."""
        indexes = build_indexes(make_records())
        assert indexes.attendees == {
            "joe@x.com": frozenset({"d1"}),
            "ann@acme.com": frozenset({"d2"}),
        }

    def test_date_index_uses_meeting_date_then_creation(self):
        """Test the date index prefers the meeting date."""
        indexes = build_indexes(make_records())
        assert indexes.dates == {"2025-06-13": frozenset({"d1", "d2"})}
        assert indexes.documents_on_date(date(2025, 6, 13)) == {"d1", "d2"}
        assert indexes.documents_on_date(date(2025, 6, 12)) == frozenset()

    def test_undated_document_absent_from_date_index(self):
        """Test documents without dates are left out of the date index."""
        indexes = build_indexes(make_records())
        assert all("d3" not in ids for ids in indexes.dates.values())

    def test_workspace_and_folder_indexes(self):
        """Test workspace and folder keys."""
        indexes = build_indexes(make_records())
        assert indexes.workspaces == {"ws1": frozenset({"d1"})}
        assert indexes.folders == {
            "finance": frozenset({"d1", "d2"}),
            "leadership": frozenset({"d1"}),
        }

    def test_title_tokens(self):
        """Test title tokens are split and lowercased."""
        indexes = build_indexes(make_records())
        assert indexes.title_tokens["budget"] == {"d1", "d2"}
        assert indexes.title_tokens["q3"] == {"d2"}
        assert "" not in indexes.title_tokens

    def test_every_set_within_universe(self):
        """Test every indexed id belongs to a loaded document."""
        records = make_records()
        universe = {record.id for record in records}
        indexes = build_indexes(records)
        for index in (indexes.attendees, indexes.dates, indexes.workspaces,
                      indexes.folders, indexes.title_tokens):
            for ids in index.values():
                assert ids <= universe

    def test_idempotent_and_order_independent(self):
        """Test rebuilding in any order yields the same indexes."""
        records = make_records()
        first = build_indexes(records)
        second = build_indexes(records)
        reversed_build = build_indexes(list(reversed(records)))

        assert first == second
        assert first == reversed_build

    def test_attendee_index_matches_full_build(self):
        """Test the standalone attendee index matches the full build."""
        records = make_records()
        assert build_attendee_index(records) == build_indexes(records).attendees


class TestLookups:
    """Test index lookups."""

    def test_attendee_substring(self):
        """Test attendee lookup unions substring matches."""
        indexes = build_indexes(make_records())
        assert indexes.documents_by_attendee("JOE") == {"d1"}
        assert indexes.documents_by_attendee("@") == {"d1", "d2"}
        assert indexes.documents_by_attendee("zed") == frozenset()

    def test_folder_substring_union(self):
        """Test folder lookup unions substring matches."""
        indexes = build_indexes(make_records())
        assert indexes.documents_by_folder("fin") == {"d1", "d2"}
        assert indexes.documents_by_folder("LEAD") == {"d1"}
        assert indexes.documents_by_folder("a") == {"d1", "d2"}

    def test_workspace_exact(self):
        """Test workspace lookup is exact."""
        indexes = build_indexes(make_records())
        assert indexes.documents_by_workspace("ws1") == {"d1"}
        assert indexes.documents_by_workspace("ws") == frozenset()

    def test_title_token_union(self):
        """Test title lookup unions per-token matches."""
        indexes = build_indexes(make_records())
        assert indexes.documents_by_title("budget review") == {"d1", "d2"}
        assert indexes.documents_by_title("Review!") == {"d1"}
        assert indexes.documents_by_title("revie") == frozenset()

    def test_with_attendees_shares_other_indexes(self):
        """Test replacing attendees keeps the other maps."""
        indexes = build_indexes(make_records())
        swapped = indexes.with_attendees({})

        assert swapped.attendees == {}
        assert swapped.folders is indexes.folders
        assert swapped.title_tokens is indexes.title_tokens
