"""Lookup indexes over the loaded document set."""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, FrozenSet, Iterable, Mapping, Set

from ..models.document import DocumentRecord
from ..utils.text_processing import TextProcessor

IdSet = FrozenSet[str]
Index = Mapping[str, IdSet]

_EMPTY: IdSet = frozenset()
_text = TextProcessor()


def _freeze(index: Dict[str, Set[str]]) -> Dict[str, IdSet]:
    return {key: frozenset(ids) for key, ids in index.items()}


def _union_matching(index: Index, pattern: str) -> IdSet:
    """Union the id sets of every key containing the lowercased pattern."""
    pattern = pattern.lower()
    matching: Set[str] = set()
    for key, ids in index.items():
        if pattern in key:
            matching.update(ids)
    return frozenset(matching)


def date_key(record: DocumentRecord) -> str:
    """UTC calendar day of the record's meeting (or creation) instant."""
    moment = record.effective_date
    if moment is None:
        return ""
    return moment.date().isoformat()


@dataclass(frozen=True)
class DocumentIndexes:
    """
    Five independent mappings from a normalized key to document ids.

    Attributes:
        attendees: Lowercased attendee email -> ids
        dates: UTC day (YYYY-MM-DD) -> ids
        workspaces: Workspace id -> ids
        folders: Lowercased folder name -> ids
        title_tokens: Lowercased title token -> ids
    """
    attendees: Dict[str, IdSet] = field(default_factory=dict)
    dates: Dict[str, IdSet] = field(default_factory=dict)
    workspaces: Dict[str, IdSet] = field(default_factory=dict)
    folders: Dict[str, IdSet] = field(default_factory=dict)
    title_tokens: Dict[str, IdSet] = field(default_factory=dict)

    def with_attendees(self, attendees: Dict[str, IdSet]) -> "DocumentIndexes":
        """Copy with the attendee index swapped; other indexes are shared."""
        return replace(self, attendees=attendees)

    def documents_by_attendee(self, email_pattern: str) -> IdSet:
        """Documents with an attendee email containing the pattern."""
        return _union_matching(self.attendees, email_pattern)

    def documents_by_folder(self, name_pattern: str) -> IdSet:
        """Documents in a folder whose name contains the pattern."""
        return _union_matching(self.folders, name_pattern)

    def documents_by_workspace(self, workspace_id: str) -> IdSet:
        return self.workspaces.get(workspace_id, _EMPTY)

    def documents_on_date(self, day: date) -> IdSet:
        return self.dates.get(day.isoformat(), _EMPTY)

    def documents_by_title(self, text: str) -> IdSet:
        """Documents whose title shares at least one token with the text."""
        matching: Set[str] = set()
        for token in _text.tokenize(text):
            matching.update(self.title_tokens.get(token, _EMPTY))
        return frozenset(matching)


def build_attendee_index(records: Iterable[DocumentRecord]) -> Dict[str, IdSet]:
    """Index documents by lowercased attendee email."""
    index: Dict[str, Set[str]] = {}
    for record in records:
        for attendee in record.enrichment.attendees:
            if attendee.email:
                index.setdefault(attendee.email.lower(), set()).add(record.id)
    return _freeze(index)


def build_indexes(records: Iterable[DocumentRecord]) -> DocumentIndexes:
    """
    Build all five indexes in a single pass over the records.

    Records without a usable date are left out of the date index.
    """
    attendees: Dict[str, Set[str]] = {}
    dates: Dict[str, Set[str]] = {}
    workspaces: Dict[str, Set[str]] = {}
    folders: Dict[str, Set[str]] = {}
    title_tokens: Dict[str, Set[str]] = {}

    for record in records:
        for attendee in record.enrichment.attendees:
            if attendee.email:
                attendees.setdefault(attendee.email.lower(), set()).add(record.id)

        day = date_key(record)
        if day:
            dates.setdefault(day, set()).add(record.id)

        if record.workspace_id:
            workspaces.setdefault(record.workspace_id, set()).add(record.id)

        for folder in record.folders:
            folders.setdefault(folder.name.lower(), set()).add(record.id)

        for token in _text.tokenize(record.title):
            title_tokens.setdefault(token, set()).add(record.id)

    return DocumentIndexes(
        attendees=_freeze(attendees),
        dates=_freeze(dates),
        workspaces=_freeze(workspaces),
        folders=_freeze(folders),
        title_tokens=_freeze(title_tokens)
    )
