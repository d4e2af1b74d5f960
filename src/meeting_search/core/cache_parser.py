"""Parser for the desktop app's local cache file (attendee and meeting metadata)."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..models.document import Attendee, ConferenceInfo, MeetingEnrichment
from .exceptions import CacheParseError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = Path.home() / "Library" / "Application Support" / "Granola" / "cache-v3.json"

# Candidate keys per logical field, tried in order; the first present value wins.
CONTAINER_KEYS: Tuple[str, ...] = ("meetings", "events", "documents")
ID_KEYS: Tuple[str, ...] = ("id", "document_id", "documentId", "meeting_id", "meetingId")
ATTENDEE_LIST_KEYS: Tuple[str, ...] = ("attendees", "participants", "invitees")
EMAIL_KEYS: Tuple[str, ...] = ("email", "emailAddress", "email_address")
NAME_KEYS: Tuple[str, ...] = ("displayName", "name", "full_name", "fullName")
ORGANIZER_KEYS: Tuple[str, ...] = ("organizer", "isOrganizer", "is_organizer")
RESPONSE_STATUS_KEYS: Tuple[str, ...] = ("responseStatus", "status")
CONFERENCE_KEYS: Tuple[str, ...] = ("conferenceData", "conference", "meetingInfo")
ENTRY_POINT_LIST_KEYS: Tuple[str, ...] = ("entryPoints", "urls", "links")
ENTRY_URI_KEYS: Tuple[str, ...] = ("uri", "url", "link")
ENTRY_TYPE_KEYS: Tuple[str, ...] = ("entryPointType", "type")
CALENDAR_KEYS: Tuple[str, ...] = ("calendarId", "calendar_id")


class MalformedEntryError(ValueError):
    """A single cache entry could not be interpreted."""


def first_present(entry: Dict[str, Any], keys: Iterable[str]) -> Any:
    """Return the value of the first alias with a truthy value, else None."""
    for key in keys:
        value = entry.get(key)
        if value:
            return value
    return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    raise MalformedEntryError(f"expected a string, got {type(value).__name__}")


def _parse_attendee(raw: Dict[str, Any]) -> Attendee:
    return Attendee(
        email=_optional_str(first_present(raw, EMAIL_KEYS)),
        name=_optional_str(first_present(raw, NAME_KEYS)),
        organizer=bool(first_present(raw, ORGANIZER_KEYS)),
        response_status=_optional_str(first_present(raw, RESPONSE_STATUS_KEYS))
    )


def _parse_conference(raw: Any) -> Optional[ConferenceInfo]:
    """Use the first entry point of the conference data, if there is one."""
    if not isinstance(raw, dict):
        return None
    entry_points = first_present(raw, ENTRY_POINT_LIST_KEYS)
    if not isinstance(entry_points, list):
        return None
    for entry_point in entry_points:
        if isinstance(entry_point, dict):
            return ConferenceInfo(
                url=_optional_str(first_present(entry_point, ENTRY_URI_KEYS)),
                platform=_optional_str(first_present(entry_point, ENTRY_TYPE_KEYS))
            )
    return None


def parse_entry(entry: Any) -> Optional[Tuple[str, MeetingEnrichment]]:
    """
    Extract enrichment data from one cache entry.

    Args:
        entry: Raw decoded JSON value

    Returns:
        (document_id, enrichment) or None if the entry carries no id

    Raises:
        MalformedEntryError: If a recognised field has an unusable shape
    """
    if not isinstance(entry, dict):
        return None

    document_id = first_present(entry, ID_KEYS)
    if not document_id:
        return None
    if not isinstance(document_id, str):
        raise MalformedEntryError(f"document id must be a string, got {document_id!r}")

    attendees: List[Attendee] = []
    raw_attendees = first_present(entry, ATTENDEE_LIST_KEYS)
    if raw_attendees is not None:
        if not isinstance(raw_attendees, list):
            raise MalformedEntryError("attendee list is not a list")
        attendees = [_parse_attendee(a) for a in raw_attendees if isinstance(a, dict)]

    return document_id, MeetingEnrichment(
        attendees=tuple(attendees),
        conference=_parse_conference(first_present(entry, CONFERENCE_KEYS)),
        calendar_id=_optional_str(first_present(entry, CALENDAR_KEYS))
    )


def _iter_entries(data: Any) -> Iterable[Any]:
    """Yield candidate entries from any of the tolerated top-level shapes."""
    if isinstance(data, dict):
        container = first_present(data, CONTAINER_KEYS)
        if container is not None:
            data = container
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return [value for value in data.values() if isinstance(value, dict)]
    return []


def extract_meetings(data: Any) -> Dict[str, MeetingEnrichment]:
    """
    Build the document-id to enrichment mapping from decoded cache data.

    Malformed entries are skipped without aborting the rest.
    """
    meetings: Dict[str, MeetingEnrichment] = {}
    skipped = 0
    for entry in _iter_entries(data):
        try:
            parsed = parse_entry(entry)
        except MalformedEntryError as e:
            skipped += 1
            logger.debug(f"Skipping malformed cache entry: {e}")
            continue
        if parsed is not None:
            document_id, enrichment = parsed
            meetings[document_id] = enrichment

    if skipped:
        logger.warning(f"Skipped {skipped} malformed cache entries")
    return meetings


def load_cache_file(cache_path: Union[str, Path, None] = None) -> Dict[str, MeetingEnrichment]:
    """
    Strictly read and parse the cache file.

    Args:
        cache_path: Cache file location (defaults to the desktop app's cache)

    Returns:
        Mapping from document id to enrichment

    Raises:
        CacheParseError: If the file is missing, unreadable or not valid JSON
    """
    path = Path(cache_path) if cache_path else DEFAULT_CACHE_PATH

    if not path.is_file():
        raise CacheParseError(f"Cache file not found at {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CacheParseError(f"Error reading cache file {path}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise CacheParseError(f"Failed to parse cache file as JSON: {e}") from e

    meetings = extract_meetings(data)
    logger.info(f"Parsed cache file: found {len(meetings)} meetings with metadata")
    return meetings


def parse_cache_file(cache_path: Union[str, Path, None] = None) -> Dict[str, MeetingEnrichment]:
    """
    Read the cache file, degrading to an empty mapping on any failure.

    Attendee information is optional: search keeps working without it.
    """
    try:
        return load_cache_file(cache_path)
    except CacheParseError as e:
        logger.warning(f"{e}. Attendee information will not be available.")
        return {}
