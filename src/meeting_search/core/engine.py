"""Main meeting search engine implementation."""

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union
from concurrent.futures import ThreadPoolExecutor

from ..models.document import (
    EMPTY_ENRICHMENT,
    DocumentMetadata,
    DocumentRecord,
    Utterance,
)
from ..models.query import SearchQuery
from ..models.result import CacheStats, SearchMatch, SearchResponse
from ..utils.text_processing import TextProcessor
from ..utils.validators import validate_query
from .cache_parser import load_cache_file, parse_cache_file
from .date_parser import parse_date_range
from .exceptions import (
    CacheParseError,
    CacheRefreshError,
    MeetingSearchError,
    SearchError,
)
from .indexes import DocumentIndexes, build_attendee_index, build_indexes
from .loader import MetadataLoader
from .scoring import RelevanceScore, score_document
from .storage import SyncDirectoryReader

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class IndexState:
    """Immutable snapshot of documents and indexes served to queries."""
    records: Mapping[str, DocumentRecord]
    metadata: Mapping[str, DocumentMetadata]
    indexes: DocumentIndexes

    @property
    def document_ids(self) -> FrozenSet[str]:
        return frozenset(self.records)


class MeetingSearchEngine:
    """
    In-memory multi-dimensional search over synced meeting documents.

    Queries read a single immutable snapshot captured at entry; refresh
    builds a new snapshot and publishes it in one assignment, so readers
    never observe a half-rebuilt attendee index.
    """

    def __init__(
        self,
        sync_dir: Union[str, Path],
        cache_path: Union[str, Path, None] = None,
        max_workers: int = 4,
        max_concurrency: int = 16,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize meeting search engine.

        Args:
            sync_dir: Root of the synced document directories
            cache_path: Enrichment cache file (defaults to the desktop app's cache)
            max_workers: Number of worker threads for file I/O
            max_concurrency: Maximum concurrent per-document reads
            clock: Source of the current instant, for recency and relative dates
        """
        self.sync_dir = Path(sync_dir)
        self.cache_path = Path(cache_path) if cache_path else None
        self.max_concurrency = max_concurrency
        self._clock = clock or _utcnow

        self.executor = ThreadPoolExecutor(max_workers=max_workers)
        self.reader = SyncDirectoryReader(self.sync_dir, executor=self.executor)
        self.loader = MetadataLoader(self.reader, max_concurrency=max_concurrency)
        self.text_processor = TextProcessor()

        self._state: Optional[IndexState] = None
        self._refresh_lock = asyncio.Lock()
        self._stats = {
            'total_searches': 0,
            'avg_search_time': 0.0,
            'refreshes': 0,
            'failed_refreshes': 0
        }

        logger.info("Meeting search engine initialized")

    @property
    def is_ready(self) -> bool:
        return self._state is not None

    async def _run_blocking(self, func: Callable[..., Any], *args) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, func, *args)

    def _require_state(self) -> IndexState:
        if self._state is None:
            raise MeetingSearchError("Engine not initialized. Call initialize() first.")
        return self._state

    async def initialize(self) -> None:
        """
        Parse the enrichment cache, load all documents and build indexes.

        Raises:
            SyncDirectoryError: If the sync directory cannot be enumerated;
                no partial state is published in that case
        """
        logger.info(f"Loading documents from {self.sync_dir}")
        enrichment = await self._run_blocking(parse_cache_file, self.cache_path)
        records, metadata = await self.loader.load(enrichment)
        indexes = build_indexes(records.values())

        self._state = IndexState(
            records=MappingProxyType(records),
            metadata=MappingProxyType(metadata),
            indexes=indexes
        )

        stats = self.get_stats()
        logger.info(
            f"Loaded {stats.total_documents} documents, "
            f"{stats.documents_with_attendees} with attendees, "
            f"{stats.unique_attendees} unique attendees"
        )

    # Search

    async def search(self, query: SearchQuery) -> SearchResponse:
        """
        Resolve a query into ranked, truncated matches.

        Args:
            query: Search query with filters

        Returns:
            SearchResponse with matches, pre-truncation count and summary

        Raises:
            ValidationError: If query is invalid
            SearchError: If search fails
        """
        validate_query(query)
        state = self._require_state()
        start_time = time.perf_counter()

        try:
            candidates, title_matches, filters = self._filter_candidates(state, query)
            scored = await self._score_candidates(state, candidates, title_matches, query)

            # Score descending, document id as the deterministic tie-break
            scored.sort(key=lambda item: (-item[1].total, item[0]))
            top = scored[:query.limit]

            matches = await asyncio.gather(*(
                self._build_match(state.records[doc_id], score.total, query.include_transcript)
                for doc_id, score in top
            ))

            response = SearchResponse(
                matches=list(matches),
                total_matches=len(scored),
                query_summary=(
                    f"Filtering by: {', '.join(filters)}" if filters else "Showing all meetings"
                )
            )
        except Exception as e:
            logger.error(f"Search failed: {str(e)}")
            raise SearchError(f"Search failed: {str(e)}") from e

        search_time = time.perf_counter() - start_time
        self._update_search_stats(search_time)
        logger.info(
            f"Search completed: {len(response.matches)} of {response.total_matches} "
            f"matches in {search_time:.3f}s"
        )
        return response

    def _filter_candidates(
        self,
        state: IndexState,
        query: SearchQuery
    ) -> Tuple[FrozenSet[str], FrozenSet[str], List[str]]:
        """Intersect the filters; returns (candidates, title matches, summary parts)."""
        candidates = state.document_ids
        filters: List[str] = []

        if query.attendee_email:
            candidates = candidates & state.indexes.documents_by_attendee(query.attendee_email)
            filters.append(f'attendee: "{query.attendee_email}"')

        if query.has_date_filter:
            # Ranges scan the records directly; the date index is keyed by exact day
            date_range = parse_date_range(query.start_date, query.end_date, now=self._clock())
            candidates = frozenset(
                doc_id for doc_id in candidates
                if date_range.contains(state.records[doc_id].effective_date)
            )
            if query.start_date and query.end_date:
                filters.append(f"dates: {query.start_date} to {query.end_date}")
            elif query.start_date:
                filters.append(f"from: {query.start_date}")
            else:
                filters.append(f"until: {query.end_date}")

        if query.workspace_id:
            candidates = candidates & state.indexes.documents_by_workspace(query.workspace_id)
            filters.append(f"workspace: {query.workspace_id}")

        if query.folder_name:
            candidates = candidates & state.indexes.documents_by_folder(query.folder_name)
            filters.append(f'folder: "{query.folder_name}"')

        title_matches: FrozenSet[str] = frozenset()
        if query.content_query:
            # Content does not narrow the candidates here; scoring enforces it
            title_matches = candidates & state.indexes.documents_by_title(query.content_query)
            filters.append(f'content: "{query.content_query}"')

        return candidates, title_matches, filters

    async def _score_candidates(
        self,
        state: IndexState,
        candidates: FrozenSet[str],
        title_matches: FrozenSet[str],
        query: SearchQuery
    ) -> List[Tuple[str, RelevanceScore]]:
        now = self._clock()
        content_query = query.content_query
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def score_one(doc_id: str) -> Tuple[str, RelevanceScore]:
            transcript_matched = False
            if content_query:
                async with semaphore:
                    transcript_matched = await self._transcript_contains(doc_id, content_query)
            return doc_id, score_document(
                state.records[doc_id],
                now,
                title_matched=doc_id in title_matches,
                transcript_matched=transcript_matched
            )

        scored = await asyncio.gather(*(score_one(doc_id) for doc_id in sorted(candidates)))

        if content_query:
            return [(doc_id, score) for doc_id, score in scored if score.content > 0]
        return list(scored)

    async def _transcript_contains(self, document_id: str, text: str) -> bool:
        utterances = await self.reader.read_transcript(document_id)
        if not utterances:
            return False
        haystack = self.text_processor.transcript_text(utterances)
        return self.text_processor.contains(haystack, text)

    async def _build_match(
        self,
        record: DocumentRecord,
        score: float,
        include_transcript: bool
    ) -> SearchMatch:
        notes = await self.reader.read_notes(record.id)
        transcript = None
        if include_transcript:
            transcript = await self.reader.read_transcript_markdown(record.id)

        return SearchMatch(
            document_id=record.id,
            title=record.title,
            meeting_date=record.effective_date,
            workspace_name=record.workspace_name,
            folders=record.folder_names,
            attendees=list(record.enrichment.attendees),
            relevance_score=score,
            snippet=self.text_processor.make_snippet(notes),
            transcript=transcript
        )

    def _update_search_stats(self, search_time: float) -> None:
        """Update search performance statistics."""
        self._stats['total_searches'] += 1

        total_searches = self._stats['total_searches']
        current_avg = self._stats['avg_search_time']
        self._stats['avg_search_time'] = (
            (current_avg * (total_searches - 1) + search_time) / total_searches
        )

    # Direct lookups

    def get_document(self, document_id: str) -> Optional[DocumentRecord]:
        """Document record by id, or None if unknown."""
        return self._require_state().records.get(document_id)

    def get_metadata(self, document_id: str) -> Optional[DocumentMetadata]:
        """Raw metadata record by id, or None if unknown."""
        return self._require_state().metadata.get(document_id)

    async def get_transcript(self, document_id: str) -> Optional[List[Utterance]]:
        """Structured transcript, or None if the document or file is missing."""
        if self.get_document(document_id) is None:
            return None
        return await self.reader.read_transcript(document_id)

    async def get_transcript_markdown(self, document_id: str) -> Optional[str]:
        """Rendered transcript, or None if the document or file is missing."""
        if self.get_document(document_id) is None:
            return None
        return await self.reader.read_transcript_markdown(document_id)

    async def get_notes(self, document_id: str) -> Optional[str]:
        """Rendered notes, or None if the document or file is missing."""
        if self.get_document(document_id) is None:
            return None
        return await self.reader.read_notes(document_id)

    # Refresh

    async def refresh(self) -> CacheStats:
        """
        Re-read the enrichment cache without reloading documents.

        Every loaded record gets the freshly parsed enrichment (or none),
        and only the attendee index is rebuilt. Documents added to or
        removed from disk are not picked up.

        Returns:
            Updated statistics

        Raises:
            CacheRefreshError: If the cache could not be read or parsed;
                the previous enrichment and indexes stay in place
        """
        async with self._refresh_lock:
            state = self._require_state()

            try:
                enrichment = await self._run_blocking(load_cache_file, self.cache_path)
            except CacheParseError as e:
                self._stats['failed_refreshes'] += 1
                logger.warning(f"Cache refresh failed, keeping previous data: {e}")
                raise CacheRefreshError(f"Cache refresh failed: {e}") from e

            records = {
                doc_id: replace(record, enrichment=enrichment.get(doc_id, EMPTY_ENRICHMENT))
                for doc_id, record in state.records.items()
            }
            indexes = state.indexes.with_attendees(build_attendee_index(records.values()))

            self._state = IndexState(
                records=MappingProxyType(records),
                metadata=state.metadata,
                indexes=indexes
            )
            self._stats['refreshes'] += 1

        stats = self.get_stats()
        logger.info(
            f"Cache refresh complete: {stats.documents_with_attendees} documents "
            f"with attendees, {stats.unique_attendees} unique attendees"
        )
        return stats

    # Statistics and summaries

    def get_stats(self) -> CacheStats:
        """Aggregate statistics over the current snapshot."""
        state = self._require_state()
        return CacheStats(
            total_documents=len(state.records),
            documents_with_attendees=sum(
                1 for record in state.records.values() if record.enrichment.has_attendees
            ),
            unique_attendees=len(state.indexes.attendees),
            unique_folders=len(state.indexes.folders),
            unique_workspaces=len(state.indexes.workspaces)
        )

    def get_engine_stats(self) -> Dict[str, Any]:
        """Search and refresh counters plus configuration."""
        return {
            **self._stats,
            'is_ready': self.is_ready,
            'sync_dir': str(self.sync_dir),
            'cache_path': str(self.cache_path) if self.cache_path else None
        }

    def folder_summary(self) -> Dict[str, Any]:
        """
        Folders with document counts, plus the count of unfiled documents.

        Returns:
            {"folders": [{"id", "name", "document_count"}], "documents_without_folder": n}
        """
        state = self._require_state()
        folders: Dict[str, Dict[str, Any]] = {}
        unfiled = 0
        for record in state.records.values():
            if not record.folders:
                unfiled += 1
            for folder in record.folders:
                entry = folders.setdefault(
                    folder.id, {"id": folder.id, "name": folder.name, "document_count": 0}
                )
                entry["document_count"] += 1

        return {
            "folders": sorted(folders.values(), key=lambda f: (f["name"].lower(), f["id"])),
            "documents_without_folder": unfiled
        }

    def workspace_summary(self) -> List[Dict[str, Any]]:
        """Workspaces seen in the loaded documents, with document counts."""
        state = self._require_state()
        workspaces: Dict[str, Dict[str, Any]] = {}
        for workspace_id, doc_ids in state.indexes.workspaces.items():
            name = next(
                (state.records[doc_id].workspace_name for doc_id in sorted(doc_ids)
                 if state.records[doc_id].workspace_name),
                None
            )
            workspaces[workspace_id] = {
                "id": workspace_id,
                "name": name,
                "document_count": len(doc_ids)
            }
        return sorted(workspaces.values(), key=lambda w: ((w["name"] or "").lower(), w["id"]))

    async def close(self) -> None:
        """Clean up resources."""
        self.executor.shutdown(wait=True)
        logger.info("Meeting search engine closed")
