"""High-level API service for meeting search."""

import logging
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional, Union
from contextlib import asynccontextmanager

from ..config import ServiceConfig
from ..core.engine import MeetingSearchEngine
from ..core.exceptions import CacheRefreshError, MeetingSearchError
from ..models.query import SearchQuery
from ..models.result import SearchResponse
from ..utils.logging_config import setup_logging
from ..utils.validators import query_from_params, require_document_id, summarize_params

logger = logging.getLogger(__name__)

NO_NOTES = "(No notes available)"


class MeetingSearchService:
    """
    High-level service interface for meeting search operations.

    Exposes the tool-style operations (search, meeting details,
    transcript, refresh) as plain dictionaries, with resource management
    around the engine.
    """

    def __init__(self, config: Optional[ServiceConfig] = None, configure_logging: bool = True):
        """
        Initialize meeting search service.

        Args:
            config: Service configuration (defaults to environment values)
            configure_logging: Whether to set up logging from the config
        """
        self.config = config or ServiceConfig.from_env()

        if configure_logging:
            setup_logging(level=self.config.log_level)

        self.engine = MeetingSearchEngine(
            sync_dir=self.config.sync_dir,
            cache_path=self.config.cache_path,
            max_workers=self.config.max_workers,
            max_concurrency=self.config.max_concurrency
        )

        self._initialized = False
        logger.info("Meeting search service initialized")

    async def initialize(self) -> None:
        """
        Load documents and build indexes.

        Raises:
            SyncDirectoryError: If the sync directory cannot be read
        """
        try:
            await self.engine.initialize()
        except MeetingSearchError as e:
            logger.error(
                f"Failed to initialize service: {e}. "
                f"Make sure documents have been synced to {self.config.sync_dir} first."
            )
            raise

        self._initialized = True
        stats = self.engine.get_stats()
        logger.info(f"Serving {stats.total_documents} documents from {self.config.sync_dir}")

    async def search(self, query: SearchQuery) -> SearchResponse:
        """
        Search for meetings matching the query.

        Args:
            query: Search query with filters

        Returns:
            Ranked search response
        """
        self._check_initialized()
        return await self.engine.search(query)

    async def search_meetings(self, **params: Any) -> Dict[str, Any]:
        """
        Convenience method taking the exposed query parameters.

        Args:
            **params: attendee_email, start_date, end_date, workspace_id,
                folder_name, content_query, limit, include_transcript

        Returns:
            {"matches": [...], "total_matches": n, "query_summary": "..."}
        """
        query = query_from_params(params)
        logger.debug(f"search_meetings({summarize_params(params)})")
        response = await self.search(query)
        return response.to_dict()

    async def get_meeting_details(self, document_id: str) -> Optional[Dict[str, Any]]:
        """
        Full details for one meeting, including notes.

        Returns:
            Details dictionary, or None if the meeting is unknown
        """
        self._check_initialized()
        document_id = require_document_id(document_id)

        record = self.engine.get_document(document_id)
        metadata = self.engine.get_metadata(document_id)
        if record is None or metadata is None:
            return None

        notes = await self.engine.get_notes(document_id)
        conference = record.enrichment.conference

        return {
            "document_id": record.id,
            "title": metadata.title,
            "created_at": metadata.created_at,
            "updated_at": metadata.updated_at,
            "meeting_date": metadata.meeting_date,
            "workspace_id": metadata.workspace_id,
            "workspace_name": metadata.workspace_name,
            "folders": [folder.model_dump() for folder in metadata.folders],
            "attendees": [
                {**attendee.to_dict(), "response_status": attendee.response_status}
                for attendee in record.enrichment.attendees
            ],
            "conference": (
                {"url": conference.url, "platform": conference.platform} if conference else None
            ),
            "calendar_id": record.enrichment.calendar_id,
            "sources": list(metadata.sources),
            "notes": notes or NO_NOTES,
        }

    async def get_meeting_transcript(self, document_id: str) -> Optional[str]:
        """Rendered transcript, or None if the meeting has none."""
        self._check_initialized()
        return await self.engine.get_transcript_markdown(require_document_id(document_id))

    async def refresh_cache(self) -> Dict[str, Any]:
        """
        Reload the enrichment cache without restarting.

        Returns:
            {"success": bool, "message": str, "stats": {...}}; on failure
            the stats describe the unchanged, previous state
        """
        self._check_initialized()
        try:
            stats = await self.engine.refresh()
        except CacheRefreshError as e:
            return {
                "success": False,
                "message": str(e),
                "stats": self._refresh_stats(),
            }

        return {
            "success": True,
            "message": "Cache refreshed successfully",
            "stats": self._refresh_stats(stats.to_dict()),
        }

    def _refresh_stats(self, stats: Optional[Dict[str, int]] = None) -> Dict[str, int]:
        stats = stats or self.engine.get_stats().to_dict()
        return {
            key: stats[key]
            for key in ("totalDocuments", "documentsWithAttendees", "uniqueAttendees")
        }

    async def list_folders(self) -> Dict[str, Any]:
        """Folders with document counts."""
        self._check_initialized()
        return self.engine.folder_summary()

    async def list_workspaces(self) -> List[Dict[str, Any]]:
        """Workspaces with document counts."""
        self._check_initialized()
        return self.engine.workspace_summary()

    async def get_stats(self) -> Dict[str, Any]:
        """Get service and engine statistics."""
        self._check_initialized()

        return {
            'service': {
                'initialized': self._initialized,
                'sync_dir': str(self.config.sync_dir),
                'cache_path': str(self.config.cache_path)
            },
            'cache': self.engine.get_stats().to_dict(),
            'engine': self.engine.get_engine_stats()
        }

    async def health_check(self) -> Dict[str, Any]:
        """Report readiness without raising."""
        if not self._initialized:
            return {
                'status': 'not_initialized',
                'message': 'Service not initialized'
            }

        try:
            return {
                'status': 'healthy',
                'stats': self.engine.get_stats().to_dict()
            }
        except MeetingSearchError as e:
            logger.error(f"Health check failed: {str(e)}")
            return {
                'status': 'error',
                'message': str(e)
            }

    def _check_initialized(self) -> None:
        """Check if service is properly initialized."""
        if not self._initialized:
            raise MeetingSearchError("Service not initialized. Call initialize() first.")

    async def close(self) -> None:
        """Clean up resources and close the service."""
        await self.engine.close()
        self._initialized = False
        logger.info("Service closed successfully")

    @classmethod
    @asynccontextmanager
    async def create(
        cls,
        sync_dir: Union[str, Path, None] = None,
        **kwargs
    ) -> AsyncIterator['MeetingSearchService']:
        """
        Create and manage service lifecycle with context manager.

        Args:
            sync_dir: Sync directory (overrides the environment)
            **kwargs: Additional ServiceConfig fields, plus configure_logging

        Yields:
            Initialized meeting search service
        """
        configure_logging = kwargs.pop("configure_logging", True)
        if sync_dir is not None:
            kwargs["sync_dir"] = sync_dir
        service = cls(ServiceConfig.from_env(**kwargs), configure_logging=configure_logging)

        try:
            await service.initialize()
            yield service
        finally:
            await service.close()
