"""Loading of document records from the sync directory."""

import asyncio
from typing import Dict, Mapping, Optional, Tuple

from ..models.document import DocumentMetadata, DocumentRecord, MeetingEnrichment
from ..utils.logging_config import StructuredLogger
from .exceptions import MetadataParseError
from .storage import SyncDirectoryReader

logger = StructuredLogger(__name__)


class MetadataLoader:
    """
    Builds the in-memory document set from per-document metadata files.

    Each immediate subdirectory of the sync root is one document. Missing
    metadata files are skipped silently. Malformed ones, and directories
    that cannot form a valid record, are skipped with a warning. Only a
    failure to enumerate the root propagates.
    """

    def __init__(self, reader: SyncDirectoryReader, max_concurrency: int = 16):
        """
        Initialize metadata loader.

        Args:
            reader: Sync directory reader
            max_concurrency: Maximum number of metadata reads in flight
        """
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be positive")
        self.reader = reader
        self.max_concurrency = max_concurrency

    async def load(
        self,
        enrichment: Optional[Mapping[str, MeetingEnrichment]] = None
    ) -> Tuple[Dict[str, DocumentRecord], Dict[str, DocumentMetadata]]:
        """
        Load every document record and attach enrichment by id.

        Args:
            enrichment: Mapping from document id to enrichment data

        Returns:
            (records by id, raw metadata by id), both ordered by id

        Raises:
            SyncDirectoryError: If the sync root cannot be enumerated
        """
        enrichment = enrichment or {}
        document_ids = await self.reader.list_document_ids()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def load_one(
            document_id: str
        ) -> Optional[Tuple[DocumentMetadata, DocumentRecord]]:
            async with semaphore:
                try:
                    metadata = await self.reader.read_metadata(document_id)
                except MetadataParseError as e:
                    logger.for_document(document_id).warning(str(e))
                    return None
            if metadata is None:
                return None

            try:
                record = DocumentRecord.from_metadata(
                    document_id, metadata, enrichment.get(document_id)
                )
            except ValueError as e:
                logger.for_document(document_id).warning(
                    f"Skipping document {document_id!r}: {e}"
                )
                return None
            return metadata, record

        loaded = await asyncio.gather(*(load_one(doc_id) for doc_id in document_ids))

        records: Dict[str, DocumentRecord] = {}
        metadata_by_id: Dict[str, DocumentMetadata] = {}
        for document_id, result in zip(document_ids, loaded):
            if result is None:
                continue
            metadata_by_id[document_id], records[document_id] = result

        enriched = sum(1 for doc_id in records if doc_id in enrichment)
        logger.with_context(
            root=self.reader.root,
            directories=len(document_ids),
            enriched=enriched
        ).info(f"Loaded {len(records)} documents")
        return records, metadata_by_id
