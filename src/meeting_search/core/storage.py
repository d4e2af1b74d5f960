"""Read access to the on-disk sync directory."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional, TypeVar, Union

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from ..models.document import DocumentMetadata, Utterance
from .exceptions import MetadataParseError, SyncDirectoryError

logger = logging.getLogger(__name__)

METADATA_FILE = "metadata.json"
NOTES_FILE = "resume.md"
TRANSCRIPT_FILE = "transcript.json"
TRANSCRIPT_MARKDOWN_FILE = "transcript.md"

T = TypeVar("T")

_UTTERANCES = TypeAdapter(List[Utterance])


class SyncDirectoryReader:
    """
    Reads per-document artifacts written by the sync tool.

    Layout, one subdirectory per document id::

        <root>/<document_id>/metadata.json
        <root>/<document_id>/resume.md
        <root>/<document_id>/transcript.json
        <root>/<document_id>/transcript.md

    Blocking file I/O runs on a thread pool so callers on the event loop
    only suspend at file reads.
    """

    def __init__(self, root: Union[str, Path], executor: Optional[ThreadPoolExecutor] = None):
        self.root = Path(root)
        self._executor = executor

    async def _run(self, func: Callable[..., T], *args) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    def document_dir(self, document_id: str) -> Path:
        return self.root / document_id

    # Directory enumeration

    def _list_document_ids(self) -> List[str]:
        try:
            entries = list(self.root.iterdir())
        except OSError as e:
            raise SyncDirectoryError(
                f"Failed to load documents from {self.root}: {e}. "
                "Make sure documents have been synced first."
            ) from e
        return sorted(entry.name for entry in entries if entry.is_dir())

    async def list_document_ids(self) -> List[str]:
        """
        List document ids (immediate subdirectory names).

        Raises:
            SyncDirectoryError: If the root cannot be enumerated
        """
        return await self._run(self._list_document_ids)

    # Metadata

    def _read_metadata(self, document_id: str) -> Optional[DocumentMetadata]:
        path = self.document_dir(document_id) / METADATA_FILE
        if not path.is_file():
            return None
        try:
            content = path.read_text(encoding="utf-8")
            return DocumentMetadata.model_validate_json(content)
        except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
            raise MetadataParseError(f"Malformed metadata for {document_id}: {e}") from e

    async def read_metadata(self, document_id: str) -> Optional[DocumentMetadata]:
        """
        Read and validate a document's metadata record.

        Returns:
            Parsed metadata, or None when the file does not exist

        Raises:
            MetadataParseError: If the file exists but is malformed
        """
        return await self._run(self._read_metadata, document_id)

    # Lazily loaded content

    def _read_text(self, document_id: str, filename: str) -> Optional[str]:
        path = self.document_dir(document_id) / filename
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Error loading {filename} for {document_id}: {e}")
            return None

    def _read_transcript(self, document_id: str) -> Optional[List[Utterance]]:
        content = self._read_text(document_id, TRANSCRIPT_FILE)
        if content is None:
            return None
        try:
            return _UTTERANCES.validate_json(content)
        except PydanticValidationError as e:
            logger.warning(f"Error loading transcript for {document_id}: {e}")
            return None

    async def read_transcript(self, document_id: str) -> Optional[List[Utterance]]:
        """Structured transcript utterances, or None if absent or unreadable."""
        return await self._run(self._read_transcript, document_id)

    async def read_transcript_markdown(self, document_id: str) -> Optional[str]:
        """Rendered transcript, or None if absent or unreadable."""
        return await self._run(self._read_text, document_id, TRANSCRIPT_MARKDOWN_FILE)

    async def read_notes(self, document_id: str) -> Optional[str]:
        """Rendered notes, or None if absent or unreadable."""
        return await self._run(self._read_text, document_id, NOTES_FILE)
