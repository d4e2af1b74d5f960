"""Text processing utilities for meeting titles, notes and transcripts."""

import re
from typing import Iterable, List, Optional

from ..models.document import Utterance

_NON_WORD = re.compile(r'[^\w]+')

ELLIPSIS = "..."


class TextProcessor:
    """Text processing utilities shared by indexing and search."""

    def __init__(self, snippet_length: int = 200):
        """Initialize text processor."""
        self.snippet_length = snippet_length

    def tokenize(self, text: Optional[str]) -> List[str]:
        """
        Split text into lowercase word tokens.

        Any run of non-word characters separates tokens; empty tokens
        are discarded.

        Args:
            text: Raw text (e.g. a document title)

        Returns:
            Tokens in order of appearance
        """
        if not text:
            return []
        return [token for token in _NON_WORD.split(text.lower()) if token]

    def make_snippet(self, text: Optional[str]) -> Optional[str]:
        """
        Build a preview from the start of a rendered note.

        Args:
            text: Rendered notes (Markdown)

        Returns:
            First characters of the note, trimmed, with an ellipsis
            appended when the note was truncated; None for empty notes
        """
        if not text:
            return None
        snippet = text[:self.snippet_length].strip()
        if len(text) > self.snippet_length:
            snippet += ELLIPSIS
        return snippet

    def transcript_text(self, utterances: Iterable[Utterance]) -> str:
        """Join utterance texts into one lowercase searchable string."""
        return " ".join(u.text for u in utterances if u.text).lower()

    def contains(self, haystack: str, needle: str) -> bool:
        """Case-insensitive substring test."""
        return needle.lower() in haystack.lower()
