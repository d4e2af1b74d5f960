"""Logging configuration for the meeting search system."""

import logging
import sys
from typing import Any, Dict, Optional


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    include_timestamp: bool = True
) -> None:
    """
    Set up logging for the meeting search system.

    Log output goes to stderr so stdout stays free for tool transports.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        include_timestamp: Whether to include timestamps
    """
    if format_string is None:
        if include_timestamp:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_string = "%(name)s - %(levelname)s - %(message)s"

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=format_string,
        stream=sys.stderr,
        force=True
    )

    logging.getLogger("meeting_search").setLevel(numeric_level)

    # Reduce noise from asyncio debug output
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {level}")


class StructuredLogger:
    """Structured logger with context support."""

    def __init__(self, name: str):
        """Initialize structured logger."""
        self.logger = logging.getLogger(name)
        self.context: Dict[str, Any] = {}

    def with_context(self, **kwargs) -> 'StructuredLogger':
        """Add context to logger."""
        new_logger = StructuredLogger(self.logger.name)
        new_logger.context = {**self.context, **kwargs}
        return new_logger

    def for_document(self, document_id: str) -> 'StructuredLogger':
        """Logger scoped to one synced document directory."""
        return self.with_context(document_id=document_id)

    @staticmethod
    def _format_value(value: Any) -> str:
        # Directory names may be blank or contain spaces
        text = str(value)
        if not text.strip() or any(ch.isspace() for ch in text):
            return repr(text)
        return text

    def _format_message(self, message: str) -> str:
        """Format message with context."""
        if not self.context:
            return message

        context_str = " ".join(
            f"{k}={self._format_value(v)}" for k, v in self.context.items()
        )
        return f"{message} [{context_str}]"

    def info(self, message: str) -> None:
        self.logger.info(self._format_message(message))

    def warning(self, message: str) -> None:
        self.logger.warning(self._format_message(message))
