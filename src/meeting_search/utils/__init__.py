"""Utility modules for meeting search."""

from .text_processing import TextProcessor
from .validators import validate_query, query_from_params
from .logging_config import setup_logging, StructuredLogger

__all__ = [
    "TextProcessor",
    "validate_query",
    "query_from_params",
    "setup_logging",
    "StructuredLogger",
]
