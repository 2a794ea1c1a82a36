"""
End-to-end flow: document -> model answer -> sanitized JSON -> records.
"""

import logging
from typing import Callable, Optional

from receipt_records.projector import ProjectionResult, project
from receipt_records.sanitizer import sanitize

logger = logging.getLogger(__name__)

TextFromDocument = Callable[..., str]


def extract_records(raw_text: str) -> ProjectionResult:
    """Sanitize a raw model answer and project it into records."""
    sanitized = sanitize(raw_text)
    logger.debug(f"Sanitized response ({len(sanitized)} chars): {sanitized[:200]}")

    result = project(sanitized)
    if result.is_empty:
        logger.warning("No invoices, products or customers extracted from response")
    return result


def process_document(
    path: str,
    mime_type: Optional[str] = None,
    text_fn: Optional[TextFromDocument] = None,
    display_name: Optional[str] = None,
) -> ProjectionResult:
    """
    Run a document through the generative service and project the answer.

    Errors raised by the service call propagate; only the answer's
    sanitize/project stage degrades to an empty result.
    """
    if text_fn is None:
        from receipt_records.gemini_client import text_from_document
        text_fn = text_from_document

    raw_text = text_fn(path, mime_type, display_name=display_name)
    return extract_records(raw_text)
