"""
Generative service adapter: upload a document to Gemini and return its answer.

The answer is free-form text that is *supposed* to contain a JSON object;
turning it into records is the job of `sanitizer` and `projector`.
"""

import logging
import mimetypes
from pathlib import Path
from typing import Optional

from google import genai
from google.genai import types

from receipt_records.config import Settings, load_settings

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """You are a specialist in comprehending receipts and documents. You will receive input files in the form of images, PDFs, or Excel files. Extract the invoice, product and customer details and return them as a single JSON object with these keys:

{
    "invoice_number": "string",
    "invoice_date": "string",
    "customer": {"name": "string"},
    "total": {"amount": number},
    "items": [
        {"description": "string", "quantity": number, "rate": number, "gst": number, "amount": number}
    ]
}

Omit a key when the document does not contain it."""


class GeminiConfigError(RuntimeError):
    """No API key is available for the generative service."""


def build_client(settings: Settings) -> genai.Client:
    if not settings.api_key:
        raise GeminiConfigError(
            "Google API key required. Set GOOGLE_API_KEY environment variable."
        )
    return genai.Client(api_key=settings.api_key)


def _guess_mime_type(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or "application/octet-stream"


def text_from_document(
    path: str,
    mime_type: Optional[str] = None,
    *,
    display_name: Optional[str] = None,
    client: Optional[genai.Client] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Send a receipt or invoice to Gemini and return the raw answer text.

    Args:
        path: Local path of the uploaded document.
        mime_type: MIME type of the document; guessed from the name if omitted.
        display_name: Name shown in the Files API; defaults to the file name.
        client: Pre-built genai client (tests inject a fake one).
        settings: Settings to use; loaded from the environment if omitted.

    Returns:
        The model's answer as text (may be empty).
    """
    settings = settings or load_settings()
    client = client or build_client(settings)
    file_path = Path(path)
    mime_type = mime_type or _guess_mime_type(file_path)

    uploaded = client.files.upload(
        file=str(file_path),
        config=types.UploadFileConfig(
            mime_type=mime_type,
            display_name=display_name or file_path.name,
        ),
    )

    response = client.models.generate_content(
        model=settings.model_name,
        contents=[uploaded, EXTRACTION_PROMPT],
    )
    text = response.text or ""
    logger.info(f"Gemini API response for {file_path.name}: {text}")
    return text
