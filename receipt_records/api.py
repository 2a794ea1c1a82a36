"""
FastAPI endpoints for receipt/invoice record extraction.
"""

import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from receipt_records import pipeline
from receipt_records.config import load_settings
from receipt_records.projector import ProjectionResult

logger = logging.getLogger(__name__)

settings = load_settings()
logging.basicConfig(level=settings.log_level)

app = FastAPI(title="Receipt Records API", version="1.0.0")

# Allow cross-origin requests so a browser front end can call this API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class RawTextRequest(BaseModel):
    text: str


def _records_payload(result: ProjectionResult) -> Dict[str, Any]:
    return {'status': 'success', **result.to_dict()}


@app.get("/health")
async def health() -> Dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Dictionary with status "ok"
    """
    return {"status": "ok"}


@app.post("/parse-text")
async def parse_text(request: RawTextRequest) -> Dict[str, Any]:
    """
    Project an already obtained model answer into records.

    Args:
        request: Body with the raw answer text.

    Returns:
        Dictionary with status and the invoices, products and customers lists.
    """
    result = pipeline.extract_records(request.text)
    return _records_payload(result)


@app.post("/upload")
async def upload(file: Optional[UploadFile] = File(None)) -> Dict[str, Any]:
    """
    Extract invoice, product and customer records from one uploaded document.

    Args:
        file: Image, PDF or spreadsheet containing a receipt or invoice.

    Returns:
        Dictionary with status and the invoices, products and customers lists.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded.")

    if not settings.is_allowed(file.filename):
        raise HTTPException(
            status_code=400,
            detail=f"File '{file.filename}' has an unsupported type"
        )

    content = await file.read()

    # Enforce upload size
    if len(content) > settings.max_upload_size:
        raise HTTPException(
            status_code=413,
            detail=f"File '{file.filename}' exceeds maximum size of {settings.max_upload_size} bytes"
        )

    suffix = Path(file.filename).suffix
    temp_file_path = None
    try:
        with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as temp_file:
            temp_file_path = temp_file.name
            temp_file.write(content)
            temp_file.flush()

        result = pipeline.process_document(
            temp_file_path,
            file.content_type,
            display_name=file.filename,
        )
        return _records_payload(result)

    except Exception:
        logger.exception(f"Error processing file {file.filename}")
        raise HTTPException(status_code=500, detail="Failed to process file.")

    finally:
        if temp_file_path:
            Path(temp_file_path).unlink(missing_ok=True)
