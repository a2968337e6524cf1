"""
PDF text extraction

Best-effort: callers always get a string back, with a placeholder in place
of text when the document cannot be read.
"""

import io
from typing import Optional

import structlog
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from debatica.features.inputs import UNEXTRACTED_PLACEHOLDER

logger = structlog.get_logger(__name__)

EMPTY_PDF_PLACEHOLDER = "PDF appears to be empty or contains no extractable text"

PDF_CONTENT_TYPE = "application/pdf"
_GENERIC_CONTENT_TYPES = {None, "", "application/octet-stream"}


def is_pdf(content_type: Optional[str], filename: Optional[str] = None) -> bool:
    """Check the MIME type, or the file suffix when the MIME type is generic"""
    if content_type == PDF_CONTENT_TYPE:
        return True
    if content_type in _GENERIC_CONTENT_TYPES and filename:
        return filename.lower().endswith(".pdf")
    return False


def extract_pdf_text(data: bytes) -> str:
    """Return the text of every page joined by newlines"""
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PyPdfError, ValueError, KeyError, TypeError, OSError) as e:
        logger.warning("PDF parsing failed", error=str(e), size=len(data))
        return UNEXTRACTED_PLACEHOLDER

    text = "\n".join(pages).strip()
    if not text:
        return EMPTY_PDF_PLACEHOLDER

    logger.debug("PDF parsed", pages=len(pages), chars=len(text))
    return text
