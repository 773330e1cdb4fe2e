"""Plain-text extraction from uploaded résumé documents."""

import io
import logging
from pathlib import PurePath

import pdfplumber
from bs4 import BeautifulSoup
from docx import Document

from errors import ExtractionError, UnsupportedFormatError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".html", ".htm")


def extract_text_pdf(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF file."""
    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages).strip()


def extract_text_docx(docx_bytes: bytes) -> str:
    """Extract all text from a DOCX file."""
    doc = Document(io.BytesIO(docx_bytes))
    return "\n".join(p.text for p in doc.paragraphs).strip()


def extract_text_html(html_bytes: bytes) -> str:
    """Extract visible text from an HTML page, one block per line."""
    soup = BeautifulSoup(html_bytes.decode("utf-8", errors="replace"), "lxml")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    lines = (line.strip() for line in soup.get_text(separator="\n").splitlines())
    return "\n".join(line for line in lines if line)


_EXTRACTORS = {
    ".pdf": extract_text_pdf,
    ".docx": extract_text_docx,
    ".html": extract_text_html,
    ".htm": extract_text_html,
}


def extract_text(content: bytes, filename: str) -> str:
    """Extract text from a document, choosing the parser from the file extension.

    Raises ``UnsupportedFormatError`` for unknown extensions and
    ``ExtractionError`` when the file cannot be parsed or holds no text.
    """
    extension = PurePath(filename or "").suffix.lower()
    extractor = _EXTRACTORS.get(extension)
    if extractor is None:
        raise UnsupportedFormatError(
            f"Unsupported file format: {extension or 'none'}",
            details={"supported": list(SUPPORTED_EXTENSIONS), "filename": filename},
        )

    try:
        text = extractor(content)
    except Exception as e:
        logger.warning("Could not parse %s: %s", filename, e)
        raise ExtractionError(f"Could not parse {extension[1:].upper()} file", details={"filename": filename}) from e

    if not text.strip():
        raise ExtractionError("No text could be extracted from the document", details={"filename": filename})
    return text
