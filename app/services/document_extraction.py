import logging
import os
import tempfile
from typing import Callable, Dict

from docx import Document as DocxDocument
from pypdf import PdfReader

from app.core.config import settings
from app.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)


def _extract_pdf(path: str) -> str:
    reader = PdfReader(path)
    parts = []
    # only the first pages; long documents would stall the request
    for page in reader.pages[: settings.PDF_PAGE_LIMIT]:
        page_text = page.extract_text()
        if not page_text:
            continue
        parts.append(page_text + "\n")
    return "".join(parts)


def _extract_docx(path: str) -> str:
    doc = DocxDocument(path)
    return "\n".join(p.text for p in doc.paragraphs)


def _extract_txt(path: str) -> str:
    with open(path, "rb") as fh:
        return fh.read().decode("utf-8", errors="replace")


EXTRACTORS: Dict[str, Callable[[str], str]] = {
    ".pdf": _extract_pdf,
    ".docx": _extract_docx,
    ".txt": _extract_txt,
}


def placeholder_text(filename: str) -> str:
    return f"File uploaded: {filename}. Please describe the content or topic for the quiz."


def extract_text(filename: str, data: bytes) -> str:
    """Return the plain text of an uploaded document.

    The upload is written to a scratch file in ``UPLOAD_DIR`` for the parser
    and removed afterwards whatever happens. Unsupported extensions get a
    placeholder sentence naming the file instead of an error.
    """
    ext = os.path.splitext(filename or "")[1].lower()
    extractor = EXTRACTORS.get(ext)
    if extractor is None:
        return placeholder_text(filename)

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    fd, path = tempfile.mkstemp(suffix=ext, dir=settings.UPLOAD_DIR)
    try:
        with os.fdopen(fd, "wb") as out:
            out.write(data)
        try:
            return extractor(path)
        except Exception as exc:
            logger.warning("Failed to extract text from %s: %s", filename, exc)
            raise ExtractionError(str(exc) or exc.__class__.__name__) from exc
    finally:
        os.remove(path)
