"""Read recognized W-2 text from files.

OCR itself is out of scope: callers hand us text they already recognized,
or a PDF with a text layer. PDF pages are joined with a blank line, the
same separator expected for multi-page OCR output.
"""

import logging
from pathlib import Path

import PyPDF2
from PyPDF2.errors import PdfReadError

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {"", ".txt", ".text"}
PAGE_SEPARATOR = "\n\n"


class SourceReadError(Exception):
    """Raised when a source file is missing or not a supported type."""
    pass


def extract_text_from_pdf(pdf_path: Path) -> str:
    """Extract the text layer of every page, joined with a blank line."""
    pages = []
    with open(pdf_path, "rb") as f:
        try:
            reader = PyPDF2.PdfReader(f)
            for page_number, page in enumerate(reader.pages, start=1):
                page_text = page.extract_text() or ""
                if not page_text.strip():
                    logger.warning(f"{pdf_path.name} (page {page_number}): no text layer, run OCR first")
                pages.append(page_text)
        except PdfReadError as e:
            raise SourceReadError(f"Cannot read PDF {pdf_path.name}: {e}") from e
    return PAGE_SEPARATOR.join(pages)


def read_source_text(path: Path) -> str:
    """Read recognized text from a .txt file or a text-layer PDF.

    Raises:
        SourceReadError: If the file is missing or has an unsupported extension
    """
    path = Path(path)
    if not path.is_file():
        raise SourceReadError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".pdf":
        logger.debug(f"reading PDF text layer: {path.name}")
        return extract_text_from_pdf(path)
    if suffix in TEXT_SUFFIXES:
        # OCR output may carry stray bytes; keep the readable text around them
        return path.read_text(encoding="utf-8", errors="replace")

    raise SourceReadError(
        f"Unsupported file type '{suffix}' for {path.name}: "
        "expected recognized text (.txt) or a PDF with a text layer"
    )
