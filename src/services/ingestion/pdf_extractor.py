"""Plain-text extraction from PDF files.

Reads PDF files using PyMuPDF (fitz) and returns the text of every page,
in document order, as a single blob.  Whitespace inside the blob is
whatever PyMuPDF produces; the chunker re-splits on whitespace anyway.
"""

from __future__ import annotations

import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import structlog

from src.utils.errors import ExtractionError

logger = structlog.get_logger(logger_name=__name__)


class PDFExtractor:
    """Extracts plain text from PDF files on disk."""

    def extract(self, file_path: str) -> str:
        """Return all extractable text of the PDF at *file_path*.

        Pages are joined with a newline.  A readable PDF without a text
        layer yields an empty string.

        Raises
        ------
        ExtractionError
            If the file is missing, empty, corrupt, not a PDF, encrypted,
            or a page fails to parse.
        """
        try:
            doc = fitz.open(file_path)
        except Exception as exc:
            logger.error("pdf_open_failed", file_path=file_path, error=str(exc))
            raise ExtractionError(
                message=f"failed to open PDF: {exc}",
                provider_name="pymupdf",
            ) from exc

        try:
            if not doc.is_pdf:
                raise ExtractionError(
                    message="file is not a PDF document",
                    provider_name="pymupdf",
                )
            if doc.needs_pass:
                raise ExtractionError(
                    message="PDF is encrypted and requires a password",
                    provider_name="pymupdf",
                )

            pages: list[str] = []
            for page_num in range(doc.page_count):
                try:
                    pages.append(doc[page_num].get_text("text"))
                except Exception as exc:
                    raise ExtractionError(
                        message=f"failed to read text of page {page_num + 1}: {exc}",
                        provider_name="pymupdf",
                    ) from exc
        finally:
            doc.close()

        text = "\n".join(pages)
        logger.info(
            "pdf_extracted",
            file_path=file_path,
            pages=len(pages),
            characters=len(text),
        )
        if not text.strip():
            logger.warning("pdf_no_text_extracted", file_path=file_path)
        return text
