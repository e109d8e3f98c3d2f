"""
PDF upload validation and text extraction.
"""

import io
import logging
from typing import Any

from pypdf import PdfReader

from config import MAX_UPLOAD_BYTES, PDF_MIME_TYPE
from services.artifact_types import ExtractionFailedError, InputRejectedError

LOGGER = logging.getLogger("pdf_assistant.extract")


def join_pages(pages: list[list[str]]) -> str:
    """
    Join per-page text items into one string.

    Items on a page are separated by a single space; pages are concatenated
    in order with no separator between them.
    """
    return "".join(" ".join(items) for items in pages)


class PDFProcessor:
    """Validates uploads and extracts text from PDF files."""

    def validate_upload(self, name: str, mime_type: str, byte_size: int) -> None:
        """
        Check declared type and size before any bytes are parsed.

        Raises:
            InputRejectedError: If the file is not a PDF or is larger than 50MB.
        """
        if (mime_type or "").strip().lower() != PDF_MIME_TYPE:
            LOGGER.info("upload.rejected(name=%s, mime=%s)", name, mime_type)
            raise InputRejectedError("Please upload a valid PDF file.")
        if byte_size > MAX_UPLOAD_BYTES:
            LOGGER.info("upload.rejected(name=%s, size=%s)", name, byte_size)
            raise InputRejectedError("File size exceeds 50MB. Please upload a smaller PDF.")

    def _read_bytes(self, uploaded_file: Any) -> bytes:
        """Read raw bytes from a file-like object."""
        try:
            data = uploaded_file.read()
        except Exception as e:
            raise ExtractionFailedError("Failed to read the file.") from e

        if not data:
            raise ExtractionFailedError("File is empty and cannot be processed.")
        return data

    def _page_items(self, page: Any) -> list[str]:
        items: list[str] = []

        def visit(text: str, *_: Any) -> None:
            fragment = (text or "").strip()
            if fragment:
                items.append(fragment)

        page.extract_text(visitor_text=visit)
        return items

    def extract_page_items_from_bytes(self, data: bytes) -> list[list[str]]:
        """
        Extract the text items of every page from PDF bytes.

        Returns:
            One list of text fragments per page, in page order.

        Raises:
            ExtractionFailedError: If the data is empty or cannot be parsed.
        """
        if not data:
            raise ExtractionFailedError("File is empty and cannot be processed.")

        try:
            reader = PdfReader(io.BytesIO(data))
        except Exception as e:
            raise ExtractionFailedError("Failed to parse the PDF file.") from e

        pages: list[list[str]] = []
        try:
            for page in reader.pages:
                pages.append(self._page_items(page))
        except Exception as e:
            raise ExtractionFailedError("Failed to parse the PDF file.") from e

        LOGGER.info("extract.pages(count=%s)", len(pages))
        return pages

    def extract_text_from_bytes(self, data: bytes) -> str:
        """Extract the concatenated text of all pages from PDF bytes."""
        return join_pages(self.extract_page_items_from_bytes(data))

    def extract_text(self, uploaded_file: Any) -> str:
        """
        Read an uploaded file and extract text from all pages.

        Args:
            uploaded_file: A file-like object (e.g. Streamlit UploadedFile)
                with .read() returning bytes.

        Returns:
            Concatenated text from all pages.

        Raises:
            ExtractionFailedError: If the file is empty, corrupted, or cannot be read.
        """
        data = self._read_bytes(uploaded_file)
        return self.extract_text_from_bytes(data)
