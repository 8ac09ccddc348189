"""
Raw text extraction from PDF and DOCX documents.

Dispatch is by filename suffix:
    - pdf  -> PyPDF2
    - docx -> Docling
Any other suffix is rejected before the file is touched.
"""
from __future__ import annotations

import logging
from pathlib import Path

import PyPDF2

from thai_anki.common.errors import ExtractionError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)

FILE_TYPE_PDF = "pdf"
FILE_TYPE_DOCX = "docx"
SUPPORTED_FILE_TYPES = (FILE_TYPE_PDF, FILE_TYPE_DOCX)


def file_type_for(path: str | Path) -> str:
    """Lower-cased text after the last dot of the filename ('' when there is none)."""
    name = Path(path).name
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def check_file_type(path: str | Path) -> str:
    """Return the file type of a supported document or raise UnsupportedFileTypeError."""
    file_type = file_type_for(path)
    if file_type not in SUPPORTED_FILE_TYPES:
        raise UnsupportedFileTypeError(file_type)
    return file_type


def read_pdf_text(file_path: Path) -> str:
    """
    Extract text from every page of a PDF file.

    Args:
        file_path (Path): Path to the PDF file

    Returns:
        str: Page texts joined with newlines

    Raises:
        ExtractionError: If the file cannot be opened or parsed
    """
    try:
        with open(file_path, "rb") as file:
            pdf_reader = PyPDF2.PdfReader(file)
            total_pages = len(pdf_reader.pages)
            logger.info("Reading PDF", extra={"path": str(file_path), "pages": total_pages})

            page_texts = []
            for page_num, page in enumerate(pdf_reader.pages, 1):
                page_text = page.extract_text()
                logger.debug("Extracted page", extra={"page": page_num, "chars": len(page_text or "")})
                if page_text:
                    page_texts.append(page_text)
    except Exception as e:
        raise ExtractionError(f"Error reading PDF file {file_path}: {e}") from e
    return "\n".join(page_texts)


def read_docx_text(file_path: Path) -> str:
    """
    Extract plain text from a DOCX file with Docling.

    Raises:
        ExtractionError: If Docling is unavailable or the conversion fails
    """
    # Import lazily so general imports don't pay for docling unless a DOCX is processed.
    try:
        from docling.document_converter import DocumentConverter  # type: ignore
    except Exception as e:  # pragma: no cover - import-time issues
        raise ExtractionError("Failed to import 'docling'. Please install project dependencies.") from e

    logger.info("Reading DOCX", extra={"path": str(file_path)})
    converter = DocumentConverter()
    try:
        result = converter.convert(str(file_path))
    except Exception as e:
        raise ExtractionError(f"Docling conversion failed for {file_path}: {e}") from e

    try:
        return result.document.export_to_text()
    except Exception as e:
        raise ExtractionError(f"Failed to export text from {file_path}: {e}") from e


def extract_text(path: str | Path) -> str:
    """
    Extract raw text from a supported document.

    Raises:
        UnsupportedFileTypeError: Suffix is neither pdf nor docx
        ExtractionError: The file is missing or cannot be read
    """
    file_type = check_file_type(path)

    file_path = Path(path)
    if not file_path.is_file():
        raise ExtractionError(f"File '{file_path}' does not exist.")

    if file_type == FILE_TYPE_PDF:
        return read_pdf_text(file_path)
    return read_docx_text(file_path)
