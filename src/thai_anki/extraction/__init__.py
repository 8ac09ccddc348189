"""
Document text extraction (PDF and DOCX).
"""

from .documents import (
    FILE_TYPE_DOCX,
    FILE_TYPE_PDF,
    SUPPORTED_FILE_TYPES,
    check_file_type,
    extract_text,
    file_type_for,
    read_docx_text,
    read_pdf_text,
)

__all__ = [
    "FILE_TYPE_DOCX",
    "FILE_TYPE_PDF",
    "SUPPORTED_FILE_TYPES",
    "check_file_type",
    "extract_text",
    "file_type_for",
    "read_docx_text",
    "read_pdf_text",
]
