"""check_document_format.py
Normalizes the declared format of a document (extension or MIME type) and
confirms that it's supported by the CV extractor.
"""
from typing import Iterable

from cv_autofill.exceptions import UnsupportedFormatError

MIME_TYPE_FORMATS = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "text/plain": "txt",
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/tiff": "tiff",
    "image/tif": "tif",
    "image/bmp": "bmp",
}


def check_document_format(declared_format: str, supported_formats: Iterable[str]) -> str:
    """
    Validate and return the canonical lowercase format for a declared format.

    Accepts extensions with or without a leading dot (".PDF", "pdf"), file
    names ("cv.v2.docx") and MIME types ("application/pdf"). The bytes of the
    document are never inspected; classification is the caller's concern.

    Args:
        declared_format (str): Format discriminant provided by the caller.
        supported_formats (Iterable[str]): Canonical formats without dots.

    Returns:
        str: The matching canonical format, e.g. "pdf".

    Raises:
        UnsupportedFormatError: If the declared format is not supported.
    """
    supported_formats = list(supported_formats)
    candidate = (declared_format or "").strip().lower()

    # MIME types (ignore parameters like "; charset=utf-8")
    mime_type = candidate.split(";")[0].strip()
    if mime_type in MIME_TYPE_FORMATS:
        candidate = MIME_TYPE_FORMATS[mime_type]

    # Try to match the longest supported extension at the end of the name
    for fmt in sorted(supported_formats, key=len, reverse=True):
        if candidate == fmt or candidate.endswith(f".{fmt}"):
            return fmt

    raise UnsupportedFormatError(
        declared_format=declared_format,
        supported_formats=supported_formats,
        context="Failed in check_document_format() call."
    )
