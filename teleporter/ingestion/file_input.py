"""
Source-file loading for the console's analysis stage.

Architectural role:
- Convert a file reference (local path or `data:` URL) into a `SourceFile`.
- Enforce size/extension constraints before anything reaches a provider.
- Pre-extract text for document kinds so adapters only ever see text or images.

Processing lifecycle:
1. Resolve the reference (`data:` URL decoded in memory, or a local path).
2. Validate size and extension.
3. Detect the MIME type.
4. Extract text for PDF/DOCX/CSV; keep raw bytes for images and plain text.

Error handling strategy:
- Every violation raises `FileInputError`; nothing is written to disk.
"""

import io
import os
import base64
import binascii
import mimetypes
import logging
from urllib.parse import unquote_to_bytes

import pdfplumber
import pandas as pd
import docx

from teleporter.config import MAX_FILE_SIZE_MB
from teleporter.providers.types import SourceFile, TeleporterError


logger = logging.getLogger(__name__)


# ============================================================
# CONFIG
# ============================================================

MAX_FILE_SIZE_BYTES = int(MAX_FILE_SIZE_MB * 1024 * 1024)
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".gif"}
TEXT_EXTENSIONS = {".txt", ".md", ".csv", ".json"}
DOCUMENT_EXTENSIONS = {".pdf", ".docx"}
ALLOWED_EXTENSIONS = IMAGE_EXTENSIONS | TEXT_EXTENSIONS | DOCUMENT_EXTENSIONS

MIME_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "text/plain": ".txt",
    "text/markdown": ".md",
    "text/csv": ".csv",
    "application/json": ".json",
    "application/pdf": ".pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
}

CSV_PREVIEW_ROWS = 20


class FileInputError(TeleporterError):
    """The file reference could not be loaded or violates input constraints."""


# ============================================================
# PUBLIC ENTRYPOINTS
# ============================================================

def load_source_file(file_ref: str, filename: str | None = None) -> SourceFile:
    """Load a path or `data:` URL into a validated `SourceFile`.

    Args:
        file_ref: Local filesystem path or `data:` URL (base64 or percent-encoded).
        filename: Display name override (used for data URLs).
    """
    if not file_ref:
        raise FileInputError("No file provided")

    if file_ref.startswith("data:"):
        return load_data_url(file_ref, filename)

    return load_path(file_ref)


def load_path(path: str) -> SourceFile:
    normalized = _normalize_path(path)
    if not normalized or not os.path.isfile(normalized):
        raise FileInputError("File does not exist")

    if os.path.getsize(normalized) > MAX_FILE_SIZE_BYTES:
        raise FileInputError("File exceeds max size limit")

    name = os.path.basename(normalized)
    ext = _validate_extension(name)

    with open(normalized, "rb") as f:
        data = f.read()

    return build_source_file(name, _guess_mime(name, ext), data)


def load_data_url(data_url: str, filename: str | None = None) -> SourceFile:
    """Decode a data URL in memory.

    Base64 payloads are strictly validated; plain payloads are percent-decoded.
    Applies an approximate decoded-size check before decoding.
    """
    try:
        header, encoded = data_url.split(",", 1)
    except ValueError:
        raise FileInputError("Malformed data URL")

    params = [p.strip().lower() for p in header[len("data:"):].split(";")]
    is_base64 = "base64" in params[1:]

    if is_base64:
        padding = 0
        if encoded.endswith("=="):
            padding = 2
        elif encoded.endswith("="):
            padding = 1
        approx_decoded_size = (len(encoded) * 3) // 4 - padding
    else:
        approx_decoded_size = len(encoded)
    if approx_decoded_size > MAX_FILE_SIZE_BYTES:
        raise FileInputError("File exceeds max size limit")

    mime_type = params[0] or "application/octet-stream"

    if filename:
        name = filename
    else:
        name = "upload" + MIME_EXTENSIONS.get(mime_type, "")

    ext = _validate_extension(name)
    if mime_type == "application/octet-stream":
        mime_type = _guess_mime(name, ext)

    if is_base64:
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            raise FileInputError("Malformed base64 payload")
    else:
        data = unquote_to_bytes(encoded)

    return build_source_file(name, mime_type, data)


def build_source_file(name: str, mime_type: str, data: bytes) -> SourceFile:
    """Wrap raw bytes, pre-extracting text for document kinds."""
    _, ext = os.path.splitext(name)
    ext = ext.lower()

    if mime_type.startswith("image/"):
        return SourceFile(name=name, mime_type=mime_type, data=data)

    try:
        text = _extract_text(ext, data)
    except FileInputError:
        raise
    except Exception as err:
        logger.exception("Text extraction failed for %s", name)
        raise FileInputError(f"Could not read {ext or 'file'} content") from err

    return SourceFile(name=name, mime_type=mime_type, data=data, text=text)


# ============================================================
# VALIDATION
# ============================================================

def _normalize_path(path: str) -> str | None:
    """Expand and canonicalize a path; return `None` for empty input."""
    if not path:
        return None
    expanded = os.path.expanduser(path)
    return os.path.realpath(expanded)


def _validate_extension(name: str) -> str:
    _, ext = os.path.splitext(name)
    ext = ext.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise FileInputError("Unsupported file type")
    return ext


def _guess_mime(name: str, ext: str) -> str:
    if ext == ".md":
        return "text/markdown"
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type or "application/octet-stream"


# ============================================================
# EXTRACTION ROUTER
# ============================================================

def _extract_text(ext: str, data: bytes) -> str | None:
    """Return extracted text for document kinds, `None` when bytes are text."""
    if ext == ".pdf":
        return _extract_pdf(data)

    if ext == ".docx":
        return _extract_docx(data)

    if ext == ".csv":
        return _extract_csv(data)

    return None


def _extract_pdf(data: bytes) -> str:
    """Extract text from each PDF page and concatenate with newlines."""
    text = []

    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            text.append(page.extract_text() or "")

    return "\n".join(text)


def _extract_docx(data: bytes) -> str:
    """Extract paragraph text from a DOCX document."""
    doc = docx.Document(io.BytesIO(data))
    return "\n".join(p.text for p in doc.paragraphs)


def _extract_csv(data: bytes) -> str:
    """Load CSV into a dataframe and serialize the first rows."""
    df = pd.read_csv(io.BytesIO(data))
    return df.head(CSV_PREVIEW_ROWS).to_string()
