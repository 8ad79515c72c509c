# whisperer/core/file_text.py
import logging
import os
from io import BytesIO

import PyPDF2
from tokencost import count_string_tokens

logger = logging.getLogger(__name__)

TOKEN_COUNT_MODEL = "gpt-4o"

TEXT_EXTENSIONS = {
    ".txt", ".md", ".markdown", ".csv", ".json", ".fountain", ".fdx",
    ".py", ".js", ".ts", ".html", ".xml",
}


def detect_file_type(filename: str, content_type: str = None) -> str:
    """
    Simple helper to classify an upload by extension, falling back to the
    declared content type.
    """
    ext = os.path.splitext(filename)[1].lower()
    if ext == ".pdf":
        return "pdf"
    if ext in (".md", ".markdown"):
        return "markdown"
    if ext == ".csv":
        return "csv"
    if ext == ".docx":
        return "docx"
    if ext in TEXT_EXTENSIONS:
        return "text"
    if ext in (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"):
        return "image"
    if content_type and content_type.startswith("text/"):
        return "text"
    return content_type or "other"


def extract_text(filename: str, data: bytes) -> str:
    """
    Returns the readable text of an upload, or "" when the type carries none.
    A PDF that fails to parse yields "[Error parsing PDF]".
    """
    file_type = detect_file_type(filename)
    if file_type == "pdf":
        try:
            reader = PyPDF2.PdfReader(BytesIO(data))
            pdf_text = ""
            for page in reader.pages:
                text = page.extract_text()
                if text:
                    pdf_text += text
            return pdf_text
        except Exception:
            logger.exception("Failed to parse PDF %s", filename)
            return "[Error parsing PDF]"
    if file_type in ("text", "markdown", "csv"):
        return data.decode("utf-8", errors="replace")
    return ""


def count_tokens(text: str) -> int:
    if not text:
        return 0
    return count_string_tokens(text, TOKEN_COUNT_MODEL)


def pdf_page_count(data: bytes):
    try:
        return len(PyPDF2.PdfReader(BytesIO(data)).pages)
    except Exception:
        logger.warning("Could not read page count from PDF")
        return None
