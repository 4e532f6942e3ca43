# worldforge/services/upload_validation.py
"""
Screening of uploaded files before they reach object storage.
"""
from dataclasses import dataclass, field
from typing import List
import logging
import re

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    # Images
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    # Documents
    "application/pdf",
    "text/plain",
    "text/markdown",
    "application/json",
    # Archives
    "application/zip",
    "application/x-zip-compressed",
}

DANGEROUS_EXTENSIONS = {
    ".exe", ".bat", ".cmd", ".com", ".scr", ".pif",
    ".js", ".jar", ".vbs", ".ps1", ".sh", ".php",
    ".asp", ".jsp", ".py", ".rb", ".pl", ".cgi",
}

MB = 1024 * 1024
MAX_FILE_SIZES = {
    "image": 10 * MB,
    "document": 25 * MB,
    "archive": 50 * MB,
    "default": 5 * MB,
}

MALICIOUS_SIGNATURES = [
    (b"MZ", "PE executable (Windows)"),
    (b"\x7fELF", "ELF executable (Linux)"),
    (b"\xfe\xed\xfa\xce", "Mach-O executable (macOS)"),
    (b"\xfe\xed\xfa\xcf", "Mach-O executable (macOS 64-bit)"),
    (b"#!", "Shell script"),
]

PDF_SIGNATURE = b"%PDF"


@dataclass
class FileValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    sanitized_name: str = ""
    detected_type: str = ""


def sanitize_upload_name(filename: str) -> str:
    """Strip path separators, control characters and leading/trailing dots."""
    cleaned = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "", filename)
    cleaned = re.sub(r"^\.+", "", cleaned)
    cleaned = re.sub(r"\.+$", "", cleaned)
    return cleaned[:255]


def file_extension(filename: str) -> str:
    dot = filename.rfind(".")
    return "" if dot == -1 else filename[dot:].lower()


def detect_file_type(mime_type: str) -> str:
    if mime_type.startswith("image/"):
        return "image"
    if mime_type.startswith("text/") or mime_type == "application/pdf":
        return "document"
    if "zip" in mime_type:
        return "archive"
    return "other"


def max_file_size(mime_type: str) -> int:
    kind = detect_file_type(mime_type)
    return MAX_FILE_SIZES.get(kind, MAX_FILE_SIZES["default"])


def format_file_size(size: int) -> str:
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.2f} {unit}"
        size /= 1024
    return f"{size:.2f} GB"


def validate_upload(filename: str, content_type: str, content: bytes) -> FileValidationResult:
    """
    Screen a file by name, declared type, size and leading bytes.
    """
    errors: List[str] = []
    warnings: List[str] = []
    mime_type = content_type or "application/octet-stream"

    sanitized = sanitize_upload_name(filename or "")
    if sanitized != filename:
        warnings.append("Filename was sanitized for security")

    extension = file_extension(filename or "")
    if extension in DANGEROUS_EXTENSIONS:
        errors.append(f"File extension '{extension}' is not allowed for security reasons")

    if mime_type not in ALLOWED_MIME_TYPES:
        errors.append(f"File type '{mime_type}' is not allowed")

    limit = max_file_size(mime_type)
    if len(content) > limit:
        errors.append(f"File size ({format_file_size(len(content))}) exceeds limit ({format_file_size(limit)})")

    head = content[:1024]
    for signature, description in MALICIOUS_SIGNATURES:
        if head.startswith(signature):
            errors.append(f"Potentially malicious file detected: {description}")

    if mime_type.startswith("image/") and len(head) < 10:
        errors.append("Invalid image file: too small")
    elif mime_type == "application/pdf" and not head.startswith(PDF_SIGNATURE):
        errors.append("Invalid PDF file: missing PDF signature")

    result = FileValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        sanitized_name=sanitized,
        detected_type=detect_file_type(mime_type),
    )
    if not result.is_valid:
        logger.warning(f"Rejected upload {sanitized!r} ({mime_type}): {errors}")
    return result
