"""Identifier and file-name helpers for policy versions."""

import re
from typing import Iterable

DEFAULT_UPLOAD_NAME = "upload.bin"


def version_id_for(document_id: str, version: int) -> str:
    """Derive the version id from its document id and version number.

    Example:
        >>> version_id_for("POL-0001", 3)
        'pol-POL-0001-v3'
    """
    return f"pol-{document_id}-v{version}"


def normalize_file_key(name: str) -> str:
    """Case-insensitive comparison key for attachment names"""
    return (name or "").strip().lower()


def sanitize_file_name(raw: str) -> str:
    """Strip directory components and control characters from an upload name.

    Example:
        >>> sanitize_file_name("exports/2024/policy.pdf")
        'policy.pdf'
        >>> sanitize_file_name("   ")
        'upload.bin'
    """
    base = re.split(r"[/\\]", raw or "")[-1]
    cleaned = "".join(ch for ch in base if ord(ch) > 0x1F and ord(ch) != 0x7F)
    return cleaned.strip() or DEFAULT_UPLOAD_NAME


def suggest_document_id(existing_ids: Iterable[str], prefix: str = "POL") -> str:
    """Propose the next document id of the form <PREFIX>-NNNN.

    Best effort only: the candidate is derived from the ids visible at call
    time, so two concurrent callers can receive the same suggestion. The
    create_draft guards remain the source of truth.

    Example:
        >>> suggest_document_id(["POL-0001", "POL-0007", "HR-12"])
        'POL-0008'
    """
    ids = list(existing_ids)
    taken = {doc_id.upper() for doc_id in ids}
    pattern = re.compile(rf"^{re.escape(prefix)}-(\d+)$", re.IGNORECASE)

    highest = 0
    for doc_id in ids:
        match = pattern.match(doc_id)
        if match:
            highest = max(highest, int(match.group(1)))

    number = max(highest + 1, len(taken) + 1)
    candidate = f"{prefix}-{number:04d}"
    while candidate.upper() in taken:
        number += 1
        candidate = f"{prefix}-{number:04d}"
    return candidate
