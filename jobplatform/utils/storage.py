"""
Local blob storage for uploaded files.

Files are written under ``config.UPLOAD_DIR`` and referenced everywhere by a
root-relative path (``/uploads/<name>``) that the static mount in ``main``
serves back.
"""

import logging
import re
import time
from pathlib import Path
from typing import Iterable, Optional

from fastapi import HTTPException, UploadFile

from jobplatform import config

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"

IMAGE_TYPES = {"image/jpeg", "image/png", "image/jpg", "image/webp"}
DOCUMENT_TYPES = IMAGE_TYPES | {"application/pdf"}
RESUME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def clean_filename(filename: str) -> str:
    path = Path(filename or "file")
    base = re.sub(r"\s+", "_", path.stem) or "file"
    base = re.sub(r"[^\w\-.]", "", base) or "file"
    return f"{int(time.time() * 1000)}-{base}{path.suffix.lower()}"


def get_upload_dir() -> Path:
    upload_dir = Path(config.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


async def save_upload(
    file: Optional[UploadFile],
    allowed_types: Optional[Iterable[str]] = None,
    max_mb: Optional[int] = None,
) -> str:
    """Store an uploaded file and return its root-relative URL."""
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    if allowed_types is not None and file.content_type not in set(allowed_types):
        raise HTTPException(status_code=400, detail=f"File type {file.content_type} not allowed")

    contents = await file.read()
    limit_mb = max_mb or config.MAX_UPLOAD_MB
    if len(contents) > limit_mb * 1024 * 1024:
        raise HTTPException(status_code=400, detail=f"File size exceeds {limit_mb}MB limit")

    name = clean_filename(file.filename)
    target = get_upload_dir() / name
    try:
        target.write_bytes(contents)
    except OSError as e:
        logger.exception("Could not store upload %s", name)
        raise HTTPException(status_code=500, detail=f"Upload failed: {e}")

    logger.info("Stored upload %s (%d bytes)", name, len(contents))
    return f"{URL_PREFIX}/{name}"


def resolve_local_path(reference: str, upload_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Map a stored file reference back to a file on disk.

    Accepts ``/uploads/x``, ``uploads/x``, ``/public/uploads/x`` or a bare
    filename. Remote URLs and anything escaping the upload directory give None.
    """
    if not reference or reference.startswith(("http://", "https://")):
        return None

    root = Path(upload_dir or config.UPLOAD_DIR).resolve()
    name = reference.lstrip("/")
    for prefix in ("public/uploads/", "uploads/"):
        if name.startswith(prefix):
            name = name[len(prefix):]
            break

    candidate = (root / name).resolve()
    if root not in candidate.parents:
        return None
    if not candidate.is_file():
        return None
    return candidate

