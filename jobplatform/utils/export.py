"""
Utility functions for exporting applicant resumes as a ZIP archive.
Used by employers to download every resume submitted for one of their jobs.
"""

import io
import logging
import re
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from jobplatform.utils.storage import resolve_local_path

logger = logging.getLogger(__name__)

RESUME_FIELDS = ("resumeUrl", "resume", "file", "resumePath")


def safe_archive_name(name: str) -> str:
    return re.sub(r"[^\w\-. ]+", "_", name).strip()[:60] or "applicant"


def collect_resume_files(
    applications: List[Dict[str, Any]],
    upload_dir: Optional[Path] = None,
) -> List[Tuple[Path, str]]:
    """
    Resolve each application's resume to a local file.

    Args:
        applications: application documents, optionally carrying
            ``applicantDetails`` with the candidate's name
        upload_dir: storage root, defaults to the configured one

    Returns:
        (path on disk, name inside the archive) pairs; remote URLs and
        missing files are skipped
    """

    files = []
    used_names = set()

    for idx, app in enumerate(applications):
        reference = next((app.get(field) for field in RESUME_FIELDS if app.get(field)), "")
        path = resolve_local_path(reference, upload_dir)
        if path is None:
            if reference:
                logger.debug("Skipping resume %r for application %s", reference, app.get("_id"))
            continue

        details = app.get("applicantDetails") or {}
        candidate = app.get("applicantName") or details.get("name") or f"applicant-{idx + 1}"
        archive_name = f"{safe_archive_name(candidate)}_{path.name}"

        # Two applicants can upload identically named files
        if archive_name in used_names:
            archive_name = f"{idx + 1}_{archive_name}"
        used_names.add(archive_name)

        files.append((path, archive_name))

    return files


def export_resumes_to_zip(files: List[Tuple[Path, str]]) -> bytes:
    """Pack the collected resume files into an in-memory ZIP archive."""

    output = io.BytesIO()

    with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for path, archive_name in files:
            archive.write(path, arcname=archive_name)

    return output.getvalue()


def create_zip_response_headers(filename: str) -> Dict[str, str]:
    """
    Create HTTP headers for ZIP file download.

    Header values must stay latin-1, so the plain ``filename`` is reduced to
    ASCII and the full name travels percent-encoded in ``filename*``.

    Args:
        filename: Name of the file (without extension)
    """

    ascii_name = re.sub(r"[^A-Za-z0-9_.\- ]+", "_", filename).strip() or "resumes"
    encoded = quote(f"{filename}.zip", safe="")
    return {
        "Content-Disposition": f"attachment; filename=\"{ascii_name}.zip\"; filename*=UTF-8''{encoded}",
        "Content-Type": "application/zip",
    }
