import io
import zipfile

from jobplatform.utils.export import (
    collect_resume_files,
    create_zip_response_headers,
    export_resumes_to_zip,
    safe_archive_name,
)
from jobplatform.utils.storage import resolve_local_path


def test_resolve_local_path_accepts_stored_forms(tmp_path):
    (tmp_path / "cv.pdf").write_bytes(b"cv")

    for reference in ("/uploads/cv.pdf", "uploads/cv.pdf", "/public/uploads/cv.pdf", "cv.pdf"):
        assert resolve_local_path(reference, tmp_path) == (tmp_path / "cv.pdf").resolve()


def test_resolve_local_path_rejects_remote_missing_and_escaping(tmp_path):
    outside = tmp_path.parent / "secret.txt"
    outside.write_text("nope")

    assert resolve_local_path("", tmp_path) is None
    assert resolve_local_path("https://cdn.jobmail.io/cv.pdf", tmp_path) is None
    assert resolve_local_path("/uploads/missing.pdf", tmp_path) is None
    assert resolve_local_path("/uploads/../secret.txt", tmp_path) is None


def test_collect_resume_files_names_entries_by_candidate(tmp_path):
    (tmp_path / "cv.pdf").write_bytes(b"one")
    (tmp_path / "other.pdf").write_bytes(b"two")

    applications = [
        {"resumeUrl": "/uploads/cv.pdf", "applicantName": "Asha Rao"},
        {"resumeUrl": "/uploads/other.pdf", "applicantDetails": {"name": "Ravi/K"}},
        {"resume": "/uploads/cv.pdf"},
        {"resumeUrl": "/uploads/cv.pdf", "applicantName": "Asha Rao"},
        {"resumeUrl": "https://cdn.jobmail.io/x.pdf", "applicantName": "Remote"},
        {"status": "pending"},
    ]

    files = collect_resume_files(applications, tmp_path)

    assert [name for _, name in files] == [
        "Asha Rao_cv.pdf",
        "Ravi_K_other.pdf",
        "applicant-3_cv.pdf",
        "4_Asha Rao_cv.pdf",
    ]


def test_export_resumes_to_zip_contents(tmp_path):
    first = tmp_path / "a.pdf"
    second = tmp_path / "b.docx"
    first.write_bytes(b"alpha")
    second.write_bytes(b"beta")

    content = export_resumes_to_zip([(first, "Asha_a.pdf"), (second, "Ravi_b.docx")])

    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        assert archive.namelist() == ["Asha_a.pdf", "Ravi_b.docx"]
        assert archive.read("Ravi_b.docx") == b"beta"
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in archive.infolist())


def test_archive_and_header_names_are_sanitized():
    assert safe_archive_name("  ") == "applicant"
    assert safe_archive_name("A/B\\C") == "A_B_C"

    headers = create_zip_response_headers('Acme "Labs"_resumes_1')
    assert headers["Content-Disposition"] == (
        'attachment; filename="Acme _Labs__resumes_1.zip"; '
        "filename*=UTF-8''Acme%20%22Labs%22_resumes_1.zip"
    )


def test_non_latin_names_stay_header_safe():
    headers = create_zip_response_headers("株式会社テスト_resumes_1")
    disposition = headers["Content-Disposition"]

    disposition.encode("latin-1")
    assert 'filename="__resumes_1.zip"' in disposition
    assert "filename*=UTF-8''%E6%A0%AA" in disposition
