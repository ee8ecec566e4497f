import asyncio

PNG = ("logo.png", b"\x89PNG\r\n\x1a\nfake", "image/png")
PDF = ("Marks Card.PDF", b"%PDF-1.4 fake", "application/pdf")


def test_jobseeker_marks(client, db, make_user):
    seeker, headers = make_user("jobseeker")

    response = client.put("/api/jobseeker/marks", json={"tenth": 91, "twelfth": "88%", "degree": 8.2}, headers=headers)

    assert response.status_code == 200
    assert response.json()["user"]["marks"] == {"tenth": 91, "twelfth": "88%", "degree": 8.2}
    assert "password" not in response.json()["user"]
    stored = asyncio.run(db.users.find_one({"_id": seeker["_id"]}))
    assert stored["marks"]["tenth"] == 91

    assert client.put("/api/jobseeker/marks", json={}, headers=headers).status_code == 400


def test_jobseeker_routes_reject_employers(client, make_user):
    _, headers = make_user("employer", company_id="ACME")

    assert client.put("/api/jobseeker/marks", json={"tenth": 1}, headers=headers).status_code == 403
    assert client.get("/api/jobseeker/applications", headers=headers).status_code == 403


def test_upload_certificate(client, make_user, upload_dir):
    _, headers = make_user("jobseeker")

    response = client.post(
        "/api/jobseeker/upload-certificate", files={"file": PDF}, data={"type": "twelfth"}, headers=headers
    )

    assert response.status_code == 200
    url = response.json()["url"]
    assert url.startswith("/uploads/") and url.endswith("-Marks_Card.pdf")
    assert response.json()["user"]["certificates"]["twelfth"] == url
    assert (upload_dir / url.rsplit("/", 1)[1]).read_bytes() == PDF[1]


def test_upload_certificate_validation(client, make_user):
    _, headers = make_user("jobseeker")
    url = "/api/jobseeker/upload-certificate"

    assert client.post(url, files={"file": PDF}, data={"type": "a.b"}, headers=headers).status_code == 400
    assert client.post(url, files={"file": PDF}, data={"type": "$set"}, headers=headers).status_code == 400
    assert client.post(url, data={"type": "tenth"}, headers=headers).status_code == 400
    text_file = ("notes.txt", b"hi", "text/plain")
    assert client.post(url, files={"file": text_file}, headers=headers).status_code == 400

    default_type = client.post(url, files={"file": PDF}, headers=headers)
    assert "other" in default_type.json()["user"]["certificates"]


def test_jobseeker_profile_image(client, make_user):
    _, headers = make_user("jobseeker")

    response = client.post("/api/jobseeker/profile-image", files={"profileImage": PNG}, headers=headers)

    assert response.status_code == 201
    assert response.json()["user"]["profileImage"] == response.json()["url"]


def test_upload_size_limit(client, make_user, monkeypatch):
    from jobplatform import config

    monkeypatch.setattr(config, "MAX_UPLOAD_MB", 1)
    _, headers = make_user("jobseeker")
    big = ("cv.pdf", b"0" * (1024 * 1024 + 1), "application/pdf")

    response = client.post("/api/upload/resume", files={"resume": big}, headers=headers)

    assert response.status_code == 400
    assert response.json()["message"] == "File size exceeds 1MB limit"


def test_plain_uploads_return_urls(client, make_user, upload_dir):
    _, headers = make_user("employer", company_id="ACME")

    resume = client.post(
        "/api/upload/resume", files={"resume": ("cv.pdf", b"%PDF", "application/pdf")}, headers=headers
    )
    image = client.post("/api/upload/profile", files={"profileImage": PNG}, headers=headers)
    certificate = client.post("/api/upload/certificate", files={"file": PDF}, headers=headers)

    for response in (resume, image, certificate):
        assert response.status_code == 201
        assert response.json()["success"] is True
        assert response.json()["url"].startswith("/uploads/")

    assert len(list(upload_dir.iterdir())) == 3
    assert client.post("/api/upload/resume", files={"resume": PNG}, headers=headers).status_code == 400
    assert client.post("/api/upload/resume", files={"resume": PDF}).status_code == 401


def test_multipart_profile_form(client, make_user):
    _, headers = make_user("jobseeker", name="Old Name")

    current = client.get("/api/profile", headers=headers)
    assert current.json()["user"]["name"] == "Old Name"
    assert "password" not in current.json()["user"]

    response = client.put(
        "/api/profile", data={"name": " New Name ", "bio": "Hello"}, files={"profileImage": PNG}, headers=headers
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "New Name"
    assert user["bio"] == "Hello"
    assert user["profileImage"].startswith("/uploads/")

    unchanged = client.put("/api/profile", data={}, headers=headers)
    assert unchanged.json()["message"] == "No changes provided"


def test_create_company_for_unlinked_employer(client, db, make_user):
    employer, headers = make_user("employer")

    response = client.post(
        "/api/company", json={"companyId": "NEWCO", "companyName": "New Co", "industry": "Retail"}, headers=headers
    )

    assert response.status_code == 201
    assert asyncio.run(db.users.find_one({"_id": employer["_id"]}))["companyId"] == "NEWCO"

    # Now linked, a second company is refused
    again = client.post("/api/company", json={"companyId": "NEWCO2", "companyName": "x"}, headers=headers)
    assert again.status_code == 400


def test_create_company_validation(client, make_user):
    _, headers = make_user("employer")
    _, seeker_headers = make_user("jobseeker")
    make_user("employer", company_id="TAKEN")

    assert client.post("/api/company", json={"companyId": "TAKEN", "companyName": "x"}, headers=headers).status_code == 400
    assert client.post("/api/company", json={"companyId": "bad id!", "companyName": "x"}, headers=headers).status_code == 400
    assert client.post("/api/company", json={"companyId": "OK", "companyName": "x"}, headers=seeker_headers).status_code == 403


def test_verify_company(client, make_user):
    make_user("employer", company_id="ACME")

    found = client.get("/api/company/verify/ACME").json()
    assert found["valid"] is True
    assert found["company"]["companyName"] == "ACME Inc"

    assert client.get("/api/company/verify/NOPE").json() == {"valid": False, "company": None}


def test_upload_company_logo(client, db, make_user):
    _, headers = make_user("employer", company_id="ACME")
    make_user("employer", company_id="OTHER")

    response = client.post("/api/company/upload-logo/ACME", files={"logo": PNG}, headers=headers)
    assert response.status_code == 200
    logo_url = response.json()["logoUrl"]
    assert asyncio.run(db.companies.find_one({"companyId": "ACME"}))["logo"] == logo_url

    assert client.post("/api/company/upload-logo/OTHER", files={"logo": PNG}, headers=headers).status_code == 403
    assert client.post("/api/company/upload-logo/GHOST", files={"logo": PNG}, headers=headers).status_code == 404
    assert client.post("/api/company/upload-logo/ACME", headers=headers).status_code == 400


def test_root_endpoint(client):
    assert client.get("/").json()["status"] == "Job Platform API Running"
