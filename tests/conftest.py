import asyncio
from datetime import datetime, timedelta

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from jobplatform import config
from jobplatform.database import get_db
from jobplatform.main import app
from jobplatform.utils.auth import create_access_token


def run(coro):
    """Drive a mock-motor coroutine from synchronous test code."""
    return asyncio.run(coro)


@pytest.fixture
def db():
    return AsyncMongoMockClient()["jobPlatform_test"]


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    target = tmp_path / "uploads"
    target.mkdir()
    monkeypatch.setattr(config, "UPLOAD_DIR", target)
    return target


@pytest.fixture
def client(db, upload_dir):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Insert a user directly and return (document, auth headers)."""

    def _make_user(role="jobseeker", company_id=None, name=None, company_logo="/uploads/acme.png"):
        if company_id and not run(db.companies.find_one({"companyId": company_id})):
            run(db.companies.insert_one({
                "companyId": company_id,
                "companyName": f"{company_id} Inc",
                "logo": company_logo,
                "createdAt": datetime.utcnow(),
            }))

        user = {
            "name": name or f"{role}-{ObjectId()}",
            "email": f"{ObjectId()}@jobmail.io",
            "password": "not-a-real-hash",
            "role": role,
            "companyId": company_id,
            "companyName": f"{company_id} Inc" if company_id else "",
            "marks": {},
            "certificates": {},
            "createdAt": datetime.utcnow(),
        }
        user["_id"] = run(db.users.insert_one(user)).inserted_id
        headers = {"Authorization": f"Bearer {create_access_token(user['_id'])}"}
        return user, headers

    return _make_user


@pytest.fixture
def make_job(db):
    counter = {"n": 0}

    def _make_job(company_id=None, posted_by=None, **fields):
        counter["n"] += 1
        job = {
            "title": f"Job {counter['n']}",
            "description": "Build things",
            "requirements": "",
            "location": "Remote",
            "skills": ["python"],
            "type": "Full-time",
            "company": {"name": company_id or "", "logo": ""},
            "createdAt": datetime.utcnow() + timedelta(seconds=counter["n"]),
        }
        if company_id is not None:
            job["companyId"] = company_id
        if posted_by is not None:
            job["postedBy"] = posted_by
        job.update(fields)
        job["_id"] = run(db.jobs.insert_one(job)).inserted_id
        return job

    return _make_job


@pytest.fixture
def make_application(db):
    def _make_application(job_ref, applicant_id, **fields):
        application = {
            "job": job_ref,
            "applicant": applicant_id,
            "resumeUrl": "/uploads/resume.pdf",
            "appliedAt": datetime.utcnow(),
            "status": "pending",
        }
        application.update(fields)
        application["_id"] = run(db.applications.insert_one(application)).inserted_id
        return application

    return _make_application
