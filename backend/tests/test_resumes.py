from __future__ import annotations

from uuid import uuid4

import pytest

from app.schemas.user import UserCreate
from app.services.user_service import create_user

OWNER = {"Authorization": "Bearer user_owner"}
STRANGER = {"Authorization": "Bearer user_stranger"}

RESUME_PAYLOAD = {
    "title": "Backend Engineer",
    "sub_title": "Python, FastAPI",
    "overview": "Builds APIs.",
    "information": [{"label": "city", "value": "Lisbon"}],
    "educations": [
        {"school": "IST", "degree": "MSc", "major": "Computer Science", "start_date": "2015-09-01", "end_date": "2017-07-01"}
    ],
    "work_experiences": [
        {"company": "Acme", "position": "Engineer", "description": "APIs", "start_date": "2017-09-01", "end_date": None}
    ],
    "projects": [{"title": "cv-builder", "sub_title": "side project", "details": "Resume builder"}],
    "skills": [{"label": "python", "value": "expert"}],
}


@pytest.fixture(autouse=True)
def users(session_factory) -> None:
    with session_factory() as db:
        create_user(db, UserCreate(email="owner@x.com", provider="clerk", provider_id="user_owner"))
        create_user(db, UserCreate(email="stranger@x.com", provider="clerk", provider_id="user_stranger"))


def _create(client) -> dict:
    response = client.post("/api/v1/resumes", json=RESUME_PAYLOAD, headers=OWNER)
    assert response.status_code == 201
    return response.json()


def test_create_and_list_resumes(client) -> None:
    created = _create(client)

    assert created["title"] == "Backend Engineer"
    assert created["educations"][0]["start_date"] == "2015-09-01"
    assert created["work_experiences"][0]["end_date"] is None
    assert len(created["skills"]) == 1

    listed = client.get("/api/v1/resumes", headers=OWNER)
    assert listed.status_code == 200
    assert [item["id"] for item in listed.json()] == [created["id"]]
    assert client.get("/api/v1/resumes", headers=STRANGER).json() == []


def test_get_resume_checks_ownership(client) -> None:
    created = _create(client)

    assert client.get(f"/api/v1/resumes/{created['id']}", headers=OWNER).status_code == 200

    forbidden = client.get(f"/api/v1/resumes/{created['id']}", headers=STRANGER)
    assert forbidden.status_code == 403
    assert forbidden.json()["message"] == "You do not have permission to view this resume"

    missing = client.get(f"/api/v1/resumes/{uuid4()}", headers=OWNER)
    assert missing.status_code == 404


def test_update_replaces_collections_present_in_payload(client) -> None:
    created = _create(client)

    response = client.patch(
        f"/api/v1/resumes/{created['id']}",
        json={"title": "Staff Engineer", "skills": [{"label": "go", "value": "good"}, {"label": "sql", "value": "good"}]},
        headers=OWNER,
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == "Staff Engineer"
    assert updated["overview"] == "Builds APIs."
    assert sorted(skill["label"] for skill in updated["skills"]) == ["go", "sql"]
    assert len(updated["projects"]) == 1


def test_update_via_post_alias(client) -> None:
    created = _create(client)

    response = client.post(f"/api/v1/resumes/{created['id']}", json={"projects": []}, headers=OWNER)

    assert response.status_code == 200
    assert response.json()["projects"] == []


def test_update_by_stranger_is_forbidden(client) -> None:
    created = _create(client)
    response = client.patch(f"/api/v1/resumes/{created['id']}", json={"title": "Mine now"}, headers=STRANGER)
    assert response.status_code == 403


def test_delete_resume(client) -> None:
    created = _create(client)

    assert client.delete(f"/api/v1/resumes/{created['id']}", headers=STRANGER).status_code == 403
    assert client.delete(f"/api/v1/resumes/{created['id']}", headers=OWNER).status_code == 204
    assert client.get(f"/api/v1/resumes/{created['id']}", headers=OWNER).status_code == 404
    assert client.delete(f"/api/v1/resumes/{created['id']}", headers=OWNER).status_code == 404


def test_resume_routes_require_authentication(client) -> None:
    assert client.get("/api/v1/resumes").status_code == 401


def test_invalid_payload_is_rejected(client) -> None:
    response = client.post("/api/v1/resumes", json={"title": ""}, headers=OWNER)
    assert response.status_code == 422
    assert response.json()["error"] == "Unprocessable Entity"
