# tests/test_rest_api.py

import pytest

from conftest import FRONTEND_URL


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "db": True}


def test_health_reports_broken_store(broken_client):
    response = broken_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "db": False}


def test_root_lists_endpoints(client):
    body = client.get("/").json()

    assert body["status"] == "ok"
    assert body["usingDb"] is True
    assert body["frontend"] == FRONTEND_URL
    assert body["endpoints"] == {
        "students": "/students",
        "courses": "/courses",
        "grades": "/grades",
        "health": "/health",
    }


def test_create_course_appears_once_with_new_id(client):
    existing = {c["id"] for c in client.get("/courses").json()}

    response = client.post("/courses", json={"name": "Algebra"})
    course = response.json()
    listed = client.get("/courses").json()

    assert response.status_code == 201
    assert course["id"] not in existing
    assert [c for c in listed if c["name"] == "Algebra"] == [course]


def test_create_course_requires_name(client):
    response = client.post("/courses", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "name is required"}
    assert client.get("/courses").json() == []


def test_create_student_without_body(client):
    response = client.post("/students")

    assert response.status_code == 400
    assert response.json() == {"error": "name is required"}


def test_create_student_empty_name_creates_nothing(client):
    before = client.get("/students").json()

    response = client.post("/students", json={"name": "", "email": "ann@example.edu"})

    assert response.status_code == 400
    assert client.get("/students").json() == before


def test_student_course_name_resolution(client):
    course = client.post("/courses", json={"name": "Algebra"}).json()
    client.post("/students", json={"name": "Ann", "course_id": course["id"]})
    client.post("/students", json={"name": "Bob", "course_id": "missing-course"})

    students = {s["name"]: s for s in client.get("/students").json()}

    assert students["Ann"]["course_name"] == "Algebra"
    assert students["Bob"]["course_id"] == "missing-course"
    assert students["Bob"]["course_name"] is None


def test_full_scenario(client):
    course = client.post("/courses", json={"name": "Algebra"}).json()

    student_response = client.post("/students", json={"name": "Ann", "course_id": course["id"]})
    student = student_response.json()

    assert student_response.status_code == 201
    assert student["name"] == "Ann"
    assert student["email"] is None
    assert student["course_id"] == course["id"]
    assert student["course_name"] == "Algebra"
    assert student["created_at"]

    grade_response = client.post("/grades", json={
        "student_id": student["id"],
        "course_id": course["id"],
        "score": 95,
    })
    grade = grade_response.json()

    assert grade_response.status_code == 201
    assert grade["student_id"] == student["id"]
    assert grade["student_name"] == "Ann"
    assert grade["course_id"] == course["id"]
    assert grade["course_name"] == "Algebra"
    assert grade["score"] == 95
    assert client.get("/grades").json() == [grade]


def test_grade_zero_score(client):
    response = client.post("/grades", json={"student_id": "s1", "course_id": "c1", "score": 0})

    assert response.status_code == 201
    assert response.json()["score"] == 0


def test_grade_missing_score(client):
    response = client.post("/grades", json={"student_id": "S1", "course_id": "C1"})

    assert response.status_code == 400
    assert response.json() == {"error": "student_id, course_id, and score are required"}
    assert client.get("/grades").json() == []


@pytest.mark.parametrize("score", [True, False, "lots", "95", [95]])
def test_grade_non_numeric_score_rejected(client, score):
    response = client.post("/grades", json={"student_id": "s1", "course_id": "c1", "score": score})

    assert response.status_code == 400
    assert response.json() == {"error": "score must be a number"}
    assert client.get("/grades").json() == []


def test_grade_fractional_score(client):
    response = client.post("/grades", json={"student_id": "s1", "course_id": "c1", "score": 88.5})

    assert response.status_code == 201
    assert response.json()["score"] == 88.5


def test_student_email_passes_through_as_text(client):
    response = client.post("/students", json={"name": "Ann", "email": 5})

    assert response.status_code == 201
    assert response.json()["email"] == "5"


def test_student_name_must_be_text(client):
    response = client.post("/students", json={"name": 5})

    assert response.status_code == 400
    assert response.json() == {"error": "name is invalid"}


def test_grade_listing_is_idempotent(client):
    client.post("/grades", json={"student_id": "s1", "course_id": "c1", "score": 50})

    assert client.get("/grades").json() == client.get("/grades").json()


def test_grade_listing_filters(client):
    client.post("/grades", json={"student_id": "s1", "course_id": "c1", "score": 50})
    client.post("/grades", json={"student_id": "s2", "course_id": "c1", "score": 60})

    response = client.get("/grades", params={"student_id": "s2"})

    assert [g["score"] for g in response.json()] == [60]


def test_body_must_be_object(client):
    response = client.post("/courses", json=["Algebra"])

    assert response.status_code == 400
    assert response.json() == {"error": "Request body must be a JSON object"}


def test_unmatched_path(client):
    response = client.get("/nonexistent")

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


def test_unmatched_method(client):
    response = client.delete("/students")

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


def test_cors_allows_frontend(client):
    response = client.get("/health", headers={"Origin": FRONTEND_URL})

    assert response.headers["access-control-allow-origin"] == FRONTEND_URL


def test_store_failure_on_list(broken_client):
    response = broken_client.get("/students")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch students"}


def test_store_failure_on_create(broken_client):
    response = broken_client.post("/grades", json={"student_id": "s1", "course_id": "c1", "score": 1})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create grade"}


def test_validation_wins_over_store_failure(broken_client):
    response = broken_client.post("/courses", json={"name": ""})

    assert response.status_code == 400
