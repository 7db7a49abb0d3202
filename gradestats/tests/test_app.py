import pytest
from fastapi.testclient import TestClient

from gradestats.app import app, get_engine


@pytest.fixture
def client(demo_engine):
    app.dependency_overrides[get_engine] = lambda: demo_engine
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_overall_statistics(client):
    r = client.get("/statistics/overall")
    assert r.status_code == 200
    body = r.json()
    assert body["scope_kind"] == "overall"
    assert body["total_grades"] == 8
    assert set(body["grade_distribution"]) == {"A", "B", "C", "D", "F"}


def test_student_statistics_with_semester(client):
    r = client.get("/statistics/student/1", params={"semester_id": 2})
    assert r.status_code == 200
    body = r.json()
    assert body["total_grades"] == 1
    assert body["semester_name"] == "Spring 2025"


def test_class_and_semester_statistics(client):
    assert client.get("/statistics/class/11").json()["total_students"] == 1
    assert client.get("/statistics/semester/2").json()["total_grades"] == 2
    assert client.get("/statistics/subject/2").json()["total_subjects"] == 1


def test_unknown_ids_return_404(client):
    r = client.get("/statistics/student/999")
    assert r.status_code == 404
    assert "Student not found" in r.json()["detail"]
    assert client.get("/statistics/class/999").status_code == 404
    assert client.get("/students/1/subjects/999/average").status_code == 404


def test_student_averages(client):
    assert client.get("/students/1/average").json() == {"status": "value", "average": pytest.approx(75.0)}
    assert client.get("/students/1/subjects/1/average").json()["average"] == pytest.approx(82.5)
    assert client.get("/students/2/subject-averages").json() == {
        "Mathematics": pytest.approx(95.0),
        "Physics": pytest.approx(40.0),
    }


def test_student_summary(client):
    body = client.get("/students/2/summary").json()
    assert body["student_name"] == "Bruno Diallo"
    assert set(body["grades_by_subject"]) == {"Mathematics", "Physics"}


def test_compute_average_not_computable(client):
    payload = {"grades": [
        {"score": 80, "subject_id": 1, "subject_name": "Art", "subject_coefficient": 0, "student_id": 1},
    ]}
    r = client.post("/compute/average", json=payload)
    assert r.status_code == 200
    assert r.json()["overall_average"] == {"status": "not_computable", "average": None}
    assert r.json()["subject_averages"] == {"Art": 80.0}


def test_compute_average_no_data(client):
    r = client.post("/compute/average", json={"grades": [], "subject_id": 3})
    assert r.json() == {
        "overall_average": {"status": "no_data", "average": None},
        "subject_averages": {},
        "subject_average": None,
    }


def test_compute_statistics(client):
    payload = {
        "kind": "subject",
        "scope_id": 1,
        "scope_name": "Math",
        "grades": [
            {"score": s, "subject_id": 1, "subject_name": "Math", "student_id": i, "student_name": f"S{i}"}
            for i, s in enumerate([95, 85, 65, 40])
        ],
    }
    body = client.post("/compute/statistics", json=payload).json()
    assert body["average_score"] == pytest.approx(71.25)
    assert body["passing_rate"] == pytest.approx(75.0)
    assert body["grade_distribution"] == {"A": 1, "B": 1, "C": 0, "D": 1, "F": 1}
    assert list(body["top_student_averages"]) == ["S0", "S1", "S2", "S3"]


def test_compute_statistics_empty_scope(client):
    body = client.post("/compute/statistics", json={"kind": "overall", "grades": []}).json()
    assert body["average_score"] == 0.0
    assert body["standard_deviation"] == 0.0
    assert sum(body["grade_distribution"].values()) == 0


def test_compute_rejects_out_of_range_score(client):
    payload = {"kind": "overall", "grades": [{"score": 150, "student_id": 1}]}
    assert client.post("/compute/statistics", json=payload).status_code == 422
    assert client.post("/compute/statistics", json={"kind": "galaxy", "grades": []}).status_code == 422


def test_student_without_grades(client):
    r = client.get("/students/4/average")
    assert r.status_code == 200
    assert r.json() == {"status": "no_data", "average": None}
    body = client.get("/statistics/student/4").json()
    assert body["total_grades"] == 0
    assert body["scope_name"] == "Dana Okafor"
    assert client.get("/students/4/subject-averages").json() == {}


def test_empty_class_section(client):
    body = client.get("/statistics/class/13").json()
    assert body["total_students"] == 0
    assert body["average_score"] == 0.0


def test_compute_statistics_without_names(client):
    payload = {"kind": "overall", "grades": [
        {"score": 90, "subject_id": 3, "student_id": 7},
        {"score": 70, "subject_id": 3, "student_id": 8},
    ]}
    body = client.post("/compute/statistics", json=payload).json()
    assert body["subject_averages"] == {"Subject 3": 80.0}
    assert list(body["top_student_averages"]) == ["Student 7", "Student 8"]


def test_compute_average_keeps_same_named_subjects(client):
    payload = {"grades": [
        {"score": 80, "subject_id": 1, "subject_name": "Lab", "subject_coefficient": 1, "student_id": 1},
        {"score": 40, "subject_id": 2, "subject_name": "Lab", "subject_coefficient": 1, "student_id": 1},
    ]}
    body = client.post("/compute/average", json=payload).json()
    assert body["subject_averages"] == {"Lab": 80.0, "Lab (2)": 40.0}
