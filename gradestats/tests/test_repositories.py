import json

import pytest

from gradestats.core.repositories import JsonGradeRepository, RecordNotFoundError
from gradestats.storage.loaders import load_classes, load_grades, load_students, parse_students, record_from_json


def test_record_from_json_full_entry():
    g = record_from_json({
        "score": 88,
        "subject": {"id": 4, "name": "Chemistry", "coefficient": 3},
        "student": {"id": 9, "first_name": "Ada", "last_name": "Lovelace"},
        "semester": {"id": 2, "name": "Spring"},
        "date_assigned": "2025-01-15",
        "comments": "Lab report",
    })
    assert g.score == 88.0
    assert g.subject_id == 4 and g.subject_coefficient == 3.0
    assert g.student_name == "Ada Lovelace"
    assert g.semester_name == "Spring"
    assert g.date_assigned.isoformat() == "2025-01-15"


def test_record_from_json_optional_parts():
    g = record_from_json({"student": {"id": 1, "name": "Solo"}})
    assert g.score is None
    assert g.subject_id is None
    assert g.semester_id is None
    assert g.student_name == "Solo"


def test_record_without_student_is_rejected():
    with pytest.raises(ValueError, match="student"):
        JsonGradeRepository([{"score": 50, "subject": {"id": 1, "name": "Math"}}])


def test_grades_must_be_a_list():
    with pytest.raises(ValueError):
        JsonGradeRepository({"score": 50})


def test_loaders_read_data_dir(tmp_path):
    (tmp_path / "grades.json").write_text(json.dumps([{"score": 70, "student": {"id": 1, "name": "A"}}]))
    assert load_grades(str(tmp_path)) == [{"score": 70, "student": {"id": 1, "name": "A"}}]
    # classes.json is optional
    assert load_classes(str(tmp_path)) == []
    assert load_students(str(tmp_path)) == []


def test_find_by_student(demo_repo):
    assert len(demo_repo.find_by_student(1)) == 4
    assert [g.score for g in demo_repo.find_by_student(1, semester_id=2)] == [85.0]


def test_find_by_subject(demo_repo):
    assert len(demo_repo.find_by_subject(1)) == 5
    assert {g.student_id for g in demo_repo.find_by_subject(2, semester_id=1)} == {1, 2}


def test_find_by_class_section(demo_repo):
    section, grades = demo_repo.find_by_class_section(10)
    assert section.display_name == "Mathematics (Fall 2024)"
    assert section.enrollment_size == 3
    assert all(g.subject_id == 1 and g.semester_id == 1 for g in grades)
    assert len(grades) == 4


def test_find_by_semester_and_all(demo_repo):
    assert len(demo_repo.find_by_semester(2)) == 2
    assert len(demo_repo.find_all()) == 9


@pytest.mark.parametrize(
    "call",
    [
        lambda r: r.find_by_student(99),
        lambda r: r.find_by_student(1, semester_id=99),
        lambda r: r.find_by_subject(99),
        lambda r: r.find_by_class_section(99),
        lambda r: r.find_by_semester(99),
    ],
)
def test_unknown_ids_raise(demo_repo, call):
    with pytest.raises(RecordNotFoundError):
        call(demo_repo)


def test_not_found_is_a_lookup_error(demo_repo):
    with pytest.raises(LookupError, match="Student not found with ID: 42"):
        demo_repo.student_name(42)


def test_parse_students_roster():
    roster = parse_students([{"id": 4, "first_name": "Dana", "last_name": "Okafor"}, {"id": 5, "name": "Eli"}])
    assert roster == {4: "Dana Okafor", 5: "Eli"}
    with pytest.raises(ValueError, match="missing an id"):
        parse_students([{"name": "Nobody"}])


def test_students_without_grades_are_known(demo_repo):
    # on the roster and enrolled in class 12, but never graded
    assert demo_repo.student_name(4) == "Dana Okafor"
    assert demo_repo.find_by_student(4) == []


def test_enrolled_students_are_known_without_roster():
    grades = [{"score": 70, "subject": {"id": 1, "name": "Math"}, "student": {"id": 1, "name": "A"},
               "semester": {"id": 1, "name": "Fall"}}]
    classes = [{"id": 10, "subject": {"id": 1, "name": "Math"}, "semester": {"id": 1, "name": "Fall"},
                "student_ids": [1, 42]}]
    repo = JsonGradeRepository(grades, classes)
    assert repo.student_name(42) == "Student 42"
    assert repo.find_by_student(42) == []
    assert repo.student_name(1) == "A"
