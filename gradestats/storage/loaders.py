import json
import os
from datetime import date
from typing import Any, Dict, List, Optional

from gradestats.core.models import ClassSection, GradeRecord

GRADES_FILE = "grades.json"
CLASSES_FILE = "classes.json"
STUDENTS_FILE = "students.json"


def _read(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _required_id(entry: Dict[str, Any], key: str, where: str) -> int:
    obj = entry.get(key) or {}
    if obj.get("id") is None:
        raise ValueError(f"{where}: '{key}' is missing an id")
    return int(obj["id"])


def student_display_name(student: Dict[str, Any]) -> str:
    if student.get("name"):
        return str(student["name"])
    first = student.get("first_name") or ""
    last = student.get("last_name") or ""
    return f"{first} {last}".strip()


def record_from_json(entry: Dict[str, Any], where: str = "grade") -> GradeRecord:
    """
    Build a GradeRecord from one grades.json entry:
        {"score": 80, "subject": {"id", "name", "coefficient"},
         "student": {"id", "first_name", "last_name"},
         "semester": {"id", "name"}, "date_assigned": "2024-10-01", "comments": "..."}
    A grade without a student is malformed; subject, semester and score may be absent.
    """
    student_id = _required_id(entry, "student", where)
    student = entry["student"]
    subject = entry.get("subject") or {}
    semester = entry.get("semester") or {}
    assigned = entry.get("date_assigned")

    return GradeRecord(
        score=_optional_float(entry.get("score")),
        subject_id=int(subject["id"]) if subject.get("id") is not None else None,
        subject_name=subject.get("name"),
        subject_coefficient=_optional_float(subject.get("coefficient")),
        student_id=student_id,
        student_name=student_display_name(student),
        semester_id=int(semester["id"]) if semester.get("id") is not None else None,
        semester_name=semester.get("name"),
        date_assigned=date.fromisoformat(assigned) if assigned else None,
        comments=entry.get("comments"),
    )


def class_section_from_json(entry: Dict[str, Any], where: str = "class") -> ClassSection:
    if entry.get("id") is None:
        raise ValueError(f"{where}: class section is missing an id")
    subject_id = _required_id(entry, "subject", where)
    semester_id = _required_id(entry, "semester", where)
    return ClassSection(
        id=int(entry["id"]),
        subject_id=subject_id,
        subject_name=entry["subject"].get("name", ""),
        semester_id=semester_id,
        semester_name=entry["semester"].get("name", ""),
        student_ids=tuple(int(s) for s in entry.get("student_ids", [])),
    )


def parse_grades(raw: Any) -> List[GradeRecord]:
    if not isinstance(raw, list):
        raise ValueError(f"Expected {GRADES_FILE} to contain a list.")
    return [record_from_json(e, where=f"{GRADES_FILE}[{i}]") for i, e in enumerate(raw)]


def parse_class_sections(raw: Any) -> List[ClassSection]:
    if not isinstance(raw, list):
        raise ValueError(f"Expected {CLASSES_FILE} to contain a list.")
    return [class_section_from_json(e, where=f"{CLASSES_FILE}[{i}]") for i, e in enumerate(raw)]


def parse_students(raw: Any) -> Dict[int, str]:
    """Student roster: id -> display name. Lets students without grades be looked up."""
    if not isinstance(raw, list):
        raise ValueError(f"Expected {STUDENTS_FILE} to contain a list.")
    roster: Dict[int, str] = {}
    for i, entry in enumerate(raw):
        if entry.get("id") is None:
            raise ValueError(f"{STUDENTS_FILE}[{i}]: student is missing an id")
        roster[int(entry["id"])] = student_display_name(entry)
    return roster


def load_grades(root: str) -> List[Dict[str, Any]]:
    return _read(os.path.join(root, GRADES_FILE))


def load_classes(root: str) -> List[Dict[str, Any]]:
    path = os.path.join(root, CLASSES_FILE)
    # class sections are optional; a dataset may only hold grades
    if not os.path.exists(path):
        return []
    return _read(path)


def load_students(root: str) -> List[Dict[str, Any]]:
    path = os.path.join(root, STUDENTS_FILE)
    if not os.path.exists(path):
        return []
    return _read(path)
