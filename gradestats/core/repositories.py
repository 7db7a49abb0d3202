from typing import Any, Dict, List, Optional, Protocol, Tuple

from gradestats.core.models import ClassSection, GradeRecord
from gradestats.storage.loaders import parse_class_sections, parse_grades, parse_students


class RecordNotFoundError(LookupError):
    def __init__(self, kind: str, record_id: Any):
        super().__init__(f"{kind} not found with ID: {record_id}")
        self.kind = kind
        self.record_id = record_id


class GradeRepository(Protocol):
    def find_by_student(self, student_id: int, semester_id: Optional[int] = None) -> List[GradeRecord]:
        ...

    def find_by_subject(self, subject_id: int, semester_id: Optional[int] = None) -> List[GradeRecord]:
        ...

    def find_by_class_section(self, class_id: int) -> Tuple[ClassSection, List[GradeRecord]]:
        ...

    def find_by_semester(self, semester_id: int) -> List[GradeRecord]:
        ...

    def find_all(self) -> List[GradeRecord]:
        ...

    def student_name(self, student_id: int) -> str:
        ...

    def subject_name(self, subject_id: int) -> str:
        ...

    def semester_name(self, semester_id: int) -> str:
        ...

    def class_section(self, class_id: int) -> ClassSection:
        ...


class JsonGradeRepository:
    """
    Read-only snapshot of grades.json / classes.json / students.json.
    Students come from the roster, from class enrollments and from grades, so a
    student without grades still resolves. Subjects and semesters are known
    through the grades and class sections that reference them.
    """

    def __init__(self, grades_json: Any, classes_json: Any = None, students_json: Any = None):
        self.grades: List[GradeRecord] = parse_grades(grades_json)
        self.class_sections: Dict[int, ClassSection] = {
            c.id: c for c in parse_class_sections(classes_json or [])
        }

        self._students: Dict[int, str] = parse_students(students_json or [])
        self._subjects: Dict[int, str] = {}
        self._semesters: Dict[int, str] = {}
        for g in self.grades:
            self._students.setdefault(g.student_id, g.student_name)
            if g.subject_id is not None:
                self._subjects.setdefault(g.subject_id, g.subject_name)
            if g.semester_id is not None:
                self._semesters.setdefault(g.semester_id, g.semester_name)
        for c in self.class_sections.values():
            self._subjects.setdefault(c.subject_id, c.subject_name)
            self._semesters.setdefault(c.semester_id, c.semester_name)
            for student_id in c.student_ids:
                self._students.setdefault(student_id, f"Student {student_id}")

    # ---------- lookups ----------
    def student_name(self, student_id: int) -> str:
        if student_id not in self._students:
            raise RecordNotFoundError("Student", student_id)
        return self._students[student_id]

    def subject_name(self, subject_id: int) -> str:
        if subject_id not in self._subjects:
            raise RecordNotFoundError("Subject", subject_id)
        return self._subjects[subject_id]

    def semester_name(self, semester_id: int) -> str:
        if semester_id not in self._semesters:
            raise RecordNotFoundError("Semester", semester_id)
        return self._semesters[semester_id]

    def class_section(self, class_id: int) -> ClassSection:
        if class_id not in self.class_sections:
            raise RecordNotFoundError("Class section", class_id)
        return self.class_sections[class_id]

    # ---------- scope queries ----------
    def find_by_student(self, student_id: int, semester_id: Optional[int] = None) -> List[GradeRecord]:
        self.student_name(student_id)
        if semester_id is not None:
            self.semester_name(semester_id)
        return [
            g for g in self.grades
            if g.student_id == student_id and (semester_id is None or g.semester_id == semester_id)
        ]

    def find_by_subject(self, subject_id: int, semester_id: Optional[int] = None) -> List[GradeRecord]:
        self.subject_name(subject_id)
        if semester_id is not None:
            self.semester_name(semester_id)
        return [
            g for g in self.grades
            if g.subject_id == subject_id and (semester_id is None or g.semester_id == semester_id)
        ]

    def find_by_class_section(self, class_id: int) -> Tuple[ClassSection, List[GradeRecord]]:
        section = self.class_section(class_id)
        enrolled = set(section.student_ids)
        grades = [
            g for g in self.grades
            if g.student_id in enrolled
            and g.subject_id == section.subject_id
            and g.semester_id == section.semester_id
        ]
        return section, grades

    def find_by_semester(self, semester_id: int) -> List[GradeRecord]:
        self.semester_name(semester_id)
        return [g for g in self.grades if g.semester_id == semester_id]

    def find_all(self) -> List[GradeRecord]:
        return list(self.grades)
