import os

import pytest

from gradestats.core.engine import GradeReportEngine
from gradestats.core.models import GradeRecord
from gradestats.core.repositories import JsonGradeRepository
from gradestats.storage.loaders import load_classes, load_grades, load_students

DEMO_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
    "data",
    "demo",
)


@pytest.fixture
def grade():
    """Factory for GradeRecord with sensible defaults."""
    def make(score, subject_id=1, subject_name=None, coefficient=1.0,
             student_id=1, student_name=None, semester_id=None):
        return GradeRecord(
            score=score,
            subject_id=subject_id,
            subject_name=subject_name or (f"Subject {subject_id}" if subject_id is not None else None),
            student_id=student_id,
            student_name=student_name or f"Student {student_id}",
            subject_coefficient=coefficient,
            semester_id=semester_id,
        )
    return make


@pytest.fixture
def demo_repo():
    return JsonGradeRepository(load_grades(DEMO_DIR), load_classes(DEMO_DIR), load_students(DEMO_DIR))


@pytest.fixture
def demo_engine(demo_repo):
    return GradeReportEngine(demo_repo)
