import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from gradestats.core.grading import empty_distribution


@dataclass(frozen=True)
class GradeRecord:
    score: Optional[float]
    subject_id: Optional[int]
    subject_name: Optional[str]
    student_id: Optional[int]
    student_name: Optional[str]
    subject_coefficient: Optional[float] = None
    semester_id: Optional[int] = None
    semester_name: Optional[str] = None
    date_assigned: Optional[date] = None
    comments: Optional[str] = None

    @property
    def has_score(self) -> bool:
        return self.score is not None

    @property
    def has_subject(self) -> bool:
        return self.subject_id is not None

    # names can be missing on ad-hoc records; fall back to the id
    @property
    def subject_label(self) -> str:
        return self.subject_name or f"Subject {self.subject_id}"

    @property
    def student_label(self) -> str:
        return self.student_name or f"Student {self.student_id}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "subject_id": self.subject_id,
            "subject_name": self.subject_name,
            "subject_coefficient": self.subject_coefficient,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "semester_id": self.semester_id,
            "semester_name": self.semester_name,
            "date_assigned": self.date_assigned.isoformat() if self.date_assigned else None,
            "comments": self.comments,
        }


class ScopeKind(str, Enum):
    STUDENT = "student"
    SUBJECT = "subject"
    CLASS = "class"
    SEMESTER = "semester"
    OVERALL = "overall"


@dataclass(frozen=True)
class ScopeMetadata:
    kind: ScopeKind
    scope_id: Optional[int] = None
    scope_name: Optional[str] = None
    semester_id: Optional[int] = None
    semester_name: Optional[str] = None
    # only meaningful for class sections
    enrollment_size: Optional[int] = None


@dataclass
class ScopeStatistics:
    scope_kind: ScopeKind
    scope_id: Optional[int] = None
    scope_name: Optional[str] = None
    semester_id: Optional[int] = None
    semester_name: Optional[str] = None

    average_score: float = 0.0
    median_score: float = 0.0
    min_score: float = 0.0
    max_score: float = 0.0
    standard_deviation: float = 0.0

    total_grades: int = 0
    total_students: int = 0
    total_subjects: int = 0

    passing_grades: int = 0
    failing_grades: int = 0
    passing_rate: float = 0.0

    grade_distribution: Dict[str, int] = field(default_factory=empty_distribution)
    subject_averages: Dict[str, float] = field(default_factory=dict)
    top_student_averages: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average_score": self.average_score,
            "median_score": self.median_score,
            "min_score": self.min_score,
            "max_score": self.max_score,
            "standard_deviation": self.standard_deviation,
            "total_grades": self.total_grades,
            "total_students": self.total_students,
            "total_subjects": self.total_subjects,
            "passing_grades": self.passing_grades,
            "failing_grades": self.failing_grades,
            "passing_rate": self.passing_rate,
            "grade_distribution": dict(self.grade_distribution),
            "subject_averages": dict(self.subject_averages),
            "top_student_averages": dict(self.top_student_averages),
            "scope_kind": self.scope_kind.value,
            "scope_id": self.scope_id,
            "scope_name": self.scope_name,
            "semester_id": self.semester_id,
            "semester_name": self.semester_name,
        }


class AverageStatus(str, Enum):
    VALUE = "value"
    NO_DATA = "no_data"
    NOT_COMPUTABLE = "not_computable"


@dataclass(frozen=True)
class OverallAverageResult:
    """
    Outcome of a weighted overall average.

    NO_DATA means there was nothing to average. NOT_COMPUTABLE means there
    were scores but every coefficient was unusable; its value is NaN.
    """
    status: AverageStatus
    value: Optional[float] = None

    @classmethod
    def of(cls, value: float) -> "OverallAverageResult":
        return cls(AverageStatus.VALUE, float(value))

    @classmethod
    def no_data(cls) -> "OverallAverageResult":
        return cls(AverageStatus.NO_DATA, None)

    @classmethod
    def not_computable(cls) -> "OverallAverageResult":
        return cls(AverageStatus.NOT_COMPUTABLE, math.nan)

    @property
    def has_value(self) -> bool:
        return self.status is AverageStatus.VALUE

    @property
    def is_no_data(self) -> bool:
        return self.status is AverageStatus.NO_DATA

    @property
    def is_not_computable(self) -> bool:
        return self.status is AverageStatus.NOT_COMPUTABLE

    def to_dict(self) -> Dict[str, Any]:
        # JSON has no NaN, both sentinels serialize as a null average
        return {
            "status": self.status.value,
            "average": self.value if self.has_value else None,
        }


@dataclass(frozen=True)
class ClassSection:
    id: int
    subject_id: int
    subject_name: str
    semester_id: int
    semester_name: str
    student_ids: Tuple[int, ...] = ()

    @property
    def display_name(self) -> str:
        return f"{self.subject_name} ({self.semester_name})"

    @property
    def enrollment_size(self) -> int:
        return len(self.student_ids)


@dataclass
class StudentAcademicSummary:
    student_id: int
    student_name: str
    grades_by_subject: Dict[str, List[GradeRecord]]
    subject_averages: Dict[str, float]
    overall_average: OverallAverageResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "grades_by_subject": {
                name: [g.to_dict() for g in grades]
                for name, grades in self.grades_by_subject.items()
            },
            "subject_averages": dict(self.subject_averages),
            "overall_average": self.overall_average.to_dict(),
        }
