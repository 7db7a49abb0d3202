import logging
from typing import Dict, List, Optional

from gradestats.core.aggregator import StatisticsAggregator
from gradestats.core.averages import AverageCalculator
from gradestats.core.models import (
    GradeRecord,
    OverallAverageResult,
    ScopeKind,
    ScopeMetadata,
    ScopeStatistics,
    StudentAcademicSummary,
)
from gradestats.core.repositories import GradeRepository

logger = logging.getLogger(__name__)

OVERALL_SCOPE_NAME = "Overall System Statistics"


class GradeReportEngine:
    """
    Fetches the records of one scope from the repository and hands them to
    the calculator / aggregator. Unknown ids raise RecordNotFoundError from
    the repository before any computation happens.
    """

    def __init__(
        self,
        repo: GradeRepository,
        calculator: Optional[AverageCalculator] = None,
        aggregator: Optional[StatisticsAggregator] = None,
    ):
        self.repo = repo
        self.calculator = calculator or AverageCalculator()
        self.aggregator = aggregator or StatisticsAggregator()

    # ---------- statistics ----------
    def student_statistics(self, student_id: int, semester_id: Optional[int] = None) -> ScopeStatistics:
        logger.info("Calculating statistics for student ID: %s and semester ID: %s", student_id, semester_id)
        grades = self.repo.find_by_student(student_id, semester_id)
        scope = ScopeMetadata(
            kind=ScopeKind.STUDENT,
            scope_id=student_id,
            scope_name=self.repo.student_name(student_id),
            semester_id=semester_id,
            semester_name=self._semester_name(semester_id),
        )
        return self.aggregator.aggregate(grades, scope)

    def subject_statistics(self, subject_id: int, semester_id: Optional[int] = None) -> ScopeStatistics:
        logger.info("Calculating statistics for subject ID: %s and semester ID: %s", subject_id, semester_id)
        grades = self.repo.find_by_subject(subject_id, semester_id)
        scope = ScopeMetadata(
            kind=ScopeKind.SUBJECT,
            scope_id=subject_id,
            scope_name=self.repo.subject_name(subject_id),
            semester_id=semester_id,
            semester_name=self._semester_name(semester_id),
        )
        return self.aggregator.aggregate(grades, scope)

    def class_statistics(self, class_id: int) -> ScopeStatistics:
        logger.info("Calculating statistics for class section ID: %s", class_id)
        section, grades = self.repo.find_by_class_section(class_id)
        if section.enrollment_size == 0:
            logger.warning("No students found in class with ID: %s", class_id)
        scope = ScopeMetadata(
            kind=ScopeKind.CLASS,
            scope_id=class_id,
            scope_name=section.display_name,
            semester_id=section.semester_id,
            semester_name=section.semester_name,
            enrollment_size=section.enrollment_size,
        )
        return self.aggregator.aggregate(grades, scope)

    def semester_statistics(self, semester_id: int) -> ScopeStatistics:
        logger.info("Calculating statistics for semester ID: %s", semester_id)
        grades = self.repo.find_by_semester(semester_id)
        name = self.repo.semester_name(semester_id)
        scope = ScopeMetadata(
            kind=ScopeKind.SEMESTER,
            scope_id=semester_id,
            scope_name=name,
            semester_id=semester_id,
            semester_name=name,
        )
        return self.aggregator.aggregate(grades, scope)

    def overall_statistics(self) -> ScopeStatistics:
        logger.info("Calculating overall statistics")
        scope = ScopeMetadata(kind=ScopeKind.OVERALL, scope_name=OVERALL_SCOPE_NAME)
        return self.aggregator.aggregate(self.repo.find_all(), scope)

    # ---------- averages ----------
    def overall_average(self, student_id: int) -> OverallAverageResult:
        grades = self.repo.find_by_student(student_id)
        if not grades:
            logger.warning("No grades found for student ID: %s", student_id)
        return self.calculator.overall_average(grades)

    def subject_average(self, student_id: int, subject_id: int) -> Optional[float]:
        self.repo.subject_name(subject_id)
        return self.calculator.subject_average(self.repo.find_by_student(student_id), subject_id)

    def all_subject_averages(self, student_id: int) -> Dict[str, float]:
        return self.calculator.all_subject_averages(self.repo.find_by_student(student_id))

    def academic_summary(self, student_id: int) -> StudentAcademicSummary:
        grades = self.repo.find_by_student(student_id)
        by_subject: Dict[str, List[GradeRecord]] = {}
        for g in grades:
            if g.has_subject:
                by_subject.setdefault(g.subject_label, []).append(g)
        return StudentAcademicSummary(
            student_id=student_id,
            student_name=self.repo.student_name(student_id),
            grades_by_subject=by_subject,
            subject_averages=self.calculator.all_subject_averages(grades),
            overall_average=self.calculator.overall_average(grades),
        )

    def _semester_name(self, semester_id: Optional[int]) -> Optional[str]:
        if semester_id is None:
            return None
        return self.repo.semester_name(semester_id)
