"""Distributional statistics over a scope of grade records."""

import statistics
from typing import Dict, Iterable, List, Optional, Tuple

from gradestats.core.grading import (
    MAX_TOP_STUDENTS,
    empty_distribution,
    is_passing,
    letter_for,
)
from gradestats.core.models import GradeRecord, ScopeKind, ScopeMetadata, ScopeStatistics

# scope -> (include subject averages, include top students)
SCOPE_SECTIONS: Dict[ScopeKind, Tuple[bool, bool]] = {
    ScopeKind.STUDENT: (True, False),
    ScopeKind.SUBJECT: (False, True),
    ScopeKind.CLASS: (False, True),
    ScopeKind.SEMESTER: (True, True),
    ScopeKind.OVERALL: (True, True),
}


def _mean(values: List[float]) -> float:
    return sum(values) / len(values)


def grade_distribution(scores: Iterable[float]) -> Dict[str, int]:
    distribution = empty_distribution()
    for score in scores:
        distribution[letter_for(score)] += 1
    return distribution


def subject_averages(records: Iterable[GradeRecord]) -> Dict[str, float]:
    grouped: Dict[str, List[float]] = {}
    for g in records:
        if not g.has_score or not g.has_subject:
            continue
        grouped.setdefault(g.subject_label, []).append(float(g.score))
    return {name: _mean(scores) for name, scores in grouped.items()}


def top_student_averages(records: Iterable[GradeRecord], limit: int = MAX_TOP_STUDENTS) -> Dict[str, float]:
    """
    Mean score per student, highest first, at most `limit` entries.
    Equal means are ordered by ascending student id.
    """
    grouped: Dict[int, List[float]] = {}
    names: Dict[int, str] = {}
    for g in records:
        if not g.has_score or g.student_id is None:
            continue
        grouped.setdefault(g.student_id, []).append(float(g.score))
        names.setdefault(g.student_id, g.student_label)

    ranked = sorted(
        ((student_id, _mean(scores)) for student_id, scores in grouped.items()),
        key=lambda item: (-item[1], item[0]),
    )

    top: Dict[str, float] = {}
    for student_id, average in ranked[:limit]:
        # two students sharing a display name: the better ranked one wins
        top.setdefault(names[student_id], average)
    return top


def _distinct(values: Iterable[Optional[int]]) -> int:
    return len({v for v in values if v is not None})


class StatisticsAggregator:
    """
    Builds ScopeStatistics for records the caller already filtered to a scope.
    An empty scope yields all-zero statistics, never NaN and never an error.
    """

    def aggregate(self, records: Iterable[GradeRecord], scope: ScopeMetadata) -> ScopeStatistics:
        if records is None:
            raise TypeError("records must be a list of GradeRecord, got None")
        records = list(records)

        result = ScopeStatistics(
            scope_kind=scope.kind,
            scope_id=scope.scope_id,
            scope_name=scope.scope_name,
            semester_id=scope.semester_id,
            semester_name=scope.semester_name,
        )

        scores = [float(g.score) for g in records if g.has_score]
        n = len(scores)
        if n == 0:
            return result

        average = _mean(scores)
        passing = sum(1 for s in scores if is_passing(s))

        result.average_score = average
        result.median_score = float(statistics.median(scores))
        result.min_score = min(scores)
        result.max_score = max(scores)
        result.standard_deviation = statistics.pstdev(scores, mu=average)
        result.total_grades = n
        result.passing_grades = passing
        result.failing_grades = n - passing
        result.passing_rate = passing / n * 100.0
        result.grade_distribution = grade_distribution(scores)

        with_subjects, with_top_students = SCOPE_SECTIONS[scope.kind]
        if with_subjects:
            result.subject_averages = subject_averages(records)
        if with_top_students:
            result.top_student_averages = top_student_averages(records)

        result.total_students, result.total_subjects = self._totals(records, scope)
        return result

    def _totals(self, records: List[GradeRecord], scope: ScopeMetadata) -> Tuple[int, int]:
        students = _distinct(g.student_id for g in records)
        subjects = _distinct(g.subject_id for g in records)

        if scope.kind is ScopeKind.STUDENT:
            return 1, subjects
        if scope.kind is ScopeKind.SUBJECT:
            return students, 1
        if scope.kind is ScopeKind.CLASS:
            enrolled = scope.enrollment_size if scope.enrollment_size is not None else students
            return enrolled, 1
        return students, subjects
