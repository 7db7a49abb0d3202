# gradestats/core/averages.py
import logging
from typing import Dict, Iterable, List, Optional

from gradestats.core.models import GradeRecord, OverallAverageResult

logger = logging.getLogger(__name__)


def _require_records(records: Optional[Iterable[GradeRecord]]) -> List[GradeRecord]:
    if records is None:
        raise TypeError("records must be a list of GradeRecord, got None")
    return list(records)


def _mean(scores: List[float]) -> float:
    return sum(scores) / len(scores)


class AverageCalculator:
    """
    Averages over one student's grade records:
    - overall_average: subject means weighted by subject coefficient.
      Subjects with a missing or non-positive coefficient are left out.
    - subject_average / all_subject_averages: plain means, coefficients ignored.
    """

    def _group_by_subject(self, records: List[GradeRecord]) -> Dict[int, List[GradeRecord]]:
        groups: Dict[int, List[GradeRecord]] = {}
        for g in records:
            if not g.has_score or not g.has_subject:
                continue
            groups.setdefault(g.subject_id, []).append(g)
        return groups

    def overall_average(self, records: Iterable[GradeRecord]) -> OverallAverageResult:
        groups = self._group_by_subject(_require_records(records))
        if not groups:
            return OverallAverageResult.no_data()

        weighted_sum = 0.0
        weight_sum = 0.0
        for subject_id, grades in groups.items():
            coefficient = grades[0].subject_coefficient
            if coefficient is None or coefficient <= 0:
                logger.warning(
                    "Subject '%s' (id=%s) has invalid coefficient %s, skipping for overall average",
                    grades[0].subject_name, subject_id, coefficient,
                )
                continue
            subject_mean = _mean([float(g.score) for g in grades])
            weighted_sum += subject_mean * coefficient
            weight_sum += coefficient

        if weight_sum == 0:
            logger.warning("Total coefficient sum is 0, cannot calculate weighted average")
            return OverallAverageResult.not_computable()

        return OverallAverageResult.of(weighted_sum / weight_sum)

    def subject_average(self, records: Iterable[GradeRecord], subject_id: int) -> Optional[float]:
        scores = [
            float(g.score) for g in _require_records(records)
            if g.has_score and g.subject_id == subject_id
        ]
        if not scores:
            logger.debug("No grades found for subject id=%s", subject_id)
            return None
        return _mean(scores)

    def all_subject_averages(self, records: Iterable[GradeRecord]) -> Dict[str, float]:
        groups = self._group_by_subject(_require_records(records))
        averages: Dict[str, float] = {}
        for subject_id, grades in groups.items():
            key = grades[0].subject_label
            if key in averages:
                # distinct subjects sharing a name keep separate entries
                logger.warning(
                    "Subject name '%s' is shared by several subjects, reporting id=%s as '%s (%s)'",
                    key, subject_id, key, subject_id,
                )
                key = f"{key} ({subject_id})"
            averages[key] = _mean([float(g.score) for g in grades])
        return averages
