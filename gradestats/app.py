import logging
from datetime import date
from functools import lru_cache
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from gradestats.core.aggregator import StatisticsAggregator
from gradestats.core.averages import AverageCalculator
from gradestats.core.engine import GradeReportEngine
from gradestats.core.models import GradeRecord, ScopeKind, ScopeMetadata
from gradestats.core.repositories import JsonGradeRepository, RecordNotFoundError
from gradestats.settings import settings
from gradestats.storage.loaders import load_classes, load_grades, load_students
from gradestats.utils.logger_setup import setup_logging

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_engine() -> GradeReportEngine:
    root = settings.DATA_DIR
    logger.info("Loading grade data from %s", root)
    repo = JsonGradeRepository(load_grades(root), load_classes(root), load_students(root))
    return GradeReportEngine(repo)


app = FastAPI(title=settings.APP_TITLE)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RecordNotFoundError)
async def record_not_found_handler(request: Request, exc: RecordNotFoundError):
    logger.warning("Cannot fetch statistics: %s", exc)
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


# --------- Request models ----------
class GradeInput(BaseModel):
    score: Optional[float] = Field(None, ge=0, le=100)
    subject_id: Optional[int] = None
    subject_name: Optional[str] = None
    subject_coefficient: Optional[float] = Field(None, ge=0)
    student_id: Optional[int] = None
    student_name: Optional[str] = None
    semester_id: Optional[int] = None
    semester_name: Optional[str] = None
    date_assigned: Optional[date] = None
    comments: Optional[str] = None

    def to_record(self) -> GradeRecord:
        return GradeRecord(**self.model_dump())


class StatisticsRequest(BaseModel):
    kind: ScopeKind
    scope_id: Optional[int] = None
    scope_name: Optional[str] = None
    semester_id: Optional[int] = None
    semester_name: Optional[str] = None
    enrollment_size: Optional[int] = Field(None, ge=0)
    grades: List[GradeInput]


class AverageRequest(BaseModel):
    grades: List[GradeInput]
    subject_id: Optional[int] = None


# --------- Statistics endpoints ----------
@app.get("/statistics/student/{student_id}")
def student_statistics(
    student_id: int,
    semester_id: Optional[int] = Query(None),
    engine: GradeReportEngine = Depends(get_engine),
) -> Dict[str, Any]:
    return engine.student_statistics(student_id, semester_id).to_dict()


@app.get("/statistics/subject/{subject_id}")
def subject_statistics(
    subject_id: int,
    semester_id: Optional[int] = Query(None),
    engine: GradeReportEngine = Depends(get_engine),
) -> Dict[str, Any]:
    return engine.subject_statistics(subject_id, semester_id).to_dict()


@app.get("/statistics/class/{class_id}")
def class_statistics(class_id: int, engine: GradeReportEngine = Depends(get_engine)) -> Dict[str, Any]:
    return engine.class_statistics(class_id).to_dict()


@app.get("/statistics/semester/{semester_id}")
def semester_statistics(semester_id: int, engine: GradeReportEngine = Depends(get_engine)) -> Dict[str, Any]:
    return engine.semester_statistics(semester_id).to_dict()


@app.get("/statistics/overall")
def overall_statistics(engine: GradeReportEngine = Depends(get_engine)) -> Dict[str, Any]:
    return engine.overall_statistics().to_dict()


# --------- Average endpoints ----------
@app.get("/students/{student_id}/average")
def student_average(student_id: int, engine: GradeReportEngine = Depends(get_engine)) -> Dict[str, Any]:
    return engine.overall_average(student_id).to_dict()


@app.get("/students/{student_id}/subjects/{subject_id}/average")
def student_subject_average(
    student_id: int,
    subject_id: int,
    engine: GradeReportEngine = Depends(get_engine),
) -> Dict[str, Any]:
    average = engine.subject_average(student_id, subject_id)
    return {"subject_id": subject_id, "average": average}


@app.get("/students/{student_id}/subject-averages")
def student_subject_averages(student_id: int, engine: GradeReportEngine = Depends(get_engine)) -> Dict[str, float]:
    return engine.all_subject_averages(student_id)


@app.get("/students/{student_id}/summary")
def student_summary(student_id: int, engine: GradeReportEngine = Depends(get_engine)) -> Dict[str, Any]:
    return engine.academic_summary(student_id).to_dict()


# --------- Ad-hoc computation ----------
@app.post("/compute/statistics")
def compute_statistics(req: StatisticsRequest):
    try:
        scope = ScopeMetadata(
            kind=req.kind,
            scope_id=req.scope_id,
            scope_name=req.scope_name,
            semester_id=req.semester_id,
            semester_name=req.semester_name,
            enrollment_size=req.enrollment_size,
        )
        records = [g.to_record() for g in req.grades]
        return StatisticsAggregator().aggregate(records, scope).to_dict()

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error calculating statistics")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Compute failed", "details": str(e)}
        )


@app.post("/compute/average")
def compute_average(req: AverageRequest):
    try:
        calculator = AverageCalculator()
        records = [g.to_record() for g in req.grades]
        out: Dict[str, Any] = {
            "overall_average": calculator.overall_average(records).to_dict(),
            "subject_averages": calculator.all_subject_averages(records),
        }
        if req.subject_id is not None:
            out["subject_average"] = calculator.subject_average(records, req.subject_id)
        return out

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error calculating averages")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Compute failed", "details": str(e)}
        )


if __name__ == "__main__":
    uvicorn.run("gradestats.app:app", host=settings.HOST, port=settings.PORT, reload=True)
