import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import get_admin_user
from jobly.core.exceptions import BadRequestError, format_validation_errors
from jobly.crud import job as job_crud
from jobly.models.user import User
from jobly.schemas.job import (
    JobCreateRequest,
    JobUpdateRequest,
    JobSearchFilters,
    JobResponse,
    JobListItem,
    JobDetailResponse,
    JobDeleteResponse,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


def job_search_filters(request: Request) -> Dict[str, Any]:
    """Validate the query string against JobSearchFilters."""
    try:
        filters = JobSearchFilters.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise BadRequestError(format_validation_errors(e.errors()))

    return filters.model_dump(by_alias=True, exclude_none=True)


@router.post("/", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """
    Create a job posting for an existing company. Admin only.
    """
    return job_crud.create(db, request.model_dump(by_alias=True))


@router.get("/", response_model=list[JobListItem])
def list_jobs(
    filters: Dict[str, Any] = Depends(job_search_filters),
    db: Session = Depends(get_db)
):
    """
    List jobs ordered by title, each with its company's name.

    Optional filters:
        title: case-insensitive substring of the title
        minSalary: minimum salary
        hasEquity: true for jobs with non-zero equity only
    """
    return job_crud.find_all(db, filters)


@router.get("/{job_id}", response_model=JobDetailResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job by ID, with its company nested."""
    return job_crud.get(db, job_id)


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """
    Update some of a job's fields. Admin only.

    Fields can be: {title, salary, equity}
    """
    return job_crud.update(db, job_id, request.model_dump(by_alias=True, exclude_unset=True))


@router.delete("/{job_id}", response_model=JobDeleteResponse)
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Delete a job. Admin only."""
    job_crud.remove(db, job_id)
    logger.info(f"Job {job_id} deleted by {admin_user.username}")
    return {"deleted": job_id}
