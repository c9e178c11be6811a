import logging
from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.core.deps import get_job_repository, require_admin
from app.crud.job import JobRepository
from app.schemas.job import (
    JobCreateRequest,
    JobDeletedResponse,
    JobDetailEnvelope,
    JobEnvelope,
    JobListEnvelope,
    JobSearchFilters,
    JobUpdateRequest,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=JobEnvelope, dependencies=[Depends(require_admin)])
def create_job(
    request: JobCreateRequest,
    jobs: JobRepository = Depends(get_job_repository)
):
    """
    Create a new job.

    Body: { title, salary, equity, companyHandle }

    Authorization required: admin
    """
    job = jobs.create(request.model_dump(by_alias=True))
    return {"job": job}


@router.get("", response_model=JobListEnvelope)
def list_jobs(
    request: Request,
    jobs: JobRepository = Depends(get_job_repository)
):
    """
    List jobs ordered by title.

    Optional query filters:
    - minSalary: only jobs paying at least this much
    - hasEquity: true for jobs with non-zero equity
    - title: case-insensitive match on part of the title

    Any other query parameter is rejected with 400.
    """
    try:
        filters = JobSearchFilters.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    return {"jobs": jobs.find_all(filters.model_dump(by_alias=True, exclude_none=True))}


@router.get("/{job_id}", response_model=JobDetailEnvelope)
def get_job(job_id: int, jobs: JobRepository = Depends(get_job_repository)):
    """
    Retrieve a job by ID, with its company nested under `company`.
    """
    return {"job": jobs.get(job_id)}


@router.patch("/{job_id}", response_model=JobEnvelope, dependencies=[Depends(require_admin)])
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    jobs: JobRepository = Depends(get_job_repository)
):
    """
    Partially update a job.

    Body may include any of { title, salary, equity }; id and companyHandle
    cannot be changed.

    Authorization required: admin
    """
    job = jobs.update(job_id, request.model_dump(exclude_unset=True))
    return {"job": job}


@router.delete("/{job_id}", response_model=JobDeletedResponse, dependencies=[Depends(require_admin)])
def delete_job(job_id: int, jobs: JobRepository = Depends(get_job_repository)):
    """
    Delete a job by ID.

    Authorization required: admin
    """
    jobs.remove(job_id)
    return {"deleted": job_id}
