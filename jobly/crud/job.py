"""
CRUD operations for jobs.

List and update results carry a flat companyHandle; get() nests the owning
company under "company" instead.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import integrity_error_detail, query
from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.core.sql import FilterClause, sql_for_partial_update
from jobly.crud.company import COMPANY_COLUMNS

logger = logging.getLogger(__name__)

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

UPDATABLE_FIELDS = frozenset({"title", "salary", "equity"})


def create(db: Session, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a job.

    Args:
        db: Database session
        data: {title, salary, equity, companyHandle}

    Returns:
        {id, title, salary, equity, companyHandle}

    Raises:
        BadRequestError: If companyHandle doesn't reference a company, or
            the data violates a table constraint
    """
    company_handle = data["companyHandle"]

    try:
        rows = query(
            db,
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
                VALUES ($1, $2, $3, $4)
                RETURNING {JOB_COLUMNS}""",
            [
                data["title"],
                data.get("salary"),
                data.get("equity"),
                company_handle,
            ]
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not query(db, "SELECT handle FROM companies WHERE handle = $1", [company_handle]):
            logger.warning(f"Rejected job for unknown company: {company_handle}")
            raise BadRequestError(f"No company: {company_handle}")
        logger.warning(f"Rejected invalid job for {company_handle}: {integrity_error_detail(e)}")
        raise BadRequestError(f"Invalid job data: {integrity_error_detail(e)}")

    job = rows[0]
    logger.info(f"Created job {job['id']} for company {company_handle}")
    return job


def job_filter_clause(filters: Optional[Dict[str, Any]] = None) -> FilterClause:
    """
    Build the WHERE clause for job search filters.

    Recognized filters:
        title: case-insensitive substring of the job title
        minSalary: salary of at least this amount
        hasEquity: if True, only jobs with non-zero equity; False or absent
            applies no equity filter at all
    """
    filters = filters or {}
    title = filters.get("title")
    min_salary = filters.get("minSalary")

    clause = FilterClause()
    if title is not None:
        clause.add_contains("j.title", title)
    if min_salary is not None:
        clause.add("j.salary >= {}", min_salary)
    if filters.get("hasEquity") is True:
        clause.add_literal("j.equity > 0")

    return clause


def find_all(db: Session, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Find all jobs matching every supplied filter, ordered by title.

    Returns:
        [{id, title, salary, equity, companyHandle, companyName}, ...]
    """
    clause = job_filter_clause(filters)

    sql = f"""SELECT j.id,
                     j.title,
                     j.salary,
                     j.equity,
                     j.company_handle AS "companyHandle",
                     c.name AS "companyName"
              FROM jobs AS j
                LEFT JOIN companies AS c ON c.handle = j.company_handle{clause.where}
              ORDER BY j.title"""
    return query(db, sql, clause.args)


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Given a job id, return the job with its company nested.

    Returns:
        {id, title, salary, equity, company}
        where company is {handle, name, description, numEmployees, logoUrl}

    Raises:
        NotFoundError: If no job has this id
    """
    rows = query(db, f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1", [job_id])
    if not rows:
        raise NotFoundError(f"No job: {job_id}")

    job = rows[0]
    company_handle = job.pop("companyHandle")

    company_rows = query(db, f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = $1", [company_handle])
    job["company"] = company_rows[0]

    return job


def update(db: Session, job_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job; only the supplied fields change.

    Data can include: {title, salary, equity}

    Returns:
        {id, title, salary, equity, companyHandle}

    Raises:
        BadRequestError: If data is empty or names a field that can't change,
            or the new values violate a table constraint
        NotFoundError: If no job has this id
    """
    set_cols, values = sql_for_partial_update(data, {}, allowed=UPDATABLE_FIELDS)
    id_idx = len(values) + 1

    sql = f"""UPDATE jobs
              SET {set_cols}
              WHERE id = ${id_idx}
              RETURNING {JOB_COLUMNS}"""
    try:
        rows = query(db, sql, [*values, job_id])
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Rejected invalid update of job {job_id}: {integrity_error_detail(e)}")
        raise BadRequestError(f"Invalid job data: {integrity_error_detail(e)}")

    if not rows:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    logger.info(f"Updated job {job_id}: {', '.join(data)}")
    return rows[0]


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job.

    Raises:
        NotFoundError: If no job has this id
    """
    rows = query(db, "DELETE FROM jobs WHERE id = $1 RETURNING id", [job_id])

    if not rows:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    logger.info(f"Deleted job {job_id}")
