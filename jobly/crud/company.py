"""
CRUD operations for companies.

Queries are written as SQL templates with positional placeholders and run
through jobly.core.database.query. Results are projections keyed by the
external (camelCase) field names the API exposes.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import integrity_error_detail, query
from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.core.sql import FilterClause, sql_for_partial_update

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = (
    'handle, name, description, '
    'num_employees AS "numEmployees", logo_url AS "logoUrl"'
)

# External field name -> column name, where they differ
COMPANY_JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

UPDATABLE_FIELDS = frozenset({"name", "description", "numEmployees", "logoUrl"})


def create(db: Session, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a company.

    Args:
        db: Database session
        data: {handle, name, description, numEmployees, logoUrl}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        BadRequestError: If a company with this handle already exists, or
            the data violates a table constraint
    """
    handle = data["handle"]

    duplicate_check = query(db, "SELECT handle FROM companies WHERE handle = $1", [handle])
    if duplicate_check:
        logger.warning(f"Rejected duplicate company: {handle}")
        raise BadRequestError(f"Duplicate company: {handle}")

    try:
        rows = query(
            db,
            f"""INSERT INTO companies
                (handle, name, description, num_employees, logo_url)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {COMPANY_COLUMNS}""",
            [
                handle,
                data["name"],
                data["description"],
                data.get("numEmployees"),
                data.get("logoUrl"),
            ]
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # Another request may have inserted the same handle after our check
        if query(db, "SELECT handle FROM companies WHERE handle = $1", [handle]):
            logger.warning(f"Rejected duplicate company on insert: {handle}")
            raise BadRequestError(f"Duplicate company: {handle}")
        logger.warning(f"Rejected invalid company {handle}: {integrity_error_detail(e)}")
        raise BadRequestError(f"Invalid company data: {integrity_error_detail(e)}")

    logger.info(f"Created company {handle}")
    return rows[0]


def company_filter_clause(filters: Optional[Dict[str, Any]] = None) -> FilterClause:
    """
    Build the WHERE clause for company search filters.

    Recognized filters:
        name: case-insensitive substring of the company name
        minEmployees: at least this many employees
        maxEmployees: no more than this many employees

    Raises:
        BadRequestError: If minEmployees is greater than maxEmployees
    """
    filters = filters or {}
    name = filters.get("name")
    min_employees = filters.get("minEmployees")
    max_employees = filters.get("maxEmployees")

    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise BadRequestError("minEmployees cannot be greater than maxEmployees")

    clause = FilterClause()
    if name is not None:
        clause.add_contains("name", name)
    if min_employees is not None:
        clause.add("num_employees >= {}", min_employees)
    if max_employees is not None:
        clause.add("num_employees <= {}", max_employees)

    return clause


def find_all(db: Session, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    Find all companies matching every supplied filter, ordered by name.

    Returns:
        [{handle, name, description, numEmployees, logoUrl}, ...]
    """
    clause = company_filter_clause(filters)

    sql = f"SELECT {COMPANY_COLUMNS} FROM companies{clause.where} ORDER BY name"
    return query(db, sql, clause.args)


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Given a company handle, return data about the company.

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = query(db, f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = $1", [handle])

    if not rows:
        raise NotFoundError(f"No company: {handle}")

    return rows[0]


def update(db: Session, handle: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; only the supplied fields change.

    Data can include: {name, description, numEmployees, logoUrl}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        BadRequestError: If data is empty or names a field that can't change,
            or the new values violate a table constraint
        NotFoundError: If no company has this handle
    """
    set_cols, values = sql_for_partial_update(data, COMPANY_JS_TO_SQL, allowed=UPDATABLE_FIELDS)
    handle_idx = len(values) + 1

    sql = f"""UPDATE companies
              SET {set_cols}
              WHERE handle = ${handle_idx}
              RETURNING {COMPANY_COLUMNS}"""
    try:
        rows = query(db, sql, [*values, handle])
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Rejected invalid update of company {handle}: {integrity_error_detail(e)}")
        raise BadRequestError(f"Invalid company data: {integrity_error_detail(e)}")

    if not rows:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Updated company {handle}: {', '.join(data)}")
    return rows[0]


def remove(db: Session, handle: str) -> None:
    """
    Delete a company (and, through the foreign key, its jobs).

    Raises:
        NotFoundError: If no company has this handle
    """
    rows = query(db, "DELETE FROM companies WHERE handle = $1 RETURNING handle", [handle])

    if not rows:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Deleted company {handle}")
