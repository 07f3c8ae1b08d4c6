import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import get_admin_user
from jobly.core.exceptions import BadRequestError, format_validation_errors
from jobly.crud import company as company_crud
from jobly.models.user import User
from jobly.schemas.company import (
    CompanyCreateRequest,
    CompanyUpdateRequest,
    CompanySearchFilters,
    CompanyResponse,
    CompanyDeleteResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


def company_search_filters(request: Request) -> Dict[str, Any]:
    """
    Validate the query string against CompanySearchFilters.

    Unknown keys and mistyped values are rejected with a 400.
    """
    try:
        filters = CompanySearchFilters.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise BadRequestError(format_validation_errors(e.errors()))

    return filters.model_dump(by_alias=True, exclude_none=True)


@router.post("/", status_code=201, response_model=CompanyResponse)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """
    Create a company. Admin only.

    Returns 400 if a company with the same handle already exists.
    """
    return company_crud.create(db, request.model_dump(by_alias=True))


@router.get("/", response_model=list[CompanyResponse])
def list_companies(
    filters: Dict[str, Any] = Depends(company_search_filters),
    db: Session = Depends(get_db)
):
    """
    List companies ordered by name.

    Optional filters:
        name: case-insensitive substring of the name
        minEmployees / maxEmployees: inclusive employee count bounds
    """
    return company_crud.find_all(db, filters)


@router.get("/{handle}", response_model=CompanyResponse)
def get_company(handle: str, db: Session = Depends(get_db)):
    """Retrieve a company by handle."""
    return company_crud.get(db, handle)


@router.patch("/{handle}", response_model=CompanyResponse)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """
    Update some of a company's fields. Admin only.

    Fields can be: {name, description, numEmployees, logoUrl}
    """
    return company_crud.update(db, handle, request.model_dump(by_alias=True, exclude_unset=True))


@router.delete("/{handle}", response_model=CompanyDeleteResponse)
def delete_company(
    handle: str,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    """Delete a company and its jobs. Admin only."""
    company_crud.remove(db, handle)
    logger.info(f"Company {handle} deleted by {admin_user.username}")
    return {"deleted": handle}
