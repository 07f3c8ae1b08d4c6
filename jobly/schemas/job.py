from decimal import Decimal
from typing import Optional
from pydantic import ConfigDict, Field

from jobly.schemas.company import CamelModel, CompanyResponse


class JobCreateRequest(CamelModel):
    """Schema for creating a new job"""
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25)


class JobUpdateRequest(CamelModel):
    """Schema for a partial job update; id and companyHandle can't be changed"""
    model_config = ConfigDict(extra="forbid")

    title: str = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)


class JobSearchFilters(CamelModel):
    """Query-string filters for listing jobs"""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    min_salary: Optional[int] = Field(None, ge=0)
    has_equity: Optional[bool] = None


class JobResponse(CamelModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None
    company_handle: str


class JobListItem(JobResponse):
    """Job as returned by the listing, with its company's name"""
    company_name: Optional[str] = None


class JobDetailResponse(CamelModel):
    """Single job with the owning company nested in place of companyHandle"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None
    company: CompanyResponse


class JobDeleteResponse(CamelModel):
    deleted: int
