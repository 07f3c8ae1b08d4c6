"""
Pydantic schemas for companies.

Field names are snake_case in Python and camelCase on the wire
(numEmployees, logoUrl).
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exposing camelCase aliases"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CompanyCreateRequest(CamelModel):
    """Schema for creating a new company"""
    model_config = ConfigDict(extra="forbid")

    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None


class CompanyUpdateRequest(CamelModel):
    """Schema for a partial company update; handle can't be changed"""
    model_config = ConfigDict(extra="forbid")

    # Explicit null is rejected for the NOT NULL columns
    name: str = Field(None, min_length=1)
    description: str = Field(None, min_length=1)
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None


class CompanySearchFilters(CamelModel):
    """Query-string filters for listing companies"""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    min_employees: Optional[int] = Field(None, ge=0)
    max_employees: Optional[int] = Field(None, ge=0)


class CompanyResponse(CamelModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None


class CompanyDeleteResponse(CamelModel):
    deleted: str
