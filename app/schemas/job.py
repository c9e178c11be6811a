from decimal import Decimal, InvalidOperation
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


def _validate_equity(v: Optional[str]) -> Optional[str]:
    """Equity travels as text but must be a decimal between 0 and 1."""
    if v is None:
        return v
    try:
        value = Decimal(v)
    except InvalidOperation:
        raise ValueError("equity must be a decimal number")
    if not value.is_finite() or value < 0 or value > 1:
        raise ValueError("equity must be between 0 and 1")
    return v


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[str] = None
    company_handle: str = Field(..., alias="companyHandle", min_length=1, max_length=25)

    @field_validator("equity")
    @classmethod
    def check_equity(cls, v: Optional[str]) -> Optional[str]:
        return _validate_equity(v)

    class Config:
        extra = "forbid"


class JobUpdateRequest(BaseModel):
    """
    Schema for a partial job update.

    id and companyHandle cannot change; sending them (or anything else
    unknown) is rejected.
    """
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("title cannot be null")
        return v

    @field_validator("equity")
    @classmethod
    def check_equity(cls, v: Optional[str]) -> Optional[str]:
        return _validate_equity(v)

    class Config:
        extra = "forbid"


class JobSearchFilters(BaseModel):
    """Query-string filters accepted by GET /jobs"""
    min_salary: Optional[int] = Field(None, alias="minSalary", ge=0)
    has_equity: Optional[bool] = Field(None, alias="hasEquity")
    title: Optional[str] = None

    class Config:
        extra = "forbid"


class CompanyResponse(BaseModel):
    """Company as nested in a job detail"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True


class JobBase(BaseModel):
    """Fields every job response carries"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None

    class Config:
        populate_by_name = True


class JobResponse(JobBase):
    """Schema for job response"""
    company_handle: str = Field(..., alias="companyHandle")


class JobListItem(JobResponse):
    """Job as listed, with the owning company's name"""
    company_name: Optional[str] = Field(None, alias="companyName")


class JobDetail(JobBase):
    """Single job with its company nested in place of the handle"""
    company: Optional[CompanyResponse] = None


class JobEnvelope(BaseModel):
    job: JobResponse


class JobListEnvelope(BaseModel):
    jobs: List[JobListItem]


class JobDetailEnvelope(BaseModel):
    job: JobDetail


class JobDeletedResponse(BaseModel):
    deleted: int
