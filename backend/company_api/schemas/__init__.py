# Pydantic request/response schemas (API contract).

from company_api.schemas.common import ErrorResponse, HealthResponse
from company_api.schemas.company import (
    REQUIRED_FIELDS,
    CompanyCreate,
    CompanyDetailResponse,
    CompanyListResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "REQUIRED_FIELDS",
    "CompanyCreate",
    "CompanyDetailResponse",
    "CompanyListResponse",
]
