# Services: Company operations over MongoDB

from company_api.services.company_service import (
    CompanyNotFoundError,
    CompanyPersistenceError,
    CompanyService,
    CompanyServiceError,
    CompanyValidationError,
    InvalidCompanyIdError,
    get_company_service,
)

__all__ = [
    "CompanyService",
    "CompanyServiceError",
    "CompanyNotFoundError",
    "CompanyPersistenceError",
    "CompanyValidationError",
    "InvalidCompanyIdError",
    "get_company_service",
]
