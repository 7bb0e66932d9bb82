# Domain models: documents stored in MongoDB

from company_api.models.company import (
    CompanyInDB,
    CompanySummary,
    StoredDocument,
)

__all__ = [
    "CompanyInDB",
    "CompanySummary",
    "StoredDocument",
]
