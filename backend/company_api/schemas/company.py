"""
Company schemas for the API: create body and response envelopes.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from company_api.models.company import CompanyInDB, CompanySummary

REQUIRED_FIELDS = ("name", "address", "city", "country")


def _is_falsy(value: Any) -> bool:
    """None, false, "", 0 and NaN. Empty lists and objects are values, not absences."""
    if value is None or value is False or value == "":
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or value != value
    return False


class CompanyCreate(BaseModel):
    """Request body for creating a company. Strings are trimmed; falsy optionals become None."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str
    address: str
    city: str
    country: str
    email: str | None = None
    phone: str | None = None
    benef_owners: Any = None

    @field_validator("email", "phone", "benef_owners", mode="before")
    @classmethod
    def falsy_to_none(cls, v: Any) -> Any:
        if _is_falsy(v):
            return None
        return v

    def to_document(self) -> dict[str, Any]:
        """Fields to insert; absent optionals are left out of the document."""
        return {key: value for key, value in self.model_dump().items() if value is not None}


class CompanyListResponse(BaseModel):
    """List envelope: id and name of every company."""
    response: list[CompanySummary]


class CompanyDetailResponse(BaseModel):
    """Single company envelope (get and create)."""
    response: CompanyInDB
