"""
Pydantic models for documents read from the MongoDB `companies` collection.

Stored documents may be edited directly in the database, so read models accept
whatever is there: every field is optional and unknown fields are passed through.
Write-time validation lives in `company_api.schemas.company.CompanyCreate`.
"""

from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _stringify_object_ids(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _stringify_object_ids(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_stringify_object_ids(v) for v in value]
    return value


class StoredDocument(BaseModel):
    """A stored document, `_id` exposed as a hex string `id`."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(validation_alias="_id")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> Any:
        if isinstance(v, ObjectId):
            return str(v)
        return v

    @model_validator(mode="before")
    @classmethod
    def stringify_nested_object_ids(cls, data: Any) -> Any:
        return _stringify_object_ids(data)


class CompanySummary(StoredDocument):
    """Projection used by the list endpoint: id and name only."""

    name: Any = None


class CompanyInDB(StoredDocument):
    name: Any = None
    address: Any = None
    city: Any = None
    country: Any = None
    email: Any = None
    phone: Any = None
    benef_owners: Any = None
