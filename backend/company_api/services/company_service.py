"""
Company operations against the MongoDB `companies` collection.
List, fetch by id, and create; errors are raised as CompanyServiceError subclasses
so endpoints can map them to HTTP responses.
"""

import logging
from collections.abc import Mapping
from typing import Any

from bson import ObjectId
from fastapi import Depends
from pydantic import ValidationError
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from company_api.core.database import get_company_collection
from company_api.models.company import CompanyInDB, CompanySummary
from company_api.schemas.company import REQUIRED_FIELDS, CompanyCreate

logger = logging.getLogger(__name__)

SUMMARY_PROJECTION = {"_id": 1, "name": 1}


class CompanyServiceError(Exception):
    """Base for company operation failures. `message` is safe to return to clients."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidCompanyIdError(CompanyServiceError):
    """The supplied id is not a well-formed ObjectId."""


class CompanyNotFoundError(CompanyServiceError):
    """No document exists with the supplied id."""


class CompanyValidationError(CompanyServiceError):
    """The create body is missing required fields or has fields of the wrong type."""


class CompanyPersistenceError(CompanyServiceError):
    """MongoDB rejected the write."""


def _describe_validation_error(exc: ValidationError) -> str:
    fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
    return f"Company validation failed. Invalid body fields: {', '.join(fields)}."


class CompanyService:
    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    def list_companies(self) -> list[CompanySummary]:
        """Every company, projected to id and name."""
        cursor = self.collection.find({}, SUMMARY_PROJECTION)
        companies = [CompanySummary.model_validate(doc) for doc in cursor]
        logger.debug("Listed %d companies", len(companies))
        return companies

    def get_company(self, company_id: str) -> CompanyInDB:
        if not ObjectId.is_valid(company_id):
            raise InvalidCompanyIdError(
                f"Supplied Company id '{company_id}' is not a valid MongoDB identifier."
            )
        doc = self.collection.find_one({"_id": ObjectId(company_id)})
        if not doc:
            raise CompanyNotFoundError(f"No existing item found with supplied id '{company_id}'.")
        return CompanyInDB.model_validate(doc)

    def create_company(self, payload: Mapping[str, Any]) -> CompanyInDB:
        """Validate, trim and insert a new company. Nothing is written if validation fails."""
        missing = [field for field in REQUIRED_FIELDS if field not in payload]
        if missing:
            logger.info("Rejected company create, missing fields: %s", ", ".join(missing))
            raise CompanyValidationError("Company validation failed. Required body fields are missing.")
        try:
            body = CompanyCreate.model_validate(dict(payload))
        except ValidationError as e:
            raise CompanyValidationError(_describe_validation_error(e)) from e

        document = body.to_document()
        try:
            result = self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error("Insert company error: %s", str(e))
            raise CompanyPersistenceError(f"Company could not be stored: {e}") from e

        document["_id"] = result.inserted_id
        logger.info("Created company %s (%s)", result.inserted_id, body.name)
        return CompanyInDB.model_validate(document)


def get_company_service(collection: Collection = Depends(get_company_collection)) -> CompanyService:
    """Dependency: return a CompanyService bound to the companies collection."""
    return CompanyService(collection)
