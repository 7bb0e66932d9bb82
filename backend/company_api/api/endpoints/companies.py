"""
Companies endpoints. List, fetch by id, and create Company documents in MongoDB.
Responses use the {"response": ...} / {"error": ...} envelope.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from company_api.schemas.common import ErrorResponse
from company_api.schemas.company import CompanyDetailResponse, CompanyListResponse
from company_api.services.company_service import (
    CompanyNotFoundError,
    CompanyService,
    CompanyServiceError,
    InvalidCompanyIdError,
    get_company_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["companies"])

JSON_CONTENT_TYPES = ("application/json",)
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class BodyParseError(Exception):
    pass


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


async def read_body(request: Request) -> dict[str, Any]:
    """Parse a JSON or URL-encoded body into a dict. Other or missing bodies parse as empty."""
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type in JSON_CONTENT_TYPES or content_type.endswith("+json"):
        raw = await request.body()
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise BodyParseError(f"Malformed JSON body: {e}") from e
        if not isinstance(data, dict):
            raise BodyParseError("Request body must be a JSON object.")
        return data
    if content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return {key: value for key, value in form.items()}
    return {}


@router.get(
    "",
    response_model=CompanyListResponse,
    summary="List companies",
    description="Id and name of every company. No pagination, filtering or sorting.",
)
@router.get("/", response_model=CompanyListResponse, include_in_schema=False)
async def list_companies(
    companies: CompanyService = Depends(get_company_service),
) -> CompanyListResponse:
    """GET /api/companies/ — list all companies (id, name)."""
    return CompanyListResponse(response=companies.list_companies())


@router.get(
    "/{company_id}",
    response_model=CompanyDetailResponse,
    response_model_exclude_none=True,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
    summary="Get company",
)
async def get_company(
    company_id: str,
    companies: CompanyService = Depends(get_company_service),
):
    """GET /api/companies/{id} — fetch one company.

    Malformed ids are reported as 404 like missing ones, for compatibility with existing clients.
    """
    try:
        company = companies.get_company(company_id)
    except (InvalidCompanyIdError, CompanyNotFoundError) as e:
        logger.info("Get company %s: %s", company_id, e.message)
        return error_response(e.message, status.HTTP_404_NOT_FOUND)
    return CompanyDetailResponse(response=company)


@router.post(
    "/create",
    response_model=CompanyDetailResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_406_NOT_ACCEPTABLE: {"model": ErrorResponse}},
    summary="Create company",
    description="Body (JSON or URL-encoded): name, address, city, country; optional email, phone, benef_owners.",
)
async def create_company(
    request: Request,
    companies: CompanyService = Depends(get_company_service),
):
    """POST /api/companies/create — validate, trim and store a new company."""
    try:
        payload = await read_body(request)
        company = companies.create_company(payload)
    except BodyParseError as e:
        return error_response(str(e), status.HTTP_406_NOT_ACCEPTABLE)
    except CompanyServiceError as e:
        logger.warning("Create company rejected: %s", e.message)
        return error_response(e.message, status.HTTP_406_NOT_ACCEPTABLE)
    return CompanyDetailResponse(response=company)
