"""FastAPI routes for the Packages API.

Thin adapters: check the credential, validate the body, translate into a
domain command. Errors become ``{"error": code}`` responses.
"""

import json

from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from bundles.access.credentials import require_admin, resolve_principal
from bundles.api.schemas import (
    ErrorResponse,
    MergePackageRequest,
    PackageListResponse,
    PackageResponse,
    PackageSchema,
    ReplacePackageRequest,
)
from bundles.domain import logger
from bundles.errors import InvalidPayload, NotFound, PackageServiceError, UpstreamFailure
from bundles.package.membership import MergePackageSkus, ReplacePackageSkus
from bundles.package.package import Package

router = APIRouter(prefix="/packages", tags=["packages"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _error_response(exc: PackageServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.code})


async def _read_body(request: Request) -> dict:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidPayload() from None
    if not isinstance(payload, dict):
        raise InvalidPayload()
    return payload


def _validate(schema: type[BaseModel], payload: dict):
    try:
        return schema.model_validate(payload)
    except PydanticValidationError:
        raise InvalidPayload() from None


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------
@router.get("", response_model=PackageListResponse, responses={500: {"model": ErrorResponse}})
async def list_packages(authorization: str | None = Header(default=None)):
    """List every package. The credential is optional and only decides ``is_admin``."""
    principal = resolve_principal(authorization)
    try:
        packages = current_domain.repository_for(Package).all_by_name()
        listing = [PackageSchema(**package.to_representation()) for package in packages]
    except Exception:
        logger.exception("package_list_failed")
        return _error_response(UpstreamFailure())

    return PackageListResponse(packages=listing, is_admin=principal.is_admin)


# ---------------------------------------------------------------------------
# Full replace
# ---------------------------------------------------------------------------
@router.put("", response_model=PackageResponse, responses=_ERROR_RESPONSES)
async def replace_package(request: Request, authorization: str | None = Header(default=None)):
    try:
        principal = require_admin(authorization)
        body = _validate(ReplacePackageRequest, await _read_body(request))
        result = current_domain.process(
            ReplacePackageSkus(name=body.name, skus=json.dumps(body.skus)),
            asynchronous=False,
        )
    except PackageServiceError as exc:
        return _error_response(exc)
    except ValidationError:
        return _error_response(InvalidPayload())
    except Exception:
        logger.exception("package_replace_failed")
        return _error_response(UpstreamFailure())

    logger.info("package_replaced_via_api", name=result["name"], user_id=principal.user_id)
    return PackageResponse(package=PackageSchema(**result))


# ---------------------------------------------------------------------------
# Partial merge
# ---------------------------------------------------------------------------
@router.patch("", response_model=PackageResponse, responses=_ERROR_RESPONSES)
async def merge_package(request: Request, authorization: str | None = Header(default=None)):
    try:
        principal = require_admin(authorization)
        payload = await _read_body(request)
        if not payload.get("name"):
            raise InvalidPayload("name required")
        body = _validate(MergePackageRequest, payload)
        result = current_domain.process(
            MergePackageSkus(
                name=body.name,
                add_skus=json.dumps(body.add_skus or []),
                remove_skus=json.dumps(body.remove_skus or []),
            ),
            asynchronous=False,
        )
    except PackageServiceError as exc:
        return _error_response(exc)
    except ValidationError:
        return _error_response(InvalidPayload())
    except ObjectNotFoundError:
        return _error_response(NotFound())
    except Exception:
        logger.exception("package_merge_failed")
        return _error_response(UpstreamFailure())

    logger.info("package_merged_via_api", name=result["name"], user_id=principal.user_id)
    return PackageResponse(package=PackageSchema(**result))
