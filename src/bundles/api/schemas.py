"""Pydantic request/response schemas for the Packages API.

These are external contracts, separate from the internal Protean commands.
Request bodies are validated after the caller's credential has been checked,
so malformed bodies from anonymous callers still answer 401.
"""

from pydantic import BaseModel, Field, field_validator

from bundles.package.package import normalize_package_name
from shared.tiers import PACKAGE_NAMES


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class PackageSchema(BaseModel):
    name: str
    skus: list[str]
    updated_at: str | None = None


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class ReplacePackageRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "silver",
                    "skus": ["prd-001", "prd-002"],
                }
            ]
        }
    }

    name: str = Field(min_length=1)
    skus: list[str]

    @field_validator("name")
    @classmethod
    def name_must_be_a_bundle_package(cls, value):
        value = normalize_package_name(value)
        if value not in PACKAGE_NAMES:
            raise ValueError(f"Unknown package: {value}")
        return value


class MergePackageRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "name": "silver",
                    "addSkus": ["prd-003"],
                    "removeSkus": ["prd-001"],
                }
            ]
        },
    }

    name: str = Field(min_length=1)
    add_skus: list[str] | None = Field(default=None, alias="addSkus")
    remove_skus: list[str] | None = Field(default=None, alias="removeSkus")


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class PackageListResponse(BaseModel):
    packages: list[PackageSchema]
    is_admin: bool


class PackageResponse(BaseModel):
    package: PackageSchema


class ErrorResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"error": "forbidden"}]}}

    error: str
