"""Validated catalogue rows: the boundary between catalogue storage and price resolution.

Rows arrive either from the catalogue repositories (server side) or as JSON
from ``GET /catalogue/rows`` (storefront side). Each row is validated on its
own; malformed rows are dropped and counted instead of failing the whole load.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from shared.logging import get_logger
from shared.tiers import TIER_NAMES

logger = get_logger(__name__)


def _stringify_id(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class ProductRow(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    category: str = ""
    image_url: str | None = None
    sold_count: int = Field(default=0, ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        return _stringify_id(value)

    @field_validator("category", mode="before")
    @classmethod
    def _category_defaults_to_blank(cls, value):
        return "" if value is None else value

    @field_validator("sold_count", mode="before")
    @classmethod
    def _sold_count_defaults_to_zero(cls, value):
        return 0 if value is None else value


class TierRow(BaseModel):
    id: str = Field(min_length=1)
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        return _stringify_id(value)

    @field_validator("name")
    @classmethod
    def _name_must_be_known_tier(cls, value):
        if value not in TIER_NAMES:
            raise ValueError(f"Unknown tier: {value}")
        return value


class PriceRow(BaseModel):
    product_id: str = Field(min_length=1)
    tier_id: str = Field(min_length=1)
    price: int = Field(ge=0)

    @field_validator("product_id", "tier_id", mode="before")
    @classmethod
    def _ids_as_string(cls, value):
        return _stringify_id(value)


def _validate_rows(model: type[BaseModel], raw_rows: Iterable[Any] | None, kind: str) -> tuple[list, int]:
    valid, rejected = [], 0
    if raw_rows is not None and not isinstance(raw_rows, list | tuple):
        logger.warning("catalogue_rows_malformed", kind=kind)
        return valid, 1
    for raw in raw_rows or ():
        try:
            valid.append(model.model_validate(raw))
        except ValidationError as exc:
            rejected += 1
            logger.warning("catalogue_row_rejected", kind=kind, errors=exc.error_count())
    return valid, rejected


@dataclass(frozen=True)
class CatalogueRows:
    """A consistent snapshot of products, tiers and prices."""

    products: tuple[ProductRow, ...] = ()
    tiers: tuple[TierRow, ...] = ()
    prices: tuple[PriceRow, ...] = ()
    # Rows dropped by validation; a section that is not a list counts once
    rejected: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "CatalogueRows":
        """Build a snapshot from raw row dicts, dropping rows that fail validation."""
        payload = payload or {}
        products, bad_products = _validate_rows(ProductRow, payload.get("products"), "product")
        tiers, bad_tiers = _validate_rows(TierRow, payload.get("tiers"), "tier")
        prices, bad_prices = _validate_rows(PriceRow, payload.get("prices"), "price")

        rejected = bad_products + bad_tiers + bad_prices
        if rejected:
            logger.warning(
                "catalogue_rows_rejected",
                rejected=rejected,
                products=bad_products,
                tiers=bad_tiers,
                prices=bad_prices,
            )

        return cls(
            products=tuple(products),
            tiers=tuple(tiers),
            prices=tuple(prices),
            rejected=rejected,
        )

    def to_payload(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "products": [row.model_dump() for row in self.products],
            "tiers": [row.model_dump() for row in self.tiers],
            "prices": [row.model_dump() for row in self.prices],
        }
