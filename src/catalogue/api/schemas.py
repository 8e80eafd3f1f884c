"""Pydantic response schemas for the Catalogue API."""

from __future__ import annotations

from pydantic import BaseModel

from catalogue.pricing.rows import PriceRow, ProductRow, TierRow

# --- Row Schemas ---


class CatalogueRowsResponse(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "products": [
                        {
                            "id": "prd-001",
                            "name": "Serum Wajah 20ml",
                            "category": "Skincare",
                            "image_url": None,
                            "sold_count": 120,
                        }
                    ],
                    "tiers": [{"id": "tier-consumer", "name": "Consumer"}],
                    "prices": [{"product_id": "prd-001", "tier_id": "tier-consumer", "price": 85000}],
                }
            ]
        }
    }

    products: list[ProductRow]
    tiers: list[TierRow]
    prices: list[PriceRow]


# --- Priced Product Schemas ---


class PricedProductSchema(BaseModel):
    id: str
    name: str
    category: str
    image_url: str | None = None
    sold_count: int
    price: int
    consumer_price: int
    price_known: bool
    price_display: str


class PricedCatalogueResponse(BaseModel):
    mode: str
    label: str
    multiplier: int
    products: list[PricedProductSchema]


# --- Price Matrix Schemas ---


class TierPriceSchema(BaseModel):
    tier: str
    price: int


class PriceMatrixEntrySchema(BaseModel):
    id: str
    name: str
    category: str | None = None
    consumer_price: int | None = None
    prices: list[TierPriceSchema]


class PriceMatrixResponse(BaseModel):
    product_count: int
    price_count: int
    tier_count: int
    products: list[PriceMatrixEntrySchema]
