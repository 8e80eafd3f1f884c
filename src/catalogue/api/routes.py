"""FastAPI endpoints for the Catalogue domain (read side).

Storage failures answer 500 ``{"error": "upstream failure"}`` without
internal detail, the same contract as the package endpoints.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from catalogue.api.schemas import (
    CatalogueRowsResponse,
    PriceMatrixResponse,
    PricedCatalogueResponse,
    PricedProductSchema,
)
from catalogue.domain import logger
from catalogue.pricing.matrix import build_price_matrix
from catalogue.pricing.resolver import resolve_rows
from catalogue.pricing.rows import CatalogueRows
from catalogue.snapshot import load_catalogue_rows
from shared.currency import format_rupiah
from shared.tiers import PurchaseMode, spec_for

catalogue_router = APIRouter(prefix="/catalogue", tags=["catalogue"])

UPSTREAM_FAILURE = "upstream failure"


class CatalogueUnavailable(Exception):
    """The catalogue repositories could not be read."""


def _load_rows() -> CatalogueRows:
    try:
        return load_catalogue_rows()
    except Exception as exc:
        logger.exception("catalogue_load_failed")
        raise CatalogueUnavailable() from exc


def _upstream_failure() -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": UPSTREAM_FAILURE})


@catalogue_router.get("/rows", response_model=CatalogueRowsResponse)
async def get_catalogue_rows():
    """Raw product, tier and price rows, for clients that resolve prices themselves."""
    try:
        rows = _load_rows()
    except CatalogueUnavailable:
        return _upstream_failure()

    return CatalogueRowsResponse(
        products=list(rows.products),
        tiers=list(rows.tiers),
        prices=list(rows.prices),
    )


@catalogue_router.get("/products", response_model=PricedCatalogueResponse)
async def get_priced_products(mode: PurchaseMode = PurchaseMode.CONSUMER):
    try:
        rows = _load_rows()
    except CatalogueUnavailable:
        return _upstream_failure()

    spec = spec_for(mode)
    return PricedCatalogueResponse(
        mode=mode.value,
        label=spec.label,
        multiplier=spec.multiplier,
        products=[
            PricedProductSchema(
                id=product.id,
                name=product.name,
                category=product.category,
                image_url=product.image_url,
                sold_count=product.sold_count,
                price=product.price,
                consumer_price=product.consumer_price,
                price_known=product.price_known,
                price_display=format_rupiah(product.price),
            )
            for product in resolve_rows(rows, mode)
        ],
    )


@catalogue_router.get("/price-matrix", response_model=PriceMatrixResponse)
async def get_price_matrix():
    try:
        rows = _load_rows()
    except CatalogueUnavailable:
        return _upstream_failure()

    return PriceMatrixResponse(**build_price_matrix(rows))
