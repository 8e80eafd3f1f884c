"""Catalogue import: upsert products, tiers and prices from a row payload.

The payload has the same shape as ``GET /catalogue/rows``. Tier ids in the
payload are local to it: prices are re-pointed at the stored tier with the
same name, so re-importing a file never duplicates tiers or price entries.
"""

from typing import Any

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from catalogue.pricing.price_entry import PriceEntry
from catalogue.pricing.rows import CatalogueRows
from catalogue.product.product import Product
from catalogue.tier.tier import Tier
from shared.logging import get_logger

logger = get_logger(__name__)


def _upsert_tiers(rows: CatalogueRows) -> dict[str, str]:
    repo = current_domain.repository_for(Tier)
    stored_ids = {}
    for row in rows.tiers:
        existing = repo._dao.query.filter(name=row.name).all().items
        if existing:
            tier = existing[0]
        else:
            tier = Tier(id=row.id, name=row.name)
            repo.add(tier)
        stored_ids[row.id] = str(tier.id)
    return stored_ids


def _upsert_products(rows: CatalogueRows) -> None:
    repo = current_domain.repository_for(Product)
    for row in rows.products:
        try:
            product = repo.get(row.id)
            product.name = row.name
            product.category = row.category
            product.image_url = row.image_url
            product.sold_count = row.sold_count
        except ObjectNotFoundError:
            product = Product(
                id=row.id,
                name=row.name,
                category=row.category,
                image_url=row.image_url,
                sold_count=row.sold_count,
            )
        repo.add(product)


def _upsert_prices(rows: CatalogueRows, tier_ids: dict[str, str]) -> int:
    repo = current_domain.repository_for(PriceEntry)
    written = 0
    for row in rows.prices:
        tier_id = tier_ids.get(row.tier_id)
        if tier_id is None:
            logger.warning("price_skipped_unknown_tier", product_id=row.product_id, tier_id=row.tier_id)
            continue

        entry = repo.find_for(row.product_id, tier_id)
        if entry is None:
            entry = PriceEntry(product_id=row.product_id, tier_id=tier_id, price=row.price)
        else:
            entry.price = row.price
        repo.add(entry)
        written += 1
    return written


def import_catalogue(payload: dict[str, Any]) -> dict[str, int]:
    """Import a catalogue payload into the current domain's repositories."""
    rows = CatalogueRows.from_payload(payload)

    tier_ids = _upsert_tiers(rows)
    _upsert_products(rows)
    prices_written = _upsert_prices(rows, tier_ids)

    summary = {
        "products": len(rows.products),
        "tiers": len(rows.tiers),
        "prices": prices_written,
        "rejected": rows.rejected,
    }
    logger.info("catalogue_imported", **summary)
    return summary
