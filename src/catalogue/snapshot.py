"""Read the catalogue repositories into a validated row snapshot."""

from protean.utils.globals import current_domain

from catalogue.pricing.price_entry import PriceEntry
from catalogue.pricing.rows import CatalogueRows
from catalogue.product.product import Product
from catalogue.tier.tier import Tier

# Protean query sets are paginated; the catalogue is small enough to load whole
MAX_ROWS = 10_000


def _all(aggregate_cls, order_by):
    return current_domain.repository_for(aggregate_cls)._dao.query.order_by(order_by).limit(MAX_ROWS).all().items


def load_catalogue_rows() -> CatalogueRows:
    products = [
        {
            "id": str(product.id),
            "name": product.name,
            "category": product.category,
            "image_url": product.image_url,
            "sold_count": product.sold_count,
        }
        for product in _all(Product, "name")
    ]
    tiers = [{"id": str(tier.id), "name": tier.name} for tier in _all(Tier, "name")]
    prices = [
        {
            "product_id": str(entry.product_id),
            "tier_id": str(entry.tier_id),
            "price": entry.price,
        }
        for entry in _all(PriceEntry, "product_id")
    ]
    return CatalogueRows.from_payload({"products": products, "tiers": tiers, "prices": prices})
