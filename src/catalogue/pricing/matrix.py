"""Price matrix: per-product view of every configured tier price.

Used to spot products whose price tables are incomplete before they surface
on the storefront as "price unknown".
"""

from typing import Any

from catalogue.pricing.rows import CatalogueRows
from catalogue.pricing.resolver import tier_ids_by_name
from shared.tiers import PurchaseMode


def build_price_matrix(rows: CatalogueRows) -> dict[str, Any]:
    tier_names = {tier.id: tier.name for tier in rows.tiers}
    consumer_tier_id = tier_ids_by_name(rows.tiers).get(PurchaseMode.CONSUMER.value)

    entries = []
    for product in rows.products:
        product_prices = [row for row in rows.prices if row.product_id == product.id]
        consumer_price = next(
            (row.price for row in product_prices if row.tier_id == consumer_tier_id),
            None,
        )
        entries.append(
            {
                "id": product.id,
                "name": product.name,
                "category": product.category or None,
                "consumer_price": consumer_price,
                "prices": [
                    # Unknown tier ids are shown raw
                    {"tier": tier_names.get(row.tier_id, row.tier_id), "price": row.price}
                    for row in product_prices
                ],
            }
        )

    return {
        "product_count": len(rows.products),
        "price_count": len(rows.prices),
        "tier_count": len(rows.tiers),
        "products": entries,
    }
