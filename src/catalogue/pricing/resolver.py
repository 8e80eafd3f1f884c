"""Tier price resolution.

For every product the resolver derives two prices:

* the consumer price: the Consumer tier entry, or 0 when there is none;
* the active price for the selected mode: the mode's tier entry when it is
  present and non-zero, otherwise the consumer price.

The consumer fallback keeps products visible at a sensible price while a new
tier's price table is still incomplete. Missing data never raises: it resolves
to 0, which callers must present as "price unknown" (see
``PricedProduct.price_known``).
"""

from collections.abc import Iterable
from dataclasses import dataclass

from catalogue.pricing.rows import CatalogueRows, PriceRow, ProductRow, TierRow
from shared.tiers import PurchaseMode


@dataclass(frozen=True)
class PricedProduct:
    id: str
    name: str
    category: str
    image_url: str | None
    sold_count: int
    price: int
    consumer_price: int

    @property
    def price_known(self) -> bool:
        return self.price > 0


def tier_ids_by_name(tiers: Iterable[TierRow]) -> dict[str, str]:
    return {tier.name: tier.id for tier in tiers}


def price_index(prices: Iterable[PriceRow]) -> dict[tuple[str, str], int]:
    """Index prices by (product_id, tier_id). Later rows win over earlier duplicates."""
    return {(row.product_id, row.tier_id): row.price for row in prices}


def resolve_prices(
    products: Iterable[ProductRow],
    mode: PurchaseMode | str,
    tiers: Iterable[TierRow],
    prices: Iterable[PriceRow],
) -> list[PricedProduct]:
    mode = PurchaseMode(mode)
    tier_ids = tier_ids_by_name(tiers)
    index = price_index(prices)

    consumer_tier_id = tier_ids.get(PurchaseMode.CONSUMER.value)
    mode_tier_id = tier_ids.get(mode.value)

    priced = []
    for product in products:
        consumer_price = index.get((product.id, consumer_tier_id), 0) if consumer_tier_id else 0

        if mode is PurchaseMode.CONSUMER:
            active_price = consumer_price
        else:
            tier_price = index.get((product.id, mode_tier_id), 0) if mode_tier_id else 0
            active_price = tier_price or consumer_price

        priced.append(
            PricedProduct(
                id=product.id,
                name=product.name,
                category=product.category,
                image_url=product.image_url,
                sold_count=product.sold_count,
                price=active_price,
                consumer_price=consumer_price,
            )
        )
    return priced


def resolve_rows(rows: CatalogueRows, mode: PurchaseMode | str) -> list[PricedProduct]:
    """Shortcut for resolving a whole catalogue snapshot."""
    return resolve_prices(rows.products, mode, rows.tiers, rows.prices)
