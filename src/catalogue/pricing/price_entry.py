"""Per-tier product price."""

from protean.fields import Identifier, Integer

from catalogue.domain import catalogue


@catalogue.aggregate
class PriceEntry:
    """Price of one product in one tier, in whole rupiah."""

    product_id: Identifier(required=True)
    tier_id: Identifier(required=True)
    price: Integer(required=True, min_value=0)


@catalogue.repository(part_of=PriceEntry)
class PriceEntryRepository:
    def find_for(self, product_id, tier_id) -> PriceEntry | None:
        """Return the entry for a (product, tier) pair, if one exists."""
        results = self._dao.query.filter(product_id=str(product_id), tier_id=str(tier_id)).all().items
        return results[0] if results else None
