"""Pricing tier aggregate: one per purchase mode."""

from protean.fields import String

from catalogue.domain import catalogue
from shared.tiers import PurchaseMode


@catalogue.aggregate
class Tier:
    name: String(required=True, max_length=50, choices=PurchaseMode, unique=True)
