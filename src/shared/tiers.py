"""Purchase modes and the tier table behind them.

Every purchase mode maps 1:1 to a pricing tier. Bulk modes (Silver, Gold,
Platinum) additionally carry a bundle multiplier, a target amount and the
name of the admin-curated package that defines their SKU set.
"""

from dataclasses import dataclass
from enum import Enum


class PurchaseMode(Enum):
    CONSUMER = "Consumer"
    DROPSHIPPER = "Dropshipper"
    AGEN_KECIL = "Agen Kecil"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


@dataclass(frozen=True)
class ModeSpec:
    """Static description of a purchase mode."""

    mode: PurchaseMode
    multiplier: int
    label: str
    target: int | None = None
    package_name: str | None = None

    @property
    def tier_name(self) -> str:
        return self.mode.value

    @property
    def is_bundle(self) -> bool:
        return self.multiplier > 1


MODE_SPECS: dict[PurchaseMode, ModeSpec] = {
    PurchaseMode.CONSUMER: ModeSpec(PurchaseMode.CONSUMER, 1, "Konsumen"),
    PurchaseMode.DROPSHIPPER: ModeSpec(PurchaseMode.DROPSHIPPER, 1, "Dropshipper"),
    PurchaseMode.AGEN_KECIL: ModeSpec(PurchaseMode.AGEN_KECIL, 1, "Agen Kecil"),
    PurchaseMode.SILVER: ModeSpec(PurchaseMode.SILVER, 12, "Paket Silver (12 pcs)", 6_366_000, "silver"),
    PurchaseMode.GOLD: ModeSpec(PurchaseMode.GOLD, 30, "Paket Gold (30 pcs)", 13_905_000, "gold"),
    PurchaseMode.PLATINUM: ModeSpec(PurchaseMode.PLATINUM, 100, "Paket Platinum (100 pcs)", 37_500_000, "platinum"),
}

BUNDLE_MODES: tuple[PurchaseMode, ...] = (PurchaseMode.SILVER, PurchaseMode.GOLD, PurchaseMode.PLATINUM)

PACKAGE_NAMES: frozenset[str] = frozenset(MODE_SPECS[mode].package_name for mode in BUNDLE_MODES)

TIER_NAMES: frozenset[str] = frozenset(mode.value for mode in PurchaseMode)

# |bundle_total - target| below this counts as a match
MATCH_TOLERANCE = 1000


def spec_for(mode: PurchaseMode | str) -> ModeSpec:
    """Return the ModeSpec for a mode or a tier name ("Silver", "Agen Kecil", ...)."""
    return MODE_SPECS[PurchaseMode(mode)]
