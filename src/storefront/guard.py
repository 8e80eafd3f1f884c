"""Agen Kecil eligibility.

The Agen Kecil tier is only valid while the cart holds exactly one distinct
product. As soon as a second product shows up the buyer is moved back to
Consumer pricing and told how far the cart is from the Silver package.
"""

from dataclasses import dataclass

from shared.currency import format_rupiah
from shared.tiers import PurchaseMode, spec_for


@dataclass(frozen=True)
class AgentNotice:
    shortfall: int
    offered_mode: PurchaseMode = PurchaseMode.SILVER

    @property
    def message(self) -> str:
        label = spec_for(self.offered_mode).label
        if self.shortfall > 0:
            return (
                "Mode Agen Kecil hanya berlaku untuk satu jenis produk. "
                f"Tambah {format_rupiah(self.shortfall)} lagi untuk {label}."
            )
        return f"Mode Agen Kecil hanya berlaku untuk satu jenis produk. Keranjang sudah memenuhi {label}."


@dataclass(frozen=True)
class ModeDecision:
    mode: PurchaseMode
    notice: AgentNotice | None = None

    @property
    def changed(self) -> bool:
        return self.notice is not None


def next_mode(current_mode: PurchaseMode | str, distinct_product_count: int, total_price: int = 0) -> ModeDecision:
    current_mode = PurchaseMode(current_mode)
    if current_mode is PurchaseMode.AGEN_KECIL and distinct_product_count > 1:
        silver_target = spec_for(PurchaseMode.SILVER).target
        return ModeDecision(
            mode=PurchaseMode.CONSUMER,
            notice=AgentNotice(shortfall=max(0, silver_target - total_price)),
        )
    return ModeDecision(mode=current_mode)
