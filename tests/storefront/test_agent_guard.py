"""Tests for Agen Kecil eligibility."""

import pytest
from shared.tiers import PurchaseMode
from storefront.guard import AgentNotice, next_mode


class TestNextMode:
    @pytest.mark.parametrize("count", [0, 1])
    def test_single_product_keeps_agen_kecil(self, count):
        decision = next_mode(PurchaseMode.AGEN_KECIL, count)
        assert decision.mode is PurchaseMode.AGEN_KECIL
        assert not decision.changed

    def test_second_product_reverts_to_consumer(self):
        decision = next_mode(PurchaseMode.AGEN_KECIL, 2, total_price=1_000_000)
        assert decision.mode is PurchaseMode.CONSUMER
        assert decision.changed
        assert decision.notice.shortfall == 5_366_000
        assert decision.notice.offered_mode is PurchaseMode.SILVER

    def test_shortfall_never_negative(self):
        decision = next_mode("Agen Kecil", 3, total_price=7_000_000)
        assert decision.notice.shortfall == 0

    @pytest.mark.parametrize("mode", [m for m in PurchaseMode if m is not PurchaseMode.AGEN_KECIL])
    def test_other_modes_untouched(self, mode):
        decision = next_mode(mode, 10)
        assert decision.mode is mode
        assert decision.notice is None


class TestAgentNotice:
    def test_message_with_shortfall(self):
        message = AgentNotice(shortfall=5_366_000).message
        assert "Rp 5.366.000" in message
        assert "Paket Silver (12 pcs)" in message

    def test_message_without_shortfall(self):
        assert "sudah memenuhi" in AgentNotice(shortfall=0).message
