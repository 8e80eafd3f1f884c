"""Tests for the purchase mode table and rupiah formatting."""

import pytest
from shared.currency import format_rupiah
from shared.tiers import BUNDLE_MODES, MODE_SPECS, PACKAGE_NAMES, TIER_NAMES, PurchaseMode, spec_for


class TestModeTable:
    def test_every_mode_is_described(self):
        assert set(MODE_SPECS) == set(PurchaseMode)

    @pytest.mark.parametrize(
        "mode, multiplier, target, package",
        [
            (PurchaseMode.SILVER, 12, 6_366_000, "silver"),
            (PurchaseMode.GOLD, 30, 13_905_000, "gold"),
            (PurchaseMode.PLATINUM, 100, 37_500_000, "platinum"),
        ],
    )
    def test_bundle_modes(self, mode, multiplier, target, package):
        spec = spec_for(mode)
        assert spec.is_bundle
        assert spec.multiplier == multiplier
        assert spec.target == target
        assert spec.package_name == package

    @pytest.mark.parametrize("mode", [PurchaseMode.CONSUMER, PurchaseMode.DROPSHIPPER, PurchaseMode.AGEN_KECIL])
    def test_single_unit_modes(self, mode):
        spec = spec_for(mode)
        assert spec.multiplier == 1
        assert spec.target is None
        assert not spec.is_bundle

    def test_lookup_by_tier_name(self):
        assert spec_for("Agen Kecil").mode is PurchaseMode.AGEN_KECIL
        assert spec_for("Silver").tier_name == "Silver"

    def test_unknown_tier_name(self):
        with pytest.raises(ValueError):
            spec_for("Diamond")

    def test_derived_sets(self):
        assert BUNDLE_MODES == (PurchaseMode.SILVER, PurchaseMode.GOLD, PurchaseMode.PLATINUM)
        assert PACKAGE_NAMES == {"silver", "gold", "platinum"}
        assert "Agen Kecil" in TIER_NAMES


class TestFormatRupiah:
    @pytest.mark.parametrize(
        "amount, text",
        [
            (6_366_000, "Rp 6.366.000"),
            (85000, "Rp 85.000"),
            (500, "Rp 500"),
            (0, "Rp -"),
            (None, "Rp -"),
            (-6_246_000, "Rp -6.246.000"),
        ],
    )
    def test_format(self, amount, text):
        assert format_rupiah(amount) == text
