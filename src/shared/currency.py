"""Rupiah display formatting."""


def format_rupiah(amount: int | None) -> str:
    """Format an amount the way the storefront shows prices: ``Rp 6.366.000``.

    ``None`` and zero are rendered as an unknown price, not as free.
    """
    if not amount:
        return "Rp -"
    sign = "-" if amount < 0 else ""
    return f"Rp {sign}{abs(int(amount)):,}".replace(",", ".")
