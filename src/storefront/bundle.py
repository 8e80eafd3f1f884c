"""Bundle engine: totals, target matching and bundle purchases for bulk modes.

A bulk mode (Silver, Gold, Platinum) buys ``multiplier`` units of every
product in its SKU set. The SKU set is the admin-configured package for the
mode, or the whole catalogue when that package is missing or empty.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from catalogue.pricing.resolver import PricedProduct
from shared.logging import get_logger
from shared.tiers import BUNDLE_MODES, MATCH_TOLERANCE, ModeSpec, PurchaseMode, spec_for
from storefront.cart import CartItem, CartStore

logger = get_logger(__name__)

PackageMap = Mapping[str, Sequence[str]]


@dataclass(frozen=True)
class BundleQuote:
    mode: PurchaseMode
    total: int
    target: int
    product_count: int

    @property
    def diff(self) -> int:
        return self.total - self.target

    @property
    def matched(self) -> bool:
        return abs(self.diff) < MATCH_TOLERANCE


@dataclass
class BundlePurchase:
    mode: PurchaseMode
    quantity: int
    added: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def _bundle_spec(mode: PurchaseMode | str) -> ModeSpec:
    spec = spec_for(mode)
    if not spec.is_bundle:
        raise ValueError(f"{spec.mode.value} is not a bundle mode")
    return spec


def resolve_bundle_products(
    mode: PurchaseMode | str,
    products: Sequence[PricedProduct],
    packages: PackageMap | None = None,
) -> list[PricedProduct]:
    """Products making up the mode's bundle, in package order.

    Package SKUs that are not in the catalogue are skipped.
    """
    spec = _bundle_spec(mode)
    skus = list((packages or {}).get(spec.package_name) or [])
    if not skus:
        return list(products)

    by_id = {product.id: product for product in products}
    selected, seen = [], set()
    for sku in skus:
        if sku in by_id and sku not in seen:
            selected.append(by_id[sku])
            seen.add(sku)
    return selected


def bundle_total(
    mode: PurchaseMode | str,
    products: Sequence[PricedProduct],
    packages: PackageMap | None = None,
) -> int:
    spec = _bundle_spec(mode)
    return sum(product.price * spec.multiplier for product in resolve_bundle_products(mode, products, packages))


def quote_bundle(
    mode: PurchaseMode | str,
    products: Sequence[PricedProduct],
    packages: PackageMap | None = None,
) -> BundleQuote:
    spec = _bundle_spec(mode)
    selected = resolve_bundle_products(mode, products, packages)
    return BundleQuote(
        mode=spec.mode,
        total=sum(product.price * spec.multiplier for product in selected),
        target=spec.target,
        product_count=len(selected),
    )


def quote_all(products: Sequence[PricedProduct], packages: PackageMap | None = None) -> list[BundleQuote]:
    return [quote_bundle(mode, products, packages) for mode in BUNDLE_MODES]


def buy_bundle(
    cart: CartStore,
    mode: PurchaseMode | str,
    products: Sequence[PricedProduct],
    packages: PackageMap | None = None,
) -> BundlePurchase:
    """Add ``multiplier`` units of every bundle product to the cart.

    Each insertion stands on its own: a product that fails to insert is
    logged and reported in ``failed`` while the remaining products are still
    added.
    """
    spec = _bundle_spec(mode)
    purchase = BundlePurchase(mode=spec.mode, quantity=spec.multiplier)

    for product in resolve_bundle_products(mode, products, packages):
        item = CartItem(id=product.id, name=product.name, price=product.price, image=product.image_url)
        try:
            cart.add(item, quantity=spec.multiplier)
        except Exception as exc:
            logger.warning("bundle_item_not_added", mode=spec.mode.value, product_id=product.id, error=str(exc))
            purchase.failed.append(product.id)
        else:
            purchase.added.append(product.id)

    logger.info(
        "bundle_purchased",
        mode=spec.mode.value,
        added=len(purchase.added),
        failed=len(purchase.failed),
    )
    return purchase
