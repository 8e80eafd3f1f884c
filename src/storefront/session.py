"""Storefront session: the explicit context one visitor's storefront runs in.

The session owns the backend client, the current credential, the selected
purchase mode and the cart. Catalogue rows and packages are fetched on
demand. A failed fetch leaves empty data and an advisory ``message``; it
never raises into the caller. Once the session is closed, fetch results that
arrive late are dropped.

The Agen Kecil guard runs after every cart mutation (through the cart's
subscription) and after every mode change.
"""

import asyncio
from collections.abc import Sequence

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from catalogue.pricing.resolver import PricedProduct, resolve_rows
from catalogue.pricing.rows import CatalogueRows
from shared.logging import get_logger
from shared.tiers import BUNDLE_MODES, PurchaseMode, spec_for
from storefront.bundle import BundlePurchase, BundleQuote, buy_bundle, quote_bundle
from storefront.cart import CartItem, CartLine, CartStore
from storefront.client import StorefrontClient, StorefrontClientError
from storefront.config import StorefrontSettings
from storefront.guard import AgentNotice, next_mode
from storefront.storage import FileStore

logger = get_logger(__name__)

CATALOGUE_UNAVAILABLE = "Katalog belum dapat dimuat. Coba lagi nanti."
PACKAGES_UNAVAILABLE = "Data paket belum dapat dimuat."
PACKAGE_SAVE_FAILED = "Gagal menyimpan paket: {code}"


class PackageSnapshot(BaseModel):
    name: str
    skus: list[str]
    updated_at: str | None = None


_SNAPSHOTS = TypeAdapter(list[PackageSnapshot])


class StorefrontSession:
    def __init__(
        self,
        client: StorefrontClient,
        cart: CartStore,
        mode: PurchaseMode | str = PurchaseMode.CONSUMER,
    ) -> None:
        self.client = client
        self.cart = cart
        self.mode = PurchaseMode(mode)

        self.rows = CatalogueRows()
        self.products: list[PricedProduct] = []
        self.packages: dict[str, PackageSnapshot] = {}
        self.is_admin = False

        self.notice: AgentNotice | None = None
        self.message: str | None = None
        self.closed = False

        self._unsubscribe = cart.subscribe(self._on_cart_changed)
        self._evaluate_guard()

    @classmethod
    def from_settings(
        cls,
        settings: StorefrontSettings | None = None,
        token: str | None = None,
        transport=None,
    ) -> "StorefrontSession":
        settings = settings or StorefrontSettings.from_env()
        client = StorefrontClient(settings, token=token, transport=transport)
        return cls(client, CartStore(FileStore(settings.state_dir)))

    # -------------------------------------------------------------------
    # Mode and guard
    # -------------------------------------------------------------------
    @property
    def mode_label(self) -> str:
        return spec_for(self.mode).label

    def set_mode(self, mode: PurchaseMode | str) -> None:
        self.mode = PurchaseMode(mode)
        self._reprice()
        self._evaluate_guard()

    def _reprice(self) -> None:
        self.products = resolve_rows(self.rows, self.mode)

    def _on_cart_changed(self, cart: CartStore) -> None:
        self._evaluate_guard()

    def _evaluate_guard(self) -> None:
        decision = next_mode(self.mode, self.cart.distinct_count, self.cart.total_price)
        if not decision.changed:
            return
        logger.info(
            "agent_mode_revoked",
            distinct_products=self.cart.distinct_count,
            shortfall=decision.notice.shortfall,
        )
        self.mode = decision.mode
        self.notice = decision.notice
        self._reprice()

    def dismiss_notice(self) -> None:
        self.notice = None

    def accept_notice(self) -> BundlePurchase | None:
        """Dismiss the notice and buy the package it offered."""
        notice, self.notice = self.notice, None
        if notice is None:
            return None
        return self.buy_bundle(notice.offered_mode)

    # -------------------------------------------------------------------
    # Catalogue and cart
    # -------------------------------------------------------------------
    def product(self, product_id: str) -> PricedProduct | None:
        return next((product for product in self.products if product.id == product_id), None)

    def add_to_cart(self, product_id: str, quantity: int = 1) -> CartLine:
        product = self.product(product_id)
        if product is None:
            raise KeyError(product_id)
        item = CartItem(id=product.id, name=product.name, price=product.price, image=product.image_url)
        return self.cart.add(item, quantity=quantity)

    def remove_from_cart(self, product_id: str) -> None:
        self.cart.remove(product_id)

    def update_quantity(self, product_id: str, quantity: int) -> None:
        self.cart.set_quantity(product_id, quantity)

    def clear_cart(self) -> None:
        self.cart.clear()

    # -------------------------------------------------------------------
    # Bundles
    # -------------------------------------------------------------------
    @property
    def package_skus(self) -> dict[str, list[str]]:
        return {name: snapshot.skus for name, snapshot in self.packages.items()}

    def bundle_quotes(self) -> list[BundleQuote]:
        """Quote every bundle at its own tier, the prices ``buy_bundle`` adds at."""
        return [quote_bundle(mode, resolve_rows(self.rows, mode), self.package_skus) for mode in BUNDLE_MODES]

    def buy_bundle(self, mode: PurchaseMode | str | None = None) -> BundlePurchase:
        """Buy a bundle priced at the bundle's own tier."""
        mode = PurchaseMode(mode) if mode is not None else self.mode
        return buy_bundle(self.cart, mode, resolve_rows(self.rows, mode), self.package_skus)

    # -------------------------------------------------------------------
    # Backend fetches
    # -------------------------------------------------------------------
    async def refresh_catalogue(self) -> bool:
        try:
            payload = await self.client.fetch_catalogue_rows()
        except StorefrontClientError as exc:
            if self.closed:
                return False
            logger.warning("catalogue_fetch_failed", status=exc.status, code=exc.code)
            self.rows = CatalogueRows()
            self.products = []
            self.message = CATALOGUE_UNAVAILABLE
            return False

        if self.closed:
            logger.debug("catalogue_fetch_discarded")
            return False

        self.rows = CatalogueRows.from_payload(payload)
        self._reprice()
        return True

    async def refresh_packages(self) -> bool:
        try:
            payload = await self.client.fetch_packages()
            snapshots = _SNAPSHOTS.validate_python(payload.get("packages") or [])
        except (StorefrontClientError, PydanticValidationError) as exc:
            if self.closed:
                return False
            logger.warning("package_fetch_failed", error=str(exc))
            self.packages = {}
            self.is_admin = False
            self.message = PACKAGES_UNAVAILABLE
            return False

        if self.closed:
            logger.debug("package_fetch_discarded")
            return False

        self.packages = {snapshot.name: snapshot for snapshot in snapshots}
        self.is_admin = bool(payload.get("is_admin"))
        return True

    async def load(self) -> None:
        await asyncio.gather(self.refresh_catalogue(), self.refresh_packages())

    async def save_package(self, name: str, skus: Sequence[str]) -> PackageSnapshot | None:
        """Replace a package's SKUs (admin only). Errors end up in ``message``."""
        try:
            package = await self.client.replace_package(name, list(skus))
        except StorefrontClientError as exc:
            return self._package_write_failed(exc)
        return self._package_written(package)

    async def edit_package(
        self,
        name: str,
        add_skus: Sequence[str] | None = None,
        remove_skus: Sequence[str] | None = None,
    ) -> PackageSnapshot | None:
        try:
            package = await self.client.merge_package(
                name,
                list(add_skus) if add_skus is not None else None,
                list(remove_skus) if remove_skus is not None else None,
            )
        except StorefrontClientError as exc:
            return self._package_write_failed(exc)
        return self._package_written(package)

    def _package_written(self, package: dict) -> PackageSnapshot | None:
        if self.closed:
            return None
        try:
            snapshot = PackageSnapshot.model_validate(package)
        except PydanticValidationError:
            return self._package_write_failed(StorefrontClientError("unexpected response body"))
        self.packages[snapshot.name] = snapshot
        return snapshot

    def _package_write_failed(self, exc: StorefrontClientError) -> None:
        logger.warning("package_write_failed", status=exc.status, code=exc.code)
        if not self.closed:
            self.message = PACKAGE_SAVE_FAILED.format(code=exc.code)
        return None

    # -------------------------------------------------------------------
    # Teardown
    # -------------------------------------------------------------------
    def close(self) -> None:
        self.closed = True
        self._unsubscribe()

    async def aclose(self) -> None:
        self.close()
        await self.client.aclose()
