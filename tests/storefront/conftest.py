import json

import httpx
import pytest
from catalogue.pricing.resolver import PricedProduct
from storefront.cart import CartStore
from storefront.storage import MemoryStore

CATALOGUE = {
    "products": [
        {"id": "A", "name": "Serum", "category": "Skincare", "image_url": None, "sold_count": 10},
        {"id": "B", "name": "Crema", "category": "Skincare", "image_url": None, "sold_count": 3},
    ],
    "tiers": [
        {"id": "t1", "name": "Consumer"},
        {"id": "t2", "name": "Agen Kecil"},
        {"id": "t3", "name": "Silver"},
    ],
    "prices": [
        {"product_id": "A", "tier_id": "t1", "price": 100000},
        {"product_id": "A", "tier_id": "t2", "price": 80000},
        {"product_id": "A", "tier_id": "t3", "price": 60000},
        {"product_id": "B", "tier_id": "t1", "price": 200000},
    ],
}


class FakeBackend:
    """In-process stand-in for the storefront backend, served over httpx.MockTransport."""

    def __init__(self, catalogue=None, packages=None, admin_token="admin-token"):
        self.catalogue = CATALOGUE if catalogue is None else catalogue
        self.packages = dict(packages or {})
        self.admin_token = admin_token
        self.down = False
        self.requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def _is_admin(self, request):
        return request.headers.get("Authorization") == f"Bearer {self.admin_token}"

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("backend unreachable", request=request)

        if request.url.path == "/catalogue/rows":
            return httpx.Response(200, json=self.catalogue)

        if request.url.path == "/packages" and request.method == "GET":
            listing = [{"name": n, "skus": s, "updated_at": None} for n, s in sorted(self.packages.items())]
            return httpx.Response(200, json={"packages": listing, "is_admin": self._is_admin(request)})

        if request.url.path == "/packages":
            if "Authorization" not in request.headers:
                return httpx.Response(401, json={"error": "unauthorized"})
            if not self._is_admin(request):
                return httpx.Response(403, json={"error": "forbidden"})

            body = json.loads(request.content)
            name = body["name"]
            if request.method == "PUT":
                self.packages[name] = body["skus"]
            else:
                if name not in self.packages:
                    return httpx.Response(404, json={"error": "package not found"})
                merged = list(self.packages[name])
                merged += [sku for sku in body.get("addSkus", []) if sku not in merged]
                self.packages[name] = [sku for sku in merged if sku not in body.get("removeSkus", [])]
            return httpx.Response(
                200,
                json={"package": {"name": name, "skus": self.packages[name], "updated_at": "2026-01-01T00:00:00"}},
            )

        return httpx.Response(404, json={"error": "not found"})


@pytest.fixture()
def backend():
    """Fake backend with the two-product catalogue and no packages yet."""
    return FakeBackend()


@pytest.fixture()
def make_product():
    def _make(product_id, price, name=None, consumer_price=None):
        return PricedProduct(
            id=product_id,
            name=name or f"Product {product_id}",
            category="Skincare",
            image_url=None,
            sold_count=0,
            price=price,
            consumer_price=price if consumer_price is None else consumer_price,
        )

    return _make


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def cart(store):
    return CartStore(store)
