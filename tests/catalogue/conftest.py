import os

import pytest


@pytest.fixture(scope="session")
def _catalogue_domain(request):
    """Initialize the catalogue domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from catalogue.domain import catalogue

    catalogue.init()
    return catalogue


@pytest.fixture(scope="session", autouse=True)
def setup_db(_catalogue_domain):
    from shared.db import drop_db, setup_db

    setup_db(_catalogue_domain)

    yield

    drop_db(_catalogue_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_catalogue_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _catalogue_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def catalogue_payload():
    """Two products, four tiers; the Crema has no Silver price yet."""
    return {
        "products": [
            {"id": "prd-001", "name": "Serum Tsalis", "category": "Skincare", "image_url": None, "sold_count": 120},
            {"id": "prd-002", "name": "Crema Tsalis", "category": "Skincare", "image_url": None, "sold_count": 45},
        ],
        "tiers": [
            {"id": "t1", "name": "Consumer"},
            {"id": "t2", "name": "Agen Kecil"},
            {"id": "t3", "name": "Silver"},
            {"id": "t4", "name": "Gold"},
        ],
        "prices": [
            {"product_id": "prd-001", "tier_id": "t1", "price": 85000},
            {"product_id": "prd-001", "tier_id": "t2", "price": 70000},
            {"product_id": "prd-001", "tier_id": "t3", "price": 60000},
            {"product_id": "prd-002", "tier_id": "t1", "price": 120000},
            {"product_id": "prd-002", "tier_id": "t4", "price": 0},
        ],
    }
