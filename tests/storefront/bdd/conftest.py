"""Shared BDD fixtures for storefront scenarios."""

import pytest
from pytest_bdd import given, parsers


@pytest.fixture()
def catalogue():
    """Priced products, in insertion order."""
    return []


@pytest.fixture()
def packages():
    return {}


@pytest.fixture()
def outcome():
    """Container for the quote or purchase produced by a When step."""
    return {}


@given("an empty cart")
def empty_cart(cart):
    assert len(cart) == 0


@given(parsers.cfparse('a product "{product_id}" priced at {price:d}'))
def priced_product(catalogue, make_product, product_id, price):
    catalogue.append(make_product(product_id, price))


@given(parsers.cfparse('the "{name}" package contains "{product_id}"'))
def package_contains(packages, name, product_id):
    packages.setdefault(name, []).append(product_id)
