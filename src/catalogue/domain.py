"""Catalogue bounded context: products, pricing tiers and per-tier prices.

The catalogue is read-only to the storefront: it is populated through
catalogue imports and read back as validated rows for price resolution.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging(log_file_prefix="storefront")

logger = get_logger(__name__)

catalogue = Domain(name="catalogue")
