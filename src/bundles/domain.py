"""Bundles bounded context: admin-curated package membership.

A package names the SKUs that make up a bulk purchase mode (Silver, Gold,
Platinum). Reads are public; writes require an admin credential.
"""

import structlog
from protean.domain import Domain

from shared.logging import configure_logging

configure_logging(log_file_prefix="storefront")

bundles = Domain(name="bundles")

logger = structlog.get_logger(__name__)
