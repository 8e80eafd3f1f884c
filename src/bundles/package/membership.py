"""Package membership: commands and handler.

``ReplacePackageSkus`` upserts the package and rewrites its membership.
``MergePackageSkus`` edits the current membership in memory and persists the
result the same way; it never creates a package.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from bundles.domain import bundles, logger
from bundles.package.package import Package


@bundles.command(part_of="Package")
class ReplacePackageSkus:
    """Replace a package's SKUs, creating the package on first write."""

    name = String(required=True, max_length=20)
    skus = Text()  # JSON array of product ids


@bundles.command(part_of="Package")
class MergePackageSkus:
    """Add and remove SKUs on an existing package."""

    name = String(required=True, max_length=20)
    add_skus = Text()  # JSON array of product ids
    remove_skus = Text()  # JSON array of product ids


def _load_skus(raw):
    if not raw:
        return []
    return json.loads(raw) if isinstance(raw, str) else list(raw)


@bundles.command_handler(part_of=Package)
class ManagePackageMembershipHandler:
    @handle(ReplacePackageSkus)
    def replace_package_skus(self, command):
        repo = current_domain.repository_for(Package)
        package = repo.find_by_name(command.name)
        if package is None:
            package = Package.create(command.name)
            logger.info("package_created", name=package.name)

        package.replace_skus(_load_skus(command.skus))
        repo.add(package)

        logger.info("package_skus_replaced", name=package.name, sku_count=len(package.skus))
        return package.to_representation()

    @handle(MergePackageSkus)
    def merge_package_skus(self, command):
        repo = current_domain.repository_for(Package)
        package = repo.find_by_name(command.name)
        if package is None:
            raise ObjectNotFoundError(f"Package `{command.name}` does not exist")

        package.merge_skus(
            add_skus=_load_skus(command.add_skus),
            remove_skus=_load_skus(command.remove_skus),
        )
        repo.add(package)

        logger.info("package_skus_merged", name=package.name, sku_count=len(package.skus))
        return package.to_representation()
