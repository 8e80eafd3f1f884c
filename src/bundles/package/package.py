"""Package aggregate: the ordered SKU membership behind a bundle purchase mode.

Membership is always written as a whole: every write drops the current items
and re-inserts the new sequence with ``position`` set to the list index. The
unit of work around the command handler persists the removal and the
re-insertion together, so a reader never observes an empty package halfway
through a write.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from bundles.domain import bundles
from bundles.package.events import PackageMembershipReplaced
from shared.tiers import PACKAGE_NAMES


def normalize_package_name(name):
    return name.strip().lower() if isinstance(name, str) else name


@bundles.entity(part_of="Package")
class PackageItem:
    product_id = Identifier(required=True)
    position = Integer(required=True, min_value=0)
    quantity = Integer(default=1, min_value=1)


@bundles.aggregate
class Package:
    name = String(required=True, max_length=20, unique=True)
    items = HasMany(PackageItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def name_must_be_a_bundle_package(self):
        if self.name not in PACKAGE_NAMES:
            raise ValidationError({"name": [f"Unknown package: {self.name}"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, name):
        now = datetime.now(UTC)
        return cls(
            name=normalize_package_name(name),
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------
    @property
    def skus(self) -> list[str]:
        """Product ids in display order."""
        return [str(item.product_id) for item in sorted(self.items, key=lambda i: i.position)]

    def replace_skus(self, skus):
        """Replace the whole membership with ``skus``, in the given order."""
        for item in list(self.items):
            self.remove_items(item)

        for position, product_id in enumerate(skus):
            self.add_items(PackageItem(product_id=product_id, position=position, quantity=1))

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            PackageMembershipReplaced(
                package_id=str(self.id),
                name=self.name,
                skus=json.dumps(list(skus)),
                sku_count=len(skus),
                updated_at=now,
            )
        )

    def merge_skus(self, add_skus=None, remove_skus=None):
        """Append unseen ``add_skus`` in input order, then drop every id in ``remove_skus``.

        The merged sequence is persisted through ``replace_skus``.
        """
        merged = list(self.skus)
        for sku in add_skus or []:
            if sku not in merged:
                merged.append(sku)

        removals = set(remove_skus or [])
        merged = [sku for sku in merged if sku not in removals]

        self.replace_skus(merged)

    def to_representation(self) -> dict:
        return {
            "name": self.name,
            "skus": self.skus,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@bundles.repository(part_of=Package)
class PackageRepository:
    def find_by_name(self, name) -> Package | None:
        """Find a package by name, case-insensitively."""
        results = self._dao.query.filter(name=normalize_package_name(name)).all().items
        return results[0] if results else None

    def all_by_name(self) -> list[Package]:
        return self._dao.query.order_by("name").all().items
