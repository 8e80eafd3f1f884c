"""Domain events for the Package aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from bundles.domain import bundles


@bundles.event(part_of="Package")
class PackageMembershipReplaced:
    """The SKU membership of a package was rewritten."""

    __version__ = 1

    package_id = Identifier(required=True)
    name = String(required=True, max_length=20)
    skus = Text(required=True)  # JSON array of product ids, in position order
    sku_count = Integer(required=True)
    updated_at = DateTime(required=True)
