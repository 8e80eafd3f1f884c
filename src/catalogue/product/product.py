"""Product aggregate."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer, String

from catalogue.domain import catalogue


@catalogue.aggregate
class Product:
    """A catalogue product as shown on the storefront grid."""

    name: String(required=True, max_length=255)
    category: String(max_length=100)
    image_url: String(max_length=500)
    sold_count: Integer(default=0)

    @invariant.post
    def sold_count_cannot_be_negative(self):
        if self.sold_count is not None and self.sold_count < 0:
            raise ValidationError({"sold_count": ["Sold count cannot be negative"]})
