"""Client-side shopping cart.

The cart holds at most one line per product id. A line's unit price is frozen
when the product is first added: later adds only bump the quantity, and
switching purchase mode never re-prices lines already in the cart.

Every mutation rewrites the whole cart blob to the keyed store, and every
subscribed listener is called afterwards. A missing or unreadable blob loads
as an empty cart.
"""

import json
from collections.abc import Callable

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from shared.logging import get_logger
from storefront.storage import KeyedStore

logger = get_logger(__name__)

CART_KEY = "cart"


class CartItem(BaseModel):
    """What the caller supplies when adding a product."""

    id: str = Field(min_length=1)
    name: str
    price: int = Field(ge=0)
    image: str | None = None


class CartLine(BaseModel):
    id: str = Field(min_length=1)
    name: str
    price: int = Field(ge=0)
    quantity: int = Field(ge=1)
    image: str | None = None


_LINES = TypeAdapter(list[CartLine])

CartListener = Callable[["CartStore"], None]


class CartStore:
    def __init__(self, store: KeyedStore, key: str = CART_KEY) -> None:
        self.store = store
        self.key = key
        self._lines: list[CartLine] = self._load()
        self._listeners: list[CartListener] = []

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    def _load(self) -> list[CartLine]:
        try:
            raw = self.store.get(self.key)
        except OSError as exc:
            logger.warning("cart_load_failed", key=self.key, error=str(exc))
            return []
        except ValueError as exc:
            # Undecodable bytes on disk
            logger.warning("cart_state_discarded", key=self.key, error=str(exc))
            return []
        if not raw:
            return []

        try:
            lines = _LINES.validate_python(json.loads(raw))
        except (ValueError, PydanticValidationError) as exc:
            logger.warning("cart_state_discarded", key=self.key, error=str(exc))
            return []

        # Collapse duplicate ids that an older writer may have left behind
        merged: dict[str, CartLine] = {}
        for line in lines:
            if line.id in merged:
                merged[line.id].quantity += line.quantity
            else:
                merged[line.id] = line
        return list(merged.values())

    def _save(self) -> None:
        self.store.set(self.key, json.dumps([line.model_dump() for line in self._lines]))

    def _changed(self) -> None:
        self._save()
        for listener in list(self._listeners):
            listener(self)

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Call ``listener(cart)`` after every mutation. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def _find(self, product_id: str) -> CartLine | None:
        return next((line for line in self._lines if line.id == product_id), None)

    def add(self, item: CartItem | dict, quantity: int = 1) -> CartLine:
        """Add ``quantity`` units of a product, merging into its existing line."""
        if quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got {quantity}")
        if not isinstance(item, CartItem):
            item = CartItem.model_validate(item)

        line = self._find(item.id)
        if line is not None:
            # Existing line keeps the price it was first added at
            line.quantity += quantity
        else:
            line = CartLine(
                id=item.id,
                name=item.name,
                price=item.price,
                quantity=quantity,
                image=item.image,
            )
            self._lines.append(line)

        self._changed()
        return line

    def remove(self, product_id: str) -> None:
        line = self._find(product_id)
        if line is None:
            return
        self._lines.remove(line)
        self._changed()

    def set_quantity(self, product_id: str, quantity: int) -> None:
        line = self._find(product_id)
        if line is None:
            return
        line.quantity = max(1, int(quantity))
        self._changed()

    def clear(self) -> None:
        self._lines = []
        self._changed()

    def checkout(self) -> None:
        raise NotImplementedError("Checkout is not implemented")

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def lines(self) -> list[CartLine]:
        return [line.model_copy() for line in self._lines]

    @property
    def total_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def total_price(self) -> int:
        return sum(line.price * line.quantity for line in self._lines)

    @property
    def distinct_count(self) -> int:
        return len(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: str) -> bool:
        return self._find(product_id) is not None
