"""Collaborator contracts the popup core depends on."""

from typing import Protocol, Union

from .models import CartAddResult, CartSnapshot, NotificationLevel, Product


class ProductSource(Protocol):
    """Read-only product lookup by handle."""

    async def fetch_product(self, handle: str) -> Product:
        """Return the product, raise StorefrontError on any failure."""
        ...


class CartGateway(Protocol):
    """Additive cart writes plus a read-only snapshot."""

    async def add_line(self, variant_id: Union[int, str], quantity: int = 1) -> CartAddResult:
        """Add a line item. Failures are returned, not raised."""
        ...

    async def fetch_cart(self) -> CartSnapshot:
        ...


class NotificationSink(Protocol):
    def __call__(self, message: str, level: NotificationLevel) -> None: ...


class CartCountSink(Protocol):
    def __call__(self, item_count: int) -> None: ...
