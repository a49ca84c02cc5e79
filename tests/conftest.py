"""Shared fakes for popup tests."""

import asyncio
from typing import Optional, Union

import pytest

from popup_server.errors import StorefrontError
from popup_server.models import CartAddResult, CartSnapshot, NotificationLevel, Product, Variant


def make_product(handle: str = "classic-tee", variants: Optional[list[tuple]] = None) -> Product:
    if variants is None:
        variants = [("Black", "S", 1), ("Black", "M", 2), ("White", "M", 3)]
    return Product(
        handle=handle,
        title="Classic Tee",
        price=2500,
        description="<p>Soft <b>cotton</b> tee</p>",
        featured_image="https://cdn.example.com/tee.jpg",
        variants=[Variant(id=vid, color=color, size=size) for color, size, vid in variants],
    )


class FakeStore:
    """Product source and cart gateway that records every call."""

    def __init__(self) -> None:
        self.products: dict[str, Product] = {}
        self.product_calls: list[str] = []
        self.add_calls: list[tuple[Union[int, str], int]] = []
        self.cart_calls = 0
        self.item_count = 0
        self.failing_variants: set[Union[int, str]] = set()
        self.raising_variants: set[Union[int, str]] = set()
        self.cart_fails = False
        self.gate: Optional[asyncio.Event] = None

    def add_product(self, product: Product) -> Product:
        self.products[product.handle] = product
        return product

    async def fetch_product(self, handle: str) -> Product:
        self.product_calls.append(handle)
        if handle not in self.products:
            raise StorefrontError("Product not found", status_code=404)
        return self.products[handle]

    async def add_line(self, variant_id: Union[int, str], quantity: int = 1) -> CartAddResult:
        self.add_calls.append((variant_id, quantity))
        if self.gate is not None:
            await self.gate.wait()
        if variant_id in self.raising_variants:
            raise RuntimeError("connection reset")
        if variant_id in self.failing_variants:
            return CartAddResult.failed("Cart Error")
        self.item_count += quantity
        return CartAddResult.ok(self.item_count)

    async def fetch_cart(self) -> CartSnapshot:
        self.cart_calls += 1
        if self.cart_fails:
            raise StorefrontError("Failed to read cart")
        return CartSnapshot(item_count=self.item_count)

    async def close(self) -> None:
        pass

    @property
    def added_ids(self) -> list[Union[int, str]]:
        return [variant_id for variant_id, _ in self.add_calls]


class Recorder:
    def __init__(self) -> None:
        self.messages: list[tuple[str, NotificationLevel]] = []
        self.counts: list[int] = []

    def notify(self, message: str, level: NotificationLevel) -> None:
        self.messages.append((message, level))

    def count(self, item_count: int) -> None:
        self.counts.append(item_count)


@pytest.fixture
def store() -> FakeStore:
    store = FakeStore()
    store.add_product(make_product())
    store.add_product(make_product("dark-winter-jacket", [("Navy", "L", 900), ("Black", "L", 901)]))
    return store


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
