"""Data models for the product popup."""

from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field

SIZE_OPTIONS = ["XS", "S", "M", "L", "XL"]


class Variant(BaseModel):
    """Represents one purchasable variant of a product."""

    id: Union[int, str] = Field(description="Variant ID, passed through to the cart unmodified")
    color: Optional[str] = Field(None, description="Color option value (option1)")
    size: Optional[str] = Field(None, description="Size option value (option2)")
    title: Optional[str] = Field(None, description="Variant title")


class Product(BaseModel):
    """Represents a product as returned by the storefront."""

    handle: str = Field(description="Product handle")
    title: str = Field(description="Product title")
    price: int = Field(default=0, description="Price in minor currency units")
    description: str = Field(default="", description="Product description (HTML)")
    featured_image: Optional[str] = Field(None, description="Featured image URL")
    variants: list[Variant] = Field(default_factory=list, description="Variants in listed order")


class Selection(BaseModel):
    """Snapshot of the shopper's color/size choice."""

    color: Optional[str] = None
    size: Optional[str] = None


class TriggeredBundle(BaseModel):
    """A bundle rule that fired for a selection."""

    handle: str = Field(description="Handle of the product to add alongside")
    quantity: int = Field(default=1, gt=0)


class CartAddResult(BaseModel):
    """Outcome of a single add-to-cart call."""

    success: bool
    item_count: Optional[int] = Field(None, description="Item count reported by the cart after the add")
    reason: Optional[str] = Field(None, description="Failure reason")

    @classmethod
    def ok(cls, item_count: Optional[int] = None) -> "CartAddResult":
        return cls(success=True, item_count=item_count)

    @classmethod
    def failed(cls, reason: str) -> "CartAddResult":
        return cls(success=False, reason=reason)


class CartSnapshot(BaseModel):
    """Read-only view of the cart."""

    item_count: int = Field(default=0, description="Total number of items")
    total_price: Optional[int] = Field(None, description="Cart total in minor currency units")


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class SubmitStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    IGNORED = "ignored"


class SubmitOutcome(BaseModel):
    """Aggregate result of one submission."""

    status: SubmitStatus
    error: Optional[str] = Field(None, description="Error kind when status is error")
    message: str = Field(default="", description="Message shown to the shopper")
    variant_id: Optional[Union[int, str]] = Field(None, description="Resolved primary variant")
    bundle_triggered: bool = False
    bundle_added: bool = False
    item_count: Optional[int] = Field(None, description="Refreshed cart count, if known")

    @property
    def succeeded(self) -> bool:
        return self.status == SubmitStatus.SUCCESS


class PopupView(BaseModel):
    """What the presentation layer renders for an open popup."""

    handle: str
    title: str
    price: str = Field(description="Formatted price")
    description: str = Field(description="Plain-text description")
    image: Optional[str] = None
    colors: list[str] = Field(default_factory=list, description="Distinct colors in variant order")
    sizes: list[str] = Field(default_factory=lambda: list(SIZE_OPTIONS))
    selected_color: Optional[str] = None
    selected_size: Optional[str] = None
    can_submit: bool = False
    state: str = "idle"
