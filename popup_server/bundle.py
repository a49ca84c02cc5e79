"""Rule that adds a second product for one color/size combination."""

from typing import Optional

from pydantic import BaseModel, Field

from .models import Product, Selection, TriggeredBundle, Variant

DEFAULT_BUNDLE_HANDLE = "dark-winter-jacket"


class BundleRule(BaseModel):
    """
    Fires when the shopper picked ``color`` (any case) and exactly ``size``.

    The rule is matched against what the shopper selected, not against the
    resolved variant's own option values.
    """

    color: str = Field(default="black", description="Trigger color, compared case-insensitively")
    size: str = Field(default="M", description="Trigger size, compared exactly")
    handle: str = Field(default=DEFAULT_BUNDLE_HANDLE, description="Product added when the rule fires")
    quantity: int = Field(default=1, gt=0)

    def evaluate(self, selection: Selection) -> Optional[TriggeredBundle]:
        if not selection.color or not selection.size:
            return None
        if selection.color.lower() != self.color.lower() or selection.size != self.size:
            return None
        return TriggeredBundle(handle=self.handle, quantity=self.quantity)

    @staticmethod
    def pick_variant(product: Product) -> Optional[Variant]:
        """First listed variant of the bundle product."""
        return product.variants[0] if product.variants else None
