"""Lookup from (color, size) to a product variant."""

from typing import Optional

from .models import Variant


class VariantIndex:
    """
    Index over one product's variants.

    Color matching ignores case, size matching is exact. When two variants
    share the same pair, the one listed first wins.
    """

    def __init__(self) -> None:
        self._by_pair: dict[tuple[str, str], Variant] = {}
        self._colors: list[str] = []

    @classmethod
    def build(cls, variants: list[Variant]) -> "VariantIndex":
        index = cls()
        seen_colors: set[str] = set()
        for variant in variants:
            if variant.color and variant.color.lower() not in seen_colors:
                seen_colors.add(variant.color.lower())
                index._colors.append(variant.color)
            if variant.color is None or variant.size is None:
                continue
            index._by_pair.setdefault((variant.color.lower(), variant.size), variant)
        return index

    def lookup(self, color: Optional[str], size: Optional[str]) -> Optional[Variant]:
        """Return the variant for the pair, or None."""
        if color is None or size is None:
            return None
        return self._by_pair.get((color.lower(), size))

    def colors(self) -> list[str]:
        """Distinct color labels in first-appearance order."""
        return list(self._colors)

    def __len__(self) -> int:
        return len(self._by_pair)
