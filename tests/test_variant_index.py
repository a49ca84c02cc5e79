from popup_server.models import Variant
from popup_server.variant_index import VariantIndex


def variants(*rows):
    return [Variant(id=vid, color=color, size=size) for color, size, vid in rows]


def test_lookup_matches_color_ignoring_case():
    index = VariantIndex.build(variants(("Black", "S", 1), ("Black", "M", 2), ("White", "M", 3)))

    assert index.lookup("black", "M").id == 2
    assert index.lookup("BLACK", "S").id == 1
    assert index.lookup("white", "M").id == 3


def test_lookup_size_is_exact():
    index = VariantIndex.build(variants(("Black", "M", 2)))

    assert index.lookup("Black", "m") is None
    assert index.lookup("Black", "M ") is None


def test_lookup_missing_pair():
    index = VariantIndex.build(variants(("Black", "S", 1)))

    assert index.lookup("Black", "XL") is None
    assert index.lookup("Red", "S") is None
    assert index.lookup(None, "S") is None


def test_first_listed_duplicate_wins():
    index = VariantIndex.build(variants(("Black", "M", "first"), ("black", "M", "second")))

    assert index.lookup("Black", "M").id == "first"
    assert len(index) == 1


def test_variants_without_options_are_not_indexed():
    index = VariantIndex.build([Variant(id=1, color="Black"), Variant(id=2, size="M")])

    assert len(index) == 0
    assert index.lookup("Black", "M") is None


def test_colors_are_distinct_in_listed_order():
    index = VariantIndex.build(
        variants(("White", "S", 1), ("Black", "S", 2), ("white", "M", 3), ("Blue", "L", 4))
    )

    assert index.colors() == ["White", "Black", "Blue"]


def test_empty_variant_list():
    index = VariantIndex.build([])

    assert index.lookup("Black", "M") is None
    assert index.colors() == []
