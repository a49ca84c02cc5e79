import itertools

from popup_server.selection import SelectionState


def test_new_selection_is_incomplete():
    assert not SelectionState().is_complete()


def test_complete_in_any_order():
    calls = [("color", "Black"), ("size", "M")]
    for order in itertools.permutations(calls):
        selection = SelectionState()
        for field, value in order:
            getattr(selection, f"set_{field}")(value)
        assert selection.is_complete()


def test_changing_a_field_keeps_selection_complete():
    selection = SelectionState()
    selection.set_color("Black")
    selection.set_size("M")
    selection.set_color("White")

    assert selection.is_complete()
    assert selection.snapshot().color == "White"


def test_empty_value_clears_field():
    selection = SelectionState()
    selection.set_color("Black")
    selection.set_size("M")
    selection.set_size("")

    assert not selection.is_complete()
    assert selection.size is None


def test_reset():
    selection = SelectionState()
    selection.set_color("Black")
    selection.set_size("M")
    selection.reset()

    assert not selection.is_complete()
    assert selection.snapshot().model_dump() == {"color": None, "size": None}
