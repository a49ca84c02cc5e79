from popup_server.formatting import format_price, strip_html


def test_format_price():
    assert format_price(2500) == "$25.00"
    assert format_price(1999) == "$19.99"
    assert format_price(5) == "$0.05"
    assert format_price(0) == "$0.00"


def test_format_price_symbol():
    assert format_price(1050, symbol="€") == "€10.50"


def test_strip_html():
    assert strip_html("<p>Soft <b>cotton</b> tee</p>") == "Soft cotton tee"
    assert strip_html("<p>One</p><p>Two &amp; three</p>") == "One\nTwo & three"
    assert strip_html("") == ""
