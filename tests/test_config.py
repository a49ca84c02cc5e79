from popup_server.config import PopupSettings


def test_defaults(monkeypatch):
    for var in ("POPUP_STORE_URL", "POPUP_BUNDLE_HANDLE", "POPUP_BUNDLE_COLOR", "POPUP_BUNDLE_SIZE", "POPUP_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)

    settings = PopupSettings.from_env()

    assert settings.store_url is None
    assert settings.timeout == 30.0
    rule = settings.bundle_rule()
    assert (rule.color, rule.size, rule.handle) == ("black", "M", "dark-winter-jacket")


def test_from_env(monkeypatch):
    monkeypatch.setenv("POPUP_STORE_URL", "https://shop.example.com")
    monkeypatch.setenv("POPUP_BUNDLE_HANDLE", "red-scarf")
    monkeypatch.setenv("POPUP_BUNDLE_COLOR", "Red")
    monkeypatch.setenv("POPUP_BUNDLE_SIZE", "XL")
    monkeypatch.setenv("POPUP_TIMEOUT", "5")

    settings = PopupSettings.from_env()

    assert settings.store_url == "https://shop.example.com"
    assert settings.timeout == 5.0
    assert settings.bundle_rule().handle == "red-scarf"
