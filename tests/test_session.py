import json
import os

from popup_server.session import SessionManager


def test_new_session_is_empty(tmp_path):
    manager = SessionManager(str(tmp_path / "session.json"))

    assert manager.get_cookies() == {}
    assert manager.session.cart_token is None


def test_save_and_reload(tmp_path):
    path = str(tmp_path / "session.json")
    SessionManager(path, store_url="https://a.example").save_cookies({"cart": "tok"})

    reloaded = SessionManager(path, store_url="https://a.example")

    assert reloaded.session.cart_token == "tok"
    assert oct(os.stat(path).st_mode & 0o777) == "0o600"


def test_session_for_other_store_is_ignored(tmp_path):
    path = str(tmp_path / "session.json")
    SessionManager(path, store_url="https://a.example").save_cookies({"cart": "tok"})

    other = SessionManager(path, store_url="https://b.example")

    assert other.get_cookies() == {}


def test_corrupted_file_starts_fresh(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")

    assert SessionManager(str(path)).get_cookies() == {}


def test_clear_session(tmp_path):
    path = tmp_path / "session.json"
    manager = SessionManager(str(path))
    manager.save_cookies({"cart": "tok"})
    assert json.loads(path.read_text())["cookies"] == {"cart": "tok"}

    manager.clear_session()

    assert not path.exists()
    assert manager.get_cookies() == {}
