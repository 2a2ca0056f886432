# tests/test_auth.py
from prompt_relay import auth as authmod


def test_open_mode_allows_anyone(monkeypatch):
    monkeypatch.setattr(authmod, "AUTH_MODE", authmod.AUTH_MODE_NONE)
    assert authmod.auth_required() is False
    assert authmod.is_key_allowed(None) is True


def test_api_key_mode(monkeypatch):
    monkeypatch.setattr(authmod, "AUTH_MODE", authmod.AUTH_MODE_API_KEY)
    monkeypatch.setattr(authmod, "API_KEYS", {"k1"})
    assert authmod.auth_required() is True
    assert authmod.is_key_allowed("k1") is True
    assert authmod.is_key_allowed("k2") is False
    assert authmod.is_key_allowed("") is False


def test_api_key_mode_without_configured_keys_rejects(monkeypatch):
    monkeypatch.setattr(authmod, "AUTH_MODE", authmod.AUTH_MODE_API_KEY)
    monkeypatch.setattr(authmod, "API_KEYS", set())
    assert authmod.is_key_allowed("anything") is False


def test_load_keys_from_env_and_file(monkeypatch, tmp_path):
    keys_file = tmp_path / "keys.txt"
    keys_file.write_text("file-key\n\n  other-key  \n", encoding="utf-8")
    monkeypatch.setattr(authmod, "API_KEYS_ENV", " env-key , ,second ")
    monkeypatch.setattr(authmod, "API_KEYS_FILE", str(keys_file))
    assert authmod._load_api_keys() == {"env-key", "second", "file-key", "other-key"}
