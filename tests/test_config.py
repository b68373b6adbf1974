"""Tests for configuration loading."""

from gcweb.config import Config, load_config


def test_defaults():
    config = Config(_env_file=None)

    assert config.website_url == "https://www.geocaching.com"
    assert config.api_proxy_url == "https://www.geocaching.com/api/proxy"
    assert config.auth_cookie is None
    assert config.request_timeout == 30.0
    assert config.include_ratings is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GCWEB_AUTH_COOKIE", "secret-cookie")
    monkeypatch.setenv("GCWEB_REQUEST_TIMEOUT", "5")
    monkeypatch.setenv("GCWEB_INCLUDE_RATINGS", "true")
    monkeypatch.setenv("GCWEB_GCVOTE_USERNAME", "cacher")

    config = Config(_env_file=None)

    assert config.auth_cookie.get_secret_value() == "secret-cookie"
    assert "secret-cookie" not in repr(config)
    assert config.request_timeout == 5.0
    assert config.include_ratings is True
    assert config.gcvote_username == "cacher"


def test_env_file(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("GCWEB_WEBSITE_URL=https://staging.geocaching.com\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert load_config().website_url == "https://staging.geocaching.com"


def test_populate_by_field_name():
    config = Config(_env_file=None, include_ratings=True)

    assert config.include_ratings is True
