"""Tests for token resolution, service parsing and CLI startup."""

import pytest

from app.core import config
from app.core.config import ConfigurationError, clean_token, parse_services, resolve_api_token


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("DO_TOKEN", "DIGITALOCEAN_API_TOKEN", "GCP_PROJECT_ID", "GOOGLE_CLOUD_PROJECT"):
        monkeypatch.delenv(var, raising=False)


def test_explicit_token_wins(monkeypatch):
    monkeypatch.setenv("DO_TOKEN", "from-env")
    assert resolve_api_token("from-flag") == "from-flag"


def test_do_token_env(monkeypatch):
    monkeypatch.setenv("DO_TOKEN", "from-env")
    monkeypatch.setenv("DIGITALOCEAN_API_TOKEN", "other")
    assert resolve_api_token() == "from-env"


def test_alternate_env(monkeypatch):
    monkeypatch.setenv("DIGITALOCEAN_API_TOKEN", "alt")
    assert resolve_api_token() == "alt"


def test_token_is_cleaned(monkeypatch):
    monkeypatch.setenv("DO_TOKEN", "  'dop_v1_abc'  ")
    assert resolve_api_token() == "dop_v1_abc"
    assert clean_token(None) == ""


def test_secret_manager_fallback(monkeypatch):
    looked_up = []

    def fake_secret(secret_id, timeout_seconds=5.0):
        looked_up.append(secret_id)
        return "from-secret"

    monkeypatch.setattr(config, "get_secret_sync", fake_secret)
    assert resolve_api_token() == "from-secret"
    assert looked_up == ["DO_TOKEN"]


def test_missing_token_is_fatal():
    with pytest.raises(ConfigurationError, match="DO_TOKEN"):
        resolve_api_token()


def test_secret_manager_skipped_without_project():
    assert config.get_secret_sync("DO_TOKEN") is None


def test_parse_services():
    assert parse_services("droplets, Networking,,accounts ") == ["droplets", "networking", "accounts"]
    assert parse_services("") == []
    assert parse_services(None) == []


def test_main_exits_without_token():
    from server import main

    with pytest.raises(SystemExit) as exc_info:
        main(["--services", "droplets"])
    assert exc_info.value.code == 1


def test_main_exits_on_unknown_service(monkeypatch):
    from server import main

    monkeypatch.setenv("DO_TOKEN", "t")
    with pytest.raises(SystemExit) as exc_info:
        main(["--services", "kubernetes"])
    assert exc_info.value.code == 1
