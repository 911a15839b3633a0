import pytest

from venue_router.core.config import ConfigError, Settings, load_settings, settings_or_default


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    import os

    for key in list(os.environ):
        if key.startswith("VENUE_ROUTER_"):
            monkeypatch.delenv(key)


def test_defaults_match_builtin_tables():
    s = Settings()
    assert s.router.cache.ttl_ms == 5000
    assert s.router.history.limit == 120
    assert s.router.history.window == 60
    assert s.router.symbols["BTC/USDT"]["kraken"] == "XBTUSDT"
    assert s.router.venue_labels()["gateio"] == {"label": "Gate.io"}
    assert s.exchanges.rate_limit_rps == {}


def test_load_yaml(tmp_path):
    p = tmp_path / "s.yaml"
    p.write_text("router:\n  cache:\n    ttl_ms: 2500\nlogging:\n  level: DEBUG\n")
    s = load_settings(str(p))
    assert s.router.cache.ttl_ms == 2500
    assert s.logging.level == "DEBUG"
    assert "ETH/USDT" in s.router.symbols


def test_empty_yaml_gives_defaults(tmp_path):
    p = tmp_path / "empty.yaml"
    p.write_text("")
    assert load_settings(str(p)) == Settings()


def test_env_overrides_yaml(tmp_path, monkeypatch):
    p = tmp_path / "s.yaml"
    p.write_text("router:\n  cache:\n    ttl_ms: 2500\n")
    monkeypatch.setenv("VENUE_ROUTER_ROUTER__CACHE__TTL_MS", "1000")
    monkeypatch.setenv("VENUE_ROUTER_EXCHANGES__RATE_LIMIT_RPS", '{"okx": 2.5}')
    s = load_settings(str(p))
    assert s.router.cache.ttl_ms == 1000
    assert s.exchanges.rate_limit_rps == {"okx": 2.5}

    assert load_settings(str(p), use_env=False).router.cache.ttl_ms == 2500


def test_missing_file():
    with pytest.raises(ConfigError, match="not found"):
        load_settings("/nonexistent/settings.yaml")


def test_non_mapping_yaml(tmp_path):
    p = tmp_path / "list.yaml"
    p.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_settings(str(p))


@pytest.mark.parametrize("body", [
    "router:\n  cache:\n    ttl_ms: 0\n",
    "router:\n  history:\n    limit: 10\n    window: 20\n",
    "router:\n  symbols:\n    BTC/USDT: {bitstamp: BTCUSD}\n",
    "exchanges:\n  rate_limit_rps: {okx: -1}\n",
])
def test_validation_errors_become_config_error(tmp_path, body):
    p = tmp_path / "bad.yaml"
    p.write_text(body)
    with pytest.raises(ConfigError, match="Failed to validate settings"):
        load_settings(str(p))


def test_settings_or_default_without_path():
    assert settings_or_default(None) == Settings()
