"""Tests for core.settings and core.logging_config."""

import logging
from pathlib import Path

import pytest

from core.logging_config import setup_logging
from core.settings import get_default_settings, get_setting, load_settings, reload_settings


def test_defaults_without_file(tmp_path: Path) -> None:
    """Missing settings.yaml gives the defaults."""
    settings = load_settings(tmp_path)
    assert get_setting(settings, "discovery.doh_url") == "https://dns.google/resolve"
    assert get_setting(settings, "discovery.provider_mx_hosts") == [
        "serv2.cyberv.co.za",
        "serv3.cyberv.co.za",
    ]
    assert get_setting(settings, "discovery.missing", "fallback") == "fallback"


def test_file_values_merge_over_defaults(tmp_path: Path) -> None:
    """YAML values override defaults key by key."""
    (tmp_path / "settings.yaml").write_text(
        "discovery:\n  mx_timeout: 3\n  provider_mx_hosts: [mx.example.net]\n",
        encoding="utf-8",
    )
    settings = load_settings(tmp_path)
    assert settings["discovery"]["mx_timeout"] == 3
    assert settings["discovery"]["provider_mx_hosts"] == ["mx.example.net"]
    assert settings["discovery"]["generic_timeout"] == 30.0


def test_malformed_yaml_falls_back_to_defaults(tmp_path: Path) -> None:
    """Unparseable YAML falls back to defaults."""
    (tmp_path / "settings.yaml").write_text("discovery: [unclosed", encoding="utf-8")
    assert load_settings(tmp_path)["discovery"] == get_default_settings()["discovery"]


def test_settings_are_cached_until_reload(tmp_path: Path) -> None:
    """Settings are read once until reload_settings."""
    first = load_settings(tmp_path)
    (tmp_path / "settings.yaml").write_text("discovery:\n  mx_timeout: 1\n", encoding="utf-8")
    assert load_settings(tmp_path) is first

    reload_settings()
    assert load_settings(tmp_path)["discovery"]["mx_timeout"] == 1


def test_default_settings_are_copies() -> None:
    """Callers cannot mutate the defaults."""
    get_default_settings()["discovery"]["provider_mx_hosts"].append("x")
    assert "x" not in get_default_settings()["discovery"]["provider_mx_hosts"]


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    yield
    for h in root.handlers[:]:
        root.removeHandler(h)
        h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_setup_logging_writes_to_file(tmp_path: Path, restore_root_logger) -> None:
    """Log records land in the configured file."""
    setup_logging(tmp_path, {"logging": {"file": "logs/test.log", "level": "DEBUG"}})
    logging.getLogger("account_setup.test").debug("hello")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "hello" in (tmp_path / "logs" / "test.log").read_text(encoding="utf-8")
