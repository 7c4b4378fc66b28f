# tests/test_config.py

import json

import pytest

from roster.config import Settings, load_settings
from roster.core.exceptions import ConfigurationError
from roster.main import build_parser

ENVIRONMENT_NAMES = [
    "ROSTER_DATABASE_TYPE",
    "ROSTER_DATABASE_PATH",
    "FRONTEND_URL",
    "HOST",
    "PORT",
    "ROSTER_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ENVIRONMENT_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()

    assert settings == Settings.model_validate({})
    assert settings.port == 3000
    assert settings.database_type == "sqlite"


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("FRONTEND_URL", "https://app.example.edu")
    monkeypatch.setenv("ROSTER_DATABASE_PATH", "/tmp/records.db")
    monkeypatch.setenv("ROSTER_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.port == 8080
    assert settings.frontend_url == "https://app.example.edu"
    assert settings.database_config() == {"database_path": "/tmp/records.db"}
    assert settings.log_level == "DEBUG"


def test_environment_overrides_config_file(tmp_path, monkeypatch):
    config_path = tmp_path / "roster.json"
    config_path.write_text(json.dumps({"port": 4000, "host": "127.0.0.1"}))
    monkeypatch.setenv("PORT", "5000")

    settings = load_settings(str(config_path))

    assert settings.port == 5000
    assert settings.host == "127.0.0.1"


def test_bad_port_rejected(monkeypatch):
    monkeypatch.setenv("PORT", "eighty")

    with pytest.raises(ConfigurationError):
        load_settings()


def test_port_out_of_range_rejected():
    with pytest.raises(ConfigurationError):
        load_settings(overrides={"port": 70000})


def test_unknown_setting_rejected(tmp_path):
    config_path = tmp_path / "roster.json"
    config_path.write_text(json.dumps({"mongo_uri": "mongodb://x"}))

    with pytest.raises(ConfigurationError):
        load_settings(str(config_path))


def test_unreadable_config_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_settings(str(tmp_path / "missing.json"))


def test_command_line_flags_win(monkeypatch):
    monkeypatch.setenv("PORT", "5000")
    args = build_parser().parse_args(["--port", "9000", "--database-path", "cli.db"])

    settings = load_settings(overrides={
        "port": args.port,
        "database_path": args.database_path,
        "host": args.host,
    })

    assert settings.port == 9000
    assert settings.database_path == "cli.db"
    assert settings.host == "0.0.0.0"
