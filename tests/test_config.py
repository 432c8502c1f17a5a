"""Configuration file and environment overrides."""

import logging

import pytest

from computer_reset.systems import logging as app_logging
from computer_reset.systems.config import _AppConfig


@pytest.fixture
def config_file(tmp_path):
    def write(text: str) -> str:
        path = tmp_path / "config.cfg"
        path.write_text(text, encoding="utf-8")
        return str(path)
    return write

BASE_CONFIG = """
[app]
SUCKERS_DS = false
LOGS_FOLDER = {logs}
LOGS_MASK_KEYS = Secret, token

[ds]
HOST = dc01.contoso.local,dc02.contoso.local
PORT = 389
BASE =
DRY_RUN = true
"""


def test_read_from_file(config_file, tmp_path, monkeypatch):
    monkeypatch.delenv("COMPRESET__APP__SUCKERS_DS", raising=False)
    monkeypatch.delenv("COMPRESET__APP__LOGS_FOLDER", raising=False)

    config = _AppConfig(config_file(BASE_CONFIG.format(logs=tmp_path / "logs")))

    assert config.SUCKERS_DS is False
    assert config.LOGS_FOLDER == str(tmp_path / "logs")
    assert not (tmp_path / "logs").exists()
    assert config.DS_HOST == "dc01.contoso.local,dc02.contoso.local"
    assert config.DS_PORT == 389
    assert config.DS_BASE is None
    assert config.DS_KEYTAB is None
    assert config.DS_DRY_RUN is True
    assert config.DS_TLS_REQUIRE_CERT == "demand"
    assert config.DS_CA_FILE is None
    assert config.PORT == 5001
    assert config.LOGS_MASK_KEYS == ["new_password", "password", "secret", "token", "unicodepwd"]


def test_environment_overrides_file(config_file, tmp_path, monkeypatch):
    monkeypatch.setenv("COMPRESET__DS__HOST", "dc09.contoso.local")
    monkeypatch.setenv("COMPRESET__DS__DRY_RUN", "false")
    monkeypatch.setenv("COMPRESET__WEB__PORT", "8080")

    config = _AppConfig(config_file(BASE_CONFIG.format(logs=tmp_path / "logs")))

    assert config.DS_HOST == "dc09.contoso.local"
    assert config.DS_DRY_RUN is False
    assert config.PORT == 8080


def test_invalid_boolean(config_file, tmp_path, monkeypatch):
    monkeypatch.setenv("COMPRESET__DS__DRY_RUN", "maybe")

    with pytest.raises(ValueError):
        _AppConfig(config_file(BASE_CONFIG.format(logs=tmp_path / "logs")))


def test_invalid_port(config_file, tmp_path, monkeypatch):
    monkeypatch.setenv("COMPRESET__DS__PORT", "1234")

    with pytest.raises(ValueError, match="389 or 636"):
        _AppConfig(config_file(BASE_CONFIG.format(logs=tmp_path / "logs")))


def test_missing_required_value(config_file, monkeypatch):
    monkeypatch.delenv("COMPRESET__APP__LOGS_FOLDER", raising=False)

    with pytest.raises(ValueError, match=r"Not find \[app\]\[LOGS_FOLDER\]"):
        _AppConfig(config_file("[app]\nSUCKERS_DS = true\n"))


def test_invalid_certificate_check(config_file, tmp_path, monkeypatch):
    monkeypatch.setenv("COMPRESET__DS__TLS_REQUIRE_CERT", "sometimes")

    with pytest.raises(ValueError, match="TLS_REQUIRE_CERT"):
        _AppConfig(config_file(BASE_CONFIG.format(logs=tmp_path / "logs")))


def test_packaged_default_config():
    config = _AppConfig(None)

    assert config.DS_PORT == 636
    assert config.DS_TLS_REQUIRE_CERT == "demand"
    assert config.DS_HOST is None
    assert config.PORT == 5001


@pytest.fixture
def restore_root_logging():
    names = ["", "uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"]
    saved = {name: (logging.getLogger(name).handlers[:], logging.getLogger(name).level) for name in names}
    yield
    for name, (handlers, level) in saved.items():
        log = logging.getLogger(name)
        for handler in log.handlers:
            if handler not in handlers:
                handler.close()
        log.handlers = handlers
        log.setLevel(level)


def test_logs_folder_created_only_for_file_logging(tmp_path, monkeypatch, restore_root_logging):
    logs = tmp_path / "logs"
    monkeypatch.setattr(app_logging.AppConfig, "LOGS_FOLDER", str(logs))

    app_logging.setup_logging(log_file=False)
    assert not logs.exists()

    app_logging.setup_logging(log_file=True)
    assert (logs / "api.log").exists()
