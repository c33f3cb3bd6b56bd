import os

import pytest

from tempclip.config import TempClipConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in (
        "TEMPCLIP_HOST", "TEMPCLIP_PORT", "TEMPCLIP_MAX_CONTENT_LENGTH",
        "TEMPCLIP_ID_LENGTH", "TEMPCLIP_CLEANUP_INTERVAL", "TEMPCLIP_LAZY_CLEANUP",
        "TEMPCLIP_LAZY_CLEANUP_INTERVAL", "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_defaults():
    config = TempClipConfig.from_env()
    assert config == TempClipConfig()
    assert config.max_content_length == 1_000_000
    assert config.id_length == 24
    assert config.cleanup_interval == 300.0
    assert config.lazy_cleanup is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TEMPCLIP_PORT", "8080")
    monkeypatch.setenv("TEMPCLIP_MAX_CONTENT_LENGTH", "50000")
    monkeypatch.setenv("TEMPCLIP_LAZY_CLEANUP", "yes")
    monkeypatch.setenv("TEMPCLIP_LAZY_CLEANUP_INTERVAL", "30")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = TempClipConfig.from_env()
    assert config.port == 8080
    assert config.max_content_length == 50000
    assert config.lazy_cleanup is True
    assert config.lazy_cleanup_interval == 30.0
    assert config.log_level == "DEBUG"


def test_env_file_is_loaded(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("TEMPCLIP_ID_LENGTH=32\n", encoding="utf-8")

    try:
        config = TempClipConfig.from_env(env_path=env_file)
    finally:
        os.environ.pop("TEMPCLIP_ID_LENGTH", None)
    assert config.id_length == 32


def test_invalid_number(monkeypatch):
    monkeypatch.setenv("TEMPCLIP_PORT", "eighty")
    with pytest.raises(ValueError, match="TEMPCLIP_PORT"):
        TempClipConfig.from_env()


def test_short_ids_rejected():
    with pytest.raises(ValueError, match="id_length"):
        TempClipConfig(id_length=8)
