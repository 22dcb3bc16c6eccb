from formbridge.core import config
from formbridge.core.config import AppSettings, read_env_file, write_user_env_vars


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("FORMBRIDGE_HTTP_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("FORMBRIDGE_LOG_FORMAT", "json")

    settings = AppSettings(_env_file=None)

    assert settings.http_timeout_seconds == 5.0
    assert settings.log_format == "json"
    assert settings.access_token is None


def test_user_env_vars_are_merged(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "get_user_config_dir", lambda: tmp_path / "formbridge")

    write_user_env_vars({"FORMBRIDGE_ACCESS_TOKEN": "first", "FORMBRIDGE_LOG_LEVEL": "DEBUG"})
    path = write_user_env_vars({"FORMBRIDGE_ACCESS_TOKEN": "second", "FORMBRIDGE_LOG_LEVEL": None})

    assert read_env_file(path) == {
        "FORMBRIDGE_ACCESS_TOKEN": "second",
        "FORMBRIDGE_LOG_LEVEL": "DEBUG",
    }
