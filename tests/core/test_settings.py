import json
import logging

import pytest

from mysql_adaptor.core import config as config_module
from mysql_adaptor.core.config import Settings, get_settings, reset_settings
from mysql_adaptor.core.logger import CustomFormatter, JSONFormatter


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("MYSQL_ADAPTOR_LOG_LEVEL", "MYSQL_ADAPTOR_LOG_JSON",
                 "MYSQL_ADAPTOR_LOG_LOCATION", "MYSQL_ADAPTOR_ENV_FILE"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


def test_defaults():
    settings = get_settings()

    assert settings.log_level == "INFO"
    assert settings.log_json is False
    assert settings.log_location is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MYSQL_ADAPTOR_LOG_LEVEL", "debug")
    monkeypatch.setenv("MYSQL_ADAPTOR_LOG_JSON", "true")

    settings = get_settings()

    assert settings.log_level == "DEBUG"
    assert settings.log_json is True


def test_env_file_is_loaded_without_overriding(monkeypatch, tmp_path):
    env_file = tmp_path / "adaptor.env"
    env_file.write_text(
        "# comment\n"
        "export MYSQL_ADAPTOR_LOG_LEVEL='WARNING'\n"
        'MYSQL_ADAPTOR_LOG_LOCATION="yes"\n'
    )
    monkeypatch.setenv("MYSQL_ADAPTOR_ENV_FILE", str(env_file))
    monkeypatch.setenv("MYSQL_ADAPTOR_LOG_LOCATION", "no")
    # the loader writes straight into os.environ; register for cleanup
    monkeypatch.setenv("MYSQL_ADAPTOR_LOG_LEVEL", "placeholder")
    monkeypatch.delenv("MYSQL_ADAPTOR_LOG_LEVEL")

    settings = get_settings()

    assert settings.log_level == "WARNING"
    assert settings.log_location is False


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_invalid_log_level():
    with pytest.raises(ValueError):
        Settings(log_level="LOUD")


def test_dotenv_in_working_directory(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("MYSQL_ADAPTOR_LOG_JSON=1\n")
    monkeypatch.setenv("MYSQL_ADAPTOR_LOG_JSON", "placeholder")
    monkeypatch.delenv("MYSQL_ADAPTOR_LOG_JSON")

    config_module.load_env_if_present(force_reload=True)

    assert Settings.from_env().log_json is True


def _record(msg, *args, **extra):
    record = logging.LogRecord("mysql_adaptor.test", logging.INFO, __file__, 10, msg, args, None)
    record.__dict__.update(extra)
    return record


def test_json_formatter():
    line = JSONFormatter().format(_record("Executing %s", "INSERT len=10", scope="insert"))

    payload = json.loads(line)
    assert payload["message"] == "Executing INSERT len=10"
    assert payload["level"] == "INFO"
    assert payload["scope"] == "insert"


def test_custom_formatter_multiline_and_extra():
    text = CustomFormatter().format(_record("first\nsecond", table="users"))

    assert "[INFO]" in text
    assert "     Message: first\n             second" in text
    assert "table: users" in text


def test_settings_hold_only_logging_options():
    assert set(Settings.model_fields) == {"log_level", "log_json", "log_location"}
