import pytest

from mimer.conf import ENVIRONMENT_VARIABLE, reload_settings, settings
from mimer.conf.global_settings import Settings
from mimer.logging import StandardLoggingConfig
from mimer.testing import override_settings


def test_defaults():
    current = Settings()

    assert current.line_length == 76
    assert current.chunk_size == 57 * 1024
    assert current.default_content_type == "application/octet-stream"
    assert current.write_bcc_header is False
    assert isinstance(current.logging_config, StandardLoggingConfig)
    assert current.logging_config.level == "INFO"


def test_environment_variables_are_cast(monkeypatch):
    monkeypatch.setenv("MIMER_CHUNK_SIZE", "1024")
    monkeypatch.setenv("MIMER_WRITE_BCC_HEADER", "yes")

    current = Settings()

    assert current.chunk_size == 1024
    assert current.write_bcc_header is True


def test_invalid_environment_value(monkeypatch):
    monkeypatch.setenv("MIMER_CHUNK_SIZE", "lots")

    with pytest.raises(ValueError, match="Cannot cast value 'lots'"):
        Settings()


def test_keyword_arguments_win_over_environment(monkeypatch):
    monkeypatch.setenv("MIMER_LINE_LENGTH", "60")

    assert Settings(line_length=64).line_length == 64


@pytest.mark.parametrize("line_length", [0, 70, 80])
def test_line_length_is_validated(line_length):
    with pytest.raises(ValueError, match="line_length"):
        Settings(line_length=line_length)


def test_chunk_size_is_validated():
    with pytest.raises(ValueError, match="chunk_size"):
        Settings(chunk_size=0)


def test_dict():
    assert Settings().dict()["line_length"] == 76
    assert "LINE_LENGTH" in Settings().dict(upper=True)


def test_override_settings_context_manager():
    with override_settings(line_length=40):
        assert settings.line_length == 40
    assert settings.line_length == 76


@override_settings(default_content_type="application/x-test")
def test_override_settings_decorator():
    assert settings.default_content_type == "application/x-test"


@pytest.mark.anyio
@override_settings(chunk_size=10)
async def test_override_settings_async_decorator():
    assert settings.chunk_size == 10


def test_settings_module_from_environment(monkeypatch):
    monkeypatch.setenv(ENVIRONMENT_VARIABLE, "tests.settings.TestSettings")
    reload_settings()
    try:
        assert settings.line_length == 72
        assert settings.logging_level == "DEBUG"
    finally:
        monkeypatch.delenv(ENVIRONMENT_VARIABLE)
        reload_settings()

    assert settings.line_length == 76
