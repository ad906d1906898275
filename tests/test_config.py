from pathlib import Path

import pytest

from kpguess.config import Settings, parse_episode, read_dotenv
from kpguess.errors import ConfigurationError


@pytest.mark.parametrize("selector, expected", [("1", 1), (" 6 ", 6), (3, 3)])
def test_parse_episode_accepts_supported(selector, expected):
    assert parse_episode(selector) == expected


@pytest.mark.parametrize("selector", ["0", "7", "-1", "two", ""])
def test_parse_episode_rejects_others(selector):
    with pytest.raises(ConfigurationError):
        parse_episode(selector)


def test_missing_cookie_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        Settings.from_env({}, dotenv_path=tmp_path / ".env")


def test_cookie_read_from_dotenv(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text('# cookies\nCOOKIE="yandexuid=1; session=2"\n', encoding="utf-8")

    settings = Settings.from_env({}, dotenv_path=env_file)

    assert settings.cookie == "yandexuid=1; session=2"
    assert settings.data_dir == Path(".")
    assert (settings.min_answer_ms, settings.max_answer_ms) == (986, 4465)
    assert (settings.min_restart_ms, settings.max_restart_ms) == (2178, 9653)


def test_environment_overrides_dotenv(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("COOKIE=from-file\n", encoding="utf-8")

    settings = Settings.from_env(
        {"COOKIE": "from-env", "KPGUESS_DATA_DIR": str(tmp_path), "KPGUESS_MAX_ANSWER_MS": "5000"},
        dotenv_path=env_file,
    )

    assert settings.cookie == "from-env"
    assert settings.data_dir == tmp_path
    assert settings.max_answer_ms == 5000


@pytest.mark.parametrize("env", [
    {"KPGUESS_MIN_ANSWER_MS": "soon"},
    {"KPGUESS_MIN_RESTART_MS": "10000"},
    {"KPGUESS_MIN_ANSWER_MS": "-1"},
    {"KPGUESS_RETRIES": "0"},
    {"KPGUESS_TIMEOUT": "forever"},
])
def test_bad_settings_are_configuration_errors(tmp_path, env):
    with pytest.raises(ConfigurationError):
        Settings.from_env(dict(env, COOKIE="c"), dotenv_path=tmp_path / ".env")


def test_read_dotenv_missing_file(tmp_path):
    assert read_dotenv(tmp_path / "nope") == {}
