import logging
from pathlib import Path

import pytest

from filecache.infrastructure.config import settings
from filecache.infrastructure.config.settings import (
    env_var_name,
    get_cache_dir,
    get_config,
    get_log_file,
    get_log_level,
    load_configuration,
    set_config,
    set_config_for_testing,
)


@pytest.fixture
def yaml_config(tmp_path: Path) -> Path:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "cache:\n"
        "  dir: /srv/cache\n"
        "logging:\n"
        "  level: debug\n"
        "  file: filecache.log\n"
    )
    return config_file


def test_env_var_name():
    assert env_var_name("cache.dir") == "FILECACHE_CACHE_DIR"
    assert env_var_name("logging.level") == "FILECACHE_LOGGING_LEVEL"


def test_defaults_without_any_configuration():
    load_configuration()
    assert get_config("missing.key", "fallback") == "fallback"
    assert get_cache_dir() == Path(settings.DEFAULT_CACHE_DIR)
    assert get_log_level() == logging.WARNING
    assert get_log_file() is None


def test_yaml_configuration_is_flattened(yaml_config: Path):
    load_configuration(config_file=yaml_config)
    assert get_config("cache.dir") == "/srv/cache"
    assert get_cache_dir() == Path("/srv/cache")
    assert get_log_level() == logging.DEBUG
    assert get_log_file() == "filecache.log"


def test_yaml_without_mapping_is_ignored(tmp_path: Path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("- just\n- a list\n")
    load_configuration(config_file=config_file)
    assert get_config("just") is None


def test_invalid_yaml_is_ignored(tmp_path: Path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("cache: [unclosed\n")
    load_configuration(config_file=config_file)
    assert get_cache_dir() == Path(settings.DEFAULT_CACHE_DIR)


def test_environment_overrides_yaml(yaml_config: Path, monkeypatch):
    monkeypatch.setenv("FILECACHE_CACHE_DIR", "/from/env")
    load_configuration(config_file=yaml_config)
    assert get_cache_dir() == Path("/from/env")


@pytest.mark.parametrize("raw, expected", [
    ("true", True),
    ("FALSE", False),
    ("42", 42),
    ("2.5", 2.5),
    ("plain", "plain"),
])
def test_environment_values_are_coerced(monkeypatch, raw, expected):
    monkeypatch.setenv("FILECACHE_SOME_VALUE", raw)
    assert get_config("some.value") == expected


def test_dotenv_file_is_loaded(tmp_path: Path, monkeypatch):
    # Register the variable with monkeypatch so whatever load_dotenv sets is undone afterwards
    monkeypatch.setenv("FILECACHE_CACHE_DIR", "placeholder")
    monkeypatch.delenv("FILECACHE_CACHE_DIR")
    env_file = tmp_path / ".env"
    env_file.write_text("FILECACHE_CACHE_DIR=/from/dotenv\n")

    load_configuration(env_file=env_file)

    assert get_cache_dir() == Path("/from/dotenv")


def test_dotenv_is_found_from_cwd(tmp_path: Path, monkeypatch):
    (tmp_path / ".env").write_text("FILECACHE_LOGGING_LEVEL=error\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)
    assert settings.find_dotenv_path() == tmp_path / ".env"


def test_load_configuration_is_idempotent(yaml_config: Path, tmp_path: Path):
    load_configuration(config_file=yaml_config)
    other = tmp_path / "other.yaml"
    other.write_text("cache:\n  dir: /elsewhere\n")
    load_configuration(config_file=other)
    assert get_config("cache.dir") == "/srv/cache"


def test_set_config_and_testing_overrides(monkeypatch):
    set_config("cache.dir", "/set/in/process")
    assert get_cache_dir() == Path("/set/in/process")

    monkeypatch.setenv("FILECACHE_CACHE_DIR", "/from/env")
    assert get_cache_dir() == Path("/from/env")

    set_config_for_testing({"cache.dir": "/from/tests"})
    assert get_cache_dir() == Path("/from/tests")


def test_unknown_log_level_falls_back():
    set_config_for_testing({"logging.level": "chatty"})
    assert get_log_level() == logging.WARNING
