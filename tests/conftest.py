import os
import pytest
from typer.testing import CliRunner
from pathlib import Path

from filecache.infrastructure.cache.file_cache import FileCache
from filecache.infrastructure.cli.display import ConsoleDisplay
from filecache.infrastructure.config import settings


class FakeClock:
    """Controllable replacement for time.time used by FileCache."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path: Path):
    """Keeps tests away from the user's real config, .env files and FILECACHE_* variables."""
    for name in list(os.environ):
        if name.startswith(settings.ENV_PREFIX):
            monkeypatch.delenv(name)
    monkeypatch.setattr(settings, "DEFAULT_CONFIG_FILE", tmp_path / "no-such-config.yaml")
    monkeypatch.chdir(tmp_path)
    settings.reset_configuration()
    settings.clear_test_config()
    yield
    settings.reset_configuration()
    settings.clear_test_config()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Location of the cache directory (not created yet)."""
    return tmp_path / "cache"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(cache_dir: Path, clock: FakeClock) -> FileCache:
    """FileCache on a temporary directory, driven by a fake clock."""
    return FileCache(cache_dir, clock=clock)


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def quiet_logging(mocker):
    """Stops CLI invocations from reconfiguring the root logger during tests."""
    return mocker.patch("filecache.main.setup_logging")


@pytest.fixture
def mock_console_display(mocker, quiet_logging):
    """ Mocks the ConsoleDisplay to capture output easily.
        Patches the ConsoleDisplay where main.py instantiates it.
    """
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('filecache.main.ConsoleDisplay', return_value=mock)
    return mock
