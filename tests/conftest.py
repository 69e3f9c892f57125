import logging
import os
import sys

import pytest

# Ensure project root is on sys.path so 'journey' and 'tests.support' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from journey.observability import RunContextFilter
from journey.settings import CurationSettings
from tests.support import factories as test_factories
from tests.support import stubs as test_stubs


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Ensure a clean env so no test ever talks to the real Spotify API."""
    monkeypatch.setenv("SPOTIPY_CLIENT_ID", "test-client-id")
    monkeypatch.setenv("SPOTIPY_CLIENT_SECRET", "test-client-secret")
    for name in ("SPOTIPY_REDIRECT_URI", "RANDOM_SEED", "SPOTIFY_MARKET", "PLAYLIST_NAME"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def settings():
    return CurationSettings(
        spotify_client_id="test-client-id",
        spotify_client_secret="test-client-secret",
        random_seed=1234,
    )


@pytest.fixture
def factories():
    yield test_factories


@pytest.fixture
def spotipy_stub():
    return test_stubs.SpotipyCatalogStub()


@pytest.fixture
def restore_root_logging():
    """Undo handler changes made by configure_logging during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if any(isinstance(f, RunContextFilter) for f in handler.filters):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
