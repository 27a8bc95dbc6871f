"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pytest

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from privacy_consent.core.config import get_settings
from privacy_consent.core.vocabulary import Vocabulary, get_vocabulary


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings and vocabulary so env patches take effect per test"""
    get_settings.cache_clear()
    get_vocabulary.cache_clear()
    yield
    get_settings.cache_clear()
    get_vocabulary.cache_clear()


@pytest.fixture
def vocabulary() -> Vocabulary:
    """Built-in vocabulary"""
    return Vocabulary()


@pytest.fixture
def small_vocabulary() -> Vocabulary:
    """Two categories and three purposes; small enough to enumerate every matrix"""
    return Vocabulary(categories=("aa", "bb"), purposes=("xx", "yy", "zz"))


@pytest.fixture
def client():
    """Test client for the demo app"""
    from fastapi.testclient import TestClient

    from privacy_consent.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
