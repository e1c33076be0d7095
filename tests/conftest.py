"""Test configuration — make obsessed_analytics importable from a source checkout."""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(autouse=True)
def _clear_profile_cache():
    from obsessed_analytics import store_client
    store_client._profile_cache.clear()
    yield
    store_client._profile_cache.clear()
