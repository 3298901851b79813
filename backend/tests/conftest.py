import sys
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture(autouse=True)
def fresh_default_clients():
    """Drop cached provider clients so each test sees its own settings."""
    from services import providers, search_service

    providers._default_serpapi_client = None
    providers._default_open_library_client = None
    search_service._default_search_service = None
    yield
