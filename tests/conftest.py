"""
conftest.py — shared pytest fixtures
Adds the project root to sys.path so `sitescore.*` imports resolve correctly
regardless of where pytest is invoked from.
"""

import os
import sys
from pathlib import Path

# This file lives at  <root>/tests/conftest.py
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Settings are cached on first import: no DNS lookups, no MongoDB, no throttling.
os.environ["BLOCK_PRIVATE_HOSTS"] = "false"
os.environ["RATE_LIMIT_PER_MINUTE"] = "1000"
os.environ["FETCH_MODE"] = "direct"
os.environ.pop("MONGO_URI", None)

import pytest
from fastapi.testclient import TestClient
from sitescore.main import app
from sitescore.utils.history_store import HistoryStore


@pytest.fixture(scope="session")
def client():
    """Synchronous test client (no real network access)."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def store():
    return HistoryStore(limit=10)


@pytest.fixture
def page_url():
    return "https://www.example.com"
