"""
weapon_api.tests.conftest - Pytest fixtures for API tests.

The app runs against a real evaluator whose config lives in a temp dir.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from weapon_api.context import AppContext, create_app_context


@pytest.fixture
def app_context(tmp_path: Path) -> AppContext:
    """App context with defaults, persisted under tmp_path."""
    return create_app_context(tmp_path / "config.json")


@pytest.fixture
def client(app_context: AppContext) -> Generator[TestClient, None, None]:
    """Test client wired to ``app_context``."""
    import weapon_api.main
    from weapon_api import dependencies
    from weapon_api.main import app

    original_context = weapon_api.main._app_context
    weapon_api.main._app_context = app_context
    app.dependency_overrides[dependencies.get_app_context] = lambda: app_context

    with TestClient(app) as test_client:
        yield test_client

    weapon_api.main._app_context = original_context
    app.dependency_overrides.clear()


@pytest.fixture
def listing_payload() -> dict[str, Any]:
    """Two-socket weapon: 50% increased phys, 20% quality, no runes."""
    return {
        "item_id": "abc123",
        "physical_damage": "360-540",
        "attacks_per_second": "1.20",
        "quality": "+20%",
        "mods": [{"text": "50% increased Physical Damage", "source": "other"}],
        "socket_markup": "sockets numSockets2",
        "price_amount": 10,
        "price_currency": "divine",
    }
