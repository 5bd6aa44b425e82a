import os
import sys
import asyncio

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.services.games import game_store


@pytest.fixture(autouse=True)
def reset_game_store():
    """Start every test with no hosted games."""

    asyncio.run(game_store.clear())
    yield
    asyncio.run(game_store.clear())
