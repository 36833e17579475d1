import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delve import create_app  # noqa: E402
from delve.dungeon.config import DungeonSettings, EjectionSettings  # noqa: E402
from delve.routes.dungeon_api import clear_dungeon_cache  # noqa: E402
from tests.dungeon_test_utils import make_scenario_settings  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture(autouse=True)
def _push_app_context(test_app):
    ctx = test_app.app_context()
    ctx.push()
    try:
        yield
    finally:
        ctx.pop()


@pytest.fixture()
def client(test_app):
    clear_dungeon_cache()
    return test_app.test_client()


@pytest.fixture()
def scenario_settings():
    return make_scenario_settings()


@pytest.fixture()
def small_settings():
    """Default generation knobs on the smallest supported grid."""
    return DungeonSettings(
        grid_width=32,
        grid_height=32,
        seed_count=6,
        ejection=EjectionSettings(dud_chance=0.0),
    )
