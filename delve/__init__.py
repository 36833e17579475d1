"""
project: Delve
module: __init__.py
License: MIT

Flask application setup for the dungeon generation service.

Configuration is sourced from environment variables (optionally loaded from
a local `.env`) with reasonable defaults for development. A local
`instance/` directory holds runtime data such as the rotating log file.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so `SECRET_KEY` and the DUNGEON_* flags can be supplied
# without exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # read-only checkouts can still serve requests; only file logging is lost
    pass


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    # Dungeon generation feature flags / metrics
    DUNGEON_ENABLE_GENERATION_METRICS=_env_flag("DUNGEON_ENABLE_GENERATION_METRICS", "1"),
    DUNGEON_DISABLE_CACHE=_env_flag("DUNGEON_DISABLE_CACHE"),
    DUNGEON_CACHE_MAX=int(os.getenv("DUNGEON_CACHE_MAX", "8")),
)

# Register HTTP blueprints (import after app created)
from delve.routes.config_api import bp_config  # noqa: E402
from delve.routes.dungeon_api import bp_dungeon  # noqa: E402
from delve.routes.seed_api import bp_seed  # noqa: E402

app.register_blueprint(bp_dungeon)
app.register_blueprint(bp_seed)
app.register_blueprint(bp_config)


def create_app():
    """Return the Flask app instance."""
    return app


# Error handling: log details server side, return a short JSON body with an id
@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal_error", "error_id": error_id}), 500
