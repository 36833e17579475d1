"""
project: Delve
module: dungeon_api.py
License: MIT

Dungeon generation API routes.

`/api/dungeon/generate` runs the full spine-seed pipeline for a settings
payload and returns the assembled dungeon, its traversal analysis and (when
enabled) the generation metrics as JSON.
"""

import logging
import os
import threading

from flask import Blueprint, current_app, jsonify, request, session

from delve.dungeon import Dungeon, GenerationError, SettingsError, export_settings, settings_from_dict
from delve.routes.seed_api import _coerce_seed

logger = logging.getLogger(__name__)

# Simple in-process cache (settings text, seed) -> Dungeon. Guarded by a lock
# since the development server may handle requests on several threads.
_dungeon_cache = {}
_dungeon_cache_lock = threading.Lock()
_DUNGEON_CACHE_MAX = 8


def _cache_max() -> int:
    try:
        return int(current_app.config.get("DUNGEON_CACHE_MAX", _DUNGEON_CACHE_MAX))
    except RuntimeError:
        # outside an app context
        return _DUNGEON_CACHE_MAX


def _cache_disabled() -> bool:
    if os.environ.get("DUNGEON_DISABLE_CACHE") == "1":
        return True
    try:
        return bool(current_app.config.get("DUNGEON_DISABLE_CACHE"))
    except RuntimeError:
        return False


def get_cached_dungeon(settings, seed: int) -> Dungeon:
    """Return a generated dungeon for (settings, seed), reusing recent results."""
    if _cache_disabled():
        return Dungeon(settings=settings, seed=seed)
    key = (export_settings(settings), seed)
    with _dungeon_cache_lock:
        dungeon = _dungeon_cache.get(key)
        if dungeon is not None:
            return dungeon
    dungeon = Dungeon(settings=settings, seed=seed)
    with _dungeon_cache_lock:
        _dungeon_cache[key] = dungeon
        while len(_dungeon_cache) > max(1, _cache_max()):
            first_key = next(iter(_dungeon_cache.keys()))
            _dungeon_cache.pop(first_key, None)
    return dungeon


def clear_dungeon_cache():
    with _dungeon_cache_lock:
        _dungeon_cache.clear()


bp_dungeon = Blueprint("dungeon", __name__)


def _resolve_request_seed(provided, settings):
    """Explicit seed > settings seed > session seed > random."""
    if provided is not None and provided != "":
        return _coerce_seed(provided)
    if settings.seed is not None:
        return settings.seed
    stored = session.get("dungeon_seed")
    if stored is not None:
        return stored
    return _coerce_seed(None)


@bp_dungeon.route("/api/dungeon/generate", methods=["GET", "POST"])
def generate_dungeon():
    """
    Generate a dungeon.

    POST body: { "settings": {...camelCase, partial allowed...}, "seed": <int|str> }
    GET query: ?seed=<int|str>  (default settings)

    Response: { "seed", "dungeon", "analysis", "metrics" }
    """
    if request.method == "POST":
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return jsonify({"error": "invalid_settings", "details": ["body must be a JSON object"]}), 400
        raw_settings = data.get("settings") or {}
        provided = data.get("seed")
    else:
        raw_settings = {}
        provided = request.args.get("seed")

    try:
        settings = settings_from_dict(raw_settings, strict=False)
    except SettingsError as exc:
        return jsonify({"error": "invalid_settings", "details": exc.errors}), 400

    seed = _resolve_request_seed(provided, settings)
    try:
        dungeon = get_cached_dungeon(settings, seed)
    except GenerationError as exc:
        logger.error("Dungeon generation failed (seed=%s): %s", seed, exc)
        return jsonify({"error": "generation_failed", "message": str(exc)}), 500
    return jsonify(dungeon.to_dict())
