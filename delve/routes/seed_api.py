"""Seed management API routes.

Provides a centralized endpoint to create/update the active dungeon seed for
the current session. Generation requests without an explicit seed reuse it.
"""
from flask import Blueprint, request, jsonify, session
import hashlib, random

bp_seed = Blueprint('seed_api', __name__)

MAX_SEED = 9223372036854775807


def _coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded non-negative int."""
    if payload_seed is None:
        return random.randint(1, 1_000_000)
    if isinstance(payload_seed, bool):
        return int(payload_seed)
    if isinstance(payload_seed, int):
        return payload_seed % MAX_SEED
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % MAX_SEED
        h = hashlib.sha256(s.encode('utf-8')).digest()
        return int.from_bytes(h[:8], 'big') % MAX_SEED
    # Fallback
    return random.randint(1, 1_000_000)


@bp_seed.route('/api/dungeon/seed', methods=['POST'])
def set_seed():
    """Set (or generate) the session dungeon seed.

    Body JSON (all optional):
      { "seed": <int|str|null>, "regenerate": <bool> }
    - If seed omitted or null and regenerate true => random seed.
    - If seed provided (int or string) => deterministic hashing.

    Response: { "seed": <int> }
    """
    data = request.get_json(silent=True) or {}
    regenerate = data.get('regenerate')
    provided = data.get('seed', None)
    if regenerate and provided is None:
        seed = _coerce_seed(None)
    else:
        seed = _coerce_seed(provided)
    session['dungeon_seed'] = seed
    return jsonify({"seed": seed})


@bp_seed.route('/api/dungeon/seed', methods=['GET'])
def get_seed():
    seed = session.get('dungeon_seed')
    if seed is None:
        return jsonify({"error": "no seed set"}), 404
    return jsonify({"seed": seed})
