"""
project: Delve
module: config_api.py
License: MIT

Generation settings endpoints: defaults, plain-text export and import.

The text format is the indented JSON produced by `export_settings`, so a
settings block copied from one client pastes cleanly into another.
"""
from flask import Blueprint, jsonify, request

from delve.dungeon import DungeonSettings, SettingsError, export_settings, import_settings, settings_from_dict, settings_to_dict

bp_config = Blueprint('config', __name__)


@bp_config.route('/api/config/defaults', methods=['GET'])
def get_defaults():
    return jsonify(settings_to_dict(DungeonSettings()))


@bp_config.route('/api/config/export', methods=['POST'])
def export_config():
    """Clamp a (partial) settings object and return it as plain text.

    Body JSON: { "settings": {...} }  ->  { "text": "<json>", "settings": {...} }
    """
    data = request.get_json(silent=True) or {}
    try:
        settings = settings_from_dict(data.get('settings') or {}, strict=False)
    except SettingsError as exc:
        return jsonify({'error': 'invalid_settings', 'details': exc.errors}), 400
    return jsonify({'text': export_settings(settings), 'settings': settings_to_dict(settings)})


@bp_config.route('/api/config/import', methods=['POST'])
def import_config():
    """Parse exported text back into settings; the text must carry every field.

    Body JSON: { "text": "<json>" }
    """
    data = request.get_json(silent=True) or {}
    text = data.get('text')
    if not isinstance(text, str) or not text.strip():
        return jsonify({'error': 'invalid_settings', 'details': ['text: missing']}), 400
    try:
        settings = import_settings(text)
    except SettingsError as exc:
        return jsonify({'error': 'invalid_settings', 'details': exc.errors}), 400
    return jsonify({'settings': settings_to_dict(settings)})
