"""
project: Delve
module: server.py
License: MIT

Server bootstrap: logging setup and the Flask development server.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from delve import app


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Configure logging and run the Flask server.

    When debug=True, Flask's debugger and reloader provide verbose tracebacks.
    """
    with app.app_context():
        _configure_logging()
    try:
        print(f"[INFO] Starting dungeon server on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging(level=logging.INFO):
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/delve.log. Retains a few backups to avoid growth.
    Returns the log file path.
    """
    log_dir = app.instance_path
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "delve.log")
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    root = logging.getLogger()
    root.setLevel(level)

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
