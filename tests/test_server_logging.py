import logging
from logging.handlers import RotatingFileHandler

from delve import app, internal_error
from delve.server import _configure_logging


def test_configure_logging_creates_file(tmp_path, monkeypatch):
    # Redirect instance path to a temp directory to exercise logging setup
    monkeypatch.setattr(app, "instance_path", str(tmp_path))
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        # Run twice to ensure handlers are replaced, not stacked
        _configure_logging()
        log_path = _configure_logging()
        assert log_path == str(tmp_path / "delve.log")
        assert len(root.handlers) == 2
        assert sum(isinstance(h, RotatingFileHandler) for h in root.handlers) == 1
        logging.getLogger("delve.test").info("hello from the test")
        for h in root.handlers:
            h.flush()
        assert "hello from the test" in (tmp_path / "delve.log").read_text()
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)


def test_internal_error_handler_returns_id():
    with app.test_request_context("/api/dungeon/generate"):
        resp, status = internal_error(RuntimeError("boom"))
    assert status == 500
    body = resp.get_json()
    assert body["error"] == "internal_error"
    assert len(body["error_id"]) == 8
