import importlib.util
from pathlib import Path

from kpi_evaluation import wsgi

INDEX = Path(__file__).resolve().parents[2] / "api" / "index.py"


def _load_index():
    location = importlib.util.spec_from_file_location("serverless_index", INDEX)
    module = importlib.util.module_from_spec(location)
    location.loader.exec_module(module)
    return module


class TestServerlessEntry:
    def test_handler_wraps_project_wsgi_app(self, monkeypatch):
        index = _load_index()
        calls = []
        monkeypatch.setattr(index, "handle_request", lambda app, event, ctx: calls.append((app, event, ctx)) or "ok")

        assert index.handler({"path": "/api/"}, None) == "ok"
        assert calls == [(wsgi.application, {"path": "/api/"}, None)]
