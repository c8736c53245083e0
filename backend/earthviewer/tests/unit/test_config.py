import importlib

from earthviewer import config


def test_frontend_origin_comes_from_environment(monkeypatch):
    monkeypatch.setenv("FRONTEND_ORIGIN", "https://viewer.example.org")
    try:
        assert importlib.reload(config).FRONTEND_ORIGIN == "https://viewer.example.org"
    finally:
        monkeypatch.delenv("FRONTEND_ORIGIN")
        importlib.reload(config)
    assert config.FRONTEND_ORIGIN == "http://localhost:5173"
