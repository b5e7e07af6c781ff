import importlib

import config


def test_debug_flag_from_environment(monkeypatch):
    monkeypatch.setenv("DEBUG", "yes")
    monkeypatch.setenv("LIBRARY_CATALOG_FILE", "branch.csv")
    try:
        reloaded = importlib.reload(config)
        assert reloaded.settings.debug is True
        assert reloaded.settings.catalog_file == "branch.csv"
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_defaults(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    try:
        reloaded = importlib.reload(config)
        assert reloaded.settings.debug is False
        assert reloaded.settings.log_level == "INFO"
    finally:
        monkeypatch.undo()
        importlib.reload(config)
