import importlib

import pytest

import sensor_ingest.main


def test_import_builds_no_app(monkeypatch: pytest.MonkeyPatch) -> None:
    # a broken environment only matters once an app is actually built
    monkeypatch.setenv("PORT", "not-a-port")

    module = importlib.reload(sensor_ingest.main)

    assert not hasattr(module, "app")
    assert callable(module.create_app)
