from __future__ import annotations

import dataclasses

import pytest

from kube_credential import app_common, issuance_main, verification_main
from tests.conftest import ISSUER_WORKER, VERIFIER_WORKER


def test_services_default_to_their_own_ports(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        app_common, "SETTINGS", dataclasses.replace(app_common.SETTINGS, port=None)
    )
    assert issuance_main.create_app(worker=ISSUER_WORKER).state.port == 3001
    assert verification_main.create_app(worker=VERIFIER_WORKER).state.port == 3000


def test_port_setting_overrides_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        app_common, "SETTINGS", dataclasses.replace(app_common.SETTINGS, port=8123)
    )
    assert issuance_main.create_app(worker=ISSUER_WORKER).state.port == 8123


def test_serve_runs_uvicorn_on_resolved_port(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(
        app_common.uvicorn, "run", lambda app, **kwargs: calls.append(kwargs)
    )
    app = issuance_main.create_app(worker=ISSUER_WORKER)

    app_common.serve(app)

    assert calls == [{"host": "0.0.0.0", "port": app.state.port, "log_config": None}]


def test_startup_line_logs_port(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(
        app_common, "SETTINGS", dataclasses.replace(app_common.SETTINGS, port=None)
    )
    caplog.set_level("INFO", logger="kube_credential.app_common")
    verification_main.create_app(worker=VERIFIER_WORKER)
    assert any("port=3000" in r.getMessage() for r in caplog.records)
