from __future__ import annotations

import uuid
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from hospice_valuation import auth

APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")


def _widget_by_label(widgets, label: str):
    matches = [w for w in widgets if getattr(w, "label", "") == label]
    assert matches, f"Widget not found for label: {label}"
    return matches[0]


def _assert_no_app_exceptions(at: AppTest) -> None:
    assert len(at.exception) == 0


@pytest.fixture(autouse=True)
def _open_app(local_store, monkeypatch):
    monkeypatch.delenv(auth.PASSWORD_ENV_VAR, raising=False)
    monkeypatch.delenv(auth.SECRET_ENV_VAR, raising=False)


def test_app_initial_run_has_no_exceptions():
    at = AppTest.from_file(APP_PATH)
    at.run(timeout=180)
    _assert_no_app_exceptions(at)
    assert _widget_by_label(at.metric, "Final Valuation").value.startswith("$")
    assert "Integrity checks: passed." in [c.value for c in at.caption]


def test_saved_valuation_load_flow():
    at = AppTest.from_file(APP_PATH)
    at.run(timeout=180)
    save_name = f"smoke_{uuid.uuid4().hex[:8]}"

    at.number_input(key="yearly_adc").set_value(55.0)
    at.run(timeout=180)
    _widget_by_label(at.text_input, "Save Name").set_value(save_name)
    at.run(timeout=180)
    _widget_by_label(at.button, "Save Valuation").click()
    at.run(timeout=180)
    _assert_no_app_exceptions(at)

    at.number_input(key="yearly_adc").set_value(20.0)
    at.run(timeout=180)
    _widget_by_label(at.selectbox, "Saved").set_value(save_name)
    at.run(timeout=180)
    _widget_by_label(at.button, "Load").click()
    at.run(timeout=180)
    _assert_no_app_exceptions(at)

    # Apply deferred widget-state updates from the load.
    at.run(timeout=180)
    assert at.number_input(key="yearly_adc").value == 55.0


def test_manual_mode_holds_edits_until_recalculate():
    at = AppTest.from_file(APP_PATH)
    at.run(timeout=180)
    before = _widget_by_label(at.metric, "Final Valuation").value

    at.toggle(key="live_recalculate").set_value(False)
    at.run(timeout=180)
    at.number_input(key="yearly_adc").set_value(80.0)
    at.run(timeout=180)
    assert _widget_by_label(at.metric, "Final Valuation").value == before
    assert any("pending" in i.value for i in at.info)

    _widget_by_label(at.button, "Recalculate").click()
    at.run(timeout=180)
    _assert_no_app_exceptions(at)
    assert _widget_by_label(at.metric, "Final Valuation").value != before


def test_password_gate(monkeypatch):
    monkeypatch.setenv(auth.PASSWORD_ENV_VAR, "letmein")
    at = AppTest.from_file(APP_PATH)
    at.run(timeout=180)
    assert len(at.metric) == 0

    _widget_by_label(at.text_input, "Password or access code").set_value("letmein")
    _widget_by_label(at.button, "Sign In").click()
    at.run(timeout=180)
    _assert_no_app_exceptions(at)
    assert auth.verify_token(at.session_state["auth_token"], "letmein") == auth.LEGACY_SUBJECT
    assert len(at.metric) > 0
