from __future__ import annotations

from copy import deepcopy
from pathlib import Path

import pytest

import hospice_valuation.persistence as persistence
import hospice_valuation.runtime_logging as runtime_logging
from hospice_valuation.defaults import DEFAULTS
from hospice_valuation.schema import ValuationInput, migrate_inputs


@pytest.fixture
def base_inputs() -> dict:
    inputs, _, _ = migrate_inputs(deepcopy(DEFAULTS))
    return inputs


@pytest.fixture
def make_inputs(base_inputs):
    def _make(**changes) -> ValuationInput:
        return ValuationInput.from_dict({**base_inputs, **changes})

    return _make


@pytest.fixture
def local_store(tmp_path, monkeypatch) -> Path:
    root = Path(tmp_path)
    monkeypatch.setattr(persistence, "STORE_DIR", root)
    monkeypatch.setattr(persistence, "SCENARIO_STORE_FILE", root / "valuations.json")
    monkeypatch.setattr(persistence, "ACCESS_CODE_STORE_FILE", root / "access_codes.json")
    monkeypatch.setattr(runtime_logging, "LOG_DIR", root)
    monkeypatch.setattr(runtime_logging, "RUNTIME_EVENTS_LOG_FILE", root / "runtime_events.jsonl")
    return root
