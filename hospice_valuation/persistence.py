"""Local JSON stores for saved valuations and access codes."""

from __future__ import annotations

import json
import os
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path

from hospice_valuation.schema import SCENARIO_TYPE, SCHEMA_VERSION, migrate_inputs


ACCESS_CODE_TYPE = "access_code"

STORE_DIR = Path(".local_store")
SCENARIO_STORE_FILE = STORE_DIR / "valuations.json"
ACCESS_CODE_STORE_FILE = STORE_DIR / "access_codes.json"

_DEFAULT_STORE_DIR = Path(".local_store")
_STORAGE_ENV_VAR = "HOSPICE_STORAGE_ROOT"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _expand_storage_root(path_value: str | Path | None) -> Path:
    if path_value is None:
        return _DEFAULT_STORE_DIR
    text = str(path_value).strip()
    if not text:
        return _DEFAULT_STORE_DIR
    return Path(os.path.expandvars(os.path.expanduser(text)))


def configure_storage_root(path_value: str | Path | None) -> Path:
    """Point both stores at a new root directory."""

    global STORE_DIR, SCENARIO_STORE_FILE, ACCESS_CODE_STORE_FILE
    STORE_DIR = _expand_storage_root(path_value)
    SCENARIO_STORE_FILE = STORE_DIR / "valuations.json"
    ACCESS_CODE_STORE_FILE = STORE_DIR / "access_codes.json"
    return STORE_DIR


def storage_root_path() -> str:
    return str(STORE_DIR.resolve())


def storage_root_from_env() -> Path:
    return _expand_storage_root(os.getenv(_STORAGE_ENV_VAR, ""))


def _path_for(kind: str) -> Path:
    if kind == SCENARIO_TYPE:
        return SCENARIO_STORE_FILE
    if kind == ACCESS_CODE_TYPE:
        return ACCESS_CODE_STORE_FILE
    raise ValueError(f"Unsupported store kind: {kind}")


def load_store(kind: str) -> dict:
    p = _path_for(kind)
    if not p.exists():
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def save_store(kind: str, data: dict) -> None:
    STORE_DIR.mkdir(parents=True, exist_ok=True)
    p = _path_for(kind)
    tmp = p.with_suffix(f"{p.suffix}.tmp")
    tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
    tmp.replace(p)


def list_saved_names() -> list[str]:
    return sorted(load_store(SCENARIO_TYPE).keys())


def load_saved(name: str) -> dict | None:
    return deepcopy(load_store(SCENARIO_TYPE).get(name))


def save_named_bundle(name: str, bundle: dict, overwrite: bool = False) -> tuple[bool, str]:
    if not name.strip():
        return False, "Name is required."
    store = load_store(SCENARIO_TYPE)
    if name in store and not overwrite:
        return False, "Name already exists."
    store[name] = bundle
    save_store(SCENARIO_TYPE, store)
    return True, "Saved."


def delete_saved(name: str) -> bool:
    store = load_store(SCENARIO_TYPE)
    if name not in store:
        return False
    del store[name]
    save_store(SCENARIO_TYPE, store)
    return True


def build_scenario_bundle(name: str, inputs: dict) -> dict:
    return {
        "type": SCENARIO_TYPE,
        "schema_version": SCHEMA_VERSION,
        "name": name,
        "created_at": _now_iso(),
        "inputs": deepcopy(inputs),
    }


def parse_import_json(raw_json: str, base: dict | None = None) -> tuple[dict, list[str], list[str]]:
    """Parse a saved bundle or a bare inputs object (either key style).

    Returns (inputs, warnings, unknown_keys); fields the payload lacks come
    from ``base``.
    """
    try:
        payload = json.loads(raw_json)
    except json.JSONDecodeError:
        return {}, ["Could not parse import JSON."], []
    if not isinstance(payload, dict):
        return {}, ["Import JSON must be an object."], []

    warnings: list[str] = []
    if payload.get("type") == SCENARIO_TYPE or "inputs" in payload:
        version = payload.get("schema_version", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            warnings.append(f"Bundle schema_version {version} differs from {SCHEMA_VERSION}; fields were migrated.")
        raw_inputs = payload.get("inputs")
    else:
        raw_inputs = payload

    inputs, migrate_warnings, unknown_keys = migrate_inputs(raw_inputs, base=base)
    return inputs, warnings + migrate_warnings, unknown_keys


configure_storage_root(storage_root_from_env())
