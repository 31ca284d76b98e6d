"""Start the hospice valuation Streamlit app (also used as the frozen-build entrypoint)."""

from __future__ import annotations

import os
import pathlib
import sys


def _app_dir() -> pathlib.Path:
    if getattr(sys, "frozen", False):
        return pathlib.Path(getattr(sys, "_MEIPASS"))
    return pathlib.Path(__file__).resolve().parent


def _store_dir() -> pathlib.Path:
    base = pathlib.Path(sys.executable).resolve().parent if getattr(sys, "frozen", False) else _app_dir()
    return base / ".local_store"


def streamlit_argv(app_path: pathlib.Path, port: int | None = None) -> list[str]:
    argv = ["streamlit", "run", str(app_path), "--browser.gatherUsageStats=false"]
    if port:
        argv.append(f"--server.port={port}")
    return argv


def main() -> None:
    # Saved valuations, access codes and runtime events live beside the app unless overridden.
    os.environ.setdefault("HOSPICE_STORAGE_ROOT", str(_store_dir()))
    os.environ.setdefault("STREAMLIT_BROWSER_GATHER_USAGE_STATS", "false")

    from streamlit.web import cli as stcli

    port = os.getenv("HOSPICE_PORT", "").strip()
    sys.argv = streamlit_argv(_app_dir() / "app.py", int(port) if port.isdigit() else None)
    raise SystemExit(stcli.main())


if __name__ == "__main__":
    main()
