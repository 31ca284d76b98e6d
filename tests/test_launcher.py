from __future__ import annotations

from pathlib import Path

import launcher


def test_streamlit_argv_defaults():
    argv = launcher.streamlit_argv(Path("/srv/app.py"))
    assert argv == ["streamlit", "run", str(Path("/srv/app.py")), "--browser.gatherUsageStats=false"]


def test_streamlit_argv_with_port():
    assert launcher.streamlit_argv(Path("app.py"), 8600)[-1] == "--server.port=8600"


def test_store_dir_sits_beside_app():
    assert launcher._store_dir() == Path(launcher.__file__).resolve().parent / ".local_store"
