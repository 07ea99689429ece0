from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from cantor.invariants import CheckedModeConfig, checked_mode_config_scope


@pytest.fixture(autouse=True)
def _checked_mode_fixture():
    with checked_mode_config_scope(CheckedModeConfig(enabled=True)):
        yield


@pytest.fixture
def write_config(tmp_path: Path):
    def _write(text: str) -> Path:
        path = tmp_path / "cantor.toml"
        path.write_text(text.strip() + "\n", encoding="utf-8")
        return path

    return _write
