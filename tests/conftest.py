import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

import hap.settings  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep the developer's own settings file and HAP_* env out of tests."""
    monkeypatch.setenv("HAP_SETTINGS_FILE", str(tmp_path / "no-such-settings.yaml"))
    monkeypatch.delenv("HAP_MAX_LISTENERS", raising=False)
    monkeypatch.delenv("HAP_LOG_LEVEL", raising=False)
    monkeypatch.setattr(hap.settings, "_SETTINGS", None)
    yield
