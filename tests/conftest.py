import signal
import subprocess
import sys
from pathlib import Path

import pytest

# Ensure repository root is on sys.path so local modules import cleanly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from imgup.config import CONFIG_KEYS, CONFIG_PATH_VAR  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep the user's real config, API key and display out of tests."""
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    monkeypatch.setenv(CONFIG_PATH_VAR, str(tmp_path / "missing-config"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def restore_sigterm_handler():
    """main() installs a SIGTERM handler; put the original back afterwards."""
    handler = signal.getsignal(signal.SIGTERM)
    yield
    if handler is not None:
        signal.signal(signal.SIGTERM, handler)


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "shot.png"
    path.write_bytes(PNG_BYTES)
    return path


class FakeTools:
    """Stands in for subprocess.run and shutil.which in the tool modules.

    ``responses`` maps an executable name to a callable taking the argument
    list and returning (returncode, stdout, stderr).
    """

    def __init__(self, installed=()):
        self.installed = set(installed)
        self.responses = {}
        self.calls = []

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.installed else None

    def run(self, args, input=None, capture_output=False, check=False, **kwargs):
        self.calls.append(list(args))
        handler = self.responses.get(args[0])
        if handler is None:
            return subprocess.CompletedProcess(args, 0, b"", b"")
        returncode, stdout, stderr = handler(list(args))
        return subprocess.CompletedProcess(args, returncode, stdout, stderr)


@pytest.fixture
def fake_tools(monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr("imgup.sources.tools.shutil.which", tools.which)
    monkeypatch.setattr("imgup.sources.tools.subprocess.run", tools.run)
    return tools
