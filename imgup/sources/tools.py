"""Helpers for invoking external command-line tools."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Sequence

from imgup.errors import DependencyError


def require_tool(name: str, purpose: str | None = None) -> str:
    """Return the absolute path of an executable or fail naming it.

    Raises:
        DependencyError: If the executable is not on PATH
    """
    path = shutil.which(name)
    if not path:
        raise DependencyError(name, purpose)
    return path


def run_tool(
    args: Sequence[str], input_data: bytes | None = None
) -> subprocess.CompletedProcess[bytes]:
    """Run a tool to completion, capturing stdout and stderr as bytes.

    The exit status is left for the caller to interpret.

    Raises:
        DependencyError: If the executable disappears between the PATH
            check and the call
    """
    try:
        return subprocess.run(list(args), input=input_data, capture_output=True, check=False)
    except FileNotFoundError as e:
        raise DependencyError(args[0]) from e


def decode_stderr(result: subprocess.CompletedProcess[bytes]) -> str:
    return (result.stderr or b"").decode("utf-8", errors="replace").strip()
