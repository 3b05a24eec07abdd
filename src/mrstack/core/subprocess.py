"""Run external commands (git, glab) with operation context on failure."""

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from mrstack.core.errors import CommandNotFoundError


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    **kwargs: Any,
) -> subprocess.CompletedProcess[str]:
    """Run ``cmd`` and return the completed process whatever its exit code.

    Callers inspect ``returncode`` and raise their own error type, so git and
    glab failures keep their output verbatim.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of the operation
        cwd: Working directory for command execution
        **kwargs: Additional arguments passed to subprocess.run()

    Raises:
        CommandNotFoundError: If the executable is not installed
    """
    try:
        return subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
            **kwargs,
        )
    except FileNotFoundError as e:
        raise CommandNotFoundError(cmd[0], operation_context) from e
