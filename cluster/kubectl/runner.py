from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

from core.errors import KubectlNotFoundError


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    def capture(self, argv: Sequence[str]) -> CommandResult:  # pragma: no cover - interface method
        ...

    def inherit(self, argv: Sequence[str]) -> int:  # pragma: no cover - interface method
        ...


class SubprocessRunner:
    """Runs external commands with ``subprocess``; no timeout is imposed."""

    def __init__(self, *, logger=None) -> None:
        self.logger = logger

    def _log(self, level: str, message: str, *args) -> None:
        if self.logger:
            getattr(self.logger, level)(message, *args)

    @staticmethod
    def _resolve(argv: Sequence[str]) -> list[str]:
        if not argv:
            raise ValueError("empty command line")
        executable = shutil.which(argv[0])
        if executable is None:
            raise KubectlNotFoundError(f"{argv[0]}: executable not found in PATH")
        return [executable, *argv[1:]]

    def capture(self, argv: Sequence[str]) -> CommandResult:
        resolved = self._resolve(argv)
        self._log("debug", "Running %s", " ".join(argv))
        completed = subprocess.run(resolved, capture_output=True, text=True, check=False)
        return CommandResult(completed.returncode, completed.stdout, completed.stderr)

    def inherit(self, argv: Sequence[str]) -> int:
        resolved = self._resolve(argv)
        self._log("debug", "Executing %s", " ".join(argv))
        return subprocess.run(resolved, check=False).returncode
