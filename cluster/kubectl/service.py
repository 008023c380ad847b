from __future__ import annotations

from typing import Sequence

from core.errors import ContextResolutionError

from .runner import CommandRunner


class KubeContextService:
    """Asks kubectl about the active context and namespace, and runs it."""

    def __init__(self, runner: CommandRunner, *, kubectl: str = "kubectl", logger=None) -> None:
        self.runner = runner
        self.kubectl = kubectl
        self.logger = logger

    def _log(self, level: str, msg: str, *args) -> None:
        if self.logger:
            getattr(self.logger, level)(msg, *args)

    def current_context(self) -> str:
        result = self.runner.capture([self.kubectl, "config", "current-context"])
        if not result.ok:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            raise ContextResolutionError(f"cannot determine current context: {detail}")
        context = result.stdout.strip()
        if not context:
            raise ContextResolutionError("cannot determine current context: kubectl returned nothing")
        return context

    def current_namespace(self) -> str:
        """Namespace of the active context, or "" when kubectl cannot tell."""

        try:
            result = self.runner.capture(
                [self.kubectl, "config", "view", "--minify", "-o", "jsonpath={..namespace}"]
            )
        except OSError as exc:
            self._log("warning", "Namespace lookup failed: %s", exc)
            return ""
        if not result.ok:
            self._log("warning", "Namespace lookup exited with %s", result.returncode)
            return ""
        return result.stdout.strip()

    def run(self, args: Sequence[str]) -> int:
        return self.runner.inherit([self.kubectl, *args])
