from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from cluster.kubectl.runner import CommandResult
from core.errors import KubectlNotFoundError

CURRENT_CONTEXT_ARGS = ("config", "current-context")
CURRENT_NAMESPACE_ARGS = ("config", "view", "--minify", "-o", "jsonpath={..namespace}")


class FakeRunner:
    """In-memory stand-in for ``SubprocessRunner``.

    Captured commands are answered from ``responses`` keyed by the argument
    tuple without the executable; unknown commands exit 1. Every call is
    recorded in ``calls`` and ``inherit`` returns ``exit_code``.
    """

    def __init__(
        self,
        responses: Dict[Tuple[str, ...], CommandResult] | None = None,
        *,
        exit_code: int = 0,
        missing: bool = False,
    ) -> None:
        self.responses = dict(responses or {})
        self.exit_code = exit_code
        self.missing = missing
        self.calls: List[List[str]] = []
        self.executed: List[List[str]] = []

    @classmethod
    def for_cluster(cls, context: str | None, namespace: str = "", **kwargs) -> "FakeRunner":
        responses = {}
        if context is not None:
            responses[CURRENT_CONTEXT_ARGS] = CommandResult(0, context + "\n")
        responses[CURRENT_NAMESPACE_ARGS] = CommandResult(0, namespace)
        return cls(responses, **kwargs)

    def capture(self, argv: Sequence[str]) -> CommandResult:
        self.calls.append(list(argv))
        if self.missing:
            raise KubectlNotFoundError(f"{argv[0]}: executable not found in PATH")
        return self.responses.get(tuple(argv[1:]), CommandResult(1, "", "error: unknown command\n"))

    def inherit(self, argv: Sequence[str]) -> int:
        if self.missing:
            raise KubectlNotFoundError(f"{argv[0]}: executable not found in PATH")
        self.executed.append(list(argv))
        return self.exit_code
