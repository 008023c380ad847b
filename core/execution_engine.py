from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Protocol, Sequence, TextIO

from core.arguments import has_override, strip_override
from core.errors import CommandBlockedError
from core.formatting import format_forced_notice
from core.guard_engine import CheckDecision, GuardEngine
from core.state import Outcome


class CommandExecutor(Protocol):
    def run(self, args: Sequence[str]) -> int:  # pragma: no cover - interface method
        ...


@dataclass(frozen=True)
class ExecutionResult:
    outcome: Outcome
    decision: CheckDecision
    exit_code: int
    args: tuple[str, ...] = ()


class ExecutionEngine:
    """Runs kubectl once the guard engine has cleared the invocation."""

    def __init__(
        self,
        guard_engine: GuardEngine,
        executor: CommandExecutor,
        *,
        logger=None,
        notice_stream: TextIO | None = None,
    ) -> None:
        self.guard_engine = guard_engine
        self.executor = executor
        self.logger = logger
        self.notice_stream = notice_stream

    def _log(self, level: str, msg: str, *args) -> None:
        if self.logger:
            getattr(self.logger, level)(msg, *args)

    def execute(self, args: Sequence[str]) -> ExecutionResult:
        forced = has_override(args)
        forwarded = strip_override(args)
        decision = self.guard_engine.check(forwarded)

        if decision.blocked and not forced:
            self._log("info", "Blocked %s on %s/%s", decision.command, decision.context, decision.namespace)
            raise CommandBlockedError(decision)

        outcome = Outcome.ALLOWED
        if decision.blocked:
            outcome = Outcome.FORCED
            stream = self.notice_stream or sys.stderr
            print(format_forced_notice(decision.context, decision.command), file=stream)
            self._log(
                "warning",
                "Forced %s on guarded %s/%s",
                decision.command,
                decision.context,
                decision.namespace,
            )

        exit_code = self.executor.run(forwarded)
        return ExecutionResult(outcome=outcome, decision=decision, exit_code=exit_code, args=tuple(forwarded))
