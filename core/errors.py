from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.guard_engine import CheckDecision


class GuardError(Exception):
    """Base class for failures that abort a guarded invocation."""


class ContextResolutionError(GuardError, RuntimeError):
    pass


class ConfigError(GuardError, ValueError):
    pass


class KubectlNotFoundError(GuardError, FileNotFoundError):
    pass


class CommandBlockedError(GuardError, PermissionError):
    def __init__(self, decision: "CheckDecision") -> None:
        super().__init__(decision.message)
        self.decision = decision
