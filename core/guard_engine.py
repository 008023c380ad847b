from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from core.arguments import extract_namespace, extract_primary_command
from core.formatting import format_block_message
from core.policy_guard import GuardTarget, PolicyGuard, ProtectionPolicy

DEFAULT_NAMESPACE = "default"


class ContextResolver(Protocol):
    def current_context(self) -> str:  # pragma: no cover - interface method
        ...

    def current_namespace(self) -> str:  # pragma: no cover - interface method
        ...


@dataclass(frozen=True)
class CheckDecision:
    context: str
    namespace: str
    command: str
    blocked: bool = False
    message: str = ""


class GuardEngine:
    """Decides whether a kubectl invocation may run against the current context."""

    def __init__(self, policy: ProtectionPolicy, resolver: ContextResolver, *, logger=None) -> None:
        self.policy_guard = PolicyGuard(policy)
        self.resolver = resolver
        self.logger = logger

    def _log(self, level: str, msg: str, *args) -> None:
        if self.logger:
            getattr(self.logger, level)(msg, *args)

    def resolve_namespace(self, args: Sequence[str]) -> str:
        namespace = extract_namespace(args)
        if namespace:
            return namespace
        namespace = self.resolver.current_namespace()
        if namespace:
            return namespace
        self._log("warning", "No namespace configured, assuming %s", DEFAULT_NAMESPACE)
        return DEFAULT_NAMESPACE

    def check(self, args: Sequence[str]) -> CheckDecision:
        """Evaluate ``args`` against the protection policy.

        A failing current-context lookup propagates; the check never guesses
        a context. The namespace lookup falls back to ``default`` instead.
        """

        context = self.resolver.current_context()
        namespace = self.resolve_namespace(args)
        command = extract_primary_command(args)
        self._log("debug", "Checking %r in %s/%s", command, context, namespace)

        target = GuardTarget(context=context, namespace=namespace, command=command)
        if not self.policy_guard.blocks(target):
            return CheckDecision(context=context, namespace=namespace, command=command)
        return CheckDecision(
            context=context,
            namespace=namespace,
            command=command,
            blocked=True,
            message=format_block_message(context, namespace, command),
        )
