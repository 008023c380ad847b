from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Protocol, Sequence

# kubectl verbs that mutate or delete cluster state
DESTRUCTIVE_COMMANDS: FrozenSet[str] = frozenset(
    {
        "delete",
        "apply",
        "patch",
        "replace",
        "scale",
        "rollout",
        "drain",
        "cordon",
        "uncordon",
        "taint",
        "label",
        "annotate",
        "edit",
        "set",
    }
)


def is_destructive(command: str) -> bool:
    return command in DESTRUCTIVE_COMMANDS


@dataclass(frozen=True)
class GuardTarget:
    context: str
    namespace: str
    command: str


class ProtectionPolicy(Protocol):
    def is_context_protected(self, context: str) -> bool:  # pragma: no cover - interface method
        ...

    def is_namespace_protected(self, context: str, namespace: str) -> bool:  # pragma: no cover - interface method
        ...


class GuardRule(Protocol):
    def matches(self, target: GuardTarget) -> bool:  # pragma: no cover - interface method
        ...


class ProtectedContextRule:
    def __init__(self, policy: ProtectionPolicy) -> None:
        self.policy = policy

    def matches(self, target: GuardTarget) -> bool:
        return self.policy.is_context_protected(target.context)


class ProtectedNamespaceRule:
    def __init__(self, policy: ProtectionPolicy) -> None:
        self.policy = policy

    def matches(self, target: GuardTarget) -> bool:
        return self.policy.is_namespace_protected(target.context, target.namespace)


class DestructiveCommandRule:
    def matches(self, target: GuardTarget) -> bool:
        return is_destructive(target.command)


class PolicyGuard:
    """Blocks a target only when every rule matches it.

    Rules are evaluated in order and evaluation stops at the first rule that
    does not match, so an unprotected context never reaches the classifier.
    """

    def __init__(self, policy: ProtectionPolicy, *, rules: Sequence[GuardRule] | None = None) -> None:
        self.policy = policy
        self.rules = list(rules) if rules else self.default_rules(policy)

    @staticmethod
    def default_rules(policy: ProtectionPolicy) -> list[GuardRule]:
        return [ProtectedContextRule(policy), ProtectedNamespaceRule(policy), DestructiveCommandRule()]

    def blocks(self, target: GuardTarget) -> bool:
        for rule in self.rules:
            if not rule.matches(target):
                return False
        return True
