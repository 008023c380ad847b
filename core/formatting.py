from __future__ import annotations

from typing import Optional

from core.arguments import OVERRIDE_FLAG
from core.config_service import GuardedContext


def format_block_message(context: str, namespace: str, command: str) -> str:
    """Explanation shown when a destructive command hits a guarded context."""

    return "\n".join(
        [
            "blocked",
            f"  context: {context}",
            f"  namespace: {namespace}",
            f"  command: {command}",
            "",
            "This context is guarded.",
            f"Use {OVERRIDE_FLAG} flag to execute, or run `kubectl guard unguard {context}` to remove protection.",
        ]
    )


def format_forced_notice(context: str, command: str) -> str:
    return f"executing {command} on {context} with {OVERRIDE_FLAG}"


def format_scope(namespaces: list[str]) -> str:
    if namespaces:
        return f"(namespaces: {', '.join(namespaces)})"
    return "(all namespaces)"


def format_guarded_entry(entry: GuardedContext, current_context: Optional[str] = None) -> str:
    marker = "*" if entry.name == current_context else " "
    return f" {marker} {entry.name} {format_scope(entry.namespaces)}"
