"""Interpretation of kubectl argument vectors.

Nothing in here knows about protection policy; the functions only answer
"which namespace" and "which sub-command" an invocation targets.
"""

from __future__ import annotations

from typing import FrozenSet, List, Sequence

NAMESPACE_FLAGS: FrozenSet[str] = frozenset({"-n", "--namespace"})
NAMESPACE_PREFIXES = ("-n=", "--namespace=")

# Flags whose value is passed as the following token.
FLAGS_WITH_VALUE: FrozenSet[str] = frozenset(
    {
        "-n",
        "--namespace",
        "-l",
        "--selector",
        "-f",
        "--filename",
        "-o",
        "--output",
        "-c",
        "--container",
        "--context",
        "--kubeconfig",
        "--cluster",
        "--user",
    }
)

OVERRIDE_FLAG = "--force"


def extract_namespace(args: Sequence[str]) -> str:
    """Return the namespace named on the command line, or "" when absent."""

    for index, arg in enumerate(args):
        if arg in NAMESPACE_FLAGS:
            if index + 1 < len(args):
                return args[index + 1]
            # dangling flag: nothing more to read
            return ""
        for prefix in NAMESPACE_PREFIXES:
            if arg.startswith(prefix):
                return arg[len(prefix) :]
    return ""


def extract_primary_command(args: Sequence[str]) -> str:
    """Return the first positional token, skipping flags and their values."""

    skip_next = False
    for arg in args:
        if skip_next:
            skip_next = False
            continue
        if arg.startswith("-"):
            skip_next = arg in FLAGS_WITH_VALUE
            continue
        return arg
    return ""


def has_override(args: Sequence[str]) -> bool:
    return OVERRIDE_FLAG in args


def strip_override(args: Sequence[str]) -> List[str]:
    return [arg for arg in args if arg != OVERRIDE_FLAG]
