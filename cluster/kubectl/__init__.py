"""kubectl integration: context lookups and pass-through execution."""

from .runner import CommandResult, CommandRunner, SubprocessRunner
from .service import KubeContextService

__all__ = [
    "CommandResult",
    "CommandRunner",
    "SubprocessRunner",
    "KubeContextService",
]
