from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, TextIO

from cluster.kubectl import CommandRunner, KubeContextService, SubprocessRunner
from core.config_service import ConfigService
from core.errors import CommandBlockedError, ConfigError, ContextResolutionError, GuardError
from core.execution_engine import ExecutionEngine
from core.formatting import format_guarded_entry, format_scope
from core.guard_engine import GuardEngine
from core.logger import setup_logger
from core.state import ExitCode

VERSION = "0.1.0"

USAGE = """kubectl-guard - Kubernetes context protection plugin

Usage:
  kubectl guard <command> [options]

Commands:
  guard <context> [--namespace=<ns>]  Protect a context
  unguard <context>                   Remove protection from a context
  list                                List protected contexts and current status
  exec -- <kubectl args>              Execute kubectl with protection check
  version                             Print the version

Examples:
  kubectl guard guard prod-cluster
  kubectl guard guard prod-cluster --namespace=production
  kubectl guard unguard prod-cluster
  kubectl guard list
  kubectl guard exec -- delete pod nginx

Options:
  --force    Force execution on protected context
  --help     Show help
"""


def parse_namespace_option(args: Sequence[str]) -> List[str]:
    """Namespaces given to ``guard`` as a comma separated option value."""

    namespaces: List[str] = []
    for index, arg in enumerate(args):
        value: Optional[str] = None
        if arg in ("-n", "--namespace") and index + 1 < len(args):
            value = args[index + 1]
        elif arg.startswith("--namespace="):
            value = arg[len("--namespace=") :]
        elif arg.startswith("-n="):
            value = arg[len("-n=") :]
        if value is not None:
            namespaces = value.split(",")
    return namespaces


class GuardApp:
    def __init__(
        self,
        config_service: ConfigService,
        *,
        runner: CommandRunner | None = None,
        logger=None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.config_service = config_service
        self.logger = logger
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        settings = config_service.config.settings
        self.kube = KubeContextService(
            runner or SubprocessRunner(logger=logger),
            kubectl=settings.kubectl,
            logger=logger,
        )
        self.guard_engine = GuardEngine(config_service.config, self.kube, logger=logger)
        self.execution_engine = ExecutionEngine(
            self.guard_engine, self.kube, logger=logger, notice_stream=self.stderr
        )

    def _out(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def _err(self, text: str) -> None:
        print(text, file=self.stderr)

    # Routing
    def dispatch(self, command: str, args: List[str]) -> int:
        handlers: Dict[str, Callable[[List[str]], int]] = {
            "guard": self.guard,
            "unguard": self.unguard,
            "list": self.list_contexts,
            "exec": self.exec_kubectl,
        }
        handler = handlers.get(command)
        if handler is None:
            self._err(f"unknown command: {command}")
            self.stdout.write(USAGE)
            return ExitCode.FAILURE
        try:
            return handler(args)
        except GuardError as exc:
            self._err(str(exc))
            return ExitCode.FAILURE

    # Commands
    def guard(self, args: List[str]) -> int:
        if not args:
            self._err("context name is required")
            return ExitCode.FAILURE
        context = args[0]
        entry = self.config_service.config.add_context(context, parse_namespace_option(args[1:]))
        self.config_service.save()
        if self.logger:
            self.logger.info("Guarded %s %s", context, format_scope(entry.namespaces))
        self._out(f"guarded {context} {format_scope(entry.namespaces)}")
        return ExitCode.OK

    def unguard(self, args: List[str]) -> int:
        if not args:
            self._err("context name is required")
            return ExitCode.FAILURE
        context = args[0]
        if not self.config_service.config.remove_context(context):
            self._err(f"{context} is not guarded")
            return ExitCode.FAILURE
        self.config_service.save()
        if self.logger:
            self.logger.info("Unguarded %s", context)
        self._out(f"unguarded {context}")
        return ExitCode.OK

    def list_contexts(self, args: List[str]) -> int:
        config = self.config_service.config
        try:
            current: Optional[str] = self.kube.current_context()
        except (GuardError, OSError) as exc:
            # listing still works without a reachable kubeconfig
            if self.logger:
                self.logger.debug("Current context unavailable: %s", exc)
            current = None

        if not config.guarded_contexts:
            self._out("no guarded contexts")
        else:
            self._out("guarded contexts:")
            for entry in config.guarded_contexts:
                self._out(format_guarded_entry(entry, current))

        self._out()
        if current:
            status = "guarded" if config.is_context_protected(current) else "not guarded"
            self._out(f"current: {current} ({status})")
        return ExitCode.OK

    def exec_kubectl(self, args: List[str]) -> int:
        if args and args[0] == "--":
            args = args[1:]
        if not args:
            self._err("kubectl command is required")
            return ExitCode.FAILURE
        try:
            result = self.execution_engine.execute(args)
        except CommandBlockedError as exc:
            self._err(exc.decision.message)
            return ExitCode.FAILURE
        except ContextResolutionError as exc:
            self._err(f"check failed: {exc}")
            return ExitCode.FAILURE
        return result.exit_code


def build_app(config_path: Optional[Path] = None, **kwargs) -> GuardApp:
    config_service = ConfigService(config_path)
    config_service.load()
    settings = config_service.config.settings
    log_path = Path(settings.log_file).expanduser() if settings.log_file else None
    logger = kwargs.pop("logger", None)
    if logger is None:
        try:
            logger = setup_logger(settings.log_level, log_path)
        except OSError as exc:
            raise ConfigError(f"cannot open log file {log_path}: {exc}") from exc
    config_service.logger = logger
    return GuardApp(config_service, logger=logger, **kwargs)


def run(argv: Sequence[str], *, config_path: Optional[Path] = None, **kwargs) -> int:
    args = list(argv)
    stdout = kwargs.get("stdout") or sys.stdout
    stderr = kwargs.get("stderr") or sys.stderr
    if not args or args[0] in ("--help", "-h"):
        stdout.write(USAGE)
        return ExitCode.OK
    if args[0] == "version":
        print(f"kubectl-guard {VERSION}", file=stdout)
        return ExitCode.OK

    try:
        app = build_app(config_path, **kwargs)
    except GuardError as exc:
        print(f"failed to load config: {exc}", file=stderr)
        return ExitCode.FAILURE
    return int(app.dispatch(args[0], args[1:]))


def main() -> None:
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
