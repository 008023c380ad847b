from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from core.errors import ConfigError

CONFIG_ENV_VAR = "KUBECTL_GUARD_CONFIG"


def default_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".kube" / "guard.yaml"


class GuardedContext(BaseModel):
    name: str = Field(..., min_length=1)
    namespaces: List[str] = Field(default_factory=list, description="empty means all namespaces")

    @field_validator("namespaces", mode="before")
    @classmethod
    def _null_namespaces(cls, value):
        return [] if value is None else value

    def covers(self, namespace: str) -> bool:
        return not self.namespaces or namespace in self.namespaces


class GuardSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kubectl: str = "kubectl"
    log_level: str = Field("WARNING", alias="logLevel")
    log_file: Optional[str] = Field(None, alias="logFile")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level


class Config(BaseModel):
    """Persisted protection policy plus tool settings."""

    model_config = ConfigDict(populate_by_name=True)

    guarded_contexts: List[GuardedContext] = Field(default_factory=list, alias="guardedContexts")
    settings: GuardSettings = GuardSettings()

    @field_validator("guarded_contexts", mode="before")
    @classmethod
    def _null_contexts(cls, value):
        return [] if value is None else value

    @field_validator("settings", mode="before")
    @classmethod
    def _null_settings(cls, value):
        return {} if value is None else value

    @model_validator(mode="after")
    def _unique_names(self) -> "Config":
        seen = set()
        for entry in self.guarded_contexts:
            if entry.name in seen:
                raise ValueError(f"context {entry.name!r} is listed more than once")
            seen.add(entry.name)
        return self

    def get(self, context: str) -> Optional[GuardedContext]:
        for entry in self.guarded_contexts:
            if entry.name == context:
                return entry
        return None

    def is_context_protected(self, context: str) -> bool:
        return self.get(context) is not None

    def is_namespace_protected(self, context: str, namespace: str) -> bool:
        entry = self.get(context)
        if entry is None:
            return False
        return entry.covers(namespace)

    def add_context(self, context: str, namespaces: Iterable[str] | None = None) -> GuardedContext:
        """Protect ``context``; an existing entry has its namespaces replaced in place."""

        cleaned: List[str] = []
        for ns in namespaces or []:
            ns = ns.strip()
            if ns and ns not in cleaned:
                cleaned.append(ns)
        entry = self.get(context)
        if entry is not None:
            entry.namespaces = cleaned
            return entry
        entry = GuardedContext(name=context, namespaces=cleaned)
        self.guarded_contexts.append(entry)
        return entry

    def remove_context(self, context: str) -> bool:
        for index, entry in enumerate(self.guarded_contexts):
            if entry.name == context:
                del self.guarded_contexts[index]
                return True
        return False

    def to_document(self) -> dict:
        data = self.model_dump(by_alias=True)
        for entry in data["guardedContexts"]:
            if not entry["namespaces"]:
                del entry["namespaces"]
        return data


class ConfigService:
    def __init__(self, default_path: Optional[Path] = None, *, logger=None) -> None:
        self.default_path = default_path or default_config_path()
        self.logger = logger
        self.config = Config()
        self.last_loaded: Optional[Path] = None

    def _log(self, level: str, message: str, *args) -> None:
        if self.logger:
            getattr(self.logger, level)(message, *args)

    def load(self, path: Optional[Path] = None) -> Config:
        path = path or self.default_path
        if not path.exists():
            self._log("debug", "No config at %s, starting with an empty policy", path)
            self.config = Config()
            self.last_loaded = None
            return self.config

        try:
            with path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"cannot read {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError(f"invalid config in {path}: expected a mapping at top level")

        try:
            self.config = Config.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"Config validation error: {exc}") from exc
        self.last_loaded = path
        self._log("debug", "Loaded %s guarded context(s) from %s", len(self.config.guarded_contexts), path)
        return self.config

    def save(self, path: Optional[Path] = None) -> Path:
        path = path or self.default_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as fh:
                yaml.safe_dump(self.config.to_document(), fh, allow_unicode=True, sort_keys=False)
        except OSError as exc:
            raise ConfigError(f"cannot write {path}: {exc}") from exc
        self.last_loaded = path
        return path
