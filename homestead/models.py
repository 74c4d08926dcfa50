"""Domain objects shared by the repositories, installers and config manager."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class HomesteadError(Exception):
    """Base class for all errors raised by the package."""


class NotFoundError(HomesteadError, LookupError):
    """A requested item does not exist."""


class InvalidInputError(HomesteadError, ValueError):
    """An argument or entity failed validation."""


class ExecutionFailedError(HomesteadError):
    """An external command could not be run or did not succeed."""


class Category(str, Enum):
    """Category of a maintenance script."""

    CLEANUP = "cleanup"
    MONITORING = "monitoring"


class PackageCategory(str, Enum):
    """Category of an installable package."""

    IDE = "ide"
    TERMINAL = "terminal"
    ZSH_CORE = "zsh-core"
    SHELL = "shell"
    TOOL = "tool"
    AI = "ai"
    APP = "app"
    GAMES = "games"


class ConfigScope(str, Enum):
    """Where a shell configuration applies."""

    GENERAL = "general"
    PROJECT = "project"


class PluginSource(str, Enum):
    """Where a Zsh plugin comes from."""

    BUILT_IN = "built-in"
    EXTERNAL = "external"
    CUSTOM = "custom"


def _require(value: str, what: str) -> None:
    if not value or not value.strip():
        raise InvalidInputError(f"{what} is required")


@dataclass
class Script:
    """A shell script that can be run from the menu."""

    id: str
    name: str
    path: str
    category: Category
    description: str = ""
    requires_sudo: bool = False

    def validate(self) -> None:
        """Raise InvalidInputError unless the script is complete."""
        _require(self.id, "script id")
        _require(self.name, "script name")
        _require(self.path, "script path")
        try:
            Category(self.category)
        except ValueError:
            raise InvalidInputError(f"invalid script category: {self.category!r}") from None


@dataclass
class Package:
    """A piece of software that can be installed."""

    id: str
    name: str
    category: PackageCategory
    description: str = ""
    version: str = ""
    download_url: str = ""
    install_cmd: str = ""
    check_cmd: str = ""

    def validate(self) -> None:
        """Raise InvalidInputError unless the package is complete."""
        _require(self.id, "package id")
        _require(self.name, "package name")
        try:
            PackageCategory(self.category)
        except ValueError:
            raise InvalidInputError(f"invalid package category: {self.category!r}") from None


@dataclass
class ShellConfig:
    """A named shell configuration stored on disk."""

    id: str
    name: str
    scope: ConfigScope = ConfigScope.GENERAL
    plugins: list[str] = field(default_factory=list)
    aliases: dict[str, str] = field(default_factory=dict)
    functions: dict[str, str] = field(default_factory=dict)
    env_vars: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Raise InvalidInputError unless the configuration is complete."""
        _require(self.id, "config id")
        _require(self.name, "config name")
        try:
            ConfigScope(self.scope)
        except ValueError:
            raise InvalidInputError(f"invalid config scope: {self.scope!r}") from None

    def to_dict(self) -> dict[str, Any]:
        """Return a plain mapping suitable for YAML serialisation."""
        return {
            "id": self.id,
            "name": self.name,
            "scope": ConfigScope(self.scope).value,
            "plugins": list(self.plugins),
            "aliases": dict(self.aliases),
            "functions": dict(self.functions),
            "env_vars": dict(self.env_vars),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShellConfig":
        """Build a configuration from a mapping produced by to_dict."""
        if not isinstance(data, Mapping):
            raise InvalidInputError("config data must be a mapping")
        try:
            scope = ConfigScope(data.get("scope") or ConfigScope.GENERAL)
        except ValueError:
            raise InvalidInputError(f"invalid config scope: {data.get('scope')!r}") from None
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            scope=scope,
            plugins=[str(p) for p in data.get("plugins") or []],
            aliases={str(k): str(v) for k, v in (data.get("aliases") or {}).items()},
            functions={str(k): str(v) for k, v in (data.get("functions") or {}).items()},
            env_vars={str(k): str(v) for k, v in (data.get("env_vars") or {}).items()},
        )


@dataclass
class ZshPlugin:
    """An Oh My Zsh plugin, built in or fetched from a repository."""

    id: str
    name: str
    source: PluginSource = PluginSource.BUILT_IN
    description: str = ""
    repo_url: str = ""
    install_cmd: str = ""

    def validate(self) -> None:
        """Raise InvalidInputError unless the plugin is complete."""
        _require(self.id, "plugin id")
        _require(self.name, "plugin name")
        try:
            PluginSource(self.source)
        except ValueError:
            raise InvalidInputError(f"invalid plugin source: {self.source!r}") from None

    def is_built_in(self) -> bool:
        return self.source == PluginSource.BUILT_IN

    def is_external(self) -> bool:
        return self.source == PluginSource.EXTERNAL

    def is_custom(self) -> bool:
        return self.source == PluginSource.CUSTOM

    def install_command(self) -> str:
        """Shell command that installs the plugin into the current directory.

        An explicit install command wins; otherwise the repository is cloned
        into a directory named after the plugin. Returns "" when neither is set.
        """
        if self.install_cmd:
            return self.install_cmd
        if self.repo_url:
            return f"git clone {self.repo_url} {self.id}"
        return ""


@dataclass
class ConfigSelections:
    """What the user picked when configuring the shell."""

    core_components: list[str] = field(default_factory=list)
    plugins: list[str] = field(default_factory=list)
    tools: list[str] = field(default_factory=list)
    custom_aliases: dict[str, str] = field(default_factory=dict)
    custom_env_vars: dict[str, str] = field(default_factory=dict)


@dataclass
class InstallProgress:
    """A progress report emitted while a package installs."""

    package: Package
    status: str
    progress: int = 0
    message: str = ""
    error: BaseException | None = None
    is_completed: bool = False
    can_abort: bool = False


@dataclass
class PluginInstallProgress:
    """A progress report emitted while a plugin installs."""

    plugin_id: str
    plugin_name: str
    status: str
    progress: int = 0
    message: str = ""
    error: BaseException | None = None
    is_completed: bool = False