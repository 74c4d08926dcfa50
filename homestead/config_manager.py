"""Stores shell configurations as YAML and writes the user's Zsh files."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Iterable, Mapping

import yaml

from homestead.models import (
    ConfigSelections,
    HomesteadError,
    InvalidInputError,
    NotFoundError,
    ShellConfig,
)

HOMESTEAD_START_MARKER = "# --- Homestead managed ---"
HOMESTEAD_END_MARKER = "# --- End Homestead ---"

_ALIASES_PLACEHOLDER = "# General aliases - Add your aliases here\n"
_FUNCTIONS_PLACEHOLDER = "# General functions - Add your functions here\n"
_ALIASES_HEADER = "# General aliases - Generated by Homestead"

_P10K_INSTANT_PROMPT = (
    "# Powerlevel10k instant prompt - must stay at top\n"
    "typeset -g POWERLEVEL9K_INSTANT_PROMPT=quiet\n"
    'if [[ -r "${XDG_CACHE_HOME:-$HOME/.cache}/p10k-instant-prompt-${(%):-%n}.zsh" ]]; then\n'
    '  source "${XDG_CACHE_HOME:-$HOME/.cache}/p10k-instant-prompt-${(%):-%n}.zsh"\n'
    "fi\n\n"
)

_NVM_BLOCK = (
    "# NVM (Node Version Manager)\n"
    'export NVM_DIR="$HOME/.nvm"\n'
    '[ -s "$NVM_DIR/nvm.sh" ] && \\. "$NVM_DIR/nvm.sh"\n'
    '[ -s "$NVM_DIR/bash_completion" ] && \\. "$NVM_DIR/bash_completion"\n\n'
)

_BUN_BLOCK = (
    "# Bun\n"
    'export BUN_INSTALL="$HOME/.bun"\n'
    'export PATH="$BUN_INSTALL/bin:$PATH"\n\n'
)

_GENERAL_SOURCES = (
    "# Source general aliases and functions\n"
    "if [[ -f ~/.zsh/general/aliases.zsh ]]; then\n"
    "  source ~/.zsh/general/aliases.zsh\n"
    "fi\n\n"
    "if [[ -f ~/.zsh/general/functions.zsh ]]; then\n"
    "  source ~/.zsh/general/functions.zsh\n"
    "fi\n\n"
)

_P10K_SOURCE = (
    "# To customize prompt, run `p10k configure` or edit ~/.p10k.zsh\n"
    "[[ ! -f ~/.p10k.zsh ]] || source ~/.p10k.zsh\n"
)


def _timestamp() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


def _alias_line(name: str, command: str) -> str:
    return f"alias {name}='{command}'"


def filter_installed_plugins(home_dir: str | os.PathLike[str], plugins: Iterable[str]) -> list[str]:
    """Keep only plugins present under ~/.oh-my-zsh, built in or custom."""
    zsh = Path(home_dir) / ".oh-my-zsh"
    built_in = zsh / "plugins"
    custom = zsh / "custom" / "plugins"
    return [name for name in plugins if (built_in / name).is_dir() or (custom / name).is_dir()]


def strip_homestead_block(content: str) -> str:
    """Remove the Homestead-managed block, leaving the user's own content."""
    start = content.find(HOMESTEAD_START_MARKER)
    if start == -1:
        return content
    end = content.find(HOMESTEAD_END_MARKER)
    if end == -1:
        return content
    return content[:start] + content[end + len(HOMESTEAD_END_MARKER):]


def parse_alias_line(line: str) -> str | None:
    """Return the alias name defined by a line such as ``alias ll='ls -la'``, or None."""
    trimmed = line.strip()
    if not trimmed.startswith("alias "):
        return None
    rest = trimmed[len("alias "):].strip()
    name, sep, _ = rest.partition("=")
    if not sep:
        return None
    name = name.strip()
    return name or None


def merge_aliases_file(path: str | os.PathLike[str], aliases: Mapping[str, str]) -> None:
    """Update or add alias definitions in a file, keeping every other line."""
    target = Path(path)
    try:
        lines = target.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        lines = []
    except OSError as exc:
        raise HomesteadError(f"failed to read aliases.zsh: {exc}") from exc

    existing = {name for name in map(parse_alias_line, lines) if name is not None}

    for name, command in aliases.items():
        new_line = _alias_line(name, command)
        if name in existing:
            lines = [new_line if parse_alias_line(line) == name else line for line in lines]
        else:
            lines.append(new_line)

    if not lines:
        lines = [_ALIASES_HEADER, *(_alias_line(n, c) for n, c in aliases.items())]

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as exc:
        raise HomesteadError(f"failed to write aliases.zsh: {exc}") from exc


class FileConfigManager:
    """Keeps shell configurations as YAML files and renders Zsh startup files.

    ``home_dir`` overrides the user's home directory; by default it is looked
    up each time it is needed.
    """

    def __init__(
        self,
        config_dir: str | os.PathLike[str],
        home_dir: str | os.PathLike[str] | None = None,
    ) -> None:
        self.config_dir = Path(config_dir)
        self._home_dir = Path(home_dir) if home_dir is not None else None

    def _home(self) -> Path:
        if self._home_dir is not None:
            return self._home_dir
        try:
            return Path.home()
        except (KeyError, RuntimeError) as exc:
            raise HomesteadError(f"failed to get home directory: {exc}") from exc

    def _config_file(self, name: str) -> Path:
        return self.config_dir / f"{name}.yaml"

    def save_config(self, config: ShellConfig) -> None:
        """Validate a configuration and write it to ``<config_dir>/<id>.yaml``."""
        try:
            config.validate()
        except InvalidInputError as exc:
            raise InvalidInputError(f"invalid config: {exc}") from exc
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise HomesteadError(f"failed to create config directory: {exc}") from exc
        data = yaml.safe_dump(config.to_dict(), allow_unicode=True, sort_keys=False)
        try:
            self._config_file(config.id).write_text(data, encoding="utf-8")
        except OSError as exc:
            raise HomesteadError(f"failed to write config file: {exc}") from exc

    def load_config(self, name: str) -> ShellConfig:
        """Read a stored configuration; NotFoundError if there is none."""
        try:
            text = self._config_file(name).read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFoundError(f"config '{name}' not found") from None
        except OSError as exc:
            raise HomesteadError(f"failed to read config file: {exc}") from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise HomesteadError(f"failed to unmarshal config: {exc}") from exc
        return ShellConfig.from_dict(data or {})

    def delete_config(self, name: str) -> None:
        """Remove a stored configuration; NotFoundError if there is none."""
        try:
            self._config_file(name).unlink()
        except FileNotFoundError:
            raise NotFoundError(f"config '{name}' not found") from None
        except OSError as exc:
            raise HomesteadError(f"failed to delete config: {exc}") from exc

    def list_configs(self) -> list[str]:
        """Names of all stored configurations, sorted."""
        try:
            entries = sorted(self.config_dir.iterdir(), key=lambda p: p.name)
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise HomesteadError(f"failed to read config directory: {exc}") from exc
        return [
            entry.name[: -len(".yaml")]
            for entry in entries
            if not entry.is_dir() and entry.name.endswith(".yaml")
        ]

    def generate_zshrc(self, selections: ConfigSelections) -> str:
        """Render the managed .zshrc content for the given selections."""
        core = set(selections.core_components)
        tools = set(selections.tools)
        has_omz = "oh-my-zsh" in core
        has_p10k = "powerlevel10k" in core
        parts: list[str] = []

        if has_p10k:
            parts.append(_P10K_INSTANT_PROMPT)

        parts.append("# Generated by Homestead\n")
        parts.append(f"# Generated at: {_timestamp()}\n\n")

        if has_omz:
            parts.append('# Path to oh-my-zsh installation\nexport ZSH="$HOME/.oh-my-zsh"\n\n')

        if has_p10k:
            parts.append('# Theme\nZSH_THEME="powerlevel10k/powerlevel10k"\n\n')

        installed = filter_installed_plugins(self._home(), selections.plugins)
        if installed:
            parts.append(f"# Plugins\nplugins=({' '.join(installed)})\n\n")

        if has_omz:
            parts.append("# Source Oh My Zsh\nsource $ZSH/oh-my-zsh.sh\n\n")

        if "nvm" in tools:
            parts.append(_NVM_BLOCK)
        if "bun" in tools:
            parts.append(_BUN_BLOCK)

        if selections.custom_aliases:
            parts.append("# Custom Aliases\n")
            parts.extend(
                _alias_line(name, cmd) + "\n" for name, cmd in selections.custom_aliases.items()
            )
            parts.append("\n")

        if selections.custom_env_vars:
            parts.append("# Custom Environment Variables\n")
            parts.extend(
                f'export {key}="{value}"\n' for key, value in selections.custom_env_vars.items()
            )
            parts.append("\n")

        parts.append(_GENERAL_SOURCES)

        if has_p10k:
            parts.append(_P10K_SOURCE)

        return "".join(parts)

    def generate_aliases_file(self, config: ShellConfig | None) -> str:
        """Render aliases.zsh content for a configuration."""
        if config is None:
            raise InvalidInputError("config cannot be None")
        parts = [
            "# Aliases - Generated by Homestead\n",
            f"# Config: {config.name} ({config.id})\n",
            f"# Generated at: {_timestamp()}\n\n",
        ]
        if config.aliases:
            parts.extend(_alias_line(n, c) + "\n" for n, c in config.aliases.items())
        else:
            parts.append("# No aliases defined\n")
        return "".join(parts)

    def generate_functions_file(self, config: ShellConfig | None) -> str:
        """Render functions.zsh content for a configuration."""
        if config is None:
            raise InvalidInputError("config cannot be None")
        parts = [
            "# Functions - Generated by Homestead\n",
            f"# Config: {config.name} ({config.id})\n",
            f"# Generated at: {_timestamp()}\n\n",
        ]
        if config.functions:
            parts.extend(f"{name}() {{\n{body}\n}}\n\n" for name, body in config.functions.items())
        else:
            parts.append("# No functions defined\n")
        return "".join(parts)

    def backup_existing_config(self) -> Path:
        """Copy .zshrc and the general alias/function files into a timestamped backup.

        Returns the backup directory.
        """
        home = self._home()
        backup_dir = home / ".zsh" / "backups" / datetime.now().strftime("%Y%m%d-%H%M%S")
        try:
            backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise HomesteadError(f"failed to create backup directory: {exc}") from exc

        sources = (
            home / ".zshrc",
            home / ".zsh" / "general" / "aliases.zsh",
            home / ".zsh" / "general" / "functions.zsh",
        )
        for source in sources:
            if not source.exists():
                continue
            try:
                data = source.read_bytes()
            except OSError as exc:
                raise HomesteadError(f"failed to read {source}: {exc}") from exc
            destination = backup_dir / source.name
            try:
                destination.write_bytes(data)
            except OSError as exc:
                raise HomesteadError(f"failed to write backup {destination}: {exc}") from exc
        return backup_dir

    def apply_config(self, selections: ConfigSelections) -> None:
        """Write the managed block into ~/.zshrc and set up ~/.zsh/general."""
        home = self._home()

        try:
            self.backup_existing_config()
        except (HomesteadError, OSError):
            pass  # a failed backup must not block applying the config

        managed_block = self.generate_zshrc(selections)

        zshrc = home / ".zshrc"
        try:
            existing = zshrc.read_text(encoding="utf-8")
        except OSError:
            existing = ""
        user_content = strip_homestead_block(existing)

        parts: list[str] = []
        if user_content.strip():
            parts.append(user_content.rstrip("\n") + "\n\n")
        parts.append(f"{HOMESTEAD_START_MARKER}\n{managed_block}\n{HOMESTEAD_END_MARKER}\n")
        try:
            zshrc.write_text("".join(parts), encoding="utf-8")
        except OSError as exc:
            raise HomesteadError(f"failed to write .zshrc: {exc}") from exc

        general = home / ".zsh" / "general"
        try:
            general.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise HomesteadError(f"failed to create .zsh/general directory: {exc}") from exc

        aliases_path = general / "aliases.zsh"
        if selections.custom_aliases:
            try:
                merge_aliases_file(aliases_path, selections.custom_aliases)
            except HomesteadError as exc:
                raise HomesteadError(f"failed to update aliases.zsh: {exc}") from exc
        elif not aliases_path.exists():
            try:
                aliases_path.write_text(_ALIASES_PLACEHOLDER, encoding="utf-8")
            except OSError as exc:
                raise HomesteadError(f"failed to write aliases.zsh: {exc}") from exc

        functions_path = general / "functions.zsh"
        if not functions_path.exists():
            try:
                functions_path.write_text(_FUNCTIONS_PLACEHOLDER, encoding="utf-8")
            except OSError as exc:
                raise HomesteadError(f"failed to write functions.zsh: {exc}") from exc