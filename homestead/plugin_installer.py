"""Installs, updates and removes Oh My Zsh plugins."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable

from homestead.models import (
    ExecutionFailedError,
    HomesteadError,
    InvalidInputError,
    NotFoundError,
    PluginInstallProgress,
    ZshPlugin,
)

PluginProgressCallback = Callable[[PluginInstallProgress], None]


def _notify(callback: PluginProgressCallback | None, progress: PluginInstallProgress) -> None:
    """Hand ``progress`` to ``callback`` when one was given."""
    if callback is not None:
        callback(progress)


def _run(command: list[str], cwd: Path) -> tuple[int, str]:
    """Run a command in ``cwd`` and return its exit status and combined output."""
    completed = subprocess.run(
        command,
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        check=False,
    )
    return completed.returncode, completed.stdout.decode("utf-8", errors="replace")


class ZshPluginInstaller:
    """Manages plugins of an Oh My Zsh installation.

    ``zsh_dir`` is the Oh My Zsh directory (e.g. ``~/.oh-my-zsh``) and
    ``custom_dir`` its custom directory (e.g. ``~/.oh-my-zsh/custom``).
    """

    def __init__(
        self,
        zsh_dir: str | os.PathLike[str],
        custom_dir: str | os.PathLike[str],
    ) -> None:
        self.zsh_dir = Path(zsh_dir)
        self.custom_dir = Path(custom_dir)

    @property
    def _built_in_plugins(self) -> Path:
        return self.zsh_dir / "plugins"

    @property
    def _custom_plugins(self) -> Path:
        return self.custom_dir / "plugins"

    def install_plugin(
        self,
        plugin: ZshPlugin,
        progress_callback: PluginProgressCallback | None = None,
    ) -> None:
        """Make the plugin available, cloning it if it is not built in."""

        def report(progress: PluginInstallProgress) -> None:
            _notify(progress_callback, progress)

        try:
            self.validate_plugin(plugin)
        except InvalidInputError as exc:
            raise InvalidInputError(f"plugin validation failed: {exc}") from exc

        report(
            PluginInstallProgress(
                plugin.id, plugin.name, "starting", message=f"Installing {plugin.name}..."
            )
        )

        if plugin.is_built_in():
            if not self.is_plugin_installed(plugin.id):
                raise NotFoundError(
                    f"built-in plugin '{plugin.id}' not found in Oh My Zsh installation"
                )
            report(
                PluginInstallProgress(
                    plugin.id,
                    plugin.name,
                    "complete",
                    message=f"{plugin.name} is already available (built-in)",
                    is_completed=True,
                )
            )
            return

        if self.is_plugin_installed(plugin.id):
            report(
                PluginInstallProgress(
                    plugin.id,
                    plugin.name,
                    "complete",
                    message=f"{plugin.name} is already installed",
                    is_completed=True,
                )
            )
            return

        if not (plugin.is_external() or plugin.is_custom()):
            raise InvalidInputError(f"unsupported plugin source: {plugin.source}")

        target_dir = self._custom_plugins
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise HomesteadError(f"failed to create custom plugins directory: {exc}") from exc

        report(
            PluginInstallProgress(
                plugin.id,
                plugin.name,
                "installing",
                progress=50,
                message=f"Cloning {plugin.name}...",
            )
        )

        command = plugin.install_command()
        if not command:
            raise InvalidInputError(f"no install command available for plugin '{plugin.id}'")

        try:
            status, output = _run(["sh", "-c", command], target_dir)
        except OSError as exc:
            raise ExecutionFailedError(f"failed to install plugin '{plugin.id}': {exc}") from exc
        if status != 0:
            raise ExecutionFailedError(
                f"failed to install plugin '{plugin.id}': exit status {status}\nOutput: {output}"
            )

        report(
            PluginInstallProgress(
                plugin.id,
                plugin.name,
                "complete",
                progress=100,
                message=f"{plugin.name} installed successfully",
                is_completed=True,
            )
        )

    def is_plugin_installed(self, plugin_id: str) -> bool:
        """Whether the plugin exists as a built-in plugin file or a custom plugin."""
        built_in = self._built_in_plugins / plugin_id / f"{plugin_id}.plugin.zsh"
        if built_in.exists():
            return True
        return (self._custom_plugins / plugin_id).exists()

    def uninstall_plugin(self, plugin_id: str) -> None:
        """Delete a custom plugin; built-in plugins cannot be removed."""
        if (self._built_in_plugins / plugin_id).exists():
            raise InvalidInputError(f"cannot uninstall built-in plugin '{plugin_id}'")

        custom_path = self._custom_plugins / plugin_id
        if not custom_path.exists():
            raise NotFoundError(f"plugin '{plugin_id}' not found")

        try:
            if custom_path.is_dir() and not custom_path.is_symlink():
                shutil.rmtree(custom_path)
            else:
                custom_path.unlink()
        except OSError as exc:
            raise HomesteadError(f"failed to uninstall plugin '{plugin_id}': {exc}") from exc

    def list_installed_plugins(self) -> list[str]:
        """Built-in plugins that have a plugin file, then every custom plugin directory."""
        plugins: list[str] = []
        try:
            built_in = sorted(self._built_in_plugins.iterdir(), key=lambda p: p.name)
        except OSError:
            built_in = []
        plugins.extend(
            entry.name
            for entry in built_in
            if entry.is_dir() and (entry / f"{entry.name}.plugin.zsh").exists()
        )

        try:
            custom = sorted(self._custom_plugins.iterdir(), key=lambda p: p.name)
        except OSError:
            custom = []
        plugins.extend(entry.name for entry in custom if entry.is_dir())
        return plugins

    def update_plugin(self, plugin_id: str) -> None:
        """Fast-forward a custom plugin's git checkout."""
        custom_path = self._custom_plugins / plugin_id
        if not custom_path.exists():
            raise NotFoundError(f"plugin '{plugin_id}' not found")
        if not (custom_path / ".git").exists():
            raise InvalidInputError(
                f"plugin '{plugin_id}' is not a git repository, cannot update"
            )

        try:
            status, output = _run(["git", "pull", "--ff-only"], custom_path)
        except OSError as exc:
            raise ExecutionFailedError(f"failed to update plugin '{plugin_id}': {exc}") from exc
        if status != 0:
            raise ExecutionFailedError(
                f"failed to update plugin '{plugin_id}': exit status {status}\nOutput: {output}"
            )

    def validate_plugin(self, plugin: ZshPlugin) -> None:
        """Raise InvalidInputError unless the plugin can be installed."""
        plugin.validate()
        if plugin.is_external() and not plugin.repo_url and not plugin.install_cmd:
            raise InvalidInputError(
                f"external plugin '{plugin.id}' needs a repository URL or install command"
            )