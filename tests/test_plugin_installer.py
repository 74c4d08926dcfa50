from pathlib import Path

import pytest

from homestead.models import (
    ExecutionFailedError,
    InvalidInputError,
    NotFoundError,
    PluginSource,
    ZshPlugin,
)
from homestead.plugin_installer import ZshPluginInstaller


def _make_built_in(root: Path, name: str) -> Path:
    plugin_dir = root / "plugins" / name
    plugin_dir.mkdir(parents=True, exist_ok=True)
    (plugin_dir / f"{name}.plugin.zsh").write_text(f"# {name} plugin")
    return plugin_dir


@pytest.fixture
def installer(tmp_path):
    return ZshPluginInstaller(tmp_path, tmp_path / "custom")


def test_is_plugin_installed(tmp_path, installer):
    _make_built_in(tmp_path, "git")
    assert installer.is_plugin_installed("git") is True
    assert installer.is_plugin_installed("non-existent") is False


def test_is_plugin_installed_custom(tmp_path, installer):
    (tmp_path / "custom" / "plugins" / "mine").mkdir(parents=True)
    assert installer.is_plugin_installed("mine") is True


def test_install_built_in_plugin(tmp_path, installer):
    _make_built_in(tmp_path, "git")
    plugin = ZshPlugin(id="git", name="Git", source=PluginSource.BUILT_IN)
    installer.install_plugin(plugin, None)
    assert installer.is_plugin_installed("git") is True


def test_install_missing_built_in_plugin_raises(installer):
    plugin = ZshPlugin(id="git", name="Git", source=PluginSource.BUILT_IN)
    with pytest.raises(NotFoundError):
        installer.install_plugin(plugin, None)


def test_install_external_plugin_validation(installer):
    plugin = ZshPlugin(
        id="zsh-autosuggestions",
        name="Zsh Autosuggestions",
        source=PluginSource.EXTERNAL,
        repo_url="https://example.com/zsh-autosuggestions",
    )
    installer.validate_plugin(plugin)
    assert plugin.install_command().startswith("git clone")


def test_install_external_plugin_runs_command(tmp_path, installer):
    plugin = ZshPlugin(
        id="local-plugin",
        name="Local Plugin",
        source=PluginSource.EXTERNAL,
        install_cmd="mkdir local-plugin",
    )
    statuses = []
    installer.install_plugin(plugin, lambda p: statuses.append((p.status, p.progress)))
    assert (tmp_path / "custom" / "plugins" / "local-plugin").is_dir()
    assert statuses == [("starting", 0), ("installing", 50), ("complete", 100)]


def test_install_external_already_installed(tmp_path, installer):
    (tmp_path / "custom" / "plugins" / "done").mkdir(parents=True)
    plugin = ZshPlugin(
        id="done", name="Done", source=PluginSource.EXTERNAL, install_cmd="exit 1"
    )
    reports = []
    installer.install_plugin(plugin, reports.append)
    assert [r.status for r in reports] == ["starting", "complete"]
    assert reports[-1].message == "Done is already installed"


def test_install_failing_command_raises(installer):
    plugin = ZshPlugin(
        id="broken",
        name="Broken",
        source=PluginSource.CUSTOM,
        install_cmd="echo boom; exit 3",
    )
    with pytest.raises(ExecutionFailedError, match="boom"):
        installer.install_plugin(plugin, None)


def test_install_invalid_plugin_raises(installer):
    with pytest.raises(InvalidInputError, match="plugin validation failed"):
        installer.install_plugin(ZshPlugin(id="", name="X"), None)


@pytest.mark.parametrize(
    "plugin, want_error",
    [
        (ZshPlugin(id="git", name="Git", source=PluginSource.BUILT_IN), False),
        (
            ZshPlugin(
                id="zsh-syntax-highlighting",
                name="Zsh Syntax Highlighting",
                source=PluginSource.EXTERNAL,
                repo_url="https://example.com/zsh-syntax-highlighting",
            ),
            False,
        ),
        (ZshPlugin(id="", name="Invalid", source=PluginSource.BUILT_IN), True),
        (ZshPlugin(id="invalid", name="", source=PluginSource.BUILT_IN), True),
        (ZshPlugin(id="ext", name="Ext", source=PluginSource.EXTERNAL), True),
    ],
)
def test_validate_plugin(installer, plugin, want_error):
    if want_error:
        with pytest.raises(InvalidInputError):
            installer.validate_plugin(plugin)
    else:
        assert installer.validate_plugin(plugin) is None


def test_list_installed_plugins(tmp_path, installer):
    for name in ("git", "docker", "rails"):
        _make_built_in(tmp_path, name)
    (tmp_path / "plugins" / "no-file").mkdir()
    (tmp_path / "custom" / "plugins" / "zsh-autosuggestions").mkdir(parents=True)

    assert installer.list_installed_plugins() == [
        "docker",
        "git",
        "rails",
        "zsh-autosuggestions",
    ]


def test_list_installed_plugins_empty(installer):
    assert installer.list_installed_plugins() == []


def test_uninstall_plugin(tmp_path, installer):
    plugin_dir = tmp_path / "custom" / "plugins" / "test-plugin"
    plugin_dir.mkdir(parents=True)
    (plugin_dir / "test-plugin.plugin.zsh").write_text("# Test plugin")
    assert installer.is_plugin_installed("test-plugin") is True

    installer.uninstall_plugin("test-plugin")
    assert not plugin_dir.exists()
    assert installer.is_plugin_installed("test-plugin") is False
    assert installer.list_installed_plugins() == []


def test_uninstall_built_in_plugin_raises(tmp_path, installer):
    (tmp_path / "plugins" / "git").mkdir(parents=True)
    with pytest.raises(InvalidInputError):
        installer.uninstall_plugin("git")
    assert (tmp_path / "plugins" / "git").is_dir()


def test_uninstall_missing_plugin_raises(installer):
    with pytest.raises(NotFoundError):
        installer.uninstall_plugin("ghost")


def test_update_plugin_not_found(installer):
    with pytest.raises(NotFoundError):
        installer.update_plugin("ghost")


def test_update_plugin_not_git_repository(tmp_path, installer):
    (tmp_path / "custom" / "plugins" / "plain").mkdir(parents=True)
    with pytest.raises(InvalidInputError, match="not a git repository"):
        installer.update_plugin("plain")


def test_update_plugin_with_fake_repository_fails(tmp_path, installer):
    plugin_dir = tmp_path / "custom" / "plugins" / "zsh-autosuggestions"
    (plugin_dir / ".git").mkdir(parents=True)
    with pytest.raises(ExecutionFailedError):
        installer.update_plugin("zsh-autosuggestions")


def test_progress_callback(tmp_path, installer):
    _make_built_in(tmp_path, "git")
    plugin = ZshPlugin(id="git", name="Git", source=PluginSource.BUILT_IN)
    progress_calls = []
    installer.install_plugin(plugin, lambda p: progress_calls.append(p.status))
    assert progress_calls == ["starting", "complete"]