import pytest

from homestead.config_manager import (
    HOMESTEAD_END_MARKER,
    HOMESTEAD_START_MARKER,
    FileConfigManager,
    filter_installed_plugins,
    merge_aliases_file,
    parse_alias_line,
    strip_homestead_block,
)
from homestead.models import (
    ConfigScope,
    ConfigSelections,
    InvalidInputError,
    NotFoundError,
    ShellConfig,
)


def _install_plugins(home, names, custom=False):
    base = home / ".oh-my-zsh"
    base = base / "custom" / "plugins" if custom else base / "plugins"
    for name in names:
        (base / name).mkdir(parents=True, exist_ok=True)


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def manager(tmp_path, home):
    return FileConfigManager(tmp_path / "configs", home_dir=home)


def test_save_config_creates_file(manager):
    config = ShellConfig(
        id="test-config",
        name="Test Configuration",
        scope=ConfigScope.GENERAL,
        plugins=["git", "docker"],
        aliases={"ll": "ls -la"},
    )
    manager.save_config(config)
    assert (manager.config_dir / "test-config.yaml").is_file()


def test_save_invalid_config_raises(manager):
    with pytest.raises(InvalidInputError):
        manager.save_config(ShellConfig(id="", name="No id"))
    assert manager.list_configs() == []


def test_load_config_round_trip(manager):
    original = ShellConfig(
        id="test-load",
        name="Load Test",
        scope=ConfigScope.PROJECT,
        plugins=["git", "rails"],
        env_vars={"IVT_DIR": "$HOME/ivt"},
    )
    manager.save_config(original)
    loaded = manager.load_config("test-load")
    assert loaded.id == original.id
    assert loaded.name == original.name
    assert loaded.scope == original.scope
    assert loaded.plugins == ["git", "rails"]
    assert loaded.env_vars == {"IVT_DIR": "$HOME/ivt"}


def test_load_config_not_found(manager):
    with pytest.raises(NotFoundError):
        manager.load_config("non-existent")


def test_delete_config(manager):
    manager.save_config(ShellConfig(id="delete-me", name="Delete Test"))
    manager.delete_config("delete-me")
    assert not (manager.config_dir / "delete-me.yaml").exists()


def test_delete_missing_config_raises(manager):
    with pytest.raises(NotFoundError):
        manager.delete_config("ghost")


def test_list_configs(manager):
    ids = ["config1", "config2", "config3"]
    for config_id in ids:
        manager.save_config(ShellConfig(id=config_id, name="Config " + config_id))
    assert sorted(manager.list_configs()) == ids


def test_list_configs_ignores_other_entries(manager):
    manager.save_config(ShellConfig(id="real", name="Real"))
    (manager.config_dir / "notes.txt").write_text("x")
    (manager.config_dir / "dir.yaml").mkdir()
    assert manager.list_configs() == ["real"]


def test_list_configs_missing_directory(tmp_path):
    assert FileConfigManager(tmp_path / "nowhere").list_configs() == []


def test_generate_zshrc(manager, home):
    _install_plugins(home, ["git", "docker", "rails"])
    selections = ConfigSelections(
        core_components=["zsh", "oh-my-zsh", "powerlevel10k"],
        plugins=["git", "docker", "rails"],
        tools=["nvm", "bun"],
    )
    zshrc = manager.generate_zshrc(selections)
    assert "plugins=(git docker rails)" in zshrc
    assert zshrc.startswith("# Powerlevel10k instant prompt - must stay at top\n")
    assert 'ZSH_THEME="powerlevel10k/powerlevel10k"' in zshrc
    assert "source $ZSH/oh-my-zsh.sh" in zshrc
    assert 'export NVM_DIR="$HOME/.nvm"' in zshrc
    assert 'export BUN_INSTALL="$HOME/.bun"' in zshrc
    assert zshrc.endswith("[[ ! -f ~/.p10k.zsh ]] || source ~/.p10k.zsh\n")


def test_generate_zshrc_skips_missing_plugins(manager, home):
    _install_plugins(home, ["git"])
    _install_plugins(home, ["zsh-autosuggestions"], custom=True)
    selections = ConfigSelections(plugins=["git", "missing", "zsh-autosuggestions"])
    zshrc = manager.generate_zshrc(selections)
    assert "plugins=(git zsh-autosuggestions)" in zshrc
    assert "missing" not in zshrc


def test_generate_zshrc_without_plugins_or_p10k(manager):
    zshrc = manager.generate_zshrc(
        ConfigSelections(
            plugins=["git"],
            custom_aliases={"gs": "git status"},
            custom_env_vars={"EDITOR": "vim"},
        )
    )
    assert zshrc.startswith("# Generated by Homestead\n")
    assert "plugins=(" not in zshrc
    assert "alias gs='git status'\n" in zshrc
    assert 'export EDITOR="vim"\n' in zshrc
    assert "source ~/.zsh/general/aliases.zsh" in zshrc


def test_generate_aliases_file(manager):
    config = ShellConfig(
        id="test",
        name="Test",
        aliases={"ll": "ls -la", "la": "ls -A", "grep": "grep --color=auto"},
    )
    content = manager.generate_aliases_file(config)
    assert "alias ll='ls -la'\n" in content
    assert "alias grep='grep --color=auto'\n" in content
    assert "# Config: Test (test)\n" in content


def test_generate_aliases_file_empty(manager):
    content = manager.generate_aliases_file(ShellConfig(id="e", name="Empty"))
    assert content.endswith("# No aliases defined\n")


def test_generate_functions_file(manager):
    body = 'local database="${1:-funds}"\nmysql -u root -p "$database"'
    config = ShellConfig(id="test", name="Test", functions={"db-connect": body})
    content = manager.generate_functions_file(config)
    assert f"db-connect() {{\n{body}\n}}\n\n" in content


def test_generate_functions_file_empty(manager):
    content = manager.generate_functions_file(ShellConfig(id="e", name="Empty"))
    assert content.endswith("# No functions defined\n")


def test_generate_aliases_file_rejects_none(manager):
    with pytest.raises(InvalidInputError):
        manager.generate_aliases_file(None)


def test_generate_functions_file_rejects_none(manager):
    with pytest.raises(InvalidInputError):
        manager.generate_functions_file(None)


def test_backup_existing_config(manager, home):
    (home / ".zshrc").write_text("# Existing zshrc")
    backup_dir = manager.backup_existing_config()
    assert backup_dir.parent == home / ".zsh" / "backups"
    assert (backup_dir / ".zshrc").read_text() == "# Existing zshrc"
    assert not (backup_dir / "aliases.zsh").exists()


def test_apply_config_does_not_overwrite_user_content(tmp_path, home, monkeypatch):
    monkeypatch.setenv("HOME", str(home))
    manager = FileConfigManager(tmp_path / "configs")
    zshrc = home / ".zshrc"
    zshrc.write_text("# User config\nsource ~/.p10k.zsh\n")
    manager.apply_config(
        ConfigSelections(core_components=["zsh", "oh-my-zsh"], plugins=["git"], tools=["nvm"])
    )
    content = zshrc.read_text()
    assert content.startswith("# User config\nsource ~/.p10k.zsh\n\n")
    assert "Generated by Homestead" in content
    assert content.endswith(HOMESTEAD_END_MARKER + "\n")
    assert strip_homestead_block(content) == "# User config\nsource ~/.p10k.zsh\n\n\n"


def test_apply_config_twice_keeps_one_block(manager, home):
    (home / ".zshrc").write_text("export FOO=1\n")
    selections = ConfigSelections(core_components=["oh-my-zsh"])
    manager.apply_config(selections)
    manager.apply_config(selections)
    content = (home / ".zshrc").read_text()
    assert content.count(HOMESTEAD_START_MARKER) == 1
    assert content.count("export FOO=1") == 1
    assert strip_homestead_block(content) == "export FOO=1\n\n\n"


def test_apply_config_writes_aliases_to_file(manager, home):
    manager.apply_config(
        ConfigSelections(
            core_components=["zsh"],
            custom_aliases={"ll": "ls -la", "gs": "git status"},
        )
    )
    content = (home / ".zsh" / "general" / "aliases.zsh").read_text()
    assert "alias ll='ls -la'" in content
    assert "alias gs='git status'" in content
    names = sorted(
        name for name in map(parse_alias_line, content.splitlines()) if name is not None
    )
    assert names == ["gs", "ll"]
    functions = (home / ".zsh" / "general" / "functions.zsh").read_text()
    assert functions == "# General functions - Add your functions here\n"


def test_apply_config_writes_placeholders(manager, home):
    manager.apply_config(ConfigSelections())
    aliases = (home / ".zsh" / "general" / "aliases.zsh").read_text()
    assert aliases == "# General aliases - Add your aliases here\n"
    assert [parse_alias_line(line) for line in aliases.splitlines()] == [None]
    zshrc = (home / ".zshrc").read_text()
    assert strip_homestead_block(zshrc) == "\n"


def test_merge_aliases_file_replaces_and_preserves(tmp_path):
    path = tmp_path / "aliases.zsh"
    path.write_text("# my aliases\nalias ll='ls'\nexport X=1\n")
    merge_aliases_file(path, {"ll": "ls -la", "gs": "git status"})
    assert path.read_text() == (
        "# my aliases\nalias ll='ls -la'\nexport X=1\nalias gs='git status'\n"
    )


def test_merge_aliases_file_empty_creates_header(tmp_path):
    path = tmp_path / "sub" / "aliases.zsh"
    merge_aliases_file(path, {})
    assert path.read_text() == "# General aliases - Generated by Homestead\n"


def test_strip_homestead_block():
    content = f"before\n{HOMESTEAD_START_MARKER}\nmanaged\n{HOMESTEAD_END_MARKER}\nafter\n"
    assert strip_homestead_block(content) == "before\n\nafter\n"


@pytest.mark.parametrize(
    "content",
    ["plain content\n", f"{HOMESTEAD_START_MARKER}\nno end\n", f"{HOMESTEAD_END_MARKER}\n"],
)
def test_strip_homestead_block_incomplete(content):
    assert strip_homestead_block(content) == content


@pytest.mark.parametrize(
    "line, expected",
    [
        ("alias ll='ls -la'", "ll"),
        ("   alias  gs = 'git status'", "gs"),
        ("export X=1", None),
        ("alias noequals", None),
        ("alias ='x'", None),
        ("# alias ll='ls'", None),
    ],
)
def test_parse_alias_line(line, expected):
    assert parse_alias_line(line) == expected


def test_filter_installed_plugins(home):
    _install_plugins(home, ["git"])
    _install_plugins(home, ["zsh-vi-mode"], custom=True)
    (home / ".oh-my-zsh" / "plugins" / "afile").write_text("x")
    result = filter_installed_plugins(home, ["zsh-vi-mode", "afile", "git", "none"])
    assert result == ["zsh-vi-mode", "git"]