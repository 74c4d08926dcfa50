# homestead

A library for setting up a Linux workstation. It includes a catalogue of
installable packages and a set of maintenance scripts. It can install and
manage Oh My Zsh plugins. It can also write a Zsh configuration that leaves
your own `.zshrc` content in place.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `homestead.models`

This module holds the data types and errors used by the rest of the package.

Data types:

- `Script`
- `Package`
- `ShellConfig`, with `to_dict` and `from_dict` for YAML storage
- `ZshPlugin`
- `ConfigSelections`
- `InstallProgress`
- `PluginInstallProgress`

Enums:

- `Category`: `cleanup`, `monitoring`
- `PackageCategory`: `ide`, `terminal`, `zsh-core`, `shell`, `tool`, `ai`, `app`, `games`
- `ConfigScope`: `general`, `project`
- `PluginSource`: `built-in`, `external`, `custom`

Exceptions: every error the package raises is a `HomesteadError`.

- `NotFoundError` is also a `LookupError`.
- `InvalidInputError` is also a `ValueError`.
- `ExecutionFailedError` is raised when an external command cannot be run or fails.

`Script`, `Package`, `ShellConfig` and `ZshPlugin` each have a `validate()` method. It raises `InvalidInputError` when:

- the id or name is empty, or
- the enum value is not valid, or
- for a `Script`, the path is empty.

`ZshPlugin.install_command()` works as follows:

- If the plugin has an explicit `install_cmd`, it returns that.
- Otherwise, if a `repo_url` is set, it returns `git clone <repo_url> <id>`.
- Otherwise it returns `""`.

### `homestead.script_repository`

`ScriptRepository` is a thread-safe in-memory store. It starts with five scripts:

- three cleanup scripts, which need sudo
- two monitoring scripts

It has these methods:

- `find_all`
- `find_by_id`, which raises `NotFoundError` if the id is unknown
- `find_by_category`
- `save`, which validates the script first
- `delete`, which raises `NotFoundError` if the id is unknown
- `exists`

Scripts are copied when they go in and when they come out. Changing a returned object therefore does not change the store.

### `homestead.package_repository`

`PackageRepository` is the same kind of store for `Package` entries. It is preloaded with these groups:

- IDEs
- terminal emulators
- Zsh core components
- alternative shells
- built-in and external Zsh plugins
- AI tools
- development tools
- desktop applications
- games

None of the preloaded packages has a `download_url`. Entries whose installation would fetch a remote installer have a `check_cmd` but no `install_cmd`. To make them installable, register a complete `Package` with `save()`.

### `homestead.config_manager`

`FileConfigManager(config_dir, home_dir=None)` stores each `ShellConfig` as `<config_dir>/<id>.yaml`. It has these storage methods:

- `save_config`
- `load_config`
- `delete_config`
- `list_configs`, which returns sorted names

It also renders and writes Zsh files:

- **`generate_zshrc(selections)`** renders the managed `.zshrc` content. The content has these parts:
  - Powerlevel10k instant prompt and theme
  - Oh My Zsh setup
  - the selected plugins that exist under `~/.oh-my-zsh/plugins` or `~/.oh-my-zsh/custom/plugins`
  - NVM and Bun blocks
  - custom aliases and environment variables
  - sourcing of `~/.zsh/general/aliases.zsh` and `functions.zsh`
- **`generate_aliases_file(config)`** renders `aliases.zsh` content for a `ShellConfig`.
- **`generate_functions_file(config)`** renders `functions.zsh` content for a `ShellConfig`.
- **`backup_existing_config()`** copies these files into `~/.zsh/backups/<YYYYmmdd-HHMMSS>/`, when they exist, and returns that directory:
  - `~/.zshrc`
  - `~/.zsh/general/aliases.zsh`
  - `~/.zsh/general/functions.zsh`
- **`apply_config(selections)`** does the following:
  1. Makes a backup. A failed backup is ignored.
  2. Rewrites the block between `# --- Homestead managed ---` and `# --- End Homestead ---` in `~/.zshrc` and keeps everything else.
  3. Merges the selected custom aliases into `~/.zsh/general/aliases.zsh`.
  4. Creates placeholder `aliases.zsh` and `functions.zsh` files where they are missing.

The home directory is `home_dir` when given, otherwise the user's home.

The helper functions are available on their own:

- `filter_installed_plugins`
- `strip_homestead_block`
- `merge_aliases_file`
- `parse_alias_line`

### `homestead.executor`

`BashExecutor(root_dir=None)` runs a `Script` whose path is relative to `root_dir`. By default `root_dir` is the working directory.

- Scripts run with `bash`, or with `sudo -E bash` when `requires_sudo` is set.
- The executor adds `REAL_USER` and `REAL_HOME` to the script's environment.
- The script uses the terminal for its input and output.
- `can_execute` checks that the script file exists, that `bash` is on `PATH`, and that `sudo` is on `PATH` when the script needs it.
- `validate` raises unless the script is valid and can be executed.
- `execute` raises `ExecutionFailedError` when the script exits with a non-zero status.

### `homestead.installer`

`PackageInstaller(temp_dir=None)` installs a `Package` and reports each step to a callback as an `InstallProgress`. The steps are:

1. If the package's `check_cmd` already succeeds, it reports completion and stops.
2. Otherwise it downloads `download_url` into `temp_dir`, if one is set. The download uses the standard-library HTTP client and reports progress while it runs.
3. It runs `install_cmd` with `bash -c`. Before running, these placeholders are replaced with the download path: `install.sh`, `cursor.AppImage`, `antigravity.deb` and `{{download_path}}`.

Other methods:

- `cancel()` aborts a download in progress and refuses later downloads.
- `is_installed` runs the check command silently.
- `can_install` requires `bash` only when the package has an install command.
- `uninstall` is not supported and always raises `HomesteadError`.

### `homestead.plugin_installer`

`ZshPluginInstaller(zsh_dir, custom_dir)` manages the plugins of an Oh My Zsh installation.

- **`install_plugin(plugin, progress_callback=None)`**
  - Built-in plugins: checks that the plugin exists.
  - External and custom plugins: runs the plugin's install command with `sh -c` inside `<custom_dir>/plugins`.
- **`is_plugin_installed`** checks whether the plugin is present.
- **`list_installed_plugins`** returns:
  - built-in plugins that have a `<name>.plugin.zsh` file, sorted;
  - then custom plugin directories, sorted.
- **`uninstall_plugin`** removes custom plugins only. Built-in ones are refused with `InvalidInputError`.
- **`update_plugin`** runs `git pull --ff-only` in a custom plugin's git checkout.
- **`validate_plugin`** checks the plugin before installation.

## Example

```python
from pathlib import Path

from homestead.config_manager import FileConfigManager
from homestead.models import ConfigSelections, PackageCategory
from homestead.package_repository import PackageRepository

repo = PackageRepository()
for package in repo.find_by_category(PackageCategory.IDE):
    print(package.id, package.name)

manager = FileConfigManager(Path.home() / ".config" / "homestead")
selections = ConfigSelections(
    core_components=["zsh", "oh-my-zsh"],
    plugins=["git"],
    tools=["nvm"],
    custom_aliases={"ll": "ls -la"},
)
print(manager.generate_zshrc(selections))
manager.apply_config(selections)
```

## What this package does not do

The package is a library only:

- It has no command-line program and no interactive menu.
- It does not ship the maintenance scripts themselves. The paths in `ScriptRepository` must exist under the executor's `root_dir`.
- It does not provide templates for the rendered Zsh files. Their content is built in code.
- It cannot uninstall packages.