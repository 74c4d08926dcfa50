"""Workstation setup: package catalogue, maintenance scripts, Zsh plugins and Zsh configuration files."""

__version__ = "0.1.0"

__all__ = [
    "config_manager",
    "executor",
    "installer",
    "models",
    "package_repository",
    "plugin_installer",
    "script_repository",
]