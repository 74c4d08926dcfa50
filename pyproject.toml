[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "homestead"
version = "0.1.0"
description = "Workstation setup library: package catalogue, maintenance scripts, Oh My Zsh plugins and Zsh configuration files"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["zsh", "oh-my-zsh", "dotfiles", "setup", "installer", "shell"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Installation/Setup",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["homestead"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
