"""Runs maintenance scripts with bash, optionally through sudo."""

from __future__ import annotations

import getpass
import os
import shutil
import subprocess
from pathlib import Path

from homestead.models import (
    ExecutionFailedError,
    HomesteadError,
    InvalidInputError,
    NotFoundError,
    Script,
)


def _current_user() -> tuple[str, str]:
    """Return the name and home directory of the user running the process."""
    try:
        import pwd

        entry = pwd.getpwuid(os.getuid())
        return entry.pw_name, entry.pw_dir
    except (ImportError, KeyError, AttributeError):
        pass
    try:
        return getpass.getuser(), os.path.expanduser("~")
    except (OSError, KeyError) as exc:
        raise HomesteadError(f"get current user: {exc}") from exc


class BashExecutor:
    """Executes scripts whose paths are relative to ``root_dir``.

    ``root_dir`` defaults to the working directory at construction time.
    """

    def __init__(self, root_dir: str | os.PathLike[str] | None = None) -> None:
        if root_dir is None:
            try:
                root_dir = os.getcwd()
            except OSError:
                root_dir = ""
        self.root_dir = Path(root_dir)

    def _script_path(self, script: Script) -> Path:
        return self.root_dir / script.path

    def execute(self, script: Script | None) -> None:
        """Run the script attached to the terminal; raise if it cannot run or fails."""
        try:
            self.validate(script)
        except HomesteadError as exc:
            script_id = script.id if script is not None else ""
            raise type(exc)(f"execute script {script_id}: {exc}") from exc
        assert script is not None

        script_path = self._script_path(script)
        if not script_path.exists():
            raise NotFoundError(
                f"execute script {script.id}: script file not found at {script_path}"
            )

        try:
            username, home = _current_user()
        except HomesteadError as exc:
            raise HomesteadError(f"execute script {script.id}: {exc}") from exc

        command = ["bash", str(script_path)]
        if script.requires_sudo:
            command = ["sudo", "-E", *command]

        env = {**os.environ, "REAL_USER": username, "REAL_HOME": home}

        try:
            completed = subprocess.run(command, env=env, check=False)
        except OSError as exc:
            raise ExecutionFailedError(f"execute script {script.id}: {exc}") from exc
        if completed.returncode != 0:
            raise ExecutionFailedError(
                f"execute script {script.id}: exited with status {completed.returncode}"
            )

    def can_execute(self, script: Script | None) -> bool:
        """Whether the script file exists and bash (and sudo, if needed) is available."""
        if script is None:
            return False
        if not self._script_path(script).exists():
            return False
        if shutil.which("bash") is None:
            return False
        if script.requires_sudo and shutil.which("sudo") is None:
            return False
        return True

    def validate(self, script: Script | None) -> None:
        """Raise unless the script is well formed and can be executed."""
        if script is None:
            raise InvalidInputError("validate script: no script given")
        try:
            script.validate()
        except InvalidInputError as exc:
            raise InvalidInputError(f"validate script: {exc}") from exc
        if not self.can_execute(script):
            raise ExecutionFailedError(f"validate script: cannot execute script {script.id}")