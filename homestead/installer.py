"""Downloads and installs packages, reporting progress as it goes."""

from __future__ import annotations

import os
import posixpath
import shutil
import subprocess
import tempfile
import threading
import time
import urllib.error
import urllib.request
from pathlib import Path
from typing import Callable

from homestead.models import (
    ExecutionFailedError,
    HomesteadError,
    InstallProgress,
    Package,
)

ProgressCallback = Callable[[InstallProgress], None]

_CHUNK_SIZE = 32 * 1024
_UPDATE_INTERVAL = 0.1
_PLACEHOLDERS = ("install.sh", "cursor.AppImage", "antigravity.deb", "{{download_path}}")


def _notify(callback: ProgressCallback | None, progress: InstallProgress) -> None:
    """Hand ``progress`` to ``callback`` when one was given."""
    if callback is not None:
        callback(progress)


class PackageInstaller:
    """Installs packages by downloading them into ``temp_dir`` and running their command."""

    def __init__(self, temp_dir: str | os.PathLike[str] | None = None) -> None:
        self.temp_dir = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Abort any download in progress and refuse further downloads."""
        self._cancelled.set()

    def install(self, package: Package, progress_callback: ProgressCallback | None) -> None:
        """Install the package unless it is already present."""

        def report(progress: InstallProgress) -> None:
            _notify(progress_callback, progress)

        if self.is_installed(package):
            report(InstallProgress(package, "complete", 100, "Já instalado", is_completed=True))
            return

        if package.download_url:
            report(
                InstallProgress(package, "downloading", 0, "Iniciando download...", can_abort=True)
            )
            try:
                download_path = self._download(package, report)
            except HomesteadError as exc:
                report(
                    InstallProgress(
                        package, "failed", 0, "Erro ao baixar", error=exc, is_completed=True
                    )
                )
                raise HomesteadError(f"download failed: {exc}") from exc
        else:
            download_path = self.temp_dir / package.id
            try:
                download_path.mkdir(mode=0o750, parents=True, exist_ok=True)
            except OSError as exc:
                report(
                    InstallProgress(
                        package,
                        "failed",
                        0,
                        "Erro ao preparar instalação",
                        error=exc,
                        is_completed=True,
                    )
                )
                raise HomesteadError(f"prepare install dir: {exc}") from exc
            report(InstallProgress(package, "downloading", 60, "Preparando instalação..."))

        report(InstallProgress(package, "installing", 70, "Instalando..."))

        try:
            self._run_install(package, download_path)
        except ExecutionFailedError as exc:
            report(
                InstallProgress(
                    package, "failed", 70, "Erro ao instalar", error=exc, is_completed=True
                )
            )
            raise ExecutionFailedError(f"installation failed: {exc}") from exc

        report(
            InstallProgress(
                package,
                "complete",
                100,
                "Instalação concluída com sucesso!",
                is_completed=True,
            )
        )

    def _download(self, package: Package, report: ProgressCallback) -> Path:
        if self._cancelled.is_set():
            raise HomesteadError("download cancelled")

        request = urllib.request.Request(package.download_url, method="GET")
        try:
            response = urllib.request.urlopen(request)
        except urllib.error.HTTPError as exc:
            raise HomesteadError(f"download failed: status {exc.code}") from exc
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise HomesteadError(str(exc)) from exc

        with response:
            if response.status != 200:
                raise HomesteadError(f"download failed: status {response.status}")

            filename = posixpath.basename(package.download_url.rstrip("/"))
            if not filename:
                filename = f"{package.id}.download"
            target = self.temp_dir / filename

            length = response.headers.get("Content-Length")
            total = int(length) if length and length.isdigit() else -1
            downloaded = 0
            last_update = time.monotonic()

            try:
                with target.open("wb") as out:
                    while True:
                        if self._cancelled.is_set():
                            raise HomesteadError("download cancelled")
                        chunk = response.read(_CHUNK_SIZE)
                        if not chunk:
                            break
                        out.write(chunk)
                        downloaded += len(chunk)
                        if time.monotonic() - last_update > _UPDATE_INTERVAL:
                            progress = int(downloaded / total * 60) if total > 0 else 0
                            report(
                                InstallProgress(
                                    package,
                                    "downloading",
                                    progress,
                                    f"Baixando... {downloaded}/{total} bytes",
                                    can_abort=True,
                                )
                            )
                            last_update = time.monotonic()
            except OSError as exc:
                raise HomesteadError(str(exc)) from exc

        report(InstallProgress(package, "downloading", 60, "Download concluído"))
        return target

    def _run_install(self, package: Package, download_path: Path) -> None:
        if not package.install_cmd:
            return
        command = package.install_cmd
        for placeholder in _PLACEHOLDERS:
            command = command.replace(placeholder, str(download_path))
        try:
            completed = subprocess.run(
                ["bash", "-c", command], cwd=download_path.parent, check=False
            )
        except OSError as exc:
            raise ExecutionFailedError(str(exc)) from exc
        if completed.returncode != 0:
            raise ExecutionFailedError(f"command exited with status {completed.returncode}")

    def is_installed(self, package: Package) -> bool:
        """Whether the package's check command succeeds; False if it has none."""
        if not package.check_cmd:
            return False
        try:
            completed = subprocess.run(
                ["bash", "-c", package.check_cmd],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError:
            return False
        return completed.returncode == 0

    def uninstall(self, package: Package) -> None:
        """Removing packages is not supported; always raises HomesteadError."""
        raise HomesteadError(f"uninstall is not supported for {package.id}")

    def can_install(self, package: Package) -> bool:
        """Whether this system can install the package.

        Downloads use the built-in HTTP client, so only an install command
        matters: it needs bash to be on the PATH.
        """
        if not package.install_cmd:
            return True
        return shutil.which("bash") is not None