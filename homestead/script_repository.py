"""In-memory store of the maintenance scripts offered to the user."""

from __future__ import annotations

import threading
from dataclasses import replace

from homestead.models import Category, NotFoundError, Script

_DEFAULT_SCRIPTS = (
    Script(
        id="cleanup-full",
        name="Limpeza Completa (SSD)",
        description="Orquestrador completo de limpeza do sistema",
        path="scripts/cleanup/limpar_ssd.sh",
        category=Category.CLEANUP,
        requires_sudo=True,
    ),
    Script(
        id="cleanup-general",
        name="Limpeza Geral (Caches)",
        description="Limpa caches de Docker, Poetry, npm, apt, etc.",
        path="scripts/cleanup/limpar_geral.sh",
        category=Category.CLEANUP,
        requires_sudo=True,
    ),
    Script(
        id="cleanup-large",
        name="Buscar Arquivos Grandes",
        description="Encontra e remove arquivos/pastas grandes (>100MB)",
        path="scripts/cleanup/limpar_grandes.sh",
        category=Category.CLEANUP,
        requires_sudo=True,
    ),
    Script(
        id="monitor-battery",
        name="Monitor de Bateria",
        description="Exibe informações detalhadas da bateria",
        path="scripts/monitoring/teste_bateria.sh",
        category=Category.MONITORING,
        requires_sudo=False,
    ),
    Script(
        id="monitor-memory",
        name="Uso de Memória",
        description="Mostra consumo de memória RAM",
        path="scripts/monitoring/memoria.sh",
        category=Category.MONITORING,
        requires_sudo=False,
    ),
)


class ScriptRepository:
    """Thread-safe in-memory script store, seeded with the default scripts.

    Scripts are copied on the way in and out, so callers cannot change
    stored entries by mutating what they hold.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._scripts: dict[str, Script] = {s.id: replace(s) for s in _DEFAULT_SCRIPTS}

    def find_all(self) -> list[Script]:
        with self._lock:
            return [replace(s) for s in self._scripts.values()]

    def find_by_id(self, script_id: str) -> Script:
        with self._lock:
            try:
                return replace(self._scripts[script_id])
            except KeyError:
                raise NotFoundError(f"script {script_id}: not found") from None

    def find_by_category(self, category: Category | str) -> list[Script]:
        with self._lock:
            return [replace(s) for s in self._scripts.values() if s.category == category]

    def save(self, script: Script) -> None:
        """Validate and store a copy of the script, replacing any with the same id."""
        script.validate()
        with self._lock:
            self._scripts[script.id] = replace(script)

    def delete(self, script_id: str) -> None:
        with self._lock:
            if script_id not in self._scripts:
                raise NotFoundError(f"delete script {script_id}: not found")
            del self._scripts[script_id]

    def exists(self, script_id: str) -> bool:
        with self._lock:
            return script_id in self._scripts