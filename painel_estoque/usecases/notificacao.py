"""
Canal de avisos ao usuário usado pelos casos de uso.

Os casos de uso recebem um ``notify(message, severity=...)``: na TUI é o
``App.notify`` do Textual; na CLI, uma função que imprime no console.
Severidades: ``information``, ``warning`` e ``error``.
"""

from __future__ import annotations

from typing import Callable

from painel_estoque.infra.logger import log_system_event, print_system

Notificador = Callable[..., None]


def notificacao_em_log(message: str, severity: str = "information", **_: object) -> None:
    """Notificador padrão quando nenhuma interface está ligada: registra em log
    e, com PAINEL_OUTPUT ligado, ecoa no terminal."""
    level = {"warning": "warning", "error": "error"}.get(severity, "info")
    log_system_event("notificacao", {"message": message, "severity": severity}, level=level)
    print_system(f"[{severity}] {message}")
