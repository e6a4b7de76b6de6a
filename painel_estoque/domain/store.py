# painel_estoque/domain/store.py
"""
Form Store: um rascunho por tipo de entidade, compartilhado pelas telas.

As telas de cadastro e os modais de edição leem e escrevem rascunhos
daqui. Cada tipo tem seu próprio rascunho; mexer em um nunca altera
outro. Tipos ou campos desconhecidos são ignorados (com log) para nunca
derrubar quem chamou.
"""

from __future__ import annotations

from dataclasses import fields, replace
from typing import Any, Callable, Dict, List, Optional

from painel_estoque.domain.models import (
    DRAFT_TYPES,
    EntityKind,
    draft_from_record,
    empty_draft,
)
from painel_estoque.infra.logger import log_form_event

Subscriber = Callable[[EntityKind, Any], None]


class FormStore:
    """Rascunhos em memória durante a sessão (sem persistência)."""

    def __init__(self) -> None:
        self._drafts: Dict[EntityKind, Any] = {k: empty_draft(k) for k in DRAFT_TYPES}
        self._subscribers: List[Subscriber] = []

    # -----------------------
    # leitura
    # -----------------------

    def get_draft(self, kind: Any) -> Any:
        """Rascunho atual de ``kind``; modelo vazio se nunca tocado.

        Para tipo desconhecido retorna ``None`` e registra o ocorrido.
        """
        k = self._resolve(kind, "get_draft")
        if k is None:
            return None
        return self._drafts[k]

    # -----------------------
    # escrita
    # -----------------------

    def set_field(self, kind: Any, field: str, value: Any) -> None:
        """Altera um único campo do rascunho de ``kind``."""
        k = self._resolve(kind, "set_field")
        if k is None:
            return
        if field not in {f.name for f in fields(DRAFT_TYPES[k])}:
            log_form_event(k.value, "set_field", level="warning", field=field, error="campo desconhecido")
            return
        self._drafts[k] = replace(self._drafts[k], **{field: value})
        self._notify(k)

    def set_draft(self, kind: Any, record: Any) -> None:
        """Substitui o rascunho inteiro (usado ao carregar uma linha no editor)."""
        k = self._resolve(kind, "set_draft")
        if k is None:
            return
        if isinstance(record, DRAFT_TYPES[k]):
            self._drafts[k] = replace(record)
        else:
            self._drafts[k] = draft_from_record(k, dict(record or {}))
        log_form_event(k.value, "set_draft", id=getattr(self._drafts[k], "id", None))
        self._notify(k)

    def reset(self, kind: Any) -> None:
        """Restaura o modelo vazio de um único tipo."""
        k = self._resolve(kind, "reset")
        if k is None:
            return
        self._drafts[k] = empty_draft(k)
        self._notify(k)

    def reset_all(self) -> None:
        """Restaura todos os rascunhos (cancelar e sucesso no envio usam o mesmo caminho)."""
        for k in DRAFT_TYPES:
            self._drafts[k] = empty_draft(k)
        log_form_event("*", "reset_all")
        for k in DRAFT_TYPES:
            self._notify(k)

    # -----------------------
    # assinaturas
    # -----------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Registra ``callback(kind, draft)``; retorna a função que cancela a assinatura."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    # -----------------------
    # util
    # -----------------------

    def _resolve(self, kind: Any, action: str) -> Optional[EntityKind]:
        k = EntityKind.parse(kind)
        if k is None:
            log_form_event(str(kind), action, level="warning", error="tipo desconhecido")
        return k

    def _notify(self, kind: EntityKind) -> None:
        draft = self._drafts[kind]
        for cb in list(self._subscribers):
            cb(kind, draft)
