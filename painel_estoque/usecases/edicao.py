# painel_estoque/usecases/edicao.py
"""
UC: Editar um registro (modal de edição).

O rascunho já foi carregado no Form Store pela lista. A sessão busca as
coleções dos selects, envia o PUT e avisa o resultado. Quem abriu o
modal fecha quando ``submit`` devolve True e então recarrega a lista.
"""

from __future__ import annotations

from typing import Any

from painel_estoque.domain.policies import MENSAGEM_OBRIGATORIOS, validar_edicao
from painel_estoque.infra.api import ApiError
from painel_estoque.infra.logger import log_form_event
from painel_estoque.usecases.formulario import FormularioBase, preparar_payload


class EditSession(FormularioBase):
    """Modal de edição ligado ao rascunho de um tipo de entidade."""

    async def open(self) -> None:
        await self.carregar_referencias()

    def set_field(self, nome: str, valor: Any) -> None:
        if self.submitting:
            return
        self.store.set_field(self.kind, nome, valor)

    async def submit(self) -> bool:
        """Envia a atualização.

        Returns:
            True quando o modal deve fechar (atualização aceita).
        """
        if self.submitting or self.recurso is None:
            return False

        erros = validar_edicao(self.kind, self.draft)
        if erros:
            self.notify(MENSAGEM_OBRIGATORIOS, severity="error")
            return False

        draft = self.draft
        self.submitting = True
        try:
            await self.api.atualizar(self.recurso, draft.id, preparar_payload(self.kind, draft, include_id=True))
        except ApiError as e:
            log_form_event(self.kind.value, "update", level="error", id=draft.id, error=str(e))
            self.notify("Erro ao atualizar item.", severity="error")
            return False
        finally:
            self.submitting = False

        log_form_event(self.kind.value, "update", id=draft.id)
        self.notify("Item atualizado com sucesso!", severity="information")
        self.store.reset_all()
        return True

    def cancel(self) -> bool:
        """Descarta o rascunho; recusado enquanto um envio está em andamento."""
        if self.submitting:
            return False
        self.store.reset_all()
        return True
