# painel_estoque/usecases/cadastro.py
"""
UC: Cadastrar fornecedor, produto, entrada ou retirada.

Fluxo: rascunho no Form Store -> validação dos obrigatórios -> POST.
Sucesso limpa os rascunhos; falha mantém o que foi digitado.

Na entrada, escolher o produto busca ``GET /produtos/:id`` e sempre
sobrescreve o fornecedor com o fornecedor cadastrado no produto.
"""

from __future__ import annotations

from typing import Any, Dict

from painel_estoque.domain.models import EntityKind, Recurso
from painel_estoque.domain.policies import MENSAGEM_OBRIGATORIOS, validar_cadastro
from painel_estoque.infra.api import ApiError
from painel_estoque.infra.logger import log_form_event
from painel_estoque.usecases.formulario import FormularioBase, preparar_payload

MENSAGENS_SUCESSO = {
    EntityKind.FORNECEDOR: "Fornecedor cadastrado com sucesso!",
    EntityKind.PRODUTO: "Produto cadastrado com sucesso!",
    EntityKind.ENTRADA: "Entrada cadastrada com sucesso!",
    EntityKind.RETIRADA: "Retirada cadastrada com sucesso!",
}

MENSAGENS_ERRO = {
    EntityKind.FORNECEDOR: "Erro ao adicionar fornecedor.",
    EntityKind.PRODUTO: "Erro ao adicionar produto.",
    EntityKind.ENTRADA: "Erro ao adicionar entrada.",
    EntityKind.RETIRADA: "Erro ao adicionar retirada.",
}


class CadastroForm(FormularioBase):
    """Tela de cadastro de um tipo de entidade."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.erros: Dict[str, str] = {}

    async def open(self) -> None:
        """Abrir a tela começa de um rascunho vazio."""
        self.store.reset_all()
        self.erros = {}
        await self.carregar_referencias()

    async def set_field(self, nome: str, valor: Any) -> None:
        if self.submitting:
            return
        self.store.set_field(self.kind, nome, valor)
        if valor not in (None, "") and nome in self.erros:
            del self.erros[nome]

        if self.kind == EntityKind.ENTRADA and nome == "produto_id" and valor not in (None, ""):
            await self._preencher_fornecedor(valor)

    async def _preencher_fornecedor(self, produto_id: Any) -> None:
        try:
            produto = await self.api.obter(Recurso.PRODUTOS, produto_id)
        except ApiError as e:
            log_form_event(self.kind.value, "autofill_fornecedor", level="error", produto_id=produto_id, error=str(e))
            self.notify("Erro ao carregar fornecedor do produto.", severity="error")
            return

        # Produto trocado de novo enquanto a busca estava em andamento.
        if str(self.draft.produto_id) != str(produto_id):
            return

        fornecedor_id = produto.get("fornecedor_id")
        self.store.set_field(self.kind, "fornecedor_id", "" if fornecedor_id is None else fornecedor_id)
        if fornecedor_id not in (None, ""):
            self.erros.pop("fornecedor_id", None)

    async def submit(self) -> bool:
        """Valida e envia o cadastro.

        Returns:
            True se a API aceitou o cadastro.
        """
        if self.submitting or self.recurso is None:
            return False

        self.erros = validar_cadastro(self.kind, self.draft)
        if self.erros:
            log_form_event(self.kind.value, "validation", level="warning", campos=list(self.erros))
            self.notify(MENSAGEM_OBRIGATORIOS, severity="warning")
            return False

        self.submitting = True
        try:
            await self.api.criar(self.recurso, preparar_payload(self.kind, self.draft))
        except ApiError as e:
            log_form_event(self.kind.value, "create", level="error", error=str(e))
            self.notify(MENSAGENS_ERRO[self.kind], severity="error")
            return False
        finally:
            self.submitting = False

        log_form_event(self.kind.value, "create")
        self.notify(MENSAGENS_SUCESSO[self.kind], severity="information")
        self.store.reset_all()
        return True

    def cancel(self) -> bool:
        if self.submitting:
            return False
        self.store.reset_all()
        self.erros = {}
        return True
