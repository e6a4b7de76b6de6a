# painel_estoque/usecases/formulario.py
"""
Base comum dos formulários (cadastro e modal de edição).

Liga um tipo de entidade ao seu rascunho no Form Store, busca as
coleções que alimentam os selects e monta o corpo enviado à API.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from painel_estoque.domain.parsers import parse_decimal, parse_id, parse_inteiro_positivo
from painel_estoque.domain.campos import CAMPOS, CampoForm, referencias_do_formulario
from painel_estoque.domain.models import RECURSO_POR_TIPO, EntityKind, Recurso, draft_to_payload
from painel_estoque.domain.store import FormStore
from painel_estoque.infra.api import ApiClient, ApiError
from painel_estoque.usecases.notificacao import Notificador, notificacao_em_log

Opcao = Tuple[str, Any]  # (rótulo, valor)

_CAMPOS_ID = ("produto_id", "fornecedor_id")


def preparar_payload(kind: EntityKind, draft: Any, include_id: bool = False) -> Dict[str, Any]:
    """Converte o rascunho em JSON para a API.

    Ids de referência viram int quando numéricos; quantidade e preço viram
    número quando interpretáveis. Valores não interpretáveis seguem como
    foram digitados.
    """
    payload = draft_to_payload(draft, include_id=include_id)
    for campo in _CAMPOS_ID:
        if campo in payload:
            payload[campo] = parse_id(payload[campo])
    if "quantidade" in payload:
        qtd = parse_inteiro_positivo(payload["quantidade"])
        if qtd is not None:
            payload["quantidade"] = qtd
    if "preco_compra" in payload:
        preco = parse_decimal(payload["preco_compra"])
        if preco is not None:
            payload["preco_compra"] = preco
    return payload


class FormularioBase:
    """Estado compartilhado pelos formulários de um tipo de entidade."""

    def __init__(
        self,
        kind: EntityKind,
        api: ApiClient,
        store: FormStore,
        notify: Optional[Notificador] = None,
    ) -> None:
        self.kind = kind
        self.recurso: Optional[Recurso] = RECURSO_POR_TIPO.get(kind)
        self.api = api
        self.store = store
        self.notify: Notificador = notify or notificacao_em_log
        self.submitting = False
        self.colecoes: Dict[Recurso, List[Dict[str, Any]]] = {}

    @property
    def campos(self) -> List[CampoForm]:
        return CAMPOS.get(self.kind, [])

    @property
    def draft(self) -> Any:
        return self.store.get_draft(self.kind)

    async def carregar_referencias(self) -> None:
        """Busca as coleções dos selects; falhas deixam o select vazio e são avisadas."""
        recursos = referencias_do_formulario(self.kind)

        async def _buscar(recurso: Recurso):
            try:
                return recurso, await self.api.listar(recurso)
            except ApiError:
                self.notify(f"Erro ao buscar {recurso.value}.", severity="error")
                return recurso, []

        for recurso, itens in await asyncio.gather(*[_buscar(r) for r in recursos]):
            self.colecoes[recurso] = itens

    def opcoes(self, campo: CampoForm) -> List[Opcao]:
        """Opções de um select (fixas ou vindas de uma coleção da API)."""
        if campo.opcoes:
            return [(o, o) for o in campo.opcoes]
        if campo.referencia is None:
            return []
        return [
            (str(item.get("nome") or item.get("id")), item.get("id"))
            for item in self.colecoes.get(campo.referencia, [])
            if item.get("id") is not None
        ]
