# painel_estoque/usecases/listagem.py
"""
UC: Listar, selecionar, excluir em lote e editar registros de uma coleção.

Um único controlador serve todas as listas; o que muda por entidade
(recurso, colunas, referências) vem do ``EntityAdapter``.

Estados: IDLE -> LOADING -> LOADED <-> {CONFIRMING_DELETE, EDITING} -> LOADED.

Decisões:
- falha ao buscar a coleção mantém os itens já exibidos (não zera a tabela);
- respostas de cargas antigas são descartadas (token de geração);
- exclusão em lote com concorrência limitada e resultado por item;
- fechar a edição sempre recarrega a lista (não há controle de "sujo");
- enquanto uma exclusão está em andamento, excluir, editar e atualizar
  são recusados.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from painel_estoque.config import DEFAULTS
from painel_estoque.domain.models import Recurso
from painel_estoque.domain.policies import indexar_por_id, reconciliar_selecao
from painel_estoque.domain.store import FormStore
from painel_estoque.infra.api import ApiClient, ApiError
from painel_estoque.infra.logger import log_list_event
from painel_estoque.usecases.adaptadores import EntityAdapter, Referencias
from painel_estoque.usecases.notificacao import Notificador, notificacao_em_log


class ListState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    CONFIRMING_DELETE = "confirming_delete"
    EDITING = "editing"


@dataclass
class DeleteOutcome:
    """Resultado de uma exclusão em lote, item a item."""
    solicitados: List[Any] = field(default_factory=list)
    excluidos: List[Any] = field(default_factory=list)
    falhas: Dict[Any, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return bool(self.solicitados) and not self.falhas

    @property
    def parcial(self) -> bool:
        return bool(self.excluidos) and bool(self.falhas)


@dataclass(frozen=True)
class Linha:
    """Linha renderizada da tabela."""
    id: Any
    celulas: Tuple[str, ...]
    selecionada: bool = False


class ListController:
    """Estado de uma tela de listagem."""

    def __init__(
        self,
        adapter: EntityAdapter,
        api: ApiClient,
        store: FormStore,
        notify: Optional[Notificador] = None,
        max_paralelo: int = DEFAULTS.max_exclusoes_paralelas,
    ) -> None:
        self.adapter = adapter
        self.api = api
        self.store = store
        self.notify: Notificador = notify or notificacao_em_log
        self.max_paralelo = max(1, int(max_paralelo))

        self.state = ListState.IDLE
        self.items: List[Dict[str, Any]] = []
        self.referencias: Referencias = {}
        self._selected: List[Any] = []
        self._geracao = 0
        self._carregado = False
        self.excluindo = False

    # -----------------------
    # leitura
    # -----------------------

    @property
    def recurso(self) -> Recurso:
        return self.adapter.recurso

    @property
    def selected(self) -> List[Any]:
        return list(self._selected)

    @property
    def all_selected(self) -> bool:
        """Derivado da seleção; nunca armazenado."""
        return bool(self.items) and len(self._selected) == len(self.items)

    def ids(self) -> List[Any]:
        return [self.adapter.item_id(i) for i in self.items]

    def columns(self) -> List[str]:
        return [c.titulo for c in self.adapter.colunas]

    def rows(self) -> List[Linha]:
        linhas: List[Linha] = []
        for pos, item in enumerate(self.items):
            item_id = self.adapter.item_id(item)
            celulas = tuple(c.render(item, self.referencias) for c in self.adapter.colunas)
            linhas.append(Linha(
                id=item_id if item_id is not None else pos,
                celulas=celulas,
                selecionada=item_id is not None and item_id in self._selected,
            ))
        return linhas

    def item(self, item_id: Any) -> Optional[Dict[str, Any]]:
        for i in self.items:
            if self.adapter.item_id(i) == item_id:
                return i
        return None

    # -----------------------
    # carga
    # -----------------------

    async def load(self, mensagem_erro: Optional[str] = None) -> bool:
        """Busca a coleção inteira e as coleções auxiliares.

        Args:
            mensagem_erro: aviso exibido se a coleção principal falhar
                (padrão: "Erro ao buscar dados de <caminho>.").

        Returns:
            True se a coleção foi substituída por dados novos.
        """
        self._geracao += 1
        geracao = self._geracao
        self.state = ListState.LOADING
        log_list_event(self.recurso.value, "load_start", geracao=geracao)

        principal, *auxiliares = await asyncio.gather(
            self._buscar(self.recurso),
            *[self._buscar(r) for r in self.adapter.referencias],
        )

        if geracao != self._geracao:
            log_list_event(self.recurso.value, "load_discarded", geracao=geracao)
            return False

        for recurso, resultado in zip(self.adapter.referencias, auxiliares):
            if isinstance(resultado, ApiError):
                self.notify(f"Erro ao buscar dados de {recurso.path}.", severity="error")
                self.referencias.setdefault(recurso, {})
            else:
                self.referencias[recurso] = indexar_por_id(resultado)

        if isinstance(principal, ApiError):
            self.notify(mensagem_erro or f"Erro ao buscar dados de {self.recurso.path}.", severity="error")
            self.state = ListState.LOADED if self._carregado else ListState.IDLE
            log_list_event(self.recurso.value, "load_failed", level="error", error=str(principal))
            return False

        self.items = [i for i in principal if isinstance(i, dict)]
        self._selected = reconciliar_selecao(self._selected, self.ids())
        self._carregado = True
        self.state = ListState.LOADED
        log_list_event(self.recurso.value, "load_ok", total=len(self.items))
        return True

    async def refresh(self) -> bool:
        """Recarga pedida pelo usuário (botão/atalho de atualizar) ou após a edição."""
        if self._recusar_durante_exclusao():
            return False
        ok = await self.load(mensagem_erro="Erro ao atualizar a lista.")
        if ok:
            self.notify("Lista atualizada com sucesso!", severity="information")
        return ok

    async def _buscar(self, recurso: Recurso):
        try:
            return await self.api.listar(recurso)
        except ApiError as e:
            return e

    # -----------------------
    # seleção
    # -----------------------

    def toggle_select(self, item_id: Any) -> None:
        if self.adapter.somente_leitura:
            return
        if item_id in self._selected:
            self._selected.remove(item_id)
        elif item_id in self.ids():
            self._selected.append(item_id)

    def toggle_select_all(self, checked: bool) -> None:
        if self.adapter.somente_leitura:
            return
        self._selected = [i for i in self.ids() if i is not None] if checked else []

    # -----------------------
    # exclusão
    # -----------------------

    def _recusar_durante_exclusao(self) -> bool:
        if self.excluindo:
            self.notify("Aguarde a exclusão em andamento.", severity="warning")
        return self.excluindo

    def request_delete(self) -> bool:
        """Abre a confirmação de exclusão; recusa se nada estiver selecionado."""
        if self.adapter.somente_leitura:
            self.notify("Esta lista é somente leitura.", severity="warning")
            return False
        if self._recusar_durante_exclusao():
            return False
        if not self._selected:
            self.notify("Selecione pelo menos um item para excluir.", severity="warning")
            return False
        self.state = ListState.CONFIRMING_DELETE
        return True

    def cancel_delete(self) -> None:
        if self.state == ListState.CONFIRMING_DELETE:
            self.state = ListState.LOADED

    async def confirm_delete(self) -> DeleteOutcome:
        """Exclui todos os selecionados e recarrega a lista.

        Um DELETE por id, no máximo ``max_paralelo`` ao mesmo tempo e sem
        ordem garantida. Cada id tem seu próprio resultado. ``excluindo``
        fica True até a recarga terminar.
        """
        if self.excluindo:
            return DeleteOutcome()
        outcome = DeleteOutcome(solicitados=list(self._selected))
        if self.adapter.somente_leitura or not outcome.solicitados:
            self.cancel_delete()
            return outcome

        self.excluindo = True
        try:
            await self._excluir_selecionados(outcome)
            await self.load()
        finally:
            self.excluindo = False
        return outcome

    async def _excluir_selecionados(self, outcome: DeleteOutcome) -> None:
        semaforo = asyncio.Semaphore(self.max_paralelo)

        async def _excluir(item_id: Any) -> Tuple[Any, Optional[str]]:
            async with semaforo:
                try:
                    await self.api.excluir(self.recurso, item_id)
                    return item_id, None
                except ApiError as e:
                    return item_id, str(e)

        resultados = await asyncio.gather(*[_excluir(i) for i in outcome.solicitados])
        for item_id, erro in resultados:
            if erro is None:
                outcome.excluidos.append(item_id)
            else:
                outcome.falhas[item_id] = erro

        log_list_event(
            self.recurso.value, "delete",
            level="warning" if outcome.falhas else "info",
            excluidos=outcome.excluidos, falhas=outcome.falhas,
        )

        if outcome.ok:
            self.notify("Itens deletados com sucesso!", severity="information")
        elif outcome.parcial:
            self.notify(
                f"{len(outcome.excluidos)} de {len(outcome.solicitados)} itens excluídos; "
                f"falharam: {', '.join(str(i) for i in outcome.falhas)}.",
                severity="warning",
            )
        else:
            self.notify("Erro ao deletar itens.", severity="error")

        excluidos = set(outcome.excluidos)
        self.items = [i for i in self.items if self.adapter.item_id(i) not in excluidos]
        self._selected = []
        self.state = ListState.LOADED

    # -----------------------
    # edição
    # -----------------------

    def request_edit(self) -> Optional[Dict[str, Any]]:
        """Carrega o único item selecionado no Form Store e entra em edição."""
        if self.adapter.somente_leitura:
            self.notify("Esta lista é somente leitura.", severity="warning")
            return None
        if self._recusar_durante_exclusao():
            return None
        if not self._selected:
            self.notify("Selecione um item para editar.", severity="warning")
            return None
        if len(self._selected) > 1:
            self.notify("Selecione apenas um item para editar.", severity="warning")
            return None
        item = self.item(self._selected[0])
        if item is None:
            return None
        self.store.set_draft(self.adapter.kind, item)
        self.state = ListState.EDITING
        log_list_event(self.recurso.value, "edit_open", id=self._selected[0])
        return item

    async def close_edit(self) -> bool:
        """Fecha a edição e recarrega sempre (não se sabe se algo mudou)."""
        self.state = ListState.LOADED
        return await self.refresh()
