import asyncio

import pytest

from conftest import Avisos, FakeBackend
from painel_estoque.domain.models import EntityKind, Entrada, Produto
from painel_estoque.domain.store import FormStore
from painel_estoque.usecases.adaptadores import ENTRADAS, MOVIMENTACOES, PRODUTOS, adaptador_para
from painel_estoque.usecases.listagem import ListController, ListState


def _controller(backend, adapter=PRODUTOS, store=None, avisos=None, **kw):
    return ListController(adapter, backend.client(), store or FormStore(), notify=avisos or Avisos(), **kw)


class TestCarga:
    def test_entrada_resolve_produto_e_fornecedor(self):
        backend = FakeBackend(
            entradas=[{"id": 1, "produto_id": 10, "fornecedor_id": 5, "quantidade": 3}],
            produtos=[{"id": 10, "nome": "Queijo"}],
            fornecedores=[{"id": 5, "nome": "Lacticínios SA"}],
        )
        ctl = _controller(backend, ENTRADAS)
        assert asyncio.run(ctl.load()) is True

        (linha,) = ctl.rows()
        celulas = dict(zip(ctl.columns(), linha.celulas))
        assert celulas["Produto"] == "Queijo"
        assert celulas["Fornecedor"] == "Lacticínios SA"
        assert celulas["Quantidade"] == "3"
        assert ctl.state == ListState.LOADED

    def test_fornecedor_ausente_vira_desconhecido(self):
        backend = FakeBackend(
            entradas=[{"id": 1, "produto_id": 10, "fornecedor_id": 5, "quantidade": 3}],
            produtos=[{"id": 10, "nome": "Queijo"}],
            fornecedores=[],
        )
        ctl = _controller(backend, ENTRADAS)
        asyncio.run(ctl.load())

        celulas = dict(zip(ctl.columns(), ctl.rows()[0].celulas))
        assert celulas["Fornecedor"] == "Desconhecido"
        assert celulas["Produto"] == "Queijo"

    def test_formata_data_e_custo(self):
        backend = FakeBackend(
            entradas=[{"id": 1, "produto_id": 10, "fornecedor_id": 5, "quantidade": 3,
                       "data_entrada": "2024-03-15T12:00:00Z", "preco_compra": 1234.5}],
            produtos=[], fornecedores=[],
        )
        ctl = _controller(backend, ENTRADAS)
        asyncio.run(ctl.load())

        celulas = dict(zip(ctl.columns(), ctl.rows()[0].celulas))
        assert celulas["Data de Entrada"] == "15/03/2024"
        assert celulas["Custo"] == "R$ 1.234,50"

    def test_falha_na_colecao_auxiliar_avisa_e_mantem_lista(self, backend, avisos):
        backend.falhas[("GET", "/fornecedores")] = 500
        ctl = _controller(backend, PRODUTOS, avisos=avisos)
        assert asyncio.run(ctl.load()) is True

        assert len(ctl.items) == 3
        assert "Erro ao buscar dados de /fornecedores." in avisos.textos()
        assert all(l.celulas[2] == "Desconhecido" for l in ctl.rows())

    def test_falha_na_colecao_principal_mantem_dados_anteriores(self, backend, avisos):
        ctl = _controller(backend, PRODUTOS, avisos=avisos)
        asyncio.run(ctl.load())

        backend.falhas[("GET", "/produtos")] = 503
        assert asyncio.run(ctl.load()) is False
        assert [p["id"] for p in ctl.items] == [10, 11, 12]
        assert ctl.state == ListState.LOADED
        assert "Erro ao buscar dados de /produtos." in avisos.textos()

    def test_primeira_carga_com_falha_fica_idle(self, backend):
        backend.falhas[("GET", "/produtos")] = 500
        ctl = _controller(backend, PRODUTOS)
        assert asyncio.run(ctl.load()) is False
        assert ctl.items == []
        assert ctl.state == ListState.IDLE

    def test_carga_antiga_e_descartada(self, backend):
        ctl = _controller(backend, PRODUTOS)

        async def cenario():
            antiga = asyncio.ensure_future(ctl.load())
            await asyncio.sleep(0)
            backend.colecoes["produtos"] = [{"id": 50, "nome": "Novo"}]
            nova = await ctl.load()
            return await antiga, nova

        antiga, nova = asyncio.run(cenario())
        assert nova is True
        assert antiga is False
        assert [p["id"] for p in ctl.items] == [50]

    def test_refresh_avisa_sucesso(self, backend, avisos):
        ctl = _controller(backend, PRODUTOS, avisos=avisos)
        asyncio.run(ctl.refresh())
        assert avisos.textos() == ["Lista atualizada com sucesso!"]

    def test_refresh_com_falha_avisa_erro_de_atualizacao(self, backend, avisos):
        ctl = _controller(backend, PRODUTOS, avisos=avisos)
        asyncio.run(ctl.load())
        backend.falhas[("GET", "/produtos")] = 500

        assert asyncio.run(ctl.refresh()) is False
        assert avisos.textos() == ["Erro ao atualizar a lista."]
        assert len(ctl.items) == 3

    def test_recarga_remove_da_selecao_ids_que_sumiram(self, backend):
        ctl = _controller(backend, PRODUTOS)
        asyncio.run(ctl.load())
        ctl.toggle_select(10)
        ctl.toggle_select(11)

        backend.colecoes["produtos"] = [p for p in backend.colecoes["produtos"] if p["id"] != 11]
        asyncio.run(ctl.load())
        assert ctl.selected == [10]


class TestSelecao:
    def test_toggle_select(self, backend):
        ctl = _controller(backend)
        asyncio.run(ctl.load())

        ctl.toggle_select(10)
        assert ctl.selected == [10]
        ctl.toggle_select(10)
        assert ctl.selected == []

    def test_id_desconhecido_nao_entra_na_selecao(self, backend):
        ctl = _controller(backend)
        asyncio.run(ctl.load())
        ctl.toggle_select(999)
        assert ctl.selected == []

    def test_toggle_select_all(self, backend):
        ctl = _controller(backend)
        asyncio.run(ctl.load())

        ctl.toggle_select_all(True)
        assert set(ctl.selected) == {10, 11, 12}
        assert ctl.all_selected is True

        ctl.toggle_select_all(False)
        assert ctl.selected == []
        assert ctl.all_selected is False

    def test_all_selected_derivado(self, backend):
        ctl = _controller(backend)
        asyncio.run(ctl.load())
        for i in (10, 11, 12):
            ctl.toggle_select(i)
        assert ctl.all_selected is True
        ctl.toggle_select(11)
        assert ctl.all_selected is False

    def test_lista_vazia_nunca_esta_toda_selecionada(self):
        ctl = _controller(FakeBackend(produtos=[], fornecedores=[]))
        asyncio.run(ctl.load())
        assert ctl.all_selected is False

    def test_linhas_marcam_selecao(self, backend):
        ctl = _controller(backend)
        asyncio.run(ctl.load())
        ctl.toggle_select(11)
        assert [l.selecionada for l in ctl.rows()] == [False, True, False]


class TestExclusao:
    def test_excluir_dois_de_tres(self, backend, avisos):
        ctl = _controller(backend, avisos=avisos)
        asyncio.run(ctl.load())
        ctl.toggle_select(10)
        ctl.toggle_select(12)

        assert ctl.request_delete() is True
        assert ctl.state == ListState.CONFIRMING_DELETE
        outcome = asyncio.run(ctl.confirm_delete())

        assert sorted(p for _, p, _ in backend.chamadas("DELETE")) == ["/produtos/10", "/produtos/12"]
        assert outcome.ok
        assert sorted(outcome.excluidos) == [10, 12]
        assert ctl.ids() == [11]
        assert ctl.selected == []
        assert ctl.state == ListState.LOADED
        assert "Itens deletados com sucesso!" in avisos.textos()

    def test_excluir_sem_selecao_avisa(self, backend, avisos):
        ctl = _controller(backend, avisos=avisos)
        asyncio.run(ctl.load())
        assert ctl.request_delete() is False
        assert ctl.state == ListState.LOADED
        assert avisos.textos() == ["Selecione pelo menos um item para excluir."]

    def test_cancelar_exclusao(self, backend):
        ctl = _controller(backend)
        asyncio.run(ctl.load())
        ctl.toggle_select(10)
        ctl.request_delete()
        ctl.cancel_delete()
        assert ctl.state == ListState.LOADED
        assert ctl.selected == [10]
        assert backend.chamadas("DELETE") == []

    def test_falha_parcial_reporta_por_item(self, backend, avisos):
        backend.falhas[("DELETE", "/produtos/11")] = 500
        ctl = _controller(backend, avisos=avisos)
        asyncio.run(ctl.load())
        ctl.toggle_select_all(True)
        ctl.request_delete()
        outcome = asyncio.run(ctl.confirm_delete())

        assert outcome.parcial
        assert not outcome.ok
        assert set(outcome.falhas) == {11}
        assert ctl.ids() == [11]
        assert any("2 de 3 itens excluídos" in t for t in avisos.textos())

    def test_excluir_id_ja_removido_e_falha(self, backend, avisos):
        ctl = _controller(backend, avisos=avisos)
        asyncio.run(ctl.load())
        ctl.toggle_select(10)
        backend.colecoes["produtos"] = [p for p in backend.colecoes["produtos"] if p["id"] != 10]

        ctl.request_delete()
        outcome = asyncio.run(ctl.confirm_delete())
        assert outcome.falhas and 10 in outcome.falhas
        assert "Erro ao deletar itens." in avisos.textos()

    def test_exclusao_em_andamento_recusa_outras_acoes(self, backend, avisos):
        ctl = _controller(backend, PRODUTOS, avisos=avisos)
        excluir_real = ctl.api.excluir
        liberar = asyncio.Event()

        async def excluir_travado(recurso, item_id):
            await liberar.wait()
            await excluir_real(recurso, item_id)

        ctl.api.excluir = excluir_travado

        async def cenario():
            await ctl.load()
            ctl.toggle_select(10)
            assert ctl.request_delete() is True
            tarefa = asyncio.ensure_future(ctl.confirm_delete())
            await asyncio.sleep(0)
            gets = len(backend.chamadas("GET", "/produtos"))
            durante = (
                ctl.excluindo,
                ctl.request_delete(),
                ctl.request_edit(),
                await ctl.refresh(),
                (await ctl.confirm_delete()).solicitados,
                len(backend.chamadas("GET", "/produtos")) - gets,
            )
            liberar.set()
            return durante, await tarefa

        durante, outcome = asyncio.run(cenario())
        assert durante == (True, False, None, False, [], 0)
        assert outcome.excluidos == [10]
        assert ctl.excluindo is False
        assert avisos.textos().count("Aguarde a exclusão em andamento.") == 3
        assert len(backend.chamadas("DELETE")) == 1

    def test_concorrencia_limitada(self, backend):
        em_voo = 0
        maximo = 0
        ctl = _controller(backend, max_paralelo=2)
        excluir_real = ctl.api.excluir

        async def excluir_lento(recurso, item_id):
            nonlocal em_voo, maximo
            em_voo += 1
            maximo = max(maximo, em_voo)
            await asyncio.sleep(0.01)
            em_voo -= 1
            await excluir_real(recurso, item_id)

        ctl.api.excluir = excluir_lento
        asyncio.run(ctl.load())
        ctl.toggle_select_all(True)
        ctl.request_delete()
        outcome = asyncio.run(ctl.confirm_delete())
        assert outcome.ok
        assert maximo <= 2


class TestEdicao:
    def test_request_edit_carrega_rascunho(self, backend):
        store = FormStore()
        ctl = _controller(backend, store=store)
        asyncio.run(ctl.load())
        ctl.toggle_select(11)

        item = ctl.request_edit()
        assert item["nome"] == "Máscara"
        assert ctl.state == ListState.EDITING
        assert store.get_draft(EntityKind.PRODUTO) == Produto(
            id=11, nome="Máscara", categoria="EPI", fornecedor_id=2, marca="Prot"
        )

    @pytest.mark.parametrize("selecao", [[], [10, 11]])
    def test_request_edit_exige_exatamente_um(self, backend, avisos, selecao):
        store = FormStore()
        ctl = _controller(backend, store=store, avisos=avisos)
        asyncio.run(ctl.load())
        for i in selecao:
            ctl.toggle_select(i)

        assert ctl.request_edit() is None
        assert ctl.state == ListState.LOADED
        assert store.get_draft(EntityKind.PRODUTO) == Produto()
        assert len(avisos.mensagens) == 1

    def test_close_edit_avisa_lista_atualizada(self, backend, avisos):
        ctl = _controller(backend, PRODUTOS, avisos=avisos)
        asyncio.run(ctl.load())
        ctl.toggle_select(10)
        ctl.request_edit()

        assert asyncio.run(ctl.close_edit()) is True
        assert avisos.textos() == ["Lista atualizada com sucesso!"]

    def test_close_edit_sempre_recarrega(self, backend):
        ctl = _controller(backend, ENTRADAS)
        backend.colecoes["entradas"] = [{"id": 1, "produto_id": 10, "fornecedor_id": 1, "quantidade": 3}]
        asyncio.run(ctl.load())
        ctl.toggle_select(1)
        ctl.request_edit()
        assert ctl.store.get_draft(EntityKind.ENTRADA) == Entrada(id=1, produto_id=10, fornecedor_id=1, quantidade=3)

        antes = len(backend.chamadas("GET", "/entradas"))
        asyncio.run(ctl.close_edit())
        assert len(backend.chamadas("GET", "/entradas")) == antes + 1
        assert ctl.state == ListState.LOADED


class TestSomenteLeitura:
    def test_movimentacoes(self, avisos):
        backend = FakeBackend(movimentacoes=[{
            "nome": "Luva", "data_entrada": "2024-01-02", "data_retirada": None,
            "quantidade_total_entrada": 10, "quantidade_total_saida": 4, "quantidade_em_estoque": 6,
        }])
        ctl = _controller(backend, MOVIMENTACOES, avisos=avisos)
        asyncio.run(ctl.load())

        (linha,) = ctl.rows()
        assert linha.celulas == ("Luva", "02/01/2024", "", "10", "4", "6")

        ctl.toggle_select_all(True)
        assert ctl.selected == []
        assert ctl.request_delete() is False
        assert ctl.request_edit() is None
        assert avisos.textos() == ["Esta lista é somente leitura.", "Esta lista é somente leitura."]


def test_adaptador_para():
    assert adaptador_para("produtos") is PRODUTOS
    assert adaptador_para("entrada") is ENTRADAS
    assert adaptador_para("clientes") is None
