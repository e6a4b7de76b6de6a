import asyncio

from painel_estoque.domain.campos import CAMPOS
from painel_estoque.domain.models import EntityKind, Fornecedor
from painel_estoque.domain.store import FormStore
from painel_estoque.usecases.cadastro import CadastroForm
from painel_estoque.usecases.formulario import preparar_payload

FORNECEDOR_VALIDO = {
    "nome": "Gama", "cnpj": "33.333.333/0001-33", "celular": "(81)98888-0000",
    "email": "gama@gama.com", "cep": "50000-000", "endereco": "Rua B",
    "bairro": "Boa Vista", "cidade": "Recife", "estado": "PE",
}


def _form(backend, kind, avisos, store=None):
    return CadastroForm(kind, backend.client(), store or FormStore(), notify=avisos)


def _preencher(form, valores):
    async def cenario():
        for nome, valor in valores.items():
            await form.set_field(nome, valor)
    asyncio.run(cenario())


class TestCadastroFornecedor:
    def test_sem_email_bloqueia_envio(self, backend, avisos):
        form = _form(backend, EntityKind.FORNECEDOR, avisos)
        valores = dict(FORNECEDOR_VALIDO, email="")
        _preencher(form, valores)

        assert asyncio.run(form.submit()) is False
        assert form.erros == {"email": "O campo E-mail é obrigatório."}
        assert avisos.mensagens == [("warning", "Preencha todos os campos obrigatórios.")]
        assert backend.chamadas("POST") == []
        assert form.draft.nome == "Gama"

    def test_preencher_campo_limpa_erro(self, backend, avisos):
        form = _form(backend, EntityKind.FORNECEDOR, avisos)
        _preencher(form, dict(FORNECEDOR_VALIDO, email=""))
        asyncio.run(form.submit())

        _preencher(form, {"email": "gama@gama.com"})
        assert form.erros == {}

    def test_envio_com_sucesso_limpa_rascunhos(self, backend, avisos):
        store = FormStore()
        store.set_field(EntityKind.PRODUTO, "nome", "rascunho de outra tela")
        form = _form(backend, EntityKind.FORNECEDOR, avisos, store)
        _preencher(form, FORNECEDOR_VALIDO)

        assert asyncio.run(form.submit()) is True
        ((_, path, body),) = backend.chamadas("POST")
        assert path == "/fornecedores"
        assert body["email"] == "gama@gama.com"
        assert "id" not in body
        assert form.draft == Fornecedor()
        assert store.get_draft(EntityKind.PRODUTO).nome == ""
        assert ("information", "Fornecedor cadastrado com sucesso!") in avisos.mensagens

    def test_falha_na_api_mantem_valores(self, backend, avisos):
        backend.falhas[("POST", "/fornecedores")] = 500
        form = _form(backend, EntityKind.FORNECEDOR, avisos)
        _preencher(form, FORNECEDOR_VALIDO)

        assert asyncio.run(form.submit()) is False
        assert form.draft.nome == "Gama"
        assert ("error", "Erro ao adicionar fornecedor.") in avisos.mensagens
        assert form.submitting is False

    def test_cancelar_limpa(self, backend, avisos):
        form = _form(backend, EntityKind.FORNECEDOR, avisos)
        _preencher(form, {"nome": "Gama"})
        assert form.cancel() is True
        assert form.draft == Fornecedor()

    def test_envio_em_andamento_bloqueia(self, backend, avisos):
        form = _form(backend, EntityKind.FORNECEDOR, avisos)
        form.submitting = True
        assert asyncio.run(form.submit()) is False
        assert form.cancel() is False
        assert backend.chamadas("POST") == []


class TestCadastroEntrada:
    def test_produto_sobrescreve_fornecedor(self, backend, avisos):
        form = _form(backend, EntityKind.ENTRADA, avisos)
        _preencher(form, {"fornecedor_id": 2})
        _preencher(form, {"produto_id": 10})

        assert form.draft.fornecedor_id == 1
        assert ("GET", "/produtos/10", None) in backend.requests

    def test_trocar_produto_troca_fornecedor(self, backend, avisos):
        form = _form(backend, EntityKind.ENTRADA, avisos)
        _preencher(form, {"produto_id": 10})
        _preencher(form, {"produto_id": 11})
        assert form.draft.fornecedor_id == 2

    def test_falha_na_busca_do_produto_avisa(self, backend, avisos):
        backend.falhas[("GET", "/produtos/10")] = 500
        form = _form(backend, EntityKind.ENTRADA, avisos)
        _preencher(form, {"fornecedor_id": 2, "produto_id": 10})

        assert form.draft.fornecedor_id == 2
        assert ("error", "Erro ao carregar fornecedor do produto.") in avisos.mensagens

    def test_payload_converte_numeros(self, backend, avisos):
        form = _form(backend, EntityKind.ENTRADA, avisos)
        _preencher(form, {
            "produto_id": "10", "quantidade": "5", "data_entrada": "2024-03-15",
            "numero_lote": "L-01", "preco_compra": "12,50",
        })
        assert asyncio.run(form.submit()) is True

        ((_, path, body),) = backend.chamadas("POST")
        assert path == "/entradas"
        assert body == {
            "produto_id": 10, "quantidade": 5, "fornecedor_id": 1,
            "data_entrada": "2024-03-15", "numero_lote": "L-01", "preco_compra": 12.5,
        }
        assert ("information", "Entrada cadastrada com sucesso!") in avisos.mensagens

    def test_quantidade_invalida(self, backend, avisos):
        form = _form(backend, EntityKind.ENTRADA, avisos)
        _preencher(form, {
            "produto_id": 10, "quantidade": "2,5", "data_entrada": "2024-03-15",
            "numero_lote": "L-01", "preco_compra": "10",
        })
        assert asyncio.run(form.submit()) is False
        assert list(form.erros) == ["quantidade"]


class TestReferencias:
    def test_open_carrega_opcoes_dos_selects(self, backend, avisos):
        form = _form(backend, EntityKind.ENTRADA, avisos)
        asyncio.run(form.open())

        campos = {c.nome: c for c in CAMPOS[EntityKind.ENTRADA]}
        assert form.opcoes(campos["produto_id"]) == [("Luva", 10), ("Máscara", 11), ("Álcool", 12)]
        assert form.opcoes(campos["fornecedor_id"]) == [("Acme Ltda", 1), ("Beta Distribuidora", 2)]
        assert form.opcoes(campos["quantidade"]) == []

    def test_falha_na_busca_deixa_select_vazio(self, backend, avisos):
        backend.falhas[("GET", "/fornecedores")] = 500
        form = _form(backend, EntityKind.PRODUTO, avisos)
        asyncio.run(form.open())

        (campo,) = [c for c in CAMPOS[EntityKind.PRODUTO] if c.nome == "fornecedor_id"]
        assert form.opcoes(campo) == []
        assert ("error", "Erro ao buscar fornecedores.") in avisos.mensagens

    def test_opcoes_fixas(self, backend, avisos):
        form = _form(backend, EntityKind.FORNECEDOR, avisos)
        (campo,) = [c for c in CAMPOS[EntityKind.FORNECEDOR] if c.nome == "tipo_conta"]
        assert ("Conta Corrente PJ", "Conta Corrente PJ") in form.opcoes(campo)


def test_preparar_payload_mantem_valor_nao_interpretavel():
    store = FormStore()
    store.set_draft(EntityKind.ENTRADA, {"id": 4, "produto_id": "abc", "quantidade": "muitos", "preco_compra": ""})
    payload = preparar_payload(EntityKind.ENTRADA, store.get_draft(EntityKind.ENTRADA), include_id=True)
    assert payload["id"] == 4
    assert payload["produto_id"] == "abc"
    assert payload["quantidade"] == "muitos"
    assert payload["preco_compra"] == ""
    assert payload["fornecedor_id"] is None
