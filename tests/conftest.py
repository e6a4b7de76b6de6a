import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from painel_estoque.domain.store import FormStore
from painel_estoque.infra.api import ApiClient


class FakeBackend:
    """API em memória servida por ``httpx.MockTransport``.

    ``falhas[(METODO, "/caminho")] = status`` força uma resposta de erro.
    """

    def __init__(self, **colecoes: List[Dict[str, Any]]):
        self.colecoes: Dict[str, List[Dict[str, Any]]] = {
            nome: [dict(i) for i in itens] for nome, itens in colecoes.items()
        }
        self.falhas: Dict[Tuple[str, str], int] = {}
        self.requests: List[Tuple[str, str, Optional[Any]]] = []
        self.proximo_id = 100

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = "/" + request.url.path.strip("/")
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))

        status = self.falhas.get((request.method, path))
        if status:
            return httpx.Response(status, json={"error": "falha simulada"})

        partes = path.strip("/").split("/")
        itens = self.colecoes.setdefault(partes[0], [])

        if len(partes) == 1:
            if request.method == "GET":
                return httpx.Response(200, json=itens)
            if request.method == "POST":
                novo = dict(body or {})
                novo["id"] = self.proximo_id
                self.proximo_id += 1
                itens.append(novo)
                return httpx.Response(201, json=novo)
            return httpx.Response(405)

        item = next((i for i in itens if str(i.get("id")) == partes[1]), None)
        if item is None:
            return httpx.Response(404, json={"error": "não encontrado"})
        if request.method == "GET":
            return httpx.Response(200, json=item)
        if request.method == "PUT":
            item.update(body or {})
            return httpx.Response(200, json=item)
        if request.method == "DELETE":
            itens.remove(item)
            return httpx.Response(204)
        return httpx.Response(405)

    def client(self) -> ApiClient:
        return ApiClient("http://api.test", transport=httpx.MockTransport(self.handler))

    def chamadas(self, method: str, path: Optional[str] = None) -> List[Tuple[str, str, Optional[Any]]]:
        return [r for r in self.requests if r[0] == method and (path is None or r[1] == path)]


class Avisos:
    """Coleta as notificações emitidas pelos casos de uso."""

    def __init__(self):
        self.mensagens: List[Tuple[str, str]] = []

    def __call__(self, message: str, severity: str = "information", **_: Any) -> None:
        self.mensagens.append((severity, message))

    def textos(self) -> List[str]:
        return [m for _, m in self.mensagens]


FORNECEDORES = [
    {"id": 1, "nome": "Acme Ltda", "cnpj": "11.111.111/0001-11", "email": "acme@acme.com", "cidade": "Recife", "estado": "PE"},
    {"id": 2, "nome": "Beta Distribuidora", "cnpj": "22.222.222/0001-22", "email": "beta@beta.com", "cidade": "Natal", "estado": "RN"},
]

PRODUTOS = [
    {"id": 10, "nome": "Luva", "categoria": "EPI", "fornecedor_id": 1, "marca": "Safe"},
    {"id": 11, "nome": "Máscara", "categoria": "EPI", "fornecedor_id": 2, "marca": "Prot"},
    {"id": 12, "nome": "Álcool", "categoria": "Limpeza", "fornecedor_id": 99, "marca": "Clean"},
]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(fornecedores=FORNECEDORES, produtos=PRODUTOS, entradas=[], retiradas=[], movimentacoes=[])


@pytest.fixture
def avisos() -> Avisos:
    return Avisos()


@pytest.fixture
def store() -> FormStore:
    return FormStore()
